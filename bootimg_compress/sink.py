#!/usr/bin/env python3
#-*- encoding: Utf-8 -*-
from typing import Optional, Protocol, Union

from bootimg_compress.errors import SinkWriteError

"""
    Output side of the engine.
    
    A sink is anything with a write() method in the manner of binary
    file objects: it takes a bytes-like object and returns the number
    of bytes it accepted, which may be less than what was given.
"""

Buffer = Union[bytes, bytearray, memoryview]


class Sink(Protocol):
    
    def write(self, data : Buffer) -> Optional[int]:
        ...


def write_fully(sink : Sink, data : Buffer) -> int:
    
    view = memoryview(data).cast('B')
    written = 0
    
    while written < len(view):
        try:
            accepted = sink.write(view[written:])
        except (OSError, ValueError) as error: # ValueError: closed file
            raise SinkWriteError('Output write failed after %d bytes: %s' % (written, error)) from error
        
        if not accepted: # None (would block) or 0: the sink makes no progress
            raise SinkWriteError('Output accepted only %d of %d bytes' % (written, len(view)))
        
        written += accepted
    
    return written


"""
    Per-call writer used by the drivers: splits every produced segment
    in writes of at most chunk_size bytes and counts what the sink
    accepted.
"""

class ChunkWriter:
    
    def __init__(self, sink : Sink, chunk_size : int):
        
        if chunk_size <= 0:
            raise ValueError('chunk_size must be positive, got %d' % chunk_size)
        
        self.sink = sink
        self.chunk_size = chunk_size
        self.total = 0
        self.writes = 0
    
    def write(self, data : Buffer) -> int:
        
        view = memoryview(data).cast('B')
        
        for offset in range(0, len(view), self.chunk_size):
            self.total += write_fully(self.sink, view[offset:offset + self.chunk_size])
            self.writes += 1
        
        return len(view)

