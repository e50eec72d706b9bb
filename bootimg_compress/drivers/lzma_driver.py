#!/usr/bin/env python3
#-*- encoding: Utf-8 -*-
from typing import Any, Tuple
from io import DEFAULT_BUFFER_SIZE
import lzma

from bootimg_compress.drivers.base import CodecDriver, drain_decompressor, iter_chunks
from bootimg_compress.sink import Buffer, ChunkWriter, Sink
from bootimg_compress.formats import Mode

"""
    The LZMA family: one decoder recognizing both the XZ container and
    the legacy "alone" (.lzma) container, and one encoder per container.
    
    - Mode.decode        auto-detected container, no memory limit
    - Mode.encode        XZ, single LZMA2 filter, preset 9, CRC32 check
    - Mode.encode_alone  .lzma header, LZMA1 filter, preset 9
"""

LZMA_CHUNK_SIZE = DEFAULT_BUFFER_SIZE
LZMA_PRESET = 9


class LzmaDriver(CodecDriver):
    
    name = 'lzma'
    backend_errors = (lzma.LZMAError, EOFError)
    
    def __init__(self, chunk_size : int = LZMA_CHUNK_SIZE, preset : int = LZMA_PRESET):
        
        self.chunk_size = chunk_size
        self.output_chunk_size = chunk_size
        self.preset = preset
    
    def supported_modes(self) -> Tuple[Mode, ...]:
        return (Mode.decode, Mode.encode, Mode.encode_alone)
    
    def encode_alone(self, data : Buffer, sink : Sink) -> int:
        return self.run(Mode.encode_alone, data, sink)
    
    def _open(self, mode : Mode) -> Any:
        
        if mode is Mode.decode:
            return lzma.LZMADecompressor(format=lzma.FORMAT_AUTO, memlimit=None)
        
        elif mode is Mode.encode:
            return lzma.LZMACompressor(format=lzma.FORMAT_XZ, check=lzma.CHECK_CRC32,
                filters=[{'id': lzma.FILTER_LZMA2, 'preset': self.preset}])
        
        return lzma.LZMACompressor(format=lzma.FORMAT_ALONE,
            filters=[{'id': lzma.FILTER_LZMA1, 'preset': self.preset}])
    
    def _encode(self, stream : Any, mode : Mode, view : memoryview, writer : ChunkWriter):
        
        for chunk, is_last in iter_chunks(view, self.chunk_size):
            writer.write(stream.compress(chunk))
            
            if is_last:
                writer.write(stream.flush())
    
    def _decode(self, stream : Any, view : memoryview, writer : ChunkWriter):
        
        drain_decompressor(self.name, stream, view, self.chunk_size, writer)
