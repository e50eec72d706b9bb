#!/usr/bin/env python3
#-*- encoding: Utf-8 -*-
from typing import Any, Iterator, Tuple
from contextlib import contextmanager
from abc import ABC, abstractmethod
import logging

from bootimg_compress.errors import BackendInitError, CodecError, SinkWriteError
from bootimg_compress.sink import Buffer, ChunkWriter, Sink
from bootimg_compress.formats import Mode

"""
    Common shape of the codec drivers.

    A driver turns one in-memory buffer into a stream of output chunks
    written to a sink, and returns the number of bytes the sink
    accepted. Each call owns its backend object (a zlib/lzma/bz2
    (de)compressor or an LZ4 context): it is created by _open() when
    the call starts and handed to _close() exactly once when the call
    ends, whether it ended normally or not.
"""


def iter_chunks(view : memoryview, chunk_size : int) -> Iterator[Tuple[memoryview, bool]]:

    size = len(view)
    pos = 0

    while True:
        if pos + chunk_size >= size:
            yield view[pos:size], True
            return

        yield view[pos:pos + chunk_size], False
        pos += chunk_size


def _error_code(error : Exception):

    # Only errno-style numbers; zlib, lzma and lz4 report messages
    if error.args and isinstance(error.args[0], int):
        return error.args[0]

    return None


class CodecDriver(ABC):

    name : str = None

    # Largest single write handed to the sink
    output_chunk_size : int = 0x40000

    # Exceptions raised by the backend library, reported as CodecError
    backend_errors : Tuple[type, ...] = ()

    def encode(self, data : Buffer, sink : Sink) -> int:
        return self.run(Mode.encode, data, sink)

    def decode(self, data : Buffer, sink : Sink) -> int:
        return self.run(Mode.decode, data, sink)

    def run(self, mode : Mode, data : Buffer, sink : Sink) -> int:

        mode = Mode(mode)

        if mode not in self.supported_modes():
            raise ValueError('%s driver has no %s operation' % (self.name, mode.name))

        view = memoryview(data).cast('B')
        writer = ChunkWriter(sink, self.output_chunk_size)

        logging.debug('[+] %s %s: %d input bytes' % (self.name, mode.name, len(view)))

        with self.backend(mode) as backend:
            try:
                if mode is Mode.decode:
                    self._decode(backend, view, writer)
                else:
                    self._encode(backend, mode, view, writer)

            except SinkWriteError:
                raise

            except self.backend_errors as error:
                raise CodecError('%s %s error: %s' % (self.name, mode.name, error),
                    _error_code(error)) from error

        logging.debug('[+] %s %s: %d bytes written in %d writes' % (
            self.name, mode.name, writer.total, writer.writes))

        return writer.total

    def supported_modes(self) -> Tuple[Mode, ...]:
        return (Mode.decode, Mode.encode)

    @contextmanager
    def backend(self, mode : Mode) -> Iterator[Any]:

        try:
            backend = self._open(mode)
        except BackendInitError:
            raise
        except Exception as error:
            raise BackendInitError('Unable to init %s stream: %s' % (self.name, error)) from error

        try:
            yield backend
        finally:
            self._close(backend)

    @abstractmethod
    def _open(self, mode : Mode) -> Any:
        raise NotImplementedError

    def _close(self, backend : Any):
        pass

    @abstractmethod
    def _decode(self, backend : Any, view : memoryview, writer : ChunkWriter):
        raise NotImplementedError

    @abstractmethod
    def _encode(self, backend : Any, mode : Mode, view : memoryview, writer : ChunkWriter):
        raise NotImplementedError


"""
    Decoding loop shared by the lzma and bz2 decompressors, which both
    expose decompress(data, max_length), needs_input, eof and
    unused_data. Input is fed chunk by chunk; each chunk is drained
    into outputs of at most chunk_size bytes until the decompressor
    asks for more input or reaches the end of its stream.
"""

def drain_decompressor(name : str, stream : Any, view : memoryview,
    chunk_size : int, writer : ChunkWriter):

    consumed = 0

    for chunk, is_last in iter_chunks(view, chunk_size):
        consumed += len(chunk)

        writer.write(stream.decompress(chunk, chunk_size))

        while not stream.eof and not stream.needs_input:
            writer.write(stream.decompress(b'', chunk_size))

        if stream.eof:
            trailing = len(stream.unused_data) + len(view) - consumed
            if trailing:
                logging.debug('[i] %s: ignoring %d bytes after the end of stream' % (name, trailing))
            return

    raise CodecError('%s stream ended before its end marker (truncated input?)' % name)
