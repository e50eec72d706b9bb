#!/usr/bin/env python3
#-*- encoding: Utf-8 -*-
from typing import Any
import logging
import zlib

from bootimg_compress.drivers.base import CodecDriver, iter_chunks
from bootimg_compress.errors import CodecError
from bootimg_compress.sink import ChunkWriter
from bootimg_compress.formats import Mode

"""
    DEFLATE streams with gzip framing (zlib with windowBits | 16).
"""

GZIP_CHUNK_SIZE = 0x40000 # 256 KiB, for both input slices and output writes
GZIP_WINDOW_BITS = 15
GZIP_WRAPPER = 16
GZIP_MEM_LEVEL = 8
GZIP_COMPRESSION_LEVEL = 9


class GzipDriver(CodecDriver):
    
    name = 'gzip'
    backend_errors = (zlib.error,)
    
    def __init__(self, chunk_size : int = GZIP_CHUNK_SIZE, level : int = GZIP_COMPRESSION_LEVEL):
        
        self.chunk_size = chunk_size
        self.output_chunk_size = chunk_size
        self.level = level
    
    def _open(self, mode : Mode) -> Any:
        
        if mode is Mode.decode:
            return zlib.decompressobj(GZIP_WINDOW_BITS | GZIP_WRAPPER)
        
        return zlib.compressobj(self.level, zlib.DEFLATED, GZIP_WINDOW_BITS | GZIP_WRAPPER,
            GZIP_MEM_LEVEL, zlib.Z_DEFAULT_STRATEGY)
    
    def _encode(self, stream : Any, mode : Mode, view : memoryview, writer : ChunkWriter):
        
        for chunk, is_last in iter_chunks(view, self.chunk_size):
            writer.write(stream.compress(chunk))
            
            if is_last:
                writer.write(stream.flush(zlib.Z_FINISH))
    
    def _decode(self, stream : Any, view : memoryview, writer : ChunkWriter):
        
        consumed = 0
        
        for chunk, is_last in iter_chunks(view, self.chunk_size):
            consumed += len(chunk)
            pending = chunk
            
            # A full output buffer means zlib may still hold output for this chunk
            while True:
                output = stream.decompress(pending, self.chunk_size)
                writer.write(output)
                pending = stream.unconsumed_tail
                
                if stream.eof or (not pending and len(output) < self.chunk_size):
                    break
            
            if stream.eof:
                trailing = len(stream.unused_data) + len(view) - consumed
                if trailing:
                    logging.debug('[i] gzip: ignoring %d bytes after the end of the gzip member' % trailing)
                return
        
        raise CodecError('gzip stream ended before its end marker (truncated input?)')
