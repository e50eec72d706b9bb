#!/usr/bin/env python3
#-*- encoding: Utf-8 -*-
from typing import Any
from bz2 import BZ2Compressor, BZ2Decompressor

from bootimg_compress.drivers.base import CodecDriver, drain_decompressor, iter_chunks
from bootimg_compress.sink import ChunkWriter
from bootimg_compress.formats import Mode

BZIP2_CHUNK_SIZE = 0x40000
BZIP2_COMPRESSION_LEVEL = 9


class Bzip2Driver(CodecDriver):
    
    name = 'bzip2'
    
    # bz2 reports corrupt data as OSError ("Invalid data stream")
    backend_errors = (OSError, EOFError, ValueError)
    
    def __init__(self, chunk_size : int = BZIP2_CHUNK_SIZE, level : int = BZIP2_COMPRESSION_LEVEL):
        
        self.chunk_size = chunk_size
        self.output_chunk_size = chunk_size
        self.level = level
    
    def _open(self, mode : Mode) -> Any:
        
        if mode is Mode.decode:
            return BZ2Decompressor()
        
        return BZ2Compressor(self.level)
    
    def _encode(self, stream : Any, mode : Mode, view : memoryview, writer : ChunkWriter):
        
        for chunk, is_last in iter_chunks(view, self.chunk_size):
            writer.write(stream.compress(chunk))
            
            if is_last:
                writer.write(stream.flush())
    
    def _decode(self, stream : Any, view : memoryview, writer : ChunkWriter):
        
        drain_decompressor(self.name, stream, view, self.chunk_size, writer)
