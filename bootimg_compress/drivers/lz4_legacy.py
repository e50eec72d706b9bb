#!/usr/bin/env python3
#-*- encoding: Utf-8 -*-
from struct import Struct
from typing import Any
import logging

import lz4.block

from bootimg_compress.drivers.base import CodecDriver
from bootimg_compress.errors import CodecError, TruncatedOrMalformed
from bootimg_compress.sink import ChunkWriter
from bootimg_compress.formats import Mode

"""
    The legacy LZ4 format [1] (magic 0x184C2102), used by various old
    or less old Linux kernels and boot images. No library frames it, so
    it is written here on top of lz4.block:
    
        02 21 4C 18                         magic
        [u32 LE compressed size][block]     repeated, each block holding
                                            8 MiB once uncompressed
                                            (the last one may be shorter)
        [u32 LE total uncompressed size]    footer
    
    Nothing tells the footer apart from a block size: a reader knows
    it has reached it because the value can't be the size of a
    compressed block: larger than the worst case for an 8 MiB block,
    or, in the last four bytes of the data, running past their end.
    Any other block running past the end of the data, or 1 to 3 stray
    bytes after the last block, means the stream was cut.
    
    [1] https://github.com/lz4/lz4/blob/dev/doc/lz4_Frame_format.md#legacy-frame
"""

LZ4_LEGACY_MAGIC = (0x184C2102).to_bytes(4, 'little')
LZ4_LEGACY_BLOCK_SIZE = 0x800000 # 8 MB
LZ4HC_CLEVEL_MAX = 12

uint32 = Struct('<I')


def compress_bound(input_size : int) -> int:
    
    # LZ4_COMPRESSBOUND() from lz4.h
    return input_size + input_size // 255 + 16


class Lz4LegacyDriver(CodecDriver):
    
    name = 'lz4_legacy'
    backend_errors = (lz4.block.LZ4BlockError,)
    
    def __init__(self, block_size : int = LZ4_LEGACY_BLOCK_SIZE,
        compression_level : int = LZ4HC_CLEVEL_MAX):
        
        self.block_size = block_size
        self.output_chunk_size = block_size
        self.compression_level = compression_level
    
    def _open(self, mode : Mode) -> Any:
        
        # lz4.block keeps no state between blocks
        return None
    
    def _encode(self, backend : Any, mode : Mode, view : memoryview, writer : ChunkWriter):
        
        writer.write(LZ4_LEGACY_MAGIC)
        
        size = len(view)
        
        for pos in range(0, size, self.block_size):
            compressed_block = lz4.block.compress(view[pos:pos + self.block_size],
                mode = 'high_compression', compression = self.compression_level,
                store_size = False)
            
            writer.write(uint32.pack(len(compressed_block)))
            writer.write(compressed_block)
        
        writer.write(uint32.pack(size & 0xffffffff))
    
    def read_block_size(self, view : memoryview, pos : int) -> int:
        
        remaining = len(view) - pos
        
        if not remaining:
            raise TruncatedOrMalformed('no footer')
        
        if remaining < 4:
            raise CodecError('Truncated legacy LZ4 stream: %d stray bytes at offset 0x%x' % (remaining, pos))
        
        compressed_block_size = uint32.unpack_from(view, pos)[0]
        
        if not compressed_block_size:
            raise TruncatedOrMalformed('empty block')
        
        if compressed_block_size > compress_bound(self.block_size):
            raise TruncatedOrMalformed('size field %d exceeds the block bound, footer reached' % compressed_block_size)
        
        if 4 + compressed_block_size > remaining:
            # Only the last four bytes can be the footer
            if remaining == 4:
                raise TruncatedOrMalformed('size field %d is the footer' % compressed_block_size)
            
            raise CodecError('Truncated legacy LZ4 stream: block of %d bytes at offset 0x%x, %d bytes left' % (
                compressed_block_size, pos, remaining - 4))
        
        return compressed_block_size
    
    def _decode(self, backend : Any, view : memoryview, writer : ChunkWriter):
        
        if bytes(view[:4]) != LZ4_LEGACY_MAGIC:
            raise CodecError('Not a legacy LZ4 stream (magic %s)' % bytes(view[:4]).hex())
        
        pos = 4
        
        while True:
            try:
                compressed_block_size = self.read_block_size(view, pos)
            except TruncatedOrMalformed as end_of_stream:
                logging.debug('[i] lz4_legacy: stream ends at offset 0x%x: %s' % (pos, end_of_stream))
                break
            
            pos += 4
            
            writer.write(lz4.block.decompress(view[pos:pos + compressed_block_size],
                uncompressed_size = self.block_size))
            
            pos += compressed_block_size
