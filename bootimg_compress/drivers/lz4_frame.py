#!/usr/bin/env python3
#-*- encoding: Utf-8 -*-
from typing import Any, Dict
import logging

import lz4.frame

from bootimg_compress.drivers.base import CodecDriver, iter_chunks
from bootimg_compress.errors import CodecError
from bootimg_compress.sink import ChunkWriter
from bootimg_compress.formats import Mode

"""
    LZ4 frame format (magic 0x184D2204) [1].
    
    The frame header declares the maximum block size of the frame
    (BD byte, "Block MaxSize"), which bounds how much a single block
    may decode to: the output buffer is sized after it.
    
    [1] https://github.com/lz4/lz4/blob/dev/doc/lz4_Frame_format.md#general-structure-of-lz4-frame-format
"""

LZ4_FRAME_CHUNK_SIZE = 1 << 22 # 4 MiB of input per compress_chunk() / decompress_chunk() call
LZ4_FRAME_COMPRESSION_LEVEL = 9
LZ4_HEADER_SIZE_MIN = 7
LZ4_HEADER_SIZE_MAX = 19

# Block MaxSize identifiers; 0 is the library's "default", which is 64 KiB
BLOCK_SIZE_ID_TO_CAPACITY : Dict[int, int] = {
    0: 1 << 16,
    lz4.frame.BLOCKSIZE_MAX64KB: 1 << 16,
    lz4.frame.BLOCKSIZE_MAX256KB: 1 << 18,
    lz4.frame.BLOCKSIZE_MAX1MB: 1 << 20,
    lz4.frame.BLOCKSIZE_MAX4MB: 1 << 22,
}


def output_capacity(block_size_id : int) -> int:
    
    try:
        return BLOCK_SIZE_ID_TO_CAPACITY[block_size_id]
    except KeyError:
        raise CodecError('Impossible unless more block sizes are allowed (block size id %r)' % (
            block_size_id,), block_size_id) from None


class Lz4FrameDriver(CodecDriver):
    
    name = 'lz4'
    backend_errors = (RuntimeError,)
    
    def __init__(self, chunk_size : int = LZ4_FRAME_CHUNK_SIZE,
        compression_level : int = LZ4_FRAME_COMPRESSION_LEVEL):
        
        self.chunk_size = chunk_size
        self.output_chunk_size = chunk_size
        self.compression_level = compression_level
    
    def _open(self, mode : Mode) -> Any:
        
        if mode is Mode.decode:
            return lz4.frame.create_decompression_context()
        
        return lz4.frame.create_compression_context()
    
    def _encode(self, context : Any, mode : Mode, view : memoryview, writer : ChunkWriter):
        
        writer.write(lz4.frame.compress_begin(context,
            compression_level = self.compression_level,
            block_size = lz4.frame.BLOCKSIZE_MAX4MB,
            block_linked = False,
            content_checksum = True,
            auto_flush = True))
        
        for chunk, _ in iter_chunks(view, self.chunk_size):
            if chunk:
                writer.write(lz4.frame.compress_chunk(context, chunk))
        
        # End mark and content checksum
        writer.write(lz4.frame.compress_flush(context))
    
    def _decode(self, context : Any, view : memoryview, writer : ChunkWriter):
        
        if len(view) < LZ4_HEADER_SIZE_MIN:
            raise CodecError('lz4 frame too short (%d bytes)' % len(view))
        
        frame_info = lz4.frame.get_frame_info(bytes(view[:LZ4_HEADER_SIZE_MAX]))
        capacity = output_capacity(frame_info['block_size_id'])
        
        logging.debug('[i] lz4: frame block size id %d, %d bytes output buffer' % (
            frame_info['block_size_id'], capacity))
        
        size = len(view)
        pos = 0
        end_of_frame = False
        
        while pos < size and not end_of_frame:
            output, read, end_of_frame = lz4.frame.decompress_chunk(context,
                view[pos:pos + self.chunk_size], max_length = capacity)
            
            if not read and not output:
                raise CodecError('lz4 frame decoding stalled at offset %d' % pos)
            
            writer.write(output)
            pos += read
        
        if not end_of_frame:
            raise CodecError('lz4 frame ended before its end mark (truncated input?)')
        
        if pos < size:
            logging.debug('[i] lz4: ignoring %d bytes after the end of frame' % (size - pos))
