#!/usr/bin/env python3
#-*- encoding: Utf-8 -*-
from typing import Dict, Optional
from enum import IntEnum

from bootimg_compress.errors import UnsupportedFormat

"""
    Containers handled by the engine, and how to recognize them.
    
    The magics are the ones found at the start of boot image
    payloads (ramdisks, kernels):
    
    gzip        1f 8b 08
    xz          fd 37 7a 58 5a 00
    lzma        5d 00 00            (legacy "alone" container)
    bzip2       42 5a 68            ("BZh")
    lz4         04 22 4d 18         https://github.com/lz4/lz4/blob/dev/doc/lz4_Frame_format.md
    lz4_legacy  02 21 4c 18         https://github.com/lz4/lz4/blob/dev/doc/lz4_Frame_format.md#legacy-frame
"""

class FormatTag(IntEnum):
    gzip = 1
    xz = 2
    lzma = 3
    bzip2 = 4
    lz4 = 5
    lz4_legacy = 6


"""
    Direction of a transform. The LZMA family decodes both of its
    containers with the same decoder, but has one encoder per
    container: "encode_alone" is what "encode" turns into for
    FormatTag.lzma.
"""

class Mode(IntEnum):
    decode = 0
    encode = 1
    encode_alone = 2


class Signature:
    Compressed_GZIP = b'\x1f\x8b\x08'
    Compressed_XZ   = b'\xfd7zXZ\x00'
    Compressed_LZMA = b']\x00\x00'
    Compressed_BZ2  = b'BZh'
    Compressed_LZ4  = b'\x04"M\x18'
    Compressed_LZ4_Legacy = b'\x02!L\x18'

    Compressed : Dict[bytes, FormatTag] = {
        Compressed_GZIP: FormatTag.gzip,
        Compressed_XZ: FormatTag.xz,
        Compressed_LZMA: FormatTag.lzma,
        Compressed_BZ2: FormatTag.bzip2,
        Compressed_LZ4: FormatTag.lz4,
        Compressed_LZ4_Legacy: FormatTag.lz4_legacy,
    }

    @staticmethod
    def check(data, offset, sign):
        return sign == bytes(data[offset:offset + len(sign)])

    @staticmethod
    def is_compressed(data, offset = 0):
        return detect_format(data, offset) is not None


FORMAT_EXTENSIONS : Dict[FormatTag, str] = {
    FormatTag.gzip: 'gz',
    FormatTag.xz: 'xz',
    FormatTag.lzma: 'lzma',
    FormatTag.bzip2: 'bz2',
    FormatTag.lz4: 'lz4',
    FormatTag.lz4_legacy: 'lz4',
}

SUPPORTED_METHODS = [tag.name for tag in FormatTag]


def detect_format(data : bytes, offset : int = 0) -> Optional[FormatTag]:
    
    for sign, format_tag in Signature.Compressed.items():
        if Signature.check(data, offset, sign):
            return format_tag
    
    return None


"""
    Map a command-line method name ("gzip", "xz", "lzma", "bzip2",
    "lz4", "lz4_legacy") to its FormatTag.
"""

def format_from_method(method : str) -> FormatTag:
    
    try:
        return FormatTag[method]
    except KeyError:
        raise UnsupportedFormat('Unsupported compression method: %r (supported: %s)' % (
            method, ' '.join(SUPPORTED_METHODS))) from None
