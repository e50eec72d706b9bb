#!/usr/bin/env python3
#-*- encoding: Utf-8 -*-
from typing import Dict, Optional, Tuple

from bootimg_compress.drivers import (CodecDriver, GzipDriver, LzmaDriver,
    Bzip2Driver, Lz4FrameDriver, Lz4LegacyDriver)
from bootimg_compress.formats import FormatTag, Mode
from bootimg_compress.errors import UnsupportedFormat
from bootimg_compress.sink import Buffer, Sink

"""
    Entry point of the engine: route a (format, direction) pair to
    the operation of the driver handling it.
    
    XZ and .lzma payloads go through the same LZMA driver. They share
    its decoder, but each has its own encoder, so that compressing
    as FormatTag.lzma yields an "alone" container and never an XZ one.
"""

ROUTES : Dict[Tuple[FormatTag, Mode], Tuple[str, Mode]] = {
    (FormatTag.gzip, Mode.decode): ('gzip', Mode.decode),
    (FormatTag.gzip, Mode.encode): ('gzip', Mode.encode),
    (FormatTag.xz, Mode.decode): ('lzma', Mode.decode),
    (FormatTag.xz, Mode.encode): ('lzma', Mode.encode),
    (FormatTag.lzma, Mode.decode): ('lzma', Mode.decode),
    (FormatTag.lzma, Mode.encode): ('lzma', Mode.encode_alone),
    (FormatTag.bzip2, Mode.decode): ('bzip2', Mode.decode),
    (FormatTag.bzip2, Mode.encode): ('bzip2', Mode.encode),
    (FormatTag.lz4, Mode.decode): ('lz4', Mode.decode),
    (FormatTag.lz4, Mode.encode): ('lz4', Mode.encode),
    (FormatTag.lz4_legacy, Mode.decode): ('lz4_legacy', Mode.decode),
    (FormatTag.lz4_legacy, Mode.encode): ('lz4_legacy', Mode.encode),
}


def default_drivers() -> Dict[str, CodecDriver]:
    
    return {
        'gzip': GzipDriver(),
        'lzma': LzmaDriver(),
        'bzip2': Bzip2Driver(),
        'lz4': Lz4FrameDriver(),
        'lz4_legacy': Lz4LegacyDriver(),
    }


class Dispatcher:
    
    def __init__(self, drivers : Optional[Dict[str, CodecDriver]] = None):
        
        self.drivers = default_drivers()
        
        if drivers:
            self.drivers.update(drivers)
    
    def transform(self, format_tag : FormatTag, mode : Mode, data : Buffer, sink : Sink) -> int:
        
        try:
            driver_name, driver_mode = ROUTES[(format_tag, mode)]
        except (KeyError, TypeError):
            raise UnsupportedFormat('No driver for format %r in mode %r' % (format_tag, mode)) from None
        
        return self.drivers[driver_name].run(driver_mode, data, sink)
    
    def compress(self, format_tag : FormatTag, sink : Sink, data : Buffer) -> int:
        return self.transform(format_tag, Mode.encode, data, sink)
    
    def decompress(self, format_tag : FormatTag, sink : Sink, data : Buffer) -> int:
        return self.transform(format_tag, Mode.decode, data, sink)


_dispatcher = Dispatcher()


def transform(format_tag : FormatTag, mode : Mode, data : Buffer, sink : Sink) -> int:
    return _dispatcher.transform(format_tag, mode, data, sink)


def compress(format_tag : FormatTag, sink : Sink, data : Buffer) -> int:
    return _dispatcher.compress(format_tag, sink, data)


def decompress(format_tag : FormatTag, sink : Sink, data : Buffer) -> int:
    return _dispatcher.decompress(format_tag, sink, data)
