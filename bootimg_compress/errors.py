#!/usr/bin/env python3
#-*- encoding: Utf-8 -*-

"""
    Exceptions raised by the compression engine.

    Every error is terminal for the call that raised it: the backend
    stream has been released and no partial output should be used.
"""


class BootCompressError(Exception):
    pass


class BackendInitError(BootCompressError):
    pass


class CodecError(BootCompressError):
    
    # code: backend error number when there is one, else None
    
    def __init__(self, message : str, code = None):
        
        super().__init__(message)
        self.code = code


class UnsupportedFormat(BootCompressError, ValueError):
    pass


class BadExtension(BootCompressError, ValueError):
    pass


class TruncatedOrMalformed(BootCompressError):
    pass


class SinkWriteError(BootCompressError, OSError):
    pass
