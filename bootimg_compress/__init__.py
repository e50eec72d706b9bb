from bootimg_compress.formats import FormatTag, Mode, Signature, detect_format
from bootimg_compress.dispatcher import Dispatcher, compress, decompress, transform
from bootimg_compress.errors import (BootCompressError, BackendInitError, CodecError,
    UnsupportedFormat, TruncatedOrMalformed, SinkWriteError)

__version__ = '1.0'
