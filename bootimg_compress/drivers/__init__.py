from bootimg_compress.drivers.base import CodecDriver, iter_chunks
from bootimg_compress.drivers.gzip_driver import GzipDriver
from bootimg_compress.drivers.lzma_driver import LzmaDriver
from bootimg_compress.drivers.bzip2_driver import Bzip2Driver
from bootimg_compress.drivers.lz4_frame import Lz4FrameDriver
from bootimg_compress.drivers.lz4_legacy import Lz4LegacyDriver
