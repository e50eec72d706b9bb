from __future__ import annotations

import pytest

import bootimg_compress
from bootimg_compress.dispatcher import ROUTES, Dispatcher
from bootimg_compress.drivers import (
    Bzip2Driver,
    GzipDriver,
    Lz4FrameDriver,
    Lz4LegacyDriver,
    LzmaDriver,
)
from bootimg_compress.errors import SinkWriteError, UnsupportedFormat
from bootimg_compress.formats import FormatTag, Mode, detect_format


@pytest.fixture
def dispatcher() -> Dispatcher:
    return Dispatcher(
        {
            "gzip": GzipDriver(chunk_size=4096),
            "lzma": LzmaDriver(chunk_size=4096, preset=6),
            "bzip2": Bzip2Driver(chunk_size=4096),
            "lz4": Lz4FrameDriver(chunk_size=4096),
            "lz4_legacy": Lz4LegacyDriver(block_size=4096),
        }
    )


def test_every_format_has_both_directions() -> None:
    for tag in FormatTag:
        assert (tag, Mode.decode) in ROUTES
        assert (tag, Mode.encode) in ROUTES
    assert ROUTES[(FormatTag.xz, Mode.decode)] == ROUTES[(FormatTag.lzma, Mode.decode)]
    assert ROUTES[(FormatTag.xz, Mode.encode)] == ("lzma", Mode.encode)
    assert ROUTES[(FormatTag.lzma, Mode.encode)] == ("lzma", Mode.encode_alone)


@pytest.mark.parametrize("tag", list(FormatTag))
def test_compress_then_decompress(tag: FormatTag, dispatcher, payload, sinks) -> None:
    data = payload(3 * 4096 + 9, seed=int(tag))
    encoded = sinks.recording()
    assert dispatcher.compress(tag, encoded, data) == encoded.received
    assert detect_format(encoded.data) is tag

    decoded = sinks.recording()
    assert dispatcher.decompress(tag, decoded, encoded.data) == len(data)
    assert decoded.data == data


def test_xz_and_lzma_encoders_are_distinct(payload, sinks) -> None:
    data = payload(50000)
    xz = sinks.recording()
    alone = sinks.recording()
    bootimg_compress.compress(FormatTag.xz, xz, data)
    bootimg_compress.compress(FormatTag.lzma, alone, data)

    assert xz.data != alone.data
    assert detect_format(xz.data) is FormatTag.xz
    assert detect_format(alone.data) is FormatTag.lzma

    for tag, encoded in ((FormatTag.xz, xz), (FormatTag.lzma, alone)):
        decoded = sinks.recording()
        bootimg_compress.decompress(tag, decoded, encoded.data)
        assert decoded.data == data


def test_module_level_transform(payload, sinks) -> None:
    data = payload(1000)
    encoded = sinks.recording()
    bootimg_compress.transform(FormatTag.gzip, Mode.encode, data, encoded)
    decoded = sinks.recording()
    bootimg_compress.transform(FormatTag.gzip, Mode.decode, encoded.data, decoded)
    assert decoded.data == data


@pytest.mark.parametrize("tag", ["gzip", 42, None, "zstd"])
def test_unknown_format(tag, dispatcher, sinks) -> None:
    with pytest.raises(UnsupportedFormat):
        dispatcher.compress(tag, sinks.recording(), b"data")
    with pytest.raises(UnsupportedFormat):
        dispatcher.decompress(tag, sinks.recording(), b"data")


def test_encode_alone_is_not_a_public_mode(dispatcher, sinks) -> None:
    with pytest.raises(UnsupportedFormat):
        dispatcher.transform(FormatTag.xz, Mode.encode_alone, b"data", sinks.recording())


@pytest.mark.parametrize("tag", list(FormatTag))
def test_failing_sink_is_fatal(tag: FormatTag, dispatcher, noise, sinks, track_backend) -> None:
    driver_name, _ = ROUTES[(tag, Mode.encode)]
    lifecycle = track_backend(dispatcher.drivers[driver_name])
    sink = sinks.failing(2)

    with pytest.raises(SinkWriteError):
        dispatcher.compress(tag, sink, noise(8 * 4096))

    assert (lifecycle.opened, lifecycle.closed) == (1, 1)


def test_stalled_sink_is_fatal(dispatcher, noise, sinks) -> None:
    with pytest.raises(SinkWriteError):
        dispatcher.compress(FormatTag.bzip2, sinks.stalled(1), noise(8 * 4096))
