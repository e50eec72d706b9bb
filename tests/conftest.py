from __future__ import annotations

import random

import pytest


class RecordingSink:
    """Keeps every write, accepts everything."""

    def __init__(self) -> None:
        self.writes: list[bytes] = []

    def write(self, data) -> int:
        self.writes.append(bytes(data))
        return len(data)

    @property
    def data(self) -> bytes:
        return b"".join(self.writes)

    @property
    def received(self) -> int:
        return sum(len(w) for w in self.writes)


class ShortWriteSink(RecordingSink):
    """Accepts at most `limit` bytes per write() call."""

    def __init__(self, limit: int) -> None:
        super().__init__()
        self.limit = limit

    def write(self, data) -> int:
        return super().write(bytes(data)[: self.limit])


class FailingSink(RecordingSink):
    """Raises OSError on the Nth write (1-based)."""

    def __init__(self, fail_on: int) -> None:
        super().__init__()
        self.fail_on = fail_on
        self.calls = 0

    def write(self, data) -> int:
        self.calls += 1
        if self.calls == self.fail_on:
            raise OSError(28, "No space left on device")
        return super().write(data)


class StalledSink(RecordingSink):
    """Accepts the first `accept` writes, then accepts 0 bytes."""

    def __init__(self, accept: int) -> None:
        super().__init__()
        self.accept = accept

    def write(self, data) -> int:
        if len(self.writes) >= self.accept:
            return 0
        return super().write(data)


class Lifecycle:
    def __init__(self) -> None:
        self.opened = 0
        self.closed = 0


def make_payload(size: int, seed: int = 0) -> bytes:
    """Compressible but not trivial: random 16-byte words from a small vocabulary."""
    rng = random.Random(seed)
    words = [rng.getrandbits(128).to_bytes(16, "little") for _ in range(64)]
    out = b"".join(rng.choice(words) for _ in range(size // 16 + 1))
    return out[:size]


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def payload():
    return make_payload


@pytest.fixture
def sinks():
    class _Sinks:
        recording = RecordingSink
        short = ShortWriteSink
        failing = FailingSink
        stalled = StalledSink

    return _Sinks


@pytest.fixture
def track_backend():
    """Count _open()/_close() calls of one driver instance."""

    def _track(driver) -> Lifecycle:
        lifecycle = Lifecycle()
        open_backend = driver._open
        close_backend = driver._close

        def _open(mode):
            backend = open_backend(mode)
            lifecycle.opened += 1
            return backend

        def _close(backend):
            lifecycle.closed += 1
            close_backend(backend)

        driver._open = _open
        driver._close = _close
        return lifecycle

    return _track


def make_noise(size: int, seed: int = 0) -> bytes:
    """Incompressible bytes, so that encoders produce about as much as they get."""
    if not size:
        return b""
    return random.Random(seed).getrandbits(8 * size).to_bytes(size, "little")


@pytest.fixture
def noise():
    return make_noise
