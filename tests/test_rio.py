import io

import pytest

from myshell.rio import RobustReader, read_exact, to_base, write_all


class ChunkedStream:
    """Returns data in fixed-size pieces, like a pipe or socket."""

    def __init__(self, data, piece):
        self._data = data
        self._piece = piece
        self.calls = 0

    def read(self, size):
        self.calls += 1
        out = self._data[: min(size, self._piece)]
        self._data = self._data[len(out):]
        return out


class InterruptingStream:
    def __init__(self, data):
        self._inner = io.BytesIO(data)
        self._interrupted = False

    def read(self, size):
        if not self._interrupted:
            self._interrupted = True
            raise InterruptedError
        return self._inner.read(size)


class ShortWriter:
    def __init__(self, limit):
        self.limit = limit
        self.received = bytearray()
        self.calls = 0

    def write(self, data):
        self.calls += 1
        piece = bytes(data[: self.limit])
        self.received += piece
        return len(piece)


class StuckWriter:
    def write(self, data):
        return 0


def test_read_exact_gathers_short_reads():
    data = bytes(range(200))
    assert read_exact(ChunkedStream(data, 7), 150) == data[:150]


def test_read_exact_stops_at_eof():
    data = b"short"
    assert read_exact(io.BytesIO(data), 100) == data


def test_read_exact_retries_after_interrupt():
    assert read_exact(InterruptingStream(b"hello"), 5) == b"hello"


def test_read_exact_negative_count():
    with pytest.raises(ValueError):
        read_exact(io.BytesIO(b"x"), -1)


def test_write_all_handles_short_writes():
    data = b"abcdefghijklmnopqrstuvwxyz" * 3
    writer = ShortWriter(5)
    assert write_all(writer, data) == len(data)
    assert bytes(writer.received) == data
    assert writer.calls > 1


def test_write_all_raises_without_progress():
    with pytest.raises(OSError):
        write_all(StuckWriter(), b"data")


def test_write_all_empty_data():
    writer = ShortWriter(3)
    assert write_all(writer, b"") == 0
    assert writer.calls == 0


@pytest.mark.parametrize("value", [0, 1, 9, 10, 255, 4096, 123456789])
@pytest.mark.parametrize("base", [2, 8, 10, 16, 36])
def test_to_base_round_trip(value, base):
    assert int(to_base(value, base), base) == value


@pytest.mark.parametrize("value", [0, 7, 31, 65535, 10**12])
def test_to_base_matches_standard_formats(value):
    assert to_base(value, 10) == str(value)
    assert to_base(value, 16) == format(value, "x")
    assert to_base(value, 2) == format(value, "b")


def test_to_base_negative_round_trip():
    assert int(to_base(-42, 10)) == -42


@pytest.mark.parametrize("base", [0, 1, 37])
def test_to_base_rejects_bad_base(base):
    with pytest.raises(ValueError):
        to_base(5, base)


def test_reader_read_across_refills():
    data = bytes(range(256)) * 4
    stream = ChunkedStream(data, 100)
    reader = RobustReader(stream, 16)
    assert reader.read(300) + reader.read(2000) == data


def test_reader_read_small_buffer_many_calls():
    data = b"0123456789" * 5
    stream = ChunkedStream(data, 1000)
    reader = RobustReader(stream, 4)
    assert reader.read(len(data)) == data
    assert stream.calls >= len(data) // 4


def test_reader_read_at_eof_returns_empty():
    reader = RobustReader(io.BytesIO(b"abc"))
    assert reader.read(3) == b"abc"
    assert reader.read(10) == b""


def test_reader_readline_splits_lines():
    data = b"first line\nsecond\nlast"
    reader = RobustReader(io.BytesIO(data), 4)
    lines = []
    while line := reader.readline(100):
        lines.append(line)
    assert lines == data.splitlines(keepends=True)


def test_reader_readline_respects_maxlen():
    data = b"abcdefghij\n"
    reader = RobustReader(io.BytesIO(data))
    first = reader.readline(5)
    assert first == data[:4]
    assert reader.readline(100) == data[4:]


def test_reader_readline_tiny_maxlen_reads_nothing():
    reader = RobustReader(io.BytesIO(b"xyz\n"))
    assert reader.readline(1) == b""
    assert reader.read(4) == b"xyz\n"


def test_reader_mixes_readline_and_read():
    data = b"header\nbody-bytes"
    reader = RobustReader(io.BytesIO(data), 3)
    assert reader.readline(100) == b"header\n"
    assert reader.read(100) == b"body-bytes"


def test_reader_retries_after_interrupt():
    reader = RobustReader(InterruptingStream(b"line\n"))
    assert reader.readline(100) == b"line\n"


def test_reader_rejects_bad_bufsize():
    with pytest.raises(ValueError):
        RobustReader(io.BytesIO(b""), 0)


def test_reader_negative_read():
    with pytest.raises(ValueError):
        RobustReader(io.BytesIO(b"abc")).read(-1)