"""Robust byte-stream I/O: short-count tolerant reads, full writes and a buffered reader."""

from __future__ import annotations

import string
from typing import BinaryIO

RIO_BUFSIZE = 8192
MAXLINE = 8192

_DIGITS = string.digits + string.ascii_lowercase


def _read_chunk(stream: BinaryIO, size: int) -> bytes:
    """Read up to ``size`` bytes, retrying when a signal interrupts the call."""
    while True:
        try:
            chunk = stream.read(size)
        except InterruptedError:
            continue
        if chunk is None:
            raise BlockingIOError("stream has no data available yet")
        return bytes(chunk)


def read_exact(stream: BinaryIO, n: int) -> bytes:
    """Read ``n`` bytes without buffering, stopping early only at end of stream."""
    if n < 0:
        raise ValueError("byte count must not be negative")
    parts: list[bytes] = []
    remaining = n
    while remaining > 0:
        chunk = _read_chunk(stream, remaining)
        if not chunk:
            break
        parts.append(chunk)
        remaining -= len(chunk)
    return b"".join(parts)


def write_all(stream: BinaryIO, data: bytes) -> int:
    """Write every byte of ``data``, continuing after short writes.

    Returns the number of bytes written; raises OSError if the stream
    stops accepting data.
    """
    view = memoryview(bytes(data))
    while view:
        try:
            written = stream.write(view)
        except InterruptedError:
            continue
        if not written:
            raise OSError("write made no progress")
        view = view[written:]
    return len(data)


def to_base(value: int, base: int = 10) -> str:
    """Render an integer in ``base`` (2 to 36) with lower-case digits."""
    if not 2 <= base <= len(_DIGITS):
        raise ValueError(f"base must be between 2 and {len(_DIGITS)}")
    sign = "-" if value < 0 else ""
    value = abs(value)
    digits = []
    while True:
        value, digit = divmod(value, base)
        digits.append(_DIGITS[digit])
        if value == 0:
            break
    return sign + "".join(reversed(digits))


class RobustReader:
    """Buffered reader over a binary stream that refills its buffer as needed."""

    def __init__(self, stream: BinaryIO, bufsize: int = RIO_BUFSIZE) -> None:
        if bufsize < 1:
            raise ValueError("buffer size must be positive")
        self._stream = stream
        self._bufsize = bufsize
        self._buffer = b""
        self._pos = 0

    @property
    def _available(self) -> int:
        return len(self._buffer) - self._pos

    def _fill(self) -> bool:
        """Refill the internal buffer if it is empty; False at end of stream."""
        if self._available > 0:
            return True
        chunk = _read_chunk(self._stream, self._bufsize)
        if not chunk:
            return False
        self._buffer = chunk
        self._pos = 0
        return True

    def _take(self, n: int) -> bytes:
        end = self._pos + min(n, self._available)
        data = self._buffer[self._pos:end]
        self._pos = end
        return data

    def read(self, n: int) -> bytes:
        """Read up to ``n`` bytes, fewer only if the stream ends."""
        if n < 0:
            raise ValueError("byte count must not be negative")
        parts: list[bytes] = []
        remaining = n
        while remaining > 0 and self._fill():
            chunk = self._take(remaining)
            parts.append(chunk)
            remaining -= len(chunk)
        return b"".join(parts)

    def readline(self, maxlen: int = MAXLINE) -> bytes:
        """Read one line, newline included, of at most ``maxlen - 1`` bytes.

        Returns ``b""`` at end of stream.
        """
        limit = maxlen - 1
        out = bytearray()
        while len(out) < limit and self._fill():
            window = min(limit - len(out), self._available)
            newline = self._buffer.find(b"\n", self._pos, self._pos + window)
            if newline >= 0:
                out += self._take(newline - self._pos + 1)
                break
            out += self._take(window)
        return bytes(out)