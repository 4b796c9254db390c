"""Buffered writer of Avro binary encoded values."""

from __future__ import annotations

import struct
from typing import BinaryIO, Callable

_INT_MASK = (1 << 32) - 1
_LONG_MASK = (1 << 64) - 1


def _wrap(value: int, bits: int) -> int:
    half = 1 << (bits - 1)
    return ((value + half) % (1 << bits)) - half


class Writer:
    """Encodes Avro values into a buffer that is flushed to a binary stream."""

    def __init__(self, out: BinaryIO | None = None) -> None:
        self.out = out
        self.error: Exception | None = None
        self._buf = bytearray()

    def reset(self, out: BinaryIO | None) -> None:
        """Attach a new output stream and discard the buffered bytes."""
        self.out = out
        self._buf.clear()

    def buffered(self) -> int:
        """Return the number of buffered bytes."""
        return len(self._buf)

    def buffer(self) -> bytes:
        """Return the buffered bytes."""
        return bytes(self._buf)

    def flush(self) -> None:
        """Write the buffered bytes to the output stream.

        Raises the writer's stored error, or the error of the stream, which is
        then kept as the writer's error.
        """
        if self.out is None:
            return
        if self.error is not None:
            raise self.error
        try:
            written = self.out.write(bytes(self._buf))
        except OSError as err:
            self.error = err
            raise
        del self._buf[: len(self._buf) if written is None else written]

    def write(self, data: bytes) -> None:
        """Append raw bytes."""
        self._buf += data

    def write_bool(self, value: bool) -> None:
        """Append a boolean."""
        self._buf.append(1 if value else 0)

    def write_int(self, value: int) -> None:
        """Append a 32-bit int, zig-zag and varint encoded."""
        i = _wrap(value, 32)
        self._encode_varint(((i << 1) ^ (i >> 31)) & _INT_MASK)

    def write_long(self, value: int) -> None:
        """Append a 64-bit long, zig-zag and varint encoded."""
        i = _wrap(value, 64)
        self._encode_varint(((i << 1) ^ (i >> 63)) & _LONG_MASK)

    def _encode_varint(self, value: int) -> None:
        while True:
            byte = value & 0x7F
            value >>= 7
            if value:
                self._buf.append(byte | 0x80)
            else:
                self._buf.append(byte)
                return

    def write_float(self, value: float) -> None:
        """Append a 32-bit little-endian float."""
        self._buf += struct.pack("<f", value)

    def write_double(self, value: float) -> None:
        """Append a 64-bit little-endian double."""
        self._buf += struct.pack("<d", value)

    def write_bytes(self, value: bytes) -> None:
        """Append length-prefixed bytes."""
        self.write_long(len(value))
        self._buf += value

    def write_string(self, value: str) -> None:
        """Append a length-prefixed UTF-8 string."""
        self.write_bytes(value.encode("utf-8"))

    def write_block_header(self, length: int, size: int) -> None:
        """Append a block header; a positive size is written after a negated length."""
        if size > 0:
            self.write_long(-length)
            self.write_long(size)
            return
        self.write_long(length)

    def write_block_cb(self, callback: Callable[[Writer], int]) -> int:
        """Write a block whose items the callback writes, returning the item count."""
        start = len(self._buf)
        length = callback(self)
        data = bytes(self._buf[start:])
        del self._buf[start:]
        self.write_block_header(length, len(data))
        self._buf += data
        return length