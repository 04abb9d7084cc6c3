"""
ByteCursor - Forward-only reader over an immutable byte buffer.

Every read either returns exactly what was asked for or raises UnexpectedEof
without moving the offset. There is no seek.
"""

from __future__ import annotations

import struct

from segmentinfos.errors import InvalidEncoding, SegmentInfosError, UnexpectedEof

_U32_BE = struct.Struct(">I")
_U32_LE = struct.Struct("<I")
_U64_BE = struct.Struct(">Q")
_I64_BE = struct.Struct(">q")


class ByteCursor:
    """Position-tracking view over a complete file's bytes."""

    __slots__ = ("_buf", "_pos")

    def __init__(self, data: bytes | bytearray | memoryview) -> None:
        self._buf = bytes(data)
        self._pos = 0

    def __len__(self) -> int:
        return len(self._buf)

    def __repr__(self) -> str:
        return f"ByteCursor(offset={self._pos}, remaining={self.remaining()})"

    def tell(self) -> int:
        return self._pos

    def remaining(self) -> int:
        return len(self._buf) - self._pos

    def _take(self, n: int) -> bytes:
        if n < 0:
            raise SegmentInfosError(f"Negative read length {n} at offset {self._pos}")
        if n > self.remaining():
            raise UnexpectedEof(n, self.remaining(), self._pos)
        start = self._pos
        self._pos = start + n
        return self._buf[start:self._pos]

    # fixed-width reads

    def read_u8(self) -> int:
        return self._take(1)[0]

    def read_u32_be(self) -> int:
        return _U32_BE.unpack(self._take(4))[0]

    def read_u32_le(self) -> int:
        return _U32_LE.unpack(self._take(4))[0]

    def read_u64_be(self) -> int:
        return _U64_BE.unpack(self._take(8))[0]

    def read_i64_be(self) -> int:
        return _I64_BE.unpack(self._take(8))[0]

    # raw and text reads

    def read_bytes(self, n: int) -> bytes:
        return self._take(n)

    def read_utf8(self, n: int) -> str:
        """Read n bytes and decode them as UTF-8."""
        offset = self._pos
        raw = self._take(n)
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidEncoding(f"Invalid UTF-8 in {n}-byte span at offset {offset}") from exc
