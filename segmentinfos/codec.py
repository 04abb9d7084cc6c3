"""
Primitive codec - Variable-length integers and string containers.

Varints are base-128 with the least significant group first; the high bit of
each byte says another byte follows.

    0x02              -> 2
    0x81 0x01         -> 129
    0xFF 0x7F         -> 16383
    0x81 0x80 0x01    -> 16385
"""

from __future__ import annotations

from segmentinfos.cursor import ByteCursor
from segmentinfos.errors import VarIntOverflow
from segmentinfos.layout import ID_LENGTH, MAX_VINT_BYTES, MAX_VLONG_BYTES
from segmentinfos.models import Version


def _read_base128(cursor: ByteCursor, max_bytes: int) -> int:
    start = cursor.tell()
    value = 0
    shift = 0
    for _ in range(max_bytes):
        b = cursor.read_u8()
        value |= (b & 0x7F) << shift
        if not b & 0x80:
            return value
        shift += 7
    raise VarIntOverflow(max_bytes, start)


def read_varint(cursor: ByteCursor) -> int:
    """Read an unsigned variable-length int (at most 5 bytes)."""
    return _read_base128(cursor, MAX_VINT_BYTES)


def read_varlong(cursor: ByteCursor) -> int:
    """Read an unsigned variable-length long (at most 10 bytes)."""
    return _read_base128(cursor, MAX_VLONG_BYTES)


def read_string(cursor: ByteCursor) -> str:
    length = read_varint(cursor)
    return cursor.read_utf8(length)


def read_map(cursor: ByteCursor) -> dict[str, str]:
    """Read a counted map of string pairs. A repeated key keeps its last value."""
    count = read_varint(cursor)
    result: dict[str, str] = {}
    for _ in range(count):
        key = read_string(cursor)
        result[key] = read_string(cursor)
    return result


def read_set(cursor: ByteCursor) -> frozenset[str]:
    count = read_varint(cursor)
    return frozenset(read_string(cursor) for _ in range(count))


def read_list(cursor: ByteCursor) -> tuple[str, ...]:
    count = read_varint(cursor)
    return tuple(read_string(cursor) for _ in range(count))


def read_id(cursor: ByteCursor) -> bytes:
    return cursor.read_bytes(ID_LENGTH)


def read_version_triple(cursor: ByteCursor) -> Version:
    """Read major.minor.bugfix as three varints."""
    return Version(read_varint(cursor), read_varint(cursor), read_varint(cursor))


def read_le_version_triple(cursor: ByteCursor) -> Version:
    """Read major.minor.bugfix as three little-endian u32."""
    return Version(cursor.read_u32_le(), cursor.read_u32_le(), cursor.read_u32_le())
