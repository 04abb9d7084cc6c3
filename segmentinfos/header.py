"""
Header Validator - Checks the framing prefix of a codec file.

Order is fixed and the first failing check wins:
    magic -> codec name -> version range -> id (optional) -> suffix (optional)
"""

from __future__ import annotations

from segmentinfos.codec import read_id, read_varint
from segmentinfos.cursor import ByteCursor
from segmentinfos.errors import (
    BadHeaderId,
    BadHeaderSuffix,
    CodecMismatch,
    InvalidEncoding,
    MagicMismatch,
    MalformedCodecName,
    VersionTooNew,
    VersionTooOld,
)
from segmentinfos.layout import CODEC_MAGIC


def check_magic(cursor: ByteCursor) -> int:
    actual = cursor.read_u32_be()
    if actual != CODEC_MAGIC:
        raise MagicMismatch(expected=CODEC_MAGIC, actual=actual)
    return actual


def check_header_no_magic(
    cursor: ByteCursor,
    codec: str,
    min_version: int,
    max_version: int,
) -> int:
    """Check codec name and version range. Returns the version."""
    length = read_varint(cursor)
    try:
        actual = cursor.read_utf8(length)
    except InvalidEncoding as exc:
        raise MalformedCodecName(f"Codec name is not valid UTF-8 (expected {codec!r})") from exc
    if actual != codec:
        raise CodecMismatch(expected=codec, actual=actual)

    version = cursor.read_u32_be()
    if version < min_version:
        raise VersionTooOld(version, min_version, max_version)
    if version > max_version:
        raise VersionTooNew(version, min_version, max_version)
    return version


def check_header(cursor: ByteCursor, codec: str, min_version: int, max_version: int) -> int:
    """Check magic, codec name and version range. Returns the version."""
    check_magic(cursor)
    return check_header_no_magic(cursor, codec, min_version, max_version)


def check_header_id(cursor: ByteCursor, expected: bytes) -> bytes:
    actual = read_id(cursor)
    if actual != expected:
        raise BadHeaderId(expected=expected, actual=actual)
    return actual


def read_header_suffix(cursor: ByteCursor) -> str:
    """Read a one-byte length followed by that many bytes of text."""
    length = cursor.read_u8()
    return cursor.read_utf8(length)


def check_header_suffix(cursor: ByteCursor, expected: str) -> str:
    try:
        actual = read_header_suffix(cursor)
    except InvalidEncoding as exc:
        raise BadHeaderSuffix(expected=expected, actual="<invalid utf-8>") from exc
    if actual != expected:
        raise BadHeaderSuffix(expected=expected, actual=actual)
    return actual


def check_index_header(
    cursor: ByteCursor,
    codec: str,
    min_version: int,
    max_version: int,
    expected_id: bytes,
    expected_suffix: str,
) -> int:
    """
    Full per-file header check: magic, codec, version, id and suffix.
    Returns the version so callers can branch on format differences.
    """
    version = check_header(cursor, codec, min_version, max_version)
    check_header_id(cursor, expected_id)
    check_header_suffix(cursor, expected_suffix)
    return version
