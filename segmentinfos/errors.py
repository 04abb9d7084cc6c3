"""
Decode faults.

Everything raised while decoding derives from SegmentInfosError, which is a
ValueError so callers that treat malformed input as a bad value keep working.
Header faults describe a single framed file; commit faults describe the index
as a whole and chain the header fault that caused them.
"""

from __future__ import annotations


class SegmentInfosError(ValueError):
    """Base class for every decode fault."""


# =============================================================================
# Cursor faults
# =============================================================================

class UnexpectedEof(SegmentInfosError):
    """A read asked for more bytes than remain in the buffer."""

    def __init__(self, requested: int, remaining: int, offset: int) -> None:
        super().__init__(
            f"Unexpected end of input: needed {requested} byte(s) at offset {offset}, "
            f"{remaining} remaining"
        )
        self.requested = requested
        self.remaining = remaining
        self.offset = offset


class InvalidEncoding(SegmentInfosError):
    """A string span is not valid UTF-8."""


class VarIntOverflow(SegmentInfosError):
    """A variable-length integer ran past its byte cap."""

    def __init__(self, max_bytes: int, offset: int) -> None:
        super().__init__(f"Variable-length integer longer than {max_bytes} bytes at offset {offset}")
        self.max_bytes = max_bytes
        self.offset = offset


# =============================================================================
# Header faults
# =============================================================================

class HeaderError(SegmentInfosError):
    """A framed file header failed validation."""


class MagicMismatch(HeaderError):

    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(f"Magic mismatch: expected {expected:#010x}, got {actual:#010x}")
        self.expected = expected
        self.actual = actual


class CodecMismatch(HeaderError):

    def __init__(self, expected: str, actual: str) -> None:
        super().__init__(f"Codec mismatch: expected {expected!r}, got {actual!r}")
        self.expected = expected
        self.actual = actual


class MalformedCodecName(HeaderError):
    """The codec name is not valid UTF-8."""


class VersionTooOld(HeaderError):

    def __init__(self, version: int, min_version: int, max_version: int) -> None:
        super().__init__(
            f"Format version {version} is older than supported range [{min_version}, {max_version}]"
        )
        self.version = version
        self.min_version = min_version
        self.max_version = max_version


class VersionTooNew(HeaderError):

    def __init__(self, version: int, min_version: int, max_version: int) -> None:
        super().__init__(
            f"Format version {version} is newer than supported range [{min_version}, {max_version}]"
        )
        self.version = version
        self.min_version = min_version
        self.max_version = max_version


class BadHeaderId(HeaderError):

    def __init__(self, expected: bytes, actual: bytes) -> None:
        super().__init__(f"Header id mismatch: expected {expected.hex()}, got {actual.hex()}")
        self.expected = expected
        self.actual = actual


class BadHeaderSuffix(HeaderError):

    def __init__(self, expected: str, actual: str) -> None:
        super().__init__(f"Header suffix mismatch: expected {expected!r}, got {actual!r}")
        self.expected = expected
        self.actual = actual


# =============================================================================
# Commit faults
# =============================================================================

class IndexFormatTooOld(SegmentInfosError):
    """The index was written by a format older than this reader supports."""


class IndexFormatTooNew(SegmentInfosError):
    """The index was written by a format newer than this reader supports."""


class CorruptedIndex(SegmentInfosError):
    """The commit metadata is structurally impossible."""


class CorruptFileName(CorruptedIndex):
    """A commit file name carries a generation suffix that is not decimal."""

    def __init__(self, file_name: str) -> None:
        super().__init__(f"Bad generation suffix in commit file name {file_name!r}")
        self.file_name = file_name


class CorruptSegment(CorruptedIndex):
    """A segment descriptor holds an impossible value."""


def translate_header_error(exc: HeaderError) -> SegmentInfosError:
    """Map a header fault on a commit record to the commit-level fault."""
    if isinstance(exc, (VersionTooOld, MagicMismatch)):
        return IndexFormatTooOld(str(exc))
    if isinstance(exc, VersionTooNew):
        return IndexFormatTooNew(str(exc))
    return CorruptedIndex(str(exc))


# =============================================================================
# Byte source faults
# =============================================================================

class IndexFileNotFound(FileNotFoundError):
    """The byte source has no file with the requested name."""


class IndexFileTooLarge(OSError):
    """A file is larger than the configured read limit."""
