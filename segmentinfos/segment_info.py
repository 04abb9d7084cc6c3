"""
Segment Info Decoder - Reads per-segment <name>.si descriptors.

The commit record names a codec for every segment. The registry maps that
name to the SegmentInfoFormat that knows how to read the segment's
descriptor; today every supported codec shares the Lucene90 layout.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Iterable

from segmentinfos.codec import read_le_version_triple, read_list, read_map, read_set
from segmentinfos.cursor import ByteCursor
from segmentinfos.directory import Directory
from segmentinfos.errors import CorruptSegment
from segmentinfos.header import check_index_header
from segmentinfos.layout import (
    LUCENE90_FAMILY_CODECS,
    SEGMENT_YES,
    SI_CODEC,
    SI_EXTENSION,
    SI_VERSION_CURRENT,
    SI_VERSION_START,
)
from segmentinfos.models import SegmentInfo, Version

logger = logging.getLogger(__name__)


class SegmentInfoFormat(ABC):
    """Reads one segment descriptor from a Directory."""

    @abstractmethod
    def read(self, directory: Directory, name: str, segment_id: bytes) -> SegmentInfo:
        ...


class Lucene90SegmentInfoFormat(SegmentInfoFormat):
    """
    The Lucene 9.0 .si layout.

    Usage:
        info = Lucene90SegmentInfoFormat().read(directory, "_0", segment_id)
    """

    extension = SI_EXTENSION
    codec = SI_CODEC
    version_start = SI_VERSION_START
    version_current = SI_VERSION_CURRENT

    def file_name(self, name: str) -> str:
        return f"{name}.{self.extension}"

    def read(self, directory: Directory, name: str, segment_id: bytes) -> SegmentInfo:
        data = directory.read_file(self.file_name(name))
        return self.parse(data, name, segment_id)

    def parse(self, data: bytes, name: str, segment_id: bytes) -> SegmentInfo:
        """Decode descriptor bytes already loaded into memory."""
        cursor = ByteCursor(data)
        check_index_header(
            cursor,
            self.codec,
            self.version_start,
            self.version_current,
            expected_id=segment_id,
            expected_suffix="",
        )

        version = read_le_version_triple(cursor)
        min_version = self._read_min_version(cursor)
        doc_count = cursor.read_u32_le()
        is_compound_file = cursor.read_u8() == SEGMENT_YES

        diagnostics = read_map(cursor)
        files = read_set(cursor)
        attributes = read_map(cursor)
        sort_fields = read_list(cursor)

        logger.debug(
            "Segment %s: version %s, %d docs, compound=%s, %d files",
            name, version, doc_count, is_compound_file, len(files),
        )

        return SegmentInfo(
            name=name,
            id=segment_id,
            version=version,
            min_version=min_version,
            doc_count=doc_count,
            is_compound_file=is_compound_file,
            diagnostics=diagnostics,
            files=files,
            attributes=attributes,
            sort_fields=sort_fields,
        )

    @staticmethod
    def _read_min_version(cursor: ByteCursor) -> Version | None:
        has_min_version = cursor.read_u8()
        if has_min_version == 0:
            return None
        if has_min_version == 1:
            return read_le_version_triple(cursor)
        raise CorruptSegment(f"Bad has_min_version flag {has_min_version}")


class SegmentInfoFormatRegistry:
    """Codec name -> SegmentInfoFormat, with a fallback for unknown names."""

    def __init__(self, default: SegmentInfoFormat) -> None:
        self._formats: dict[str, SegmentInfoFormat] = {}
        self.default = default

    def register(self, codec_names: str | Iterable[str], fmt: SegmentInfoFormat) -> None:
        if isinstance(codec_names, str):
            codec_names = [codec_names]
        for codec_name in codec_names:
            self._formats[codec_name] = fmt

    def __contains__(self, codec_name: str) -> bool:
        return codec_name in self._formats

    @property
    def codec_names(self) -> list[str]:
        return sorted(self._formats)

    def get(self, codec_name: str) -> SegmentInfoFormat:
        fmt = self._formats.get(codec_name)
        if fmt is None:
            logger.warning("Unknown codec %r, reading segment info with the default format", codec_name)
            return self.default
        return fmt


def default_registry() -> SegmentInfoFormatRegistry:
    fmt = Lucene90SegmentInfoFormat()
    registry = SegmentInfoFormatRegistry(default=fmt)
    registry.register(LUCENE90_FAMILY_CODECS, fmt)
    return registry
