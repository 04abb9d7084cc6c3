"""
SegmentInfos Reader - Decodes the newest commit of an index directory.

Three phases, in order:
  - Generation discovery: pick the highest segments / segments_N in a listing
  - Commit-record validation: header, id, suffix and version provenance
  - Segment enumeration: one .si decode plus commit bookkeeping per segment

Each decode starts from nothing but the chosen commit's bytes and returns a
fresh, immutable CommitSnapshot.
"""

from __future__ import annotations

import dataclasses
import logging
from pathlib import Path

from segmentinfos.codec import (
    read_id,
    read_map,
    read_set,
    read_string,
    read_varint,
    read_varlong,
    read_version_triple,
)
from segmentinfos.config import DEFAULT_CONFIG, DecoderConfig
from segmentinfos.cursor import ByteCursor
from segmentinfos.directory import Directory, FSDirectory
from segmentinfos.errors import (
    CorruptedIndex,
    HeaderError,
    IndexFormatTooOld,
    translate_header_error,
)
from segmentinfos.filenames import (
    file_name_from_generation,
    generation_from_file_name,
    generation_suffix,
    is_commit_file_name,
    last_commit_generation,
)
from segmentinfos.header import check_header_no_magic, check_header_suffix, check_magic
from segmentinfos.layout import (
    SEGMENTS_CODEC,
    SEGMENTS_VERSION_CURRENT,
    SEGMENTS_VERSION_START,
)
from segmentinfos.models import CommitSnapshot, SegmentCommitInfo
from segmentinfos.segment_info import SegmentInfoFormatRegistry, default_registry

logger = logging.getLogger(__name__)

__all__ = [
    "SegmentInfosReader",
    "file_name_from_generation",
    "generation_from_file_name",
    "is_commit_file_name",
    "last_commit_generation",
    "read_commit",
    "read_latest_commit",
]


# =============================================================================
# Commit decoding
# =============================================================================

class SegmentInfosReader:
    """
    Reads commit records from a Directory.

    Usage:
        # Newest commit, or None for an empty index
        snapshot = SegmentInfosReader.open("/path/to/index").read_latest()

        # A specific generation over any byte source
        reader = SegmentInfosReader(MemoryDirectory(files))
        snapshot = reader.read_commit(3)
    """

    def __init__(
        self,
        directory: Directory,
        config: DecoderConfig | None = None,
        registry: SegmentInfoFormatRegistry | None = None,
    ) -> None:
        self.directory = directory
        self.config = config or DEFAULT_CONFIG
        self.registry = registry or default_registry()

    @classmethod
    def open(cls, path: str | Path, config: DecoderConfig | None = None) -> SegmentInfosReader:
        """Build a reader over an index folder on disk."""
        config = config or DEFAULT_CONFIG
        return cls(FSDirectory(path, max_file_bytes=config.max_file_bytes), config=config)

    def latest_generation(self) -> int | None:
        return last_commit_generation(self.directory.list_all())

    def read_latest(self) -> CommitSnapshot | None:
        """Decode the newest commit, or return None when no commit exists."""
        generation = self.latest_generation()
        if generation is None:
            logger.info("No commit found in %r", self.directory)
            return None
        return self.read_commit(generation)

    def read_commit(self, generation: int) -> CommitSnapshot:
        file_name = file_name_from_generation(generation)
        logger.debug("Reading commit generation %d from %s", generation, file_name)
        data = self.directory.read_file(file_name)
        return self.parse(data, generation)

    def parse(self, data: bytes, generation: int) -> CommitSnapshot:
        """Decode commit record bytes. Segment descriptors come from the directory."""
        cursor = ByteCursor(data)

        try:
            check_magic(cursor)
            format_version = check_header_no_magic(
                cursor, SEGMENTS_CODEC, SEGMENTS_VERSION_START, SEGMENTS_VERSION_CURRENT
            )
            commit_id = read_id(cursor)
            # suffix must equal the generation in the file name
            check_header_suffix(cursor, generation_suffix(generation))
        except HeaderError as exc:
            raise translate_header_error(exc) from exc
        logger.debug("Commit format version %d, id %s", format_version, commit_id.hex())

        lucene_version = read_version_triple(cursor)
        index_created_version = read_varint(cursor)
        if lucene_version.major < index_created_version:
            raise CorruptedIndex(
                f"Commit written by {lucene_version} but index created by major "
                f"{index_created_version}"
            )
        if index_created_version < self.config.min_index_created_major:
            raise IndexFormatTooOld(
                f"Index created by major {index_created_version}, oldest supported is "
                f"{self.config.min_index_created_major}"
            )

        version = cursor.read_u64_be()
        counter = read_varlong(cursor)
        segment_count = cursor.read_u32_be()
        min_segment_lucene_version = read_version_triple(cursor) if segment_count > 0 else None

        segments = []
        seen_ids: set[bytes] = set()
        for _ in range(segment_count):
            sci = self._read_segment(cursor, format_version)
            if sci.info.id in seen_ids:
                raise CorruptedIndex(f"Duplicate segment id {sci.info.id.hex()} for segment {sci.name}")
            seen_ids.add(sci.info.id)
            segments.append(sci)

        user_data = read_map(cursor)
        self._check_trailer(cursor)

        return CommitSnapshot(
            generation=generation,
            format_version=format_version,
            version=version,
            id=commit_id,
            counter=counter,
            index_created_version=index_created_version,
            lucene_version=lucene_version,
            min_segment_lucene_version=min_segment_lucene_version,
            segments=tuple(segments),
            user_data=user_data,
        )

    def _read_segment(self, cursor: ByteCursor, format_version: int) -> SegmentCommitInfo:
        name = read_string(cursor)
        segment_id = read_id(cursor)
        codec_name = read_string(cursor)

        fmt = self.registry.get(codec_name)
        try:
            info = fmt.read(self.directory, name, segment_id)
        except HeaderError as exc:
            raise translate_header_error(exc) from exc
        info = dataclasses.replace(info, codec=codec_name)

        del_gen = cursor.read_i64_be()
        del_count = cursor.read_u32_be()
        field_infos_gen = cursor.read_i64_be()
        dv_gen = cursor.read_i64_be()
        soft_del_count = cursor.read_u32_be()
        sci_id = self._read_sci_id(cursor, format_version)
        field_info_files = read_set(cursor)

        dv_update_files: dict[int, frozenset[str]] = {}
        for _ in range(cursor.read_u32_be()):
            field_number = cursor.read_u32_be()
            dv_update_files[field_number] = read_set(cursor)

        logger.debug(
            "Segment %s (%s): del_gen=%d del_count=%d soft_del_count=%d",
            name, codec_name, del_gen, del_count, soft_del_count,
        )

        return SegmentCommitInfo(
            info=info,
            del_count=del_count,
            soft_del_count=soft_del_count,
            del_gen=del_gen,
            field_infos_gen=field_infos_gen,
            dv_gen=dv_gen,
            sci_id=sci_id,
            field_info_files=field_info_files,
            dv_update_files=dv_update_files,
        )

    @staticmethod
    def _read_sci_id(cursor: ByteCursor, format_version: int) -> bytes | None:
        if format_version <= SEGMENTS_VERSION_START:
            return None
        marker = cursor.read_u8()
        if marker == 0:
            return None
        if marker == 1:
            return read_id(cursor)
        raise CorruptedIndex(f"Bad segment commit id marker {marker}")

    def _check_trailer(self, cursor: ByteCursor) -> None:
        # The footer checksum itself is not verified; only its size is.
        remaining = cursor.remaining()
        logger.debug("Trailer: %d byte(s) after user data", remaining)
        if not self.config.strict_trailer:
            return
        if remaining not in (0, self.config.footer_length):
            raise CorruptedIndex(
                f"{remaining} unexpected byte(s) after commit data "
                f"(expected 0 or a {self.config.footer_length}-byte footer)"
            )


# =============================================================================
# Convenience entry points
# =============================================================================

def _as_reader(source: str | Path | Directory, config: DecoderConfig | None) -> SegmentInfosReader:
    if isinstance(source, (str, Path)):
        return SegmentInfosReader.open(source, config=config)
    return SegmentInfosReader(source, config=config)


def read_latest_commit(
    source: str | Path | Directory,
    config: DecoderConfig | None = None,
) -> CommitSnapshot | None:
    """Decode the newest commit under a path or Directory. None means no commit."""
    return _as_reader(source, config).read_latest()


def read_commit(
    source: str | Path | Directory,
    generation: int,
    config: DecoderConfig | None = None,
) -> CommitSnapshot:
    return _as_reader(source, config).read_commit(generation)
