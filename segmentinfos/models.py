"""
Decoded commit metadata.

A CommitSnapshot is built once from the bytes of one commit generation and
is never mutated afterwards. Mapping fields are stored as read-only views
over private copies; they take part in equality but not in hashing.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterator, Mapping, NamedTuple

from segmentinfos.filenames import file_name_from_generation
from segmentinfos.layout import NO_GENERATION, SI_EXTENSION


def _frozen_map(obj, name: str, convert=None) -> None:
    items = dict(getattr(obj, name))
    if convert is not None:
        items = {key: convert(value) for key, value in items.items()}
    object.__setattr__(obj, name, MappingProxyType(items))


class Version(NamedTuple):
    """A major.minor.bugfix release triple."""

    major: int
    minor: int
    bugfix: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.bugfix}"


@dataclass(frozen=True)
class SegmentInfo:
    """Contents of one <name>.si descriptor."""

    name: str
    id: bytes
    version: Version
    min_version: Version | None
    doc_count: int
    is_compound_file: bool
    diagnostics: Mapping[str, str] = field(default_factory=dict, hash=False)
    files: frozenset[str] = frozenset()
    attributes: Mapping[str, str] = field(default_factory=dict, hash=False)
    sort_fields: tuple[str, ...] = ()
    codec: str = ""

    def __post_init__(self) -> None:
        _frozen_map(self, "diagnostics")
        _frozen_map(self, "attributes")

    @property
    def si_file_name(self) -> str:
        return f"{self.name}.{SI_EXTENSION}"


@dataclass(frozen=True)
class SegmentCommitInfo:
    """A SegmentInfo plus the per-commit deletion and update bookkeeping."""

    info: SegmentInfo
    del_count: int
    soft_del_count: int
    del_gen: int
    field_infos_gen: int
    dv_gen: int
    sci_id: bytes | None = None
    field_info_files: frozenset[str] = frozenset()
    dv_update_files: Mapping[int, frozenset[str]] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        _frozen_map(self, "dv_update_files", frozenset)

    @property
    def name(self) -> str:
        return self.info.name

    @property
    def live_doc_count(self) -> int:
        return self.info.doc_count - self.del_count - self.soft_del_count

    @property
    def has_deletions(self) -> bool:
        return self.del_gen != NO_GENERATION

    @property
    def has_field_updates(self) -> bool:
        return self.field_infos_gen != NO_GENERATION or self.dv_gen != NO_GENERATION

    def files(self) -> set[str]:
        """Every file this segment references in this commit."""
        result = set(self.info.files)
        result.add(self.info.si_file_name)
        result.update(self.field_info_files)
        for update_files in self.dv_update_files.values():
            result.update(update_files)
        return result


@dataclass(frozen=True)
class CommitSnapshot:
    """The decoded contents of one segments_N commit record."""

    generation: int
    format_version: int
    version: int
    id: bytes
    counter: int
    index_created_version: int
    lucene_version: Version
    min_segment_lucene_version: Version | None
    segments: tuple[SegmentCommitInfo, ...] = ()
    user_data: Mapping[str, str] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        _frozen_map(self, "user_data")

    def __len__(self) -> int:
        return len(self.segments)

    def __iter__(self) -> Iterator[SegmentCommitInfo]:
        return iter(self.segments)

    @property
    def segments_file_name(self) -> str:
        return file_name_from_generation(self.generation)

    @property
    def total_doc_count(self) -> int:
        return sum(sci.info.doc_count for sci in self.segments)

    @property
    def total_deleted_count(self) -> int:
        return sum(sci.del_count for sci in self.segments)

    @property
    def total_soft_deleted_count(self) -> int:
        return sum(sci.soft_del_count for sci in self.segments)

    def get_segment(self, name: str) -> SegmentCommitInfo | None:
        for sci in self.segments:
            if sci.name == name:
                return sci
        return None

    def referenced_files(self) -> set[str]:
        """The commit record itself plus every file its segments reference."""
        result = {self.segments_file_name}
        for sci in self.segments:
            result.update(sci.files())
        return result
