"""
Test-only encoder for commit records and segment descriptors.

Builds the byte layouts the reader expects so tests can write small indexes
to a temporary directory.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from pathlib import Path

MAGIC = 0x3FD76C17
FOOTER = struct.pack(">II", 0xC02893E8, 0) + struct.pack(">q", 0)


def make_id(seed: int) -> bytes:
    return bytes((seed + i) % 256 for i in range(16))


def vint(value: int) -> bytes:
    out = bytearray()
    while True:
        b = value & 0x7F
        value >>= 7
        if value:
            out.append(b | 0x80)
        else:
            out.append(b)
            return bytes(out)


def string(text: str) -> bytes:
    raw = text.encode("utf-8")
    return vint(len(raw)) + raw


def string_map(mapping: dict[str, str]) -> bytes:
    out = vint(len(mapping))
    for key, value in mapping.items():
        out += string(key) + string(value)
    return out


def string_seq(values) -> bytes:
    values = list(values)
    out = vint(len(values))
    for value in values:
        out += string(value)
    return out


def u32(value: int) -> bytes:
    return struct.pack(">I", value)


def u32le(value: int) -> bytes:
    return struct.pack("<I", value)


def i64(value: int) -> bytes:
    return struct.pack(">q", value)


def u64(value: int) -> bytes:
    return struct.pack(">Q", value)


def header(codec: str, version: int, magic: int = MAGIC) -> bytes:
    return u32(magic) + string(codec) + u32(version)


def suffix(text: str) -> bytes:
    raw = text.encode("utf-8")
    return bytes([len(raw)]) + raw


def si_bytes(
    segment_id: bytes,
    version: tuple[int, int, int] = (9, 8, 0),
    min_version: tuple[int, int, int] | None = (9, 8, 0),
    doc_count: int = 10,
    compound: bool = True,
    diagnostics: dict[str, str] | None = None,
    files: list[str] | None = None,
    attributes: dict[str, str] | None = None,
    sort_fields: list[str] | None = None,
    codec: str = "Lucene90SegmentInfo",
    header_version: int = 0,
    header_id: bytes | None = None,
    header_suffix: str = "",
    has_min_flag: int | None = None,
) -> bytes:
    out = header(codec, header_version)
    out += header_id if header_id is not None else segment_id
    out += suffix(header_suffix)
    out += b"".join(u32le(v) for v in version)
    if has_min_flag is not None:
        out += bytes([has_min_flag])
    elif min_version is None:
        out += b"\x00"
    else:
        out += b"\x01"
    if min_version is not None and has_min_flag in (None, 1):
        out += b"".join(u32le(v) for v in min_version)
    out += u32le(doc_count)
    out += b"\x01" if compound else b"\xff"
    out += string_map(diagnostics if diagnostics is not None else {"source": "flush", "os": "Linux"})
    out += string_seq(files if files is not None else ["_0.cfs", "_0.cfe", "_0.si"])
    out += string_map(attributes if attributes is not None else {})
    out += string_seq(sort_fields if sort_fields is not None else [])
    out += FOOTER
    return out


@dataclass
class SegmentEntry:
    name: str
    segment_id: bytes
    codec: str = "Lucene99"
    del_gen: int = -1
    del_count: int = 0
    field_infos_gen: int = -1
    dv_gen: int = -1
    soft_del_count: int = 0
    sci_marker: int = 1
    sci_id: bytes | None = None
    field_info_files: list[str] = field(default_factory=list)
    dv_update_files: dict[int, list[str]] = field(default_factory=dict)

    def encode(self, format_version: int) -> bytes:
        out = string(self.name) + self.segment_id + string(self.codec)
        out += i64(self.del_gen) + u32(self.del_count)
        out += i64(self.field_infos_gen) + i64(self.dv_gen)
        out += u32(self.soft_del_count)
        if format_version > 9:
            out += bytes([self.sci_marker])
            if self.sci_marker == 1:
                out += self.sci_id if self.sci_id is not None else make_id(200)
        out += string_seq(self.field_info_files)
        out += u32(len(self.dv_update_files))
        for field_number, files in self.dv_update_files.items():
            out += u32(field_number) + string_seq(files)
        return out


def commit_bytes(
    generation: int,
    segments: list[SegmentEntry],
    format_version: int = 10,
    commit_id: bytes | None = None,
    lucene_version: tuple[int, int, int] = (9, 8, 0),
    index_created_version: int = 9,
    version: int = 42,
    counter: int = 1,
    min_segment_version: tuple[int, int, int] = (9, 8, 0),
    user_data: dict[str, str] | None = None,
    header_suffix: str | None = None,
    codec: str = "segments",
    magic: int = MAGIC,
    trailer: bytes = FOOTER,
) -> bytes:
    out = header(codec, format_version, magic=magic)
    out += commit_id if commit_id is not None else make_id(100)
    if header_suffix is None:
        header_suffix = "" if generation == 0 else str(generation)
    out += suffix(header_suffix)
    out += b"".join(vint(v) for v in lucene_version)
    out += vint(index_created_version)
    out += u64(version)
    out += vint(counter)
    out += u32(len(segments))
    if segments:
        out += b"".join(vint(v) for v in min_segment_version)
    for entry in segments:
        out += entry.encode(format_version)
    out += string_map(user_data if user_data is not None else {})
    out += trailer
    return out


def commit_file_name(generation: int) -> str:
    return "segments" if generation == 0 else f"segments_{generation}"


def write_index(
    path: Path,
    generation: int = 0,
    segment_names: tuple[str, ...] = ("_0",),
    **commit_kwargs,
) -> dict[str, bytes]:
    """Write a well-formed commit plus one .si per segment. Returns name -> bytes."""
    files: dict[str, bytes] = {}
    entries = []
    for i, name in enumerate(segment_names):
        segment_id = make_id(i + 1)
        files[f"{name}.si"] = si_bytes(
            segment_id,
            doc_count=10 * (i + 1),
            files=[f"{name}.cfs", f"{name}.cfe", f"{name}.si"],
        )
        entries.append(SegmentEntry(name=name, segment_id=segment_id))
    files[commit_file_name(generation)] = commit_bytes(generation, entries, **commit_kwargs)
    for name, data in files.items():
        (path / name).write_bytes(data)
    return files
