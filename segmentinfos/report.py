"""JSON-ready summaries of a decoded commit."""

from __future__ import annotations

import json
from pathlib import Path

from segmentinfos.integrity import fingerprint
from segmentinfos.models import CommitSnapshot, SegmentCommitInfo, Version


def _version_text(version: Version | None) -> str | None:
    return None if version is None else str(version)


def segment_summary(sci: SegmentCommitInfo) -> dict[str, object]:
    info = sci.info
    return {
        "name": info.name,
        "id": info.id.hex(),
        "codec": info.codec,
        "version": str(info.version),
        "min_version": _version_text(info.min_version),
        "doc_count": info.doc_count,
        "live_doc_count": sci.live_doc_count,
        "compound": info.is_compound_file,
        "files": sorted(info.files),
        "diagnostics": dict(sorted(info.diagnostics.items())),
        "attributes": dict(sorted(info.attributes.items())),
        "sort_fields": list(info.sort_fields),
        "del_gen": sci.del_gen,
        "del_count": sci.del_count,
        "field_infos_gen": sci.field_infos_gen,
        "dv_gen": sci.dv_gen,
        "soft_del_count": sci.soft_del_count,
        "sci_id": None if sci.sci_id is None else sci.sci_id.hex(),
        "field_info_files": sorted(sci.field_info_files),
        "dv_update_files": {
            str(field_number): sorted(files)
            for field_number, files in sorted(sci.dv_update_files.items())
        },
    }


def build_report(snapshot: CommitSnapshot, index_path: str | Path | None = None) -> dict[str, object]:
    """Flatten a snapshot into plain JSON types, with totals over all segments."""
    return {
        "index_path": None if index_path is None else str(index_path),
        "segments_file": snapshot.segments_file_name,
        "generation": snapshot.generation,
        "format_version": snapshot.format_version,
        "version": snapshot.version,
        "id": snapshot.id.hex(),
        "fingerprint": fingerprint(snapshot),
        "counter": snapshot.counter,
        "lucene_version": str(snapshot.lucene_version),
        "index_created_version": snapshot.index_created_version,
        "min_segment_lucene_version": _version_text(snapshot.min_segment_lucene_version),
        "total_segments": len(snapshot),
        "total_docs": snapshot.total_doc_count,
        "total_deleted_docs": snapshot.total_deleted_count,
        "total_soft_deleted_docs": snapshot.total_soft_deleted_count,
        "user_data": dict(sorted(snapshot.user_data.items())),
        "segments": [segment_summary(sci) for sci in snapshot.segments],
    }


def to_json(report: dict[str, object], indent: int | None = 2) -> str:
    return json.dumps(report, indent=indent, sort_keys=False)


def format_text(snapshot: CommitSnapshot) -> str:
    """Short human-readable listing, one line per segment."""
    lines = [
        f"{snapshot.segments_file_name}: generation {snapshot.generation}, "
        f"format {snapshot.format_version}, written by {snapshot.lucene_version}, "
        f"created by major {snapshot.index_created_version}",
        f"id {snapshot.id.hex()}  version {snapshot.version}  counter {snapshot.counter}",
        f"{len(snapshot)} segment(s), {snapshot.total_doc_count} docs, "
        f"{snapshot.total_deleted_count} deleted, {snapshot.total_soft_deleted_count} soft-deleted",
    ]
    for sci in snapshot.segments:
        info = sci.info
        lines.append(
            f"  {info.name:<8} {info.codec:<10} v{info.version}  docs={info.doc_count} "
            f"del={sci.del_count} soft_del={sci.soft_del_count} "
            f"compound={'yes' if info.is_compound_file else 'no'} files={len(info.files)}"
        )
    for key, value in sorted(snapshot.user_data.items()):
        lines.append(f"  user_data {key}={value}")
    return "\n".join(lines)
