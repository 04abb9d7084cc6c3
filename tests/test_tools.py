"""
Tooling Tests - Integrity checks, reports, configuration, byte sources and CLI.
"""

import json
import tempfile
from pathlib import Path

import pytest

from helpers import SegmentEntry, commit_bytes, make_id, si_bytes, write_index

from segmentinfos.cli import main
from segmentinfos.config import DEFAULT_CONFIG, DecoderConfig, apply_overrides, load_config_file
from segmentinfos.directory import FSDirectory, MemoryDirectory, find_index_dir
from segmentinfos.errors import IndexFileNotFound, IndexFileTooLarge
from segmentinfos.integrity import check_consistency, fingerprint, verify_integrity
from segmentinfos.models import CommitSnapshot, SegmentCommitInfo, SegmentInfo, Version
from segmentinfos.reader import read_latest_commit
from segmentinfos.report import build_report, format_text, to_json


@pytest.fixture
def index_dir():
    with tempfile.TemporaryDirectory() as tmp:
        yield Path(tmp)


def _sci(name, seed, doc_count=10, del_count=0, soft_del_count=0, version=Version(9, 8, 0)):
    info = SegmentInfo(
        name=name,
        id=make_id(seed),
        version=version,
        min_version=None,
        doc_count=doc_count,
        is_compound_file=False,
    )
    return SegmentCommitInfo(
        info=info,
        del_count=del_count,
        soft_del_count=soft_del_count,
        del_gen=-1,
        field_infos_gen=-1,
        dv_gen=-1,
    )


def _snapshot(*segments, generation=1, version=5):
    return CommitSnapshot(
        generation=generation,
        format_version=10,
        version=version,
        id=make_id(100),
        counter=len(segments),
        index_created_version=9,
        lucene_version=Version(9, 8, 0),
        min_segment_lucene_version=Version(9, 8, 0) if segments else None,
        segments=tuple(segments),
    )


# =============================================================================
# Integrity
# =============================================================================

class TestIntegrity:

    def test_clean_snapshot(self):
        snapshot = _snapshot(_sci("_0", 1, 10, 2, 3), _sci("_1", 2))
        assert check_consistency(snapshot) == []
        assert verify_integrity(snapshot) is True

    def test_over_deleted_segment(self):
        snapshot = _snapshot(_sci("_0", 1, doc_count=10, del_count=6, soft_del_count=5))
        problems = check_consistency(snapshot)
        assert len(problems) == 1
        assert "exceeds doc_count 10" in problems[0]
        assert verify_integrity(snapshot) is False

    def test_deletes_equal_to_doc_count_are_fine(self):
        snapshot = _snapshot(_sci("_0", 1, doc_count=10, del_count=6, soft_del_count=4))
        assert verify_integrity(snapshot)

    def test_duplicate_ids_and_names(self):
        snapshot = _snapshot(_sci("_0", 1), _sci("_0", 1))
        problems = check_consistency(snapshot)
        assert any("appears 2 times" in p and "segment id" in p for p in problems)
        assert any("segment name _0 appears 2 times" in p for p in problems)

    def test_segment_older_than_commit_minimum(self):
        snapshot = _snapshot(_sci("_0", 1, version=Version(9, 7, 0)))
        problems = check_consistency(snapshot)
        assert problems == ["segment _0: version 9.7.0 is older than commit minimum 9.8.0"]

    def test_fingerprint(self):
        a = _snapshot(_sci("_0", 1))
        b = _snapshot(_sci("_0", 1), _sci("_1", 2))
        c = _snapshot(_sci("_0", 1), generation=2)
        assert fingerprint(a) == fingerprint(b)
        assert fingerprint(a) != fingerprint(c)
        assert len(fingerprint(a)) == 16


# =============================================================================
# Report
# =============================================================================

class TestReport:

    def test_totals(self):
        snapshot = _snapshot(_sci("_0", 1, 10, 1, 2), _sci("_1", 2, 30, 3, 0))
        report = build_report(snapshot, "/data/index")
        assert report["index_path"] == "/data/index"
        assert report["segments_file"] == "segments_1"
        assert report["total_segments"] == 2
        assert report["total_docs"] == 40
        assert report["total_deleted_docs"] == 4
        assert report["total_soft_deleted_docs"] == 2
        assert report["id"] == make_id(100).hex()
        assert report["segments"][0]["live_doc_count"] == 7
        assert report["segments"][1]["sci_id"] is None

    def test_json_round_trip(self, index_dir):
        write_index(index_dir, generation=2, segment_names=("_0", "_1"), user_data={"a": "b"})
        snapshot = read_latest_commit(index_dir)
        parsed = json.loads(to_json(build_report(snapshot)))
        assert parsed["generation"] == 2
        assert parsed["lucene_version"] == "9.8.0"
        assert parsed["user_data"] == {"a": "b"}
        assert [s["name"] for s in parsed["segments"]] == ["_0", "_1"]
        assert parsed["segments"][0]["files"] == ["_0.cfe", "_0.cfs", "_0.si"]

    def test_text_listing(self):
        text = format_text(_snapshot(_sci("_0", 1), _sci("_1", 2)))
        assert text.startswith("segments_1: generation 1")
        assert "_0" in text
        assert "_1" in text


# =============================================================================
# Configuration
# =============================================================================

class TestConfig:

    def test_defaults(self):
        assert DEFAULT_CONFIG.footer_length == 16
        assert DEFAULT_CONFIG.min_index_created_major == 9
        assert DEFAULT_CONFIG.strict_trailer is True

    def test_load_file(self, index_dir):
        path = index_dir / "decoder.toml"
        path.write_text("[decoder]\nmax_file_bytes = 1024\nstrict_trailer = false\n")
        config = load_config_file(path)
        assert config.max_file_bytes == 1024
        assert config.strict_trailer is False
        assert config.footer_length == 16

    def test_missing_table_gives_defaults(self, index_dir):
        path = index_dir / "decoder.toml"
        path.write_text("[other]\nx = 1\n")
        assert load_config_file(path) == DEFAULT_CONFIG

    def test_unknown_key(self, index_dir):
        path = index_dir / "decoder.toml"
        path.write_text("[decoder]\nmax_bytes = 1\n")
        with pytest.raises(ValueError, match="Unknown decoder config key"):
            load_config_file(path)

    def test_wrong_types(self):
        with pytest.raises(ValueError, match="must be int"):
            apply_overrides(DEFAULT_CONFIG, {"footer_length": True})
        with pytest.raises(ValueError, match="must be bool"):
            apply_overrides(DEFAULT_CONFIG, {"strict_trailer": 1})

    def test_invalid_values(self):
        with pytest.raises(ValueError):
            DecoderConfig(max_file_bytes=0)


# =============================================================================
# Byte sources
# =============================================================================

class TestDirectories:

    def test_fs_directory_lists_files_only(self, index_dir):
        (index_dir / "segments_1").write_bytes(b"x")
        (index_dir / "sub").mkdir()
        assert FSDirectory(index_dir).list_all() == ["segments_1"]

    def test_fs_directory_reads_whole_file(self, index_dir):
        (index_dir / "_0.si").write_bytes(b"abc")
        assert FSDirectory(index_dir).read_file("_0.si") == b"abc"

    def test_fs_directory_missing_file(self, index_dir):
        with pytest.raises(IndexFileNotFound):
            FSDirectory(index_dir).read_file("segments_9")

    def test_fs_directory_size_limit(self, index_dir):
        (index_dir / "big").write_bytes(b"x" * 100)
        with pytest.raises(IndexFileTooLarge, match="exceeds maximum"):
            FSDirectory(index_dir, max_file_bytes=50).read_file("big")

    def test_memory_directory(self):
        directory = MemoryDirectory({"b": b"2", "a": b"1"})
        assert directory.list_all() == ["a", "b"]
        assert directory.read_file("a") == b"1"
        with pytest.raises(IndexFileNotFound):
            directory.read_file("c")

    def test_find_index_dir(self, index_dir):
        nested = index_dir / "archive" / "shard0" / "index"
        nested.mkdir(parents=True)
        (index_dir / "archive" / "README").write_text("x")
        write_index(nested, generation=1)
        assert find_index_dir(index_dir) == nested

    def test_find_index_dir_ignores_segments_gen(self, index_dir):
        (index_dir / "segments.gen").write_bytes(b"")
        assert find_index_dir(index_dir) is None


# =============================================================================
# CLI
# =============================================================================

class TestCli:

    def test_text_output(self, index_dir, capsys):
        write_index(index_dir, generation=1, segment_names=("_0", "_1"))
        assert main([str(index_dir)]) == 0
        out = capsys.readouterr().out
        assert "segments_1" in out
        assert "_1" in out

    def test_json_output(self, index_dir, capsys):
        write_index(index_dir, generation=1)
        assert main([str(index_dir), "--json"]) == 0
        report = json.loads(capsys.readouterr().out)
        assert report["total_segments"] == 1

    def test_no_commit(self, index_dir, capsys):
        assert main([str(index_dir)]) == 0
        assert "No commit found" in capsys.readouterr().out

    def test_corrupt_index(self, index_dir, capsys):
        (index_dir / "segments_1").write_bytes(b"\x00\x01")
        assert main([str(index_dir)]) == 1
        assert "UnexpectedEof" in capsys.readouterr().err

    def test_find(self, index_dir, capsys):
        nested = index_dir / "data" / "index"
        nested.mkdir(parents=True)
        write_index(nested, generation=2)
        assert main([str(index_dir), "--find"]) == 0
        assert "segments_2" in capsys.readouterr().out

    def test_check_reports_problems(self, index_dir, capsys):
        segment_id = make_id(1)
        (index_dir / "_0.si").write_bytes(si_bytes(segment_id, doc_count=3))
        entry = SegmentEntry(name="_0", segment_id=segment_id, del_count=2, soft_del_count=2)
        (index_dir / "segments_1").write_bytes(commit_bytes(1, [entry]))
        assert main([str(index_dir), "--check"]) == 1
        assert "exceeds doc_count 3" in capsys.readouterr().err

    def test_lenient_trailer_flag(self, index_dir):
        write_index(index_dir, generation=1)
        path = index_dir / "segments_1"
        path.write_bytes(path.read_bytes() + b"\x00\x00")
        assert main([str(index_dir)]) == 1
        assert main([str(index_dir), "--lenient-trailer"]) == 0

    def test_bad_config_file(self, index_dir, capsys):
        config = index_dir / "bad.toml"
        config.write_text("[decoder]\nnope = 1\n")
        assert main([str(index_dir), "--config", str(config)]) == 2
        assert "bad configuration" in capsys.readouterr().err
