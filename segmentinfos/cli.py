"""Print the newest commit of a Lucene index directory."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from segmentinfos.config import DEFAULT_CONFIG, DecoderConfig, apply_overrides, load_config_file
from segmentinfos.directory import find_index_dir
from segmentinfos.errors import SegmentInfosError
from segmentinfos.integrity import check_consistency
from segmentinfos.reader import SegmentInfosReader
from segmentinfos.report import build_report, format_text, to_json

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="segmentinfos", description=__doc__)
    parser.add_argument("path", type=Path, help="Index directory (or a tree containing one with --find).")
    parser.add_argument(
        "--find",
        action="store_true",
        help="Search below PATH for the first directory holding a commit record.",
    )
    parser.add_argument("--json", action="store_true", help="Print a JSON report instead of text.")
    parser.add_argument(
        "--check",
        action="store_true",
        help="Run consistency checks and exit 1 if any fail.",
    )
    parser.add_argument("--config", type=Path, default=None, help="TOML file with a [decoder] table.")
    parser.add_argument(
        "--max-file-bytes",
        type=int,
        default=None,
        help="Refuse to read files larger than this.",
    )
    parser.add_argument(
        "--lenient-trailer",
        action="store_true",
        help="Do not fail on unexpected bytes after the commit data.",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: WARNING).",
    )
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> DecoderConfig:
    config = load_config_file(args.config) if args.config else DEFAULT_CONFIG
    overrides: dict[str, object] = {"max_file_bytes": args.max_file_bytes}
    if args.lenient_trailer:
        overrides["strict_trailer"] = False
    return apply_overrides(config, overrides)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        config = build_config(args)
    except (OSError, ValueError) as exc:
        print(f"error: bad configuration: {exc}", file=sys.stderr)
        return 2

    index_path = args.path
    if args.find:
        found = find_index_dir(index_path)
        if found is None:
            print(f"No commit found under {index_path}")
            return 0
        index_path = found

    try:
        snapshot = SegmentInfosReader.open(index_path, config=config).read_latest()
    except (SegmentInfosError, OSError) as exc:
        logger.debug("Decode failed", exc_info=True)
        print(f"error: {type(exc).__name__}: {exc}", file=sys.stderr)
        return 1

    if snapshot is None:
        print(f"No commit found in {index_path}")
        return 0

    if args.json:
        print(to_json(build_report(snapshot, index_path)))
    else:
        print(format_text(snapshot))

    if args.check:
        problems = check_consistency(snapshot)
        for problem in problems:
            print(f"problem: {problem}", file=sys.stderr)
        if problems:
            return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
