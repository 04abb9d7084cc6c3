"""
Byte sources - Where commit and segment files come from.

The decoder only needs two things from storage: the names of the files in an
index directory and the complete bytes of one named file. Files are read whole
and the handle is closed before any decoding starts.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Mapping, Protocol

from segmentinfos.config import DEFAULT_MAX_FILE_BYTES
from segmentinfos.errors import IndexFileNotFound, IndexFileTooLarge
from segmentinfos.filenames import is_commit_file_name

logger = logging.getLogger(__name__)


class Directory(Protocol):
    """Listing plus whole-file reads."""

    def list_all(self) -> list[str]: ...

    def read_file(self, name: str) -> bytes: ...


class FSDirectory:
    """A Directory backed by a folder on the local filesystem."""

    def __init__(self, path: str | Path, max_file_bytes: int = DEFAULT_MAX_FILE_BYTES) -> None:
        self.path = Path(path)
        self.max_file_bytes = max_file_bytes

    def __repr__(self) -> str:
        return f"FSDirectory({str(self.path)!r})"

    def list_all(self) -> list[str]:
        return sorted(entry.name for entry in self.path.iterdir() if entry.is_file())

    def read_file(self, name: str) -> bytes:
        file_path = self.path / name
        logger.debug("Opening %s", file_path)
        try:
            with open(file_path, "rb") as f:
                size = os.fstat(f.fileno()).st_size
                if size > self.max_file_bytes:
                    raise IndexFileTooLarge(
                        f"File {name} is {size} bytes, exceeds maximum of {self.max_file_bytes}"
                    )
                return f.read()
        except FileNotFoundError as exc:
            raise IndexFileNotFound(f"No such index file: {file_path}") from exc


class MemoryDirectory:
    """A Directory over an in-memory mapping of file name to bytes."""

    def __init__(self, files: Mapping[str, bytes] | None = None) -> None:
        self._files = dict(files or {})

    def __repr__(self) -> str:
        return f"MemoryDirectory({len(self._files)} files)"

    def list_all(self) -> list[str]:
        return sorted(self._files)

    def read_file(self, name: str) -> bytes:
        try:
            return self._files[name]
        except KeyError:
            raise IndexFileNotFound(f"No such index file: {name}") from None


def find_index_dir(root: str | Path) -> Path | None:
    """
    Walk a directory tree and return the first folder that holds a commit
    record, or None. Useful when an index was unpacked from an archive.
    """
    root = Path(root)
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        if any(is_commit_file_name(name) for name in filenames):
            logger.debug("Found commit record in %s", dirpath)
            return Path(dirpath)
    return None
