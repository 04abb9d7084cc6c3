"""
Commit file names - Mapping between segments_N names and generations.

    segments       <-> 0
    segments_12    <-> 12

Only the canonical spelling of a generation is accepted, so the name chosen
during discovery is always the name that gets opened.
"""

from __future__ import annotations

from typing import Iterable

from segmentinfos.errors import CorruptFileName
from segmentinfos.layout import GENERATION_SEPARATOR, SEGMENTS_FILE_NAME

_GENERATION_PREFIX = SEGMENTS_FILE_NAME + GENERATION_SEPARATOR


def is_commit_file_name(name: str) -> bool:
    """True for "segments" and anything shaped like "segments_<suffix>"."""
    return name == SEGMENTS_FILE_NAME or name.startswith(_GENERATION_PREFIX)


def generation_suffix(generation: int) -> str:
    return "" if generation == 0 else str(generation)


def file_name_from_generation(generation: int) -> str:
    if generation < 0:
        raise ValueError(f"Generation must not be negative, got {generation}")
    if generation == 0:
        return SEGMENTS_FILE_NAME
    return f"{_GENERATION_PREFIX}{generation}"


def generation_from_file_name(name: str) -> int:
    """
    Parse the generation out of a commit file name.

        generation_from_file_name("segments")    -> 0
        generation_from_file_name("segments_12") -> 12
        generation_from_file_name("segments_012") -> CorruptFileName
    """
    if name == SEGMENTS_FILE_NAME:
        return 0
    if not name.startswith(_GENERATION_PREFIX):
        raise CorruptFileName(name)
    suffix = name[len(_GENERATION_PREFIX):]
    if not suffix.isascii() or not suffix.isdigit():
        raise CorruptFileName(name)
    generation = int(suffix)
    # leading zeros and "segments_0" would open a different file
    if file_name_from_generation(generation) != name:
        raise CorruptFileName(name)
    return generation


def last_commit_generation(file_names: Iterable[str]) -> int | None:
    """Highest commit generation in a listing, or None when there is no commit."""
    generations = [generation_from_file_name(name) for name in file_names if is_commit_file_name(name)]
    if not generations:
        return None
    return max(generations)
