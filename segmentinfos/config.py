"""Decoder configuration and TOML loading."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, fields, replace
from pathlib import Path

from segmentinfos.layout import FOOTER_LENGTH, MIN_SUPPORTED_MAJOR

DEFAULT_MAX_FILE_BYTES = 64 * 1024 * 1024


@dataclass(slots=True, frozen=True)
class DecoderConfig:
    """Limits and tolerances applied while decoding a commit."""

    max_file_bytes: int = DEFAULT_MAX_FILE_BYTES
    footer_length: int = FOOTER_LENGTH
    min_index_created_major: int = MIN_SUPPORTED_MAJOR
    strict_trailer: bool = True

    def __post_init__(self) -> None:
        if self.max_file_bytes <= 0:
            raise ValueError("max_file_bytes must be positive.")
        if self.footer_length < 0:
            raise ValueError("footer_length must not be negative.")
        if self.min_index_created_major < 0:
            raise ValueError("min_index_created_major must not be negative.")


DEFAULT_CONFIG = DecoderConfig()


def load_config_file(path: str | Path) -> DecoderConfig:
    """Load a [decoder] table from a TOML file over the defaults."""
    with Path(path).open("rb") as handle:
        payload = tomllib.load(handle)
    table = payload.get("decoder", {})
    if not isinstance(table, dict):
        raise ValueError("Config section 'decoder' must be a table.")
    return apply_overrides(DEFAULT_CONFIG, table)


def apply_overrides(base: DecoderConfig, overrides: dict[str, object]) -> DecoderConfig:
    """Return a copy of base with the given keys replaced, type-checked."""
    known = {f.name: f for f in fields(DecoderConfig)}
    changes: dict[str, object] = {}
    for key, value in overrides.items():
        if key not in known:
            raise ValueError(f"Unknown decoder config key '{key}'.")
        if value is None:
            continue
        expected = bool if key == "strict_trailer" else int
        # bool is an int subclass; reject it for integer keys
        if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
            raise ValueError(f"Config key '{key}' must be {expected.__name__}.")
        changes[key] = value
    return replace(base, **changes)
