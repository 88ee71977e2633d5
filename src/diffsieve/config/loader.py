"""Load and merge configuration from .diffsieve.toml and env vars."""

from __future__ import annotations

import dataclasses
import math
import os
import re
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from diffsieve.config.schema import (
    OUTPUT_FORMATS,
    DiffSieveConfig,
    OutputConfig,
    ReviewConfig,
)

CONFIG_FILENAME = ".diffsieve.toml"

_LIST_SPLIT_RE = re.compile(r"[,\r\n]+")
_LEADING_INT_RE = re.compile(r"\s*([+-]?\d+)")


class ConfigError(Exception):
    """Raised when config is malformed or unreadable."""


def find_config_file(repo_root: Path, override: Optional[str] = None) -> Optional[Path]:
    """Locate the config file. *override* takes precedence."""
    if override:
        p = Path(override)
        if not p.is_file():
            raise ConfigError(f"Config file not found: {override}")
        return p
    candidate = repo_root / CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def _parse_toml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc


def normalize_string_list(value: Any) -> List[str]:
    """Accept a list of strings or a comma/newline separated string."""
    if isinstance(value, str):
        items: List[Any] = _LIST_SPLIT_RE.split(value)
    elif isinstance(value, (list, tuple)):
        items = [v for v in value if isinstance(v, str)]
    else:
        return []
    return [v.strip() for v in items if v.strip()]


def coerce_int(value: Any, fallback: Optional[int]) -> Optional[int]:
    """Return *value* as an int, or *fallback* when it is not numeric.

    Finite floats are floored; strings are read up to their first
    non-digit, so ``"12abc"`` is 12.
    """
    if isinstance(value, bool):
        return fallback
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return math.floor(value) if math.isfinite(value) else fallback
    if isinstance(value, str):
        m = _LEADING_INT_RE.match(value)
        return int(m.group(1)) if m else fallback
    return fallback


def _build_section(data: Dict[str, Any], cls: type, section: str):
    """Build a dataclass from a TOML section dict, ignoring unknown keys."""
    valid_fields = {f.name for f in dataclasses.fields(cls)}
    filtered = {k: v for k, v in data.get(section, {}).items() if k in valid_fields}
    return cls(**filtered)


def _build_review(data: Dict[str, Any]) -> ReviewConfig:
    raw = data.get("review", {})
    cfg = ReviewConfig()
    if "ignore_patterns" in raw:
        value = raw["ignore_patterns"]
        if isinstance(value, (str, list, tuple)):
            cfg.ignore_patterns = normalize_string_list(value)
    cfg.max_files = coerce_int(raw.get("max_files"), cfg.max_files)  # type: ignore[assignment]
    cfg.batch_size = coerce_int(raw.get("batch_size"), None)
    return cfg


def _build_output(data: Dict[str, Any]) -> OutputConfig:
    cfg = _build_section(data, OutputConfig, "output")
    if cfg.format not in OUTPUT_FORMATS:
        raise ConfigError(
            f"Invalid output format {cfg.format!r}; expected one of {', '.join(OUTPUT_FORMATS)}"
        )
    return cfg


def _merge_env_overrides(cfg: DiffSieveConfig) -> None:
    """Apply DIFFSIEVE_* environment variable overrides."""
    if val := os.environ.get("DIFFSIEVE_IGNORE_PATTERNS"):
        cfg.review.ignore_patterns.extend(normalize_string_list(val))
    if val := os.environ.get("DIFFSIEVE_MAX_FILES"):
        cfg.review.max_files = coerce_int(val, cfg.review.max_files)  # type: ignore[assignment]
    if val := os.environ.get("DIFFSIEVE_BATCH_SIZE"):
        cfg.review.batch_size = coerce_int(val, cfg.review.batch_size)
    if val := os.environ.get("DIFFSIEVE_FORMAT"):
        if val in OUTPUT_FORMATS:
            cfg.output.format = val  # type: ignore[assignment]


def load_config(
    repo_root: Path,
    config_override: Optional[str] = None,
) -> DiffSieveConfig:
    """Load, validate, and return a DiffSieveConfig."""
    config_path = find_config_file(repo_root, config_override)

    if config_path is None:
        cfg = DiffSieveConfig()
    else:
        raw = _parse_toml(config_path)
        cfg = DiffSieveConfig(
            version=str(raw.get("version", "1.0")),
            review=_build_review(raw),
            output=_build_output(raw),
        )

    _merge_env_overrides(cfg)
    return cfg
