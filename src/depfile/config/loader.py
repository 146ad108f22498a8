"""Load and merge configuration from .depfile.toml and env vars."""

from __future__ import annotations

import dataclasses
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from depfile.config.schema import OUTPUT_FORMATS, DepfileConfig, FilesConfig, OutputConfig
from depfile.errors import ConfigurationError

CONFIG_FILENAME = ".depfile.toml"


class ConfigError(ConfigurationError):
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


def _build_section(data: Dict[str, Any], cls: type, section: str):
    """Build a dataclass from a TOML section dict, ignoring unknown keys."""
    raw = data.get(section, {})
    if not isinstance(raw, dict):
        raise ConfigError(f"[{section}] must be a table")
    valid_fields = {f.name for f in dataclasses.fields(cls)}
    filtered = {k: v for k, v in raw.items() if k in valid_fields}
    return cls(**filtered)


def _merge_env_overrides(cfg: DepfileConfig) -> None:
    """Apply DEPFILE_* environment variable overrides."""
    if val := os.environ.get("DEPFILE_FORMAT"):
        if val in OUTPUT_FORMATS:
            cfg.output.format = val  # type: ignore[assignment]
    if val := os.environ.get("DEPFILE_DIRECTORY"):
        cfg.files.directory = val
    if val := os.environ.get("DEPFILE_MAX_FILE_SIZE_KB"):
        try:
            cfg.files.max_file_size_kb = int(val)
        except ValueError:
            pass


def _validate(cfg: DepfileConfig) -> None:
    if cfg.output.format not in OUTPUT_FORMATS:
        raise ConfigError(
            f"Invalid output format {cfg.output.format!r} "
            f"(expected one of: {', '.join(OUTPUT_FORMATS)})"
        )
    if cfg.files.max_file_size_kb <= 0:
        raise ConfigError("files.max_file_size_kb must be positive")


def load_config(
    repo_root: Path,
    config_override: Optional[str] = None,
) -> DepfileConfig:
    """Load, validate, and return a DepfileConfig."""
    config_path = find_config_file(repo_root, config_override)

    if config_path is None:
        cfg = DepfileConfig()
    else:
        raw = _parse_toml(config_path)
        cfg = DepfileConfig(
            version=raw.get("version", "1.0"),
            files=_build_section(raw, FilesConfig, "files"),
            output=_build_section(raw, OutputConfig, "output"),
        )

    _merge_env_overrides(cfg)
    _validate(cfg)
    return cfg
