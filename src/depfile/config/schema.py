"""Configuration schema — dataclasses for every config section."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal

OutputFormat = Literal["terminal", "json", "yaml"]

OUTPUT_FORMATS = ("terminal", "json", "yaml")


@dataclass
class FilesConfig:
    directory: str = "/"
    max_file_size_kb: int = 1024
    support_patterns: List[str] = field(default_factory=list)  # fnmatch globs


@dataclass
class OutputConfig:
    format: OutputFormat = "terminal"
    show_summary: bool = True


@dataclass
class DepfileConfig:
    version: str = "1.0"
    files: FilesConfig = field(default_factory=FilesConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
