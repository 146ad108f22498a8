"""JSON / YAML documents holding lists of dependency file records."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List

import yaml

from depfile.errors import ConfigurationError, DecodeError
from depfile.files.models import DependencyFile

DOCUMENT_VERSION = "1.0"
FORMATS = ("json", "yaml")


def to_document(records: Iterable[DependencyFile]) -> Dict[str, Any]:
    """Wrap canonical record maps in a versioned document."""
    return {
        "version": DOCUMENT_VERSION,
        "files": [r.to_dict() for r in records],
    }


def from_document(data: Any) -> List[DependencyFile]:
    """Rebuild records from a parsed document (or a bare list of entries)."""
    if isinstance(data, dict):
        entries = data.get("files")
    else:
        entries = data
    if not isinstance(entries, list):
        raise DecodeError("Expected a 'files' list of dependency file entries")

    records: List[DependencyFile] = []
    for idx, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise DecodeError(f"Entry {idx} is not a mapping")
        try:
            records.append(DependencyFile.from_dict(entry))
        except ConfigurationError as exc:
            raise DecodeError(f"Entry {idx}: {exc}") from exc
    return records


def dumps(records: Iterable[DependencyFile], fmt: str = "json") -> str:
    """Return *records* as a JSON or YAML string."""
    doc = to_document(records)
    if fmt == "json":
        return json.dumps(doc, indent=2)
    if fmt == "yaml":
        return yaml.safe_dump(doc, sort_keys=False, allow_unicode=True)
    raise ValueError(f"Unsupported format: {fmt}")


def loads(text: str, fmt: str = "json") -> List[DependencyFile]:
    """Parse a JSON or YAML document into records."""
    try:
        if fmt == "json":
            data = json.loads(text)
        elif fmt == "yaml":
            data = yaml.safe_load(text)
        else:
            raise ValueError(f"Unsupported format: {fmt}")
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise DecodeError(f"Malformed {fmt} document: {exc}") from exc
    return from_document(data)


def format_for_path(path: Path) -> str:
    return "yaml" if path.suffix in (".yaml", ".yml") else "json"


def load_path(path: Path) -> List[DependencyFile]:
    """Load records from *path*, picking the format from its suffix."""
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise DecodeError(f"{path} is not valid UTF-8: {exc}") from exc
    return loads(text, format_for_path(path))
