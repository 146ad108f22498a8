"""Helpers over lists of pending dependency file changes."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from depfile.files.models import DependencyFile, Operation, clean_path


def deduplicate(records: Iterable[DependencyFile]) -> List[DependencyFile]:
    """Drop records equal to an earlier one, keeping first-seen order.

    Equality ignores ``support_file``, so a file listed both as a support
    file and as an update target collapses to one entry. The surviving
    entry is an update target if either duplicate was.
    """
    merged: Dict[DependencyFile, int] = {}
    result: List[DependencyFile] = []

    for record in records:
        idx = merged.get(record)
        if idx is None:
            merged[record] = len(result)
            result.append(record)
            continue
        existing = result[idx]
        if existing.support_file and not record.support_file:
            result[idx] = record

    return result


def update_targets(records: Iterable[DependencyFile]) -> List[DependencyFile]:
    return [r for r in records if not r.support_file]


def support_files(records: Iterable[DependencyFile]) -> List[DependencyFile]:
    return [r for r in records if r.support_file]


def group_by_operation(
    records: Iterable[DependencyFile],
) -> Dict[Operation, List[DependencyFile]]:
    """Bucket records by operation. Every operation is present as a key."""
    groups: Dict[Operation, List[DependencyFile]] = {op: [] for op in Operation}
    for record in records:
        groups[record.operation].append(record)
    return groups


def find(records: Iterable[DependencyFile], path: str) -> Optional[DependencyFile]:
    """Return the first record whose cleaned path matches *path*."""
    wanted = clean_path("/" + path.lstrip("/"))
    for record in records:
        if record.path == wanted:
            return record
    return None
