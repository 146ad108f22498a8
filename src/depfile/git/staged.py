"""Turn staged git changes into dependency file records."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Sequence

from depfile.files.loader import encode_content, is_support_path
from depfile.files.models import ContentEncoding, DependencyFile, FileType, Operation
from depfile.git.adapter import get_index_entry, get_staged_blob, get_staged_changes

_STATUS_OPERATION = {
    "A": Operation.CREATE,
    "D": Operation.DELETE,
}

_MODE_SYMLINK = "120000"
_MODE_GITLINK = "160000"


def _relative_to(path: str, directory: str) -> Optional[str]:
    prefix = directory.strip("/")
    if not prefix:
        return path
    if path.startswith(prefix + "/"):
        return path[len(prefix) + 1:]
    return None


def staged_record(
    repo_root: Path,
    status: str,
    path: str,
    *,
    directory: str = "/",
    name: Optional[str] = None,
    support_file: bool = False,
) -> DependencyFile:
    """Build one record for a staged *path* with git status letter *status*."""
    operation = _STATUS_OPERATION.get(status, Operation.UPDATE)
    name = name if name is not None else path

    if operation is Operation.DELETE:
        return DependencyFile(
            name=name,
            content=None,
            directory=directory,
            support_file=support_file,
            operation=operation,
        )

    entry = get_index_entry(repo_root, path)
    mode, sha = entry if entry else ("100644", "")

    if mode == _MODE_GITLINK:
        # Submodule pointer: no blob, the content is the commit sha
        return DependencyFile(
            name=name,
            content=sha,
            directory=directory,
            type=FileType.SUBMODULE,
            support_file=support_file,
            operation=operation,
        )

    raw = get_staged_blob(repo_root, path)
    if mode == _MODE_SYMLINK:
        return DependencyFile(
            name=name,
            content=None,
            directory=directory,
            type=FileType.SYMLINK,
            support_file=support_file,
            symlink_target=raw.decode("utf-8", errors="surrogateescape"),
            content_encoding=ContentEncoding.UTF_8,
            operation=operation,
        )

    content, encoding = encode_content(raw)
    return DependencyFile(
        name=name,
        content=content,
        directory=directory,
        support_file=support_file,
        content_encoding=encoding,
        operation=operation,
    )


def staged_records(
    repo_root: Path,
    *,
    directory: str = "/",
    support_patterns: Sequence[str] = (),
) -> List[DependencyFile]:
    """Return a record for every staged change under *directory*."""
    records: List[DependencyFile] = []
    for status, path in get_staged_changes(repo_root):
        name = _relative_to(path, directory)
        if name is None:
            continue
        records.append(
            staged_record(
                repo_root,
                status,
                path,
                directory=directory,
                name=name,
                support_file=is_support_path(path, support_patterns),
            )
        )
    return records
