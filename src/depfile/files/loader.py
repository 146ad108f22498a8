"""Build dependency file records from files in a working tree."""

from __future__ import annotations

import base64
import os
from fnmatch import fnmatch
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from depfile.errors import ConfigurationError
from depfile.files.models import ContentEncoding, DependencyFile, FileType, Operation


def encode_content(raw: bytes) -> Tuple[str, ContentEncoding]:
    """Return *raw* as text when it is clean UTF-8, otherwise as base64."""
    if b"\x00" not in raw:
        try:
            return raw.decode("utf-8"), ContentEncoding.UTF_8
        except UnicodeDecodeError:
            pass
    return base64.b64encode(raw).decode("ascii"), ContentEncoding.BASE64


def is_support_path(path: str, patterns: Sequence[str]) -> bool:
    """True when *path* or its basename matches one of *patterns*."""
    basename = Path(path).name
    return any(fnmatch(basename, pat) or fnmatch(path, pat) for pat in patterns)


def _read_bytes(path: Path, max_size_kb: Optional[int]) -> bytes:
    if max_size_kb is not None:
        size_kb = path.stat().st_size / 1024
        if size_kb > max_size_kb:
            raise ConfigurationError(
                f"{path} is {size_kb:.0f}KB, above the {max_size_kb}KB limit"
            )
    return path.read_bytes()


def load_file(
    repo_root: Path,
    path: str,
    *,
    directory: str = "/",
    support_file: bool = False,
    operation: Union[Operation, str] = Operation.UPDATE,
    max_size_kb: Optional[int] = None,
) -> DependencyFile:
    """Read *path* (relative to *directory* under *repo_root*) into a record."""
    base = repo_root / directory.lstrip("/")
    full_path = base / path

    if operation == Operation.DELETE and not os.path.lexists(full_path):
        return DependencyFile(
            name=path,
            content=None,
            directory=directory,
            support_file=support_file,
            operation=Operation.DELETE,
        )

    if full_path.is_symlink():
        target = os.readlink(full_path)
        content: Optional[str] = None
        encoding = ContentEncoding.UTF_8
        if full_path.is_file():
            content, encoding = encode_content(_read_bytes(full_path, max_size_kb))
        return DependencyFile(
            name=path,
            content=content,
            directory=directory,
            type=FileType.SYMLINK,
            support_file=support_file,
            symlink_target=target,
            content_encoding=encoding,
            operation=operation,
        )

    if not full_path.is_file():
        raise FileNotFoundError(f"No such file: {full_path}")

    content, encoding = encode_content(_read_bytes(full_path, max_size_kb))
    return DependencyFile(
        name=path,
        content=content,
        directory=directory,
        support_file=support_file,
        content_encoding=encoding,
        operation=operation,
    )


def load_files(repo_root: Path, paths: Iterable[str], **kwargs) -> List[DependencyFile]:
    """Load one record per path. Keyword arguments are passed to :func:`load_file`."""
    return [load_file(repo_root, p, **kwargs) for p in paths]
