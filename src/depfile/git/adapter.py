"""Git subprocess wrapper — repo root, staged changes, index blobs."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import List, Optional, Tuple


class GitError(Exception):
    """Raised when git is unavailable or returns an unexpected error."""


def _invoke(args: list[str], cwd: Path, timeout: int) -> subprocess.CompletedProcess:
    try:
        return subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=True,
            timeout=timeout,
        )
    except FileNotFoundError:
        raise GitError("git is not installed or not on PATH")
    except subprocess.TimeoutExpired:
        raise GitError(f"git command timed out after {timeout}s: git {' '.join(args)}")


def _run_git_bytes(args: list[str], cwd: Path, timeout: int = 30) -> bytes:
    """Run a git command and return raw stdout. Raises GitError on failure."""
    result = _invoke(args, cwd, timeout)
    if result.returncode != 0:
        stderr = result.stderr.decode("utf-8", errors="replace").strip()
        raise GitError(f"git error: {stderr or 'exit status ' + str(result.returncode)}")
    return result.stdout


def _run_git(args: list[str], cwd: Path, timeout: int = 30) -> str:
    """Run a git command and return stdout decoded as UTF-8."""
    return _run_git_bytes(args, cwd, timeout).decode("utf-8", errors="replace")


def get_repo_root(cwd: Optional[Path] = None) -> Path:
    """Return the root of the current git repository."""
    cwd = cwd or Path.cwd()
    out = _run_git(["rev-parse", "--show-toplevel"], cwd=cwd)
    return Path(out.strip())


def get_staged_changes(repo_root: Path) -> List[Tuple[str, str]]:
    """Return ``(status, path)`` pairs for staged changes.

    Renames are split into a delete and an add so every path maps to a
    single operation.
    """
    output = _run_git(
        ["diff", "--cached", "--name-status", "--no-renames", "--no-color", "-z"],
        cwd=repo_root,
    )
    fields = [f for f in output.split("\0") if f]
    # -z output alternates: status, path, status, path, ...
    return [(fields[i][0], fields[i + 1]) for i in range(0, len(fields) - 1, 2)]


def get_staged_blob(repo_root: Path, path: str) -> bytes:
    """Return the staged (index) content of *path*."""
    return _run_git_bytes(["show", f":{path}"], cwd=repo_root)


def get_index_entry(repo_root: Path, path: str) -> Optional[Tuple[str, str]]:
    """Return ``(mode, sha)`` for *path* in the index, or None if absent."""
    # -z keeps non-ASCII paths unquoted
    output = _run_git(["ls-files", "-s", "-z", "--", path], cwd=repo_root)
    for entry in output.split("\0"):
        meta, _, entry_path = entry.partition("\t")
        if entry_path != path:
            continue
        mode, sha, _stage = meta.split(" ", 2)
        return mode, sha
    return None
