"""Shared test fixtures — sample records, temp git repos."""

from __future__ import annotations

import base64
import subprocess
from pathlib import Path

import pytest

from depfile.files.models import DependencyFile


def _git(args, cwd: Path) -> None:
    subprocess.run(["git", *args], cwd=cwd, capture_output=True, check=True)


@pytest.fixture
def manifest() -> DependencyFile:
    """A plain manifest update."""
    return DependencyFile(
        name="package.json",
        content='{"dependencies": {"left-pad": "1.3.0"}}\n',
        directory="/frontend",
    )


@pytest.fixture
def lockfile() -> DependencyFile:
    """A lockfile carried along for context only."""
    return DependencyFile(
        name="package-lock.json",
        content='{"lockfileVersion": 3}\n',
        directory="/frontend",
        support_file=True,
    )


@pytest.fixture
def binary_file() -> DependencyFile:
    """A base64-encoded vendored archive."""
    return DependencyFile(
        name="vendor/cache/rake-13.0.6.gem",
        content=base64.b64encode(b"\x00\x01gem\xff").decode("ascii"),
        content_encoding="base64",
        operation="create",
    )


@pytest.fixture
def symlink_file() -> DependencyFile:
    return DependencyFile(
        name="Gemfile",
        content="source 'https://rubygems.org'\n",
        type="symlink",
        symlink_target="../shared/Gemfile",
    )


@pytest.fixture
def tmp_git_repo(tmp_path: Path) -> Path:
    """Create a temporary git repository for integration tests."""
    _git(["init", str(tmp_path)], cwd=tmp_path)
    _git(["config", "user.email", "test@test.com"], cwd=tmp_path)
    _git(["config", "user.name", "Test"], cwd=tmp_path)
    _git(["config", "core.autocrlf", "false"], cwd=tmp_path)
    # Initial commit
    (tmp_path / "README.md").write_text("# Test\n")
    (tmp_path / "Gemfile").write_text("source 'https://rubygems.org'\ngem 'rake'\n")
    _git(["add", "."], cwd=tmp_path)
    _git(["commit", "-m", "init"], cwd=tmp_path)
    return tmp_path


@pytest.fixture
def git():
    """Run git commands in a repo: ``git(repo, "add", "x")``."""
    def run(repo: Path, *args: str) -> None:
        _git(list(args), cwd=repo)
    return run
