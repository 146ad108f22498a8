"""Git interface layer — adapter and staged-change records."""

from depfile.git.adapter import (
    GitError,
    get_index_entry,
    get_repo_root,
    get_staged_blob,
    get_staged_changes,
)
from depfile.git.staged import staged_record, staged_records

__all__ = [
    "GitError",
    "get_index_entry",
    "get_repo_root",
    "get_staged_blob",
    "get_staged_changes",
    "staged_record",
    "staged_records",
]
