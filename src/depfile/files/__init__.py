"""Dependency file records, loading from disk, and change-set helpers."""

from depfile.files.collection import (
    deduplicate,
    find,
    group_by_operation,
    support_files,
    update_targets,
)
from depfile.files.loader import encode_content, is_support_path, load_file, load_files
from depfile.files.models import ContentEncoding, DependencyFile, FileType, Operation

__all__ = [
    "ContentEncoding",
    "DependencyFile",
    "FileType",
    "Operation",
    "deduplicate",
    "encode_content",
    "find",
    "group_by_operation",
    "is_support_path",
    "load_file",
    "load_files",
    "support_files",
    "update_targets",
]
