"""The dependency file record and its enumerations."""

from __future__ import annotations

import base64
import binascii
import posixpath
import re
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Type, TypeVar, Union

from depfile.errors import ConfigurationError, DecodeError

UTF_8_BOM = "\ufeff"
UTF_8_BOM_BYTES = b"\xef\xbb\xbf"

_LEADING_SLASHES_RE = re.compile(r"^/*")

# Keys left out of the canonical map when comparing or hashing records.
IDENTITY_EXCLUDED_KEYS = frozenset({"support_file"})

Content = Union[str, bytes]

# Accepted value types per canonical-map key when rebuilding a record
_FIELD_TYPES: Dict[str, tuple] = {
    "name": (str,),
    "content": (str, bytes, type(None)),
    "directory": (str,),
    "type": (str,),
    "support_file": (bool,),
    "symlink_target": (str, type(None)),
    "content_encoding": (str,),
    "deleted": (bool,),
    "operation": (str,),
}

_E = TypeVar("_E", bound=Enum)


class ContentEncoding(str, Enum):
    UTF_8 = "utf-8"
    BASE64 = "base64"


class Operation(str, Enum):
    UPDATE = "update"
    CREATE = "create"
    DELETE = "delete"


class FileType(str, Enum):
    """Legacy discriminator for files that need special handling downstream.

    ``SUBMODULE`` tells the submodule updater that a "file" is really a
    gitlink, and is also used to flag the main file of a Go module. Do not
    add members for new use cases; add a flag like ``support_file`` instead.
    """

    FILE = "file"
    SYMLINK = "symlink"
    SUBMODULE = "submodule"


def _coerce(enum_cls: Type[_E], value: Any, field_name: str) -> _E:
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ConfigurationError(
            f"Invalid {field_name} {value!r} (expected one of: {allowed})"
        ) from None


def clean_directory(directory: str) -> str:
    """Collapse any run of leading slashes into exactly one."""
    return _LEADING_SLASHES_RE.sub("/", directory, count=1)


def clean_path(path: str) -> str:
    """Lexically clean *path*: resolve ``.``/``..`` and repeated separators."""
    cleaned = posixpath.normpath(path)
    # normpath keeps a leading "//" as-is on POSIX
    if cleaned.startswith("//"):
        cleaned = "/" + cleaned.lstrip("/")
    return cleaned


def _strip_bom(content: Content) -> Content:
    if isinstance(content, bytes):
        return content.removeprefix(UTF_8_BOM_BYTES)
    return content.removeprefix(UTF_8_BOM)


class DependencyFile:
    """A single file change destined for a commit.

    Records are value objects: two records are equal when every field except
    ``support_file`` matches, and hashing agrees with that equality so
    records can be deduplicated in sets and dict keys.

    ``deleted`` is a legacy alias kept for callers that predate
    ``operation``. Passing ``deleted=True`` always wins over ``operation``.
    """

    def __init__(
        self,
        name: str,
        content: Optional[Content],
        directory: str = "/",
        type: Union[FileType, str] = FileType.FILE,
        support_file: bool = False,
        symlink_target: Optional[str] = None,
        content_encoding: Union[ContentEncoding, str] = ContentEncoding.UTF_8,
        deleted: bool = False,
        operation: Union[Operation, str] = Operation.UPDATE,
    ) -> None:
        encoding = _coerce(ContentEncoding, content_encoding, "content_encoding")
        if content and encoding is ContentEncoding.UTF_8:
            content = _strip_bom(content)

        self.name = name
        self.content = content
        self.directory = clean_directory(directory)
        self.type = _coerce(FileType, type, "type")
        self.support_file = bool(support_file)
        self.symlink_target = symlink_target
        self.content_encoding = encoding
        self.operation = _coerce(Operation, operation, "operation")

        if deleted:
            self.operation = Operation.DELETE

        is_symlink = self.type is FileType.SYMLINK
        if is_symlink and symlink_target is None:
            raise ConfigurationError("Symlinks must specify a target!")
        if not is_symlink and symlink_target is not None:
            raise ConfigurationError("Only symlinked files must specify a target!")

    # ---- construction from the canonical map ----

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DependencyFile":
        """Rebuild a record from :meth:`to_dict` output. Unknown keys are ignored."""
        if "name" not in data:
            raise ConfigurationError("Dependency file entry is missing 'name'")
        for key, allowed in _FIELD_TYPES.items():
            if key in data and not isinstance(data[key], allowed):
                raise ConfigurationError(
                    f"Field {key!r} has invalid value {data[key]!r}"
                )
        return cls(
            name=data["name"],
            content=data.get("content"),
            directory=data.get("directory", "/"),
            type=data.get("type", FileType.FILE),
            support_file=data.get("support_file", False),
            symlink_target=data.get("symlink_target"),
            content_encoding=data.get("content_encoding", ContentEncoding.UTF_8),
            deleted=data.get("deleted", False),
            operation=data.get("operation", Operation.UPDATE),
        )

    # ---- canonical form ----

    def to_dict(self) -> Dict[str, Any]:
        """Return the canonical, JSON-serialisable map of this record."""
        details: Dict[str, Any] = {
            "name": self.name,
            "content": self.content,
            "directory": self.directory,
            "type": self.type.value,
            "support_file": self.support_file,
            "content_encoding": self.content_encoding.value,
            "deleted": self.deleted,
            "operation": self.operation.value,
        }
        if self.symlink_target is not None:
            details["symlink_target"] = self.symlink_target
        return details

    def _identity(self) -> tuple:
        return tuple(
            (k, v) for k, v in self.to_dict().items() if k not in IDENTITY_EXCLUDED_KEYS
        )

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._identity() == other._identity()  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash(self._identity())

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(path={self.path!r}, "
            f"operation={self.operation.value!r}, type={self.type.value!r})"
        )

    # ---- derived views ----

    @property
    def path(self) -> str:
        return clean_path(f"{self.directory}/{self.name}")

    @property
    def deleted(self) -> bool:
        return self.operation is Operation.DELETE

    @deleted.setter
    def deleted(self, value: bool) -> None:
        self.operation = Operation.DELETE if value else Operation.UPDATE

    @property
    def is_deleted(self) -> bool:
        return self.deleted

    @property
    def is_support_file(self) -> bool:
        return self.support_file

    @property
    def is_binary(self) -> bool:
        return self.content_encoding is ContentEncoding.BASE64

    def decoded_content(self) -> Optional[Content]:
        """Return raw bytes for base64 records, otherwise the stored content."""
        if not self.is_binary or self.content is None:
            return self.content
        raw = self.content
        if isinstance(raw, str):
            if not raw.isascii():
                raise DecodeError(f"{self.path}: base64 content contains non-ASCII characters")
            raw = raw.encode("ascii")
        try:
            # Line-wrapped base64 is common in API payloads
            return base64.b64decode(b"".join(raw.split()), validate=True)
        except (binascii.Error, ValueError) as exc:
            raise DecodeError(f"{self.path}: invalid base64 content ({exc})") from exc
