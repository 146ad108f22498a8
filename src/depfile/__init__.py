"""depfile — dependency file records for automated update commits."""

from depfile.errors import ConfigurationError, DecodeError, DepfileError
from depfile.files.models import ContentEncoding, DependencyFile, FileType, Operation

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "ContentEncoding",
    "DecodeError",
    "DependencyFile",
    "DepfileError",
    "FileType",
    "Operation",
    "__version__",
]
