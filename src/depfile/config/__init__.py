"""Configuration loading, schema, and defaults."""

from depfile.config.loader import ConfigError, load_config
from depfile.config.schema import DepfileConfig, FilesConfig, OutputConfig

__all__ = [
    "ConfigError",
    "DepfileConfig",
    "FilesConfig",
    "OutputConfig",
    "load_config",
]
