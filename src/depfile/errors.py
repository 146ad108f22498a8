"""Exception types shared across depfile."""


class DepfileError(Exception):
    """Base class for depfile errors."""


class ConfigurationError(DepfileError):
    """Raised when a record or a config file is built from invalid inputs."""


class DecodeError(DepfileError):
    """Raised when stored or serialized content cannot be decoded."""
