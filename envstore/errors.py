"""Errors and warnings raised while loading environment files."""


class EnvStoreError(Exception):
    """Base class for every error raised by envstore."""


class FileAccessError(EnvStoreError, OSError):
    """A source file does not exist or cannot be read."""


class DependencyMissingError(EnvStoreError, ImportError):
    """An optional decoder (e.g. YAML) is not installed."""


class ParseError(EnvStoreError, ValueError):
    """A source file is malformed or has the wrong top-level shape."""


class KeyOverwriteWarning(UserWarning):
    """A loader is replacing a key that is already set."""
