"""
Process-wide environment loader.
Loads KEY=VALUE pairs from .env, YAML or JSON files into the process
environment and reads them back as typed values.

The module-level functions operate on a default Environment bound to
os.environ; tests and embedders can build isolated instances instead.
"""
import json
import logging
import os
import warnings
from pathlib import Path

from envstore.cast import cast_value
from envstore.errors import (
    DependencyMissingError,
    FileAccessError,
    KeyOverwriteWarning,
    ParseError,
)
from envstore.parsers import parse_env_lines

logger = logging.getLogger(__name__)

DEFAULT_ENV_FILE = ".env"


def _default_yaml_loader():
    """Return PyYAML's safe_load, or raise if PyYAML is not installed."""
    try:
        import yaml
    except ImportError as e:
        raise DependencyMissingError(
            "You need to install the 'PyYAML' package to use YAML files."
        ) from e
    return yaml.safe_load


def _ancestor(path: Path, levels: int) -> Path:
    """Walk `levels` directories up from path, stopping at the filesystem anchor."""
    parents = path.parents
    if not parents:
        return path
    return parents[min(levels, len(parents)) - 1]


def _check_readable(path: Path, kind: str):
    if not path.is_file() or not os.access(path, os.R_OK):
        raise FileAccessError(f"{kind} file not found or unreadable: {path}")


def _read_text(path: Path, kind: str) -> str:
    try:
        return path.read_text(encoding='utf-8')
    except UnicodeDecodeError as e:
        raise ParseError(f"Invalid UTF-8 in {path}: {e}") from e
    except OSError as e:
        raise FileAccessError(f"{kind} file not found or unreadable: {path}") from e


def _reject_constant(name: str):
    raise ValueError(f"Non-standard JSON constant {name}")


def to_env_string(value) -> str:
    """Render a value the way it is written into the environment table."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value, default=str)
    if isinstance(value, float):
        text = repr(value)
        # keep a decimal point so exponent forms read back as float
        if 'e' in text and '.' not in text:
            mantissa, exponent = text.split('e')
            text = f"{mantissa}.0e{exponent}"
        return text
    return str(value)


def _check_pairs(pairs, path: Path):
    """Reject keys and values the environment table cannot hold, before any write."""
    for key, value in pairs:
        if '=' in key or '\0' in key:
            raise ParseError(f"Invalid key {key!r} in {path}")
        if value is not None and '\0' in to_env_string(value):
            raise ParseError(f"Value for {key!r} in {path} contains a NUL byte")


class Environment:
    """A string-keyed table of typed values backed by an environ mapping."""

    def __init__(self, environ=None, root=None, yaml_loader=None):
        self.environ = os.environ if environ is None else environ
        self.yaml_loader = yaml_loader
        self._root: Path | None = Path(root) if root is not None else None

    # --- Root -----------------------------------------------------------

    def set_root(self, path=None):
        """Set the base directory; defaults to four levels above this package."""
        if path:
            self._root = Path(path)
        else:
            self._root = _ancestor(Path(__file__).resolve().parent, 4)

    def get_root(self) -> Path:
        if self._root is None:
            self.set_root(Path(__file__).resolve().parent)
        return self._root

    # --- Loaders --------------------------------------------------------

    def load(self, file_paths=None):
        """Load one or more .env files in order; later files win."""
        if file_paths is None:
            file_paths = self.get_root() / DEFAULT_ENV_FILE
        if isinstance(file_paths, (str, os.PathLike)):
            file_paths = [file_paths]

        for file_path in file_paths:
            path = Path(file_path)
            _check_readable(path, ".env")
            logger.debug("Loading env file %s", path)
            text = _read_text(path, ".env")
            pairs = [
                (key, cast_value(value if value is not None else ""))
                for key, value in parse_env_lines(text.splitlines())
            ]
            _check_pairs(pairs, path)

            for key, value in pairs:
                self._load_pair(key, value, stacklevel=3)
            logger.debug("Loaded %d entries from %s", len(pairs), path)

    def load_yaml(self, file_path):
        path = Path(file_path)
        _check_readable(path, "YAML")
        loader = self.yaml_loader or _default_yaml_loader()

        logger.debug("Loading YAML file %s", path)
        text = _read_text(path, "YAML")
        try:
            data = loader(text)
        except Exception as e:
            raise ParseError(f"Invalid YAML in {path}: {e}") from e
        self._load_mapping(data or {}, path)

    def load_json(self, file_path):
        path = Path(file_path)
        _check_readable(path, "JSON")

        logger.debug("Loading JSON file %s", path)
        text = _read_text(path, "JSON")
        try:
            data = json.loads(text, parse_constant=_reject_constant)
        except ValueError as e:
            raise ParseError(f"Invalid JSON in {path}: {e}") from e
        self._load_mapping(data, path)

    def _load_mapping(self, data, path: Path):
        if not isinstance(data, dict):
            raise ParseError(f"Expected a top-level mapping in {path}, got {type(data).__name__}")
        pairs = [(str(key), cast_value(value)) for key, value in data.items()]
        _check_pairs(pairs, path)
        for key, value in pairs:
            self._load_pair(key, value, stacklevel=4)
        logger.debug("Loaded %d entries from %s", len(data), path)

    def _load_pair(self, key: str, value, stacklevel: int):
        if key in self.environ:
            warnings.warn(
                f"Warning: The key '{key}' already exists and will be overwritten.",
                KeyOverwriteWarning,
                stacklevel=stacklevel,
            )
        self.set(key, value)

    # --- Accessors ------------------------------------------------------

    def get(self, key: str, default=None):
        value = self.environ.get(key)
        return default if value is None else cast_value(value)

    def set(self, key: str, value):
        """Store value as a string; None removes the key."""
        if not key:
            return
        if value is None:
            self.environ.pop(key, None)
            return

        self.environ[key] = to_env_string(value)

    def all(self) -> dict:
        """Snapshot of every key mapped to its cast value."""
        return {key: cast_value(value) for key, value in self.environ.items()}


# Default store bound to the real process environment
environment = Environment()

set_root = environment.set_root
get_root = environment.get_root
load = environment.load
load_yaml = environment.load_yaml
load_json = environment.load_json
get = environment.get
set = environment.set
all = environment.all
