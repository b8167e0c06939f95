import pytest

from envstore.env import Environment


@pytest.fixture
def environ() -> dict:
    """An empty stand-in for os.environ."""
    return {}


@pytest.fixture
def store(environ, tmp_path) -> Environment:
    """An Environment isolated from the real process environment."""
    return Environment(environ=environ, root=tmp_path)


@pytest.fixture
def write_file(tmp_path):
    """Write text into tmp_path and return the path."""
    def _write(name: str, content: str):
        path = tmp_path / name
        path.write_text(content, encoding='utf-8')
        return path
    return _write
