import pytest
from click.testing import CliRunner

from paul_envs.models.env_config import EnvConfig
from paul_envs.utils.env_store import EnvStore


@pytest.fixture
def cli_runner():
    """Provides a Click CLI runner for testing commands."""
    return CliRunner()


@pytest.fixture(autouse=True)
def envs_home(tmp_path, monkeypatch):
    """Points the environment store at a temporary directory for all tests."""
    home = tmp_path / "envs"
    monkeypatch.setenv("PAUL_ENVS_HOME", str(home))
    return home


@pytest.fixture
def project_dir(tmp_path):
    """Creates a temporary project directory."""
    project_path = tmp_path / "my-project"
    project_path.mkdir()
    (project_path / "main.py").write_text("print('Hello, World!')")
    return project_path


@pytest.fixture
def store(envs_home):
    """Provides an environment store in the temporary home."""
    return EnvStore(envs_home)


@pytest.fixture
def make_config(project_dir):
    """Builds an EnvConfig for the temporary project, with overrides."""
    def _make(**overrides):
        values = {"name": "my-project", "project_path": str(project_dir)}
        values.update(overrides)
        return EnvConfig(**values)
    return _make
