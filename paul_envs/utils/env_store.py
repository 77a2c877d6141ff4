"""Environment storage utilities."""

import json
import logging
import os
import shutil
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from ..core.constants import (
    CONFIG_FILE_NAME,
    CONFIGS_DIR_NAME,
    DEFAULT_ENVS_HOME,
    ENVS_HOME_VAR,
)
from ..models.env_config import NAME_PATTERN, EnvConfig
from ..services.exceptions import EnvExistsError, EnvNotFoundError, EnvStoreError

logger = logging.getLogger(__name__)


def default_base_dir() -> Path:
    """Directory holding every environment, overridable through $PAUL_ENVS_HOME."""
    return Path(os.environ.get(ENVS_HOME_VAR) or DEFAULT_ENVS_HOME).expanduser()


class EnvStore:
    """Manages environment directories.

    Each environment lives in ``<base_dir>/<name>/`` with its ``env.json``
    configuration, the generated build files and a ``configs/`` directory
    copied into the container's home at build time.
    """

    def __init__(self, base_dir: Optional[Path] = None):
        """Initialize the store."""
        self.base_dir = Path(base_dir) if base_dir else default_base_dir()

    def env_dir(self, name: str) -> Path:
        # Names never contain separators, so paths stay inside base_dir
        if not NAME_PATTERN.fullmatch(name):
            raise EnvNotFoundError(f"Environment '{name}' not found")
        return self.base_dir / name

    def config_file(self, name: str) -> Path:
        return self.env_dir(name) / CONFIG_FILE_NAME

    def configs_dir(self, name: str) -> Path:
        return self.env_dir(name) / CONFIGS_DIR_NAME

    def exists(self, name: str) -> bool:
        return self.config_file(name).is_file()

    def save(self, config: EnvConfig, overwrite: bool = False) -> Path:
        """Save an environment configuration."""
        if self.exists(config.name) and not overwrite:
            raise EnvExistsError(f"Environment '{config.name}' already exists")

        env_dir = self.env_dir(config.name)
        env_dir.mkdir(parents=True, exist_ok=True)
        self.configs_dir(config.name).mkdir(exist_ok=True)
        self.config_file(config.name).write_text(config.model_dump_json(indent=2))
        logger.debug("Saved environment %s in %s", config.name, env_dir)
        return env_dir

    def load(self, name: str) -> EnvConfig:
        """Load an environment configuration."""
        config_file = self.config_file(name)
        if not config_file.is_file():
            raise EnvNotFoundError(f"Environment '{name}' not found")
        try:
            data = json.loads(config_file.read_text())
            return EnvConfig(**data)
        except (json.JSONDecodeError, ValidationError) as e:
            raise EnvStoreError(f"Invalid configuration in {config_file}: {e}") from e

    def names(self) -> List[str]:
        """Names of all stored environments, sorted."""
        if not self.base_dir.is_dir():
            return []
        return sorted(
            path.name for path in self.base_dir.iterdir()
            if (path / CONFIG_FILE_NAME).is_file()
        )

    def list(self) -> List[EnvConfig]:
        """Load all readable environments, skipping corrupt ones."""
        configs = []
        for name in self.names():
            try:
                configs.append(self.load(name))
            except EnvStoreError as e:
                logger.warning("Skipping environment %s: %s", name, e)
        return configs

    def import_configs(self, name: str, source: Path, replace: bool = False):
        """Copy a directory's content into the environment's configs/ directory.

        With ``replace``, files left from a previous import are removed first.
        """
        source = Path(source)
        if not source.is_dir():
            raise EnvStoreError(f"Config directory not found: {source}")
        if replace and self.configs_dir(name).exists():
            shutil.rmtree(self.configs_dir(name))
        shutil.copytree(source, self.configs_dir(name), symlinks=True, dirs_exist_ok=True)

    def delete(self, name: str):
        """Delete an environment directory."""
        if not self.env_dir(name).is_dir():
            raise EnvNotFoundError(f"Environment '{name}' not found")
        shutil.rmtree(self.env_dir(name))
