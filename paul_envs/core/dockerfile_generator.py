"""Dockerfile generation logic."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

from ..models.env_config import EnvConfig
from ..utils.env_store import EnvStore
from .build_plan import resolve_build_plan
from .compose import render_compose
from .constants import COMPOSE_FILE_NAME, DOCKERFILE_NAME
from .dockerfile_template import generate_dockerfile

logger = logging.getLogger(__name__)


@dataclass
class BuildContext:
    """Files and arguments needed to build an environment's image."""
    path: Path
    dockerfile: Path
    build_args: Dict[str, str]
    warnings: List[str] = field(default_factory=list)


class DockerfileGenerator:
    """Generates the build files of an environment."""

    def __init__(self, store: EnvStore):
        """Initialize generator."""
        self.store = store

    def write(self, config: EnvConfig) -> BuildContext:
        """Write Dockerfile and compose.yaml in the environment directory."""
        plan = resolve_build_plan(config)
        env_dir = self.store.env_dir(config.name)
        env_dir.mkdir(parents=True, exist_ok=True)
        # The Dockerfile always copies configs/, even when empty
        self.store.configs_dir(config.name).mkdir(exist_ok=True)

        dockerfile = env_dir / DOCKERFILE_NAME
        dockerfile.write_text(generate_dockerfile(plan))
        (env_dir / COMPOSE_FILE_NAME).write_text(render_compose(config))
        logger.debug("Wrote build files for %s in %s", config.name, env_dir)

        return BuildContext(
            path=env_dir,
            dockerfile=dockerfile,
            build_args=config.build_args(),
            warnings=list(plan.warnings),
        )
