"""Container running functionality."""

import logging
import subprocess
from typing import List, Optional

from ..models.env_config import EnvConfig
from ..services.docker_service import DockerService
from ..services.exceptions import DockerServiceError, ImageNotFoundError
from .compose import project_mount_point, volume_names

logger = logging.getLogger(__name__)


class ContainerRunner:
    """Runs an environment's image as an interactive container."""

    def __init__(self, config: EnvConfig, docker_service: DockerService):
        """Initialize container runner."""
        self.config = config
        self.docker_service = docker_service

    def build_command(self, command: Optional[List[str]] = None) -> List[str]:
        """Assemble the ``docker run`` command line."""
        config = self.config
        workdir = project_mount_point(config)
        docker_cmd = [
            'docker', 'run',
            '--rm',  # Remove container after exit
            '-it',   # Interactive with TTY
            '--name', config.image_tag,
            '--hostname', config.name,
            '-w', workdir,
        ]

        # Persisted cache and local directories
        for directory, volume in volume_names(config).items():
            docker_cmd.extend(['-v', f'{volume}:{config.home}/{directory}'])

        docker_cmd.extend(['-v', f'{config.project_path}:{workdir}'])

        for volume in config.volumes:
            docker_cmd.extend(['-v', volume])

        for port in config.ports:
            docker_cmd.extend(['-p', f'{port}:{port}'])

        docker_cmd.append(config.image_tag)
        if command:
            docker_cmd.extend(command)
        return docker_cmd

    def run(self, command: Optional[List[str]] = None) -> int:
        """Run the container and wait for it to exit.

        Returns:
            The exit code of ``docker run``

        Raises:
            ImageNotFoundError: If the environment was never built
            DockerServiceError: If a container with the same name is running
        """
        if not self.docker_service.image_exists(self.config.image_tag):
            raise ImageNotFoundError(
                f"Image '{self.config.image_tag}' not found. "
                f"Run 'paul-envs build {self.config.name}' first."
            )

        status = self.docker_service.container_status(self.config.image_tag)
        if status == 'running':
            raise DockerServiceError(
                f"Environment '{self.config.name}' is already running "
                f"(attach with 'docker exec -it {self.config.image_tag} $SHELL')"
            )

        docker_cmd = self.build_command(command)
        logger.debug("Running %s", " ".join(docker_cmd))
        # Use subprocess for proper TTY handling
        return subprocess.run(docker_cmd).returncode
