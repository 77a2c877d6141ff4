"""Docker service for abstracting Docker operations."""

import logging
from typing import Callable, Dict, Optional

import docker
import docker.errors
from docker.models.containers import Container
from docker.models.images import Image

from .exceptions import (
    ContainerNotFoundError,
    DockerServiceError,
    ImageNotFoundError,
)

logger = logging.getLogger(__name__)


class DockerService:
    """Service for Docker operations with clean abstractions."""

    def __init__(self):
        """Initialize Docker service and test connection."""
        try:
            self.client = docker.from_env()
            self.client.ping()
        except docker.errors.DockerException as e:
            if "connection refused" in str(e).lower() or "cannot connect" in str(e).lower():
                raise DockerServiceError(
                    "Docker daemon is not running. Please start Docker Desktop or the Docker service."
                ) from e
            else:
                raise DockerServiceError(f"Failed to connect to Docker: {e}") from e

    def build_image(
        self,
        path: str,
        dockerfile: str,
        tag: str,
        nocache: bool = False,
        buildargs: Optional[Dict[str, str]] = None,
        on_log: Optional[Callable[[str], None]] = None,
    ) -> Image:
        """Build a Docker image and forward its log.

        Args:
            path: Path to the build context
            dockerfile: Path to the Dockerfile
            tag: Tag for the image
            nocache: Do not use cache when building
            buildargs: Build arguments
            on_log: Called with each chunk of build output

        Returns:
            The built image

        Raises:
            DockerServiceError: If any build step fails
        """
        try:
            image, logs = self.client.images.build(
                path=path,
                dockerfile=dockerfile,
                tag=tag,
                rm=True,
                nocache=nocache,
                buildargs=buildargs or {},
            )
        except docker.errors.BuildError as e:
            if on_log:
                for entry in e.build_log:
                    if 'stream' in entry:
                        on_log(entry['stream'])
            raise DockerServiceError(f"Failed to build image: {e}") from e
        except docker.errors.APIError as e:
            raise DockerServiceError(f"Failed to build image: {e}") from e
        except Exception as e:
            raise DockerServiceError(f"Unexpected error building image: {e}") from e

        if on_log:
            for entry in logs:
                if 'stream' in entry:
                    on_log(entry['stream'])
        return image

    def image_exists(self, image_name: str) -> bool:
        """Check if an image exists.

        Args:
            image_name: Name of the image

        Returns:
            True if image exists, False otherwise
        """
        try:
            self.client.images.get(image_name)
            return True
        except docker.errors.ImageNotFound:
            return False
        except Exception as e:
            logger.warning(f"Error checking image existence: {e}")
            return False

    def remove_image(self, image_name: str, force: bool = True) -> None:
        """Remove a Docker image.

        Args:
            image_name: Name of the image
            force: Force removal

        Raises:
            ImageNotFoundError: If image not found
            DockerServiceError: If removal fails
        """
        try:
            self.client.images.remove(image_name, force=force)
        except docker.errors.ImageNotFound as e:
            raise ImageNotFoundError(f"Image '{image_name}' not found") from e
        except docker.errors.APIError as e:
            raise DockerServiceError(f"Failed to remove image: {e}") from e
        except Exception as e:
            raise DockerServiceError(f"Unexpected error removing image: {e}") from e

    def get_container(self, container_id: str) -> Container:
        """Get a container by ID or name.

        Raises:
            ContainerNotFoundError: If container not found
            DockerServiceError: If retrieval fails
        """
        try:
            return self.client.containers.get(container_id)
        except docker.errors.NotFound as e:
            raise ContainerNotFoundError(
                f"Container '{container_id}' not found"
            ) from e
        except docker.errors.APIError as e:
            raise DockerServiceError(f"Failed to get container: {e}") from e
        except Exception as e:
            raise DockerServiceError(f"Unexpected error getting container: {e}") from e

    def remove_container(self, container: Container, force: bool = False) -> None:
        """Remove a container.

        Raises:
            ContainerNotFoundError: If container not found
            DockerServiceError: If removal fails
        """
        try:
            container.remove(force=force)
        except docker.errors.NotFound as e:
            raise ContainerNotFoundError("Container not found") from e
        except docker.errors.APIError as e:
            raise DockerServiceError(f"Failed to remove container: {e}") from e
        except Exception as e:
            raise DockerServiceError(f"Unexpected error removing container: {e}") from e

    def remove_volume(self, volume_name: str) -> bool:
        """Remove a named volume.

        Returns:
            True if the volume was removed, False if it did not exist

        Raises:
            DockerServiceError: If removal fails
        """
        try:
            self.client.volumes.get(volume_name).remove()
            return True
        except docker.errors.NotFound:
            return False
        except docker.errors.APIError as e:
            raise DockerServiceError(f"Failed to remove volume '{volume_name}': {e}") from e

    def container_status(self, name: str) -> Optional[str]:
        """Status of a container, or None when it does not exist."""
        try:
            return self.get_container(name).status
        except ContainerNotFoundError:
            return None

