"""Service layer for abstracting Docker operations."""

from .docker_service import DockerService
from .exceptions import (
    PaulEnvsError,
    ServiceError,
    DockerServiceError,
    ImageNotFoundError,
    ContainerNotFoundError,
    EnvStoreError,
    EnvNotFoundError,
    EnvExistsError,
)

__all__ = [
    "DockerService",
    "PaulEnvsError",
    "ServiceError",
    "DockerServiceError",
    "ImageNotFoundError",
    "ContainerNotFoundError",
    "EnvStoreError",
    "EnvNotFoundError",
    "EnvExistsError",
]
