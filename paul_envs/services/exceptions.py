"""Custom exceptions for paul-envs."""


class PaulEnvsError(Exception):
    """Base exception for all paul-envs errors."""

    pass


class ServiceError(PaulEnvsError):
    """Base exception for all service-related errors."""

    pass


class DockerServiceError(ServiceError):
    """Exception raised for Docker service operations."""

    pass


class ImageNotFoundError(DockerServiceError):
    """Exception raised when a Docker image is not found."""

    pass


class ContainerNotFoundError(DockerServiceError):
    """Exception raised when a Docker container is not found."""

    pass


class EnvStoreError(PaulEnvsError):
    """Exception raised when an environment cannot be read or written."""

    pass


class EnvNotFoundError(EnvStoreError):
    """Exception raised when no environment exists under a given name."""

    pass


class EnvExistsError(EnvStoreError):
    """Exception raised when creating an environment whose name is taken."""

    pass
