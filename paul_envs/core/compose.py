"""compose.yaml generation for environments."""

from pathlib import Path

import yaml

from ..models.env_config import EnvConfig
from .constants import CACHE_DIR, DOCKERFILE_NAME, LOCAL_DIR, PROJECTS_DIR


def volume_names(config: EnvConfig) -> dict:
    """Named volumes persisting the cache and local directories."""
    return {
        CACHE_DIR: f"{config.image_tag}-cache",
        LOCAL_DIR: f"{config.image_tag}-local",
    }


def project_mount_point(config: EnvConfig) -> str:
    return f"{config.home}/{PROJECTS_DIR}/{Path(config.project_path).name}"


def compose_service(config: EnvConfig) -> dict:
    """Service definition equivalent to ``paul-envs run``."""
    named = volume_names(config)
    volumes = [f"{volume}:{config.home}/{directory}" for directory, volume in named.items()]
    volumes.append(f"{config.project_path}:{project_mount_point(config)}")
    volumes.extend(config.volumes)

    service = {
        "build": {
            "context": ".",
            "dockerfile": DOCKERFILE_NAME,
            "args": config.build_args(),
        },
        "image": config.image_tag,
        "container_name": config.image_tag,
        "hostname": config.name,
        "stdin_open": True,
        "tty": True,
        "working_dir": project_mount_point(config),
        "volumes": volumes,
    }
    if config.ports:
        service["ports"] = [f"{port}:{port}" for port in config.ports]
    return service


def render_compose(config: EnvConfig) -> str:
    """Render the compose.yaml of an environment."""
    document = {
        "services": {config.name: compose_service(config)},
        "volumes": {volume: {"name": volume} for volume in volume_names(config).values()},
    }
    return yaml.safe_dump(document, sort_keys=False, default_flow_style=False)
