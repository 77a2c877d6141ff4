"""Models for paul-envs."""

from .env_config import EnvConfig, Shell

__all__ = [
    'EnvConfig',
    'Shell'
]
