"""Utilities for paul-envs."""

from .env_store import EnvStore

__all__ = [
    'EnvStore'
]
