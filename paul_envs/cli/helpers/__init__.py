"""CLI Helper Functions for paul-envs.

This module provides reusable helper functions for CLI commands to reduce
code duplication and standardize behavior across all commands.

The helpers provide:
- Environment loading with consistent error reporting
- Docker service initialization
- Warning output
- Environment name and option value completion
"""

import subprocess
import sys
from typing import List

import click

from paul_envs.core.completion import CompletionResolver
from paul_envs.models.env_config import EnvConfig
from paul_envs.services.docker_service import DockerService
from paul_envs.services.exceptions import DockerServiceError, EnvStoreError
from paul_envs.utils.env_store import EnvStore


def fail(message: str) -> None:
    """Print an error on stderr and exit with status 1."""
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


def get_store() -> EnvStore:
    """Environment store rooted at $PAUL_ENVS_HOME or the default location."""
    return EnvStore()


def load_env(store: EnvStore, name: str) -> EnvConfig:
    """Load an environment, exiting with an error message on failure."""
    try:
        return store.load(name)
    except EnvStoreError as e:
        fail(str(e))


def get_docker_service() -> DockerService:
    """Initialize Docker service with error handling.

    Note:
        Exits with error message if Docker is not available.
    """
    try:
        return DockerService()
    except DockerServiceError as e:
        fail(str(e))


def echo_warnings(warnings: List[str]) -> None:
    """Print build plan warnings in yellow on stderr."""
    for warning in warnings:
        click.echo(click.style(f"Warning: {warning}", fg='yellow', bold=True), err=True)


def host_git_config(key: str) -> str:
    """Read a value from the host's git configuration, empty when unset."""
    try:
        return subprocess.check_output(
            ['git', 'config', '--get', key], text=True, stderr=subprocess.DEVNULL
        ).strip()
    except (subprocess.CalledProcessError, FileNotFoundError):
        return ""


def complete_env_name(ctx, param, incomplete):
    """click shell_complete callback listing environment names."""
    return CompletionResolver().complete([ctx.info_name], incomplete)


def complete_flag_value(ctx, param, incomplete):
    """click shell_complete callback for option values (shells, versions)."""
    flag = max(param.opts, key=len)
    return CompletionResolver().complete([ctx.info_name, flag], incomplete)
