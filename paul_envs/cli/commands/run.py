"""Run command for paul-envs."""

import click

from paul_envs.cli.helpers import (
    complete_env_name,
    fail,
    get_docker_service,
    get_store,
    load_env,
)
from ...core.container_runner import ContainerRunner
from ...services.exceptions import DockerServiceError


@click.command(context_settings=dict(ignore_unknown_options=True))
@click.argument('name', shell_complete=complete_env_name)
@click.argument('command', nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def run(ctx, name, command):
    """Run a shell (or COMMAND) in environment NAME"""
    config = load_env(get_store(), name)
    docker_service = get_docker_service()

    runner = ContainerRunner(config, docker_service)
    try:
        exit_code = runner.run(list(command))
    except DockerServiceError as e:
        fail(str(e))

    ctx.exit(exit_code)
