"""Dockerfile command for paul-envs."""

import click

from paul_envs.cli.helpers import complete_env_name, echo_warnings, get_store, load_env
from ...core.build_plan import resolve_build_plan
from ...core.dockerfile_template import generate_dockerfile


@click.command()
@click.argument('name', shell_complete=complete_env_name)
def dockerfile(name):
    """Print the Dockerfile rendered for environment NAME"""
    config = load_env(get_store(), name)
    plan = resolve_build_plan(config)
    echo_warnings(plan.warnings)
    click.echo(generate_dockerfile(plan), nl=False)
