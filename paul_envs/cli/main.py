"""Main CLI entry point for paul-envs."""

import logging

import click

from .. import __version__
from .commands.build import build
from .commands.completion import completion
from .commands.create import create
from .commands.dockerfile import dockerfile
from .commands.list_envs import list_envs
from .commands.remove import remove
from .commands.run import run


@click.group()
@click.version_option(__version__, prog_name='paul-envs')
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
def cli(verbose):
    """paul-envs - Build and run per-project developer containers"""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )


# Register commands
cli.add_command(create)
cli.add_command(list_envs)
cli.add_command(list_envs, name='ls')
cli.add_command(build)
cli.add_command(run)
cli.add_command(remove)
cli.add_command(dockerfile)
cli.add_command(completion)


if __name__ == '__main__':
    cli()
