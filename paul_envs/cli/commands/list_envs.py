"""List command for paul-envs."""

import click
from tabulate import tabulate

from paul_envs.cli.helpers import get_store
from ...core.completion import format_listing
from ...services.docker_service import DockerService
from ...services.exceptions import DockerServiceError


def _tools(config) -> str:
    tools = [
        tool for tool in ('neovim', 'starship', 'atuin', 'mise', 'zellij')
        if getattr(config, f'install_{tool}')
    ]
    return ", ".join(tools) or "-"


def _toolchains(config) -> str:
    toolchains = [
        f"{language}@{config.toolchain_version(language)}"
        for language in config.requested_toolchains()
    ]
    return ", ".join(toolchains) or "-"


@click.command(name='list')
@click.option('--names-only', is_flag=True, help='Print one environment name per line')
@click.option('--long', 'long_format', is_flag=True, help='Show a table with details')
def list_envs(names_only, long_format):
    """List created environments"""
    store = get_store()

    if names_only:
        for name in store.names():
            click.echo(name)
        return

    if not long_format:
        click.echo(format_listing(store.names()))
        return

    configs = store.list()
    if not configs:
        click.echo(format_listing([]))
        return

    try:
        docker_service = DockerService()
    except DockerServiceError as e:
        click.echo(f"Warning: Could not check images: {e}", err=True)
        docker_service = None

    rows = []
    for config in configs:
        if docker_service is None:
            image = "?"
        elif docker_service.image_exists(config.image_tag):
            image = click.style("built", fg='green')
        else:
            image = click.style("not built", fg='yellow')
        rows.append([
            config.name,
            config.shell.value,
            _toolchains(config),
            _tools(config),
            image,
            config.project_path,
        ])

    headers = ["NAME", "SHELL", "TOOLCHAINS", "TOOLS", "IMAGE", "PROJECT"]
    click.echo(tabulate(rows, headers=headers, tablefmt="simple"))
