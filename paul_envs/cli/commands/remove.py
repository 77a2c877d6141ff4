"""Remove command for paul-envs."""

import click
from rich.console import Console
from rich.prompt import Confirm

from paul_envs.cli.helpers import complete_env_name, fail, get_store, load_env
from ...core.compose import volume_names
from ...services.docker_service import DockerService
from ...services.exceptions import (
    ContainerNotFoundError,
    DockerServiceError,
    EnvStoreError,
    ImageNotFoundError,
)


@click.command()
@click.argument('name', shell_complete=complete_env_name)
@click.option('--yes', '-y', is_flag=True, help='Skip confirmation prompt')
@click.option('--volumes', is_flag=True, help='Also delete the persisted cache and local volumes')
def remove(name, yes, volumes):
    """Remove environment NAME and its image"""
    console = Console()
    store = get_store()
    config = load_env(store, name)

    if not yes:
        if not Confirm.ask(f"Remove environment '{name}'?"):
            console.print("[yellow]Cancelled[/yellow]")
            return

    try:
        docker_service = DockerService()
    except DockerServiceError as e:
        console.print(f"[yellow]Warning: {e} Image and volumes were left in place.[/yellow]")
        docker_service = None

    if docker_service is not None:
        # A running container holds the image and volumes
        try:
            container = docker_service.get_container(config.image_tag)
            docker_service.remove_container(container, force=True)
            click.echo(f"Removed container: {config.image_tag}")
        except ContainerNotFoundError:
            pass
        except DockerServiceError as e:
            click.echo(f"Warning: Could not remove container {config.image_tag}: {e}", err=True)

        try:
            docker_service.remove_image(config.image_tag)
            click.echo(f"Removed image: {config.image_tag}")
        except ImageNotFoundError:
            pass  # Never built
        except DockerServiceError as e:
            click.echo(f"Warning: Could not remove image {config.image_tag}: {e}", err=True)

        if volumes:
            for volume in volume_names(config).values():
                try:
                    if docker_service.remove_volume(volume):
                        click.echo(f"Removed volume: {volume}")
                except DockerServiceError as e:
                    click.echo(f"Warning: {e}", err=True)

    try:
        store.delete(name)
    except EnvStoreError as e:
        fail(str(e))
    console.print(f"[green]Removed environment '{name}'[/green]")
