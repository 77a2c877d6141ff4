"""Build command for paul-envs."""

import click

from paul_envs.cli.helpers import (
    complete_env_name,
    echo_warnings,
    fail,
    get_docker_service,
    get_store,
    load_env,
)
from ...core.dockerfile_generator import DockerfileGenerator
from ...services.exceptions import DockerServiceError


@click.command()
@click.argument('name', shell_complete=complete_env_name)
@click.option('--no-cache', is_flag=True, help='Build without using Docker cache (rebuilds all layers)')
def build(name, no_cache):
    """Build the image of environment NAME"""
    store = get_store()
    config = load_env(store, name)

    # Re-render so the Dockerfile matches the current configuration
    context = DockerfileGenerator(store).write(config)
    echo_warnings(context.warnings)

    docker_service = get_docker_service()

    if no_cache:
        click.echo("Building without cache - all layers will be rebuilt...")
    click.echo(f"Building image {config.image_tag} from {context.dockerfile}")

    try:
        docker_service.build_image(
            path=str(context.path),
            dockerfile=str(context.dockerfile),
            tag=config.image_tag,
            nocache=no_cache,
            buildargs=context.build_args,
            on_log=lambda chunk: click.echo(chunk, nl=False),
        )
    except DockerServiceError as e:
        fail(f"Build failed: {e}")

    click.echo(f"Container image built: {config.image_tag}")
    click.echo(f"Start it with: paul-envs run {config.name}")
