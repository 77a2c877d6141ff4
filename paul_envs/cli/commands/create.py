"""Create command for paul-envs."""

import os
from pathlib import Path

import click
import questionary
from pydantic import ValidationError

from paul_envs.cli.helpers import (
    complete_flag_value,
    echo_warnings,
    fail,
    get_store,
    host_git_config,
)
from ...core.constants import (
    DEFAULT_GID,
    DEFAULT_GO,
    DEFAULT_NODE,
    DEFAULT_PYTHON,
    DEFAULT_RUST,
    DEFAULT_UID,
    DEFAULT_USERNAME,
)
from ...core.dockerfile_generator import DockerfileGenerator
from ...models.env_config import EnvConfig, Shell
from ...services.exceptions import EnvExistsError, PaulEnvsError

TOOLS = ['neovim', 'starship', 'atuin', 'mise', 'zellij']


def prompt_settings(settings: dict) -> dict:
    """Ask for the shell, tools and git identity interactively."""
    shell = questionary.select(
        "Default shell:",
        choices=[s.value for s in Shell],
        default=settings['shell'].value,
    ).ask()
    if shell is None:
        raise click.Abort()
    settings['shell'] = Shell(shell)

    tools = questionary.checkbox(
        "Tools to install:",
        choices=[
            questionary.Choice(tool, checked=settings[f'install_{tool}'])
            for tool in TOOLS
        ],
    ).ask()
    if tools is None:
        raise click.Abort()
    for tool in TOOLS:
        settings[f'install_{tool}'] = tool in tools

    for key, git_key in (('git_author_name', 'user.name'), ('git_author_email', 'user.email')):
        if not settings[key]:
            answer = questionary.text(
                f"Git {git_key}:", default=host_git_config(git_key)
            ).ask()
            settings[key] = answer or ""
    return settings


@click.command()
@click.argument('project_path', type=click.Path(exists=True, file_okay=False, resolve_path=True))
@click.option('--name', help='Environment name (defaults to the project directory name)')
@click.option('--uid', type=int, default=lambda: os.getuid() or DEFAULT_UID,
              show_default=f'current user, {DEFAULT_UID} for root', help='UID of the container user')
@click.option('--gid', type=int, default=lambda: os.getgid() or DEFAULT_GID,
              show_default=f'current group, {DEFAULT_GID} for root', help='GID of the container user')
@click.option('--username', default=DEFAULT_USERNAME, show_default=True,
              help='Name of the container user')
@click.option('--shell', shell_complete=complete_flag_value,
              type=click.Choice([s.value for s in Shell]), default=Shell.BASH.value,
              show_default=True, help='Default shell')
@click.option('--nodejs', shell_complete=complete_flag_value,
              default=DEFAULT_NODE, show_default=True,
              help="Node.js version, 'latest' or 'none'")
@click.option('--rust', shell_complete=complete_flag_value,
              default=DEFAULT_RUST, show_default=True,
              help="Rust version, 'latest' or 'none'")
@click.option('--python', shell_complete=complete_flag_value,
              default=DEFAULT_PYTHON, show_default=True,
              help="Python version, 'latest' or 'none'")
@click.option('--go', shell_complete=complete_flag_value,
              default=DEFAULT_GO, show_default=True,
              help="Go version, 'latest' or 'none'")
@click.option('--git-name', default='', help='Git author name')
@click.option('--git-email', default='', help='Git author e-mail')
@click.option('--packages', default='', help='Additional Ubuntu packages, space separated')
@click.option('--enable-wasm', is_flag=True, help='Install binaryen and the Rust wasm target')
@click.option('--enable-sudo', is_flag=True, help="Give the user sudo (password 'dev')")
@click.option('--no-neovim', is_flag=True, help='Do not install Neovim')
@click.option('--no-starship', is_flag=True, help='Do not install Starship')
@click.option('--no-atuin', is_flag=True, help='Do not install Atuin')
@click.option('--no-mise', is_flag=True, help='Do not install mise (languages come from Ubuntu)')
@click.option('--no-zellij', is_flag=True, help='Do not install Zellij')
@click.option('--port', 'ports', type=int, multiple=True, help='Port to publish (repeatable)')
@click.option('--volume', 'volumes', multiple=True,
              help='Extra HOST:CONTAINER[:MODE] volume (repeatable)')
@click.option('--configs', type=click.Path(exists=True, file_okay=False, path_type=Path),
              help="Directory copied into the container's home")
@click.option('--force', is_flag=True, help='Overwrite an existing environment')
@click.option('--interactive', '-i', is_flag=True, help='Choose shell and tools interactively')
def create(project_path, name, uid, gid, username, shell, nodejs, rust, python, go,
           git_name, git_email, packages, enable_wasm, enable_sudo, no_neovim,
           no_starship, no_atuin, no_mise, no_zellij, ports, volumes, configs,
           force, interactive):
    """Create a new environment for PROJECT_PATH"""
    settings = {
        'name': name or Path(project_path).name,
        'project_path': project_path,
        'host_uid': uid,
        'host_gid': gid,
        'username': username,
        'shell': Shell(shell),
        'install_node': nodejs,
        'install_rust': rust,
        'install_python': python,
        'install_go': go,
        'install_neovim': not no_neovim,
        'install_starship': not no_starship,
        'install_atuin': not no_atuin,
        'install_mise': not no_mise,
        'install_zellij': not no_zellij,
        'supplementary_packages': packages,
        'enable_wasm': enable_wasm,
        'enable_sudo': enable_sudo,
        'git_author_name': git_name,
        'git_author_email': git_email,
        'ports': list(ports),
        'volumes': list(volumes),
    }

    if interactive:
        settings = prompt_settings(settings)

    try:
        config = EnvConfig(**settings)
    except ValidationError as e:
        messages = [f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()]
        fail("Invalid configuration:\n  " + "\n  ".join(messages))

    store = get_store()
    try:
        env_dir = store.save(config, overwrite=force)
        if configs:
            store.import_configs(config.name, configs, replace=force)
        context = DockerfileGenerator(store).write(config)
    except EnvExistsError as e:
        fail(f"{e}. Use --force to overwrite it.")
    except PaulEnvsError as e:
        fail(str(e))

    echo_warnings(context.warnings)
    click.echo(f"Created environment '{config.name}' in {env_dir}")
    if configs:
        click.echo(f"Copied {configs} into {store.configs_dir(config.name)}")
    click.echo(f"Build it with: paul-envs build {config.name}")
