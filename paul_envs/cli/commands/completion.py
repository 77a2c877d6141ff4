"""Completion command for paul-envs."""

import click
from click.shell_completion import get_completion_class

PROG_NAME = 'paul-envs'
COMPLETE_VAR = '_PAUL_ENVS_COMPLETE'


@click.command()
@click.argument('shell', type=click.Choice(['bash', 'zsh', 'fish']))
@click.pass_context
def completion(ctx, shell):
    """Print the tab-completion script for SHELL

    \b
    bash: eval "$(paul-envs completion bash)"
    zsh:  eval "$(paul-envs completion zsh)"
    fish: paul-envs completion fish | source
    """
    completion_class = get_completion_class(shell)
    root = ctx.find_root().command
    script = completion_class(root, {}, PROG_NAME, COMPLETE_VAR).source()
    click.echo(script)
