"""Allow running paul-envs as ``python -m paul_envs``."""

from .cli.main import cli

if __name__ == '__main__':
    cli()
