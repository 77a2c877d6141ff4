"""Command line interface for paul-envs."""
