"""Commands of the paul-envs CLI."""
