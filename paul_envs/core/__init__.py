"""Core functionality for paul-envs.

Submodules are imported directly (``from paul_envs.core.build_plan import
...``); the models depend on :mod:`paul_envs.core.constants`.
"""
