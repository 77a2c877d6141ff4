"""Tab-completion for the paul-envs command line.

The resolver maps a partially typed command line to candidates: subcommand
names first, then the subcommand's flags, the values of a flag, or the names
of existing environments. Environment names are scraped from the
human-readable output of ``paul-envs list``, whose entries are rendered as
``  - name`` bullets.

Completion never reports errors: a failing listing yields no candidates.
"""

import logging
import re
from typing import Callable, Iterable, List, Optional

from .constants import LISTING_BULLET, LISTING_HEADER

logger = logging.getLogger(__name__)

CREATE_FLAGS = [
    "--name",
    "--uid",
    "--gid",
    "--username",
    "--shell",
    "--nodejs",
    "--rust",
    "--python",
    "--go",
    "--git-name",
    "--git-email",
    "--packages",
    "--enable-wasm",
    "--enable-sudo",
    "--no-neovim",
    "--no-starship",
    "--no-atuin",
    "--no-mise",
    "--no-zellij",
    "--port",
    "--volume",
    "--configs",
    "--force",
    "--interactive",
]

LIST_FLAGS = ["--names-only", "--long"]

COMMAND_GRAMMAR = {
    "create": CREATE_FLAGS,
    "list": LIST_FLAGS,
    "ls": LIST_FLAGS,
    "build": ["--no-cache"],
    "run": [],
    "remove": ["--yes", "--volumes"],
    "dockerfile": [],
    "completion": [],
}

# Subcommands whose first positional argument is an environment name
NAME_COMMANDS = {"build", "run", "remove", "dockerfile"}

# Flags taking a value, with the candidates offered for it
FLAG_VALUES = {
    "--name": [],
    "--uid": [],
    "--gid": [],
    "--username": [],
    "--shell": ["bash", "zsh", "fish"],
    "--nodejs": ["latest", "none"],
    "--rust": ["latest", "none"],
    "--python": ["latest", "none"],
    "--go": ["latest", "none"],
    "--git-name": [],
    "--git-email": [],
    "--packages": [],
    "--port": [],
    "--volume": [],
    "--configs": [],
}

LISTING_ENTRY = re.compile(r"^\s*- (\S+)\s*$")


def format_listing(names: Iterable[str]) -> str:
    """Human-readable listing printed by ``paul-envs list``."""
    names = list(names)
    if not names:
        return "No environment found."
    return "\n".join([LISTING_HEADER] + [f"{LISTING_BULLET}{name}" for name in names])


def parse_listing(output: str) -> List[str]:
    """Extract environment names from the listing's ``  - name`` bullets."""
    names = []
    for line in output.splitlines():
        match = LISTING_ENTRY.match(line)
        if match:
            names.append(match.group(1))
    return names


def _default_listing() -> str:
    from ..utils.env_store import EnvStore

    return format_listing(EnvStore().names())


class CompletionResolver:
    """Resolves completion candidates for a partially typed command line."""

    def __init__(self, listing_source: Optional[Callable[[], str]] = None):
        self.listing_source = listing_source or _default_listing

    def environment_names(self) -> List[str]:
        try:
            return parse_listing(self.listing_source())
        except Exception as e:
            logger.debug("Environment listing failed during completion: %s", e)
            return []

    def complete(self, args: List[str], incomplete: str = "") -> List[str]:
        """Candidates for ``incomplete`` given the already typed ``args``.

        ``args`` excludes the program name, e.g. ``["build"]`` while
        completing ``paul-envs build <TAB>``.
        """
        if not args:
            return _matching(COMMAND_GRAMMAR, incomplete)

        command = args[0]
        if command not in COMMAND_GRAMMAR:
            return []

        previous = args[-1] if len(args) > 1 else None
        if previous in FLAG_VALUES:
            return _matching(FLAG_VALUES[previous], incomplete)

        if incomplete.startswith("-"):
            return _matching(COMMAND_GRAMMAR[command], incomplete)

        if command in NAME_COMMANDS and not _positionals(args[1:]):
            return _matching(self.environment_names(), incomplete)

        return []


def _matching(candidates: Iterable[str], incomplete: str) -> List[str]:
    return [candidate for candidate in candidates if candidate.startswith(incomplete)]


def _positionals(args: List[str]) -> List[str]:
    """Positional arguments among typed words, skipping flags and their values."""
    positionals = []
    skip = False
    for arg in args:
        if skip:
            skip = False
        elif arg.startswith("-"):
            skip = arg in FLAG_VALUES
        else:
            positionals.append(arg)
    return positionals
