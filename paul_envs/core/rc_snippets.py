"""Shell startup-file snippets seeded into the user's home.

Each tool that hooks into the interactive shell (the history override,
starship, atuin, mise and the language toolchains) contributes one snippet
per startup file. Bash always gets them, as it stays installed as a fallback
shell; zsh and fish get them only when they are the selected shell.

The snippets are data: the build plan turns them into ``printf ... >> file``
commands and tests can inspect them directly.
"""

from dataclasses import dataclass
from typing import Dict, List

from ..models.env_config import EnvConfig, Shell

RC_FILES = {
    Shell.BASH: ".bashrc",
    Shell.ZSH: ".zshrc",
    Shell.FISH: ".config/fish/config.fish",
}


@dataclass(frozen=True)
class Snippet:
    """A block appended to a startup file."""
    tool: str
    shell: Shell
    lines: tuple
    comment: str = ""
    marker: str = ""

    def text(self) -> str:
        """Text appended to the file, starting with a blank line when commented."""
        body = "\n".join(self.lines) + "\n"
        if self.comment:
            return f"\n# {self.comment}\n{body}"
        return body


def overrides_file(shell: Shell) -> str:
    return f".container-overrides.{shell.value}"


def history_override(shell: Shell) -> Snippet:
    """Line sourcing the file that redirects HISTFILE to persisted storage."""
    name = overrides_file(shell)
    return Snippet(
        tool="history",
        shell=shell,
        lines=(f"[ -f ~/{name} ] && source ~/{name}",),
        comment="Container overrides",
        marker=name,
    )


def history_override_content(username: str, shell: Shell) -> str:
    """Content of ~/.container-overrides.<shell>."""
    return f"export HISTFILE=/home/{username}/.container-local/.{shell.value}_history"


def starship_init(shell: Shell) -> Snippet:
    if shell == Shell.FISH:
        line = "starship init fish | source"
    else:
        line = f'eval "$(starship init {shell.value})"'
    return Snippet("starship", shell, (line,), comment="Initialize starship prompt")


def atuin_init(shell: Shell) -> Snippet:
    if shell == Shell.FISH:
        line = "atuin init fish | source"
    else:
        line = f'eval "$(atuin init {shell.value})"'
    return Snippet("atuin", shell, (line,), comment="Initialize atuin")


def mise_activate(shell: Shell) -> Snippet:
    if shell == Shell.FISH:
        line = "mise activate fish | source"
    else:
        line = f'eval "$(mise activate {shell.value})"'
    return Snippet("mise", shell, (line,), comment="Initialize mise")


def toolchain_env(language: str, shell: Shell) -> Snippet:
    """Environment lines a language toolchain needs in interactive shells."""
    fish = shell == Shell.FISH
    if language == "rust":
        lines = ("set -gx PATH $HOME/.cargo/bin $PATH",) if fish else (". $HOME/.cargo/env",)
    elif language == "python":
        if fish:
            lines = ("set -gx PIP_CACHE_DIR $HOME/.container-cache/pip",)
        else:
            lines = ('export PIP_CACHE_DIR="$HOME/.container-cache/pip"',)
    elif language == "go":
        if fish:
            lines = (
                "set -gx GOPATH $HOME/.container-local/gopath",
                "set -gx GOMODCACHE $HOME/.container-cache/go/mod",
                "set -gx PATH $GOPATH/bin $PATH",
            )
        else:
            lines = (
                'export GOPATH="$HOME/.container-local/gopath"',
                'export GOMODCACHE="$HOME/.container-cache/go/mod"',
                'export PATH="$GOPATH/bin:$PATH"',
            )
    else:
        raise ValueError(f"No shell environment for {language}")
    return Snippet(language, shell, lines)


def target_shells(config: EnvConfig) -> List[Shell]:
    """Shells whose startup file is seeded: bash, plus the selected shell."""
    if config.shell == Shell.BASH:
        return [Shell.BASH]
    return [Shell.BASH, config.shell]


def _snippets_for(config: EnvConfig, shell: Shell) -> List[Snippet]:
    snippets = []
    # fish follows the XDG standards and needs no history redirection
    if shell != Shell.FISH:
        snippets.append(history_override(shell))
    if config.install_starship:
        snippets.append(starship_init(shell))
    if config.install_atuin:
        snippets.append(atuin_init(shell))
    if config.install_mise:
        snippets.append(mise_activate(shell))
    for language in config.requested_toolchains():
        if language != "node":
            snippets.append(toolchain_env(language, shell))
    return snippets


def seed_rc_files(config: EnvConfig) -> Dict[str, List[Snippet]]:
    """Snippets seeded into each startup file, keyed by path relative to $HOME."""
    return {RC_FILES[shell]: _snippets_for(config, shell) for shell in target_shells(config)}


def append_command(snippet: Snippet, home: str) -> str:
    """Single-line shell command appending a snippet to its startup file."""
    path = f"{home}/{RC_FILES[snippet.shell]}"
    return printf_append(snippet.text(), path)


def ensure_sourced_command(shell: Shell, home: str) -> str:
    """Shell command re-adding the history override line if it went missing."""
    snippet = history_override(shell)
    path = f"{home}/{RC_FILES[shell]}"
    return (
        f"if [ -f {path} ] && ! grep -qF '{snippet.marker}' {path}; then "
        f"{append_command(snippet, home)}; fi"
    )


def printf_append(text: str, path: str) -> str:
    """``printf`` command appending text to a file, kept on a single line."""
    fmt = text.replace("\\", "\\\\").replace("%", "%%").replace("\n", "\\n")
    return f"printf {shell_quote(fmt)} >> {path}"


def shell_quote(text: str) -> str:
    """Single-quote text for /bin/sh."""
    return "'" + text.replace("'", "'\"'\"'") + "'"
