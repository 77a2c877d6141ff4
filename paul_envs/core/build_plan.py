"""Build configuration resolver.

Turns an :class:`EnvConfig` into an ordered list of installation steps. Each
configuration flag gates one or more steps; a step whose gate does not hold is
simply absent from the plan. The order is fixed:

base OS -> user account -> tool layer -> copied configs -> git identity ->
project workspace.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from ..models.env_config import EnvConfig, Shell
from . import rc_snippets
from .constants import (
    ATUIN_INSTALL_URL,
    BASE_PACKAGES,
    BINARYEN_DOWNLOAD_URL,
    BINARYEN_RELEASES_API,
    CACHE_DIR,
    CONTAINER_CONFIGS_MOUNT,
    CONFIGS_DIR_NAME,
    DISTRO_LANGUAGE_PACKAGES,
    LOCAL_DIR,
    MISE_INSTALL_URL,
    NEOVIM_URL,
    PROJECTS_DIR,
    RUSTUP_INSTALL_URL,
    STAGE_BASE,
    STAGE_PROJECTS,
    STAGE_TOOLS,
    STARSHIP_INSTALL_URL,
    SUDO_PASSWORD,
    VERSION_LATEST,
    WASM_TARGET,
    ZELLIJ_URL,
)

logger = logging.getLogger(__name__)

ROOT = "root"
USER = "user"

APT_CLEANUP = "rm -rf /var/lib/apt/lists/*"


@dataclass
class BuildStep:
    """One Dockerfile instruction of the plan.

    ``commands`` are chained with ``&&`` for RUN steps, so any failing command
    aborts the build. A ``best_effort`` step swallows its own failure.
    """
    name: str
    stage: str
    user: str
    commands: List[str]
    instruction: str = "RUN"
    best_effort: bool = False


@dataclass
class BuildPlan:
    config: EnvConfig
    steps: List[BuildStep] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def step_names(self) -> List[str]:
        return [step.name for step in self.steps]

    def get(self, name: str) -> Optional[BuildStep]:
        for step in self.steps:
            if step.name == name:
                return step
        return None

    def stage_steps(self, stage: str) -> List[BuildStep]:
        return [step for step in self.steps if step.stage == stage]


def apt_install(packages: List[str]) -> List[str]:
    return [
        "apt-get update",
        "apt-get install -y " + " ".join(packages),
        APT_CLEANUP,
    ]


def _release_tarball(url: str, link_target: str, link_name: str) -> List[str]:
    archive = url.rsplit("/", 1)[-1]
    return [
        f"curl -LO {url}",
        f"tar -C /opt -xzf {archive}",
        f"rm {archive}",
        f"ln -s {link_target} /usr/local/bin/{link_name}",
    ]


class BuildPlanResolver:
    """Selects the installation steps an environment needs."""

    def __init__(self, config: EnvConfig):
        self.config = config
        self.home = config.home
        self.plan = BuildPlan(config=config)
        self.rc_files = rc_snippets.seed_rc_files(config)

    def resolve(self) -> BuildPlan:
        self._base_stage()
        self._tools_stage()
        self._projects_stage()
        return self.plan

    def _add(self, name, stage, user, commands, **kwargs):
        self.plan.steps.append(BuildStep(name, stage, user, list(commands), **kwargs))

    def _warn(self, message: str):
        logger.info(message)
        self.plan.warnings.append(message)

    def _rc_commands(self, tool: str) -> List[str]:
        """Append commands for every startup-file snippet of a tool."""
        commands = []
        for snippets in self.rc_files.values():
            for snippet in snippets:
                if snippet.tool == tool:
                    commands.append(rc_snippets.append_command(snippet, self.home))
        return commands

    def _base_stage(self):
        config = self.config
        self._add("base-packages", STAGE_BASE, ROOT, apt_install(BASE_PACKAGES))

        if config.shell != Shell.BASH:
            self._add("shell", STAGE_BASE, ROOT, apt_install([config.shell.value]))

        self._add("user", STAGE_BASE, ROOT, [
            "if id -u ubuntu >/dev/null 2>&1; then userdel -r ubuntu; fi",
            f"groupadd -g ${{HOST_GID}} {config.username}",
            f"useradd -u ${{HOST_UID}} -g ${{HOST_GID}} -m -s /usr/bin/{config.shell.value} {config.username}",
            f"chown -R {config.username}:{config.username} {self.home}",
        ])

        directories = [f"{self.home}/{CACHE_DIR}", f"{self.home}/{LOCAL_DIR}"]
        if config.shell == Shell.FISH:
            directories.append(f"{self.home}/.config/fish")
        self._add("persisted-dirs", STAGE_BASE, USER, [f"mkdir -p {d}" for d in directories])

        # Both override files are written so a later switch to zsh finds one
        commands = []
        for shell in (Shell.BASH, Shell.ZSH):
            content = rc_snippets.history_override_content(config.username, shell)
            path = f"{self.home}/{rc_snippets.overrides_file(shell)}"
            commands.append(f"echo {rc_snippets.shell_quote(content)} > {path}")
        commands.extend(self._rc_commands("history"))
        self._add("history-override", STAGE_BASE, USER, commands)

    def _tools_stage(self):
        config = self.config
        username = config.username

        if config.enable_sudo:
            self._add("sudo", STAGE_TOOLS, ROOT, apt_install(["sudo"]) + [
                f"usermod -aG sudo {username}",
                f'echo "{username}:{SUDO_PASSWORD}" | chpasswd',
            ])

        if config.supplementary_packages:
            self._add("supplementary-packages", STAGE_TOOLS, ROOT,
                      apt_install(config.supplementary_packages))

        if config.install_neovim:
            self._add("neovim", STAGE_TOOLS, ROOT, _release_tarball(
                NEOVIM_URL, "/opt/nvim-linux-x86_64/bin/nvim", "nvim"))

        if config.install_zellij:
            self._add("zellij", STAGE_TOOLS, ROOT, _release_tarball(
                ZELLIJ_URL, "/opt/zellij", "zellij"))

        if config.install_starship:
            self._add("starship", STAGE_TOOLS, ROOT, [
                f"curl -sS {STARSHIP_INSTALL_URL} | sh -s -- -y",
            ])

        if config.enable_wasm:
            self._add("binaryen", STAGE_TOOLS, ROOT, [
                f"BINARYEN_VERSION=$(curl -s {BINARYEN_RELEASES_API} "
                "| grep -o '\"tag_name\": *\"[^\"]*\"' | sed 's/\"tag_name\": *\"//;s/\"//')",
                f'curl -L "{BINARYEN_DOWNLOAD_URL}/${{BINARYEN_VERSION}}/'
                'binaryen-${BINARYEN_VERSION}-x86_64-linux.tar.gz" -o binaryen.tar.gz',
                "tar -xzf binaryen.tar.gz",
                "mv binaryen-${BINARYEN_VERSION} /opt/binaryen",
                "ln -s /opt/binaryen/bin/* /usr/local/bin/",
                "rm binaryen.tar.gz",
            ])

        # Startup-file seeding happens before configs are copied so it is
        # present when the user ships no shell configuration
        if config.install_starship:
            self._add("starship-init", STAGE_TOOLS, USER, self._rc_commands("starship"))

        if config.install_atuin:
            commands = [f"curl --proto '=https' --tlsv1.2 -sSf {ATUIN_INSTALL_URL} | bash"]
            commands.extend(self._rc_commands("atuin"))
            if config.shell != Shell.ZSH:
                # atuin's installer writes a default .zshrc
                commands.append(f"rm -f {self.home}/.zshrc")
            self._add("atuin", STAGE_TOOLS, USER, commands)

        if config.install_mise:
            self._mise()
        elif config.requested_toolchains():
            self._distro_toolchains()

        self._language_envs()

        self._add("git-defaults", STAGE_TOOLS, USER, [
            "git config --global merge.conflictstyle zdiff3",
        ])

        self._copy_configs()

        if config.install_neovim:
            self._add("neovim-plugins", STAGE_TOOLS, USER, [
                f"if [ -d {self.home}/.config/nvim ]; then "
                'nvim --headless "+Lazy! sync" +qa; fi',
            ], best_effort=True)

        # Set last so copied configuration cannot override it
        if config.git_author_name:
            self._add("git-name", STAGE_TOOLS, USER, [
                'git config --global user.name "$GIT_AUTHOR_NAME"',
            ])
        if config.git_author_email:
            self._add("git-email", STAGE_TOOLS, USER, [
                'git config --global user.email "$GIT_AUTHOR_EMAIL"',
            ])

    def _mise(self):
        commands = [f"curl {MISE_INSTALL_URL} | sh"]
        commands.extend(self._rc_commands("mise"))
        toolchains = self.config.requested_toolchains()
        if toolchains:
            commands.append(f'export PATH="{self.home}/.local/bin:$PATH"')
        for language in toolchains:
            version = self.config.toolchain_version(language)
            commands.append(f"mise use -g {language}@{version}")
        self._add("mise", STAGE_TOOLS, USER, commands)

    def _distro_toolchains(self):
        config = self.config
        commands = []
        for language in config.requested_toolchains():
            version = config.toolchain_version(language)
            if version != VERSION_LATEST:
                self._warn(
                    f"Using Ubuntu's {language} as mise is disabled. "
                    f"{language.upper()}_VERSION={version} ignored."
                )
            if language == "rust":
                commands.append(
                    f"su - {config.username} -c \"curl --proto '=https' --tlsv1.2 -sSf "
                    f"{RUSTUP_INSTALL_URL} | sh -s -- -y && "
                    f". {self.home}/.cargo/env && rustup default stable\""
                )
            else:
                commands.extend(apt_install(DISTRO_LANGUAGE_PACKAGES[language]))
            if language == "python":
                commands.append("update-alternatives --install /usr/bin/python python /usr/bin/python3 1")
        self._add("distro-toolchains", STAGE_TOOLS, ROOT, commands)

    def _language_envs(self):
        config = self.config
        mise = config.install_mise
        path_export = f'export PATH="{self.home}/.local/bin:$PATH"'
        run = "mise exec -- " if mise else ""

        if config.wants_toolchain("node"):
            commands = [path_export] if mise else []
            commands.extend([
                f'{run}npm config set prefix "{self.home}/.local"',
                f"{run}npm config set cache {self.home}/{CACHE_DIR}/.npm",
                f"{run}npm install -g yarn",
                f"{run}yarn config set cacheFolder {self.home}/{CACHE_DIR}/.yarn",
            ])
            self._add("node-setup", STAGE_TOOLS, USER, commands)

        if config.enable_wasm:
            if config.wants_toolchain("rust"):
                commands = [path_export] if mise else [f". {self.home}/.cargo/env"]
                commands.append(f"{run}rustup target add {WASM_TARGET}")
                self._add("wasm-target", STAGE_TOOLS, USER, commands)
            else:
                logger.debug("wasm requested without rust, skipping %s target", WASM_TARGET)

        commands = []
        if config.wants_toolchain("python"):
            commands.append(f"mkdir -p {self.home}/{CACHE_DIR}/pip")
        if config.wants_toolchain("go"):
            commands.append(
                f"mkdir -p {self.home}/{LOCAL_DIR}/gopath {self.home}/{CACHE_DIR}/go/mod"
            )
        for language in ("rust", "python", "go"):
            commands.extend(self._rc_commands(language))
        if commands:
            self._add("toolchain-env", STAGE_TOOLS, USER, commands)

    def _copy_configs(self):
        config = self.config
        owner = f"{config.username}:{config.username}"
        self._add("configs-copy", STAGE_TOOLS, USER, [
            f"--chown={owner} {CONFIGS_DIR_NAME}/ {CONTAINER_CONFIGS_MOUNT}/",
        ], instruction="COPY")
        self._add("configs-install", STAGE_TOOLS, USER, [
            f'if [ -n "$(ls -A {CONTAINER_CONFIGS_MOUNT} 2>/dev/null)" ]; then '
            f"cp -r {CONTAINER_CONFIGS_MOUNT}/. {self.home}/; fi",
            f"rm -rf {CONTAINER_CONFIGS_MOUNT}",
        ])

        # Copied startup files may drop the history override
        commands = [rc_snippets.ensure_sourced_command(Shell.BASH, self.home)]
        if config.shell == Shell.ZSH:
            commands.append(rc_snippets.ensure_sourced_command(Shell.ZSH, self.home))
        self._add("history-override-check", STAGE_TOOLS, USER, commands)

    def _projects_stage(self):
        self._add("projects-dir", STAGE_PROJECTS, USER, [
            f"mkdir -p {self.home}/{PROJECTS_DIR}",
        ])


def resolve_build_plan(config: EnvConfig) -> BuildPlan:
    """Resolve the ordered installation steps for a configuration."""
    return BuildPlanResolver(config).resolve()
