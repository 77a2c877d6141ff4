import logging

import pytest

from paul_envs.core.build_plan import ROOT, USER, resolve_build_plan
from paul_envs.core.constants import STAGE_BASE, STAGE_PROJECTS, STAGE_TOOLS


def joined(step):
    return " && ".join(step.commands)


class TestResolveBuildPlan:
    """Tests for the build configuration resolver."""

    def test_default_plan(self, make_config):
        plan = resolve_build_plan(make_config())
        assert plan.step_names() == [
            "base-packages",
            "user",
            "persisted-dirs",
            "history-override",
            "neovim",
            "zellij",
            "starship",
            "starship-init",
            "atuin",
            "mise",
            "node-setup",
            "git-defaults",
            "configs-copy",
            "configs-install",
            "history-override-check",
            "neovim-plugins",
            "projects-dir",
        ]
        assert plan.warnings == []

    def test_stages_are_in_order(self, make_config):
        plan = resolve_build_plan(make_config(enable_sudo=True, install_rust="latest"))
        order = [STAGE_BASE, STAGE_TOOLS, STAGE_PROJECTS]
        indices = [order.index(step.stage) for step in plan.steps]
        assert indices == sorted(indices)

    def test_minimal_plan(self, make_config):
        config = make_config(install_node="none", install_neovim=False, install_starship=False,
                             install_atuin=False, install_mise=False, install_zellij=False)
        plan = resolve_build_plan(config)
        assert plan.step_names() == [
            "base-packages",
            "user",
            "persisted-dirs",
            "history-override",
            "git-defaults",
            "configs-copy",
            "configs-install",
            "history-override-check",
            "projects-dir",
        ]

    @pytest.mark.parametrize("shell", ["zsh", "fish"])
    def test_optional_shell_package(self, make_config, shell):
        plan = resolve_build_plan(make_config(shell=shell))
        assert f"apt-get install -y {shell}" in joined(plan.get("shell"))
        assert f"-s /usr/bin/{shell} dev" in joined(plan.get("user"))

    def test_bash_needs_no_shell_package(self, make_config):
        assert resolve_build_plan(make_config()).get("shell") is None

    def test_user_creation_uses_build_args(self, make_config):
        step = resolve_build_plan(make_config(username="alice")).get("user")
        assert step.user == ROOT
        assert "userdel -r ubuntu" in step.commands[0]
        assert "groupadd -g ${HOST_GID} alice" in step.commands
        assert "useradd -u ${HOST_UID} -g ${HOST_GID} -m -s /usr/bin/bash alice" in step.commands

    def test_fish_config_directory(self, make_config):
        step = resolve_build_plan(make_config(shell="fish")).get("persisted-dirs")
        assert "mkdir -p /home/dev/.config/fish" in step.commands

    def test_sudo(self, make_config):
        assert resolve_build_plan(make_config()).get("sudo") is None
        step = resolve_build_plan(make_config(enable_sudo=True)).get("sudo")
        assert "usermod -aG sudo dev" in step.commands
        assert 'echo "dev:dev" | chpasswd' in step.commands

    def test_supplementary_packages(self, make_config):
        step = resolve_build_plan(make_config(supplementary_packages="ripgrep jq")).get(
            "supplementary-packages")
        assert "apt-get install -y ripgrep jq" in step.commands

    def test_atuin_removes_stray_zshrc_unless_zsh(self, make_config):
        bash = resolve_build_plan(make_config()).get("atuin")
        zsh = resolve_build_plan(make_config(shell="zsh")).get("atuin")
        assert "rm -f /home/dev/.zshrc" in bash.commands
        assert "rm -f /home/dev/.zshrc" not in zsh.commands

    def test_mise_installs_requested_versions(self, make_config):
        config = make_config(install_node="20", install_python="3.12", install_go="none")
        step = resolve_build_plan(config).get("mise")
        assert step.user == USER
        assert "mise use -g node@20" in step.commands
        assert "mise use -g python@3.12" in step.commands
        assert not any("go@" in command for command in step.commands)
        assert step.commands.index('export PATH="/home/dev/.local/bin:$PATH"') < \
            step.commands.index("mise use -g node@20")

    def test_no_toolchain_no_mise_use(self, make_config):
        step = resolve_build_plan(make_config(install_node="none")).get("mise")
        assert not any("mise use" in command for command in step.commands)

    def test_without_mise_pins_are_dropped_with_warning(self, make_config, caplog):
        """A specific version without mise installs the distribution package."""
        config = make_config(install_mise=False, install_node="20", install_python="latest",
                             install_go="1.22")
        with caplog.at_level(logging.INFO, logger="paul_envs.core.build_plan"):
            plan = resolve_build_plan(config)

        assert plan.warnings == [
            "Using Ubuntu's node as mise is disabled. NODE_VERSION=20 ignored.",
            "Using Ubuntu's go as mise is disabled. GO_VERSION=1.22 ignored.",
        ]
        assert "NODE_VERSION=20 ignored" in caplog.text

        step = plan.get("distro-toolchains")
        assert step.user == ROOT
        commands = joined(step)
        assert "apt-get install -y nodejs npm" in commands
        assert "apt-get install -y python3 python3-pip python3-venv" in commands
        assert "apt-get install -y golang-go" in commands
        assert "update-alternatives --install /usr/bin/python python /usr/bin/python3 1" in commands
        assert "node@" not in commands
        assert plan.get("mise") is None

    def test_without_mise_rust_uses_rustup(self, make_config):
        plan = resolve_build_plan(make_config(install_mise=False, install_node="none",
                                              install_rust="1.80"))
        step = plan.get("distro-toolchains")
        assert step.commands[0].startswith("su - dev -c")
        assert "rustup default stable" in step.commands[0]
        assert plan.warnings == ["Using Ubuntu's rust as mise is disabled. RUST_VERSION=1.80 ignored."]

    def test_without_mise_latest_has_no_warning(self, make_config):
        plan = resolve_build_plan(make_config(install_mise=False))
        assert plan.warnings == []
        assert "apt-get install -y nodejs npm" in joined(plan.get("distro-toolchains"))

    def test_without_mise_or_toolchain_no_distro_step(self, make_config):
        plan = resolve_build_plan(make_config(install_mise=False, install_node="none"))
        assert plan.get("distro-toolchains") is None

    def test_node_setup_through_mise(self, make_config):
        step = resolve_build_plan(make_config()).get("node-setup")
        assert "mise exec -- npm install -g yarn" in step.commands
        assert "mise exec -- npm config set cache /home/dev/.container-cache/.npm" in step.commands

    def test_node_setup_without_mise(self, make_config):
        step = resolve_build_plan(make_config(install_mise=False)).get("node-setup")
        assert "npm install -g yarn" in step.commands
        assert not any("mise" in command for command in step.commands)

    def test_wasm_target_requires_rust(self, make_config):
        """Requesting wasm without rust adds no compiler target."""
        plan = resolve_build_plan(make_config(enable_wasm=True))
        assert plan.get("wasm-target") is None
        assert plan.get("binaryen") is not None

    @pytest.mark.parametrize("mise,prefix", [(True, "mise exec -- "), (False, "")])
    def test_wasm_target_with_rust(self, make_config, mise, prefix):
        plan = resolve_build_plan(make_config(enable_wasm=True, install_rust="latest",
                                              install_mise=mise))
        step = plan.get("wasm-target")
        assert f"{prefix}rustup target add wasm32-unknown-unknown" in step.commands

    def test_rust_without_wasm(self, make_config):
        plan = resolve_build_plan(make_config(install_rust="latest"))
        assert plan.get("wasm-target") is None
        assert plan.get("binaryen") is None

    def test_toolchain_env_directories(self, make_config):
        step = resolve_build_plan(make_config(install_python="latest", install_go="latest")).get(
            "toolchain-env")
        assert "mkdir -p /home/dev/.container-cache/pip" in step.commands
        assert "mkdir -p /home/dev/.container-local/gopath /home/dev/.container-cache/go/mod" in \
            step.commands

    def test_rc_seeding_precedes_config_copy(self, make_config):
        names = resolve_build_plan(make_config(install_rust="latest")).step_names()
        copy = names.index("configs-copy")
        for seeded in ("history-override", "starship-init", "atuin", "mise", "toolchain-env"):
            assert names.index(seeded) < copy
        assert names.index("history-override-check") == names.index("configs-install") + 1

    def test_history_check_covers_zsh(self, make_config):
        bash = resolve_build_plan(make_config()).get("history-override-check")
        zsh = resolve_build_plan(make_config(shell="zsh")).get("history-override-check")
        assert len(bash.commands) == 1
        assert len(zsh.commands) == 2
        assert "container-overrides.zsh" in zsh.commands[1]

    def test_git_identity_is_set_last(self, make_config):
        """Git identity comes after the config copy so it wins over copied files."""
        plan = resolve_build_plan(make_config(git_author_name="Jane", git_author_email="j@e.com"))
        names = plan.step_names()
        assert names.index("git-name") > names.index("configs-install")
        assert names.index("git-email") > names.index("configs-install")
        assert names.index("git-name") > names.index("git-defaults")
        tools = [step.name for step in plan.stage_steps(STAGE_TOOLS)]
        assert tools[-2:] == ["git-name", "git-email"]
        assert plan.get("git-name").commands == ['git config --global user.name "$GIT_AUTHOR_NAME"']

    def test_git_identity_skipped_when_unset(self, make_config):
        plan = resolve_build_plan(make_config(git_author_email="j@e.com"))
        assert plan.get("git-name") is None
        assert plan.get("git-email") is not None

    def test_neovim_plugins_best_effort(self, make_config):
        step = resolve_build_plan(make_config()).get("neovim-plugins")
        assert step.best_effort is True
        assert '"+Lazy! sync"' in step.commands[0]
        assert resolve_build_plan(make_config(install_neovim=False)).get("neovim-plugins") is None

    def test_only_plugin_sync_is_best_effort(self, make_config):
        plan = resolve_build_plan(make_config(install_rust="latest", enable_wasm=True,
                                              enable_sudo=True))
        assert [s.name for s in plan.steps if s.best_effort] == ["neovim-plugins"]
