import yaml

from paul_envs.core.dockerfile_generator import DockerfileGenerator


class TestDockerfileGenerator:
    """Tests for writing an environment's build files."""

    def test_write(self, store, make_config, envs_home):
        config = make_config(git_author_email="j@e.com")
        context = DockerfileGenerator(store).write(config)

        env_dir = envs_home / "my-project"
        assert context.path == env_dir
        assert context.dockerfile == env_dir / "Dockerfile"
        assert "FROM ubuntu:24.04 AS ubuntu-base" in context.dockerfile.read_text()
        compose = yaml.safe_load((env_dir / "compose.yaml").read_text())
        assert "my-project" in compose["services"]
        assert (env_dir / "configs").is_dir()
        assert context.build_args["GIT_AUTHOR_EMAIL"] == "j@e.com"
        assert context.warnings == []

    def test_write_overwrites(self, store, make_config, envs_home):
        generator = DockerfileGenerator(store)
        generator.write(make_config())
        generator.write(make_config(shell="zsh"))
        assert "ENV SHELL=/usr/bin/zsh" in (envs_home / "my-project" / "Dockerfile").read_text()

    def test_write_reports_warnings(self, store, make_config):
        context = DockerfileGenerator(store).write(make_config(install_mise=False, install_node="22"))
        assert context.warnings == ["Using Ubuntu's node as mise is disabled. NODE_VERSION=22 ignored."]
