from unittest.mock import MagicMock, patch

import pytest

from paul_envs.cli.main import cli
from paul_envs.services.exceptions import DockerServiceError


@pytest.fixture
def mock_docker():
    with patch('paul_envs.cli.helpers.DockerService') as mock_docker_service_class:
        docker = MagicMock()
        mock_docker_service_class.return_value = docker
        yield docker


class TestBuildCommand:
    """Tests for the build command."""

    def test_build(self, cli_runner, store, make_config, mock_docker, envs_home):
        store.save(make_config(git_author_name='Jane'))

        def build_image(**kwargs):
            kwargs['on_log']("Step 1/20 : FROM ubuntu:24.04\n")
            return MagicMock()

        mock_docker.build_image.side_effect = build_image

        result = cli_runner.invoke(cli, ['build', 'my-project'])

        assert result.exit_code == 0, result.output
        assert "Step 1/20 : FROM ubuntu:24.04" in result.output
        assert "Container image built: paul-envs-my-project" in result.output
        kwargs = mock_docker.build_image.call_args[1]
        env_dir = envs_home / 'my-project'
        assert kwargs['path'] == str(env_dir)
        assert kwargs['dockerfile'] == str(env_dir / 'Dockerfile')
        assert kwargs['tag'] == 'paul-envs-my-project'
        assert kwargs['nocache'] is False
        assert kwargs['buildargs']['GIT_AUTHOR_NAME'] == 'Jane'
        assert (env_dir / 'Dockerfile').is_file()

    def test_build_no_cache(self, cli_runner, store, make_config, mock_docker):
        store.save(make_config())

        result = cli_runner.invoke(cli, ['build', 'my-project', '--no-cache'])

        assert result.exit_code == 0, result.output
        assert "Building without cache" in result.output
        assert mock_docker.build_image.call_args[1]['nocache'] is True

    def test_build_failure(self, cli_runner, store, make_config, mock_docker):
        store.save(make_config())
        mock_docker.build_image.side_effect = DockerServiceError("Failed to build image: exit 1")

        result = cli_runner.invoke(cli, ['build', 'my-project'])

        assert result.exit_code == 1
        assert "Error: Build failed: Failed to build image: exit 1" in result.output

    def test_build_unknown_environment(self, cli_runner, mock_docker):
        result = cli_runner.invoke(cli, ['build', 'ghost'])

        assert result.exit_code == 1
        assert "Error: Environment 'ghost' not found" in result.output
        mock_docker.build_image.assert_not_called()

    def test_build_docker_unavailable(self, cli_runner, store, make_config):
        store.save(make_config())
        with patch('paul_envs.cli.helpers.DockerService') as mock_docker_service_class:
            mock_docker_service_class.side_effect = DockerServiceError("Docker daemon is not running.")
            result = cli_runner.invoke(cli, ['build', 'my-project'])

        assert result.exit_code == 1
        assert "Docker daemon is not running" in result.output
