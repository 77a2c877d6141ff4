"""Environment configuration models."""

import re
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Dict, List

from pydantic import BaseModel, Field, field_validator

from ..core.constants import (
    DEFAULT_GID,
    DEFAULT_GO,
    DEFAULT_NODE,
    DEFAULT_PYTHON,
    DEFAULT_RUST,
    DEFAULT_UID,
    DEFAULT_USERNAME,
    IMAGE_PREFIX,
    LANGUAGES,
    VERSION_NONE,
)

NAME_PATTERN = re.compile(r"^[a-zA-Z0-9][a-zA-Z0-9_.-]*$")
USERNAME_PATTERN = re.compile(r"^[a-z_][a-z0-9_-]*$")
VERSION_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._+-]*$")
PACKAGE_PATTERN = re.compile(r"^[a-z0-9][a-z0-9+.:=~-]*$")


class Shell(str, Enum):
    """Shells that can be set as the user's default shell."""
    BASH = "bash"
    ZSH = "zsh"
    FISH = "fish"


class EnvConfig(BaseModel):
    """Build and run configuration of one environment."""
    name: str
    project_path: str
    # Ids 0 belong to root in the base image
    host_uid: int = Field(default=DEFAULT_UID, ge=1)
    host_gid: int = Field(default=DEFAULT_GID, ge=1)
    username: str = DEFAULT_USERNAME
    shell: Shell = Shell.BASH
    install_node: str = DEFAULT_NODE
    install_rust: str = DEFAULT_RUST
    install_python: str = DEFAULT_PYTHON
    install_go: str = DEFAULT_GO
    install_neovim: bool = True
    install_starship: bool = True
    install_atuin: bool = True
    install_mise: bool = True
    install_zellij: bool = True
    supplementary_packages: List[str] = Field(default_factory=list)
    enable_wasm: bool = False
    enable_sudo: bool = False
    git_author_name: str = ""
    git_author_email: str = ""
    ports: List[int] = Field(default_factory=list)
    volumes: List[str] = Field(default_factory=list)
    created_at: str = Field(default_factory=lambda: datetime.now().isoformat())

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        if not NAME_PATTERN.match(value):
            raise ValueError(
                "name must start with a letter or digit and only contain "
                "letters, digits, '_', '.' and '-'"
            )
        return value

    @field_validator("project_path")
    @classmethod
    def _check_project_path(cls, value: str) -> str:
        if not Path(value).is_absolute():
            raise ValueError(f"project path must be absolute: {value!r}")
        return value

    @field_validator("username")
    @classmethod
    def _check_username(cls, value: str) -> str:
        if not USERNAME_PATTERN.match(value) or value == "root":
            raise ValueError(f"invalid username: {value!r}")
        return value

    @field_validator("install_node", "install_rust", "install_python", "install_go")
    @classmethod
    def _check_version(cls, value: str) -> str:
        value = value.strip()
        if value and not VERSION_PATTERN.match(value):
            raise ValueError(f"invalid version: {value!r}")
        return value

    @field_validator("supplementary_packages", mode="before")
    @classmethod
    def _split_packages(cls, value):
        # Accept the space separated form of the build argument
        if isinstance(value, str):
            return value.split()
        return value

    @field_validator("supplementary_packages")
    @classmethod
    def _check_packages(cls, value: List[str]) -> List[str]:
        for package in value:
            if not PACKAGE_PATTERN.match(package):
                raise ValueError(f"invalid package name: {package!r}")
        return value

    @field_validator("ports")
    @classmethod
    def _check_ports(cls, value: List[int]) -> List[int]:
        for port in value:
            if not 0 < port < 65536:
                raise ValueError(f"invalid port: {port}")
        return value

    @field_validator("volumes")
    @classmethod
    def _check_volumes(cls, value: List[str]) -> List[str]:
        for volume in value:
            parts = volume.split(":")
            if len(parts) not in (2, 3) or not all(parts[:2]):
                raise ValueError(
                    f"invalid volume {volume!r}, expected HOST:CONTAINER[:MODE]"
                )
            if len(parts) == 3 and parts[2] not in ("ro", "rw"):
                raise ValueError(f"invalid volume mode in {volume!r}")
        return value

    @property
    def image_tag(self) -> str:
        return f"{IMAGE_PREFIX}-{self.name}".lower()

    @property
    def home(self) -> str:
        return f"/home/{self.username}"

    def toolchain_version(self, language: str) -> str:
        """Return the version requested for a language toolchain."""
        if language not in LANGUAGES:
            raise ValueError(f"Unknown language: {language}")
        return getattr(self, f"install_{language}")

    def wants_toolchain(self, language: str) -> bool:
        """A toolchain is requested when its version is neither empty nor 'none'."""
        version = self.toolchain_version(language)
        return bool(version) and version != VERSION_NONE

    def requested_toolchains(self) -> List[str]:
        return [language for language in LANGUAGES if self.wants_toolchain(language)]

    def build_args(self) -> Dict[str, str]:
        """Build arguments consumed by the rendered Dockerfile."""
        return {
            "HOST_UID": str(self.host_uid),
            "HOST_GID": str(self.host_gid),
            "GIT_AUTHOR_NAME": self.git_author_name,
            "GIT_AUTHOR_EMAIL": self.git_author_email,
        }
