"""Constants used throughout paul-envs."""


# Image / container naming
IMAGE_PREFIX = "paul-envs"
BASE_IMAGE = "ubuntu:24.04"

# Build stages, in build order
STAGE_BASE = "ubuntu-base"
STAGE_TOOLS = "ubuntu-tools"
STAGE_PROJECTS = "ubuntu-projects"

# Environment store layout
ENVS_HOME_VAR = "PAUL_ENVS_HOME"
DEFAULT_ENVS_HOME = "~/.local/share/paul-envs"
CONFIG_FILE_NAME = "env.json"
DOCKERFILE_NAME = "Dockerfile"
COMPOSE_FILE_NAME = "compose.yaml"
CONFIGS_DIR_NAME = "configs"

# Defaults of the build arguments
DEFAULT_UID = 1000
DEFAULT_GID = 1000
DEFAULT_USERNAME = "dev"
DEFAULT_NODE = "latest"
DEFAULT_RUST = "none"
DEFAULT_PYTHON = "none"
DEFAULT_GO = "none"

# Special toolchain versions
VERSION_LATEST = "latest"
VERSION_NONE = "none"

# Languages in installation order
LANGUAGES = ["node", "rust", "python", "go"]

# Packages present in every image
BASE_PACKAGES = ["build-essential", "bash", "git", "curl", "unzip"]

# Distribution packages used for each language when mise is disabled
DISTRO_LANGUAGE_PACKAGES = {
    "node": ["nodejs", "npm"],
    "python": ["python3", "python3-pip", "python3-venv"],
    "go": ["golang-go"],
}

# Password given to the user when sudo is enabled
SUDO_PASSWORD = "dev"

# Persisted directories, relative to the user's home
CACHE_DIR = ".container-cache"
LOCAL_DIR = ".container-local"
PROJECTS_DIR = "projects"
CONTAINER_CONFIGS_MOUNT = "/tmp/configs"

# Release artifacts
NEOVIM_URL = "https://github.com/neovim/neovim/releases/latest/download/nvim-linux-x86_64.tar.gz"
ZELLIJ_URL = "https://github.com/zellij-org/zellij/releases/latest/download/zellij-x86_64-unknown-linux-musl.tar.gz"
STARSHIP_INSTALL_URL = "https://starship.rs/install.sh"
ATUIN_INSTALL_URL = "https://setup.atuin.sh"
MISE_INSTALL_URL = "https://mise.jdx.dev/install.sh"
RUSTUP_INSTALL_URL = "https://sh.rustup.rs"
BINARYEN_RELEASES_API = "https://api.github.com/repos/WebAssembly/binaryen/releases/latest"
BINARYEN_DOWNLOAD_URL = "https://github.com/WebAssembly/binaryen/releases/download"

WASM_TARGET = "wasm32-unknown-unknown"

# Completion
LISTING_HEADER = "Environments:"
LISTING_BULLET = "  - "
