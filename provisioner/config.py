# provisioner/config.py
"""
Centralized constants and default values for server provisioning.

This module defines the script version, installer URLs, package lists for
apt installation, fixed artifact paths and the MOTD scripts that are
disabled by default. User-tunable values are exposed through the settings
models in `provisioner.config_models`, which take their defaults from here.
"""

from pathlib import Path

# Represents the version of the provisioning logic.
SCRIPT_VERSION: str = "1.0.0"

DEFAULT_CONFIG_FILE: str = "provision.yaml"

# --- Package Lists (for apt installation) ---
BASE_DEV_PACKAGES: list[str] = [
    "curl",
    "wget",
    "git",
    "unzip",
    "zip",
    "software-properties-common",
    "build-essential",
    "zsh",
]

PYTHON_SYSTEM_PACKAGES: list[str] = [
    "python3",
    "python3-pip",
    "python3-venv",
]

# mtimes that record a successful 'apt-get update'; the youngest one counts.
# pkgcache.bin may be disabled, so the refresh step also writes its own stamp.
APT_PKGCACHE_PATH: Path = Path("/var/cache/apt/pkgcache.bin")
APT_UPDATE_SUCCESS_STAMP_PATH: Path = Path("/var/lib/apt/periodic/update-success-stamp")
APT_PROVISION_STAMP_PATH: Path = Path("/var/lib/apt/periodic/provision-update-stamp")
APT_CACHE_MAX_AGE_SECONDS: int = 3600

# --- Remote installers ---
UV_INSTALL_URL: str = "https://astral.sh/uv/install.sh"
DOCKER_INSTALL_URL: str = "https://get.docker.com"
NODESOURCE_SETUP_URL: str = "https://deb.nodesource.com/setup_lts.x"
CLAUDE_INSTALL_URL: str = "https://claude.ai/install.sh"
CURSOR_INSTALL_URL: str = "https://cursor.com/install"
STARSHIP_INSTALL_URL: str = "https://starship.rs/install.sh"
PFETCH_URL: str = "https://github.com/dylanaraps/pfetch/raw/master/pfetch"

GEMINI_CLI_PACKAGE: str = "@google/gemini-cli"
CODEX_CLI_PACKAGE: str = "@openai/codex"
CURSOR_CLI_COMMAND: str = "cursor-agent"

# Per-user install locations searched in addition to PATH.
USER_BIN_DIRS: list[str] = [".local/bin", ".cargo/bin"]

# --- SSH ---
SSH_DIR_NAME: str = ".ssh"
SSH_CONFIG_NAME: str = "config"
SSH_KEY_NAME: str = "id_ed25519"
SSH_DIR_MODE: int = 0o700
SSH_FILE_MODE: int = 0o600
SSH_MAX_KEY_BYTES: int = 16384

# --- MOTD ---
MOTD_DIR: Path = Path("/etc/update-motd.d")
MOTD_SCRIPT_NAME: str = "01-custom"
PFETCH_PATH: Path = Path("/usr/local/bin/pfetch")
DEFAULT_DISABLED_MOTD_SCRIPTS: list[str] = [
    "00-header",
    "10-help-text",
    "50-landscape-sysinfo",
    "50-motd-news",
    "90-updates-available",
]

# --- Shell ---
STARSHIP_CONFIG_PATH: str = ".config/starship.toml"
ZSHRC_PATH: str = ".zshrc"
ZSH_STARSHIP_INIT_LINE: str = 'eval "$(starship init zsh)"'
ZSH_STARSHIP_INIT_MARKER: str = "starship init zsh"
