# provisioner/config_models.py
# -*- coding: utf-8 -*-
"""
Pydantic models for application configuration.

This module defines the structured settings for a provisioning run,
including defaults, type annotations, and descriptions.
It utilizes Pydantic for data validation and settings management.
"""

from pathlib import Path
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from provisioner import config as static_config

SYMBOLS_DEFAULT: Dict[str, str] = {
    "success": "✅", "error": "❌", "warning": "⚠️", "info": "ℹ️",
    "step": "➡️", "gear": "⚙️", "package": "📦", "rocket": "🚀",
    "sparkles": "✨", "critical": "🔥", "debug": "🐛", "key": "🔑",
}

LOG_PREFIX_DEFAULT: str = "[PROVISION]"

FailurePolicyName = Literal["fatal", "warn-and-continue"]
StepVariantName = Literal["default", "shell-first"]

MOTD_SCRIPT_TEMPLATE_DEFAULT: str = """\
#!/bin/bash
if command -v pfetch >/dev/null 2>&1; then
    pfetch
else
    echo "Server: $(hostname)"
fi
"""

# Placeholders are filled from PromptSettings; booleans are rendered as TOML literals.
STARSHIP_TEMPLATE_DEFAULT: str = """\
add_newline = {add_newline}
format = "[$hostname]({hostname_style}) in $directory$git_branch$git_status\\n$character"

[hostname]
ssh_only = {ssh_only}
format = "[$hostname]({hostname_style}) "

[character]
success_symbol = "[{prompt_symbol}]({success_style}) "
error_symbol = "[{prompt_symbol}]({error_style}) "

[directory]
style = "{directory_style}"
truncation_length = {truncation_length}
truncate_to_repo = {truncate_to_repo}

[git_branch]
style = "{git_branch_style}"
symbol = "{git_branch_symbol}"

[git_status]
style = "{git_status_style}"
"""


class AptSettings(BaseModel):
    """System package manager settings."""

    base_packages: List[str] = Field(
        default_factory=lambda: list(static_config.BASE_DEV_PACKAGES),
        description="Development tools installed by the base_dev_tools step.",
    )
    python_packages: List[str] = Field(
        default_factory=lambda: list(static_config.PYTHON_SYSTEM_PACKAGES),
        description="Packages installed when python3 is missing.",
    )
    cache_path: Path = Field(
        default=static_config.APT_PKGCACHE_PATH,
        description="Binary package cache regenerated by 'apt-get update'.",
    )
    success_stamp_path: Path = Field(
        default=static_config.APT_UPDATE_SUCCESS_STAMP_PATH,
        description="Stamp touched by apt's periodic hook after a successful update.",
    )
    stamp_path: Path = Field(
        default=static_config.APT_PROVISION_STAMP_PATH,
        description="Stamp the refresh step touches after its own successful update.",
    )
    cache_max_age_seconds: int = Field(
        default=static_config.APT_CACHE_MAX_AGE_SECONDS,
        ge=0,
        description="Package index younger than this is considered fresh.",
    )

    @property
    def update_stamp_paths(self) -> List[Path]:
        return [self.stamp_path, self.success_stamp_path, self.cache_path]


class ToolSettings(BaseModel):
    """Installer sources for the toolchain and AI CLI steps."""

    uv_install_url: str = static_config.UV_INSTALL_URL
    docker_install_url: str = static_config.DOCKER_INSTALL_URL
    nodesource_setup_url: str = static_config.NODESOURCE_SETUP_URL
    claude_install_url: str = static_config.CLAUDE_INSTALL_URL
    cursor_install_url: str = static_config.CURSOR_INSTALL_URL
    cursor_command: str = static_config.CURSOR_CLI_COMMAND
    gemini_cli_package: str = static_config.GEMINI_CLI_PACKAGE
    codex_package: str = static_config.CODEX_CLI_PACKAGE


class SshHost(BaseModel):
    """A named host entry in ~/.ssh/config."""

    alias: str
    hostname: str
    user: str = "root"
    identity_file: str = f"~/{static_config.SSH_DIR_NAME}/{static_config.SSH_KEY_NAME}"
    port: int = Field(default=22, ge=1, le=65535)
    forward_agent: bool = False
    group: str = "Servers"
    description: str = ""
    location: str = ""
    specs: str = ""
    private_ip: Optional[str] = None

    @field_validator("alias", "hostname")
    @classmethod
    def no_whitespace(cls, value: str) -> str:
        if not value or any(ch.isspace() for ch in value):
            raise ValueError("must be a non-empty value without whitespace")
        return value


class SshShortAlias(BaseModel):
    """A convenience alias rendered with HostName, User and IdentityFile only."""

    alias: str
    hostname: str
    user: str = "root"
    identity_file: str = f"~/{static_config.SSH_DIR_NAME}/{static_config.SSH_KEY_NAME}"


def _default_ssh_hosts() -> List[SshHost]:
    return [
        SshHost(
            alias="app-gw-01",
            hostname="91.98.235.207",
            group="Application Servers",
            description="Application Gateway Server",
            location="Nuremberg | Region: eu-central",
            specs="CX23 | x86 | 40 GB",
            private_ip="10.0.0.4",
        ),
        SshHost(
            alias="db-clickhouse-01",
            hostname="91.99.60.254",
            group="Database Servers",
            description="ClickHouse Database Server",
            location="Nuremberg | Region: eu-central",
            specs="CX43 | x86 | 160 GB + 250 GB",
            private_ip="10.0.0.3",
        ),
        SshHost(
            alias="db-core-01",
            hostname="46.224.69.195",
            group="Database Servers",
            description="Core Database Server",
            location="Falkenstein | Region: eu-central",
            specs="CX53 | x86 | 320 GB",
            private_ip="10.0.0.2",
        ),
    ]


def _default_short_aliases() -> List[SshShortAlias]:
    return [
        SshShortAlias(alias="gw", hostname="91.98.235.207"),
        SshShortAlias(alias="clickhouse", hostname="91.99.60.254"),
        SshShortAlias(alias="db-core", hostname="46.224.69.195"),
    ]


class SshSettings(BaseModel):
    """SSH client configuration and key ingestion settings."""

    dir_name: str = static_config.SSH_DIR_NAME
    config_name: str = static_config.SSH_CONFIG_NAME
    key_name: str = static_config.SSH_KEY_NAME
    max_key_bytes: int = Field(default=static_config.SSH_MAX_KEY_BYTES, gt=0)
    global_options: Dict[str, str] = Field(
        default_factory=lambda: {
            "IgnoreUnknown": "UseKeychain",
            "AddKeysToAgent": "yes",
            "UseKeychain": "yes",
            "Compression": "yes",
            "ServerAliveInterval": "60",
            "ServerAliveCountMax": "3",
            "TCPKeepAlive": "yes",
            "IdentitiesOnly": "yes",
        },
        description="Options written under 'Host *'.",
    )
    hosts: List[SshHost] = Field(default_factory=_default_ssh_hosts)
    short_aliases: List[SshShortAlias] = Field(
        default_factory=_default_short_aliases
    )


class MotdSettings(BaseModel):
    """Message-of-the-day settings."""

    motd_dir: Path = static_config.MOTD_DIR
    script_name: str = static_config.MOTD_SCRIPT_NAME
    script_template: str = MOTD_SCRIPT_TEMPLATE_DEFAULT
    pfetch_url: str = static_config.PFETCH_URL
    pfetch_path: Path = static_config.PFETCH_PATH
    disabled_scripts: List[str] = Field(
        default_factory=lambda: list(
            static_config.DEFAULT_DISABLED_MOTD_SCRIPTS
        )
    )


class PromptSettings(BaseModel):
    """Values substituted into the starship prompt template."""

    add_newline: bool = False
    ssh_only: bool = False
    hostname_style: str = "bold blue"
    prompt_symbol: str = "❯"
    success_style: str = "bold green"
    error_style: str = "bold red"
    directory_style: str = "bold bright-green"
    truncation_length: int = Field(default=3, ge=0)
    truncate_to_repo: bool = False
    git_branch_style: str = "bold yellow"
    git_branch_symbol: str = " "
    git_status_style: str = "bold red"


class ShellSettings(BaseModel):
    """Interactive shell customisation settings."""

    starship_install_url: str = static_config.STARSHIP_INSTALL_URL
    starship_config_path: str = static_config.STARSHIP_CONFIG_PATH
    starship_template: str = STARSHIP_TEMPLATE_DEFAULT
    prompt: PromptSettings = Field(default_factory=PromptSettings)
    zshrc_path: str = static_config.ZSHRC_PATH
    init_line: str = static_config.ZSH_STARSHIP_INIT_LINE
    init_marker: str = static_config.ZSH_STARSHIP_INIT_MARKER


class AppSettings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="PROVISION_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    log_prefix: str = Field(default=LOG_PREFIX_DEFAULT,
                            description="Prefix for log messages.")
    log_file: Optional[str] = Field(default=None,
                                    description="Append log output to this file as well.")
    home_dir: Optional[Path] = Field(default=None,
                                     description="Home directory receiving per-user artifacts. Defaults to the current user's home.")
    step_variant: StepVariantName = Field(default="default",
                                          description="Which built-in step list to run.")
    step_order: Optional[List[str]] = Field(default=None,
                                            description="Explicit step list; overrides step_variant.")
    skip_steps: List[str] = Field(default_factory=list,
                                  description="Step tags removed from the run.")
    failure_policy_overrides: Dict[str, FailurePolicyName] = Field(
        default_factory=dict,
        description="Per-step failure policy, keyed by step tag.",
    )
    backup_existing_artifacts: bool = Field(default=True,
                                            description="Back up a differing config file before overwriting it.")

    apt: AptSettings = Field(default_factory=AptSettings)
    tools: ToolSettings = Field(default_factory=ToolSettings)
    ssh: SshSettings = Field(default_factory=SshSettings)
    motd: MotdSettings = Field(default_factory=MotdSettings)
    shell: ShellSettings = Field(default_factory=ShellSettings)

    symbols: Dict[str, str] = Field(default_factory=lambda: dict(SYMBOLS_DEFAULT))
