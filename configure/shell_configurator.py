# configure/shell_configurator.py
# -*- coding: utf-8 -*-
"""
Interactive shell customisation: the starship prompt, its configuration and
the zsh init line that activates it.
"""

from pathlib import Path
from typing import Optional

from common.command_utils import log_provision
from common.file_utils import append_line_once, file_contains, file_has_content, replace_text_file
from installer.remote_installer_step import RemoteInstallerStep
from provisioner.base_step import BaseStep
from provisioner.registry import StepRegistry
from provisioner.templates import render_starship_config

STARSHIP_CONFIG_MODE = 0o644


@StepRegistry.register(
    tag="starship",
    metadata={
        "dependencies": ["base_dev_tools"],
        "description": "Install the starship prompt",
    },
)
class StarshipInstallStep(RemoteInstallerStep):
    name = "Install starship prompt"
    command_name = "starship"
    curl_flags = "-sS"
    interpreter = ("sh", "-s", "--", "--yes")
    elevated = True

    def installer_url(self) -> str:
        return self.app_settings.shell.starship_install_url


@StepRegistry.register(
    tag="starship_config",
    metadata={
        "dependencies": [],
        "description": "Write ~/.config/starship.toml",
    },
)
class StarshipConfigStep(BaseStep):
    name = "Configure starship prompt"

    @property
    def config_path(self) -> Path:
        return self.context.home_path(self.app_settings.shell.starship_config_path)

    def is_satisfied(self) -> bool:
        return file_has_content(
            self.config_path, render_starship_config(self.app_settings.shell)
        )

    def apply(self) -> Optional[bool]:
        replace_text_file(
            self.config_path,
            render_starship_config(self.app_settings.shell),
            STARSHIP_CONFIG_MODE,
            self.app_settings,
            self.logger,
        )
        log_provision(
            f"Starship config written to {self.config_path}",
            "success",
            self.logger,
            self.app_settings,
        )
        return True


@StepRegistry.register(
    tag="zshrc_starship_init",
    metadata={
        "dependencies": ["starship"],
        "description": "Activate starship in ~/.zshrc",
    },
)
class ZshrcInitStep(BaseStep):
    """Appends the starship init line to ~/.zshrc exactly once."""

    name = "Enable starship in zsh"

    @property
    def zshrc_path(self) -> Path:
        return self.context.home_path(self.app_settings.shell.zshrc_path)

    def is_satisfied(self) -> bool:
        return file_contains(self.zshrc_path, self.app_settings.shell.init_marker)

    def apply(self) -> Optional[bool]:
        shell = self.app_settings.shell
        appended = append_line_once(
            self.zshrc_path, shell.init_line, marker=shell.init_marker,
            current_logger=self.logger,
        )
        if appended:
            self.logger.info(f"Added starship init to {self.zshrc_path}")
        return True
