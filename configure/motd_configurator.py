# configure/motd_configurator.py
# -*- coding: utf-8 -*-
"""
Replaces the distribution's login banner with a pfetch system summary.
"""

from pathlib import Path
from typing import List, Optional

from common.command_utils import log_provision, run_elevated_command
from common.file_utils import file_has_content, install_system_file, is_executable
from provisioner.base_step import BaseStep, FailurePolicy, StepSkipped
from provisioner.registry import StepRegistry
from provisioner.templates import render_motd_script


class MotdStep(BaseStep):
    """Common base: MOTD customisation is cosmetic, so failures only warn."""

    failure_policy = FailurePolicy.WARN_AND_CONTINUE

    @property
    def motd_dir(self) -> Path:
        return Path(self.app_settings.motd.motd_dir)


@StepRegistry.register(
    tag="pfetch",
    metadata={
        "dependencies": ["base_dev_tools"],
        "description": "Install pfetch to /usr/local/bin",
    },
)
class PfetchStep(MotdStep):
    name = "Install pfetch"
    requires = ("curl",)

    def is_satisfied(self) -> bool:
        return Path(self.app_settings.motd.pfetch_path).exists()

    def apply(self) -> Optional[bool]:
        motd = self.app_settings.motd
        run_elevated_command(
            ["curl", "-sSL", motd.pfetch_url, "-o", str(motd.pfetch_path)],
            self.app_settings,
            current_logger=self.logger,
        )
        run_elevated_command(
            ["chmod", "+x", str(motd.pfetch_path)],
            self.app_settings,
            current_logger=self.logger,
        )
        return True


@StepRegistry.register(
    tag="motd_script",
    metadata={
        "dependencies": ["pfetch"],
        "description": "Install the custom MOTD banner script",
    },
)
class MotdScriptStep(MotdStep):
    name = "Install custom MOTD script"

    @property
    def script_path(self) -> Path:
        return self.motd_dir / self.app_settings.motd.script_name

    def is_satisfied(self) -> bool:
        return file_has_content(
            self.script_path, render_motd_script(self.app_settings.motd)
        ) and is_executable(self.script_path)

    def apply(self) -> Optional[bool]:
        if not self.motd_dir.is_dir():
            raise StepSkipped(f"{self.motd_dir} does not exist; this system has no update-motd.")
        install_system_file(
            self.script_path,
            render_motd_script(self.app_settings.motd),
            "755",
            self.app_settings,
            self.logger,
        )
        log_provision(
            f"MOTD script installed at {self.script_path}",
            "success",
            self.logger,
            self.app_settings,
        )
        return True


@StepRegistry.register(
    tag="disable_default_motd",
    metadata={
        "dependencies": [],
        "description": "Stop the stock MOTD scripts from running",
    },
)
class DisableDefaultMotdStep(MotdStep):
    name = "Disable default MOTD scripts"

    def enabled_scripts(self) -> List[Path]:
        scripts = (self.motd_dir / name for name in self.app_settings.motd.disabled_scripts)
        return [script for script in scripts if is_executable(script)]

    def is_satisfied(self) -> bool:
        return not self.enabled_scripts()

    def apply(self) -> Optional[bool]:
        for script in self.enabled_scripts():
            run_elevated_command(
                ["chmod", "-x", str(script)],
                self.app_settings,
                current_logger=self.logger,
            )
            self.logger.debug(f"Disabled {script}")
        return True
