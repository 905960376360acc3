# installer/remote_installer_step.py
# -*- coding: utf-8 -*-
"""
Base class for tools installed by piping a vendor script into a shell.
"""

from typing import Optional, Sequence, Tuple

from common.command_utils import log_provision, run_remote_installer
from provisioner.base_step import BaseStep


class RemoteInstallerStep(BaseStep):
    """
    Installs `command_name` with `curl <curl_flags> <url> | <interpreter>`
    unless the command is already available.

    Subclasses set `command_name` and the interpreter details and return the
    installer URL from `installer_url()`, usually read from the settings.
    """

    requires: Tuple[str, ...] = ("curl",)

    command_name: str = ""
    interpreter: Sequence[str] = ("sh",)
    curl_flags: str = "-fsSL"
    elevated: bool = False

    def installer_url(self) -> str:
        raise NotImplementedError

    def target_command(self) -> str:
        return self.command_name

    def is_satisfied(self) -> bool:
        return self.context.probe.is_available(self.target_command())

    def apply(self) -> Optional[bool]:
        run_remote_installer(
            self.installer_url(),
            self.app_settings,
            interpreter=self.interpreter,
            curl_flags=self.curl_flags,
            elevated=self.elevated,
            current_logger=self.logger,
        )
        if not self.context.probe.is_available(self.target_command()):
            log_provision(
                f"Installer finished but '{self.target_command()}' "
                "is not on PATH yet; a new login shell may be needed.",
                "warning",
                self.logger,
                self.app_settings,
            )
        return True
