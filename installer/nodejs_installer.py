# installer/nodejs_installer.py
# -*- coding: utf-8 -*-
"""
Handles the setup of the NodeSource repository and the installation of Node.js.
"""

from typing import Optional

from common.command_utils import log_provision, run_remote_installer
from installer.base_apt_step import AptStep
from provisioner.registry import StepRegistry


@StepRegistry.register(
    tag="nodejs",
    metadata={
        "dependencies": ["base_dev_tools"],
        "description": "Install Node.js LTS and npm from NodeSource",
    },
)
class NodejsStep(AptStep):
    """
    Installs Node.js LTS using the NodeSource repository. The setup script
    registers the apt source and refreshes the index itself, so the package
    install that follows does not update again.
    """

    name = "Install Node.js and npm"
    requires = ("apt-get", "curl")

    def is_satisfied(self) -> bool:
        return self.context.probe.is_available("npm")

    def apply(self) -> Optional[bool]:
        log_provision(
            "Setting up NodeSource repository...",
            "info",
            self.logger,
            self.app_settings,
            symbol="step",
        )
        run_remote_installer(
            self.app_settings.tools.nodesource_setup_url,
            self.app_settings,
            interpreter=("bash", "-"),
            elevated=True,
            preserve_env=True,
            current_logger=self.logger,
        )
        if not self.apt_manager.install(
            "nodejs", self.app_settings, update_first=False
        ):
            return False

        if not self.context.probe.is_available("npm"):
            log_provision(
                "'nodejs' installed but 'npm' was not found on PATH.",
                "error",
                self.logger,
                self.app_settings,
            )
            return False
        return True
