# installer/python_installer.py
# -*- coding: utf-8 -*-
"""
Installs the system Python 3 toolchain and the `uv` package manager.
"""

from typing import Optional

from installer.base_apt_step import AptStep
from installer.remote_installer_step import RemoteInstallerStep
from provisioner.registry import StepRegistry


@StepRegistry.register(
    tag="python3",
    metadata={
        "dependencies": ["base_dev_tools"],
        "description": "Install python3, pip and venv",
    },
)
class Python3Step(AptStep):
    name = "Install Python 3"

    def is_satisfied(self) -> bool:
        return self.context.probe.is_available("python3")

    def apply(self) -> Optional[bool]:
        return self.apt_manager.install(
            self.app_settings.apt.python_packages,
            self.app_settings,
            update_first=False,
        )


@StepRegistry.register(
    tag="uv",
    metadata={
        "dependencies": ["base_dev_tools"],
        "description": "Install the uv Python package manager",
    },
)
class UvStep(RemoteInstallerStep):
    name = "Install uv"
    command_name = "uv"
    curl_flags = "-LsSf"

    def installer_url(self) -> str:
        return self.app_settings.tools.uv_install_url
