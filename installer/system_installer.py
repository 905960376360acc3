# installer/system_installer.py
# -*- coding: utf-8 -*-
"""
System package steps: refresh the package index, apply pending upgrades and
install the base development tools.
"""

from typing import Optional

from common.command_utils import log_provision
from installer.base_apt_step import AptStep
from provisioner.registry import StepRegistry


@StepRegistry.register(
    tag="refresh_package_index",
    metadata={
        "dependencies": [],
        "description": "Refresh the apt package index",
    },
)
class RefreshPackageIndexStep(AptStep):
    """
    Runs `apt-get update` unless the package index was refreshed within
    `apt.cache_max_age_seconds`. The last refresh is read from the youngest of
    the step's own stamp, apt's update-success-stamp and pkgcache.bin, so a
    host with the binary cache disabled still converges.
    """

    name = "Refresh package index"

    def is_satisfied(self) -> bool:
        apt = self.app_settings.apt
        age = self.apt_manager.last_update_age(apt.update_stamp_paths)
        if age is None:
            return False
        self.logger.debug(f"apt package index is {age:.0f}s old")
        return age < apt.cache_max_age_seconds

    def apply(self) -> Optional[bool]:
        self.apt_manager.update(self.app_settings, raise_error=True)
        self.apt_manager.touch_stamp(self.app_settings.apt.stamp_path, self.app_settings)
        return True


@StepRegistry.register(
    tag="upgrade_packages",
    metadata={
        "dependencies": ["refresh_package_index"],
        "description": "Upgrade installed system packages",
    },
)
class UpgradePackagesStep(AptStep):
    name = "Upgrade system packages"

    def is_satisfied(self) -> bool:
        pending = self.apt_manager.pending_upgrades(self.app_settings)
        self.logger.debug(f"{pending} package(s) can be upgraded")
        return pending == 0

    def apply(self) -> Optional[bool]:
        self.apt_manager.upgrade(self.app_settings, raise_error=True)
        return True


@StepRegistry.register(
    tag="base_dev_tools",
    metadata={
        "dependencies": ["refresh_package_index"],
        "description": "Install curl, git, build tools and zsh",
    },
)
class BaseDevToolsStep(AptStep):
    name = "Install base development tools"

    def is_satisfied(self) -> bool:
        return not self.apt_manager.missing_packages(
            self.app_settings.apt.base_packages, self.app_settings
        )

    def apply(self) -> Optional[bool]:
        packages = self.app_settings.apt.base_packages
        log_provision(
            f"Installing: {' '.join(packages)}",
            "info",
            self.logger,
            self.app_settings,
            symbol="package",
        )
        return self.apt_manager.install(
            packages, self.app_settings, update_first=False
        )
