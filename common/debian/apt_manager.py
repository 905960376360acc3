# common/debian/apt_manager.py
# -*- coding: utf-8 -*-
import logging
import os
import re
import subprocess
import time
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from common.command_utils import (
    command_exists,
    run_command,
    run_elevated_command,
)
from provisioner.config_models import AppSettings

UPGRADE_SUMMARY_RE = re.compile(r"^(\d+) upgraded,", re.MULTILINE)


def _c_locale_env() -> Dict[str, str]:
    """The current environment with messages forced to the untranslated C locale."""
    return {**os.environ, "LC_ALL": "C"}


class AptManager:
    """
    A centralized manager for Debian apt packages using command-line tools.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initializes the AptManager.
        Args:
            logger: An optional logging object.
        """
        self.logger = logger or logging.getLogger(__name__)
        if not command_exists("apt-get"):
            self.logger.critical(
                "'apt-get' command not found. This manager cannot function."
            )
            raise FileNotFoundError(
                "'apt-get' not found. Is this a Debian-based system?"
            )

    def update(
        self, app_settings: AppSettings, raise_error: bool = False
    ) -> bool:
        """
        Updates the list of available packages using 'apt-get update'.

        Args:
            app_settings: The application settings.
            raise_error: Whether to raise an exception on failure.

        Returns:
            True if successful, False otherwise.
        """
        self.logger.info("Updating apt package lists via 'apt-get update'...")
        try:
            run_elevated_command(
                ["apt-get", "update", "-qq"],
                app_settings,
                current_logger=self.logger,
            )
            self.logger.info("Apt package lists updated successfully.")
            return True
        except Exception as e:
            self.logger.error(f"Failed to update apt cache: {e}")
            if raise_error:
                raise
            return False

    def upgrade(
        self, app_settings: AppSettings, raise_error: bool = False
    ) -> bool:
        """
        Upgrades all installed packages using 'apt-get upgrade'.

        Args:
            app_settings: The application settings.
            raise_error: Whether to raise an exception on failure.

        Returns:
            True if successful, False otherwise.
        """
        self.logger.info("Upgrading installed packages via 'apt-get upgrade'...")
        try:
            run_elevated_command(
                ["apt-get", "upgrade", "-y", "-qq"],
                app_settings,
                current_logger=self.logger,
            )
            self.logger.info("Installed packages upgraded successfully.")
            return True
        except Exception as e:
            self.logger.error(f"Failed to upgrade packages: {e}")
            if raise_error:
                raise
            return False

    def pending_upgrades(self, app_settings: AppSettings) -> int:
        """
        Counts the packages 'apt-get upgrade' would upgrade, using a simulated
        run that changes nothing on the system. The run uses the C locale so
        the summary line is the untranslated "N upgraded, ..." one.

        Returns:
            The number of upgradable packages.

        Raises:
            subprocess.CalledProcessError: If the simulation fails.
            ValueError: If the apt summary line cannot be found.
        """
        result = run_command(
            ["apt-get", "-s", "upgrade"],
            app_settings,
            capture_output=True,
            check=True,
            current_logger=self.logger,
            log_output=False,
            env=_c_locale_env(),
        )
        match = UPGRADE_SUMMARY_RE.search(result.stdout or "")
        if not match:
            raise ValueError(
                "Could not find the upgrade summary in 'apt-get -s upgrade' output."
            )
        return int(match.group(1))

    def last_update_age(self, stamp_paths: Iterable[Path]) -> Optional[float]:
        """
        Age of the last successful 'apt-get update', taken from the youngest
        modification time among `stamp_paths`. Missing files are ignored.

        Returns:
            Seconds since the last refresh, or None if none of the files exist.
        """
        mtimes = []
        for stamp in stamp_paths:
            try:
                mtimes.append(Path(stamp).stat().st_mtime)
            except FileNotFoundError:
                continue
        if not mtimes:
            return None
        return time.time() - max(mtimes)

    def touch_stamp(self, stamp_path: Path, app_settings: AppSettings) -> bool:
        """
        Records a successful refresh by touching `stamp_path` as root.

        Returns:
            True if the stamp was written, False otherwise.
        """
        stamp_path = Path(stamp_path)
        try:
            run_elevated_command(
                ["mkdir", "-p", str(stamp_path.parent)],
                app_settings,
                current_logger=self.logger,
            )
            run_elevated_command(
                ["touch", str(stamp_path)],
                app_settings,
                current_logger=self.logger,
            )
            return True
        except (subprocess.CalledProcessError, OSError) as e:
            self.logger.warning(f"Could not write update stamp {stamp_path}: {e}")
            return False

    def missing_packages(
        self, packages: List[str], app_settings: AppSettings
    ) -> List[str]:
        """
        Returns the subset of `packages` that dpkg does not report as installed,
        preserving the given order.
        """
        missing = []
        for pkg_name in packages:
            try:
                status_cmd = [
                    "dpkg-query",
                    "-W",
                    "-f=${db:Status-Status}",
                    pkg_name,
                ]
                result = run_command(
                    status_cmd,
                    app_settings,
                    capture_output=True,
                    check=True,
                    current_logger=self.logger,
                    env=_c_locale_env(),
                )
                if result.stdout.strip() == "installed":
                    self.logger.debug(
                        f"Package '{pkg_name}' is already installed."
                    )
                else:
                    missing.append(pkg_name)
            except subprocess.CalledProcessError:
                missing.append(pkg_name)
        return missing

    def install(
        self,
        packages: Union[List[str], str],
        app_settings: AppSettings,
        update_first: bool = True,
    ) -> bool:
        """
        Installs one or more packages using 'apt-get install'. Packages that
        are already installed are skipped.

        Args:
            packages: A single package name or a list of package names.
            app_settings: The application settings.
            update_first: Whether to update the package lists before installing.

        Returns:
            True if successful, False otherwise.
        """
        if not isinstance(packages, list):
            packages = [packages]

        if update_first:
            if not self.update(app_settings):
                return False

        packages_to_install = self.missing_packages(packages, app_settings)
        for pkg_name in packages_to_install:
            self.logger.info(f"Marking package for installation: {pkg_name}")

        if not packages_to_install:
            self.logger.info("All requested packages are already installed.")
            return True

        self.logger.info(
            f"Committing installation for: {', '.join(packages_to_install)}"
        )
        try:
            cmd = ["apt-get", "install", "-y"] + packages_to_install
            run_elevated_command(
                cmd, app_settings, current_logger=self.logger
            )
            self.logger.info("Packages installed successfully.")
            return True
        except Exception as e:
            self.logger.error(f"Failed to install packages: {e}")
            return False
