# provisioner/cli_handler.py
# -*- coding: utf-8 -*-
"""
Handles command-line interface interactions: the privilege check, the step
plan listing and the closing hints printed after a run.
"""

import logging
import os
from typing import List, Optional

from common.command_utils import log_provision
from provisioner import config
from provisioner.config_models import AppSettings
from provisioner.registry import StepRegistry

module_logger = logging.getLogger(__name__)


def check_root(
    app_settings: AppSettings, current_logger: Optional[logging.Logger] = None
) -> bool:
    """
    Warn when not running as root. System-level steps then go through sudo,
    which may prompt for a password.

    Returns:
        True if the effective user is root.
    """
    logger_to_use = current_logger if current_logger else module_logger
    if os.geteuid() == 0:
        return True
    log_provision(
        "Not running as root. "
        "System steps will use sudo and may ask for your password.",
        "warning",
        logger_to_use,
        app_settings,
    )
    return False


def view_step_plan(
    tags: List[str],
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> str:
    """
    Log and return a table of the steps a run would execute, in order, with
    their failure policy and dependencies.
    """
    logger_to_use = current_logger if current_logger else module_logger
    lines = [f"Planned steps (variant: {app_settings.step_variant}):"]
    for index, tag in enumerate(tags, start=1):
        step_class = StepRegistry.get_step(tag)
        policy = app_settings.failure_policy_overrides.get(
            tag, step_class.failure_policy.value
        )
        deps = ", ".join(sorted(StepRegistry.get_step_dependencies(tag))) or "-"
        lines.append(
            f"  {index:>2}. {tag:<24} {policy:<18} after: {deps}"
        )
    if app_settings.skip_steps:
        lines.append(f"  Skipped: {', '.join(app_settings.skip_steps)}")
    plan_text = "\n".join(lines)
    log_provision(plan_text, "info", logger_to_use, app_settings)
    return plan_text


def print_completion_hints(
    app_settings: AppSettings, current_logger: Optional[logging.Logger] = None
) -> None:
    logger_to_use = current_logger if current_logger else module_logger
    log_provision("Setup complete.", "success", logger_to_use, app_settings, symbol="sparkles")
    for message in (
        "Please restart your session or run 'zsh' to see changes.",
        "Don't forget to change your default shell: sudo chsh -s $(which zsh) $USER",
    ):
        log_provision(message, "info", logger_to_use, app_settings)


def print_banner(
    app_settings: AppSettings, current_logger: Optional[logging.Logger] = None
) -> str:
    """Log the opening banner: project name, version and tagline."""
    logger_to_use = current_logger if current_logger else module_logger
    banner = f"Server Provisioner v{config.SCRIPT_VERSION} - Automated Environment Config"
    log_provision(banner, "info", logger_to_use, app_settings, symbol="rocket")
    return banner
