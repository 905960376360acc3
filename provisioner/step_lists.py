# provisioner/step_lists.py
# -*- coding: utf-8 -*-
"""
Built-in step lists and the assembly of the steps for a run.
"""

import importlib
from typing import Dict, List, Optional, Sequence

from provisioner.base_step import BaseStep
from provisioner.context import ProvisionContext
from provisioner.registry import StepRegistry

STEP_MODULES: List[str] = [
    "installer.system_installer",
    "installer.python_installer",
    "installer.docker_installer",
    "installer.nodejs_installer",
    "installer.ai_tools_installer",
    "configure.ssh_configurator",
    "configure.motd_configurator",
    "configure.shell_configurator",
]

DEFAULT_STEP_ORDER: List[str] = [
    "refresh_package_index",
    "upgrade_packages",
    "base_dev_tools",
    "python3",
    "uv",
    "docker",
    "nodejs",
    "claude_cli",
    "gemini_cli",
    "codex_cli",
    "cursor_cli",
    "ssh_directory",
    "ssh_config",
    "ssh_private_key",
    "pfetch",
    "motd_script",
    "disable_default_motd",
    "starship",
    "starship_config",
    "zshrc_starship_init",
]

# Same steps; the login environment is set up before the AI tooling.
SHELL_FIRST_STEP_ORDER: List[str] = [
    "refresh_package_index",
    "upgrade_packages",
    "base_dev_tools",
    "python3",
    "uv",
    "docker",
    "nodejs",
    "ssh_directory",
    "ssh_config",
    "ssh_private_key",
    "pfetch",
    "motd_script",
    "disable_default_motd",
    "starship",
    "starship_config",
    "zshrc_starship_init",
    "claude_cli",
    "gemini_cli",
    "codex_cli",
    "cursor_cli",
]

STEP_VARIANTS: Dict[str, List[str]] = {
    "default": DEFAULT_STEP_ORDER,
    "shell-first": SHELL_FIRST_STEP_ORDER,
}


def load_all_steps() -> None:
    """Import every step module so its steps register with the StepRegistry."""
    for module_name in STEP_MODULES:
        importlib.import_module(module_name)


def planned_tags(context: ProvisionContext, tags: Optional[Sequence[str]] = None) -> List[str]:
    """
    The ordered tags a run will execute: the explicit `tags`, else
    `step_order` from the settings, else the configured variant; minus
    `skip_steps`; dependency-ordered.

    Raises:
        KeyError: If a tag is not registered.
        ValueError: If the dependencies are circular.
    """
    load_all_steps()
    app_settings = context.app_settings
    if tags is None:
        tags = app_settings.step_order or STEP_VARIANTS[app_settings.step_variant]

    skipped = set(app_settings.skip_steps)
    for tag in list(tags) + sorted(skipped):
        StepRegistry.get_step(tag)

    selected = [tag for tag in tags if tag not in skipped]
    return StepRegistry.resolve_order(selected, include_dependencies=False)


def build_steps(
    context: ProvisionContext, tags: Optional[Sequence[str]] = None
) -> List[BaseStep]:
    """Instantiate the planned steps with the run's context."""
    return [
        StepRegistry.get_step(tag)(context) for tag in planned_tags(context, tags)
    ]
