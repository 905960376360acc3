# installer/ai_tools_installer.py
# -*- coding: utf-8 -*-
"""
Installs the AI coding assistants: the Claude CLI, Gemini CLI, OpenAI Codex
and the Cursor agent. All of them are optional for a working server, so a
failure is reported as a warning and provisioning continues.
"""

import subprocess
from typing import Optional, Tuple

from common.command_utils import run_command, run_elevated_command
from installer.remote_installer_step import RemoteInstallerStep
from provisioner.base_step import BaseStep, FailurePolicy
from provisioner.registry import StepRegistry


@StepRegistry.register(
    tag="claude_cli",
    metadata={
        "dependencies": ["base_dev_tools"],
        "description": "Install the Claude CLI",
    },
)
class ClaudeCliStep(RemoteInstallerStep):
    name = "Install Claude CLI"
    failure_policy = FailurePolicy.WARN_AND_CONTINUE
    command_name = "claude"
    interpreter = ("bash",)

    def installer_url(self) -> str:
        return self.app_settings.tools.claude_install_url


class NpmGlobalPackageStep(BaseStep):
    """Installs a package globally with npm unless `npm list -g` finds it."""

    requires: Tuple[str, ...] = ("npm",)
    failure_policy = FailurePolicy.WARN_AND_CONTINUE

    def package_name(self) -> str:
        raise NotImplementedError

    def is_satisfied(self) -> bool:
        try:
            result = run_command(
                ["npm", "list", "-g", "--depth=0", self.package_name()],
                self.app_settings,
                check=False,
                capture_output=True,
                current_logger=self.logger,
                log_output=False,
            )
        except FileNotFoundError:
            return False
        return result.returncode == 0

    def apply(self) -> Optional[bool]:
        try:
            run_elevated_command(
                ["npm", "install", "-g", self.package_name()],
                self.app_settings,
                current_logger=self.logger,
            )
        except subprocess.CalledProcessError:
            self.logger.error(
                f"npm could not install '{self.package_name()}'."
            )
            return False
        return True


@StepRegistry.register(
    tag="gemini_cli",
    metadata={
        "dependencies": ["nodejs"],
        "description": "Install the Gemini CLI from npm",
    },
)
class GeminiCliStep(NpmGlobalPackageStep):
    name = "Install Gemini CLI"

    def package_name(self) -> str:
        return self.app_settings.tools.gemini_cli_package


@StepRegistry.register(
    tag="codex_cli",
    metadata={
        "dependencies": ["nodejs"],
        "description": "Install the OpenAI Codex CLI from npm",
    },
)
class CodexCliStep(NpmGlobalPackageStep):
    name = "Install OpenAI Codex CLI"

    def package_name(self) -> str:
        return self.app_settings.tools.codex_package


@StepRegistry.register(
    tag="cursor_cli",
    metadata={
        "dependencies": ["base_dev_tools"],
        "description": "Install the Cursor agent CLI",
    },
)
class CursorCliStep(RemoteInstallerStep):
    name = "Install Cursor CLI"
    failure_policy = FailurePolicy.WARN_AND_CONTINUE
    interpreter = ("bash",)

    def target_command(self) -> str:
        return self.app_settings.tools.cursor_command

    def installer_url(self) -> str:
        return self.app_settings.tools.cursor_install_url
