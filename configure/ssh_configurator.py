# configure/ssh_configurator.py
# -*- coding: utf-8 -*-
"""
SSH client setup: the ~/.ssh directory, the client config with the known
servers, and ingestion of the private key from standard input.
"""

import os
import tempfile
from pathlib import Path
from typing import Optional

from common.command_utils import log_provision
from common.file_utils import (
    ensure_directory,
    file_has_content,
    file_mode,
    replace_text_file,
    write_text_file,
)
from provisioner import config as static_config
from provisioner.base_step import BaseStep, FailurePolicy, StepSkipped
from provisioner.registry import StepRegistry
from provisioner.templates import render_ssh_config


@StepRegistry.register(
    tag="ssh_directory",
    metadata={
        "dependencies": [],
        "description": "Create ~/.ssh with mode 700",
    },
)
class SshDirectoryStep(BaseStep):
    name = "Create SSH directory"

    def is_satisfied(self) -> bool:
        ssh_dir = self.context.ssh_dir
        return ssh_dir.is_dir() and file_mode(ssh_dir) == static_config.SSH_DIR_MODE

    def apply(self) -> Optional[bool]:
        ensure_directory(self.context.ssh_dir, static_config.SSH_DIR_MODE, self.logger)
        return True


@StepRegistry.register(
    tag="ssh_config",
    metadata={
        "dependencies": ["ssh_directory"],
        "description": "Write ~/.ssh/config with the server host entries",
    },
)
class SshConfigStep(BaseStep):
    name = "Write SSH client config"

    @property
    def config_path(self) -> Path:
        return self.context.ssh_dir / self.app_settings.ssh.config_name

    def desired_content(self) -> str:
        return render_ssh_config(self.app_settings.ssh)

    def is_satisfied(self) -> bool:
        return file_has_content(
            self.config_path, self.desired_content(), static_config.SSH_FILE_MODE
        )

    def apply(self) -> Optional[bool]:
        ensure_directory(self.context.ssh_dir, static_config.SSH_DIR_MODE, self.logger)
        replace_text_file(
            self.config_path,
            self.desired_content(),
            static_config.SSH_FILE_MODE,
            self.app_settings,
            self.logger,
        )
        log_provision(
            f"SSH config written to {self.config_path}",
            "success",
            self.logger,
            self.app_settings,
        )
        return True


@StepRegistry.register(
    tag="ssh_private_key",
    metadata={
        "dependencies": ["ssh_directory"],
        "description": "Store the Ed25519 private key read from standard input",
    },
)
class SshPrivateKeyStep(BaseStep):
    """
    Reads a private key pasted on standard input (terminated by EOF) and
    stores it with mode 600. An existing non-empty key is never replaced.
    """

    name = "Install SSH private key"
    failure_policy = FailurePolicy.WARN_AND_CONTINUE

    @property
    def key_path(self) -> Path:
        return self.context.ssh_dir / self.app_settings.ssh.key_name

    def _key_present(self) -> bool:
        return self.key_path.is_file() and self.key_path.stat().st_size > 0

    def is_satisfied(self) -> bool:
        return (
            self._key_present()
            and file_mode(self.key_path) == static_config.SSH_FILE_MODE
        )

    def _read_key(self) -> str:
        max_bytes = self.app_settings.ssh.max_key_bytes
        data = self.context.input_stream.read(max_bytes + 1)
        if len(data.encode("utf-8")) > max_bytes:
            raise ValueError(
                f"Key input exceeds the {max_bytes} byte limit; refusing to store it."
            )
        return data

    def apply(self) -> Optional[bool]:
        ensure_directory(self.context.ssh_dir, static_config.SSH_DIR_MODE, self.logger)

        if self._key_present():
            os.chmod(self.key_path, static_config.SSH_FILE_MODE)
            self.logger.info(f"Fixed permissions on existing key {self.key_path}")
            return True

        log_provision(
            "Paste your SSH private key (Ed25519) below, "
            "then press Ctrl+D on a new line:",
            "info",
            self.logger,
            self.app_settings,
            symbol="key",
        )

        temp_file_path = ""
        try:
            with tempfile.NamedTemporaryFile(
                mode="w",
                delete=False,
                prefix="provision_key_",
                encoding="utf-8",
            ) as temp_f:
                os.chmod(temp_f.name, static_config.SSH_FILE_MODE)
                temp_file_path = temp_f.name
                temp_f.write(self._read_key())

            key_material = Path(temp_file_path).read_text(encoding="utf-8")
            if not key_material.strip():
                raise StepSkipped("No key provided. Skipping key creation.")
            if not key_material.endswith("\n"):
                key_material += "\n"
            write_text_file(
                self.key_path, key_material, static_config.SSH_FILE_MODE, self.logger
            )
        finally:
            if temp_file_path and os.path.exists(temp_file_path):
                os.unlink(temp_file_path)

        log_provision(
            f"SSH key saved to {self.key_path}",
            "success",
            self.logger,
            self.app_settings,
        )
        return True
