# installer/docker_installer.py
# -*- coding: utf-8 -*-
"""
Handles the installation of Docker Engine through Docker's convenience script.
"""

from installer.remote_installer_step import RemoteInstallerStep
from provisioner.registry import StepRegistry


@StepRegistry.register(
    tag="docker",
    metadata={
        "dependencies": ["base_dev_tools"],
        "description": "Install Docker Engine",
    },
)
class DockerStep(RemoteInstallerStep):
    """
    Runs the get.docker.com script, which adds Docker's apt repository and
    installs docker-ce, the CLI, containerd and the compose plugin. The script
    elevates with sudo on its own when needed.
    """

    name = "Install Docker"
    command_name = "docker"

    def installer_url(self) -> str:
        return self.app_settings.tools.docker_install_url
