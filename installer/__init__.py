"""
Installation steps.

Each module registers its steps with the StepRegistry on import; use
`provisioner.step_lists.load_all_steps()` to import them all.
"""

from installer.base_apt_step import AptStep
from installer.remote_installer_step import RemoteInstallerStep

__all__ = ["AptStep", "RemoteInstallerStep"]
