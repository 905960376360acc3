# installer/base_apt_step.py
# -*- coding: utf-8 -*-
"""
Base class for steps that go through the Debian package manager.
"""

from typing import Optional, Tuple

from common.debian.apt_manager import AptManager
from provisioner.base_step import BaseStep


class AptStep(BaseStep):
    """
    A step backed by `apt-get`. On hosts without apt the sequencer skips it
    before `is_satisfied()` is ever called, so the AptManager is only built
    when the step actually runs.
    """

    requires: Tuple[str, ...] = ("apt-get",)

    _apt_manager: Optional[AptManager] = None

    @property
    def apt_manager(self) -> AptManager:
        if self._apt_manager is None:
            self._apt_manager = AptManager(logger=self.logger)
        return self._apt_manager
