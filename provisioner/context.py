# provisioner/context.py
# -*- coding: utf-8 -*-
"""
The provisioning context passed to every step at construction.

It bundles what a step may need to know about the target machine (the
settings, the home directory receiving per-user artifacts, the capability
probe and the input stream for interactive secrets) so that no step reads
ambient global state while it runs.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, TextIO

from common.probes import CapabilityProbe, PathCapabilityProbe
from provisioner import config as static_config
from provisioner.config_models import AppSettings


class ProvisionContext:
    """Per-run environment shared by all steps."""

    def __init__(
        self,
        app_settings: AppSettings,
        home_dir: Path,
        probe: CapabilityProbe,
        logger: Optional[logging.Logger] = None,
        input_stream: Optional[TextIO] = None,
    ):
        self.app_settings = app_settings
        self.home_dir = Path(home_dir)
        self.probe = probe
        self.logger = logger or logging.getLogger("provisioner")
        self.input_stream = input_stream if input_stream is not None else sys.stdin

    def home_path(self, relative: str) -> Path:
        """Resolve a path given relative to the home directory."""
        return self.home_dir / relative

    @property
    def ssh_dir(self) -> Path:
        return self.home_path(self.app_settings.ssh.dir_name)


def build_context(
    app_settings: AppSettings,
    logger: Optional[logging.Logger] = None,
    probe: Optional[CapabilityProbe] = None,
    input_stream: Optional[TextIO] = None,
) -> ProvisionContext:
    """
    Create the context for a run. The home directory comes from the settings
    when configured, otherwise from the current user; the default probe also
    searches the per-user bin directories below that home.
    """
    home_dir = (
        Path(app_settings.home_dir).expanduser()
        if app_settings.home_dir
        else Path.home()
    )
    if probe is None:
        probe = PathCapabilityProbe(
            extra_paths=[home_dir / d for d in static_config.USER_BIN_DIRS]
        )
    return ProvisionContext(
        app_settings=app_settings,
        home_dir=home_dir,
        probe=probe,
        logger=logger,
        input_stream=input_stream,
    )
