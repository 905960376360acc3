# common/probes.py
# -*- coding: utf-8 -*-
"""
Capability probes answer "is this tool available on the target machine?".

Steps never call `shutil.which` themselves; they ask the probe carried by
the provisioning context, which lets tests substitute a probe that reports
any combination of installed tools.
"""

import os
import shutil
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Sequence


class CapabilityProbe(ABC):
    """Interface for checking whether a named capability is present."""

    @abstractmethod
    def is_available(self, name: str) -> bool:
        """
        Check whether the capability `name` (usually a command) is available.

        Returns:
            True if it is present, False otherwise.
        """
        pass


class PathCapabilityProbe(CapabilityProbe):
    """
    Looks commands up on PATH.

    Per-user installers (uv, the Claude and Cursor CLIs) drop binaries in
    directories such as ~/.local/bin that are not on PATH until the next
    login, so extra directories can be searched as well.
    """

    def __init__(self, extra_paths: Optional[Sequence[Path]] = None):
        self.extra_paths: List[Path] = list(extra_paths or [])

    def search_path(self) -> str:
        entries = [os.environ.get("PATH", os.defpath)]
        entries.extend(str(p) for p in self.extra_paths)
        return os.pathsep.join(e for e in entries if e)

    def is_available(self, name: str) -> bool:
        return shutil.which(name, path=self.search_path()) is not None
