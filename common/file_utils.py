# common/file_utils.py
# -*- coding: utf-8 -*-
"""
File system utility functions for writing provisioning artifacts: config
files with fixed permissions, guarded line appends, system files installed
with elevated privileges, and backups of files about to be overwritten.
"""

import datetime
import logging
import os
import shutil
import stat
import tempfile
from pathlib import Path
from typing import Optional, Union

from provisioner.config_models import AppSettings

from .command_utils import log_provision, run_elevated_command

module_logger = logging.getLogger(__name__)


def file_mode(path: Path) -> int:
    """Return the permission bits of `path`."""
    return stat.S_IMODE(path.stat().st_mode)


def file_has_content(
    path: Path, content: str, mode: Optional[int] = None
) -> bool:
    """
    Check whether `path` is a regular file holding exactly `content`
    and, when `mode` is given, carrying exactly those permission bits.
    """
    if not path.is_file():
        return False
    try:
        if path.read_text(encoding="utf-8") != content:
            return False
    except (OSError, UnicodeDecodeError):
        return False
    if mode is not None and file_mode(path) != mode:
        return False
    return True


def is_executable(path: Path) -> bool:
    """True if `path` is a regular file with any execute bit set."""
    return path.is_file() and bool(file_mode(path) & 0o111)


def ensure_directory(
    dir_path: Path,
    mode: int,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """
    Create `dir_path` (and parents) if needed and force its permission bits
    to `mode`. Permissions are applied with chmod so the umask has no effect.
    """
    logger_to_use = current_logger if current_logger else module_logger
    if not dir_path.is_dir():
        logger_to_use.debug(f"Creating directory {dir_path}")
    dir_path.mkdir(parents=True, exist_ok=True)
    os.chmod(dir_path, mode)


def write_text_file(
    path: Path,
    content: str,
    mode: int,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """
    Write `content` to `path`, replacing any previous content.

    The file is created with `mode` so it is never readable by others, even
    briefly, and the mode is re-applied after the write so an existing file
    with looser permissions, or a permissive umask, cannot leave it open.
    Writing identical content again is always safe.
    """
    logger_to_use = current_logger if current_logger else module_logger
    path.parent.mkdir(parents=True, exist_ok=True)
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode)
    with os.fdopen(fd, "w", encoding="utf-8") as f:
        f.write(content)
    os.chmod(path, mode)
    logger_to_use.debug(f"Wrote {path} (mode {mode:o})")


def file_contains(path: Path, needle: str) -> bool:
    """True if `path` exists and contains `needle` anywhere (like `grep -qF`)."""
    if not path.is_file():
        return False
    try:
        return needle in path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return False


def append_line_once(
    path: Path,
    line: str,
    marker: Optional[str] = None,
    current_logger: Optional[logging.Logger] = None,
) -> bool:
    """
    Append `line` to `path` unless the file already contains `marker`
    (defaults to the line itself). A missing file is created holding just
    the line.

    Returns:
        True if the line was written, False if it was already present.
    """
    logger_to_use = current_logger if current_logger else module_logger
    needle = marker if marker is not None else line
    if file_contains(path, needle):
        return False

    prefix = ""
    if path.is_file():
        existing = path.read_text(encoding="utf-8")
        if existing and not existing.endswith("\n"):
            prefix = "\n"
    else:
        path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "a", encoding="utf-8") as f:
        f.write(f"{prefix}{line}\n")
    logger_to_use.debug(f"Appended '{line}' to {path}")
    return True


def backup_file(
    file_path: Union[str, Path],
    app_settings: Optional[AppSettings],
    current_logger: Optional[logging.Logger] = None,
) -> bool:
    """
    Backup a specified file to a timestamped backup file next to it.

    Parameters:
        file_path (Union[str, Path]): The path of the file to be backed up.
        app_settings (Optional[AppSettings]): Application-specific settings, which
            may include customized symbols for log messages.
        current_logger (Optional[logging.Logger]): Logger instance to use for
            logging messages. If not provided, a module-level logger will be used.

    Returns:
        bool: True if the backup succeeded or no backup was needed (the file
            does not exist). False if an error occurred during the copy.
    """
    logger_to_use = current_logger if current_logger else module_logger
    source = Path(file_path)

    if not source.is_file():
        log_provision(
            f"File {source} does not exist or is not a regular file. No backup needed.",
            "info",
            logger_to_use,
            app_settings,
        )
        return True

    timestamp = datetime.datetime.now().strftime("%Y%m%d-%H%M%S")
    backup_path = source.with_name(f"{source.name}.bak.{timestamp}")
    try:
        shutil.copy2(source, backup_path)
        log_provision(
            f"Backed up {source} to {backup_path}",
            "success",
            logger_to_use,
            app_settings,
        )
        return True
    except OSError as e:
        log_provision(
            f"Failed to backup {source} to {backup_path}: {e}",
            "error",
            logger_to_use,
            app_settings,
        )
        return False


def install_system_file(
    dest_path: Path,
    content: str,
    mode: str,
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """
    Install `content` at a root-owned `dest_path` with `mode` (octal string
    for chmod). The content is staged in a temporary file that is copied into
    place with elevated privileges; the staging file is always removed.

    Raises:
        subprocess.CalledProcessError: If the copy or chmod fails.
    """
    logger_to_use = current_logger if current_logger else module_logger
    temp_file_path = ""
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            delete=False,
            prefix="provision_sysfile_",
            encoding="utf-8",
        ) as temp_f:
            temp_f.write(content)
            temp_file_path = temp_f.name
        run_elevated_command(
            ["cp", temp_file_path, str(dest_path)],
            app_settings,
            current_logger=logger_to_use,
        )
        run_elevated_command(
            ["chmod", mode, str(dest_path)],
            app_settings,
            current_logger=logger_to_use,
        )
    finally:
        if temp_file_path and os.path.exists(temp_file_path):
            os.unlink(temp_file_path)


def replace_text_file(
    path: Path,
    content: str,
    mode: int,
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """
    Write a managed artifact. An existing file with different content is
    backed up first when `backup_existing_artifacts` is enabled.

    Raises:
        OSError: If the backup or the write fails.
    """
    logger_to_use = current_logger if current_logger else module_logger
    if (
        app_settings.backup_existing_artifacts
        and path.is_file()
        and not file_has_content(path, content)
    ):
        if not backup_file(path, app_settings, logger_to_use):
            raise OSError(f"Could not back up {path} before overwriting it.")
    write_text_file(path, content, mode, logger_to_use)
