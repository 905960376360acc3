# common/command_utils.py
# -*- coding: utf-8 -*-
"""
Utilities for executing shell commands and logging their output.
"""

import logging
import os
import shutil
import subprocess
from typing import Dict, List, Optional, Sequence, Union

from provisioner.config_models import SYMBOLS_DEFAULT, AppSettings

module_logger = logging.getLogger(__name__)

# "success" has no logging level of its own; it is an INFO line with its own mark.
LEVEL_METHODS: Dict[str, str] = {
    "debug": "debug",
    "info": "info",
    "success": "info",
    "warning": "warning",
    "error": "error",
    "critical": "critical",
}


def log_provision(
    message: str,
    level: str = "info",
    current_logger: Optional[logging.Logger] = None,
    app_settings: Optional[AppSettings] = None,
    exc_info: bool = False,
    symbol: Optional[str] = None,
) -> None:
    """
    Logs a provisioning status line at the requested level.

    The line's status symbol travels on the record as `symbol`, where
    SymbolFormatter picks it up. Without an explicit `symbol` key the level
    decides it, so "success" lines carry the success mark and not the INFO one.

    Args:
        message (str): The log message to be recorded.
        level (str): The severity level of the log message. Defaults to "info". Common options
            include "debug", "info", "success", "warning", "error", and "critical".
            "success" is logged at INFO level.
        current_logger (Optional[logging.Logger]): A logger instance to use for logging. If not provided,
            a module-level logger will be used.
        app_settings (Optional[AppSettings]): Optional application settings that can influence logging behavior.
        exc_info (bool): Indicator to include exception details in the log. By default, this is set to False.
        symbol (Optional[str]): Key into the symbol table overriding the level's own
            symbol, e.g. "step", "gear" or "rocket".
    """
    effective_logger = current_logger if current_logger else module_logger
    symbols = (
        app_settings.symbols
        if app_settings and app_settings.symbols
        else SYMBOLS_DEFAULT
    )
    symbol_key = symbol or (level if level in LEVEL_METHODS else "info")
    extra = {"symbol": symbols.get(symbol_key, SYMBOLS_DEFAULT.get(symbol_key, ""))}

    log_method = getattr(effective_logger, LEVEL_METHODS.get(level, "info"))
    log_method(message, exc_info=exc_info, extra=extra)


def _get_elevated_command_prefix(preserve_env: bool = False) -> List[str]:
    """
    Determines the command prefix that ensures elevated privileges when required.

    Args:
        preserve_env: Ask sudo to keep the caller's environment (`sudo -E`).

    Returns:
        List[str]: ["sudo"] (or ["sudo", "-E"]) if the process is not running as
        root, otherwise an empty list.
    """
    if os.geteuid() == 0:
        return []
    return ["sudo", "-E"] if preserve_env else ["sudo"]


def run_command(
    command: Union[List[str], str],
    app_settings: Optional[AppSettings],
    check: bool = True,
    shell: bool = False,
    capture_output: bool = False,
    text: bool = True,
    cmd_input: Optional[str] = None,
    current_logger: Optional[logging.Logger] = None,
    cwd: Optional[str] = None,
    env: Optional[Dict[str, str]] = None,
    log_output: bool = True,
) -> subprocess.CompletedProcess:
    """
    Executes a system command and logs the process details and results, including both
    standard output and error, if specified.

    Args:
        command (Union[List[str], str]): The system command to execute. If shell mode is
            enabled and the input is a list, elements will be joined into a single string.
        app_settings (Optional[AppSettings]): Application settings providing the logging symbols.
        check (bool): Whether to raise a CalledProcessError when a non-zero exit code is returned.
        shell (bool): If True, the system command will be executed in a shell.
        capture_output (bool): Whether to capture standard output and standard error.
        text (bool): Indicates if the output streams should be interpreted as text.
        cmd_input (Optional[str]): Input to be passed to the command's standard input.
        current_logger (Optional[logging.Logger]): A logger to use for logging details.
        cwd (Optional[str]): The working directory from which to execute the command.
        env (Optional[Dict[str, str]]): Environment variables for the command execution.
        log_output (bool): Whether captured stdout/stderr is echoed to the log on success.
            Disable for commands whose output is a downloaded script or other bulk data.

    Returns:
        subprocess.CompletedProcess: The completed process instance.

    Raises:
        subprocess.CalledProcessError: If the process returns a non-zero exit code and check is True.
        FileNotFoundError: If the specified command is not found on the system.
    """
    effective_logger = current_logger if current_logger else module_logger
    command_to_log_str: str
    command_to_run: Union[List[str], str]

    if shell:
        if isinstance(command, list):
            command_to_run = " ".join(command)
        else:
            command_to_run = command
        command_to_log_str = str(command_to_run)
    else:
        if isinstance(command, str):
            log_provision(
                f"Running string command '{command}' without shell=True. Consider list format.",
                "warning",
                effective_logger,
                app_settings,
            )
            command_to_run = command.split()
            command_to_log_str = command
        else:
            command_to_run = command
            command_to_log_str = subprocess.list2cmdline(command)

    log_provision(
        f"Executing: {command_to_log_str} {f'(in {cwd})' if cwd else ''}",
        "debug",
        effective_logger,
        app_settings,
        symbol="gear",
    )
    try:
        result = subprocess.run(
            command_to_run,
            check=check,
            shell=shell,
            capture_output=capture_output,
            text=text,
            input=cmd_input,
            cwd=cwd,
            env=env,
        )
        if capture_output and log_output:
            if result.stdout and result.stdout.strip():
                log_provision(
                    f"   stdout: {result.stdout.strip()}",
                    "debug",
                    effective_logger,
                    app_settings,
                )
            if (
                result.stderr
                and result.stderr.strip()
                and (not check or result.returncode == 0)
            ):
                log_provision(
                    f"   stderr: {result.stderr.strip()}",
                    "debug",
                    effective_logger,
                    app_settings,
                )
        return result
    except subprocess.CalledProcessError as e:
        stdout_info = (
            e.stdout.strip()
            if e.stdout and hasattr(e.stdout, "strip")
            else "N/A"
        )
        stderr_info = (
            e.stderr.strip()
            if e.stderr and hasattr(e.stderr, "strip")
            else "N/A"
        )
        cmd_executed_str = (
            subprocess.list2cmdline(e.cmd)
            if isinstance(e.cmd, list)
            else str(e.cmd)
        )

        log_provision(
            f"Command `{cmd_executed_str}` failed (rc {e.returncode}).",
            "error",
            effective_logger,
            app_settings,
        )
        if stdout_info != "N/A" and log_output:
            log_provision(
                f"   stdout: {stdout_info}",
                "error",
                effective_logger,
                app_settings,
            )
        if stderr_info != "N/A":
            log_provision(
                f"   stderr: {stderr_info}",
                "error",
                effective_logger,
                app_settings,
            )
        raise
    except FileNotFoundError as e:
        log_provision(
            f"Command not found: {e.filename}. Ensure it's installed and in PATH.",
            "error",
            effective_logger,
            app_settings,
        )
        raise
    except Exception as e:
        log_provision(
            f"Unexpected error running command `{command_to_log_str}`: {e}",
            "error",
            effective_logger,
            app_settings,
            exc_info=True,
        )
        raise


def run_elevated_command(
    command: List[str],
    app_settings: Optional[AppSettings],
    check: bool = True,
    capture_output: bool = False,
    cmd_input: Optional[str] = None,
    current_logger: Optional[logging.Logger] = None,
    cwd: Optional[str] = None,
    env: Optional[Dict[str, str]] = None,
    log_output: bool = True,
    preserve_env: bool = False,
) -> subprocess.CompletedProcess:
    """
    Executes a command with elevated permissions, prefixing it with `sudo`
    unless the process already runs as root.

    Args:
        command: The command to execute, provided as a list of strings.
        app_settings: The application settings that may influence the command execution.
        check: If True, raises an exception if the command execution fails.
        capture_output: If True, captures the output of the command.
        cmd_input: The input to pass to the command via standard input.
        current_logger: A logger instance to log any output or errors during execution.
        cwd: The working directory for the command execution.
        env: Additional environment variables to use during command execution.
        log_output: Whether captured output is echoed to the log.
        preserve_env: Run `sudo -E` so `env` (or the caller's environment)
            reaches the elevated command instead of sudo's reset one.

    Returns:
        subprocess.CompletedProcess: The result of the command execution.

    Raises:
        subprocess.CalledProcessError: If check is True and the executed command returns an error.
    """
    prefix = _get_elevated_command_prefix(preserve_env)
    elevated_command_list = prefix + list(command)
    return run_command(
        elevated_command_list,
        app_settings,
        check=check,
        shell=False,
        capture_output=capture_output,
        text=True,
        cmd_input=cmd_input,
        current_logger=current_logger,
        cwd=cwd,
        env=env,
        log_output=log_output,
    )


def command_exists(command_name: str) -> bool:
    """
    Check if a command exists in the system's PATH.

    Parameters:
        command_name (str): The name of the command to check for existence.

    Returns:
        bool: True if the command is found in the system's PATH, False otherwise.
    """
    return shutil.which(command_name) is not None


def run_remote_installer(
    url: str,
    app_settings: Optional[AppSettings],
    interpreter: Sequence[str] = ("sh",),
    curl_flags: str = "-fsSL",
    elevated: bool = False,
    current_logger: Optional[logging.Logger] = None,
    env: Optional[Dict[str, str]] = None,
    preserve_env: bool = False,
) -> subprocess.CompletedProcess:
    """
    Downloads an installer script over HTTPS with curl and pipes it into an
    interpreter, the Python equivalent of `curl <flags> <url> | <interpreter>`.

    Args:
        url: HTTPS URL of the installer script.
        app_settings: The application settings.
        interpreter: The command that reads the script from stdin, e.g. ("sh",),
            ("bash", "-") or ("sh", "-s", "--", "--yes").
        curl_flags: Flags passed to curl.
        elevated: Run the interpreter with `sudo` when not already root.
        current_logger: Optional logger instance.
        env: Environment for the interpreter process.
        preserve_env: With `elevated`, keep the environment across sudo (`sudo -E`).

    Returns:
        The completed interpreter process.

    Raises:
        subprocess.CalledProcessError: If the download or the installer fails.
    """
    logger_to_use = current_logger if current_logger else module_logger
    log_provision(
        f"Downloading installer from {url}...",
        "info",
        logger_to_use,
        app_settings,
        symbol="gear",
    )
    download = run_command(
        ["curl", curl_flags, url],
        app_settings,
        capture_output=True,
        check=True,
        current_logger=logger_to_use,
        log_output=False,
    )
    if elevated:
        return run_elevated_command(
            list(interpreter),
            app_settings,
            cmd_input=download.stdout,
            current_logger=logger_to_use,
            env=env,
            preserve_env=preserve_env,
        )
    return run_command(
        list(interpreter),
        app_settings,
        cmd_input=download.stdout,
        current_logger=logger_to_use,
        env=env,
    )
