# common/core_utils.py
# -*- coding: utf-8 -*-
"""
Logging setup for provisioning runs.

Console lines read `[PROVISION] 12:00:01 ✅ Docker installed.`; the file log
keeps the level name and logger name so a run can be reconstructed later.
"""

import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

from provisioner.config_models import SYMBOLS_DEFAULT

CONSOLE_LOG_FORMAT = "{log_prefix}%(asctime)s %(symbol)s %(message)s"
FILE_LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(symbol)s %(message)s"
CONSOLE_DATE_FORMAT = "%H:%M:%S"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LEVEL_SYMBOL_KEYS: Dict[int, str] = {
    logging.DEBUG: "debug",
    logging.INFO: "info",
    logging.WARNING: "warning",
    logging.ERROR: "error",
    logging.CRITICAL: "critical",
}


class SymbolFormatter(logging.Formatter):
    """
    Renders `%(symbol)s` exactly once per line.

    Records sent through log_provision already carry a `symbol` attribute
    (a step arrow, a success mark, ...). Anything else, e.g. a third-party
    logger, gets the symbol of its level.
    """

    def __init__(self, fmt=None, datefmt=None, symbols=None):
        super().__init__(fmt, datefmt)
        self.symbols = symbols or SYMBOLS_DEFAULT

    def format(self, record):
        if not getattr(record, "symbol", None):
            key = LEVEL_SYMBOL_KEYS.get(record.levelno)
            record.symbol = self.symbols.get(key, "") if key else ""
        return super().format(record)


def setup_logging(
    log_level: int = logging.INFO,
    log_file: Optional[str] = None,
    log_prefix: Optional[str] = None,
    symbols: Optional[Dict[str, str]] = None,
) -> None:
    """
    Configures the root logger for a provisioning run.

    Console output goes to stdout; `log_file`, when given, is appended to as
    well. Calling it again replaces the previously installed handlers, which
    is how the settings-aware second call takes over from the bootstrap one.

    Parameters:
    log_level: int
        The logging level to configure. Defaults to logging.INFO.
    log_file: Optional[str]
        The file path for the log file. Its parent directory is created.
    log_prefix: Optional[str]
        Prefix for every console line, e.g. "[PROVISION]".
    symbols: Optional[Dict[str, str]]
        Level symbols for records that do not bring their own.
    """
    prefix = (log_prefix.strip() + " ") if log_prefix and log_prefix.strip() else ""
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(
        SymbolFormatter(
            fmt=CONSOLE_LOG_FORMAT.format(log_prefix=prefix),
            datefmt=CONSOLE_DATE_FORMAT,
            symbols=symbols,
        )
    )
    handlers: List[logging.Handler] = [console_handler]

    if log_file:
        try:
            log_file_path = Path(log_file)
            log_file_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file_path, mode="a")
            file_handler.setFormatter(
                SymbolFormatter(
                    fmt=FILE_LOG_FORMAT,
                    datefmt=FILE_DATE_FORMAT,
                    symbols=symbols,
                )
            )
            handlers.append(file_handler)
        except OSError as e:
            print(
                f"Warning: Could not create file handler for log file {log_file}: {e}",
                file=sys.stderr,
            )

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    for handler in handlers:
        root_logger.addHandler(handler)

    logging.getLogger(__name__).debug(
        f"Logging configured. Level: {logging.getLevelName(log_level)}. File: {log_file or 'none'}"
    )
