import io
import logging
import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from common.command_utils import log_provision
from common.core_utils import SymbolFormatter, setup_logging
from provisioner.config_models import AppSettings


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    yield root
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    for handler in saved_handlers:
        root.addHandler(handler)
    root.setLevel(saved_level)


def _capture_logger(name, formatter):
    stream = io.StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(formatter)
    test_logger = logging.getLogger(name)
    test_logger.handlers = [handler]
    test_logger.propagate = False
    test_logger.setLevel(logging.DEBUG)
    return test_logger, stream


def test_setup_logging_with_file_and_console(mocker, tmp_path):
    mock_file_handler = mocker.patch("logging.FileHandler")
    mock_stream_handler = mocker.patch("logging.StreamHandler")
    mock_root_logger = MagicMock()
    mock_root_logger.handlers = []
    mocker.patch("logging.getLogger", return_value=mock_root_logger)

    log_file = tmp_path / "logs" / "provision.log"
    setup_logging(log_file=str(log_file))

    mock_file_handler.assert_called_once_with(Path(log_file), mode="a")
    mock_stream_handler.assert_called_once_with(sys.stdout)
    assert mock_root_logger.addHandler.call_count == 2
    assert log_file.parent.is_dir()


def test_setup_logging_console_prefix(restore_root_logger):
    setup_logging(log_prefix="[PROVISION]")

    (console,) = restore_root_logger.handlers
    assert console.formatter._fmt.startswith("[PROVISION] ")
    assert "%(levelname)" not in console.formatter._fmt


def test_setup_logging_file_keeps_level_and_logger(restore_root_logger, tmp_path):
    log_file = tmp_path / "provision.log"
    setup_logging(log_file=str(log_file), log_prefix="[PROVISION]")

    logging.getLogger("provisioner.test").warning("disk almost full")
    for handler in restore_root_logger.handlers:
        handler.flush()

    line = log_file.read_text().strip()
    assert "WARNING" in line
    assert "provisioner.test: ⚠️ disk almost full" in line
    assert "[PROVISION]" not in line


def test_symbol_formatter_falls_back_to_level_symbol():
    formatter = SymbolFormatter(fmt="%(symbol)s %(message)s", symbols={"warning": "W", "error": "E"})
    record = logging.LogRecord("x", logging.WARNING, __file__, 1, "careful", None, None)
    assert formatter.format(record) == "W careful"
    record = logging.LogRecord("x", logging.ERROR, __file__, 1, "broken", None, None)
    assert formatter.format(record) == "E broken"


def test_success_line_carries_a_single_symbol():
    test_logger, stream = _capture_logger(
        "core_utils.success", SymbolFormatter(fmt="%(symbol)s %(message)s")
    )

    log_provision("Docker installed.", "success", test_logger, AppSettings())

    assert stream.getvalue() == "✅ Docker installed.\n"


@pytest.mark.parametrize(
    "symbol, expected",
    [("step", "➡️ --- [2/4] Upgrade ---\n"), (None, "ℹ️ --- [2/4] Upgrade ---\n")],
)
def test_log_provision_symbol_reaches_formatter(symbol, expected):
    test_logger, stream = _capture_logger(
        "core_utils.step", SymbolFormatter(fmt="%(symbol)s %(message)s")
    )

    log_provision("--- [2/4] Upgrade ---", "info", test_logger, AppSettings(), symbol=symbol)

    assert stream.getvalue() == expected
    assert stream.getvalue().count("ℹ️") <= 1
