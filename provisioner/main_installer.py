# provisioner/main_installer.py
# -*- coding: utf-8 -*-
"""
Main entry point for the server provisioner.

Handles argument parsing, logging setup, settings loading, and runs the
configured step list through the ProvisioningSequencer.
"""

import argparse
import logging
import sys
from typing import List, Optional

from common.core_utils import setup_logging
from provisioner import config
from provisioner.cli_handler import (
    check_root,
    print_banner,
    print_completion_hints,
    view_step_plan,
)
from provisioner.config_loader import ConfigurationError, load_app_settings
from provisioner.context import build_context
from provisioner.sequencer import FatalStepError, ProvisioningSequencer
from provisioner.step_lists import STEP_VARIANTS, build_steps, planned_tags

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FATAL_STEP = 1
EXIT_CONFIG_ERROR = 2


def parse_args(args: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Provision a Debian/Ubuntu server: packages, toolchains, AI CLIs, SSH and shell.",
        epilog="Example: provision-server --skip docker --skip codex_cli < ~/.ssh/id_ed25519",
    )
    parser.add_argument(
        "--config-file",
        default=config.DEFAULT_CONFIG_FILE,
        help=f"Path to a YAML configuration file (default: {config.DEFAULT_CONFIG_FILE}).",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging."
    )
    parser.add_argument("--log-file", default=None, help="Also append log output to this file.")
    parser.add_argument(
        "--list-steps",
        action="store_true",
        help="Print the resolved step plan and exit without changing anything.",
    )
    parser.add_argument(
        "--skip",
        action="append",
        default=[],
        metavar="STEP",
        help="Skip the step with this tag. May be given more than once.",
    )
    parser.add_argument(
        "--variant",
        choices=sorted(STEP_VARIANTS),
        default=None,
        help="Built-in step list to run (default: 'default').",
    )
    parser.add_argument(
        "--home-dir",
        default=None,
        help="Home directory receiving SSH and shell configuration (default: current user's).",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {config.SCRIPT_VERSION}")
    return parser.parse_args(args)


def main(args: Optional[List[str]] = None) -> int:
    parsed_args = parse_args(args)

    setup_logging(
        log_level=logging.DEBUG if parsed_args.verbose else logging.INFO,
        log_file=parsed_args.log_file,
    )

    try:
        app_settings = load_app_settings(parsed_args, current_logger=logger)
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        return EXIT_CONFIG_ERROR

    setup_logging(
        log_level=logging.DEBUG if parsed_args.verbose else logging.INFO,
        log_file=app_settings.log_file,
        log_prefix=app_settings.log_prefix,
        symbols=app_settings.symbols,
    )

    print_banner(app_settings, logger)
    context = build_context(app_settings, logger=logging.getLogger("provisioner"))

    try:
        if parsed_args.list_steps:
            view_step_plan(planned_tags(context), app_settings, logger)
            return EXIT_OK
        steps = build_steps(context)
    except (KeyError, ValueError) as e:
        logger.error(f"Invalid step list: {e}")
        return EXIT_CONFIG_ERROR

    check_root(app_settings, logger)

    try:
        ProvisioningSequencer(context).execute(steps)
    except FatalStepError as e:
        logger.critical(str(e))
        return EXIT_FATAL_STEP

    print_completion_hints(app_settings, logger)
    return EXIT_OK


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
