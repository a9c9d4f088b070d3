# vps_setup/main.py
# -*- coding: utf-8 -*-
"""
Command-line entry point for the VPS setup installer.
"""

import argparse
import logging
import sys
from typing import List, NoReturn, Optional

from vps_setup import __version__
from vps_setup.common.command_utils import log_message
from vps_setup.common.exceptions import SetupEnvironmentError
from vps_setup.common.logging_config import setup_logging
from vps_setup.common.system_utils import detect_environment
from vps_setup.config.config_loader import CONFIG_FILE_DEFAULT, load_app_settings
from vps_setup.config.session import build_session
from vps_setup.installer.components import load_all_components
from vps_setup.installer.dispatcher import ActionDispatcher
from vps_setup.installer.orchestrator import BatchOrchestrator
from vps_setup.installer.probes import SystemProbe
from vps_setup.installer.remote_delegate import DelegateLauncher
from vps_setup.installer.resolver import HandlerResolver
from vps_setup.installer.status_detector import StatusDetector
from vps_setup.ui.menu import MenuShell

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130


class InstallerArgumentParser(argparse.ArgumentParser):
    """Argument parser that exits with status 1 on invalid arguments."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(EXIT_FAILURE, f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = InstallerArgumentParser(
        prog="vps-setup",
        description="Interactive installer and configurator for freshly provisioned servers.",
        epilog="Example: vps-setup --branch main --force-update",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
        add_help=False,
    )
    parser.add_argument(
        "-h",
        "--help",
        action="help",
        default=argparse.SUPPRESS,
        help="Show this help message and exit.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--branch",
        default=None,
        help="Branch or tag of the remote handler source (remote mode only).",
    )
    parser.add_argument(
        "--force-update",
        "--refresh",
        dest="force_update",
        action="store_true",
        help="Download handlers again even if they are already cached.",
    )
    parser.add_argument(
        "--config",
        default=CONFIG_FILE_DEFAULT,
        help="Path to the YAML configuration file.",
    )
    parser.add_argument(
        "--scripts-dir",
        default=None,
        help="Directory holding local handler scripts.",
    )
    parser.add_argument(
        "--install-all",
        action="store_true",
        help="Run the install-everything flow unattended and exit.",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging."
    )
    parser.add_argument(
        "--no-color", action="store_true", help="Disable colored output."
    )
    return parser


def main(cli_args_list: Optional[List[str]] = None) -> int:
    """
    Run the installer.

    Returns:
        0 on normal exit, 1 on invalid arguments, configuration or
        environment errors (or a failed --install-all), 130 when interrupted.
    """
    parser = build_parser()
    try:
        parsed_args = parser.parse_args(cli_args_list)
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else EXIT_FAILURE

    setup_logging(log_level=logging.INFO)
    try:
        app_settings = load_app_settings(parsed_args, parsed_args.config)
    except SystemExit as e:
        print(
            f"CRITICAL: Failed to load or validate application configuration: {e}",
            file=sys.stderr,
        )
        return EXIT_FAILURE

    setup_logging(
        log_level=getattr(logging, app_settings.log_level.upper(), logging.INFO),
        log_file=app_settings.log_file,
        use_color=None if app_settings.color else False,
        symbols=app_settings.symbols,
    )
    symbols = app_settings.symbols

    resolver: Optional[HandlerResolver] = None
    try:
        load_all_components(logger)
        environment = detect_environment(app_settings, current_logger=logger)
        session = build_session(
            app_settings,
            environment,
            branch=parsed_args.branch,
            force_refresh=parsed_args.force_update,
            current_logger=logger,
        )

        resolver = HandlerResolver(session, logger=logger)
        detector = StatusDetector(SystemProbe(app_settings, logger), logger)
        dispatcher = ActionDispatcher(session, resolver, logger)
        orchestrator = BatchOrchestrator(detector, dispatcher, logger)
        launcher = DelegateLauncher(
            session, http_session=resolver.http_session, logger=logger
        )
        shell = MenuShell(
            session, detector, dispatcher, orchestrator, launcher, logger=logger
        )

        if parsed_args.install_all:
            summary = shell.install_everything()
            return EXIT_OK if summary.succeeded else EXIT_FAILURE

        shell.run()
        return EXIT_OK
    except SetupEnvironmentError as e:
        log_message(
            f"{symbols.get('error', '❌')} {e}", "error", logger, app_settings
        )
        return EXIT_FAILURE
    except KeyboardInterrupt:
        print()
        log_message(
            f"{symbols.get('warning', '⚠️')} Operation cancelled by user",
            "warning",
            logger,
            app_settings,
        )
        return EXIT_INTERRUPTED
    finally:
        if resolver is not None:
            resolver.cleanup()


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
