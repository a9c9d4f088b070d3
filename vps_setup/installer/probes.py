# vps_setup/installer/probes.py
# -*- coding: utf-8 -*-
"""
Read-only system queries used by the component detectors.

Detectors never touch the system directly; they go through a SystemProbe,
so tests can substitute a fake provider. None of these methods raise: a
failed query reads as "absent" or "inactive".
"""

import logging
from pathlib import Path
from typing import List, Optional

from vps_setup.common.command_utils import command_exists, run_command
from vps_setup.config.config_models import AppSettings

module_logger = logging.getLogger(__name__)


class SystemProbe:
    """Live implementation backed by PATH lookups, systemctl and the filesystem."""

    def __init__(
        self,
        app_settings: Optional[AppSettings] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.app_settings = app_settings
        self.logger = logger or module_logger

    def command_exists(self, name: str) -> bool:
        return command_exists(name)

    def service_active(self, unit: str) -> bool:
        """
        Ask the service manager whether `unit` is running.

        A missing systemctl, an unknown unit or any error reads as inactive.
        """
        if not self.command_exists("systemctl"):
            return False
        try:
            result = run_command(
                ["systemctl", "is-active", "--quiet", unit],
                self.app_settings,
                check=False,
                capture_output=True,
                errors="replace",
                current_logger=self.logger,
                quiet=True,
            )
        except OSError as e:
            self.logger.debug(f"systemctl query for {unit} failed: {e}")
            return False
        return result.returncode == 0

    def command_output(self, command: List[str]) -> Optional[str]:
        """
        Run a query command and return its combined stdout and stderr.

        Many tools print their version on stderr (`ssh -V`), so both streams
        are returned, with undecodable bytes replaced. None if the command
        could not be started.
        """
        try:
            result = run_command(
                command,
                self.app_settings,
                check=False,
                capture_output=True,
                errors="replace",
                current_logger=self.logger,
                quiet=True,
            )
        except OSError as e:
            self.logger.debug(f"Query command {command[0]} failed: {e}")
            return None
        return f"{result.stdout or ''}{result.stderr or ''}"

    def path_exists(self, path: str) -> bool:
        return Path(path).exists()

    def read_text(self, path: str) -> Optional[str]:
        try:
            return Path(path).read_text(encoding="utf-8", errors="replace")
        except OSError:
            return None
