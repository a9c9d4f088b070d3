# vps_setup/installer/detectors.py
# -*- coding: utf-8 -*-
"""
Detectors turn system probes into a typed Status for one component.

Each component owns exactly one detector. Detectors only read system state
through the SystemProbe they are given and never run the component's handler.
"""

import re
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from vps_setup.installer.models import Status
from vps_setup.installer.probes import SystemProbe

VERSION_PATTERN_DEFAULT = r"(\d+(?:\.\d+)+)"


class Detector(ABC):
    """Interface for a component status detector."""

    @abstractmethod
    def detect(self, probe: SystemProbe) -> Status:
        """
        Query the live system.

        Returns:
            A new Status. "Not installed" is a normal result, never an error.
        """
        pass

    @staticmethod
    def parse_version(
        probe: SystemProbe,
        command: Optional[List[str]],
        pattern: str = VERSION_PATTERN_DEFAULT,
    ) -> Optional[str]:
        """Best-effort version lookup; None if the command or the match fails."""
        if not command:
            return None
        output = probe.command_output(command)
        if not output:
            return None
        match = re.search(pattern, output)
        if not match:
            return None
        return match.group(1) if match.groups() else match.group(0)

    @staticmethod
    def any_unit_active(probe: SystemProbe, units: Sequence[str]) -> bool:
        return any(probe.service_active(unit) for unit in units)


class BinaryServiceDetector(Detector):
    """
    Presence from a binary on PATH, activity from the service manager.

    With no units, an installed component counts as active (tools that do
    not run as a service).
    """

    def __init__(
        self,
        binary: str,
        units: Sequence[str] = (),
        version_command: Optional[List[str]] = None,
        version_pattern: str = VERSION_PATTERN_DEFAULT,
    ):
        self.binary = binary
        self.units = tuple(units)
        self.version_command = version_command
        self.version_pattern = version_pattern

    def detect(self, probe: SystemProbe) -> Status:
        if not probe.command_exists(self.binary):
            return Status(installed=False)
        active = (
            self.any_unit_active(probe, self.units) if self.units else True
        )
        return Status(
            installed=True,
            active=active,
            version=self.parse_version(
                probe, self.version_command, self.version_pattern
            ),
        )


class SysctlDetector(Detector):
    """
    Kernel setting detector, used for TCP congestion control.

    Installed when `expected` is offered by `available_key`; active when
    `key` currently equals `expected`.
    """

    def __init__(self, key: str, expected: str, available_key: str):
        self.key = key
        self.expected = expected
        self.available_key = available_key

    @staticmethod
    def _read_key(probe: SystemProbe, key: str) -> str:
        content = probe.read_text("/proc/sys/" + key.replace(".", "/"))
        return content.strip() if content else ""

    def detect(self, probe: SystemProbe) -> Status:
        available = self._read_key(probe, self.available_key).split()
        current = self._read_key(probe, self.key)
        return Status(
            installed=self.expected in available or current == self.expected,
            active=current == self.expected,
        )


class SwapDetector(Detector):
    """Swap is present when /proc/swaps lists a device; version is the total size."""

    def __init__(self, swaps_path: str = "/proc/swaps"):
        self.swaps_path = swaps_path

    def detect(self, probe: SystemProbe) -> Status:
        content = probe.read_text(self.swaps_path)
        if not content:
            return Status(installed=False)

        total_kib = 0
        devices = 0
        # Header: Filename Type Size Used Priority (sizes in KiB)
        for line in content.splitlines()[1:]:
            fields = line.split()
            if len(fields) < 3:
                continue
            devices += 1
            if fields[2].isdigit():
                total_kib += int(fields[2])

        if not devices:
            return Status(installed=False)
        return Status(
            installed=True, active=True, version=f"{total_kib // 1024} MiB"
        )


class ConfigMarkerDetector(Detector):
    """Installed from a binary on PATH, active when a config file carries a marker."""

    def __init__(
        self,
        binary: str,
        config_path: str,
        pattern: str,
        version_command: Optional[List[str]] = None,
        version_pattern: str = VERSION_PATTERN_DEFAULT,
    ):
        self.binary = binary
        self.config_path = config_path
        self.pattern = re.compile(pattern, re.MULTILINE | re.IGNORECASE)
        self.version_command = version_command
        self.version_pattern = version_pattern

    def detect(self, probe: SystemProbe) -> Status:
        if not probe.command_exists(self.binary):
            return Status(installed=False)
        config = probe.read_text(self.config_path) or ""
        return Status(
            installed=True,
            active=bool(self.pattern.search(config)),
            version=self.parse_version(
                probe, self.version_command, self.version_pattern
            ),
        )


class MarkerFileDetector(Detector):
    """Installed when any marker path exists; used for third-party installers."""

    def __init__(self, paths: Sequence[str], units: Sequence[str] = ()):
        self.paths = tuple(paths)
        self.units = tuple(units)

    def detect(self, probe: SystemProbe) -> Status:
        installed = any(probe.path_exists(path) for path in self.paths)
        if not installed:
            return Status(installed=False)
        active = (
            self.any_unit_active(probe, self.units) if self.units else True
        )
        return Status(installed=True, active=active)


class ActionOnlyDetector(Detector):
    """For components that are actions rather than install targets."""

    def detect(self, probe: SystemProbe) -> Status:
        return Status(installed=False)
