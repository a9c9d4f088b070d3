"""
System maintenance components: package updates, swap, time and logs.
"""

from vps_setup.installer.base_component import BaseComponent
from vps_setup.installer.detectors import (
    ActionOnlyDetector,
    BinaryServiceDetector,
    Detector,
    SwapDetector,
)
from vps_setup.installer.registry import ComponentRegistry


@ComponentRegistry.register(
    name="system-update",
    metadata={
        "display_name": "System update",
        "category": "system",
        "description": "Refresh package lists and upgrade installed packages",
        "order": 0,
    },
)
class SystemUpdateComponent(BaseComponent):
    """Not an install target: the batch flow runs it first, every time."""

    handler_name = "system_update.sh"
    verbs = {"run": None}
    verb_labels = {"run": "Update the system"}
    default_verb = None
    batch = True
    batch_verb = "run"
    preparatory = True

    def get_detector(self) -> Detector:
        return ActionOnlyDetector()


@ComponentRegistry.register(
    name="swap",
    metadata={
        "display_name": "Swap",
        "category": "system",
        "description": "Swap file sized from the installed memory",
        "order": 70,
    },
)
class SwapComponent(BaseComponent):
    handler_name = "swap_manager.sh"
    verbs = {"status": "status", "setup": "setup", "quick": "quick"}
    verb_labels = {
        "status": "Show swap usage",
        "setup": "Create or resize swap (interactive)",
        "quick": "Create swap with the recommended size",
    }
    default_verb = "status"

    def get_detector(self) -> Detector:
        return SwapDetector()


@ComponentRegistry.register(
    name="timezone-ntp",
    metadata={
        "display_name": "Timezone and NTP",
        "category": "system",
        "description": "System timezone and network time synchronisation",
        "order": 90,
    },
)
class TimezoneNtpComponent(BaseComponent):
    handler_name = "timezone_ntp.sh"
    verbs = {"all": "all", "timezone": "timezone", "ntp": "ntp", "status": "status"}
    verb_labels = {
        "all": "Configure timezone and NTP",
        "timezone": "Configure the timezone only",
        "ntp": "Configure NTP only",
        "status": "Show time settings",
    }
    default_verb = "all"

    def get_detector(self) -> Detector:
        return BinaryServiceDetector(
            binary="timedatectl",
            units=["systemd-timesyncd", "chronyd", "chrony"],
        )


@ComponentRegistry.register(
    name="log-rotation",
    metadata={
        "display_name": "Log management",
        "category": "system",
        "description": "logrotate, journald and Docker log size limits",
        "order": 100,
    },
)
class LogRotationComponent(BaseComponent):
    handler_name = "log_manager.sh"
    verbs = {
        "status": "status",
        "configure": "configure",
        "docker": "docker",
        "journald": "journald",
        "clean": "clean",
    }
    verb_labels = {
        "status": "Show log disk usage",
        "configure": "Configure all log limits",
        "docker": "Limit Docker container logs",
        "journald": "Limit the systemd journal",
        "clean": "Clean old logs now",
    }
    default_verb = "status"

    def get_detector(self) -> Detector:
        return BinaryServiceDetector(
            binary="logrotate",
            units=["logrotate.timer", "cron"],
            version_command=["logrotate", "--version"],
        )
