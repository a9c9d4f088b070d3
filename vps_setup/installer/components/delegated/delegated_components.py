"""
Components whose handlers wrap independently maintained third-party
installers. Presence is detected from the files those installers leave.
"""

from vps_setup.installer.base_component import BaseComponent
from vps_setup.installer.detectors import Detector, MarkerFileDetector
from vps_setup.installer.registry import ComponentRegistry

TRAFFIC_REPORTER_PATHS = (
    "/usr/local/bin/traffic-reporter",
    "/opt/traffic-reporter/traffic-reporter.sh",
    "/opt/server-traffic-reporter",
    "/root/server-traffic-reporter/traffic_reporter.sh",
)

BACKUP_MANAGER_PATHS = (
    "/usr/local/bin/vps-backup.sh",
    "/usr/local/bin/vps-backup.env",
)

LOGIN_NOTIFIER_PATHS = (
    "/usr/local/bin/ssh-login-notify.sh",
    "/etc/ssh-login-notifier",
    "/usr/local/bin/report-failed-logins.sh",
    "/usr/local/bin/ssh-login-notifier",
)


@ComponentRegistry.register(
    name="traffic-reporter",
    metadata={
        "display_name": "Traffic reporter",
        "category": "delegate",
        "description": "Periodic bandwidth reports sent to Telegram",
        "order": 110,
    },
)
class TrafficReporterComponent(BaseComponent):
    handler_name = "traffic_reporter_manager.sh"
    verbs = {
        "status": "status",
        "install": "install",
        "configure": "configure",
        "uninstall": "uninstall",
    }
    verb_labels = {
        "status": "Show reporter status",
        "install": "Install the traffic reporter",
        "configure": "Reconfigure the reporter",
        "uninstall": "Uninstall the traffic reporter",
    }
    default_verb = "status"

    def get_detector(self) -> Detector:
        return MarkerFileDetector(TRAFFIC_REPORTER_PATHS)


@ComponentRegistry.register(
    name="backup-manager",
    metadata={
        "display_name": "Server backup",
        "category": "delegate",
        "description": "Scheduled encrypted backups to remote storage",
        "order": 120,
    },
)
class BackupManagerComponent(BaseComponent):
    handler_name = "server_backup_manager.sh"
    verbs = {
        "status": "status",
        "install": "install",
        "configure": "configure",
        "backup": "backup",
        "restore": "restore",
        "uninstall": "uninstall",
    }
    verb_labels = {
        "status": "Show backup status",
        "install": "Install the backup tool",
        "configure": "Reconfigure backups",
        "backup": "Run a backup now",
        "restore": "Restore from a backup",
        "uninstall": "Uninstall the backup tool",
    }
    default_verb = "status"

    def get_detector(self) -> Detector:
        return MarkerFileDetector(BACKUP_MANAGER_PATHS)


@ComponentRegistry.register(
    name="login-notifier",
    metadata={
        "display_name": "SSH login notifier",
        "category": "delegate",
        "description": "Telegram alerts on SSH logins",
        "order": 130,
    },
)
class LoginNotifierComponent(BaseComponent):
    handler_name = "ssh_login_notifier_manager.sh"
    verbs = {
        "status": "status",
        "install": "install",
        "configure": "configure",
        "test": "test",
        "uninstall": "uninstall",
    }
    verb_labels = {
        "status": "Show notifier status",
        "install": "Install the login notifier",
        "configure": "Reconfigure the notifier",
        "test": "Send a test notification",
        "uninstall": "Uninstall the login notifier",
    }
    default_verb = "status"

    def get_detector(self) -> Detector:
        return MarkerFileDetector(LOGIN_NOTIFIER_PATHS)
