"""
SSH hardening component.

Active means password authentication is disabled in sshd_config.
"""

from vps_setup.installer.base_component import BaseComponent
from vps_setup.installer.detectors import ConfigMarkerDetector, Detector
from vps_setup.installer.registry import ComponentRegistry

SSHD_CONFIG_PATH = "/etc/ssh/sshd_config"
HARDENING_MARKER = r"^\s*PasswordAuthentication\s+no\b"


@ComponentRegistry.register(
    name="ssh-hardening",
    metadata={
        "display_name": "SSH hardening",
        "category": "security",
        "description": "Key-only login, custom port and idle timeout for sshd",
        "order": 50,
    },
)
class SshHardeningComponent(BaseComponent):
    handler_name = "ssh_security.sh"
    verbs = {
        "full": "full",
        "setup-key": "setup-key",
        "disable-password": "disable-password",
        "change-port": "change-port",
        "timeout": "timeout",
        "show": "show",
    }
    verb_labels = {
        "full": "Full hardening (recommended)",
        "setup-key": "Set up SSH key login",
        "disable-password": "Disable password login",
        "change-port": "Change the SSH port",
        "timeout": "Configure the idle timeout",
        "show": "Show the current SSH configuration",
    }
    default_verb = "full"

    def get_detector(self) -> Detector:
        return ConfigMarkerDetector(
            binary="ssh",
            config_path=SSHD_CONFIG_PATH,
            pattern=HARDENING_MARKER,
            version_command=["ssh", "-V"],
            version_pattern=r"OpenSSH_([\w.]+)",
        )
