"""
UFW (Uncomplicated Firewall) component.
"""

from vps_setup.installer.base_component import BaseComponent
from vps_setup.installer.detectors import BinaryServiceDetector, Detector
from vps_setup.installer.registry import ComponentRegistry


@ComponentRegistry.register(
    name="firewall",
    metadata={
        "display_name": "UFW firewall",
        "category": "security",
        "description": "Uncomplicated Firewall with the common ports (22, 80, 443) opened",
        "order": 10,
    },
)
class FirewallComponent(BaseComponent):
    handler_name = "ufw_manager.sh"
    verbs = {
        "install-only": "install-only",
        "install": "install-common",
        "install-custom": "install-custom",
        "uninstall": "uninstall",
    }
    verb_labels = {
        "install-only": "Install UFW only (no rules)",
        "install": "Install UFW and open common ports (22, 80, 443)",
        "install-custom": "Install UFW with custom rules",
        "uninstall": "Uninstall UFW",
    }
    default_verb = None
    batch = True

    def get_detector(self) -> Detector:
        return BinaryServiceDetector(
            binary="ufw",
            units=["ufw"],
            version_command=["ufw", "version"],
        )
