"""
Fail2ban intrusion prevention component.
"""

from vps_setup.installer.base_component import BaseComponent
from vps_setup.installer.detectors import BinaryServiceDetector, Detector
from vps_setup.installer.registry import ComponentRegistry


@ComponentRegistry.register(
    name="intrusion-prevention",
    metadata={
        "display_name": "Fail2ban",
        "category": "security",
        "description": "Bans hosts that repeatedly fail SSH authentication",
        "order": 40,
    },
)
class IntrusionPreventionComponent(BaseComponent):
    handler_name = "fail2ban_manager.sh"
    verbs = {
        "install": "install",
        "status": "status",
        "unban": "unban",
        "show-banned": "show-banned",
        "uninstall": "uninstall",
    }
    verb_labels = {
        "install": "Install and configure Fail2ban",
        "status": "Show jail status",
        "unban": "Unban an IP address",
        "show-banned": "List banned IP addresses",
        "uninstall": "Uninstall Fail2ban",
    }
    default_verb = "install"

    def get_detector(self) -> Detector:
        return BinaryServiceDetector(
            binary="fail2ban-client",
            units=["fail2ban"],
            version_command=["fail2ban-client", "version"],
        )
