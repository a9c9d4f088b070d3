"""
Network tuning components: TCP BBR and the SmartDNS resolver.
"""

from vps_setup.installer.base_component import BaseComponent
from vps_setup.installer.detectors import (
    BinaryServiceDetector,
    Detector,
    SysctlDetector,
)
from vps_setup.installer.registry import ComponentRegistry


@ComponentRegistry.register(
    name="tcp-bbr",
    metadata={
        "display_name": "TCP BBR",
        "category": "network",
        "description": "BBR congestion control with the fq queue discipline",
        "order": 60,
    },
)
class TcpBbrComponent(BaseComponent):
    handler_name = "bbr_manager.sh"
    verbs = {"enable": "enable", "disable": "disable", "status": "status"}
    verb_labels = {
        "enable": "Enable BBR",
        "disable": "Disable BBR (back to cubic)",
        "status": "Show congestion control settings",
    }
    default_verb = "status"

    def get_detector(self) -> Detector:
        return SysctlDetector(
            key="net.ipv4.tcp_congestion_control",
            expected="bbr",
            available_key="net.ipv4.tcp_available_congestion_control",
        )


@ComponentRegistry.register(
    name="dns-resolver",
    metadata={
        "display_name": "SmartDNS",
        "category": "network",
        "description": "Local DNS resolver with upstream selection",
        "order": 80,
    },
)
class DnsResolverComponent(BaseComponent):
    """The handler shows its own menu, so there is a single verb."""

    handler_name = "smartdns_manager.sh"
    verbs = {"menu": None}
    verb_labels = {"menu": "Open the SmartDNS manager"}
    default_verb = "menu"

    def get_detector(self) -> Detector:
        return BinaryServiceDetector(
            binary="smartdns",
            units=["smartdns"],
            version_command=["smartdns", "-v"],
            version_pattern=r"(\S*\d[\w.\-]*)",
        )
