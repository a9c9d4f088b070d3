"""
Nginx reverse proxy component, optionally with Certbot.
"""

from vps_setup.installer.base_component import BaseComponent
from vps_setup.installer.detectors import BinaryServiceDetector, Detector
from vps_setup.installer.registry import ComponentRegistry


@ComponentRegistry.register(
    name="reverse-proxy",
    metadata={
        "display_name": "Nginx",
        "category": "web",
        "description": "Nginx with Certbot for Let's Encrypt certificates",
        "order": 30,
    },
)
class ReverseProxyComponent(BaseComponent):
    handler_name = "nginx_manager.sh"
    verbs = {
        "install-nginx": "install",
        "install": "install-certbot",
        "uninstall": "uninstall",
    }
    verb_labels = {
        "install-nginx": "Install Nginx",
        "install": "Install Nginx and Certbot",
        "uninstall": "Uninstall Nginx",
    }
    default_verb = None
    batch = True

    def get_detector(self) -> Detector:
        # nginx -v writes "nginx version: nginx/1.24.0" to stderr.
        return BinaryServiceDetector(
            binary="nginx",
            units=["nginx"],
            version_command=["nginx", "-v"],
            version_pattern=r"nginx/([\d.]+)",
        )
