"""
Docker container engine component.
"""

from vps_setup.installer.base_component import BaseComponent
from vps_setup.installer.detectors import BinaryServiceDetector, Detector
from vps_setup.installer.registry import ComponentRegistry


@ComponentRegistry.register(
    name="container-engine",
    metadata={
        "display_name": "Docker",
        "category": "runtime",
        "description": "Docker Engine with the Compose plugin",
        "order": 20,
    },
)
class ContainerEngineComponent(BaseComponent):
    handler_name = "docker_manager.sh"
    verbs = {
        "install-engine": "install",
        "install": "install-compose",
        "uninstall": "uninstall",
    }
    verb_labels = {
        "install-engine": "Install Docker",
        "install": "Install Docker and Docker Compose",
        "uninstall": "Uninstall Docker",
    }
    default_verb = "install"
    batch = True

    def get_detector(self) -> Detector:
        return BinaryServiceDetector(
            binary="docker",
            units=["docker"],
            version_command=["docker", "--version"],
        )
