"""
Component status detection.

Statuses are computed from live system probes on every call and are never
cached, so two consecutive queries with no action in between agree, and a
query after an action always sees its effect.
"""

import logging
from typing import Dict, Iterable, Optional

from vps_setup.installer.models import Status
from vps_setup.installer.probes import SystemProbe
from vps_setup.installer.registry import ComponentRegistry


class StatusDetector:
    """Answers status(component) through the component's Detector."""

    def __init__(
        self,
        probe: Optional[SystemProbe] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.probe = probe or SystemProbe()
        self.logger = logger or logging.getLogger(self.__class__.__name__)

    def status(self, component_id: str) -> Status:
        """
        Get the current status of a component.

        Args:
            component_id: The component id.

        Returns:
            A fresh Status.

        Raises:
            UnknownComponentError: If the id is not registered.
        """
        component = ComponentRegistry.get_component(component_id)
        try:
            status = component.get_detector().detect(self.probe)
        except OSError as e:
            self.logger.warning(
                f"Status check for {component_id} failed, reporting not installed: {e}"
            )
            status = Status(installed=False)
        self.logger.debug(f"Status of {component_id}: {status.label}")
        return status

    def snapshot(self, component_ids: Iterable[str]) -> Dict[str, Status]:
        """Record the status of every component in `component_ids`, in order."""
        return {
            component_id: self.status(component_id)
            for component_id in component_ids
        }
