"""
Base component class for all component modules.

A component is a statically declared, manageable unit of the server (the
firewall, the container engine, ...). It carries no runtime state: it only
describes its handler, the verbs that handler accepts and how to detect the
component on the system.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from vps_setup.common.exceptions import UnsupportedVerbError
from vps_setup.installer.detectors import Detector


class BaseComponent(ABC):
    """
    Base class for all component modules.

    Subclasses declare their handler and verb table as class attributes and
    are registered with ComponentRegistry.register(), which also sets
    `component_id` and `metadata`.
    """

    component_id: str = ""

    # Set by the registry decorator.
    metadata: Dict[str, Any] = {
        "display_name": "",  # Name shown in menus and summaries
        "category": "",  # system, security, runtime, web, network, delegate
        "description": "",
        "order": 100,  # Position within listings and the batch flow
    }

    # File name of the handler script, one per component.
    handler_name: str = ""

    # Verb -> argument passed to the handler (None runs it without argument).
    verbs: Dict[str, Optional[str]] = {}

    # Verb -> menu label.
    verb_labels: Dict[str, str] = {}

    # Verb used when the component menu receives empty input; None returns
    # to the parent menu.
    default_verb: Optional[str] = None

    # Member of the "install everything" set, and the verb it runs there.
    batch: bool = False
    batch_verb: str = "install"

    # Runs first and unconditionally in the batch flow, outside the summary.
    preparatory: bool = False

    @abstractmethod
    def get_detector(self) -> Detector:
        """
        Get the detector for this component.

        Returns:
            A Detector instance.
        """
        pass

    @property
    def display_name(self) -> str:
        return str(self.metadata.get("display_name") or self.component_id)

    @property
    def category(self) -> str:
        return str(self.metadata.get("category", ""))

    @property
    def description(self) -> str:
        return str(self.metadata.get("description", ""))

    @property
    def order(self) -> int:
        return int(self.metadata.get("order", 100))

    def supports(self, verb: str) -> bool:
        return verb in self.verbs

    def handler_argument(self, verb: str) -> Optional[str]:
        """
        Map a verb to the argument passed to the handler.

        Raises:
            UnsupportedVerbError: If the verb is not in the verb table.
        """
        if verb not in self.verbs:
            raise UnsupportedVerbError(self.component_id, verb)
        return self.verbs[verb]

    def menu_verbs(self) -> List[str]:
        return list(self.verbs)

    def verb_label(self, verb: str) -> str:
        return self.verb_labels.get(verb, verb.replace("-", " ").capitalize())
