# vps_setup/ui/menu.py
"""
Hierarchical numbered menus: category -> component -> verb.

Each prompt reads one line. Invalid selections are reported and the same
menu is shown again. Component failures are reported and the loop carries
on. End of input at any prompt leaves the installer.
"""

import logging
from typing import Callable, Dict, List, Optional, Tuple

from vps_setup.common.command_utils import log_message
from vps_setup.common.exceptions import ComponentError, UserInputError
from vps_setup.config.config_models import Session
from vps_setup.installer.dispatcher import ActionDispatcher
from vps_setup.installer.models import BatchSummary, ExecutionMode
from vps_setup.installer.orchestrator import BatchOrchestrator
from vps_setup.installer.registry import ComponentRegistry
from vps_setup.installer.remote_delegate import (
    REMOTE_DELEGATES,
    DelegateLauncher,
)
from vps_setup.installer.status_detector import StatusDetector

module_logger = logging.getLogger(__name__)

SECURITY_TOOLS = ["intrusion-prevention", "ssh-hardening"]
TUNING_TOOLS = ["tcp-bbr", "swap", "dns-resolver", "timezone-ntp", "log-rotation"]
DELEGATED_SERVICES = ["traffic-reporter", "backup-manager", "login-notifier"]

STATUS_ENTRY = "status"


class MenuExit(Exception):
    """Raised when the user leaves the installer from any prompt."""


class MenuShell:
    """Interactive front end over the detector, dispatcher and orchestrator."""

    def __init__(
        self,
        session: Session,
        detector: StatusDetector,
        dispatcher: ActionDispatcher,
        orchestrator: BatchOrchestrator,
        launcher: DelegateLauncher,
        input_func: Callable[[str], str] = input,
        output_func: Callable[[str], None] = print,
        logger: Optional[logging.Logger] = None,
    ):
        self.session = session
        self.detector = detector
        self.dispatcher = dispatcher
        self.orchestrator = orchestrator
        self.launcher = launcher
        self.input_func = input_func
        self.output_func = output_func
        self.logger = logger or module_logger
        self.symbols = session.symbols

    # --- Input helpers ---

    def prompt(self, text: str) -> str:
        try:
            return self.input_func(text).strip()
        except EOFError:
            raise MenuExit() from None

    @staticmethod
    def parse_choice(raw: str, valid: List[str]) -> str:
        if raw not in valid:
            raise UserInputError(f"Invalid selection '{raw}'")
        return raw

    def _report_input_error(self, error: UserInputError) -> None:
        log_message(
            f"{self.symbols.get('error', '❌')} {error}, please try again",
            "error",
            self.logger,
            self.session.app_settings,
        )

    def _report_component_error(self, error: ComponentError) -> None:
        log_message(
            f"{self.symbols.get('error', '❌')} {error}",
            "error",
            self.logger,
            self.session.app_settings,
        )

    def _show(self, title: str, entries: List[Tuple[str, str]]) -> None:
        self.output_func("")
        self.output_func(f"=== {title} ===")
        for key, label in entries:
            self.output_func(f"  {key}. {label}")
        self.output_func("")

    # --- Entry point ---

    def run(self) -> None:
        """Show the root menu until the user exits."""
        self._banner()
        try:
            self._root_menu()
        except MenuExit:
            pass
        log_message("Goodbye", "info", self.logger, self.session.app_settings)

    def _banner(self) -> None:
        env = self.session.environment
        mode = (
            f"remote (branch {self.session.branch})"
            if self.session.remote_mode
            else "local"
        )
        self.output_func("")
        self.output_func("VPS setup")
        self.output_func(
            f"System: {env.os_family} {env.os_version}  Handlers: {mode}"
        )

    def _root_menu(self) -> None:
        actions: Dict[str, Tuple[str, Callable[[], None]]] = {
            "1": ("Install everything (UFW, Docker, Nginx)", self.install_everything),
            "2": ("System update", lambda: self.run_action("system-update", "run")),
            "3": ("UFW firewall", lambda: self.component_menu("firewall")),
            "4": ("Docker", lambda: self.component_menu("container-engine")),
            "5": ("Nginx and Certbot", lambda: self.component_menu("reverse-proxy")),
            "6": ("Security tools", lambda: self.group_menu("Security tools", SECURITY_TOOLS)),
            "7": ("Network and system tuning", lambda: self.group_menu("Network and system tuning", TUNING_TOOLS)),
            "8": ("Delegated services", lambda: self.group_menu("Delegated services", DELEGATED_SERVICES)),
            "9": ("Diagnostics", self.diagnostics_menu),
            "10": ("Component status overview", self.status_overview),
        }
        entries = [(key, label) for key, (label, _) in actions.items()]
        entries.append(("0", "Exit"))

        while True:
            self._show("Main menu", entries)
            raw = self.prompt(f"Select an option [0-{len(actions)}]: ")
            if raw in ("", "0"):
                return
            try:
                choice = self.parse_choice(raw, list(actions))
            except UserInputError as e:
                self._report_input_error(e)
                continue
            try:
                actions[choice][1]()
            except ComponentError as e:
                self._report_component_error(e)

    # --- Actions ---

    def run_action(
        self,
        component_id: str,
        verb: str,
        mode: ExecutionMode = ExecutionMode.INTERACTIVE,
    ) -> Optional[int]:
        """Dispatch one action; component errors are reported, not raised."""
        try:
            return self.dispatcher.dispatch(component_id, verb, mode)
        except ComponentError as e:
            self._report_component_error(e)
            return None

    def show_status(self, component_id: str) -> None:
        component = ComponentRegistry.get_component(component_id)
        status = self.detector.status(component_id)
        self.output_func(f"{component.display_name}: {status.label}")

    def install_everything(self) -> BatchSummary:
        summary = self.orchestrator.run()
        self.print_summary(summary)
        return summary

    def print_summary(self, summary: BatchSummary) -> None:
        self.output_func("")
        self.output_func("=== Installation summary ===")
        for component_id in summary.components:
            name = ComponentRegistry.get_component(component_id).display_name
            before = summary.before[component_id].label
            after = summary.after[component_id].label
            if component_id in summary.newly_installed:
                outcome = "newly installed"
            elif component_id in summary.already_present:
                outcome = "already present"
            else:
                outcome = f"FAILED: {summary.failed[component_id]}"
            self.output_func(f"  {name:<16} {before:>20} -> {after:<20} {outcome}")

    def status_overview(self) -> None:
        self.output_func("")
        self.output_func("=== Component status ===")
        for component_id, component_class in ComponentRegistry.get_all_components().items():
            if component_class.preparatory:
                continue
            component = ComponentRegistry.get_component(component_id)
            status = self.detector.status(component_id)
            self.output_func(f"  {component.display_name:<24} {status.label}")

    # --- Sub menus ---

    def group_menu(self, title: str, component_ids: List[str]) -> None:
        while True:
            entries = [
                (str(index), ComponentRegistry.get_component(component_id).display_name)
                for index, component_id in enumerate(component_ids, start=1)
            ]
            entries.append(("0", "Back"))
            self._show(title, entries)
            raw = self.prompt(f"Select an option [0-{len(component_ids)}]: ")
            if raw in ("", "0"):
                return
            try:
                choice = self.parse_choice(raw, [key for key, _ in entries[:-1]])
            except UserInputError as e:
                self._report_input_error(e)
                continue
            self.component_menu(component_ids[int(choice) - 1])

    def component_menu(self, component_id: str) -> None:
        """
        Verb menu for one component.

        Running a verb returns to the parent menu; the status entry is
        answered by the detector and shows the menu again. Empty input
        runs the component's default verb, or goes back when it has none.
        """
        component = ComponentRegistry.get_component(component_id)
        verbs = component.menu_verbs()
        options: Dict[str, str] = {
            str(index): verb for index, verb in enumerate(verbs, start=1)
        }
        options[str(len(verbs) + 1)] = STATUS_ENTRY

        while True:
            status = self.detector.status(component_id)
            entries = [
                (key, component.verb_label(verb))
                for key, verb in options.items()
                if verb != STATUS_ENTRY
            ]
            entries.append((str(len(verbs) + 1), "Show detected status"))
            entries.append(("0", "Back"))
            self._show(f"{component.display_name} ({status.label})", entries)

            raw = self.prompt(f"Select an option [0-{len(options)}]: ")
            if raw == "0":
                return
            if raw == "":
                if component.default_verb is None:
                    return
                verb = component.default_verb
            else:
                try:
                    verb = options[self.parse_choice(raw, list(options))]
                except UserInputError as e:
                    self._report_input_error(e)
                    continue

            if verb == STATUS_ENTRY:
                self.show_status(component_id)
                continue
            self.run_action(component_id, verb)
            return

    def diagnostics_menu(self) -> None:
        delegates = list(REMOTE_DELEGATES.values())
        while True:
            entries = [
                (str(index), delegate.display_name)
                for index, delegate in enumerate(delegates, start=1)
            ]
            entries.append(("0", "Back"))
            self._show("Diagnostics", entries)
            raw = self.prompt(f"Select an option [0-{len(delegates)}]: ")
            if raw in ("", "0"):
                return
            try:
                choice = self.parse_choice(raw, [key for key, _ in entries[:-1]])
            except UserInputError as e:
                self._report_input_error(e)
                continue
            self.delegate_menu(delegates[int(choice) - 1].id)

    def delegate_menu(self, delegate_id: str) -> None:
        delegate = REMOTE_DELEGATES[delegate_id]
        variants = list(delegate.variants)
        while True:
            entries = [
                (str(index), delegate.variant_label(variant))
                for index, variant in enumerate(variants, start=1)
            ]
            entries.append(("0", "Back"))
            self._show(delegate.display_name, entries)
            raw = self.prompt(
                f"Select an option [0-{len(variants)}] (Enter for {delegate.variant_label(delegate.default_variant)}): "
            )
            if raw == "0":
                return
            if raw == "":
                variant = delegate.default_variant
            else:
                try:
                    choice = self.parse_choice(raw, [key for key, _ in entries[:-1]])
                except UserInputError as e:
                    self._report_input_error(e)
                    continue
                variant = variants[int(choice) - 1]
            try:
                self.launcher.launch(delegate_id, variant)
            except ComponentError as e:
                self._report_component_error(e)
            return
