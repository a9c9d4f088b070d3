"""
Orchestrator for the "install everything" flow.

The flow is a fixed sequence of phases:
SNAPSHOT_BEFORE -> RUN_EACH -> SNAPSHOT_AFTER -> SUMMARIZE.
Components that are already installed are never reinstalled, failures are
recorded per component and the flow always runs to the summary. There is
no rollback.
"""

import logging
from typing import List, Optional

from vps_setup.common.command_utils import log_message
from vps_setup.installer.dispatcher import ActionDispatcher
from vps_setup.installer.models import (
    Action,
    BatchPhase,
    BatchSummary,
    ExecutionMode,
)
from vps_setup.installer.registry import ComponentRegistry
from vps_setup.installer.status_detector import StatusDetector


class BatchOrchestrator:
    """Runs the batch install and aggregates before/after status."""

    def __init__(
        self,
        detector: StatusDetector,
        dispatcher: ActionDispatcher,
        logger: Optional[logging.Logger] = None,
    ):
        self.detector = detector
        self.dispatcher = dispatcher
        self.logger = logger or logging.getLogger(self.__class__.__name__)
        self.phase: Optional[BatchPhase] = None

    @property
    def app_settings(self):
        return self.dispatcher.session.app_settings

    def _enter(self, phase: BatchPhase, summary: BatchSummary) -> None:
        self.phase = phase
        summary.phases.append(phase)
        self.logger.debug(f"Batch phase: {phase.value}")

    def run(
        self,
        component_ids: Optional[List[str]] = None,
        preparatory_ids: Optional[List[str]] = None,
    ) -> BatchSummary:
        """
        Install every batch component that is not yet present.

        Args:
            component_ids: Install targets. Defaults to the registry's batch set.
            preparatory_ids: Actions run unattended before the first install
                (the system update). Defaults to the registry's preparatory set.
                They are not part of the summary partition.

        Returns:
            The BatchSummary. Every target appears in exactly one of
            newly_installed, already_present or failed.
        """
        if component_ids is None:
            component_ids = ComponentRegistry.get_batch_components()
        if preparatory_ids is None:
            preparatory_ids = ComponentRegistry.get_preparatory_components()

        symbols = self.app_settings.symbols
        summary = BatchSummary(components=list(component_ids))
        log_message(
            f"{symbols.get('package', '📦')} Installing all components: {', '.join(component_ids)}",
            "step",
            self.logger,
            self.app_settings,
        )

        self._enter(BatchPhase.SNAPSHOT_BEFORE, summary)
        summary.before = self.detector.snapshot(component_ids)

        self._enter(BatchPhase.RUN_EACH, summary)
        for component_id in preparatory_ids:
            component = ComponentRegistry.get_component(component_id)
            summary.preparatory.append(
                self.dispatcher.submit(
                    Action(
                        component_id=component_id,
                        verb=component.batch_verb,
                        mode=ExecutionMode.UNATTENDED,
                    )
                )
            )

        for component_id in component_ids:
            component = ComponentRegistry.get_component(component_id)
            if summary.before[component_id].installed:
                log_message(
                    f"{component.display_name} is already installed, skipping",
                    "info",
                    self.logger,
                    self.app_settings,
                )
                continue
            summary.results[component_id] = self.dispatcher.submit(
                Action(
                    component_id=component_id,
                    verb=component.batch_verb,
                    mode=ExecutionMode.UNATTENDED,
                )
            )

        self._enter(BatchPhase.SNAPSHOT_AFTER, summary)
        summary.after = self.detector.snapshot(component_ids)

        self._enter(BatchPhase.SUMMARIZE, summary)
        self._summarize(summary)
        self._log_summary(summary)
        return summary

    def _summarize(self, summary: BatchSummary) -> None:
        for component_id in summary.components:
            result = summary.results.get(component_id)
            if summary.before[component_id].installed:
                summary.already_present.append(component_id)
            elif summary.after[component_id].installed:
                summary.newly_installed.append(component_id)
                if result is not None and not result.succeeded:
                    self.logger.warning(
                        f"{component_id} is installed but its handler reported a failure"
                    )
            elif result is not None and result.error:
                summary.failed[component_id] = result.error
            elif result is not None and result.exit_code:
                summary.failed[component_id] = (
                    f"handler exited with code {result.exit_code}"
                )
            else:
                summary.failed[component_id] = "still not installed after install"

    def _log_summary(self, summary: BatchSummary) -> None:
        symbols = self.app_settings.symbols
        for result in summary.preparatory:
            if not result.succeeded:
                log_message(
                    f"{symbols.get('warning', '⚠️')} {result.action.component_id} did not complete: {result.error or f'exit code {result.exit_code}'}",
                    "warning",
                    self.logger,
                    self.app_settings,
                )
        if summary.newly_installed:
            log_message(
                f"Newly installed: {', '.join(summary.newly_installed)}",
                "success",
                self.logger,
                self.app_settings,
            )
        if summary.already_present:
            log_message(
                f"Already present: {', '.join(summary.already_present)}",
                "info",
                self.logger,
                self.app_settings,
            )
        for component_id, reason in summary.failed.items():
            log_message(
                f"{symbols.get('error', '❌')} Failed: {component_id} ({reason})",
                "error",
                self.logger,
                self.app_settings,
            )
        if summary.succeeded:
            log_message(
                f"{symbols.get('sparkles', '✨')} All components are installed",
                "success",
                self.logger,
                self.app_settings,
            )
        else:
            log_message(
                f"Batch finished with {len(summary.failed)} failure(s)",
                "warning",
                self.logger,
                self.app_settings,
            )
