# tests/installer/test_orchestrator.py
# -*- coding: utf-8 -*-
"""
Tests for the install-everything batch flow.
"""

from typing import Iterable, List

import pytest

from vps_setup.installer.models import (
    Action,
    ActionResult,
    BatchPhase,
    ExecutionMode,
)
from vps_setup.installer.orchestrator import BatchOrchestrator
from vps_setup.installer.status_detector import StatusDetector

BINARIES = {
    "firewall": "ufw",
    "container-engine": "docker",
    "reverse-proxy": "nginx",
}

BATCH = ["firewall", "container-engine", "reverse-proxy"]


class RecordingDispatcher:
    """Pretends to run handlers: a successful install puts the binary on PATH."""

    def __init__(self, session, probe, failing: Iterable[str] = (), unresolved: Iterable[str] = ()):
        self.session = session
        self.probe = probe
        self.failing = set(failing)
        self.unresolved = set(unresolved)
        self.actions: List[Action] = []

    def submit(self, action: Action) -> ActionResult:
        self.actions.append(action)
        if action.component_id in self.unresolved:
            return ActionResult(action=action, error="Failed to fetch https://example.com/x.sh")
        if action.component_id in self.failing:
            return ActionResult(action=action, exit_code=1)
        if action.component_id in BINARIES:
            self.probe.binaries.add(BINARIES[action.component_id])
        return ActionResult(action=action, exit_code=0)

    def installs_for(self, component_id: str) -> List[Action]:
        return [a for a in self.actions if a.component_id == component_id]


@pytest.fixture
def probe(make_probe):
    return make_probe()


def build(local_session, probe, **kwargs):
    dispatcher = RecordingDispatcher(local_session, probe, **kwargs)
    return BatchOrchestrator(StatusDetector(probe), dispatcher), dispatcher


def test_preinstalled_component_is_skipped(local_session, probe):
    probe.binaries.add("ufw")
    orchestrator, dispatcher = build(local_session, probe)

    summary = orchestrator.run(["firewall", "container-engine"], preparatory_ids=[])

    assert dispatcher.installs_for("firewall") == []
    installs = dispatcher.installs_for("container-engine")
    assert len(installs) == 1
    assert installs[0].verb == "install"
    assert installs[0].mode == ExecutionMode.UNATTENDED
    assert summary.already_present == ["firewall"]
    assert summary.newly_installed == ["container-engine"]
    assert summary.failed == {}
    assert summary.succeeded is True


def test_phases_run_in_order(local_session, probe):
    orchestrator, _ = build(local_session, probe)

    summary = orchestrator.run(BATCH, preparatory_ids=[])

    assert summary.phases == [
        BatchPhase.SNAPSHOT_BEFORE,
        BatchPhase.RUN_EACH,
        BatchPhase.SNAPSHOT_AFTER,
        BatchPhase.SUMMARIZE,
    ]
    assert orchestrator.phase == BatchPhase.SUMMARIZE


def test_failure_does_not_stop_the_batch(local_session, probe):
    orchestrator, dispatcher = build(local_session, probe, failing={"container-engine"})

    summary = orchestrator.run(BATCH, preparatory_ids=[])

    assert [a.component_id for a in dispatcher.actions] == BATCH
    assert summary.newly_installed == ["firewall", "reverse-proxy"]
    assert summary.failed == {"container-engine": "handler exited with code 1"}
    assert summary.succeeded is False


def test_unresolved_handler_reported_as_failure(local_session, probe):
    orchestrator, _ = build(local_session, probe, unresolved={"reverse-proxy"})

    summary = orchestrator.run(BATCH, preparatory_ids=[])

    assert "Failed to fetch" in summary.failed["reverse-proxy"]


def test_partition_is_complete_and_disjoint(local_session, probe):
    probe.binaries.add("nginx")
    orchestrator, _ = build(local_session, probe, failing={"firewall"})

    summary = orchestrator.run(BATCH, preparatory_ids=[])

    buckets = [
        set(summary.newly_installed),
        set(summary.already_present),
        set(summary.failed),
    ]
    for component_id in BATCH:
        assert sum(component_id in bucket for bucket in buckets) == 1
    assert set().union(*buckets) == set(BATCH)


def test_snapshots_are_taken_before_and_after(local_session, probe):
    orchestrator, _ = build(local_session, probe)

    summary = orchestrator.run(["container-engine"], preparatory_ids=[])

    assert summary.before["container-engine"].installed is False
    assert summary.after["container-engine"].installed is True


def test_default_run_updates_system_first(local_session, probe):
    orchestrator, dispatcher = build(local_session, probe)

    summary = orchestrator.run()

    first = dispatcher.actions[0]
    assert (first.component_id, first.verb, first.mode) == (
        "system-update",
        "run",
        ExecutionMode.UNATTENDED,
    )
    assert summary.components == BATCH
    assert "system-update" not in summary.before
    assert len(summary.preparatory) == 1


def test_failed_preparatory_action_does_not_abort(local_session, probe):
    orchestrator, dispatcher = build(local_session, probe, failing={"system-update"})

    summary = orchestrator.run()

    assert summary.preparatory[0].succeeded is False
    assert summary.newly_installed == BATCH
