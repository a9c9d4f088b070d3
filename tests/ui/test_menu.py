# tests/ui/test_menu.py
# -*- coding: utf-8 -*-
"""
Tests for the interactive menu shell with scripted input.
"""

from typing import List
from unittest.mock import create_autospec

import pytest

from vps_setup.common.exceptions import FetchError, UnresolvedHandlerError
from vps_setup.installer.dispatcher import ActionDispatcher
from vps_setup.installer.models import BatchSummary, ExecutionMode, Status
from vps_setup.installer.orchestrator import BatchOrchestrator
from vps_setup.installer.remote_delegate import DelegateLauncher
from vps_setup.installer.status_detector import StatusDetector
from vps_setup.ui.menu import MenuShell


class ScriptedInput:
    """Feeds prepared answers to prompts; raises EOFError when exhausted."""

    def __init__(self, answers: List[str]):
        self.answers = list(answers)
        self.prompts: List[str] = []

    def __call__(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.answers:
            raise EOFError
        return self.answers.pop(0)


@pytest.fixture
def collaborators():
    detector = create_autospec(StatusDetector, instance=True)
    detector.status.return_value = Status()
    return {
        "detector": detector,
        "dispatcher": create_autospec(ActionDispatcher, instance=True),
        "orchestrator": create_autospec(BatchOrchestrator, instance=True),
        "launcher": create_autospec(DelegateLauncher, instance=True),
    }


@pytest.fixture
def shell_factory(local_session, collaborators):
    def _build(answers: List[str]):
        output: List[str] = []
        scripted = ScriptedInput(answers)
        shell = MenuShell(
            local_session,
            input_func=scripted,
            output_func=output.append,
            **collaborators,
        )
        return shell, scripted, output

    return _build


@pytest.mark.parametrize("answers", [["0"], [""], []])
def test_root_exit(shell_factory, collaborators, answers):
    shell, _, output = shell_factory(answers)

    shell.run()

    assert output.count("=== Main menu ===") == 1
    collaborators["dispatcher"].dispatch.assert_not_called()


def test_invalid_selection_redisplays_menu(shell_factory, caplog):
    shell, _, output = shell_factory(["42", "abc", "0"])

    shell.run()

    assert output.count("=== Main menu ===") == 3
    assert "Invalid selection '42'" in caplog.text


def test_firewall_empty_input_returns_to_parent(shell_factory, collaborators):
    shell, scripted, output = shell_factory(["3", "", "0"])

    shell.run()

    collaborators["dispatcher"].dispatch.assert_not_called()
    assert output.count("=== Main menu ===") == 2


def test_container_engine_empty_input_installs(shell_factory, collaborators):
    shell, _, _ = shell_factory(["4", "", "0"])

    shell.run()

    collaborators["dispatcher"].dispatch.assert_called_once_with(
        "container-engine", "install", ExecutionMode.INTERACTIVE
    )


def test_numbered_verb_selection(shell_factory, collaborators):
    shell, _, _ = shell_factory(["3", "4", "0"])

    shell.run()

    collaborators["dispatcher"].dispatch.assert_called_once_with(
        "firewall", "uninstall", ExecutionMode.INTERACTIVE
    )


def test_status_entry_uses_detector_not_handler(shell_factory, collaborators):
    collaborators["detector"].status.return_value = Status(installed=True, active=True, version="0.36")
    # Firewall has four verbs, so entry 5 is the detected status.
    shell, _, output = shell_factory(["3", "5", "0", "0"])

    shell.run()

    collaborators["dispatcher"].dispatch.assert_not_called()
    assert "UFW firewall: active (0.36)" in output


def test_component_error_is_reported_and_loop_continues(shell_factory, collaborators, caplog):
    collaborators["dispatcher"].dispatch.side_effect = UnresolvedHandlerError(
        "Cannot run 'install' for Docker", component_id="container-engine"
    )
    shell, _, output = shell_factory(["4", "1", "0"])

    shell.run()

    assert "Cannot run 'install' for Docker" in caplog.text
    assert output.count("=== Main menu ===") == 2


def test_group_menu_uses_default_verb(shell_factory, collaborators):
    shell, _, _ = shell_factory(["6", "2", "", "0", "0"])

    shell.run()

    collaborators["dispatcher"].dispatch.assert_called_once_with(
        "ssh-hardening", "full", ExecutionMode.INTERACTIVE
    )


def test_system_update_entry(shell_factory, collaborators):
    shell, _, _ = shell_factory(["2", "0"])

    shell.run()

    collaborators["dispatcher"].dispatch.assert_called_once_with(
        "system-update", "run", ExecutionMode.INTERACTIVE
    )


def test_diagnostics_default_variant(shell_factory, collaborators):
    shell, _, _ = shell_factory(["9", "1", "", "0", "0"])

    shell.run()

    collaborators["launcher"].launch.assert_called_once_with("yabs", "full")


def test_diagnostics_fetch_error_is_reported(shell_factory, collaborators, caplog):
    collaborators["launcher"].launch.side_effect = FetchError("https://yabs.sh", "timed out")
    shell, _, _ = shell_factory(["9", "1", "3", "0", "0"])

    shell.run()

    collaborators["launcher"].launch.assert_called_once_with("yabs", "geekbench")
    assert "https://yabs.sh" in caplog.text


def test_install_everything_prints_summary(shell_factory, collaborators):
    collaborators["orchestrator"].run.return_value = BatchSummary(
        components=["firewall", "container-engine"],
        before={"firewall": Status(installed=True, active=True), "container-engine": Status()},
        after={"firewall": Status(installed=True, active=True), "container-engine": Status()},
        already_present=["firewall"],
        failed={"container-engine": "handler exited with code 1"},
    )
    shell, _, output = shell_factory(["1", "0"])

    shell.run()

    collaborators["orchestrator"].run.assert_called_once()
    text = "\n".join(output)
    assert "already present" in text
    assert "FAILED: handler exited with code 1" in text


def test_status_overview_lists_components(shell_factory, collaborators):
    shell, _, output = shell_factory(["10", "0"])

    shell.run()

    start = output.index("=== Component status ===")
    overview = "\n".join(output[start:start + 14])
    assert "Docker" in overview
    assert "SSH login notifier" in overview
    assert "System update" not in overview
    assert collaborators["detector"].status.call_count == 13


def test_eof_inside_submenu_exits(shell_factory, collaborators):
    shell, _, _ = shell_factory(["7"])

    shell.run()

    collaborators["dispatcher"].dispatch.assert_not_called()
