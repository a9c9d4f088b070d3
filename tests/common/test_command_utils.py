# tests/common/test_command_utils.py
# -*- coding: utf-8 -*-
"""
Tests for the command execution and logging helpers.
"""

import logging
import subprocess

import pytest

from vps_setup.common.command_utils import command_exists, log_message, run_command
from vps_setup.common.logging_config import STEP, SUCCESS


@pytest.fixture
def test_logger():
    return logging.getLogger("tests.command_utils")


def test_log_message_uses_custom_levels(caplog, test_logger):
    with caplog.at_level(logging.DEBUG, logger=test_logger.name):
        log_message("done", "success", test_logger)
        log_message("next", "step", test_logger)
        log_message("odd", "no-such-level", test_logger)

    levels = [record.levelno for record in caplog.records]
    assert levels == [SUCCESS, STEP, logging.INFO]


def test_run_command_passes_environment(mocker, app_settings, test_logger):
    completed = subprocess.CompletedProcess(["true"], 0, stdout="", stderr="")
    mock_run = mocker.patch(
        "vps_setup.common.command_utils.subprocess.run", return_value=completed
    )

    result = run_command(
        ["bash", "script.sh", "install"],
        app_settings,
        check=False,
        env={"AUTO_INSTALL": "true"},
        current_logger=test_logger,
    )

    assert result is completed
    mock_run.assert_called_once()
    args, kwargs = mock_run.call_args
    assert args[0] == ["bash", "script.sh", "install"]
    assert kwargs["env"] == {"AUTO_INSTALL": "true"}
    assert kwargs["check"] is False
    assert kwargs["errors"] is None


def test_run_command_replaces_undecodable_output(tmp_path, app_settings, test_logger):
    tool = tmp_path / "docker"
    tool.write_text("#!/bin/sh\nprintf 'Docker version 24.0.7 \\377\\376\\n'\n")
    tool.chmod(0o755)

    result = run_command(
        [str(tool)],
        app_settings,
        check=False,
        capture_output=True,
        errors="replace",
        current_logger=test_logger,
    )

    assert result.stdout.startswith("Docker version 24.0.7 ")
    assert "�" in result.stdout


def test_run_command_reraises_called_process_error(mocker, app_settings, caplog, test_logger):
    mocker.patch(
        "vps_setup.common.command_utils.subprocess.run",
        side_effect=subprocess.CalledProcessError(3, ["false"], stderr="boom"),
    )

    with caplog.at_level(logging.DEBUG, logger=test_logger.name):
        with pytest.raises(subprocess.CalledProcessError):
            run_command(["false"], app_settings, current_logger=test_logger)

    assert any("rc 3" in record.getMessage() for record in caplog.records)


def test_run_command_quiet_logs_at_debug(mocker, app_settings, caplog, test_logger):
    mocker.patch(
        "vps_setup.common.command_utils.subprocess.run",
        return_value=subprocess.CompletedProcess(["x"], 0, stdout="out", stderr=""),
    )

    with caplog.at_level(logging.DEBUG, logger=test_logger.name):
        run_command(
            ["systemctl", "is-active", "docker"],
            app_settings,
            check=False,
            capture_output=True,
            current_logger=test_logger,
            quiet=True,
        )

    assert caplog.records
    assert all(record.levelno == logging.DEBUG for record in caplog.records)


def test_run_command_missing_executable(mocker, app_settings, test_logger):
    mocker.patch(
        "vps_setup.common.command_utils.subprocess.run",
        side_effect=FileNotFoundError(2, "No such file", "nope"),
    )
    with pytest.raises(FileNotFoundError):
        run_command(["nope"], app_settings, current_logger=test_logger)


def test_command_exists(mocker):
    mock_which = mocker.patch(
        "vps_setup.common.command_utils.shutil.which",
        side_effect=lambda name: "/usr/bin/curl" if name == "curl" else None,
    )
    assert command_exists("curl") is True
    assert command_exists("wget") is False
    assert mock_which.call_count == 2
