# vps_setup/common/command_utils.py
# -*- coding: utf-8 -*-
"""
Utilities for executing shell commands and logging their output.
"""

import logging
import shutil
import subprocess
from typing import Dict, List, Optional, Union

from vps_setup.common.logging_config import STEP, SUCCESS
from vps_setup.config.config_models import SYMBOLS_DEFAULT, AppSettings

module_logger = logging.getLogger(__name__)

_LEVELS: Dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "step": STEP,
    "success": SUCCESS,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}


def log_message(
    message: str,
    level: str = "info",
    current_logger: Optional[logging.Logger] = None,
    app_settings: Optional[AppSettings] = None,
    exc_info: bool = False,
) -> None:
    """
    Log a message at a named level.

    This is the single logging entry point used by the installer. Besides the
    standard levels it understands "step" and "success", which the console
    formatter renders with their own colored tags.

    Args:
        message (str): The log message to be recorded.
        level (str): One of "debug", "info", "step", "success", "warning",
            "error" or "critical". Unknown names log at info.
        current_logger (Optional[logging.Logger]): A logger instance to use.
            If not provided, a module-level logger will be used.
        app_settings (Optional[AppSettings]): Optional application settings.
        exc_info (bool): Include exception details in the log.

    Returns:
        None
    """
    effective_logger = current_logger if current_logger else module_logger
    effective_logger.log(
        _LEVELS.get(level, logging.INFO), message, exc_info=exc_info
    )


def run_command(
    command: Union[List[str], str],
    app_settings: Optional[AppSettings],
    check: bool = True,
    shell: bool = False,
    capture_output: bool = False,
    text: bool = True,
    errors: Optional[str] = None,
    cmd_input: Optional[str] = None,
    current_logger: Optional[logging.Logger] = None,
    cwd: Optional[str] = None,
    env: Optional[Dict[str, str]] = None,
    quiet: bool = False,
) -> subprocess.CompletedProcess:
    """
    Executes a system command and logs the process details and results.

    Args:
        command (Union[List[str], str]): The command to execute, as a list of
            arguments or, with shell=True, as a single string.
        app_settings (Optional[AppSettings]): Optional application settings,
            used for logging symbols.
        check (bool): Raise CalledProcessError on a non-zero exit code.
        shell (bool): Run the command through the shell.
        capture_output (bool): Capture stdout and stderr instead of letting the
            child write to the terminal.
        text (bool): Decode output streams as text.
        errors (Optional[str]): Codec error handler used when decoding text
            output, e.g. "replace" for tools that may print invalid UTF-8.
        cmd_input (Optional[str]): Data passed to the command's stdin.
        current_logger (Optional[logging.Logger]): Logger to use.
        cwd (Optional[str]): Working directory for the command.
        env (Optional[Dict[str, str]]): Full environment for the command.
            Defaults to the inherited environment.
        quiet (bool): Log the command line and captured output at debug level
            only. Used by read-only probes that run many times.

    Returns:
        subprocess.CompletedProcess: The completed process instance.

    Raises:
        subprocess.CalledProcessError: If check is True and the command fails.
        FileNotFoundError: If the executable does not exist.
        OSError: If the command could not be started.
    """
    effective_logger = current_logger if current_logger else module_logger
    symbols = (
        app_settings.symbols
        if app_settings and app_settings.symbols
        else SYMBOLS_DEFAULT
    )
    trace_level = "debug" if quiet else "info"
    command_to_run: Union[List[str], str]

    if shell:
        command_to_run = (
            " ".join(command) if isinstance(command, list) else command
        )
        command_to_log_str = str(command_to_run)
    else:
        if isinstance(command, str):
            log_message(
                f"{symbols.get('warning', '!')} Running string command '{command}' without shell=True. Consider list format.",
                "warning",
                effective_logger,
                app_settings,
            )
            command_to_run = command.split()
            command_to_log_str = command
        else:
            command_to_run = command
            command_to_log_str = subprocess.list2cmdline(command)

    log_message(
        f"{symbols.get('gear', '⚙️')} Executing: {command_to_log_str} {f'(in {cwd})' if cwd else ''}".rstrip(),
        trace_level,
        effective_logger,
        app_settings,
    )
    try:
        result = subprocess.run(
            command_to_run,
            check=check,
            shell=shell,
            capture_output=capture_output,
            text=text,
            errors=errors,
            input=cmd_input,
            cwd=cwd,
            env=env,
        )
        if capture_output:
            if result.stdout and result.stdout.strip():
                log_message(
                    f"   stdout: {result.stdout.strip()}",
                    "debug",
                    effective_logger,
                    app_settings,
                )
            if result.stderr and result.stderr.strip():
                log_message(
                    f"   stderr: {result.stderr.strip()}",
                    "debug",
                    effective_logger,
                    app_settings,
                )
        return result
    except subprocess.CalledProcessError as e:
        log_message(
            f"{symbols.get('error', '❌')} Command `{command_to_log_str}` failed (rc {e.returncode}).",
            "debug" if quiet else "error",
            effective_logger,
            app_settings,
        )
        if e.stderr and hasattr(e.stderr, "strip") and e.stderr.strip():
            log_message(
                f"   stderr: {e.stderr.strip()}",
                "debug" if quiet else "error",
                effective_logger,
                app_settings,
            )
        raise
    except FileNotFoundError as e:
        log_message(
            f"{symbols.get('error', '❌')} Command not found: {e.filename}. Ensure it's installed and in PATH.",
            "debug" if quiet else "error",
            effective_logger,
            app_settings,
        )
        raise


def command_exists(command_name: str) -> bool:
    """
    Check if a command exists in the system's PATH.

    Parameters:
        command_name (str): The name of the command to check for existence.

    Returns:
        bool: True if the command is found in the system's PATH, False otherwise.
    """
    return shutil.which(command_name) is not None
