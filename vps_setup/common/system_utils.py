# vps_setup/common/system_utils.py
# -*- coding: utf-8 -*-
"""
System-level utility functions: reading the OS identity, checking for root
privileges and for a network fetch tool.

detect_environment() is the installer's environment probe. It only reads
system files and looks up executables; it never changes the host.
"""

import logging
import os
import shlex
from pathlib import Path
from typing import Dict, Optional, Sequence, Tuple

from vps_setup.common.command_utils import command_exists, log_message
from vps_setup.common.exceptions import SetupEnvironmentError
from vps_setup.config.config_models import AppSettings, EnvironmentInfo

module_logger = logging.getLogger(__name__)

OS_RELEASE_PATH: Path = Path("/etc/os-release")
FETCH_TOOLS: Tuple[str, ...] = ("curl", "wget")


def parse_os_release(content: str) -> Dict[str, str]:
    """
    Parse the KEY=value lines of an os-release file.

    Values may be quoted with single or double quotes. Comments, blank
    lines and malformed lines are skipped.

    Args:
        content: The file's text.

    Returns:
        A dictionary of the parsed keys.
    """
    values: Dict[str, str] = {}
    for line in content.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, raw_value = line.split("=", 1)
        try:
            parts = shlex.split(raw_value)
        except ValueError:
            continue
        values[key.strip()] = parts[0] if parts else ""
    return values


def read_os_identity(
    os_release_path: Path = OS_RELEASE_PATH,
) -> Tuple[str, str]:
    """
    Return the (ID, VERSION_ID) pair of the running distribution.

    Raises:
        SetupEnvironmentError: If the file is missing, unreadable or has no ID.
    """
    try:
        content = Path(os_release_path).read_text(encoding="utf-8")
    except OSError as e:
        raise SetupEnvironmentError(
            f"Unable to detect operating system: cannot read {os_release_path} ({e.strerror or e})"
        ) from e

    values = parse_os_release(content)
    os_family = values.get("ID", "").lower()
    if not os_family:
        raise SetupEnvironmentError(
            f"Unable to detect operating system: no ID in {os_release_path}"
        )
    return os_family, values.get("VERSION_ID", "")


def is_root_user() -> bool:
    """True if the process runs with an effective UID of 0."""
    return os.geteuid() == 0


def find_fetch_tool(candidates: Sequence[str] = FETCH_TOOLS) -> Optional[str]:
    """Return the first available network fetch utility, or None."""
    for tool in candidates:
        if command_exists(tool):
            return tool
    return None


def detect_environment(
    app_settings: AppSettings,
    os_release_path: Path = OS_RELEASE_PATH,
    current_logger: Optional[logging.Logger] = None,
) -> EnvironmentInfo:
    """
    Probe the host and return the facts the installer depends on.

    Checks, in order, root privileges, the OS identity and the presence of a
    network fetch utility (handlers and third-party installers shell out to
    curl or wget). An OS family outside settings.supported_os_families only
    produces a warning.

    Args:
        app_settings: The application settings.
        os_release_path: Location of the os-release file.
        current_logger: Optional logger instance.

    Returns:
        The detected EnvironmentInfo.

    Raises:
        SetupEnvironmentError: If the caller is not root, the OS cannot be
            identified, or neither curl nor wget is installed.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_settings.symbols

    if not is_root_user():
        raise SetupEnvironmentError(
            "Please run this installer with root privileges"
        )

    os_family, os_version = read_os_identity(os_release_path)
    log_message(
        f"Detected operating system: {os_family} {os_version}".rstrip(),
        "info",
        logger_to_use,
        app_settings,
    )

    os_supported = os_family in app_settings.supported_os_families
    if os_supported:
        log_message(
            f"{symbols.get('success', '✅')} Operating system supported",
            "success",
            logger_to_use,
            app_settings,
        )
    else:
        log_message(
            f"{symbols.get('warning', '!')} Untested operating system '{os_family}', some components may not work",
            "warning",
            logger_to_use,
            app_settings,
        )

    fetch_tool = find_fetch_tool()
    if fetch_tool is None:
        raise SetupEnvironmentError(
            "Neither curl nor wget is available. Please install one of them first"
        )

    return EnvironmentInfo(
        os_family=os_family,
        os_version=os_version,
        is_root=True,
        has_fetch_tool=True,
        fetch_tool=fetch_tool,
        os_supported=os_supported,
    )
