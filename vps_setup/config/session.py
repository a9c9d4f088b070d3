# vps_setup/config/session.py
# -*- coding: utf-8 -*-
"""
Builds the immutable Session from settings, environment facts and CLI flags.
"""

import logging
import tempfile
from pathlib import Path
from typing import Optional

from .config_loader import PROJECT_ROOT
from .config_models import AppSettings, EnvironmentInfo, Session

module_logger = logging.getLogger(__name__)

LOCAL_SCRIPTS_DIR_DEFAULT: Path = PROJECT_ROOT / "scripts"


def default_cache_dir() -> Path:
    """
    Create the per-process handler cache used in remote mode.

    The directory gets an unpredictable name and mode 0700, so no other
    account can prepare it or place handlers in it.
    """
    return Path(tempfile.mkdtemp(prefix="vps-setup-"))


def build_session(
    app_settings: AppSettings,
    environment: EnvironmentInfo,
    branch: Optional[str] = None,
    force_refresh: bool = False,
    current_logger: Optional[logging.Logger] = None,
) -> Session:
    """
    Decide local vs. remote execution mode and freeze the runtime state.

    Local mode is used when the handler directory (settings.scripts_dir, or
    the scripts/ directory of the checkout) exists. Otherwise the installer
    was started as a remote one-liner and handlers are fetched on demand
    into the cache directory.

    Args:
        app_settings: The resolved application settings.
        environment: Result of the environment probe.
        branch: Remote source branch. Defaults to settings.default_branch.
        force_refresh: The --force-update flag. Dropped with a warning in
            local mode; remote handlers are downloaded fresh on first use
            in every process anyway.
        current_logger: Optional logger to use instead of the module logger.

    Returns:
        The frozen Session.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_settings.symbols

    local_dir = app_settings.scripts_dir or LOCAL_SCRIPTS_DIR_DEFAULT
    remote_mode = not Path(local_dir).is_dir()

    if remote_mode:
        handler_dir = app_settings.cache_dir or default_cache_dir()
        logger_to_use.info(
            f"{symbols.get('info', 'ℹ️')} Remote execution detected, handlers will be downloaded to {handler_dir}"
        )
    else:
        handler_dir = Path(local_dir)
        logger_to_use.debug(f"Using local handlers from {handler_dir}")
        if branch:
            logger_to_use.warning(
                f"{symbols.get('warning', '!')} --branch '{branch}' has no effect with local handlers."
            )
        if force_refresh:
            logger_to_use.warning(
                f"{symbols.get('warning', '!')} --force-update has no effect with local handlers."
            )
            force_refresh = False

    return Session(
        app_settings=app_settings,
        environment=environment,
        remote_mode=remote_mode,
        branch=branch or app_settings.default_branch,
        force_refresh=force_refresh,
        handler_dir=Path(handler_dir),
    )
