# vps_setup/installer/resolver.py
# -*- coding: utf-8 -*-
"""
Handler resolution: maps a component to the path of its executable handler.

In local mode the handlers ship with the checkout. In remote mode (the
installer was started as a one-liner) they are downloaded on first use into
a private per-process cache directory and reused for the rest of the process.
"""

import logging
import shutil
from pathlib import Path
from typing import Optional, Set

import requests

from vps_setup.common.command_utils import log_message
from vps_setup.common.exceptions import HandlerNotFoundError, HandlerStorageError
from vps_setup.common.file_utils import (
    atomic_write_executable,
    ensure_private_directory,
)
from vps_setup.common.network_utils import build_secure_session, fetch_text
from vps_setup.config.config_models import Session
from vps_setup.installer.registry import ComponentRegistry


class HandlerResolver:
    """
    Owns the local handler directory.

    Only the resolver decides whether a handler is present or must be
    fetched. Each component maps to exactly one file, so writes never
    contend.
    """

    def __init__(
        self,
        session: Session,
        http_session: Optional[requests.Session] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.session = session
        self.logger = logger or logging.getLogger(self.__class__.__name__)
        self._http_session = http_session
        # Components whose handler this process downloaded and stored.
        self._stored: Set[str] = set()

    @property
    def http_session(self) -> requests.Session:
        if self._http_session is None:
            self._http_session = build_secure_session(
                self.session.app_settings
            )
        return self._http_session

    def handler_path(self, component_id: str) -> Path:
        component = ComponentRegistry.get_component(component_id)
        return self.session.handler_dir / component.handler_name

    def source_url(self, component_id: str) -> str:
        component = ComponentRegistry.get_component(component_id)
        return f"{self.session.source_root()}/{component.handler_name}"

    def resolve(
        self, component_id: str, force_refresh: bool = False
    ) -> Path:
        """
        Return the path of the component's handler, fetching it if needed.

        In remote mode a handler is only reused if this resolver stored it
        earlier in the same process. A file that was already in the handler
        directory is never trusted and is downloaded again.

        Args:
            component_id: The component id.
            force_refresh: Fetch even if this process already stored a copy.

        Returns:
            Path of an executable handler file.

        Raises:
            UnknownComponentError: If the id is not registered.
            HandlerNotFoundError: In local mode, if the handler is missing.
            FetchError: In remote mode, if the download fails.
            HandlerStorageError: In remote mode, if the handler directory is
                not private or the handler cannot be written.
        """
        path = self.handler_path(component_id)
        symbols = self.session.symbols

        if not self.session.remote_mode:
            # Local handlers are authoritative; there is nothing to refresh.
            if path.is_file():
                return path
            raise HandlerNotFoundError(component_id, path)

        if component_id in self._stored and path.is_file() and not force_refresh:
            self.logger.debug(f"Using cached handler {path}")
            return path

        handler_dir = self.session.handler_dir
        try:
            ensure_private_directory(handler_dir, current_logger=self.logger)
        except OSError as e:
            raise HandlerStorageError(component_id, handler_dir, str(e), e) from e

        url = self.source_url(component_id)
        content = fetch_text(
            url,
            self.http_session,
            self.session.app_settings.http_timeout,
            component_id=component_id,
            current_logger=self.logger,
        )
        try:
            atomic_write_executable(path, content, current_logger=self.logger)
        except OSError as e:
            raise HandlerStorageError(component_id, path, str(e), e) from e
        self._stored.add(component_id)
        log_message(
            f"{symbols.get('success', '✅')} Downloaded {path.name}",
            "success",
            self.logger,
            self.session.app_settings,
        )
        return path

    def cleanup(self) -> None:
        """Remove the per-process download directory, if this process owns one."""
        if (
            not self.session.remote_mode
            or self.session.app_settings.cache_dir is not None
        ):
            return
        if self.session.handler_dir.is_dir():
            shutil.rmtree(self.session.handler_dir, ignore_errors=True)
            self.logger.debug(
                f"Removed handler cache {self.session.handler_dir}"
            )
