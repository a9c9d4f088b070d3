# vps_setup/common/exceptions.py
# -*- coding: utf-8 -*-
"""
Exception hierarchy for the installer.

Errors fall in three groups:
- SetupEnvironmentError: the host cannot run the installer at all. Fatal,
  raised before any menu is shown.
- ComponentError and its subclasses: a single action or component failed.
  Reported to the user; the menu loop and the batch flow carry on.
- UserInputError: an invalid menu selection. The menu is redisplayed.
"""

from pathlib import Path
from typing import Optional


class VpsSetupError(Exception):
    """Base class for all installer errors."""


class SetupEnvironmentError(VpsSetupError):
    """The host environment does not allow the installer to run."""


class ComponentError(VpsSetupError):
    """Custom exception for component-related errors."""

    def __init__(
        self,
        message: str,
        component_id: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        self.component_id = component_id
        self.original_error = original_error
        super().__init__(message)


class UnknownComponentError(ComponentError):
    """No component is registered under the requested id."""

    def __init__(self, component_id: str):
        super().__init__(
            f"No component registered with id '{component_id}'",
            component_id=component_id,
        )


class FetchError(ComponentError):
    """A remote script could not be retrieved."""

    def __init__(
        self,
        url: str,
        reason: str,
        component_id: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        self.url = url
        self.reason = reason
        super().__init__(
            f"Failed to fetch {url}: {reason}",
            component_id=component_id,
            original_error=original_error,
        )


class HandlerNotFoundError(ComponentError):
    """Local mode is active and the handler is missing from local storage."""

    def __init__(self, component_id: str, path: Path):
        self.path = path
        super().__init__(
            f"Handler for '{component_id}' not found at {path}",
            component_id=component_id,
        )


class HandlerStorageError(ComponentError):
    """The handler directory is unusable or a handler could not be stored."""

    def __init__(
        self,
        component_id: str,
        path: Path,
        reason: str,
        original_error: Optional[Exception] = None,
    ):
        self.path = path
        self.reason = reason
        super().__init__(
            f"Cannot store handler for '{component_id}' in {path}: {reason}",
            component_id=component_id,
            original_error=original_error,
        )


class UnresolvedHandlerError(ComponentError):
    """An action was refused because its handler could not be resolved."""


class UnsupportedVerbError(ComponentError):
    """The verb is not part of the component's verb table."""

    def __init__(self, component_id: str, verb: str):
        self.verb = verb
        super().__init__(
            f"Component '{component_id}' does not support '{verb}'",
            component_id=component_id,
        )


class UserInputError(VpsSetupError):
    """An invalid selection was entered at a menu prompt."""
