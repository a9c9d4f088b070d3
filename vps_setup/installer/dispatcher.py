# vps_setup/installer/dispatcher.py
# -*- coding: utf-8 -*-
"""
Action dispatch: runs a component's handler with the argument for a verb.
"""

import logging
import os
from typing import Dict, List, Optional

from vps_setup.common.command_utils import log_message, run_command
from vps_setup.common.exceptions import (
    ComponentError,
    FetchError,
    HandlerNotFoundError,
    HandlerStorageError,
    UnresolvedHandlerError,
)
from vps_setup.config.config_models import AppSettings, Session
from vps_setup.installer.models import Action, ActionResult, ExecutionMode
from vps_setup.installer.registry import ComponentRegistry
from vps_setup.installer.resolver import HandlerResolver


def handler_environment(
    app_settings: AppSettings, mode: ExecutionMode
) -> Dict[str, str]:
    """
    Environment for a script run in `mode`.

    Unattended runs get `<auto_confirm_env_var>=true`. Interactive runs have
    the variable removed even if the installer itself was started with it.
    """
    env = dict(os.environ)
    env_var = app_settings.auto_confirm_env_var
    if mode == ExecutionMode.UNATTENDED:
        env[env_var] = "true"
    else:
        env.pop(env_var, None)
    return env


class ActionDispatcher:
    """
    Dispatches (component, verb, mode) actions to handler scripts.

    Every action resolves its handler first; an action whose handler cannot
    be resolved is refused. The unattended flag is passed to the handler
    explicitly through its environment, never inherited from the caller.
    """

    def __init__(
        self,
        session: Session,
        resolver: HandlerResolver,
        logger: Optional[logging.Logger] = None,
    ):
        self.session = session
        self.resolver = resolver
        self.logger = logger or logging.getLogger(self.__class__.__name__)

    def build_environment(self, mode: ExecutionMode) -> Dict[str, str]:
        return handler_environment(self.session.app_settings, mode)

    def dispatch(
        self,
        component_id: str,
        verb: str,
        mode: ExecutionMode = ExecutionMode.INTERACTIVE,
    ) -> int:
        """
        Run the component's handler for `verb`.

        Args:
            component_id: The component id.
            verb: A verb from the component's verb table.
            mode: Interactive or unattended.

        Returns:
            The handler's exit code.

        Raises:
            UnknownComponentError: If the id is not registered.
            UnsupportedVerbError: If the component does not accept `verb`.
                Checked before anything is fetched.
            UnresolvedHandlerError: If the handler could not be resolved or
                started.
        """
        component = ComponentRegistry.get_component(component_id)
        argument = component.handler_argument(verb)
        symbols = self.session.symbols

        try:
            handler_path = self.resolver.resolve(component_id)
        except (FetchError, HandlerNotFoundError, HandlerStorageError) as e:
            raise UnresolvedHandlerError(
                f"Cannot run '{verb}' for {component.display_name}: {e}",
                component_id=component_id,
                original_error=e,
            ) from e

        command: List[str] = ["bash", str(handler_path)]
        if argument:
            command.append(argument)

        log_message(
            f"{symbols.get('rocket', '🚀')} {component.display_name}: {component.verb_label(verb)}",
            "step",
            self.logger,
            self.session.app_settings,
        )
        try:
            result = run_command(
                command,
                self.session.app_settings,
                check=False,
                current_logger=self.logger,
                env=self.build_environment(mode),
            )
        except OSError as e:
            raise UnresolvedHandlerError(
                f"Cannot start handler {handler_path}: {e}",
                component_id=component_id,
                original_error=e,
            ) from e

        if result.returncode == 0:
            log_message(
                f"{symbols.get('success', '✅')} {component.display_name}: '{verb}' finished",
                "success",
                self.logger,
                self.session.app_settings,
            )
        else:
            log_message(
                f"{symbols.get('error', '❌')} {component.display_name}: '{verb}' exited with code {result.returncode}",
                "error",
                self.logger,
                self.session.app_settings,
            )
        return result.returncode

    def submit(self, action: Action) -> ActionResult:
        """
        Dispatch an Action and capture component failures in the result.

        Component errors stay local to this action; they are logged and
        returned, never raised.
        """
        try:
            exit_code = self.dispatch(
                action.component_id, action.verb, action.mode
            )
        except ComponentError as e:
            log_message(
                f"{self.session.symbols.get('error', '❌')} {e}",
                "error",
                self.logger,
                self.session.app_settings,
            )
            return ActionResult(action=action, error=str(e))
        return ActionResult(action=action, exit_code=exit_code)
