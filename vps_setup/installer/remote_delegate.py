# vps_setup/installer/remote_delegate.py
# -*- coding: utf-8 -*-
"""
Third-party diagnostic tools launched from their published scripts.

The installer never inspects these tools: it downloads the script over the
same HTTPS transport as the handlers, runs it with bash in interactive mode
and reports pass or fail from the exit code.
"""

import logging
import os
import tempfile
from typing import Dict, List, Optional, Tuple

import requests
from pydantic import BaseModel, ConfigDict, Field

from vps_setup.common.command_utils import log_message, run_command
from vps_setup.common.exceptions import (
    ComponentError,
    UnknownComponentError,
    UnsupportedVerbError,
)
from vps_setup.common.network_utils import build_secure_session, fetch_text
from vps_setup.config.config_models import Session
from vps_setup.installer.dispatcher import handler_environment
from vps_setup.installer.models import ExecutionMode

module_logger = logging.getLogger(__name__)


class RemoteDelegate(BaseModel):
    """An independently maintained script and the argument sets it accepts."""

    model_config = ConfigDict(frozen=True)

    id: str
    display_name: str
    url: str
    # Variant name -> arguments, in menu order. The first one is the default.
    variants: Dict[str, Tuple[str, ...]]
    variant_labels: Dict[str, str] = Field(default_factory=dict)

    @property
    def default_variant(self) -> str:
        return next(iter(self.variants))

    def arguments(self, variant: Optional[str] = None) -> List[str]:
        """
        Raises:
            UnsupportedVerbError: If the variant is unknown.
        """
        variant = variant or self.default_variant
        if variant not in self.variants:
            raise UnsupportedVerbError(self.id, variant)
        return list(self.variants[variant])

    def variant_label(self, variant: str) -> str:
        return self.variant_labels.get(variant, variant)


_IP_VARIANTS: Dict[str, Tuple[str, ...]] = {
    "dual": (),
    "ipv4": ("-4",),
    "ipv6": ("-6",),
}
_IP_VARIANT_LABELS = {
    "dual": "IPv4 and IPv6",
    "ipv4": "IPv4 only",
    "ipv6": "IPv6 only",
}

REMOTE_DELEGATES: Dict[str, RemoteDelegate] = {
    delegate.id: delegate
    for delegate in (
        RemoteDelegate(
            id="yabs",
            display_name="YABS benchmark",
            url="https://yabs.sh",
            variants={
                "full": (),
                "basic": ("-i",),
                "geekbench": ("-fg",),
                "disk-network": ("-ig",),
                "disk": ("-fign",),
                "network": ("-fdig",),
                "quick": ("-fgn",),
            },
            variant_labels={
                "full": "Full test (disk, network, Geekbench)",
                "basic": "Skip network tests",
                "geekbench": "Geekbench only",
                "disk-network": "Disk and network, no Geekbench",
                "disk": "Disk only",
                "network": "Network only",
                "quick": "Quick test (no Geekbench)",
            },
        ),
        RemoteDelegate(
            id="ip-quality",
            display_name="IP quality check",
            url="https://IP.Check.Place",
            variants=_IP_VARIANTS,
            variant_labels=_IP_VARIANT_LABELS,
        ),
        RemoteDelegate(
            id="network-quality",
            display_name="Network quality check",
            url="https://Net.Check.Place",
            variants=_IP_VARIANTS,
            variant_labels=_IP_VARIANT_LABELS,
        ),
        RemoteDelegate(
            id="unlock-check",
            display_name="Streaming unlock check",
            url="https://unlockcheck.mlkit.workers.dev",
            variants=_IP_VARIANTS,
            variant_labels=_IP_VARIANT_LABELS,
        ),
    )
}


def get_delegate(delegate_id: str) -> RemoteDelegate:
    """
    Raises:
        UnknownComponentError: If no delegate has this id.
    """
    try:
        return REMOTE_DELEGATES[delegate_id]
    except KeyError:
        raise UnknownComponentError(delegate_id) from None


class DelegateLauncher:
    """Downloads and runs remote delegates, one at a time."""

    def __init__(
        self,
        session: Session,
        http_session: Optional[requests.Session] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.session = session
        self._http_session = http_session
        self.logger = logger or module_logger

    @property
    def http_session(self) -> requests.Session:
        if self._http_session is None:
            self._http_session = build_secure_session(
                self.session.app_settings
            )
        return self._http_session

    def launch(self, delegate_id: str, variant: Optional[str] = None) -> bool:
        """
        Fetch a delegate's script into a private temp file and run it.

        Args:
            delegate_id: Id from REMOTE_DELEGATES.
            variant: Argument set; defaults to the delegate's first variant.

        Returns:
            True if the script exited with code 0.

        Raises:
            UnknownComponentError: If the delegate is unknown.
            UnsupportedVerbError: If the variant is unknown.
            FetchError: If the script could not be downloaded.
            ComponentError: If the script could not be stored or started.
        """
        delegate = get_delegate(delegate_id)
        arguments = delegate.arguments(variant)
        app_settings = self.session.app_settings
        symbols = self.session.symbols

        content = fetch_text(
            delegate.url,
            self.http_session,
            app_settings.http_timeout,
            component_id=delegate.id,
            current_logger=self.logger,
        )

        script_path: Optional[str] = None
        try:
            fd, script_path = tempfile.mkstemp(
                prefix=f"vps-setup-{delegate.id}-", suffix=".sh"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as script_file:
                script_file.write(content)
            log_message(
                f"{symbols.get('rocket', '🚀')} Running {delegate.display_name}",
                "step",
                self.logger,
                app_settings,
            )
            result = run_command(
                ["bash", script_path, *arguments],
                app_settings,
                check=False,
                current_logger=self.logger,
                env=handler_environment(app_settings, ExecutionMode.INTERACTIVE),
            )
        except OSError as e:
            raise ComponentError(
                f"Cannot run {delegate.display_name}: {e}",
                component_id=delegate.id,
                original_error=e,
            ) from e
        finally:
            if script_path is not None and os.path.exists(script_path):
                os.unlink(script_path)

        if result.returncode == 0:
            log_message(
                f"{symbols.get('success', '✅')} {delegate.display_name} completed",
                "success",
                self.logger,
                app_settings,
            )
            return True

        log_message(
            f"{symbols.get('error', '❌')} {delegate.display_name} failed (exit code {result.returncode})",
            "error",
            self.logger,
            app_settings,
        )
        return False
