# vps_setup/common/network_utils.py
# -*- coding: utf-8 -*-
"""
Network-related utility functions.

All remote scripts (component handlers and third-party tools) are fetched
through a requests session that only speaks HTTPS, verifies certificates
and refuses TLS versions below the configured minimum.
"""

import logging
import ssl
from typing import Optional

import requests
from requests.adapters import HTTPAdapter

from vps_setup import __version__
from vps_setup.common.command_utils import log_message
from vps_setup.common.exceptions import FetchError
from vps_setup.config.config_models import AppSettings

module_logger = logging.getLogger(__name__)


class TLSEnforcingAdapter(HTTPAdapter):
    """HTTPS adapter pinned to a minimum TLS version with full verification."""

    def __init__(self, minimum_version: ssl.TLSVersion, *args, **kwargs):
        self.minimum_version = minimum_version
        super().__init__(*args, **kwargs)

    def _ssl_context(self) -> ssl.SSLContext:
        context = ssl.create_default_context()
        context.minimum_version = self.minimum_version
        context.check_hostname = True
        context.verify_mode = ssl.CERT_REQUIRED
        return context

    def init_poolmanager(self, *args, **kwargs):
        kwargs["ssl_context"] = self._ssl_context()
        return super().init_poolmanager(*args, **kwargs)

    def proxy_manager_for(self, *args, **kwargs):
        kwargs["ssl_context"] = self._ssl_context()
        return super().proxy_manager_for(*args, **kwargs)


def build_secure_session(app_settings: AppSettings) -> requests.Session:
    """
    Create a requests session for fetching remote scripts.

    Args:
        app_settings: Provides the minimum TLS version.

    Returns:
        A session with the TLS-enforcing adapter mounted for https://.
    """
    session = requests.Session()
    session.verify = True
    session.headers["User-Agent"] = f"vps-setup/{__version__}"
    session.mount(
        "https://",
        TLSEnforcingAdapter(ssl.TLSVersion[app_settings.min_tls_version]),
    )
    return session


def fetch_text(
    url: str,
    http_session: requests.Session,
    timeout: float,
    component_id: Optional[str] = None,
    current_logger: Optional[logging.Logger] = None,
) -> str:
    """
    Download a text resource over HTTPS.

    Plain-HTTP URLs, and redirects that end on one, are refused.

    Args:
        url: The https:// URL to fetch.
        http_session: Session from build_secure_session().
        timeout: Timeout in seconds.
        component_id: Component the download belongs to, for error reports.
        current_logger: Optional logger instance.

    Returns:
        The response body.

    Raises:
        FetchError: On any transport, TLS or HTTP error. The message carries
            the exact URL attempted.
    """
    logger_to_use = current_logger if current_logger else module_logger

    if not url.lower().startswith("https://"):
        raise FetchError(
            url, "refusing to fetch over an insecure transport", component_id
        )

    log_message(f"Downloading {url}", "info", logger_to_use)
    try:
        response = http_session.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.exceptions.HTTPError as http_err:
        raise FetchError(
            url, f"HTTP error: {http_err}", component_id, http_err
        ) from http_err
    except requests.exceptions.SSLError as ssl_err:
        raise FetchError(
            url, f"TLS verification failed: {ssl_err}", component_id, ssl_err
        ) from ssl_err
    except requests.exceptions.Timeout as timeout_err:
        raise FetchError(
            url, f"timed out after {timeout}s", component_id, timeout_err
        ) from timeout_err
    except requests.exceptions.RequestException as req_err:
        raise FetchError(
            url, f"connection error: {req_err}", component_id, req_err
        ) from req_err

    if not str(response.url).lower().startswith("https://"):
        raise FetchError(
            url,
            f"redirected to insecure location {response.url}",
            component_id,
        )

    if not response.text.strip():
        raise FetchError(url, "empty response body", component_id)

    return response.text
