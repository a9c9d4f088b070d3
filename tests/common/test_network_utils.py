# tests/common/test_network_utils.py
# -*- coding: utf-8 -*-
import ssl

import pytest
import requests

from vps_setup.common.exceptions import FetchError
from vps_setup.common.network_utils import (
    TLSEnforcingAdapter,
    build_secure_session,
    fetch_text,
)
from vps_setup.config.config_models import AppSettings

URL = "https://raw.githubusercontent.com/uniquMonte/vps-setup/main/scripts/ufw_manager.sh"


def test_build_secure_session_enforces_tls(app_settings):
    session = build_secure_session(app_settings)

    adapter = session.get_adapter("https://example.com")
    assert isinstance(adapter, TLSEnforcingAdapter)
    assert adapter.minimum_version == ssl.TLSVersion.TLSv1_2
    assert session.verify is True
    assert session.headers["User-Agent"].startswith("vps-setup/")


def test_tls_context_honours_minimum_version():
    session = build_secure_session(AppSettings(min_tls_version="TLSv1_3"))
    context = session.get_adapter("https://example.com")._ssl_context()

    assert context.minimum_version == ssl.TLSVersion.TLSv1_3
    assert context.verify_mode == ssl.CERT_REQUIRED
    assert context.check_hostname is True


def test_fetch_text_returns_body(http_session):
    assert fetch_text(URL, http_session, timeout=5).startswith("#!/bin/bash")
    http_session.get.assert_called_once_with(URL, timeout=5)


def test_fetch_text_refuses_plain_http(http_session):
    with pytest.raises(FetchError) as excinfo:
        fetch_text("http://example.com/x.sh", http_session, timeout=5)

    assert excinfo.value.url == "http://example.com/x.sh"
    http_session.get.assert_not_called()


def test_fetch_text_connection_error_carries_url(mocker):
    session = mocker.MagicMock()
    session.get.side_effect = requests.exceptions.ConnectionError("unreachable")

    with pytest.raises(FetchError) as excinfo:
        fetch_text(URL, session, timeout=5, component_id="firewall")

    assert URL in str(excinfo.value)
    assert excinfo.value.component_id == "firewall"
    assert isinstance(excinfo.value.original_error, requests.exceptions.ConnectionError)


def test_fetch_text_http_error(mocker, response_factory):
    response = response_factory()
    response.raise_for_status.side_effect = requests.exceptions.HTTPError("404 Not Found")
    session = mocker.MagicMock()
    session.get.return_value = response

    with pytest.raises(FetchError, match="HTTP error"):
        fetch_text(URL, session, timeout=5)


def test_fetch_text_rejects_insecure_redirect(mocker, response_factory):
    session = mocker.MagicMock()
    session.get.return_value = response_factory(url="http://mirror.example.com/x.sh")

    with pytest.raises(FetchError, match="insecure location"):
        fetch_text(URL, session, timeout=5)


def test_fetch_text_rejects_empty_body(mocker, response_factory):
    session = mocker.MagicMock()
    session.get.return_value = response_factory(text="   \n", url=URL)

    with pytest.raises(FetchError, match="empty"):
        fetch_text(URL, session, timeout=5)
