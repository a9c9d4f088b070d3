# tests/config/test_config_loader.py
# -*- coding: utf-8 -*-
"""
Tests for layered settings loading.
"""

import argparse
from pathlib import Path

import pytest

from vps_setup.config.config_loader import (
    _deep_update,
    load_app_settings,
    load_yaml_config,
)
from vps_setup.config.config_models import (
    DEFAULT_BRANCH_DEFAULT,
    REPO_BASE_URL_DEFAULT,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "VPS_SETUP_DEFAULT_BRANCH",
        "VPS_SETUP_HTTP_TIMEOUT",
        "VPS_SETUP_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def yaml_file(tmp_path):
    def _write(content: str) -> str:
        path = tmp_path / "config.yaml"
        path.write_text(content)
        return str(path)

    return _write


def test_defaults_without_config_file(tmp_path):
    settings = load_app_settings(config_file_path=str(tmp_path / "missing.yaml"))

    assert settings.repo_base_url == REPO_BASE_URL_DEFAULT
    assert settings.default_branch == DEFAULT_BRANCH_DEFAULT
    assert settings.auto_confirm_env_var == "AUTO_INSTALL"
    assert settings.min_tls_version == "TLSv1_2"
    assert "almalinux" in settings.supported_os_families


def test_yaml_overrides_defaults(yaml_file):
    settings = load_app_settings(
        config_file_path=yaml_file("default_branch: dev\nhttp_timeout: 10\n")
    )
    assert settings.default_branch == "dev"
    assert settings.http_timeout == 10


def test_environment_overrides_defaults(tmp_path, monkeypatch):
    monkeypatch.setenv("VPS_SETUP_DEFAULT_BRANCH", "stable")
    settings = load_app_settings(config_file_path=str(tmp_path / "missing.yaml"))
    assert settings.default_branch == "stable"


def test_yaml_overrides_environment(yaml_file, monkeypatch):
    monkeypatch.setenv("VPS_SETUP_DEFAULT_BRANCH", "stable")
    settings = load_app_settings(config_file_path=yaml_file("default_branch: dev\n"))
    assert settings.default_branch == "dev"


def test_cli_overrides_everything(yaml_file):
    path = yaml_file("log_level: WARNING\ncolor: true\n")
    cli_args = argparse.Namespace(
        config=path,
        scripts_dir="/opt/handlers",
        verbose=True,
        no_color=True,
        branch=None,
    )

    settings = load_app_settings(cli_args)

    assert settings.log_level == "DEBUG"
    assert settings.color is False
    assert settings.scripts_dir == Path("/opt/handlers")


def test_malformed_yaml_is_ignored(yaml_file, caplog):
    settings = load_app_settings(config_file_path=yaml_file("default_branch: [unclosed\n"))
    assert settings.default_branch == DEFAULT_BRANCH_DEFAULT
    assert "Could not parse YAML" in caplog.text


def test_non_mapping_yaml_is_ignored(yaml_file):
    assert load_yaml_config(yaml_file("- just\n- a list\n")) == {}


def test_invalid_value_exits(yaml_file):
    with pytest.raises(SystemExit):
        load_app_settings(config_file_path=yaml_file("http_timeout: -1\n"))


def test_invalid_tls_version_exits(yaml_file):
    with pytest.raises(SystemExit):
        load_app_settings(config_file_path=yaml_file("min_tls_version: SSLv3\n"))


def test_deep_update_merges_nested():
    source = {"symbols": {"error": "x", "info": "i"}, "color": True}
    result = _deep_update(source, {"symbols": {"error": "E"}, "color": None})
    assert result == {"symbols": {"error": "E", "info": "i"}, "color": True}
