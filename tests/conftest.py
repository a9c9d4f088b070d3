# tests/conftest.py
from pathlib import Path
from typing import Dict, Iterable, List, Optional
from unittest.mock import MagicMock

import pytest

from vps_setup.config.config_models import AppSettings, EnvironmentInfo, Session
from vps_setup.installer.components import load_all_components


class FakeProbe:
    """In-memory stand-in for SystemProbe."""

    def __init__(
        self,
        binaries: Iterable[str] = (),
        active_units: Iterable[str] = (),
        outputs: Optional[Dict[str, str]] = None,
        files: Optional[Dict[str, str]] = None,
        paths: Iterable[str] = (),
    ):
        self.binaries = set(binaries)
        self.active_units = set(active_units)
        self.outputs = outputs or {}
        self.files = files or {}
        self.paths = set(paths)
        self.calls: List[str] = []

    def command_exists(self, name: str) -> bool:
        self.calls.append(f"exists:{name}")
        return name in self.binaries

    def service_active(self, unit: str) -> bool:
        self.calls.append(f"active:{unit}")
        return unit in self.active_units

    def command_output(self, command: List[str]) -> Optional[str]:
        self.calls.append(f"output:{' '.join(command)}")
        return self.outputs.get(" ".join(command))

    def path_exists(self, path: str) -> bool:
        self.calls.append(f"path:{path}")
        return path in self.paths or path in self.files

    def read_text(self, path: str) -> Optional[str]:
        self.calls.append(f"read:{path}")
        return self.files.get(path)


@pytest.fixture(scope="session", autouse=True)
def registered_components():
    """Make sure every component module has registered itself."""
    load_all_components()


@pytest.fixture
def app_settings(monkeypatch):
    for name in ("AUTO_INSTALL",):
        monkeypatch.delenv(name, raising=False)
    return AppSettings(color=False, http_timeout=5)


@pytest.fixture
def environment():
    return EnvironmentInfo(
        os_family="ubuntu",
        os_version="22.04",
        is_root=True,
        has_fetch_tool=True,
        fetch_tool="curl",
    )


@pytest.fixture
def remote_session(app_settings, environment, tmp_path) -> Session:
    return Session(
        app_settings=app_settings,
        environment=environment,
        remote_mode=True,
        branch="main",
        handler_dir=tmp_path / "cache",
    )


@pytest.fixture
def local_session(app_settings, environment, tmp_path) -> Session:
    scripts = tmp_path / "scripts"
    scripts.mkdir()
    return Session(
        app_settings=app_settings,
        environment=environment,
        remote_mode=False,
        branch="main",
        handler_dir=scripts,
    )


def make_response(text: str = "#!/bin/bash\necho ok\n", url: str = "https://example.com/x"):
    response = MagicMock()
    response.text = text
    response.url = url
    response.raise_for_status.return_value = None
    return response


@pytest.fixture
def http_session():
    """A requests.Session double that serves a small bash script."""
    session = MagicMock()

    def _get(url, timeout=None):
        return make_response(url=url)

    session.get.side_effect = _get
    return session


def write_handler(directory: Path, name: str, body: str = "#!/bin/bash\nexit 0\n") -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / name
    path.write_text(body)
    path.chmod(0o755)
    return path


@pytest.fixture
def make_probe():
    return FakeProbe


@pytest.fixture
def handler_writer():
    return write_handler


@pytest.fixture
def response_factory():
    return make_response
