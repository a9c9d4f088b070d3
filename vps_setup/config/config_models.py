# vps_setup/config/config_models.py
# -*- coding: utf-8 -*-
"""
Pydantic models for application configuration.

This module defines the structured settings for the installer, including
defaults, type annotations, and descriptions, plus the two immutable runtime
models built once at startup: the detected environment and the session.
"""

from pathlib import Path
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# --- Default Static Values (can be overridden by config file/env/cli) ---
REPO_BASE_URL_DEFAULT: str = (
    "https://raw.githubusercontent.com/uniquMonte/vps-setup"
)
DEFAULT_BRANCH_DEFAULT: str = "main"
SCRIPTS_SUBDIR_DEFAULT: str = "scripts"
AUTO_CONFIRM_ENV_VAR_DEFAULT: str = "AUTO_INSTALL"
HTTP_TIMEOUT_DEFAULT: float = 30.0
MIN_TLS_VERSION_DEFAULT: str = "TLSv1_2"
LOG_LEVEL_DEFAULT: str = "INFO"

SUPPORTED_OS_FAMILIES_DEFAULT: List[str] = [
    "ubuntu",
    "debian",
    "centos",
    "fedora",
    "rhel",
    "rocky",
    "almalinux",
]

SYMBOLS_DEFAULT: Dict[str, str] = {
    "success": "✅",
    "error": "❌",
    "warning": "⚠️",
    "info": "ℹ️",
    "step": "➡️",
    "gear": "⚙️",
    "package": "📦",
    "rocket": "🚀",
    "sparkles": "✨",
    "critical": "🔥",
    "debug": "🐛",
}


class AppSettings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(env_prefix="VPS_SETUP_", extra="ignore")

    repo_base_url: str = Field(
        default=REPO_BASE_URL_DEFAULT,
        description="Root of the remote handler source, without branch.",
    )
    default_branch: str = Field(
        default=DEFAULT_BRANCH_DEFAULT,
        description="Branch or tag used when --branch is not given.",
    )
    scripts_subdir: str = Field(
        default=SCRIPTS_SUBDIR_DEFAULT,
        description="Path segment between the branch and the handler file name.",
    )
    scripts_dir: Optional[Path] = Field(
        default=None,
        description="Local handler directory. If it exists the installer runs in local mode.",
    )
    cache_dir: Optional[Path] = Field(
        default=None,
        description="Where fetched handlers are stored in remote mode. Defaults to a per-process temp dir.",
    )
    auto_confirm_env_var: str = Field(
        default=AUTO_CONFIRM_ENV_VAR_DEFAULT,
        description="Environment variable set to 'true' for unattended handler runs.",
    )
    http_timeout: float = Field(
        default=HTTP_TIMEOUT_DEFAULT,
        gt=0,
        description="Timeout in seconds for each remote fetch.",
    )
    min_tls_version: Literal["TLSv1_2", "TLSv1_3"] = Field(
        default=MIN_TLS_VERSION_DEFAULT,
        description="Lowest TLS version accepted for remote fetches.",
    )
    supported_os_families: List[str] = Field(
        default_factory=lambda: list(SUPPORTED_OS_FAMILIES_DEFAULT),
        description="OS IDs (from /etc/os-release) known to work. Others only produce a warning.",
    )
    log_level: str = Field(default=LOG_LEVEL_DEFAULT, description="Console log level.")
    log_file: Optional[str] = Field(
        default=None, description="Optional file that receives a plain-text log."
    )
    color: bool = Field(default=True, description="Colorize tagged console output.")

    symbols: Dict[str, str] = Field(
        default_factory=lambda: dict(SYMBOLS_DEFAULT)
    )


class EnvironmentInfo(BaseModel):
    """Read-only facts about the host, gathered once at startup."""

    model_config = ConfigDict(frozen=True)

    os_family: str
    os_version: str
    is_root: bool
    has_fetch_tool: bool
    fetch_tool: Optional[str] = None
    os_supported: bool = True


class Session(BaseModel):
    """
    Process-wide runtime configuration.

    Built once by build_session() and passed explicitly to every collaborator.
    Frozen: nothing may change it after startup.
    """

    model_config = ConfigDict(frozen=True)

    app_settings: AppSettings
    environment: EnvironmentInfo
    remote_mode: bool
    branch: str
    force_refresh: bool = False
    handler_dir: Path

    @property
    def symbols(self) -> Dict[str, str]:
        return self.app_settings.symbols

    def source_root(self) -> str:
        """Return the URL prefix handlers are fetched from for this session."""
        base = self.app_settings.repo_base_url.rstrip("/")
        subdir = self.app_settings.scripts_subdir.strip("/")
        if subdir:
            return f"{base}/{self.branch}/{subdir}"
        return f"{base}/{self.branch}"
