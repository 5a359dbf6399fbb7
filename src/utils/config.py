"""Centralized configuration management for the Ark game data mirror.

This module provides application-level configuration from environment variables.

Features:
- Environment variable support via .env files
- Fallback priority: .env → hardcoded defaults
- Automatic .env.example generation from defaults
- Type-safe configuration using Pydantic
- Singleton pattern for global access

Usage:
    from utils import global_config

    client = GameDataClient(
        config=global_config.gamedata,
        user_agent=global_config.app.computed_user_agent,
    )
"""

from __future__ import annotations

import threading
import tomllib
from logging import getLogger
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = getLogger(__name__)


def _read_pyproject() -> dict:
    """Read pyproject.toml and extract project metadata."""
    pyproject_path = Path(__file__).parent.parent.parent / "pyproject.toml"
    try:
        with open(pyproject_path, "rb") as f:
            data = tomllib.load(f)
        project = data.get("project", {})

        urls = {}
        if isinstance(project.get("urls"), dict):
            for k, v in project.get("urls", {}).items():
                if isinstance(v, str):
                    urls[str(k).lower()] = v

        return {
            "name": project.get("name", "ark-gamedata-mirror"),
            "version": project.get("version", "?.?.?"),
            "urls": urls,
            "repository": urls.get("repository") or urls.get("homepage"),
        }
    except Exception as e:
        logger.warning(f"Could not read pyproject.toml: {e}")
        return {
            "name": "ark-gamedata-mirror",
            "version": "?.?.?",
            "urls": {},
            "repository": None,
        }


# Read project metadata once at module load
_PROJECT_METADATA = _read_pyproject()


class GameDataConfig(BaseSettings):
    """Remote game data table configuration."""

    base_url: str = Field(
        default="https://raw.githubusercontent.com/Kengxxiao/ArknightsGameData/master/zh_CN/gamedata/excel",
        description="Base URL the table files are fetched from",
    )

    # Table files (relative to base_url)
    stage_table: str = Field(
        default="stage_table.json",
        description="Stage table file name",
    )
    zone_table: str = Field(
        default="zone_table.json",
        description="Zone table file name",
    )
    activity_table: str = Field(
        default="activity_table.json",
        description="Activity table file name",
    )
    character_table: str = Field(
        default="character_table.json",
        description="Character table file name",
    )
    tower_table: str = Field(
        default="climb_tower_table.json",
        description="Climb tower table file name",
    )

    request_timeout: float = Field(
        default=30.0,
        description="Timeout in seconds for each table download",
        gt=0,
    )
    sync_interval_minutes: int = Field(
        default=60,
        description="Minutes between periodic syncs when running with --interval",
        ge=1,
    )
    concurrent_sync: bool = Field(
        default=False,
        description="Refresh the five datasets concurrently, not one by one",
    )

    model_config = SettingsConfigDict(
        env_prefix="GAMEDATA_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Require an http(s) URL and drop any trailing slash."""
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"base_url must be an http(s) URL, got: {v}")
        return v.rstrip("/")

    def table_url(self, table_file: str) -> str:
        """Build the full URL of a table file."""
        return f"{self.base_url}/{table_file.lstrip('/')}"


class AppConfig(BaseSettings):
    """Application-wide configuration."""

    name: str = Field(
        default_factory=lambda: _PROJECT_METADATA["name"],
        description="Application name (from pyproject.toml)",
    )
    version: str = Field(
        default_factory=lambda: _PROJECT_METADATA["version"],
        description="Application version (from pyproject.toml)",
    )
    user_agent: str = Field(
        default="",
        description="HTTP User-Agent header (auto-generated if empty)",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    log_to_file: bool = Field(
        default=True,
        description="Also write logs to rotating files under user_data_dir/logs",
    )
    log_retention_count: int = Field(
        default=7,
        description="Number of log files to keep",
        ge=1,
    )

    # Project paths
    project_root: Path = Field(
        default_factory=lambda: Path(__file__).parent.parent.parent,
        description="Project root directory",
    )
    data_dir: Path = Field(
        default_factory=lambda: Path(__file__).parent.parent.parent / "data",
        description="Directory for writable files (logs)",
    )

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @property
    def user_data_dir(self) -> Path:
        """Get the writable data directory, creating it if needed."""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        return self.data_dir

    @property
    def computed_user_agent(self) -> str:
        """Generate User-Agent header if not explicitly set."""
        if self.user_agent:
            return self.user_agent
        agent = f"{self.name}/{self.version}"
        repository = _PROJECT_METADATA.get("repository")
        if repository:
            agent += f" (+{repository})"
        return agent


class Config:
    """Main configuration container with auto-initialization."""

    def __init__(self, write_env_example: bool = True) -> None:
        """Initialize configuration from environment and defaults."""
        self.app = AppConfig()
        self.gamedata = GameDataConfig()

        if write_env_example:
            self._update_env_example()

    def _update_env_example(self) -> None:
        """Update .env.example with current default values."""
        env_example_path = self.app.project_root / ".env.example"

        lines = [
            "# Ark Game Data Mirror - Environment Configuration",
            "# Copy this file to .env and customize the values",
            "#",
            "# Priority: .env > hardcoded defaults",
            "",
        ]

        sections: list[tuple[str, str, type[BaseSettings]]] = [
            ("Application Settings", "APP_", AppConfig),
            ("Game Data Settings", "GAMEDATA_", GameDataConfig),
        ]
        for title, prefix, section in sections:
            lines.extend(["# " + "=" * 76, f"# {title}", "# " + "=" * 76, ""])
            for field_name, field_info in section.model_fields.items():
                if field_name in ("project_root", "data_dir"):
                    continue  # Skip computed paths

                if field_info.default_factory:
                    try:
                        default = field_info.default_factory()
                    except Exception:
                        default = None
                else:
                    default = field_info.default

                env_var = f"{prefix}{field_name.upper()}"
                lines.append(f"# {field_info.description or ''}")
                if field_name == "user_agent":
                    lines.append(f"# {env_var}={self.app.computed_user_agent}")
                elif default is None or default == "":
                    lines.append(f"# {env_var}=")
                else:
                    lines.append(f"# {env_var}={default}")
                lines.append("")

        try:
            env_example_path.write_text("\n".join(lines), encoding="utf-8")
        except Exception as e:
            logger.warning(f"Could not write .env.example to {env_example_path}: {e}")

    def __repr__(self) -> str:
        """String representation of config."""
        return f"Config(\n  app={self.app},\n  gamedata={self.gamedata}\n)"


# Global configuration instance (singleton)
_config_instance: Config | None = None
_config_lock = threading.Lock()


def get_config(config: Config | None = None) -> Config:
    """Get the global configuration instance (lazy initialization).

    Args:
        config: Optional config instance to use instead of singleton.
                If provided, it replaces the singleton.

    Returns:
        Global Config instance
    """
    global _config_instance  # noqa: PLW0603

    if config is not None:
        with _config_lock:
            _config_instance = config
        return _config_instance

    if _config_instance is None:
        with _config_lock:
            if _config_instance is None:
                _config_instance = Config()

    assert _config_instance is not None
    return _config_instance


def reset_config() -> None:
    """Reset the global config instance.

    Primarily for testing.
    """
    global _config_instance  # noqa: PLW0603
    with _config_lock:
        _config_instance = None


# Create the global config instance for convenience
global_config = get_config()
