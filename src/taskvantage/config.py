"""Configuration management using pydantic-settings.

This module provides configuration loading with the following precedence:
1. CLI arguments (highest priority)
2. Environment variables (TASKVANTAGE_* prefix)
3. Global config file (~/.config/taskvantage/config.toml)
4. Built-in defaults (lowest priority)
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_config_path() -> Path:
    """Get the global config file path (XDG compliant).

    Returns:
        Path to config file:
        - Linux/macOS: ~/.config/taskvantage/config.toml
        - Windows: %APPDATA%/taskvantage/config.toml
    """
    if os.name == "nt":  # Windows
        base = Path(os.environ.get("APPDATA", Path.home()))
    else:  # Linux/macOS
        base = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return base / "taskvantage" / "config.toml"


def get_default_data_dir() -> Path:
    """Get the default data directory (XDG compliant)."""
    if os.name == "nt":
        base = Path(os.environ.get("LOCALAPPDATA", Path.home()))
    else:
        base = Path(os.environ.get("XDG_DATA_HOME", Path.home() / ".local" / "share"))
    return base / "taskvantage"


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Environment variables use TASKVANTAGE_ prefix:
    - TASKVANTAGE_DATA_DIR
    - TASKVANTAGE_LOG_LEVEL
    - TASKVANTAGE_SEED_SAMPLE_DATA
    etc.
    """

    model_config = SettingsConfigDict(
        env_prefix="TASKVANTAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Storage Configuration
    data_dir: str = Field(
        default_factory=lambda: str(get_default_data_dir()),
        description="Directory holding the key-value store",
    )
    store_filename: str = Field(default="store.db", description="SQLite key-value store file name")
    seed_sample_data: bool = Field(
        default=True,
        description="Populate sample team members, projects and tasks on first run",
    )

    # Logging Configuration
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    log_format: Literal["json", "console"] = Field(
        default="json",
        description="Log output format",
    )
    log_file: str | None = Field(default=None, description="Log file path (optional)")

    # Metrics Configuration
    metrics_enabled: bool = Field(default=False, description="Record Prometheus metrics for engine operations")

    @property
    def store_path(self) -> Path:
        """Full path of the SQLite key-value store."""
        return Path(self.data_dir).expanduser() / self.store_filename


def load_toml_config(path: Path | None = None) -> dict[str, Any]:
    """Load configuration from TOML file.

    Args:
        path: Path to config file (uses default if None)

    Returns:
        Configuration dictionary (empty if file doesn't exist)
    """
    try:
        import tomli
    except ImportError:
        # Python 3.11+ has tomllib in stdlib
        import tomllib as tomli  # type: ignore

    config_path = path or get_config_path()
    if config_path.exists():
        with open(config_path, "rb") as f:
            return tomli.load(f)
    return {}


def flatten_toml_config(toml_config: dict[str, Any]) -> dict[str, Any]:
    """Flatten nested TOML config to flat dictionary for Settings.

    Args:
        toml_config: Nested TOML configuration

    Returns:
        Flattened configuration dictionary
    """
    overrides: dict[str, Any] = {}

    if "storage" in toml_config:
        if "data_dir" in toml_config["storage"]:
            overrides["data_dir"] = toml_config["storage"]["data_dir"]
        if "filename" in toml_config["storage"]:
            overrides["store_filename"] = toml_config["storage"]["filename"]
        if "seed_sample_data" in toml_config["storage"]:
            overrides["seed_sample_data"] = toml_config["storage"]["seed_sample_data"]

    if "logging" in toml_config:
        for key in ["level", "format", "file"]:
            if key in toml_config["logging"]:
                overrides[f"log_{key}"] = toml_config["logging"][key]

    if "metrics" in toml_config and "enabled" in toml_config["metrics"]:
        overrides["metrics_enabled"] = toml_config["metrics"]["enabled"]

    return overrides


def get_default_config() -> dict[str, Any]:
    """Get default configuration for init-config.

    Returns:
        Default configuration dictionary
    """
    return {
        "storage": {
            "data_dir": str(get_default_data_dir()),
            "filename": "store.db",
            "seed_sample_data": True,
        },
        "logging": {
            "level": "INFO",
            "format": "json",
        },
        "metrics": {
            "enabled": False,
        },
    }


def load_settings_with_toml(config_path: Path | None = None, **cli_overrides: Any) -> Settings:
    """Load settings with TOML config as base, env vars and CLI as override.

    Environment variables are applied by pydantic-settings only for fields not
    passed explicitly, so TOML values are dropped when the matching env var is
    set before constructing Settings.

    Args:
        config_path: Optional path to TOML config file
        **cli_overrides: Values given on the command line (None values ignored)

    Returns:
        Settings instance with merged configuration
    """
    toml_config = load_toml_config(config_path)
    overrides = flatten_toml_config(toml_config)

    # Env vars beat the config file
    for key in list(overrides):
        if f"TASKVANTAGE_{key.upper()}" in os.environ:
            del overrides[key]

    overrides.update({k: v for k, v in cli_overrides.items() if v is not None})
    return Settings(**overrides)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings instance (cached)
    """
    return Settings()
