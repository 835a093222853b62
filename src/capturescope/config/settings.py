# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0

"""Settings for capturescope.

Configuration precedence (highest to lowest):
1. Initialization arguments
2. Environment variables (CAPTURESCOPE_*)
3. `capturescope.toml` in the current directory
4. `capturescope.toml` in the user config directory
5. Defaults
"""

from __future__ import annotations

import logging
import os
import platform

from functools import cache
from pathlib import Path
from typing import Annotated, Literal

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    EnvSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)


logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "capturescope.toml"
DEFAULT_REPOSITORY_URL = "https://github.com/zed-industries/extensions.git"

type LogLevelName = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


@cache
def get_user_config_dir() -> Path:
    """Get the user configuration directory based on the operating system."""
    if (system := platform.system()) == "Windows":
        config_dir = Path(os.getenv("APPDATA", Path("~\\AppData\\Roaming").expanduser()))
    elif system == "Darwin":
        config_dir = Path.home() / "Library" / "Application Support"
    else:
        config_dir = Path(os.getenv("XDG_CONFIG_HOME", Path.home() / ".config"))
    return config_dir / "capturescope"


def get_user_cache_dir() -> Path:
    """Get the user cache directory based on the operating system."""
    if (system := platform.system()) == "Windows":
        cache_dir = Path(os.getenv("LOCALAPPDATA", Path("~\\AppData\\Local").expanduser()))
    elif system == "Darwin":
        cache_dir = Path.home() / "Library" / "Caches"
    else:
        cache_dir = Path(os.getenv("XDG_CACHE_HOME", Path.home() / ".cache"))
    return cache_dir / "capturescope"


class CaptureScopeSettings(BaseSettings):
    """Where the corpus comes from and where it is cached."""

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_ignore_empty=True,
        env_prefix="CAPTURESCOPE_",
        extra="ignore",
        str_strip_whitespace=True,
        title="CaptureScope Settings",
        use_attribute_docstrings=True,
        validate_assignment=True,
    )

    cache_dir: Annotated[
        Path,
        Field(
            default_factory=get_user_cache_dir,
            description="""Directory holding the registry checkout and the corpus snapshot.""",
        ),
    ]
    repository_url: Annotated[
        str, Field(description="""Git URL of the extension registry.""")
    ] = DEFAULT_REPOSITORY_URL
    repository_dir_name: Annotated[
        str, Field(description="""Name of the registry checkout inside `cache_dir`.""")
    ] = "extensions"
    snapshot_name: Annotated[
        str, Field(description="""File name of the corpus snapshot inside `cache_dir`.""")
    ] = "extensions-scan-dump.json"
    builtin_path: Annotated[
        Path | None,
        Field(
            description="""Directory of first-party extensions. Each subdirectory is one extension."""
        ),
    ] = None
    update_submodules: Annotated[
        bool, Field(description="""Check out extension submodules before scanning.""")
    ] = True
    log_level: Annotated[
        LogLevelName, Field(description="""Log level for the `capturescope` logger.""")
    ] = "WARNING"

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value

    @field_validator("cache_dir", "builtin_path", mode="after")
    @classmethod
    def _expand_path(cls, value: Path | None) -> Path | None:
        return value.expanduser() if value is not None else None

    @property
    def repository_dir(self) -> Path:
        """Where the registry is checked out."""
        return self.cache_dir / self.repository_dir_name

    @property
    def snapshot_path(self) -> Path:
        """Where the corpus snapshot lives."""
        return self.cache_dir / self.snapshot_name

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize the sources of settings.

        Configuration precedence (highest to lowest):
        1. init_settings - Direct initialization arguments
        2. env_settings - Environment variables (CAPTURESCOPE_*)
        3. `capturescope.toml` in the current directory
        4. `capturescope.toml` in the user config directory
        """
        return (
            init_settings,
            EnvSettingsSource(
                settings_cls,
                env_prefix="CAPTURESCOPE_",
                case_sensitive=False,
                env_ignore_empty=True,
            ),
            TomlConfigSettingsSource(settings_cls, Path(CONFIG_FILE_NAME)),
            TomlConfigSettingsSource(settings_cls, get_user_config_dir() / CONFIG_FILE_NAME),
        )


_settings: CaptureScopeSettings | None = None
"""The global settings instance. Use `get_settings()` to access it."""


def get_settings() -> CaptureScopeSettings:
    """Get the global settings instance, creating it on first use."""
    global _settings
    if _settings is None:
        _settings = CaptureScopeSettings()
        logger.debug("Loaded settings: %s", _settings.model_dump(mode="json"))
    return _settings


def reset_settings() -> None:
    """Forget the global settings instance so the next access reloads it."""
    global _settings
    _settings = None


__all__ = (
    "CONFIG_FILE_NAME",
    "DEFAULT_REPOSITORY_URL",
    "CaptureScopeSettings",
    "get_settings",
    "get_user_cache_dir",
    "get_user_config_dir",
    "reset_settings",
)
