# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0

"""Configuration for capturescope."""

from capturescope.config.settings import (
    CaptureScopeSettings,
    get_settings,
    get_user_cache_dir,
    get_user_config_dir,
    reset_settings,
)


__all__ = (
    "CaptureScopeSettings",
    "get_settings",
    "get_user_cache_dir",
    "get_user_config_dir",
    "reset_settings",
)
