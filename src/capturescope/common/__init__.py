# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0

"""Shared utilities."""

from capturescope.common.logging import get_rich_handler, level_from_name, setup_logger


__all__ = ("get_rich_handler", "level_from_name", "setup_logger")
