# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0

"""Set up a logger with optional rich formatting."""

from __future__ import annotations

import logging

from typing import Any

from rich.console import Console
from rich.logging import RichHandler


def get_rich_handler(**kwargs: Any) -> RichHandler:
    """A rich handler writing to stderr, so command output on stdout stays clean."""
    return RichHandler(
        console=Console(stderr=True, markup=True, soft_wrap=True), markup=False, **kwargs
    )


def level_from_name(name: str | int) -> int:
    """Resolve a level name like `"info"` (or an int level) to a logging level."""
    if isinstance(name, int):
        return name
    level = logging.getLevelNamesMapping().get(name.upper())
    if level is None:
        raise ValueError(f"Unknown log level: {name}")
    return level


def setup_logger(
    name: str | None = "capturescope",
    *,
    level: int = logging.WARNING,
    rich: bool = True,
    rich_options: dict[str, Any] | None = None,
) -> logging.Logger:
    """Set up a logger with optional rich formatting."""
    if not rich:
        logging.basicConfig(level=level)
        return logging.getLogger(name)
    handler = get_rich_handler(**(rich_options or {}))
    logger = logging.getLogger(name)
    logger.setLevel(level)
    # Clear existing handlers to prevent duplication
    logger.handlers.clear()
    logger.addHandler(handler)
    return logger


__all__ = ("get_rich_handler", "level_from_name", "setup_logger")
