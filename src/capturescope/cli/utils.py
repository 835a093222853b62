# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Common CLI utilities."""

from __future__ import annotations

import logging

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from cyclopts import Parameter
from rich.console import Console
from rich.table import Table

from capturescope.aggregator import CorpusAggregator
from capturescope.common.logging import level_from_name, setup_logger
from capturescope.config.settings import get_settings
from capturescope.corpus import load_corpus
from capturescope.exceptions import CaptureScopeError
from capturescope.scan import ScanFailure


console = Console(markup=True, emoji=False)
err_console = Console(stderr=True, markup=True, emoji=False)

CAPTURESCOPE_PREFIX = "[bold magenta]capturescope[/bold magenta]"


@Parameter(name="*")
@dataclass
class CorpusOptions:
    """Options shared by every command that reads the corpus."""

    refresh: bool = False
    """Ignore the snapshot and rescan the extension registry."""

    verbose: bool = False
    """Log debug output to stderr."""


def open_corpus(options: CorpusOptions | None = None) -> CorpusAggregator:
    """Configure logging, load the corpus and wrap it in an aggregator.

    Scan failures are reported on stderr; they never stop the command.
    """
    options = options or CorpusOptions()
    settings = get_settings()
    level = logging.DEBUG if options.verbose else level_from_name(settings.log_level)
    _ = setup_logger("capturescope", level=level)
    report = load_corpus(settings, refresh=options.refresh)
    if report.failures:
        print_failures(report.failures)
    return CorpusAggregator(report.extensions)


def print_failures(failures: Sequence[ScanFailure]) -> None:
    """Summarize skipped extensions on stderr."""
    table = Table(
        show_header=True,
        header_style="bold yellow",
        title=f"{len(failures)} extensions skipped",
    )
    table.add_column("Extension", style="cyan", no_wrap=True)
    table.add_column("Error", style="red")
    table.add_column("Details", style="white")
    for failure in failures:
        table.add_row(failure.extension_id, failure.error_type, failure.message)
    err_console.print(table)


def print_lines(lines: Iterable[object]) -> None:
    """Print plain lines to stdout, without markup or highlighting."""
    for line in lines:
        console.print(str(line), markup=False, highlight=False, soft_wrap=True)


def print_error(error: CaptureScopeError) -> None:
    """Print an error and its suggestions to stderr."""
    err_console.print(f"{CAPTURESCOPE_PREFIX} [bold red]Error:[/bold red] {error}", highlight=False)
    if error.suggestions:
        err_console.print(f"{CAPTURESCOPE_PREFIX} [yellow]Suggestions:[/yellow]")
        for suggestion in error.suggestions:
            err_console.print(f"  • {suggestion}", highlight=False)


__all__ = (
    "CAPTURESCOPE_PREFIX",
    "CorpusOptions",
    "console",
    "err_console",
    "open_corpus",
    "print_error",
    "print_failures",
    "print_lines",
)
