# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Analyze commands: capture rankings and capture lookups."""

from __future__ import annotations

from typing import Annotated

import cyclopts

from cyclopts import App, validators

from capturescope.aggregator import SortOrder
from capturescope.cli.utils import CorpusOptions, console, open_corpus, print_lines


app = App("analyze", help="Rank and look up captures across the corpus.", console=console)

Limit = Annotated[
    int,
    cyclopts.Parameter(
        name=["--limit", "-n"],
        help="Number of entries to print; 0 prints all",
        validator=validators.Number(gte=0),
    ),
]
Count = Annotated[
    bool, cyclopts.Parameter(help="Print the number of matches instead of the ids")
]

DEFAULT_LIMIT = 10


@app.command
def captures_by_usage(
    order: SortOrder, /, *, limit: Limit = DEFAULT_LIMIT, options: CorpusOptions | None = None
) -> None:
    """Rank captures by how many language extensions use them."""
    print_lines(open_corpus(options).captures_by_usage(order, limit))


@app.command
def captures_by_theme_support(
    order: SortOrder, /, *, limit: Limit = DEFAULT_LIMIT, options: CorpusOptions | None = None
) -> None:
    """Rank captures by how many theme extensions style them."""
    print_lines(open_corpus(options).captures_by_theme_support(order, limit))


@app.command
def themes_supporting_capture(
    capture: str, /, *, count: Count = False, options: CorpusOptions | None = None
) -> None:
    """List the theme extensions that style a capture."""
    theme_ids = open_corpus(options).themes_supporting_capture(capture)
    print_lines([len(theme_ids)] if count else theme_ids)


@app.command
def languages_using_capture(
    capture: str, /, *, count: Count = False, options: CorpusOptions | None = None
) -> None:
    """List the language extensions whose highlight queries use a capture."""
    language_ids = open_corpus(options).languages_using_capture(capture)
    print_lines([len(language_ids)] if count else language_ids)


@app.command
def languages_by_theme_support(
    order: SortOrder, /, *, limit: Limit = DEFAULT_LIMIT, options: CorpusOptions | None = None
) -> None:
    """Rank language extensions by how well themes cover their captures.

    The score is `7 * depth // captures + 3 * breadth`, where depth sums the themes supporting
    each capture and breadth counts the themes supporting any of them.
    """
    print_lines(open_corpus(options).languages_by_theme_support(order, limit))


@app.command
def themes_by_capture_support(
    order: SortOrder, /, *, limit: Limit = DEFAULT_LIMIT, options: CorpusOptions | None = None
) -> None:
    """Rank theme extensions by how many captures in use they style."""
    print_lines(open_corpus(options).themes_by_capture_support(order, limit))


@app.command
def theme_schemas(*, options: CorpusOptions | None = None) -> None:
    """Count theme files per schema version, including files matching no schema."""
    counts = open_corpus(options).theme_schema_counts()
    print_lines(f"{version}: {count}" for version, count in counts.items())


__all__ = (
    "app",
    "captures_by_theme_support",
    "captures_by_usage",
    "languages_by_theme_support",
    "languages_using_capture",
    "theme_schemas",
    "themes_by_capture_support",
    "themes_supporting_capture",
)
