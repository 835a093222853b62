# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Find command for filtering the corpus."""

from __future__ import annotations

from typing import Annotated

import cyclopts

from cyclopts import App

from capturescope.aggregator import FindCriteria
from capturescope.cli.utils import CorpusOptions, console, open_corpus, print_lines
from capturescope.core.extension import ExtensionKind
from capturescope.core.manifest import ManifestDialect
from capturescope.themes import ThemeSchemaVersion


app = App("find", help="Find extensions matching every given filter.", console=console)


@app.default
def find(
    *,
    manifest: Annotated[
        ManifestDialect | None, cyclopts.Parameter(help="Manifest dialect: json or toml")
    ] = None,
    kind: Annotated[ExtensionKind | None, cyclopts.Parameter(name=["--kind", "-k"])] = None,
    git_provider: Annotated[
        str | None, cyclopts.Parameter(help="Git host, e.g. github.com")
    ] = None,
    theme_schema: Annotated[
        ThemeSchemaVersion | None,
        cyclopts.Parameter(help="Theme extensions with at least one theme of this schema"),
    ] = None,
    builtin: bool | None = None,
    count: Annotated[bool, cyclopts.Parameter(help="Print the number of matches only")] = False,
    options: CorpusOptions | None = None,
) -> None:
    """List the ids of matching extensions, in corpus order."""
    corpus = open_corpus(options)
    criteria = FindCriteria(
        manifest=manifest,
        kind=kind,
        git_provider=git_provider,
        theme_schema=theme_schema,
        builtin=builtin,
    )
    if count:
        print_lines([corpus.count(criteria)])
        return
    print_lines(extension.id for extension in corpus.find(criteria))


__all__ = ("app", "find")
