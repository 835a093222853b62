# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Show command for printing one extension."""

from __future__ import annotations

import sys

from cyclopts import App

from capturescope.cli.utils import CorpusOptions, console, open_corpus, print_error
from capturescope.exceptions import ExtensionNotFoundError


app = App("show", help="Show one extension as JSON.", console=console)


@app.default
def show(extension_id: str, /, *, options: CorpusOptions | None = None) -> None:
    """Print an extension's full record as JSON.

    Parameters
    ----------
    extension_id
        The extension id, as listed in the registry index.
    """
    corpus = open_corpus(options)
    try:
        extension = corpus.get(extension_id)
    except ExtensionNotFoundError as e:
        print_error(e)
        sys.exit(1)
    console.print_json(data=extension.dump_for_display())


__all__ = ("app", "show")
