# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0

"""capturescope CLI entrypoint.

Commands are registered and lazy-loaded from here.
"""

from __future__ import annotations

import sys

from cyclopts import App

from capturescope import __version__
from capturescope.cli.utils import CAPTURESCOPE_PREFIX, console, err_console, print_error
from capturescope.exceptions import CaptureScopeError


app = App(
    "capturescope",
    help="capturescope: tree-sitter capture statistics across the Zed extension ecosystem.",
    version=__version__,
    console=console,
)
app.command("capturescope.cli.commands.show:app", name="show")
app.command("capturescope.cli.commands.find:app", name="find")
app.command("capturescope.cli.commands.analyze:app", name="analyze")


def main() -> None:
    """Main CLI entry point."""
    try:
        app()
    except KeyboardInterrupt:
        err_console.print(f"\n{CAPTURESCOPE_PREFIX} [yellow]Interrupted.[/yellow]")
        sys.exit(130)
    except CaptureScopeError as e:
        print_error(e)
        sys.exit(1)


if __name__ == "__main__":
    main()

__all__ = ("app", "main")
