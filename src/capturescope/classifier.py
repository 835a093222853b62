# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Decide what kind of extension a directory holds.

Directory evidence beats manifest evidence, and the checks run in a fixed order:

1. a `languages/` directory: `LANGUAGE`
2. a `themes/` directory: `THEME`
3. manifest entries, in order: grammars or language servers (`LANGUAGE`), themes (`THEME`),
   slash commands (`SLASH_COMMAND`), context servers (`CONTEXT_SERVER`)

Anything else raises `UnclassifiableExtensionError`. Classification only picks the tag;
scanning the directories is the scanner's job.
"""

from __future__ import annotations

import logging

from pathlib import Path
from typing import Annotated

from pydantic import Field

from capturescope.core.extension import ExtensionKind
from capturescope.core.manifest import JsonManifest, TomlManifest
from capturescope.core.types import FrozenModel
from capturescope.exceptions import UnclassifiableExtensionError


logger = logging.getLogger(__name__)

LANGUAGES_DIR = "languages"
THEMES_DIR = "themes"


class ClassificationEvidence(FrozenModel):
    """What the file system says about an extension."""

    extension_id: str
    has_languages_dir: Annotated[
        bool, Field(description="""Whether the extension has a `languages/` directory""")
    ] = False
    has_themes_dir: Annotated[
        bool, Field(description="""Whether the extension has a `themes/` directory""")
    ] = False

    @classmethod
    def from_directory(cls, extension_id: str, path: Path) -> ClassificationEvidence:
        """Collect evidence from an extension's directory."""
        return cls(
            extension_id=extension_id,
            has_languages_dir=(path / LANGUAGES_DIR).is_dir(),
            has_themes_dir=(path / THEMES_DIR).is_dir(),
        )


def classify_extension(
    evidence: ClassificationEvidence, manifest: TomlManifest | JsonManifest
) -> ExtensionKind:
    """Return the kind of the extension described by `evidence` and `manifest`.

    Raises:
        UnclassifiableExtensionError: nothing identifies the extension's kind.
    """
    if evidence.has_languages_dir:
        return ExtensionKind.LANGUAGE
    if evidence.has_themes_dir:
        return ExtensionKind.THEME
    for declared, kind in (
        (manifest.declares_languages, ExtensionKind.LANGUAGE),
        (manifest.declares_themes, ExtensionKind.THEME),
        (manifest.declares_slash_commands, ExtensionKind.SLASH_COMMAND),
        (manifest.declares_context_servers, ExtensionKind.CONTEXT_SERVER),
    ):
        if declared:
            logger.debug(
                "Classified '%s' as %s from its %s manifest",
                evidence.extension_id,
                kind,
                manifest.manifest_dialect,
            )
            return kind
    raise UnclassifiableExtensionError(evidence.extension_id)


__all__ = ("LANGUAGES_DIR", "THEMES_DIR", "ClassificationEvidence", "classify_extension")
