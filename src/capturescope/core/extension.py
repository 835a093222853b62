# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""The extension model: identity, manifest, and the kind-specific payload.

An `Extension` has exactly one manifest variant (`metadata`) and exactly one kind payload
(`content`). The payloads form a closed union tagged by `kind`:

- `ThemeExtension`: the theme families found in the extension's `themes/` directory.
- `LanguageExtension`: the language definitions found in its `languages/` directory.
- `SlashCommandExtension` and `ContextServerExtension`: no scanned content.

Extensions are frozen once built; aggregation derives indices from them and never mutates them.
"""

from __future__ import annotations

from typing import Annotated, Literal, Self

from pydantic import Field, model_validator

from capturescope.core.manifest import ExtensionMetadata
from capturescope.core.types import BaseEnum, FrozenModel
from capturescope.themes import Theme


class ExtensionKind(BaseEnum):
    """What an extension provides. Extensions are never more than one kind."""

    THEME = "theme"
    LANGUAGE = "language"
    SLASH_COMMAND = "slash-command"
    CONTEXT_SERVER = "context-server"


class QueryKind(BaseEnum):
    """The tree-sitter query files a language definition can ship."""

    HIGHLIGHTS = "highlights"
    INJECTIONS = "injections"
    FOLDS = "folds"
    OUTLINE = "outline"
    BRACKETS = "brackets"

    @property
    def file_name(self) -> str:
        """The query file name, e.g. `highlights.scm`."""
        return f"{self.value}.scm"

    @property
    def field_name(self) -> str:
        """The `Language` field holding this query's text."""
        return f"{self.value}_queries"


class LanguageConfig(FrozenModel):
    """A language's `config.toml`."""

    name: str
    grammar: str
    path_suffixes: list[str] | None = None
    line_comments: list[str] | None = None
    tab_size: int | None = None
    hard_tabs: bool | None = None
    first_line_pattern: str | None = None


class Language(FrozenModel):
    """One language definition: its config and raw query texts."""

    config: LanguageConfig
    highlights_queries: str | None = None
    injections_queries: str | None = None
    folds_queries: str | None = None
    outline_queries: str | None = None
    brackets_queries: str | None = None

    def query(self, kind: QueryKind) -> str | None:
        """The raw text of a query file, if the language ships one."""
        return getattr(self, kind.field_name)


class ThemeExtension(FrozenModel):
    """Payload of a theme extension: one `Theme` per theme family file."""

    kind: Literal["theme"] = "theme"
    themes: list[Theme] = Field(default_factory=list)


class LanguageExtension(FrozenModel):
    """Payload of a language extension: one `Language` per language directory."""

    kind: Literal["language"] = "language"
    languages: list[Language] = Field(default_factory=list)


class SlashCommandExtension(FrozenModel):
    """Payload of a slash command extension."""

    kind: Literal["slash-command"] = "slash-command"


class ContextServerExtension(FrozenModel):
    """Payload of a context server extension."""

    kind: Literal["context-server"] = "context-server"


ExtensionContent = Annotated[
    ThemeExtension | LanguageExtension | SlashCommandExtension | ContextServerExtension,
    Field(discriminator="kind"),
]


class Extension(FrozenModel):
    """A single extension in the corpus."""

    id: str
    metadata: ExtensionMetadata
    builtin: bool = False
    git_provider: str | None = None
    content: ExtensionContent

    @model_validator(mode="after")
    def _check_provider(self) -> Self:
        if not self.builtin and not self.git_provider:
            raise ValueError(f"extension '{self.id}' is not builtin but has no git provider")
        return self

    @property
    def kind(self) -> ExtensionKind:
        """The extension's kind."""
        return ExtensionKind(self.content.kind)


__all__ = (
    "ContextServerExtension",
    "Extension",
    "ExtensionContent",
    "ExtensionKind",
    "Language",
    "LanguageConfig",
    "LanguageExtension",
    "QueryKind",
    "SlashCommandExtension",
    "ThemeExtension",
)
