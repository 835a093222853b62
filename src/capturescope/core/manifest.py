# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Extension manifest models.

Extensions describe themselves with one of two manifest dialects:

- `extension.toml`: the current, declarative dialect. Besides identity fields it can declare
  grammars, language servers, slash commands and context servers as tables.
- `extension.json`: the legacy dialect. Themes, languages and grammars are plain `name -> path` maps.

Exactly one dialect is parsed per extension; `extension.toml` wins when both exist. The two
models form a closed union (`ExtensionMetadata`) tagged by their `dialect` field.
"""

from __future__ import annotations

import logging
import tomllib

from pathlib import Path
from typing import Annotated, Literal

from pydantic import Field, RootModel, ValidationError

from capturescope.core.types import FROZEN_BASEDMODEL_CONFIG, BaseEnum, FrozenModel
from capturescope.exceptions import ManifestStructureError, MissingManifestError


logger = logging.getLogger(__name__)

TOML_MANIFEST_NAME = "extension.toml"
JSON_MANIFEST_NAME = "extension.json"


class ManifestDialect(BaseEnum):
    """The manifest file format an extension was described with."""

    TOML = "toml"
    JSON = "json"

    @property
    def file_name(self) -> str:
        """The manifest file name for this dialect."""
        return TOML_MANIFEST_NAME if self is ManifestDialect.TOML else JSON_MANIFEST_NAME


# ===========================================================================
# *                    Sub-records of `extension.toml`
# ===========================================================================


class GrammarEntry(FrozenModel):
    """A tree-sitter grammar an extension depends on."""

    repository: str
    commit: str | None = None
    rev: str | None = None
    path: str | None = None


class LanguageServerEntry(FrozenModel):
    """A language server an extension provides."""

    name: str | None = None
    language: str | None = None
    languages: list[str] | None = None


class SlashCommandEntry(FrozenModel):
    """An assistant slash command an extension provides."""

    description: str | None = None
    requires_argument: bool | None = None


class ContextServerEntry(FrozenModel):
    """A context server an extension provides."""

    name: str | None = None


# ===========================================================================
# *                         Manifest dialects
# ===========================================================================


class TomlManifest(FrozenModel):
    """The current `extension.toml` manifest."""

    dialect: Literal["toml"] = "toml"
    id: str | None = None
    name: str
    description: str | None = None
    version: str
    schema_version: int | None = None
    authors: list[str]
    repository: str
    grammars: dict[str, GrammarEntry] | None = None
    language_servers: dict[str, LanguageServerEntry] | None = None
    slash_commands: dict[str, SlashCommandEntry] | None = None
    context_servers: dict[str, ContextServerEntry] | None = None

    @property
    def manifest_dialect(self) -> ManifestDialect:
        """The dialect as an enum member."""
        return ManifestDialect.TOML

    @property
    def declares_languages(self) -> bool:
        """Whether the manifest declares grammars or language servers."""
        return bool(self.grammars) or bool(self.language_servers)

    @property
    def declares_themes(self) -> bool:
        """TOML manifests never list themes; they are discovered on disk."""
        return False

    @property
    def declares_slash_commands(self) -> bool:
        """Whether the manifest declares slash commands."""
        return bool(self.slash_commands)

    @property
    def declares_context_servers(self) -> bool:
        """Whether the manifest declares context servers."""
        return bool(self.context_servers)

    @classmethod
    def from_text(cls, text: str) -> TomlManifest:
        """Parse manifest text. Raises `ValueError` for malformed TOML or structure."""
        return cls.model_validate(tomllib.loads(text))


class JsonManifest(FrozenModel):
    """The legacy `extension.json` manifest."""

    dialect: Literal["json"] = "json"
    name: str
    description: str | None = None
    version: str
    authors: list[str]
    repository: str
    themes: dict[str, str] | None = None
    languages: dict[str, str] | None = None
    grammars: dict[str, str] | None = None

    @property
    def manifest_dialect(self) -> ManifestDialect:
        """The dialect as an enum member."""
        return ManifestDialect.JSON

    @property
    def declares_languages(self) -> bool:
        """Whether the manifest lists languages or grammars."""
        return bool(self.languages) or bool(self.grammars)

    @property
    def declares_themes(self) -> bool:
        """Whether the manifest lists themes."""
        return bool(self.themes)

    @property
    def declares_slash_commands(self) -> bool:
        """The legacy dialect predates slash commands."""
        return False

    @property
    def declares_context_servers(self) -> bool:
        """The legacy dialect predates context servers."""
        return False

    @classmethod
    def from_text(cls, text: str) -> JsonManifest:
        """Parse manifest text. Raises `ValueError` for malformed JSON or structure."""
        return cls.model_validate_json(text)


ExtensionMetadata = Annotated[TomlManifest | JsonManifest, Field(discriminator="dialect")]


def load_manifest(extension_dir: Path, extension_id: str) -> TomlManifest | JsonManifest:
    """Load the manifest of the extension in `extension_dir`.

    Raises:
        MissingManifestError: neither manifest file exists.
        ManifestStructureError: the manifest exists but can't be read or parsed.
    """
    for dialect, model in (
        (ManifestDialect.TOML, TomlManifest),
        (ManifestDialect.JSON, JsonManifest),
    ):
        path = extension_dir / dialect.file_name
        if not path.is_file():
            continue
        logger.debug("Reading %s for '%s'", dialect.file_name, extension_id)
        try:
            return model.from_text(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            # pydantic's ValidationError and tomllib's TOMLDecodeError are both ValueErrors
            raise ManifestStructureError(
                extension_id,
                f"Invalid {dialect.file_name} for '{extension_id}': {_first_line(e)}",
                details={"path": str(path)},
            ) from e
    raise MissingManifestError(extension_id, details={"path": str(extension_dir)})


def _first_line(error: Exception) -> str:
    if isinstance(error, ValidationError):
        return f"{error.error_count()} validation error(s)"
    return str(error).splitlines()[0] if str(error) else type(error).__name__


# ===========================================================================
# *                      Registry index (`extensions.toml`)
# ===========================================================================


class RegistryEntry(FrozenModel):
    """An extension's entry in the registry's `extensions.toml`."""

    submodule: str
    path: str | None = None
    version: str


class RegistryIndex(RootModel[dict[str, RegistryEntry]]):
    """The registry index: extension id to registry entry."""

    model_config = FROZEN_BASEDMODEL_CONFIG

    @classmethod
    def from_file(cls, path: Path) -> RegistryIndex:
        """Read the index from an `extensions.toml` file."""
        return cls.model_validate(tomllib.loads(path.read_text(encoding="utf-8")))

    def items(self) -> list[tuple[str, RegistryEntry]]:
        """Entries sorted by extension id."""
        return sorted(self.root.items())

    def __len__(self) -> int:
        """Number of extensions in the index."""
        return len(self.root)


__all__ = (
    "JSON_MANIFEST_NAME",
    "TOML_MANIFEST_NAME",
    "ContextServerEntry",
    "ExtensionMetadata",
    "GrammarEntry",
    "JsonManifest",
    "LanguageServerEntry",
    "ManifestDialect",
    "RegistryEntry",
    "RegistryIndex",
    "SlashCommandEntry",
    "TomlManifest",
    "load_manifest",
)
