# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Theme family schemas and the schema resolver.

Theme files are hand-authored JSON documents, usually tagged with a `$schema` URI naming the
version of the theme schema they follow. Two versions exist in the wild:

- v1: `https://zed.dev/schema/themes/v0.1.0.json`
- v2: `https://zed.dev/schema/themes/v0.2.0.json`

`resolve_theme` turns the text of one file into exactly one `Theme` variant:

| evidence                                    | result                      |
|---------------------------------------------|-----------------------------|
| `$schema` is v1, document fits v1           | `ThemeV1(content=...)`      |
| `$schema` is v1, document doesn't fit v1    | `ThemeV1(content=None)`     |
| `$schema` is v2 (either way)                | `ThemeV2(...)`, symmetric   |
| no/unknown `$schema`, document fits v1      | `ThemeV1(content=...)`      |
| no/unknown `$schema`, fits v2 but not v1    | `ThemeV2(content=...)`      |
| nothing fits                                | `InvalidTheme()`            |

A document without a tag that fits *both* versions resolves to v1: blind parsing always tries
the schemas in `THEME_SCHEMAS` order, and v1 comes first. That's policy, not an accident.

Adding a schema version means adding a content model, a variant, and a `ThemeSchema` row.
"""

from __future__ import annotations

import logging

from typing import Annotated, Any, Literal, NamedTuple

import json5

from pydantic import ConfigDict, Field, ValidationError

from capturescope.core.types import FROZEN_BASEDMODEL_CONFIG, BaseEnum, FrozenModel


logger = logging.getLogger(__name__)

V1_SCHEMA_URI = "https://zed.dev/schema/themes/v0.1.0.json"
V2_SCHEMA_URI = "https://zed.dev/schema/themes/v0.2.0.json"


class ThemeSchemaVersion(BaseEnum):
    """The schema version a theme file was resolved to."""

    V1 = "v1"
    V2 = "v2"
    OTHER = "other"


# ===========================================================================
# *                           v1 theme schema
# ===========================================================================

type FontStyle = Literal["normal", "italic", "oblique"]
type Appearance = Literal["light", "dark"]
type FontWeightV1 = Literal[100, 200, 300, 400, 500, 600, 700, 800, 900]


class HighlightStyleV1(FrozenModel):
    """Style of one syntax capture in a v1 theme."""

    color: str | None = None
    background_color: str | None = None
    font_style: FontStyle | None = None
    font_weight: FontWeightV1 | None = None


class ThemeStyleV1(FrozenModel):
    """The `style` table of a v1 theme. Color keys beyond `syntax` are kept as extras."""

    model_config = FROZEN_BASEDMODEL_CONFIG | ConfigDict(extra="allow")

    syntax: dict[str, HighlightStyleV1] = Field(default_factory=dict)


class ThemeContentV1(FrozenModel):
    """One theme (light or dark) inside a v1 family."""

    name: str
    appearance: Appearance
    style: ThemeStyleV1


class ThemeFamilyV1(FrozenModel):
    """A v1 theme family file."""

    name: str
    author: str
    themes: list[ThemeContentV1]


# ===========================================================================
# *                           v2 theme schema
# ===========================================================================

type BackgroundAppearance = Literal["opaque", "transparent", "blurred"]


class HighlightStyleV2(FrozenModel):
    """Style of one syntax capture in a v2 theme. Font weights are free-form numbers."""

    color: str | None = None
    background_color: str | None = None
    font_style: FontStyle | None = None
    font_weight: Annotated[float, Field(ge=100, le=950)] | None = None


class ThemeStyleV2(FrozenModel):
    """The `style` table of a v2 theme."""

    model_config = FROZEN_BASEDMODEL_CONFIG | ConfigDict(extra="allow")

    background_appearance: Annotated[
        BackgroundAppearance | None, Field(alias="background.appearance")
    ] = None
    syntax: dict[str, HighlightStyleV2] = Field(default_factory=dict)


class ThemeContentV2(FrozenModel):
    """One theme (light or dark) inside a v2 family."""

    name: str
    appearance: Appearance
    style: ThemeStyleV2


class ThemeFamilyV2(FrozenModel):
    """A v2 theme family file."""

    name: str
    author: str
    themes: list[ThemeContentV2]


# ===========================================================================
# *                           Theme variants
# ===========================================================================


class ThemeV1(FrozenModel):
    """A file resolved to the v1 schema. `content` is None when it failed structural parsing."""

    schema_version: Literal["v1"] = "v1"
    content: ThemeFamilyV1 | None = None

    def syntax_captures(self) -> set[str]:
        """Capture names styled by any theme in the family."""
        if self.content is None:
            return set()
        return {capture for theme in self.content.themes for capture in theme.style.syntax}


class ThemeV2(FrozenModel):
    """A file resolved to the v2 schema. `content` is None when it failed structural parsing."""

    schema_version: Literal["v2"] = "v2"
    content: ThemeFamilyV2 | None = None

    def syntax_captures(self) -> set[str]:
        """Capture names styled by any theme in the family."""
        if self.content is None:
            return set()
        return {capture for theme in self.content.themes for capture in theme.style.syntax}


class InvalidTheme(FrozenModel):
    """A file that matched no schema version."""

    schema_version: Literal["invalid"] = "invalid"

    def syntax_captures(self) -> set[str]:
        """Invalid themes support nothing."""
        return set()


Theme = Annotated[ThemeV1 | ThemeV2 | InvalidTheme, Field(discriminator="schema_version")]


def theme_version(theme: ThemeV1 | ThemeV2 | InvalidTheme) -> ThemeSchemaVersion:
    """The schema version bucket of a theme variant."""
    match theme:
        case ThemeV1():
            return ThemeSchemaVersion.V1
        case ThemeV2():
            return ThemeSchemaVersion.V2
        case _:
            return ThemeSchemaVersion.OTHER


# ===========================================================================
# *                           Schema resolver
# ===========================================================================


class ThemeSchema(NamedTuple):
    """A known theme schema: its `$schema` URI, content model, and variant."""

    uri: str
    content_model: type[ThemeFamilyV1] | type[ThemeFamilyV2]
    variant: type[ThemeV1] | type[ThemeV2]


THEME_SCHEMAS: tuple[ThemeSchema, ...] = (
    ThemeSchema(V1_SCHEMA_URI, ThemeFamilyV1, ThemeV1),
    ThemeSchema(V2_SCHEMA_URI, ThemeFamilyV2, ThemeV2),
)
"""Known schemas, in blind-parsing priority order."""


class _SchemaProbe(FrozenModel):
    """The only part of a theme document we read before picking a schema."""

    schema_uri: Annotated[str, Field(alias="$schema")]


def _load_document(text: str) -> Any:
    """Leniently parse JSON text: comments and trailing commas are fine."""
    try:
        return json5.loads(text)
    except ValueError:
        return None


def _probe_schema(document: Any) -> ThemeSchema | None:
    try:
        probe = _SchemaProbe.model_validate(document)
    except ValidationError:
        return None
    return next((schema for schema in THEME_SCHEMAS if schema.uri == probe.schema_uri), None)


def resolve_theme(text: str, *, source: str | None = None) -> ThemeV1 | ThemeV2 | InvalidTheme:
    """Resolve the text of a theme file to a `Theme` variant.

    Args:
        text: The raw file contents.
        source: Where the text came from, only used in log messages.
    """
    source = source or "<theme>"
    document = _load_document(text)
    if (schema := _probe_schema(document)) is not None:
        try:
            content = schema.content_model.model_validate(document)
        except ValidationError as e:
            logger.warning(
                "Theme %s declares %s but doesn't match it (%d errors)",
                source,
                schema.uri,
                e.error_count(),
            )
            return schema.variant(content=None)
        return schema.variant(content=content)
    for schema in THEME_SCHEMAS:
        try:
            content = schema.content_model.model_validate(document)
        except ValidationError:
            continue
        logger.debug("Theme %s has no known $schema, parsed as %s", source, schema.uri)
        return schema.variant(content=content)
    logger.warning("Theme %s matches no known theme schema", source)
    return InvalidTheme()


__all__ = (
    "THEME_SCHEMAS",
    "V1_SCHEMA_URI",
    "V2_SCHEMA_URI",
    "InvalidTheme",
    "Theme",
    "ThemeFamilyV1",
    "ThemeFamilyV2",
    "ThemeSchema",
    "ThemeSchemaVersion",
    "ThemeV1",
    "ThemeV2",
    "resolve_theme",
    "theme_version",
)
