# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Corpus-wide capture statistics.

`CorpusAggregator` is built once from a complete, immutable list of extensions and derives two
indices from it:

- `captures_by_language`: language extension id -> capture names its highlight queries use,
  deduplicated within that extension only (first occurrence wins). The same name showing up
  in several languages is what usage counting measures.
- `captures_by_theme`: theme extension id -> sorted capture names styled by any of its parsed
  theme families. Unparsed and invalid theme files contribute nothing.

Every query is a pure function of those indices. Rankings sort by value, then by key
ascending to break ties, and `limit=0` means "no limit".

Language scores use integer arithmetic:

    depth   = sum over captures c of the number of themes supporting c
    breadth = number of themes supporting at least one of the language's captures
    score   = 7 * depth // len(captures) + 3 * breadth

A language with no captures scores 0 instead of dividing by zero.
"""

from __future__ import annotations

import logging

from collections import Counter
from collections.abc import Iterable, Mapping, Sequence
from functools import cached_property
from types import MappingProxyType
from typing import NamedTuple

from pydantic import NonNegativeInt

from capturescope.captures import CaptureExtractor
from capturescope.core.extension import Extension, ExtensionKind, LanguageExtension, ThemeExtension
from capturescope.core.manifest import ManifestDialect
from capturescope.core.types import BaseEnum, FrozenModel
from capturescope.exceptions import ExtensionNotFoundError
from capturescope.themes import ThemeSchemaVersion, theme_version


logger = logging.getLogger(__name__)

DEPTH_WEIGHT = 7
BREADTH_WEIGHT = 3


class SortOrder(BaseEnum):
    """Ranking order. Descending puts the largest values first."""

    ASC = "asc"
    DESC = "desc"
    ASCENDING = "ascending"
    DESCENDING = "descending"

    @property
    def descending(self) -> bool:
        """Whether larger values come first."""
        return self in (SortOrder.DESC, SortOrder.DESCENDING)


class RankedEntry(NamedTuple):
    """One line of a ranking."""

    key: str
    value: int

    def __str__(self) -> str:
        """Render as `key: value`."""
        return f"{self.key}: {self.value}"


class ThemeSupportScore(FrozenModel):
    """How well themes cover the captures of one language extension."""

    language_id: str
    capture_count: NonNegativeInt
    depth: NonNegativeInt
    breadth: NonNegativeInt
    score: NonNegativeInt


class FindCriteria(FrozenModel):
    """Conjunctive filter over the corpus. Unset criteria match everything."""

    manifest: ManifestDialect | None = None
    kind: ExtensionKind | None = None
    git_provider: str | None = None
    theme_schema: ThemeSchemaVersion | None = None
    builtin: bool | None = None

    def matches(self, extension: Extension) -> bool:
        """Whether `extension` satisfies every set criterion."""
        if self.manifest is not None and extension.metadata.manifest_dialect != self.manifest:
            return False
        if self.kind is not None and extension.kind != self.kind:
            return False
        if self.git_provider is not None and extension.git_provider != self.git_provider:
            return False
        if self.theme_schema is not None:
            if not isinstance(extension.content, ThemeExtension):
                return False
            versions = {theme_version(theme) for theme in extension.content.themes}
            if self.theme_schema not in versions:
                return False
        return self.builtin is None or extension.builtin == self.builtin


def rank(counts: Mapping[str, int], order: SortOrder, limit: int = 0) -> list[RankedEntry]:
    """Sort `counts` by value in `order`, breaking ties by key, and keep the first `limit`.

    A `limit` of zero keeps every entry.

    Raises:
        ValueError: `limit` is negative.
    """
    if limit < 0:
        raise ValueError(f"limit must not be negative, got {limit}")
    entries = sorted(
        (RankedEntry(key, value) for key, value in counts.items()),
        key=lambda entry: (-entry.value if order.descending else entry.value, entry.key),
    )
    return entries[:limit] if limit else entries


def _dedupe(items: Iterable[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(items))


class CorpusAggregator:
    """Lookups, filters and rankings over one corpus snapshot."""

    def __init__(
        self, extensions: Sequence[Extension], *, extractor: CaptureExtractor | None = None
    ) -> None:
        """Build the aggregator. Indices are computed lazily on first use.

        Args:
            extensions: The full corpus. It is not copied or modified.
            extractor: Capture extractor to use for highlight queries.
        """
        self.extensions: tuple[Extension, ...] = tuple(extensions)
        self._extractor = extractor or CaptureExtractor()
        self._by_id: dict[str, Extension] = {}
        for extension in self.extensions:
            if extension.id in self._by_id:
                logger.warning("Duplicate extension id '%s'; keeping the first", extension.id)
                continue
            self._by_id[extension.id] = extension

    # ===========================================================================
    # *                               Indices
    # ===========================================================================

    @cached_property
    def captures_by_language(self) -> MappingProxyType[str, tuple[str, ...]]:
        """Language extension id -> its capture names, deduplicated within the extension."""
        return MappingProxyType({
            extension_id: _dedupe(self._extractor.extract_extension(extension.content))
            for extension_id, extension in self._by_id.items()
            if isinstance(extension.content, LanguageExtension)
        })

    @cached_property
    def captures_by_theme(self) -> MappingProxyType[str, tuple[str, ...]]:
        """Theme extension id -> sorted capture names supported by its parsed theme families."""
        return MappingProxyType({
            extension_id: tuple(
                sorted(
                    {
                        capture
                        for theme in extension.content.themes
                        for capture in theme.syntax_captures()
                    }
                )
            )
            for extension_id, extension in self._by_id.items()
            if isinstance(extension.content, ThemeExtension)
        })

    @cached_property
    def _theme_support(self) -> Counter[str]:
        """Capture name -> number of themes supporting it."""
        return Counter(
            capture for captures in self.captures_by_theme.values() for capture in captures
        )

    @cached_property
    def _language_usage(self) -> Counter[str]:
        """Capture name -> number of languages using it."""
        return Counter(
            capture for captures in self.captures_by_language.values() for capture in captures
        )

    @cached_property
    def used_captures(self) -> frozenset[str]:
        """Captures used by at least one language."""
        return frozenset(self._language_usage)

    # ===========================================================================
    # *                           Corpus lookups
    # ===========================================================================

    def get(self, extension_id: str) -> Extension:
        """Look up one extension by id.

        Raises:
            ExtensionNotFoundError: no extension has that id.
        """
        try:
            return self._by_id[extension_id]
        except KeyError as e:
            raise ExtensionNotFoundError(extension_id) from e

    def find(self, criteria: FindCriteria | None = None) -> list[Extension]:
        """Extensions matching `criteria`, in corpus order."""
        criteria = criteria or FindCriteria()
        return [extension for extension in self.extensions if criteria.matches(extension)]

    def count(self, criteria: FindCriteria | None = None) -> int:
        """Number of extensions matching `criteria`."""
        return len(self.find(criteria))

    # ===========================================================================
    # *                         Capture rankings
    # ===========================================================================

    def captures_by_usage(self, order: SortOrder, limit: int = 0) -> list[RankedEntry]:
        """Captures ranked by the number of distinct languages using them."""
        return rank(self._language_usage, order, limit)

    def captures_by_theme_support(self, order: SortOrder, limit: int = 0) -> list[RankedEntry]:
        """Captures ranked by the number of themes supporting them."""
        return rank(self._theme_support, order, limit)

    # ===========================================================================
    # *                          Reverse lookups
    # ===========================================================================

    def themes_supporting_capture(self, capture: str) -> list[str]:
        """Ids of theme extensions styling `capture`, sorted."""
        return sorted(
            theme_id for theme_id, captures in self.captures_by_theme.items() if capture in captures
        )

    def languages_using_capture(self, capture: str) -> list[str]:
        """Ids of language extensions using `capture`, sorted."""
        return sorted(
            language_id
            for language_id, captures in self.captures_by_language.items()
            if capture in captures
        )

    # ===========================================================================
    # *                         Theme support scores
    # ===========================================================================

    def theme_support(self, language_id: str) -> ThemeSupportScore:
        """Score how well themes support the captures of one language extension.

        Raises:
            ExtensionNotFoundError: `language_id` isn't a language extension in the corpus.
        """
        if (captures := self.captures_by_language.get(language_id)) is None:
            raise ExtensionNotFoundError(language_id)
        if not captures:
            return ThemeSupportScore(
                language_id=language_id, capture_count=0, depth=0, breadth=0, score=0
            )
        depth = sum(self._theme_support[capture] for capture in captures)
        capture_set = frozenset(captures)
        breadth = sum(
            1
            for theme_captures in self.captures_by_theme.values()
            if not capture_set.isdisjoint(theme_captures)
        )
        return ThemeSupportScore(
            language_id=language_id,
            capture_count=len(captures),
            depth=depth,
            breadth=breadth,
            score=DEPTH_WEIGHT * depth // len(captures) + BREADTH_WEIGHT * breadth,
        )

    def languages_by_theme_support(self, order: SortOrder, limit: int = 0) -> list[RankedEntry]:
        """Language extensions ranked by their theme support score."""
        return rank(
            {
                language_id: self.theme_support(language_id).score
                for language_id in self.captures_by_language
            },
            order,
            limit,
        )

    def theme_schema_counts(self) -> dict[ThemeSchemaVersion, int]:
        """Number of theme files per schema version.

        Unparsed v1/v2 files count toward their version; files matching no schema count as `OTHER`.
        """
        counts = Counter(
            theme_version(theme)
            for extension in self._by_id.values()
            if isinstance(extension.content, ThemeExtension)
            for theme in extension.content.themes
        )
        return {version: counts[version] for version in ThemeSchemaVersion}

    def themes_by_capture_support(self, order: SortOrder, limit: int = 0) -> list[RankedEntry]:
        """Theme extensions ranked by how many *used* captures they support.

        A capture is used when at least one language extension uses it.
        """
        used = self.used_captures
        return rank(
            {
                theme_id: sum(1 for capture in captures if capture in used)
                for theme_id, captures in self.captures_by_theme.items()
            },
            order,
            limit,
        )


__all__ = (
    "BREADTH_WEIGHT",
    "DEPTH_WEIGHT",
    "CorpusAggregator",
    "FindCriteria",
    "RankedEntry",
    "SortOrder",
    "ThemeSupportScore",
    "rank",
)
