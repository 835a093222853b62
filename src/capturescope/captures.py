# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Extract capture names from tree-sitter highlight queries.

Highlight queries are themselves parsed with tree-sitter, using the query-language grammar
(`tree-sitter-query`). Every `@name` in the query text is a `capture` node whose `identifier`
child holds the name, e.g. `keyword.control` for `@keyword.control`.

Rules:
- names are returned in document order, repeats included;
- names starting with `_` are private to the query (predicate helpers) and are dropped;
- query text that doesn't parse cleanly yields no captures rather than an error;
- a language without a highlights query yields `None`, so callers can tell "no query" from
  "a query with zero captures" if they need to. Aggregation treats both as empty.
"""

from __future__ import annotations

import logging

from collections.abc import Iterator
from functools import cached_property
from typing import TYPE_CHECKING

import tree_sitter
import tree_sitter_query

from capturescope.core.extension import QueryKind


if TYPE_CHECKING:
    from capturescope.core.extension import Language, LanguageExtension


logger = logging.getLogger(__name__)

PRIVATE_CAPTURE_PREFIX = "_"


class CaptureExtractor:
    """Parses highlight queries and pulls out the capture names they declare.

    The parser is created on first use and reused for every query.
    """

    @cached_property
    def language(self) -> tree_sitter.Language:
        """The tree-sitter grammar for query files."""
        return tree_sitter.Language(tree_sitter_query.language())

    @cached_property
    def parser(self) -> tree_sitter.Parser:
        """A parser bound to the query grammar."""
        return tree_sitter.Parser(self.language)

    def extract(self, query_text: str, *, source: str | None = None) -> list[str]:
        """Return the public capture names declared in `query_text`, in order.

        Args:
            query_text: Raw highlight-query source.
            source: Where the text came from, only used in log messages.
        """
        tree = self.parser.parse(query_text.encode("utf-8"))
        if tree.root_node.has_error:
            logger.warning("Highlight query %s doesn't parse; ignoring it", source or "<query>")
            return []
        return [
            name
            for name in _capture_names(tree.root_node)
            if not name.startswith(PRIVATE_CAPTURE_PREFIX)
        ]

    def extract_language(self, language: Language) -> list[str] | None:
        """Captures of one language definition, or None if it has no highlights query."""
        if (query_text := language.query(QueryKind.HIGHLIGHTS)) is None:
            return None
        return self.extract(query_text, source=f"for {language.config.name}")

    def extract_extension(self, extension: LanguageExtension) -> list[str]:
        """Captures of every language definition in an extension, concatenated in order."""
        return [
            capture
            for language in extension.languages
            for capture in (self.extract_language(language) or ())
        ]


def _capture_names(node: tree_sitter.Node) -> Iterator[str]:
    """Yield capture names below `node` in document order."""
    if node.type == "capture":
        if (name := _capture_identifier(node)) is not None:
            yield name
        return
    for child in node.named_children:
        yield from _capture_names(child)


def _capture_identifier(node: tree_sitter.Node) -> str | None:
    identifier = node.child_by_field_name("name") or next(
        (child for child in node.named_children if child.type == "identifier"), None
    )
    text = (identifier or node).text
    if not text:
        return None
    return text.decode("utf-8").removeprefix("@") or None


__all__ = ("PRIVATE_CAPTURE_PREFIX", "CaptureExtractor")
