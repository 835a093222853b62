# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Unified exception hierarchy for capturescope.

All capturescope exceptions inherit from CaptureScopeError. Per-extension failures
(`ExtensionError` and its subclasses) are collected during a scan instead of aborting it.

Theme and highlight-query content failures are deliberately absent here: they degrade to
`Invalid` themes or empty capture lists and are only logged.
"""

from __future__ import annotations

from typing import Any


class CaptureScopeError(Exception):
    """Base exception for all capturescope errors.

    Provides structured error information including details and suggestions
    for resolution.
    """

    def __init__(
        self,
        message: str,
        *,
        details: dict[str, Any] | None = None,
        suggestions: list[str] | None = None,
    ) -> None:
        """Initialize capturescope error.

        Args:
            message: Human-readable error message
            details: Additional context about the error
            suggestions: Actionable suggestions for resolving the error
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.suggestions = suggestions or []

    def __str__(self) -> str:
        """Return descriptive error message with context details."""
        parts = [self.message]
        if self.details:
            detail_parts = [
                f"{key.replace('_', ' ')}: {self.details[key]}"
                for key in ("extension_id", "path", "submodule", "url")
                if key in self.details
            ]
            if detail_parts:
                parts.append(f"({', '.join(detail_parts)})")
        return " ".join(parts)


class ConfigurationError(CaptureScopeError):
    """Configuration and settings errors.

    Raised when settings are invalid or point at unusable locations.
    """


class CorpusSourceError(CaptureScopeError):
    """Corpus source errors.

    Raised when the extension registry cannot be cloned or its index cannot be read.
    """


class SnapshotError(CaptureScopeError):
    """Snapshot cache errors.

    Raised when a corpus snapshot is requested explicitly and cannot be read.
    """


class ExtensionError(CaptureScopeError):
    """Base class for errors that exclude a single extension from the corpus."""

    def __init__(
        self,
        extension_id: str,
        message: str | None = None,
        *,
        details: dict[str, Any] | None = None,
        suggestions: list[str] | None = None,
    ) -> None:
        """Initialize the extension error.

        Args:
            extension_id: The id of the offending extension
            message: Human-readable error message
        """
        super().__init__(
            message or f"Extension '{extension_id}' could not be loaded",
            details={"extension_id": extension_id, **(details or {})},
            suggestions=suggestions,
        )
        self.extension_id = extension_id


class MissingManifestError(ExtensionError):
    """Neither `extension.toml` nor `extension.json` exists for an extension."""

    def __init__(self, extension_id: str, *, details: dict[str, Any] | None = None) -> None:
        """Initialize MissingManifestError."""
        super().__init__(
            extension_id,
            f"No extension manifest found for '{extension_id}'",
            details=details,
            suggestions=["Check that the extension's submodule is checked out."],
        )


class ManifestStructureError(ExtensionError):
    """A manifest or language configuration exists but does not match its expected structure."""


class UnclassifiableExtensionError(ExtensionError):
    """No directory or manifest evidence yields a kind for the extension."""

    def __init__(self, extension_id: str, *, details: dict[str, Any] | None = None) -> None:
        """Initialize UnclassifiableExtensionError."""
        super().__init__(
            extension_id,
            f"Could not determine what kind of extension '{extension_id}' is",
            details=details,
        )


class ExtensionNotFoundError(CaptureScopeError):
    """Raised when looking up an extension id that is not in the corpus."""

    def __init__(self, extension_id: str) -> None:
        """Initialize ExtensionNotFoundError."""
        super().__init__(
            f"Extension '{extension_id}' not found",
            details={"extension_id": extension_id},
            suggestions=["Use `capturescope find` to list known extension ids."],
        )
        self.extension_id = extension_id


__all__ = (
    "CaptureScopeError",
    "ConfigurationError",
    "CorpusSourceError",
    "ExtensionError",
    "ExtensionNotFoundError",
    "ManifestStructureError",
    "MissingManifestError",
    "SnapshotError",
    "UnclassifiableExtensionError",
)
