# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""capturescope: tree-sitter capture usage and theme support across the Zed extension ecosystem."""

from capturescope._version import __version__
from capturescope.exceptions import (
    CaptureScopeError,
    ConfigurationError,
    CorpusSourceError,
    ExtensionError,
    ExtensionNotFoundError,
    ManifestStructureError,
    MissingManifestError,
    SnapshotError,
    UnclassifiableExtensionError,
)


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
    "__version__",
)
