# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0

"""Materialize the corpus: from the snapshot when possible, otherwise by scanning.

This is the only place that touches settings, the registry checkout and the snapshot. The
aggregator receives the finished extension list and never reaches for any of them.
"""

from __future__ import annotations

import logging

from capturescope.cache import SnapshotStore
from capturescope.config.settings import CaptureScopeSettings, get_settings
from capturescope.core.manifest import RegistryIndex
from capturescope.exceptions import ConfigurationError, CorpusSourceError
from capturescope.scan import REGISTRY_INDEX_NAME, ExtensionScanner, RepositorySync, ScanReport


logger = logging.getLogger(__name__)


def scan_corpus(settings: CaptureScopeSettings) -> ScanReport:
    """Sync the registry and scan every extension in it, plus builtins if configured.

    Raises:
        ConfigurationError: `builtin_path` is set but isn't a directory.
        CorpusSourceError: the registry can't be cloned or its index can't be read.
    """
    if settings.builtin_path is not None and not settings.builtin_path.is_dir():
        raise ConfigurationError(
            "The builtin extension path is not a directory",
            details={"path": str(settings.builtin_path)},
            suggestions=["Set CAPTURESCOPE_BUILTIN_PATH to a directory, or unset it."],
        )
    sync = RepositorySync(settings.repository_url, settings.repository_dir)
    root = sync.ensure_cloned()
    index_path = root / REGISTRY_INDEX_NAME
    try:
        index = RegistryIndex.from_file(index_path)
    except (OSError, ValueError) as e:
        raise CorpusSourceError(
            "Failed to read the extension registry index", details={"path": str(index_path)}
        ) from e
    if settings.update_submodules:
        for _, entry in index.items():
            _ = sync.update_submodule(entry.submodule)
    scanner = ExtensionScanner()
    report = scanner.scan_registry(root, index)
    if settings.builtin_path is not None:
        report = report.merge(scanner.scan_builtin(settings.builtin_path))
    return report


def load_corpus(
    settings: CaptureScopeSettings | None = None, *, refresh: bool = False
) -> ScanReport:
    """Return the corpus, using the snapshot unless `refresh` is set or it's missing.

    A freshly scanned corpus is written back as the new snapshot. A report loaded from the
    snapshot has no failures; those are only known at scan time.
    """
    settings = settings or get_settings()
    store = SnapshotStore(settings.snapshot_path)
    if not refresh and (extensions := store.load()) is not None:
        logger.debug("Loaded %d extensions from %s", len(extensions), store.path)
        return ScanReport(extensions=extensions)
    report = scan_corpus(settings)
    _ = store.save(report.extensions)
    return report


__all__ = ("load_corpus", "scan_corpus")
