# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0

"""Corpus snapshot save/load.

A snapshot is a JSON array of extensions. Snapshots may be edited by hand, so reading accepts
JSON5 (comments, trailing commas) before validating against the extension models.
"""

from __future__ import annotations

import logging

from collections.abc import Sequence
from functools import cached_property
from pathlib import Path

import json5

from pydantic import TypeAdapter

from capturescope.core.extension import Extension
from capturescope.exceptions import SnapshotError


logger = logging.getLogger(__name__)


class SnapshotStore:
    """Manages corpus snapshot save/load operations."""

    def __init__(self, path: Path) -> None:
        """Initialize the store.

        Args:
            path: The snapshot file.
        """
        self.path = path

    @cached_property
    def _adapter(self) -> TypeAdapter[list[Extension]]:
        return TypeAdapter(list[Extension])

    def exists(self) -> bool:
        """Whether a snapshot file is present."""
        return self.path.is_file()

    def read(self) -> list[Extension]:
        """Read and validate the snapshot.

        Raises:
            SnapshotError: the file is missing, unreadable or doesn't hold a valid corpus.
        """
        try:
            document = json5.loads(self.path.read_text(encoding="utf-8"))
            return self._adapter.validate_python(document)
        except (OSError, ValueError) as e:
            raise SnapshotError(
                "Corpus snapshot could not be read", details={"path": str(self.path)}
            ) from e

    def load(self) -> list[Extension] | None:
        """Load the snapshot if available.

        Returns:
            The extensions if the file exists and is valid, None otherwise
        """
        if not self.exists():
            logger.debug("No corpus snapshot found at %s", self.path)
            return None
        try:
            extensions = self.read()
        except SnapshotError as e:
            logger.warning("%s; rescanning (%s)", e, e.__cause__)
            return None
        logger.info("Corpus snapshot loaded: %d extensions", len(extensions))
        return extensions

    def save(self, extensions: Sequence[Extension]) -> bool:
        """Save the corpus to disk.

        Returns:
            True if save was successful, False otherwise
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            _ = self.path.write_bytes(self._adapter.dump_json(list(extensions), indent=2))
        except OSError:
            logger.exception("Failed to save corpus snapshot")
            return False
        logger.info("Corpus snapshot saved: %d extensions", len(extensions))
        return True

    def delete(self) -> None:
        """Delete the snapshot, e.g. before a forced rescan."""
        if self.exists():
            try:
                self.path.unlink()
            except OSError as e:
                logger.warning("Failed to delete corpus snapshot: %s", e)


__all__ = ("SnapshotStore",)
