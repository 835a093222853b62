# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0

"""Tests for manifest loading and the registry index."""

import json

import pytest

from capturescope.core.manifest import (
    JsonManifest,
    ManifestDialect,
    RegistryIndex,
    TomlManifest,
    load_manifest,
)
from capturescope.exceptions import ManifestStructureError, MissingManifestError

from ..conftest import EXTENSION_TOML, write_tree


pytestmark = [pytest.mark.unit]


class TestLoadManifest:
    """Tests for `load_manifest`."""

    def test_toml_manifest(self, tmp_path):
        """A TOML manifest parses with its sub-records."""
        write_tree(
            tmp_path,
            {
                "extension.toml": EXTENSION_TOML.format(name="zig")
                + '\n[grammars.zig]\nrepository = "https://github.com/x/tree-sitter-zig"\n'
                + 'commit = "abc123"\n\n[language_servers.zls]\nname = "zls"\nlanguage = "Zig"\n'
            },
        )

        manifest = load_manifest(tmp_path, "zig")

        assert isinstance(manifest, TomlManifest)
        assert manifest.manifest_dialect is ManifestDialect.TOML
        assert manifest.grammars["zig"].commit == "abc123"
        assert manifest.language_servers["zls"].language == "Zig"
        assert manifest.declares_languages

    def test_json_manifest(self, tmp_path):
        """A legacy JSON manifest parses its plain maps."""
        write_tree(
            tmp_path,
            {
                "extension.json": {
                    "name": "Nord",
                    "version": "0.0.1",
                    "authors": ["Someone"],
                    "repository": "https://github.com/x/nord",
                    "themes": {"Nord": "themes/nord.json"},
                }
            },
        )

        manifest = load_manifest(tmp_path, "nord")

        assert isinstance(manifest, JsonManifest)
        assert manifest.manifest_dialect is ManifestDialect.JSON
        assert manifest.themes == {"Nord": "themes/nord.json"}

    def test_toml_wins_over_json(self, tmp_path):
        """When both manifests exist only the TOML one is read."""
        write_tree(
            tmp_path,
            {
                "extension.toml": EXTENSION_TOML.format(name="both"),
                "extension.json": "this would not parse",
            },
        )

        assert isinstance(load_manifest(tmp_path, "both"), TomlManifest)

    def test_missing_manifest(self, tmp_path):
        """No manifest at all is a missing manifest."""
        with pytest.raises(MissingManifestError) as exc_info:
            load_manifest(tmp_path, "ghost")

        assert exc_info.value.extension_id == "ghost"

    @pytest.mark.parametrize(
        ("file_name", "text"),
        [
            ("extension.toml", "name = [unclosed"),
            ("extension.toml", 'name = "no version or authors"'),
            ("extension.json", '{"name": "Nord"'),
            ("extension.json", json.dumps({"name": "Nord", "version": 1})),
        ],
    )
    def test_malformed_manifest(self, tmp_path, file_name, text):
        """A manifest that doesn't match its dialect is a structure error."""
        write_tree(tmp_path, {file_name: text})

        with pytest.raises(ManifestStructureError) as exc_info:
            load_manifest(tmp_path, "bad")

        assert exc_info.value.details["path"].endswith(file_name)


class TestRegistryIndex:
    """Tests for reading `extensions.toml`."""

    def test_entries_are_sorted(self, tmp_path):
        """Entries come back sorted by id, with optional paths."""
        write_tree(
            tmp_path,
            {
                "extensions.toml": (
                    '[zebra]\nsubmodule = "extensions/zebra"\nversion = "1.0.0"\n\n'
                    '[alpha]\nsubmodule = "extensions/alpha"\npath = "ext"\nversion = "0.1.0"\n'
                )
            },
        )

        index = RegistryIndex.from_file(tmp_path / "extensions.toml")

        assert len(index) == 2
        assert [extension_id for extension_id, _ in index.items()] == ["alpha", "zebra"]
        assert index.root["alpha"].path == "ext"
        assert index.root["zebra"].path is None
