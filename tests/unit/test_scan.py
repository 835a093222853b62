# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0

"""Tests for scanning extension directories and syncing the registry."""

import subprocess

import pytest

from capturescope.core.extension import ExtensionKind, LanguageExtension, ThemeExtension
from capturescope.exceptions import CorpusSourceError, ManifestStructureError
from capturescope.scan import (
    ExtensionScanner,
    RepositorySync,
    git_provider_from_url,
    read_gitmodules,
)
from capturescope.themes import InvalidTheme, ThemeV1, ThemeV2

from ..conftest import EXTENSION_TOML, v2_family, write_tree


pytestmark = [pytest.mark.unit]


@pytest.fixture
def scanner() -> ExtensionScanner:
    """A scanner."""
    return ExtensionScanner()


class TestGitHelpers:
    """Tests for `.gitmodules` parsing and provider detection."""

    @pytest.mark.parametrize(
        ("url", "provider"),
        [
            ("https://github.com/zed-industries/extensions.git", "github.com"),
            ("https://GitLab.com/group/sub/project", "gitlab.com"),
            ("ssh://git@git.sr.ht/~user/repo", "git.sr.ht"),
            ("git@codeberg.org:user/repo.git", "codeberg.org"),
            ("codeberg.org:user/repo.git", "codeberg.org"),
            ("../relative/submodule", None),
            ("", None),
        ],
    )
    def test_git_provider_from_url(self, url, provider):
        """The provider is the URL host."""
        assert git_provider_from_url(url) == provider

    def test_read_gitmodules(self, tmp_path):
        """Submodule URLs are keyed by both name and path."""
        write_tree(
            tmp_path,
            {
                ".gitmodules": (
                    '[submodule "a"]\n\tpath = extensions/a\n\turl = https://github.com/x/a\n'
                    '[submodule "extensions/b"]\n\turl = git@gitlab.com:x/b.git\n'
                    "\tpath = extensions/b\n\tbranch = main\n"
                    '[submodule "no-url"]\n\tpath = extensions/c\n'
                )
            },
        )

        urls = read_gitmodules(tmp_path / ".gitmodules")

        assert urls == {
            "a": "https://github.com/x/a",
            "extensions/a": "https://github.com/x/a",
            "extensions/b": "git@gitlab.com:x/b.git",
        }


class TestScanRegistry:
    """Tests for `ExtensionScanner.scan_registry`."""

    def test_report(self, scanner, registry_root):
        """Good extensions are built and bad ones are collected, in id order."""
        report = scanner.scan_registry(registry_root)

        assert [e.id for e in report.extensions] == ["monokai", "runner", "rusty"]
        assert [(f.extension_id, f.error_type) for f in report.failures] == [
            ("empty", "MissingManifestError"),
            ("mystery", "UnclassifiableExtensionError"),
        ]

    def test_git_providers(self, scanner, registry_root):
        """Providers come from the submodule URLs."""
        report = scanner.scan_registry(registry_root)

        assert {e.id: e.git_provider for e in report.extensions} == {
            "monokai": "github.com",
            "runner": "codeberg.org",
            "rusty": "gitlab.com",
        }
        assert not any(e.builtin for e in report.extensions)

    def test_theme_extension(self, scanner, registry_root):
        """Every theme file is resolved, in file name order."""
        monokai = next(
            e for e in scanner.scan_registry(registry_root).extensions if e.id == "monokai"
        )

        assert monokai.kind is ExtensionKind.THEME
        assert isinstance(monokai.content, ThemeExtension)
        first, second = monokai.content.themes
        assert isinstance(first, ThemeV1)
        assert first.syntax_captures() == {"keyword", "string"}
        assert isinstance(second, InvalidTheme)

    def test_language_extension_in_subdirectory(self, scanner, registry_root):
        """Extensions may live below their submodule root."""
        rusty = next(e for e in scanner.scan_registry(registry_root).extensions if e.id == "rusty")

        assert isinstance(rusty.content, LanguageExtension)
        (rust,) = rusty.content.languages
        assert rust.config.name == "Rust"
        assert rust.config.path_suffixes == ["rs"]
        assert "@keyword" in rust.highlights_queries
        assert rust.injections_queries is None

    def test_missing_submodule_url(self, scanner, registry_root):
        """An extension without a usable submodule URL is reported, not scanned."""
        (registry_root / ".gitmodules").write_text("")

        report = scanner.scan_registry(registry_root)

        assert report.extensions == []
        assert {f.error_type for f in report.failures} == {"ExtensionError"}


class TestScanExtension:
    """Tests for scanning single extension directories."""

    def test_language_without_config(self, scanner, tmp_path):
        """A language directory without `config.toml` fails the whole extension."""
        write_tree(
            tmp_path,
            {
                "extension.toml": EXTENSION_TOML.format(name="lang"),
                "languages/good/config.toml": 'name = "Good"\ngrammar = "good"\n',
                "languages/bad/highlights.scm": "(identifier) @variable",
            },
        )

        with pytest.raises(ManifestStructureError) as exc_info:
            scanner.scan_extension("lang", tmp_path, git_provider="github.com")

        assert exc_info.value.details["path"].endswith("config.toml")

    def test_languages_are_sorted(self, scanner, tmp_path):
        """Language directories are scanned in name order; stray files are ignored."""
        write_tree(
            tmp_path,
            {
                "extension.toml": EXTENSION_TOML.format(name="lang"),
                "languages/zig/config.toml": 'name = "Zig"\ngrammar = "zig"\n',
                "languages/c/config.toml": 'name = "C"\ngrammar = "c"\nline_comments = ["// "]\n',
                "languages/c/folds.scm": "(block) @fold",
                "languages/README.md": "not a language",
            },
        )

        extension = scanner.scan_extension("lang", tmp_path, git_provider="github.com")

        names = [language.config.name for language in extension.content.languages]
        assert names == ["C", "Zig"]
        assert extension.content.languages[0].folds_queries == "(block) @fold"

    def test_undecodable_theme_is_kept_as_invalid(self, scanner, tmp_path):
        """A theme file that isn't UTF-8 still shows up, as an invalid theme."""
        themes_dir = write_tree(tmp_path / "themes", {"good.json": v2_family(["keyword"])})
        (themes_dir / "bad.json").write_bytes(b'{"name": "\xff\xfe"}')

        bad, good = scanner.scan_themes(themes_dir)

        assert isinstance(bad, InvalidTheme)
        assert isinstance(good, ThemeV2)

    def test_builtin_scan(self, scanner, tmp_path):
        """Builtin extensions are identified by directory name and have no provider."""
        write_tree(
            tmp_path,
            {
                "one/extension.toml": EXTENSION_TOML.format(name="one"),
                "one/themes/one.json": v2_family(["keyword"]),
                "two/extension.json": "{}",
                "notes.txt": "ignored",
            },
        )

        report = scanner.scan_builtin(tmp_path)

        (one,) = report.extensions
        assert (one.id, one.builtin, one.git_provider) == ("one", True, None)
        assert [f.extension_id for f in report.failures] == ["two"]


class TestRepositorySync:
    """Tests for registry cloning and submodule updates."""

    def test_existing_checkout_is_reused(self, tmp_path, monkeypatch):
        """No git call happens when the registry is already checked out."""
        (tmp_path / ".git").mkdir()

        def fail(*args, **kwargs):
            raise AssertionError("git should not run")

        monkeypatch.setattr("capturescope.scan.subprocess.run", fail)

        assert RepositorySync("https://example.com/r.git", tmp_path).ensure_cloned() == tmp_path

    def test_missing_git(self, tmp_path, monkeypatch):
        """Cloning without git installed is a corpus source error."""
        monkeypatch.setattr("capturescope.scan.shutil.which", lambda _: None)

        with pytest.raises(CorpusSourceError):
            RepositorySync("https://example.com/r.git", tmp_path / "registry").ensure_cloned()

    def test_failed_clone(self, tmp_path, monkeypatch):
        """A failing clone is a corpus source error."""
        monkeypatch.setattr("capturescope.scan.shutil.which", lambda _: "/usr/bin/git")

        def run(args, **kwargs):
            raise subprocess.CalledProcessError(128, args, stderr="fatal: repository not found")

        monkeypatch.setattr("capturescope.scan.subprocess.run", run)

        with pytest.raises(CorpusSourceError) as exc_info:
            RepositorySync("https://example.com/r.git", tmp_path / "registry").ensure_cloned()

        assert exc_info.value.details["url"] == "https://example.com/r.git"

    def test_failed_submodule_update_is_not_fatal(self, tmp_path, monkeypatch):
        """A failing submodule update is logged and reported as False."""
        calls = []
        monkeypatch.setattr("capturescope.scan.shutil.which", lambda _: "/usr/bin/git")

        def run(args, **kwargs):
            calls.append(args)
            return subprocess.CompletedProcess(args, 1, stdout="", stderr="no such submodule")

        monkeypatch.setattr("capturescope.scan.subprocess.run", run)

        assert not RepositorySync("u", tmp_path).update_submodule("extensions/x")
        assert calls == [
            [
                "/usr/bin/git",
                "submodule",
                "update",
                "--init",
                "--depth",
                "1",
                "--",
                "extensions/x",
            ]
        ]
