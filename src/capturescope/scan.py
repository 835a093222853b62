# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0

"""Build the corpus from extension directories on disk.

The extension registry is a git repository with one submodule per extension:

```
<root>/
  extensions.toml        # id -> {submodule, path?, version}
  .gitmodules            # submodule -> url
  extensions/<name>/...  # checked-out submodules
```

`RepositorySync` clones the registry and checks out submodules with the `git` executable.
`ExtensionScanner` turns checked-out directories into `Extension` models. Failures that only
concern one extension (missing or malformed manifest, unclassifiable content) are collected in
the `ScanReport` and never abort the scan.
"""

from __future__ import annotations

# ruff: noqa: S603
import logging
import re
import shutil
import subprocess
import tomllib

from pathlib import Path
from urllib.parse import urlparse

from pydantic import Field, ValidationError

from capturescope.classifier import (
    LANGUAGES_DIR,
    THEMES_DIR,
    ClassificationEvidence,
    classify_extension,
)
from capturescope.core.extension import (
    ContextServerExtension,
    Extension,
    ExtensionKind,
    Language,
    LanguageConfig,
    LanguageExtension,
    QueryKind,
    SlashCommandExtension,
    ThemeExtension,
)
from capturescope.core.manifest import RegistryIndex, load_manifest
from capturescope.core.types import BasedModel, FrozenModel
from capturescope.exceptions import CorpusSourceError, ExtensionError, ManifestStructureError
from capturescope.themes import InvalidTheme, Theme, resolve_theme


logger = logging.getLogger(__name__)

REGISTRY_INDEX_NAME = "extensions.toml"
GITMODULES_NAME = ".gitmodules"
LANGUAGE_CONFIG_NAME = "config.toml"

_SUBMODULE_HEADER = re.compile(r'^\[submodule "(?P<name>[^"]+)"\]$')
_SCP_LIKE_URL = re.compile(r"^(?:[^@/]+@)?(?P<host>[^:/]+):(?!//)")


# ===========================================================================
# *                              Scan results
# ===========================================================================


class ScanFailure(FrozenModel):
    """An extension that was left out of the corpus, and why."""

    extension_id: str
    error_type: str
    message: str

    @classmethod
    def from_error(cls, error: ExtensionError) -> ScanFailure:
        """Record an extension error."""
        return cls(
            extension_id=error.extension_id, error_type=type(error).__name__, message=str(error)
        )


class ScanReport(BasedModel):
    """The outcome of a scan: the extensions that made it and the ones that didn't."""

    extensions: list[Extension] = Field(default_factory=list)
    failures: list[ScanFailure] = Field(default_factory=list)

    def merge(self, other: ScanReport) -> ScanReport:
        """Combine two reports, keeping order."""
        return ScanReport(
            extensions=[*self.extensions, *other.extensions],
            failures=[*self.failures, *other.failures],
        )


# ===========================================================================
# *                            Git / URL helpers
# ===========================================================================


def git_provider_from_url(url: str) -> str | None:
    """The host of a git remote URL, e.g. `github.com`.

    Handles regular URLs as well as scp-like `git@host:owner/repo.git` remotes.
    """
    url = url.strip()
    if "://" in url:
        return urlparse(url).hostname
    if match := _SCP_LIKE_URL.match(url):
        return match.group("host").lower()
    return None


def read_gitmodules(path: Path) -> dict[str, str]:
    """Map submodule paths (and names) to their URLs from a `.gitmodules` file."""
    urls: dict[str, str] = {}
    name: str | None = None
    submodule_path: str | None = None
    url: str | None = None

    def flush() -> None:
        if name is not None and url is not None:
            urls[name] = url
            if submodule_path is not None:
                urls[submodule_path] = url

    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if match := _SUBMODULE_HEADER.match(line):
            flush()
            name, submodule_path, url = match.group("name"), None, None
        elif "=" in line and name is not None:
            key, _, value = line.partition("=")
            match key.strip():
                case "path":
                    submodule_path = value.strip()
                case "url":
                    url = value.strip()
                case _:
                    pass
    flush()
    return urls


class RepositorySync:
    """Clone the extension registry and check out extension submodules."""

    def __init__(self, url: str, directory: Path) -> None:
        """Initialize the sync.

        Args:
            url: The registry's git URL.
            directory: Where the registry is (or will be) checked out.
        """
        self.url = url
        self.directory = directory

    @staticmethod
    def _git() -> str:
        if git := shutil.which("git"):
            return git
        raise CorpusSourceError(
            "git is required to fetch the extension registry",
            suggestions=["Install git, or point capturescope at an existing snapshot."],
        )

    def ensure_cloned(self) -> Path:
        """Clone the registry unless it's already checked out. Returns its directory."""
        if (self.directory / ".git").exists():
            logger.debug("Using existing registry checkout at %s", self.directory)
            return self.directory
        self.directory.parent.mkdir(parents=True, exist_ok=True)
        logger.info("Cloning %s into %s", self.url, self.directory)
        try:
            _ = subprocess.run(
                [self._git(), "clone", "--depth", "1", self.url, str(self.directory)],
                capture_output=True,
                text=True,
                check=True,
            )
        except subprocess.CalledProcessError as e:
            raise CorpusSourceError(
                "Failed to clone the extension registry",
                details={"url": self.url, "path": str(self.directory), "stderr": e.stderr},
            ) from e
        return self.directory

    def update_submodule(self, submodule: str) -> bool:
        """Check out one extension submodule. Returns False (and logs) on failure."""
        output = subprocess.run(
            [self._git(), "submodule", "update", "--init", "--depth", "1", "--", submodule],
            cwd=self.directory,
            capture_output=True,
            text=True,
            check=False,
        )
        if output.returncode != 0:
            logger.warning("Failed to update submodule %s: %s", submodule, output.stderr.strip())
            return False
        logger.debug("Updated submodule %s", submodule)
        return True


# ===========================================================================
# *                               Scanner
# ===========================================================================


class ExtensionScanner:
    """Turns extension directories into `Extension` models."""

    def scan_extension(
        self, extension_id: str, path: Path, *, git_provider: str | None, builtin: bool = False
    ) -> Extension:
        """Scan one extension directory.

        Raises:
            MissingManifestError: the extension has no manifest.
            ManifestStructureError: a manifest or language config is malformed.
            UnclassifiableExtensionError: nothing identifies the extension's kind.
        """
        manifest = load_manifest(path, extension_id)
        kind = classify_extension(ClassificationEvidence.from_directory(extension_id, path), manifest)
        match kind:
            case ExtensionKind.LANGUAGE:
                content = LanguageExtension(
                    languages=self.scan_languages(extension_id, path / LANGUAGES_DIR)
                )
            case ExtensionKind.THEME:
                content = ThemeExtension(themes=self.scan_themes(path / THEMES_DIR))
            case ExtensionKind.SLASH_COMMAND:
                content = SlashCommandExtension()
            case ExtensionKind.CONTEXT_SERVER:
                content = ContextServerExtension()
        try:
            return Extension(
                id=extension_id,
                metadata=manifest,
                builtin=builtin,
                git_provider=git_provider,
                content=content,
            )
        except ValidationError as e:
            raise ExtensionError(extension_id, f"Invalid extension '{extension_id}': {e}") from e

    def scan_languages(self, extension_id: str, languages_dir: Path) -> list[Language]:
        """Scan every language directory under `languages_dir`, in name order."""
        if not languages_dir.is_dir():
            return []
        return [
            self.scan_language(extension_id, language_dir)
            for language_dir in sorted(languages_dir.iterdir())
            if language_dir.is_dir()
        ]

    def scan_language(self, extension_id: str, language_dir: Path) -> Language:
        """Scan one language directory: `config.toml` plus optional query files."""
        config_path = language_dir / LANGUAGE_CONFIG_NAME
        try:
            config = LanguageConfig.model_validate(
                tomllib.loads(config_path.read_text(encoding="utf-8"))
            )
        except (OSError, ValueError) as e:
            raise ManifestStructureError(
                extension_id,
                f"Missing or invalid language config for '{extension_id}'",
                details={"path": str(config_path)},
            ) from e
        queries = {
            kind.field_name: _read_optional(language_dir / kind.file_name) for kind in QueryKind
        }
        return Language(config=config, **queries)

    def scan_themes(self, themes_dir: Path) -> list[Theme]:
        """Resolve every `*.json` theme file directly under `themes_dir`, in name order."""
        if not themes_dir.is_dir():
            return []
        themes: list[Theme] = []
        for theme_path in sorted(themes_dir.glob("*.json")):
            if not theme_path.is_file():
                continue
            try:
                text = theme_path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                logger.warning("Couldn't read theme %s: %s", theme_path, e)
                themes.append(InvalidTheme())
                continue
            themes.append(resolve_theme(text, source=str(theme_path)))
        return themes

    def scan_registry(self, root: Path, index: RegistryIndex | None = None) -> ScanReport:
        """Scan every extension listed in the registry at `root`."""
        if index is None:
            index = RegistryIndex.from_file(root / REGISTRY_INDEX_NAME)
        gitmodules = root / GITMODULES_NAME
        urls = read_gitmodules(gitmodules) if gitmodules.is_file() else {}
        report = ScanReport()
        for extension_id, entry in index.items():
            try:
                url = urls.get(entry.submodule)
                if url is None or (provider := git_provider_from_url(url)) is None:
                    raise ExtensionError(
                        extension_id,
                        f"No usable submodule URL for '{extension_id}'",
                        details={"submodule": entry.submodule},
                    )
                path = root / entry.submodule / (entry.path or "")
                report.extensions.append(
                    self.scan_extension(extension_id, path, git_provider=provider)
                )
            except ExtensionError as e:
                logger.warning("Skipping extension: %s", e)
                report.failures.append(ScanFailure.from_error(e))
        logger.info(
            "Scanned %d extensions (%d skipped)", len(report.extensions), len(report.failures)
        )
        return report

    def scan_builtin(self, root: Path) -> ScanReport:
        """Scan first-party extensions: every directory under `root` is one extension."""
        report = ScanReport()
        for path in sorted(root.iterdir()):
            if not path.is_dir():
                continue
            try:
                report.extensions.append(
                    self.scan_extension(path.name, path, git_provider=None, builtin=True)
                )
            except ExtensionError as e:
                logger.warning("Skipping builtin extension: %s", e)
                report.failures.append(ScanFailure.from_error(e))
        return report


def _read_optional(path: Path) -> str | None:
    """Read a text file, treating a missing or unreadable file as absent."""
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except (OSError, UnicodeDecodeError) as e:
        logger.debug("Couldn't read %s: %s", path, e)
        return None


__all__ = (
    "GITMODULES_NAME",
    "REGISTRY_INDEX_NAME",
    "ExtensionScanner",
    "RepositorySync",
    "ScanFailure",
    "ScanReport",
    "git_provider_from_url",
    "read_gitmodules",
)
