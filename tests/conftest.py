# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0

"""Global pytest configuration and fixtures for capturescope tests."""

from __future__ import annotations

import json

from collections.abc import Iterable, Iterator, Mapping
from pathlib import Path

import pytest

from capturescope.config.settings import reset_settings
from capturescope.core.extension import (
    Extension,
    Language,
    LanguageConfig,
    LanguageExtension,
    SlashCommandExtension,
    ThemeExtension,
)
from capturescope.core.manifest import JsonManifest, TomlManifest
from capturescope.themes import V1_SCHEMA_URI, V2_SCHEMA_URI, InvalidTheme, ThemeV1, ThemeV2


# ===========================================================================
# *                          Model builders
# ===========================================================================


def toml_manifest(name: str = "Test Extension", **overrides: object) -> TomlManifest:
    """A minimal valid `extension.toml` manifest."""
    return TomlManifest.model_validate({
        "name": name,
        "version": "0.1.0",
        "authors": ["Test Author <test@example.com>"],
        "repository": "https://github.com/example/test-extension",
        **overrides,
    })


def json_manifest(name: str = "Legacy Extension", **overrides: object) -> JsonManifest:
    """A minimal valid `extension.json` manifest."""
    return JsonManifest.model_validate({
        "name": name,
        "version": "0.0.1",
        "authors": ["Legacy Author"],
        "repository": "https://github.com/example/legacy-extension",
        **overrides,
    })


def v1_family(captures: Iterable[str], *, name: str = "Family") -> dict[str, object]:
    """A v1 theme family document styling `captures`."""
    return {
        "$schema": V1_SCHEMA_URI,
        "name": name,
        "author": "Test Author",
        "themes": [
            {
                "name": f"{name} Dark",
                "appearance": "dark",
                "style": {
                    "background": "#000000",
                    "syntax": {capture: {"color": "#ffffff"} for capture in captures},
                },
            }
        ],
    }


def v2_family(captures: Iterable[str], *, name: str = "Family") -> dict[str, object]:
    """A v2 theme family document styling `captures`."""
    return {
        "$schema": V2_SCHEMA_URI,
        "name": name,
        "author": "Test Author",
        "themes": [
            {
                "name": f"{name} Light",
                "appearance": "light",
                "style": {
                    "background.appearance": "opaque",
                    "syntax": {
                        capture: {"color": "#101010", "font_weight": 650} for capture in captures
                    },
                },
            }
        ],
    }


def language(name: str, highlights: str | None) -> Language:
    """A language definition with a highlights query."""
    return Language(
        config=LanguageConfig(name=name, grammar=name.lower(), path_suffixes=[name.lower()]),
        highlights_queries=highlights,
    )


def language_extension(
    extension_id: str,
    *highlights: str | None,
    git_provider: str | None = "github.com",
    builtin: bool = False,
) -> Extension:
    """A language extension with one language per highlights query."""
    return Extension(
        id=extension_id,
        metadata=toml_manifest(extension_id, grammars={extension_id: {"repository": "x"}}),
        builtin=builtin,
        git_provider=git_provider,
        content=LanguageExtension(
            languages=[
                language(f"{extension_id}-{index}", query) for index, query in enumerate(highlights)
            ]
        ),
    )


def theme_extension(
    extension_id: str,
    captures: Iterable[str] = (),
    *,
    schema: str = "v1",
    git_provider: str | None = "github.com",
) -> Extension:
    """A theme extension with a single parsed theme family (or an invalid one)."""
    captures = list(captures)
    match schema:
        case "v1":
            theme = ThemeV1.model_validate({"content": v1_family(captures)})
        case "v2":
            theme = ThemeV2.model_validate({"content": v2_family(captures)})
        case _:
            theme = InvalidTheme()
    return Extension(
        id=extension_id,
        metadata=json_manifest(extension_id, themes={extension_id: "themes/theme.json"}),
        git_provider=git_provider,
        content=ThemeExtension(themes=[theme]),
    )


def slash_command_extension(extension_id: str, *, git_provider: str = "gitlab.com") -> Extension:
    """A slash command extension."""
    return Extension(
        id=extension_id,
        metadata=toml_manifest(extension_id, slash_commands={"run": {"description": "Run"}}),
        git_provider=git_provider,
        content=SlashCommandExtension(),
    )


# ===========================================================================
# *                        On-disk registries
# ===========================================================================


def write_tree(root: Path, files: Mapping[str, str | dict | list]) -> Path:
    """Write `files` (relative path -> text or JSON data) under `root`."""
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        text = content if isinstance(content, str) else json.dumps(content, indent=2)
        _ = path.write_text(text, encoding="utf-8")
    return root


EXTENSION_TOML = """
name = "{name}"
version = "0.1.0"
authors = ["Test Author"]
repository = "https://github.com/example/{name}"
"""

RUST_HIGHLIGHTS = """
(identifier) @variable
["fn" "let"] @keyword
(string_literal) @string
((identifier) @_name (#eq? @_name "self")) @variable.special
"""


@pytest.fixture
def registry_root(tmp_path: Path) -> Path:
    """A checked-out extension registry with one extension of each interesting shape.

    - `monokai`: theme extension (legacy manifest) with a v1 and an invalid theme file
    - `rusty`: language extension living in a subdirectory of its submodule
    - `runner`: slash command extension, scp-style submodule URL
    - `empty`: submodule not checked out (no manifest)
    - `mystery`: manifest only, nothing to classify
    """
    root = tmp_path / "extensions"
    write_tree(
        root,
        {
            "extensions.toml": """
[monokai]
submodule = "extensions/monokai"
version = "1.0.0"

[rusty]
submodule = "extensions/rusty"
path = "ext"
version = "0.2.0"

[runner]
submodule = "extensions/runner"
version = "0.0.1"

[empty]
submodule = "extensions/empty"
version = "0.0.1"

[mystery]
submodule = "extensions/mystery"
version = "0.0.1"
""",
            ".gitmodules": """
[submodule "extensions/monokai"]
\tpath = extensions/monokai
\turl = https://github.com/example/monokai.git
[submodule "extensions/rusty"]
\tpath = extensions/rusty
\turl = https://gitlab.com/example/rusty.git
[submodule "extensions/runner"]
\tpath = extensions/runner
\turl = git@codeberg.org:example/runner.git
[submodule "extensions/empty"]
\tpath = extensions/empty
\turl = https://github.com/example/empty.git
[submodule "extensions/mystery"]
\tpath = extensions/mystery
\turl = https://github.com/example/mystery.git
""",
            "extensions/monokai/extension.json": {
                "name": "Monokai",
                "version": "1.0.0",
                "authors": ["Test Author"],
                "repository": "https://github.com/example/monokai",
                "themes": {"Monokai": "themes/monokai.json"},
            },
            "extensions/monokai/themes/monokai.json": v1_family(
                ["keyword", "string"], name="Monokai"
            ),
            "extensions/monokai/themes/zz-broken.json": '{"not": "a theme"}',
            "extensions/rusty/ext/extension.toml": EXTENSION_TOML.format(name="rusty"),
            "extensions/rusty/ext/languages/rust/config.toml": (
                'name = "Rust"\ngrammar = "rust"\npath_suffixes = ["rs"]\n'
            ),
            "extensions/rusty/ext/languages/rust/highlights.scm": RUST_HIGHLIGHTS,
            "extensions/runner/extension.toml": EXTENSION_TOML.format(name="runner")
            + '\n[slash_commands.run]\ndescription = "Run a task"\nrequires_argument = true\n',
            "extensions/mystery/extension.toml": EXTENSION_TOML.format(name="mystery"),
        },
    )
    (root / "extensions" / "empty").mkdir(parents=True)
    (root / ".git").mkdir()
    return root


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep settings isolated from the developer's environment between tests."""
    for name in ("CAPTURESCOPE_CACHE_DIR", "CAPTURESCOPE_BUILTIN_PATH", "CAPTURESCOPE_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    reset_settings()
    yield
    reset_settings()
