# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
# pyright: reportUnsupportedDunderAll=none
"""The typed corpus model: manifests, extensions, and their shared base types."""

from importlib import import_module
from types import MappingProxyType


_dynamic_imports: MappingProxyType[str, tuple[str, str]] = MappingProxyType({
    "BaseEnum": (__spec__.parent, "types"),
    "BasedModel": (__spec__.parent, "types"),
    "ContextServerEntry": (__spec__.parent, "manifest"),
    "ContextServerExtension": (__spec__.parent, "extension"),
    "Extension": (__spec__.parent, "extension"),
    "ExtensionKind": (__spec__.parent, "extension"),
    "ExtensionMetadata": (__spec__.parent, "manifest"),
    "FrozenModel": (__spec__.parent, "types"),
    "GrammarEntry": (__spec__.parent, "manifest"),
    "JsonManifest": (__spec__.parent, "manifest"),
    "Language": (__spec__.parent, "extension"),
    "LanguageConfig": (__spec__.parent, "extension"),
    "LanguageExtension": (__spec__.parent, "extension"),
    "LanguageServerEntry": (__spec__.parent, "manifest"),
    "ManifestDialect": (__spec__.parent, "manifest"),
    "QueryKind": (__spec__.parent, "extension"),
    "RegistryEntry": (__spec__.parent, "manifest"),
    "RegistryIndex": (__spec__.parent, "manifest"),
    "SlashCommandEntry": (__spec__.parent, "manifest"),
    "SlashCommandExtension": (__spec__.parent, "extension"),
    "ThemeExtension": (__spec__.parent, "extension"),
    "TomlManifest": (__spec__.parent, "manifest"),
})
"""Maps names to the submodules that define them, for lazy loading."""


def __getattr__(name: str) -> object:
    if name in _dynamic_imports:
        module_name, submodule_name = _dynamic_imports[name]
        module = import_module(f"{module_name}.{submodule_name}")
        result = getattr(module, name)
        globals()[name] = result  # Cache in globals for future access
        return result
    if globals().get(name) is not None:
        return globals()[name]
    raise AttributeError(f"module {__name__} has no attribute {name}")


__all__ = tuple(sorted(_dynamic_imports))


def __dir__() -> list[str]:
    return list(__all__)
