# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""CLI interface for capturescope."""

from importlib import import_module
from types import MappingProxyType


_dynamic_imports: MappingProxyType[str, tuple[str, str]] = MappingProxyType({
    "app": (__spec__.parent, "__main__"),
    "console": (__spec__.parent, "utils"),
    "main": (__spec__.parent, "__main__"),
})


def __getattr__(name: str) -> object:
    if name in _dynamic_imports:
        module_name, submodule_name = _dynamic_imports[name]
        result = getattr(import_module(f"{module_name}.{submodule_name}"), name)
        globals()[name] = result
        return result
    raise AttributeError(f"module {__name__} has no attribute {name}")


__all__ = ("app", "console", "main")


def __dir__() -> list[str]:
    return list(__all__)
