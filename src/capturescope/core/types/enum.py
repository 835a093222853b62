# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Base enum class for the capturescope project."""

from __future__ import annotations

import contextlib

from enum import Enum, unique
from functools import cached_property
from types import MappingProxyType
from typing import Self, cast, override

import textcase


@unique
class BaseEnum(Enum):
    """An enum class that provides common functionality for all enums in capturescope. Enum members must be unique strings.

    BaseEnum provides convenience methods for converting between strings and enum members. Members can declare extra spellings through an `alias` attribute.
    """

    @staticmethod
    def _deconstruct_string(value: str) -> list[str]:
        """Deconstruct a string into its component parts."""
        value = value.strip().lower().replace("-", "_").replace(" ", "_")
        for underscore_length in range(4, 0, -1):
            value = value.replace("_" * underscore_length, "_")
        return [v for v in value.split("_") if v]

    @staticmethod
    def _multiply_variations(s: str) -> set[str]:
        """Generate multiple variations of a string."""
        return {
            s,
            textcase.upper(s),
            textcase.lower(s),
            textcase.title(s),
            textcase.pascal(s),
            textcase.snake(s),
            textcase.kebab(s),
            textcase.camel(s),
        }

    @cached_property
    def aka(self) -> tuple[str, ...]:
        """Return the known spellings of the enum member."""
        names: set[str] = {self.value, self.name, self.variable, self.as_title}
        if alias := getattr(self, "alias", None):
            if isinstance(alias, str):
                names.add(alias)
            elif isinstance(alias, list | tuple):
                names |= set(alias)  # type: ignore
        names |= {n for name in names.copy() for n in self._multiply_variations(name)}
        return tuple(sorted(names))

    @classmethod
    @override
    def _missing_(cls, value: object) -> Self | None:
        """Handle missing values when converting from string to enum member."""
        if not isinstance(value, str):
            return None
        with contextlib.suppress(ValueError):
            return cls.from_string(value)
        return None

    @classmethod
    def aliases(cls) -> MappingProxyType[str, Self]:
        """Provides a way to identify alternate names for a member, used in string conversion and identification."""
        alias_map: dict[str, Self] = {
            cast(str, key): cast(Self, member) for key, member in cls._value2member_map_.items()
        }
        alias_map.update({
            alias: member for member in cls for alias in member.aka if alias not in alias_map
        })
        return MappingProxyType(alias_map)

    @classmethod
    def from_string(cls, value: str) -> Self:
        """Convert a string to the corresponding enum member. Flexibly handles different cases and dashes vs underscores.

        Users type these on the command line and in config files, so we try a few ways to match before giving up and raising a `ValueError`.
        """
        if literal_value := next(
            (
                member
                for member in cls
                if member.value.lower() == value.lower() or member.name.lower() == value.lower()
            ),
            None,
        ):
            return literal_value
        if found_member := next(
            (member for alias, member in cls.aliases().items() if alias.lower() == value.lower()),
            None,
        ):
            return found_member
        value_parts = cls._deconstruct_string(value)
        if found_member := next(
            (member for member in cls if cls._deconstruct_string(member.name) == value_parts), None
        ):
            return found_member
        raise ValueError(f"{value} is not a valid {cls.__qualname__} member")

    @property
    def variable(self) -> str:
        """Return the string representation of the enum member as a variable name."""
        return textcase.snake(self.value)

    @property
    def as_title(self) -> str:
        """Return the title-cased representation of the enum member."""
        return textcase.title(self.value)

    def __str__(self) -> str:
        """Return the string representation of the enum member."""
        return self.value


__all__ = ("BaseEnum",)
