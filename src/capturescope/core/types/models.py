# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0

"""Base model implementations for capturescope."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


# ================================================
# *      Pydantic Base Implementations
# ================================================

BASEDMODEL_CONFIG = ConfigDict(
    arbitrary_types_allowed=True,
    serialize_by_alias=True,
    use_attribute_docstrings=True,
    validate_by_alias=True,
    validate_by_name=True,
    cache_strings="all",
)
FROZEN_BASEDMODEL_CONFIG = BASEDMODEL_CONFIG | ConfigDict(frozen=True)


class BasedModel(BaseModel):
    """A baser `BaseModel` for all models in the capturescope project."""

    model_config = BASEDMODEL_CONFIG

    def dump_for_display(self) -> dict[str, Any]:
        """Dump the model as JSON-compatible data, leaving out unset optional fields."""
        return self.model_dump(mode="json", exclude_none=True)


class FrozenModel(BasedModel):
    """An immutable `BasedModel`. Everything scanned into the corpus is one of these."""

    model_config = FROZEN_BASEDMODEL_CONFIG


__all__ = ("BASEDMODEL_CONFIG", "FROZEN_BASEDMODEL_CONFIG", "BasedModel", "FrozenModel")
