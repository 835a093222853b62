# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Base models and enums used throughout the capturescope project."""

from capturescope.core.types.enum import BaseEnum
from capturescope.core.types.models import (
    BASEDMODEL_CONFIG,
    FROZEN_BASEDMODEL_CONFIG,
    BasedModel,
    FrozenModel,
)


__all__ = ("BASEDMODEL_CONFIG", "FROZEN_BASEDMODEL_CONFIG", "BaseEnum", "BasedModel", "FrozenModel")
