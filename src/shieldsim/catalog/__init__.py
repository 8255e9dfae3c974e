"""
Static configuration consumed by simulator drivers.

Contains:
- Typed records for shield presets, healing items, combat items and input ranges.
- A loader for the bundled (or a custom) YAML catalog, validated with JSON Schema.
"""

from .loader import build_catalog, load_catalog, validate_catalog_dict
from .models import (
    Catalog,
    CombatItem,
    DamageMultipliers,
    HealingItem,
    InputRange,
    ShieldPreset,
)

__all__ = [
    "Catalog",
    "CombatItem",
    "DamageMultipliers",
    "HealingItem",
    "InputRange",
    "ShieldPreset",
    "build_catalog",
    "load_catalog",
    "validate_catalog_dict",
]
