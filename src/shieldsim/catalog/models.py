from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from ..combat.state import HealTarget, ShieldConfiguration
from ..errors import UnknownPresetError

logger = logging.getLogger(__name__)

COMBAT_CATEGORIES = ("weapon", "gadget", "deployable")


@dataclass(frozen=True)
class ShieldPreset:
    key: str
    name: str
    charges: float
    dr: float
    life: float
    display: Dict[str, str] = field(default_factory=dict)

    def to_configuration(self) -> ShieldConfiguration:
        return ShieldConfiguration(
            max_charge=self.charges,
            damage_reduction=self.dr,
            max_life=self.life,
            name=self.name,
            display=dict(self.display),
        )


@dataclass(frozen=True)
class HealingItem:
    """A consumable restoring shield or life.

    A ``duration`` of 0 means the item heals instantly.
    """

    name: str
    target: HealTarget
    amount: float
    duration: float = 0.0
    use_time: float = 0.0
    display: Dict[str, str] = field(default_factory=dict)

    @property
    def is_instant(self) -> bool:
        return self.duration <= 0


@dataclass(frozen=True)
class CombatItem:
    name: str
    category: str
    damage: float
    headshot_multiplier: Optional[float] = None
    projectiles: Optional[int] = None
    display: Dict[str, str] = field(default_factory=dict)

    @property
    def effective_projectiles(self) -> int:
        return self.projectiles or 1


@dataclass(frozen=True)
class DamageMultipliers:
    leg: float = 0.75
    body: float = 1.0
    head: float = 2.5

    def for_zone(self, zone: str) -> float:
        try:
            return {"leg": self.leg, "body": self.body, "head": self.head}[zone.lower()]
        except KeyError as exc:
            raise ValueError(f"Unknown hit zone: {zone!r}") from exc


@dataclass(frozen=True)
class InputRange:
    """UI validation hint; the engine itself never enforces it."""

    min: float
    max: float
    step: float
    default: float

    def clamp(self, value: float) -> float:
        return max(self.min, min(self.max, float(value)))


@dataclass(frozen=True)
class Catalog:
    """Static presets and item tables consumed by drivers."""

    shield_presets: Dict[str, ShieldPreset]
    healing: Dict[HealTarget, Dict[str, HealingItem]]
    combat: Dict[str, CombatItem]
    multipliers: DamageMultipliers = field(default_factory=DamageMultipliers)
    input_ranges: Dict[str, InputRange] = field(default_factory=dict)
    max_history: Optional[int] = None

    def shield_preset(self, key: str) -> ShieldPreset:
        try:
            return self.shield_presets[key]
        except KeyError:
            raise UnknownPresetError(f"Unknown shield preset: {key}") from None

    def preset_keys(self) -> List[str]:
        return list(self.shield_presets)

    def healing_items(self, target: HealTarget) -> List[HealingItem]:
        return list(self.healing.get(HealTarget.coerce(target), {}).values())

    def healing_item(self, target: HealTarget, name: str) -> HealingItem:
        try:
            return self.healing[HealTarget.coerce(target)][name]
        except KeyError:
            raise UnknownPresetError(f"Unknown {HealTarget.coerce(target).value} healing item: {name}") from None

    def combat_items(self) -> List[CombatItem]:
        """All weapons, gadgets and deployables, strongest first."""
        return sorted(self.combat.values(), key=lambda item: item.damage, reverse=True)

    def combat_items_by_category(self) -> Dict[str, Tuple[CombatItem, ...]]:
        return {
            cat: tuple(i for i in self.combat_items() if i.category == cat)
            for cat in COMBAT_CATEGORIES
        }

    def combat_item(self, name: str) -> CombatItem:
        try:
            return self.combat[name]
        except KeyError:
            raise UnknownPresetError(f"Unknown combat item: {name}") from None

    def headshot_multiplier_for(self, item: CombatItem) -> float:
        """The item's own headshot multiplier, else the table's head value."""
        if item.headshot_multiplier:
            return item.headshot_multiplier
        return self.multipliers.head

    def multiplier_for(self, item: CombatItem, zone: str) -> float:
        if zone.lower() == "head":
            return self.headshot_multiplier_for(item)
        return self.multipliers.for_zone(zone)
