from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Union

logger = logging.getLogger(__name__)


class HealTarget(str, Enum):
    """Pool restored by a heal."""

    SHIELD = "shield"
    LIFE = "life"

    @classmethod
    def coerce(cls, value: Union["HealTarget", str]) -> "HealTarget":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError as exc:
            raise ValueError(f"Unknown heal target: {value!r}") from exc


@dataclass(frozen=True)
class ShieldConfiguration:
    """Read-only shield/life setup supplied by a preset or custom settings.

    Attributes:
        max_charge: Shield charge capacity (also the starting durability).
        damage_reduction: Percentage of life damage mitigated while the shield is online.
        max_life: Life capacity.
        name: Display name copied onto the state.
        display: Opaque display hints (colors etc.), never read by the engine.
    """

    max_charge: float
    damage_reduction: float
    max_life: float
    name: str = "Custom Shield"
    display: Dict[str, str] = field(default_factory=dict)


@dataclass
class CombatState:
    """The live shield/life record plus cumulative counters.

    Attributes:
        max_shield / current_shield: Shield charge, 0 <= current <= max.
        dr: Damage reduction percentage applied while the shield is online.
        max_life / current_life: Life pool; clamped to >= 0 after every command.
        max_durability / current_durability: Structural health of the shield.
        is_permanently_broken: One-way flag set when durability reaches 0.
        shots_fired, damage_mitigated, total_damage_taken, shield_repaired,
        life_healed: Counters reset only by reconfiguration.
    """

    max_shield: float
    current_shield: float
    dr: float
    max_life: float
    current_life: float
    max_durability: float
    current_durability: float
    is_permanently_broken: bool = False
    shots_fired: int = 0
    damage_mitigated: float = 0.0
    total_damage_taken: float = 0.0
    shield_repaired: float = 0.0
    life_healed: float = 0.0
    name: str = ""
    display: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_configuration(cls, config: ShieldConfiguration) -> "CombatState":
        return cls(
            max_shield=config.max_charge,
            current_shield=config.max_charge,
            dr=config.damage_reduction,
            max_life=config.max_life,
            current_life=config.max_life,
            max_durability=config.max_charge,
            current_durability=config.max_charge,
            name=config.name,
            display=dict(config.display),
        )

    @property
    def shield_online(self) -> bool:
        return self.current_shield > 0 and not self.is_permanently_broken

    @property
    def defeated(self) -> bool:
        return self.current_life <= 0

    def copy(self) -> "CombatState":
        return dataclasses.replace(self, display=dict(self.display))
