from __future__ import annotations

import logging
from dataclasses import dataclass

from .state import CombatState

logger = logging.getLogger(__name__)

# Life strictly below this value counts as defeated, so a hit leaving
# life in [0, 1) is lethal.
DEFEAT_THRESHOLD = 1.0


@dataclass(frozen=True)
class Volley:
    """One damage command: ``triggers`` pulls of ``projectiles`` hits each.

    Negative inputs are clamped to zero with a warning; counts are truncated
    to integers.
    """

    base_damage: float
    multiplier: float = 1.0
    projectiles: int = 1
    triggers: int = 1

    def __post_init__(self) -> None:
        if self.base_damage < 0 or self.multiplier < 0:
            logger.warning(
                "Negative damage input detected (base=%s, multiplier=%s); clamping to zero.",
                self.base_damage,
                self.multiplier,
            )
        object.__setattr__(self, "base_damage", max(0.0, float(self.base_damage)))
        object.__setattr__(self, "multiplier", max(0.0, float(self.multiplier)))
        object.__setattr__(self, "projectiles", max(0, int(self.projectiles)))
        object.__setattr__(self, "triggers", max(0, int(self.triggers)))

    @property
    def hit_count(self) -> int:
        return self.projectiles * self.triggers


@dataclass(frozen=True)
class VolleyOutcome:
    """Arithmetic result of running a volley against a state.

    Attributes:
        shield / durability / life: Values after the volley, before clamping.
        broken: Permanent-break flag after the volley.
        broke_now: True if this volley caused the permanent break.
        defeated: True if life dropped below DEFEAT_THRESHOLD.
        shield_lost: Total charge absorbed by the shield.
        life_lost: Life actually removed (each hit capped by life remaining).
        raw_damage: Unmitigated damage (base x multiplier) of processed hits.
        hits_processed: Hits resolved before the volley ended.
    """

    shield: float
    durability: float
    life: float
    broken: bool
    broke_now: bool
    defeated: bool
    shield_lost: float
    life_lost: float
    raw_damage: float
    hits_processed: int


def resolve_volley(state: CombatState, volley: Volley) -> VolleyOutcome:
    """Run the per-hit damage rules against ``state`` without mutating it.

    Hits are processed trigger by trigger, projectile by projectile. While the
    shield is online it absorbs ``min(shield, base)`` from both charge and
    durability, and life takes the base damage reduced by ``dr``; once the
    shield is offline life takes the full base damage. Every life hit is
    scaled by the multiplier. The volley stops at the first hit that leaves
    life below DEFEAT_THRESHOLD.
    """
    shield = state.current_shield
    durability = state.current_durability
    life = state.current_life
    broken = state.is_permanently_broken
    broke_now = False
    defeated = False
    shield_lost = 0.0
    life_lost = 0.0
    raw = 0.0
    processed = 0

    mitigation = 1 - state.dr / 100
    for _ in range(volley.triggers):
        for _ in range(volley.projectiles):
            if shield > 0 and not broken:
                absorbed = min(shield, volley.base_damage)
                shield_lost += absorbed
                shield -= absorbed
                durability -= absorbed
                if durability <= 0:
                    broken = True
                    broke_now = True
                life_damage = volley.base_damage * mitigation * volley.multiplier
            else:
                life_damage = volley.base_damage * volley.multiplier
            life_lost += max(0.0, min(life, life_damage))
            raw += volley.base_damage * volley.multiplier
            life -= life_damage
            processed += 1
            if life < DEFEAT_THRESHOLD:
                defeated = True
                break
        if defeated:
            break

    logger.debug(
        "Volley resolved: hits=%d/%d shield_lost=%.2f life_lost=%.2f broke_now=%s defeated=%s",
        processed,
        volley.hit_count,
        shield_lost,
        life_lost,
        broke_now,
        defeated,
    )
    return VolleyOutcome(
        shield=shield,
        durability=durability,
        life=life,
        broken=broken,
        broke_now=broke_now,
        defeated=defeated,
        shield_lost=shield_lost,
        life_lost=life_lost,
        raw_damage=raw,
        hits_processed=processed,
    )


def is_fatal(state: CombatState, volley: Volley) -> bool:
    """Whether the volley would leave life below DEFEAT_THRESHOLD."""
    outcome = resolve_volley(state, volley)
    return outcome.defeated or outcome.life < DEFEAT_THRESHOLD
