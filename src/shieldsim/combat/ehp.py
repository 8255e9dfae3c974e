from __future__ import annotations

from .damage import DEFEAT_THRESHOLD
from .state import CombatState

# Half the defeat threshold: life under 1 is already lethal, so only the
# part of the pool above this offset counts.
EHP_LIFE_OFFSET = DEFEAT_THRESHOLD / 2


def calculate_ehp(state: CombatState) -> float:
    """Effective health: raw damage the state can take before defeat.

    Mitigation only counts while the shield is online.
    """
    effective_pool = max(0.0, state.current_life - EHP_LIFE_OFFSET)
    damage_factor = 1 - state.dr / 100
    if state.shield_online and damage_factor > 0:
        return effective_pool / damage_factor
    if state.shield_online:
        return float("inf") if effective_pool > 0 else 0.0
    return effective_pool
