from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from typing import Optional

from ..engine.clock import ScheduledHandle
from .state import CombatState, HealTarget

logger = logging.getLogger(__name__)

_regen_ids = itertools.count(1)


def can_heal(state: CombatState, target: HealTarget) -> bool:
    """Shield heals are refused once broken; life heals once defeated."""
    if target is HealTarget.SHIELD:
        return not state.is_permanently_broken
    return state.current_life > 0


def restore(state: CombatState, target: HealTarget, amount: float) -> float:
    """Add up to ``amount`` to the target pool, clamped to its capacity.

    The matching healed counter grows by the amount actually applied, which
    is returned. Refused heals and negative amounts apply nothing.
    """
    if amount < 0:
        logger.warning("Negative heal amount %s ignored", amount)
        return 0.0
    if not can_heal(state, target):
        logger.warning(
            "%s heal refused (broken=%s, life=%.2f)", target.value, state.is_permanently_broken, state.current_life
        )
        return 0.0

    if target is HealTarget.SHIELD:
        applied = max(0.0, min(state.max_shield - state.current_shield, amount))
        state.current_shield += applied
        state.shield_repaired += applied
    else:
        applied = max(0.0, min(state.max_life - state.current_life, amount))
        state.current_life += applied
        state.life_healed += applied
    return applied


@dataclass(eq=False)
class Regeneration:
    """An over-time heal scheduled on the simulator's clock.

    Attributes:
        id: Identifier distinguishing concurrent regenerations.
        target: Pool being restored.
        total_amount: Nominal amount over the full duration.
        duration: Nominal duration in seconds.
        per_tick: Amount attempted on every tick.
        applied: Amount actually restored so far.
    """

    target: HealTarget
    total_amount: float
    duration: float
    per_tick: float
    applied: float = 0.0
    handle: Optional[ScheduledHandle] = None
    id: int = 0

    def __post_init__(self) -> None:
        if not self.id:
            self.id = next(_regen_ids)

    @property
    def ticks(self) -> int:
        return 0 if self.handle is None else self.handle.calls

    @property
    def active(self) -> bool:
        return self.handle is not None and self.handle.active

    def cancel(self) -> None:
        if self.handle is not None:
            self.handle.cancel()


def nominal_ticks(duration: float, tick_interval: float) -> int:
    """Number of ticks a regeneration spans, e.g. 50 for 5s at 0.1s."""
    return max(1, int(round(duration / tick_interval)))
