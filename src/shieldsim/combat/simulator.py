from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional, Union

from ..config import SimulatorConfig
from ..engine.clock import SimulationClock
from .damage import Volley, is_fatal, resolve_volley
from .ehp import calculate_ehp
from .healing import Regeneration, can_heal, nominal_ticks, restore
from .history import Snapshot, SnapshotStore
from .log import ActionLog, LogCategory, LogEntry
from .state import CombatState, HealTarget, ShieldConfiguration

if TYPE_CHECKING:  # pragma: no cover
    from ..catalog.models import Catalog, CombatItem, HealingItem, ShieldPreset

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DamageResult:
    """Summary of one apply_damage() call."""

    shield_lost: float
    life_lost: float
    broken: bool
    defeated: bool
    hits_processed: int


class ShieldSimulator:
    """Owned simulation instance: combat state, action log and undo history.

    Every mutating command runs to completion, appends log entries and (for
    damage and instant heals) pushes a snapshot. Over-time heals tick on the
    simulator's SimulationClock, so ticks and driver commands scheduled on
    that clock never interleave mid-command.

    Args:
        configuration: Initial shield/life setup.
        config: Simulator settings (history bound, tick interval, regen policy).
        clock: Clock used for regeneration ticks; a private one is created if omitted.
        catalog: Optional catalog used by the item-based helpers.
    """

    def __init__(
        self,
        configuration: ShieldConfiguration,
        config: Optional[SimulatorConfig] = None,
        clock: Optional[SimulationClock] = None,
        catalog: Optional["Catalog"] = None,
    ) -> None:
        self.config = config or SimulatorConfig.default()
        self.clock = clock or SimulationClock()
        self.catalog = catalog
        self._log = ActionLog()
        self._history = SnapshotStore(self.config.max_history)
        self._regens: List[Regeneration] = []
        self.configure(configuration)

    @classmethod
    def from_catalog(
        cls,
        catalog: "Catalog",
        preset: str = "heavy",
        config: Optional[SimulatorConfig] = None,
        clock: Optional[SimulationClock] = None,
    ) -> "ShieldSimulator":
        """Start from a catalog preset; the catalog's max_history applies unless a config is given."""
        if config is None:
            config = SimulatorConfig(max_history=catalog.max_history or SimulatorConfig.max_history)
        return cls(catalog.shield_preset(preset).to_configuration(), config=config, clock=clock, catalog=catalog)

    # -- read-only views -------------------------------------------------

    @property
    def state(self) -> CombatState:
        """A detached copy of the live state, safe for rendering."""
        return self._state.copy()

    @property
    def logs(self) -> List[LogEntry]:
        """Log entries, newest first."""
        return self._log.entries()

    @property
    def can_undo(self) -> bool:
        return self._history.can_undo

    @property
    def can_redo(self) -> bool:
        return self._history.can_redo

    @property
    def history_size(self) -> int:
        return len(self._history)

    @property
    def active_regenerations(self) -> List[Regeneration]:
        return [r for r in self._regens if r.active]

    # -- configuration ---------------------------------------------------

    def configure(self, configuration: ShieldConfiguration) -> None:
        """Replace the state wholesale, clear counters and log, reset history."""
        self.clear_active_heals()
        self._state = CombatState.from_configuration(configuration)
        self._log.clear()
        self._log.add(f"Initialized with {configuration.name}", LogCategory.INFO)
        self._history.reset(Snapshot.capture(self._state, self._log.freeze()))
        logger.info(
            "Configured %s (charge=%s dr=%s life=%s)",
            configuration.name,
            configuration.max_charge,
            configuration.damage_reduction,
            configuration.max_life,
        )

    def apply_preset(self, preset: "ShieldPreset") -> None:
        self.configure(preset.to_configuration())

    def apply_custom_settings(
        self,
        charges: float,
        dr: float,
        life: Optional[float] = None,
        *,
        name: str = "Custom Shield",
    ) -> None:
        if life is None:
            life = self.config.default_max_life
        self.configure(ShieldConfiguration(max_charge=charges, damage_reduction=dr, max_life=life, name=name))

    # -- log -------------------------------------------------------------

    def add_log(self, message: str, category: Union[LogCategory, str] = LogCategory.INFO) -> LogEntry:
        return self._log.add(message, category)

    def clear_logs(self) -> None:
        self._log.clear()

    def export_log(self) -> str:
        return self._log.to_text()

    # -- damage ----------------------------------------------------------

    def apply_damage(
        self,
        base_damage: float,
        multiplier: float = 1.0,
        projectiles: int = 1,
        triggers: int = 1,
        label: str = "Hit",
        source_name: str = "",
    ) -> DamageResult:
        """Apply a volley of hits, update counters, log, and save a snapshot."""
        volley = Volley(base_damage, multiplier, projectiles, triggers)
        outcome = resolve_volley(self._state, volley)

        st = self._state
        st.current_shield = max(0.0, outcome.shield)
        st.current_durability = max(0.0, outcome.durability)
        st.current_life = max(0.0, outcome.life)
        st.is_permanently_broken = outcome.broken
        # Intended hits are counted even when the volley ends early.
        st.shots_fired += volley.hit_count
        st.damage_mitigated += outcome.raw_damage - outcome.life_lost
        st.total_damage_taken += outcome.life_lost

        if outcome.broke_now:
            self._log.add("Shield permanently broken!", LogCategory.PERMANENT_BREAK)
        if outcome.defeated:
            self._log.add("DEFEATED!", LogCategory.DEFEATED)
        prefix = f"{label} with {source_name}" if source_name else label
        self._log.add(
            f"{prefix}: {outcome.shield_lost:.1f} shield, {outcome.life_lost:.1f} life lost",
            LogCategory.ATTACK,
        )
        self._save()
        return DamageResult(
            shield_lost=outcome.shield_lost,
            life_lost=outcome.life_lost,
            broken=outcome.broke_now,
            defeated=outcome.defeated,
            hits_processed=outcome.hits_processed,
        )

    def is_hit_fatal(
        self,
        base_damage: float,
        multiplier: float = 1.0,
        projectiles: int = 1,
        triggers: int = 1,
    ) -> bool:
        """Preview whether the volley would defeat the current state (no mutation)."""
        return is_fatal(self._state, Volley(base_damage, multiplier, projectiles, triggers))

    def fire(self, item: Union["CombatItem", str], zone: str = "body", triggers: int = 1) -> DamageResult:
        """Apply a catalog combat item aimed at a hit zone (leg, body or head)."""
        combat_item = self._combat_item(item)
        return self.apply_damage(
            combat_item.damage,
            self._require_catalog().multiplier_for(combat_item, zone),
            combat_item.effective_projectiles,
            triggers,
            label=f"{zone.capitalize()} shot",
            source_name=combat_item.name,
        )

    def preview(self, item: Union["CombatItem", str], zone: str = "body", triggers: int = 1) -> bool:
        combat_item = self._combat_item(item)
        return self.is_hit_fatal(
            combat_item.damage,
            self._require_catalog().multiplier_for(combat_item, zone),
            combat_item.effective_projectiles,
            triggers,
        )

    # -- healing ---------------------------------------------------------

    def heal_instant(self, target: Union[HealTarget, str], amount: float) -> float:
        """Restore up to ``amount`` at once; returns the amount actually applied."""
        heal_target = HealTarget.coerce(target)
        applied = restore(self._state, heal_target, amount)
        if applied < amount:
            logger.debug("Instant %s heal capped: requested=%s applied=%s", heal_target.value, amount, applied)
        self._log.add(f"Healed {amount:g} {heal_target.value}", LogCategory.HEAL)
        self._save()
        return applied

    def start_over_time_heal(
        self,
        target: Union[HealTarget, str],
        total_amount: float,
        duration: float,
    ) -> Regeneration:
        """Schedule a regeneration ticking every ``config.tick_interval`` seconds.

        Each tick restores ``total_amount / (duration / tick_interval)``. With
        ``regen_stops_after_duration`` the schedule ends after the nominal
        number of ticks; otherwise it runs until clear_active_heals().
        """
        if total_amount <= 0 or duration <= 0:
            raise ValueError("total_amount and duration must be positive")
        heal_target = HealTarget.coerce(target)
        interval = self.config.tick_interval
        regen = Regeneration(
            target=heal_target,
            total_amount=total_amount,
            duration=duration,
            per_tick=total_amount / (duration / interval),
        )
        max_calls = nominal_ticks(duration, interval) if self.config.regen_stops_after_duration else None

        def tick() -> None:
            # Refused ticks apply nothing and are not warned about individually.
            applied = restore(self._state, heal_target, regen.per_tick) if can_heal(self._state, heal_target) else 0.0
            regen.applied += applied
            logger.debug("Regen #%d tick %d: %s +%.3f", regen.id, regen.ticks, heal_target.value, applied)
            if max_calls is not None and regen.ticks >= max_calls:
                logger.info(
                    "Regeneration #%d finished after %d ticks (%s +%.2f)",
                    regen.id,
                    regen.ticks,
                    heal_target.value,
                    regen.applied,
                )

        regen.handle = self.clock.call_every(interval, tick, max_calls=max_calls, label=f"regen-{regen.id}")
        self._regens = [r for r in self._regens if r.active]
        self._regens.append(regen)
        self._log.add(
            f"Started {heal_target.value} regeneration: {total_amount:g} over {duration:g}s",
            LogCategory.HEAL,
        )
        logger.info("Regeneration #%d started (%s, %s over %ss)", regen.id, heal_target.value, total_amount, duration)
        return regen

    def heal_with_item(self, item: Union["HealingItem", str], over_time: bool = False, target: Optional[Union[HealTarget, str]] = None) -> None:
        """Use a catalog healing item, instantly unless ``over_time`` and the item has a duration."""
        if isinstance(item, str):
            if target is None:
                raise ValueError("target is required when looking up a healing item by name")
            item = self._require_catalog().healing_item(HealTarget.coerce(target), item)
        if over_time and not item.is_instant:
            self.start_over_time_heal(item.target, item.amount, item.duration)
        else:
            self.heal_instant(item.target, item.amount)

    def clear_active_heals(self) -> None:
        """Cancel every outstanding regeneration; already-applied ticks stay."""
        for regen in self._regens:
            regen.cancel()
        if self._regens:
            logger.info("Cleared %d regeneration schedules", len(self._regens))
        self._regens = []

    # -- derived ---------------------------------------------------------

    def calculate_ehp(self) -> float:
        return calculate_ehp(self._state)

    # -- history ---------------------------------------------------------

    def undo(self) -> bool:
        snapshot = self._history.undo()
        if snapshot is None:
            return False
        self._restore(snapshot)
        return True

    def redo(self) -> bool:
        snapshot = self._history.redo()
        if snapshot is None:
            return False
        self._restore(snapshot)
        return True

    def _save(self) -> None:
        self._history.save(Snapshot.capture(self._state, self._log.freeze()))

    def _restore(self, snapshot: Snapshot) -> None:
        self._state = snapshot.restore_state()
        self._log.restore(snapshot.log)

    # -- helpers ---------------------------------------------------------

    def _require_catalog(self) -> "Catalog":
        if self.catalog is None:
            raise ValueError("this operation needs a catalog; pass catalog= to ShieldSimulator")
        return self.catalog

    def _combat_item(self, item: Union["CombatItem", str]) -> "CombatItem":
        if isinstance(item, str):
            return self._require_catalog().combat_item(item)
        return item
