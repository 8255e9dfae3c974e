import logging

import pytest

from shieldsim.combat.log import LogCategory
from shieldsim.combat.state import HealTarget, ShieldConfiguration

from conftest import NO_SHIELD


def test_instant_heal_is_clamped_to_capacity(heavy):
    heavy.apply_damage(10, 1, 1, 1)
    # shield 70, life 100 - 4.75
    applied_shield = heavy.heal_instant("shield", 40)
    applied_life = heavy.heal_instant(HealTarget.LIFE, 100)
    st = heavy.state
    assert applied_shield == pytest.approx(10)
    assert applied_life == pytest.approx(4.75)
    assert st.current_shield == pytest.approx(80)
    assert st.current_life == pytest.approx(100)
    assert st.shield_repaired == pytest.approx(10)
    assert st.life_healed == pytest.approx(4.75)


def test_instant_heal_logs_and_snapshots(heavy):
    heavy.apply_damage(10)
    heavy.heal_instant("shield", 5)
    assert heavy.logs[0].message == "Healed 5 shield"
    assert heavy.logs[0].category is LogCategory.HEAL
    assert heavy.history_size == 3


def test_shield_heal_ignored_when_permanently_broken(heavy):
    heavy.apply_damage(80)
    assert heavy.state.is_permanently_broken
    applied = heavy.heal_instant("shield", 40)
    assert applied == 0
    assert heavy.state.current_shield == 0
    assert heavy.state.shield_repaired == 0
    # Still logged as attempted
    assert heavy.logs[0].message == "Healed 40 shield"


def test_life_heal_ignored_when_defeated(unshielded):
    unshielded.apply_damage(200)
    assert unshielded.heal_instant("life", 50) == 0
    assert unshielded.state.current_life == 0
    assert unshielded.state.life_healed == 0


def test_unknown_target_is_rejected(heavy):
    with pytest.raises(ValueError):
        heavy.heal_instant("armor", 10)


def test_over_time_heal_cleared_after_two_seconds(heavy):
    heavy.apply_damage(40)  # shield 40/80
    regen = heavy.start_over_time_heal("shield", 50, 5)
    assert regen.per_tick == pytest.approx(1.0)
    heavy.clock.advance(2.0)
    heavy.clear_active_heals()
    heavy.clock.advance(5.0)

    assert regen.ticks == 20
    assert heavy.state.current_shield == pytest.approx(60)
    assert heavy.state.shield_repaired == pytest.approx(20)
    assert heavy.active_regenerations == []


def test_regeneration_stops_after_nominal_duration(make_sim):
    sim = make_sim(NO_SHIELD)
    sim.apply_damage(90)
    regen = sim.start_over_time_heal("life", 10, 1)
    sim.clock.advance(3.0)
    assert regen.ticks == 10
    assert regen.applied == pytest.approx(10)
    assert sim.state.current_life == pytest.approx(20)
    assert regen.active is False


def test_regeneration_can_run_until_cleared(make_sim):
    sim = make_sim(NO_SHIELD, regen_stops_after_duration=False)
    sim.apply_damage(90)
    regen = sim.start_over_time_heal("life", 10, 1)
    sim.clock.advance(3.0)
    assert regen.ticks == 30
    assert sim.state.current_life == pytest.approx(40)
    assert regen.active is True
    sim.clear_active_heals()
    sim.clock.advance(1.0)
    assert regen.ticks == 30


def test_regeneration_ticks_clamp_to_capacity(heavy):
    heavy.apply_damage(5)  # shield 75
    regen = heavy.start_over_time_heal("shield", 50, 5)
    heavy.clock.advance(5.0)
    assert heavy.state.current_shield == pytest.approx(80)
    assert regen.applied == pytest.approx(5)
    assert heavy.state.shield_repaired == pytest.approx(5)


def test_multiple_regenerations_coexist(make_sim):
    sim = make_sim(ShieldConfiguration(80, 50, 100))
    sim.apply_damage(60)  # shield 20, life 70
    sim.start_over_time_heal("shield", 10, 1)
    sim.start_over_time_heal("life", 10, 1)
    assert len(sim.active_regenerations) == 2
    sim.clock.advance(1.0)
    assert sim.state.current_shield == pytest.approx(30)
    assert sim.state.current_life == pytest.approx(80)


def test_regeneration_start_is_logged_without_snapshot(heavy):
    heavy.start_over_time_heal("life", 20, 4)
    assert heavy.logs[0].message == "Started life regeneration: 20 over 4s"
    assert heavy.history_size == 1


def test_reconfiguration_cancels_regeneration(heavy):
    heavy.apply_damage(40)
    regen = heavy.start_over_time_heal("shield", 50, 5)
    heavy.apply_custom_settings(60, 30, 120)
    heavy.clock.advance(1.0)
    assert regen.ticks == 0
    assert heavy.state.current_shield == 60


def test_damage_and_tick_scheduled_together_run_in_order(heavy):
    heavy.apply_damage(40)  # shield 40
    heavy.start_over_time_heal("shield", 10, 1)  # +1.0 per tick
    # Queued after the tick due at t=0.1, so it runs second
    heavy.clock.call_later(0.1, lambda: heavy.apply_damage(45))
    heavy.clock.advance(0.1)
    # 40 + 1 -> 41, then 41 absorbed, shield 0 but durability 80 - 40 - 41 < 0
    assert heavy.state.current_shield == 0
    assert heavy.state.is_permanently_broken is True


def test_invalid_over_time_arguments(heavy):
    with pytest.raises(ValueError):
        heavy.start_over_time_heal("life", 10, 0)


def test_refused_shield_heal_warns(heavy, caplog):
    heavy.apply_damage(80)
    with caplog.at_level(logging.WARNING, logger="shieldsim.combat.healing"):
        heavy.heal_instant("shield", 40)
    assert "shield heal refused" in caplog.text
    assert any(r.levelno == logging.WARNING for r in caplog.records)


def test_regeneration_finishing_is_logged(make_sim, caplog):
    sim = make_sim(NO_SHIELD)
    sim.apply_damage(50)
    regen = sim.start_over_time_heal("life", 10, 1)
    with caplog.at_level(logging.INFO, logger="shieldsim.combat.simulator"):
        sim.clock.advance(0.5)
        assert "finished" not in caplog.text
        sim.clock.advance(1.0)
    assert f"Regeneration #{regen.id} finished after 10 ticks" in caplog.text
