import pytest
import yaml

from shieldsim.catalog import load_catalog
from shieldsim.combat.state import HealTarget
from shieldsim.errors import CatalogValidationError, UnknownPresetError


def test_bundled_catalog_loads():
    catalog = load_catalog()
    heavy = catalog.shield_preset("heavy")
    assert heavy.charges == 80
    assert heavy.dr == 52.5
    assert heavy.life == 100
    assert set(catalog.preset_keys()) >= {"none", "light", "medium", "heavy"}
    assert catalog.max_history == 50


def test_combat_items_sorted_by_damage():
    items = load_catalog().combat_items()
    damages = [i.damage for i in items]
    assert damages == sorted(damages, reverse=True)
    categories = {i.category for i in items}
    assert categories == {"weapon", "gadget", "deployable"}


def test_headshot_multiplier_prefers_item_override():
    catalog = load_catalog()
    kettle = catalog.combat_item("Kettle")
    grenade = catalog.combat_item("Frag Grenade")
    assert catalog.multiplier_for(kettle, "head") == 2
    assert catalog.multiplier_for(grenade, "head") == 2.5
    assert catalog.multiplier_for(kettle, "leg") == 0.75
    assert catalog.headshot_multiplier_for(kettle) == 2
    assert catalog.headshot_multiplier_for(grenade) == catalog.multipliers.head


def test_healing_items_by_target():
    catalog = load_catalog()
    shield_items = {i.name: i for i in catalog.healing_items(HealTarget.SHIELD)}
    assert shield_items["Arc Powercell"].is_instant
    bandage = catalog.healing_item("life", "Bandage")
    assert bandage.target is HealTarget.LIFE
    assert not bandage.is_instant


def test_unknown_entries_raise_key_errors():
    catalog = load_catalog()
    with pytest.raises(UnknownPresetError):
        catalog.shield_preset("titanium")
    with pytest.raises(KeyError):
        catalog.combat_item("Railgun")


def test_input_range_clamp():
    rng = load_catalog().input_ranges["trigger_count"]
    assert rng.clamp(0) == 1
    assert rng.clamp(1000) == 100


def test_custom_catalog_from_file(tmp_path):
    doc = {
        "shield_presets": {"only": {"name": "Only", "charges": 10, "dr": 10}},
        "healing_items": {"life": {"Tonic": {"amount": 5}}},
        "weapons": {"Pea Shooter": {"damage": 1}},
    }
    path = tmp_path / "catalog.yaml"
    path.write_text(yaml.safe_dump(doc), encoding="utf-8")
    catalog = load_catalog(path, default_max_life=250)
    assert catalog.shield_preset("only").life == 250
    assert catalog.healing_items("shield") == []
    assert catalog.combat_item("Pea Shooter").effective_projectiles == 1


def test_invalid_catalog_is_rejected(tmp_path):
    doc = {
        "shield_presets": {"broken": {"name": "Broken", "charges": 10, "dr": 150}},
        "healing_items": {},
        "weapons": {},
    }
    path = tmp_path / "bad.yaml"
    path.write_text(yaml.safe_dump(doc), encoding="utf-8")
    with pytest.raises(CatalogValidationError) as ei:
        load_catalog(path)
    assert "validation failed" in str(ei.value).lower()
    assert "dr" in ei.value.to_human()


def test_unreadable_catalog_path_raises_catalog_error(tmp_path):
    with pytest.raises(CatalogValidationError) as ei:
        load_catalog(tmp_path / "missing.yaml")
    assert "Cannot read catalog" in str(ei.value)
    assert ei.value.errors == []
