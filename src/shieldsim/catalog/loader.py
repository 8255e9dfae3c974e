from __future__ import annotations

import json
import logging
from functools import lru_cache
from importlib.resources import files as resource_files
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml
from jsonschema import Draft7Validator

from ..combat.state import HealTarget
from ..errors import CatalogValidationError
from .models import (
    Catalog,
    CombatItem,
    DamageMultipliers,
    HealingItem,
    InputRange,
    ShieldPreset,
)

logger = logging.getLogger(__name__)

_DATA_PKG = "shieldsim.data"


@lru_cache(maxsize=1)
def _load_catalog_schema() -> Dict[str, Any]:
    """Load the bundled catalog JSON schema (cached, the schema is static)."""
    text = resource_files(_DATA_PKG).joinpath("schemas/catalog.schema.json").read_text(encoding="utf-8")
    return json.loads(text)


def validate_catalog_dict(data: Any) -> None:
    """Validate a raw catalog document.

    Raises:
        CatalogValidationError listing every schema violation.
    """
    validator = Draft7Validator(_load_catalog_schema())
    errors = sorted(validator.iter_errors(data), key=lambda e: [str(p) for p in e.path])
    if errors:
        for err in errors:
            logger.error("Catalog schema validation error at %s: %s", list(err.path), err.message)
        raise CatalogValidationError("Catalog validation failed", errors)


def _display(raw: Mapping[str, Any]) -> Dict[str, str]:
    return {str(k): str(v) for k, v in (raw.get("display") or {}).items()}


def build_catalog(data: Mapping[str, Any], *, default_max_life: float = 100.0) -> Catalog:
    """Turn a validated catalog document into typed records."""
    presets = {
        key: ShieldPreset(
            key=key,
            name=str(raw["name"]),
            charges=float(raw["charges"]),
            dr=float(raw["dr"]),
            life=float(raw.get("life", default_max_life)),
            display=_display(raw),
        )
        for key, raw in data["shield_presets"].items()
    }

    healing: Dict[HealTarget, Dict[str, HealingItem]] = {}
    for target in HealTarget:
        items = (data.get("healing_items") or {}).get(target.value) or {}
        healing[target] = {
            name: HealingItem(
                name=name,
                target=target,
                amount=float(raw["amount"]),
                duration=float(raw.get("duration", 0)),
                use_time=float(raw.get("use_time", 0)),
                display=_display(raw),
            )
            for name, raw in items.items()
        }

    combat: Dict[str, CombatItem] = {}
    for section, category in (("weapons", "weapon"), ("gadgets", "gadget"), ("deployables", "deployable")):
        for name, raw in (data.get(section) or {}).items():
            if name in combat:
                logger.warning("Duplicate combat item %r in %s overrides earlier entry", name, section)
            combat[name] = CombatItem(
                name=name,
                category=category,
                damage=float(raw["damage"]),
                headshot_multiplier=float(raw["hsm"]) if raw.get("hsm") is not None else None,
                projectiles=int(raw["projectiles"]) if raw.get("projectiles") is not None else None,
                display=_display(raw),
            )

    mult_raw = data.get("damage_multipliers") or {}
    multipliers = DamageMultipliers(
        leg=float(mult_raw.get("leg", 0.75)),
        body=float(mult_raw.get("body", 1.0)),
        head=float(mult_raw.get("head", 2.5)),
    )
    ranges = {
        key: InputRange(
            min=float(raw["min"]),
            max=float(raw["max"]),
            step=float(raw["step"]),
            default=float(raw["default"]),
        )
        for key, raw in (data.get("input_ranges") or {}).items()
    }

    catalog = Catalog(
        shield_presets=presets,
        healing=healing,
        combat=combat,
        multipliers=multipliers,
        input_ranges=ranges,
        max_history=data.get("max_history"),
    )
    logger.debug(
        "Built catalog: %d presets, %d healing items, %d combat items",
        len(presets),
        sum(len(v) for v in healing.values()),
        len(combat),
    )
    return catalog


def load_catalog(path: Optional[Union[str, Path]] = None, *, default_max_life: float = 100.0) -> Catalog:
    """Load and validate a YAML (or JSON) catalog.

    If path is None, loads the embedded default resource at
    shieldsim/data/catalog.yaml.
    """
    if path is None:
        text = resource_files(_DATA_PKG).joinpath("catalog.yaml").read_text(encoding="utf-8")
        source = "<bundled catalog>"
    else:
        source = str(path)
        try:
            text = Path(path).read_text(encoding="utf-8")
        except OSError as exc:
            raise CatalogValidationError(f"Cannot read catalog {source}: {exc}") from exc

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise CatalogValidationError(f"Malformed catalog document {source}: {exc}") from exc

    validate_catalog_dict(data)
    catalog = build_catalog(data, default_max_life=default_max_life)
    logger.info("Loaded catalog from %s", source)
    return catalog
