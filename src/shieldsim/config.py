from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from importlib.resources import files as resource_files
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .errors import ConfigError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SimulatorConfig:
    """
    Simulator configuration with sensible defaults.

    You can override by providing a YAML file with keys:
      - max_history: int (default 50), number of undo/redo snapshots kept
      - tick_interval: float (default 0.1), seconds between regeneration ticks
      - default_max_life: float (default 100), life used when a preset omits it
      - regen_stops_after_duration: bool (default true). When false, over-time
        heals keep ticking until clear_active_heals() is called.
    """

    max_history: int = 50
    tick_interval: float = 0.1
    default_max_life: float = 100.0
    regen_stops_after_duration: bool = True

    def __post_init__(self) -> None:
        if self.max_history < 1:
            raise ConfigError("max_history must be >= 1")
        if self.tick_interval <= 0:
            raise ConfigError("tick_interval must be positive")
        if self.default_max_life <= 0:
            raise ConfigError("default_max_life must be positive")
        if not isinstance(self.regen_stops_after_duration, bool):
            raise ConfigError("regen_stops_after_duration must be true or false")

    @staticmethod
    def default() -> "SimulatorConfig":
        return SimulatorConfig()

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "SimulatorConfig":
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = sorted(set(raw) - known)
        if unknown:
            logger.warning("Ignoring unknown simulator settings: %s", ", ".join(unknown))
        try:
            return cls(
                max_history=int(raw.get("max_history", 50)),
                tick_interval=float(raw.get("tick_interval", 0.1)),
                default_max_life=float(raw.get("default_max_life", 100.0)),
                regen_stops_after_duration=raw.get("regen_stops_after_duration", True),
            )
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"Invalid simulator settings: {exc}") from exc


def load_simulator_config(path: Optional[Union[str, Path]] = None) -> SimulatorConfig:
    """Load simulator settings from YAML.

    If path is None, loads the embedded default resource at
    shieldsim/data/simulator.yaml.
    """
    if path is None:
        text = resource_files("shieldsim.data").joinpath("simulator.yaml").read_text(encoding="utf-8")
        logger.debug("Loaded embedded simulator config resource")
    else:
        try:
            text = Path(path).read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"Cannot read simulator config {path}: {exc}") from exc
        logger.debug("Loaded simulator config from path: %s", path)

    try:
        raw = yaml.safe_load(text) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Malformed simulator config: {exc}") from exc
    if not isinstance(raw, dict):
        raise ConfigError("Simulator config must be a mapping")

    cfg = SimulatorConfig.from_dict(raw)
    logger.info(
        "Simulator config: max_history=%d tick_interval=%s regen_stops_after_duration=%s",
        cfg.max_history,
        cfg.tick_interval,
        cfg.regen_stops_after_duration,
    )
    return cfg
