import logging
import os
from typing import Optional, Union

LOG_LEVEL_ENV = "SHIELDSIM_LOG_LEVEL"
LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"

# Regeneration ticks log at DEBUG every tick_interval; they stay quiet unless asked for.
_TICK_LOGGERS = ("shieldsim.engine.clock",)


def _resolve_level(level: Union[int, str, None], default_level: int) -> int:
    if isinstance(level, int):
        return level
    name = level or os.getenv(LOG_LEVEL_ENV)
    if not name:
        return default_level
    resolved = logging.getLevelName(name.strip().upper())
    if not isinstance(resolved, int):
        logging.getLogger(__name__).warning("Unknown log level %r, using %s", name, logging.getLevelName(default_level))
        return default_level
    return resolved


def configure_logging(
    level: Union[int, str, None] = None,
    default_level: int = logging.INFO,
    verbose_ticks: bool = False,
) -> int:
    """Configure logging for drivers of the simulator.

    The level comes from ``level`` if given, else the SHIELDSIM_LOG_LEVEL env
    var, else ``default_level``. It is applied to the ``shieldsim`` package
    logger; the root logger only gets the shared format via basicConfig.
    Clock scheduling chatter is held at INFO unless ``verbose_ticks``.

    Returns the resolved level.
    """
    resolved = _resolve_level(level, default_level)
    logging.basicConfig(level=resolved, format=LOG_FORMAT)
    logging.getLogger("shieldsim").setLevel(resolved)
    for name in _TICK_LOGGERS:
        logging.getLogger(name).setLevel(logging.NOTSET if verbose_ticks else max(resolved, logging.INFO))
    return resolved
