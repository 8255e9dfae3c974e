from __future__ import annotations

import datetime as dt
import itertools
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Tuple, Union

logger = logging.getLogger(__name__)


class LogCategory(str, Enum):
    ATTACK = "attack"
    HEAL = "heal"
    SHIELD_BREAK = "shield-break"
    PERMANENT_BREAK = "permanent-break"
    DEFEATED = "defeated"
    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


_LOUD = {LogCategory.PERMANENT_BREAK, LogCategory.DEFEATED, LogCategory.ERROR}

_ids = itertools.count(1)


@dataclass(frozen=True)
class LogEntry:
    """A single action log line shown to the user.

    Attributes:
        id: Process-unique identifier.
        message: Human-readable text.
        category: What kind of event produced the entry.
        timestamp: Wall-clock time the entry was recorded.
    """

    message: str
    category: LogCategory
    timestamp: dt.datetime = field(default_factory=dt.datetime.now)
    id: int = field(default_factory=lambda: next(_ids))


class ActionLog:
    """Append-only action log; entries are presented newest first.

    The log is cleared on reconfiguration and replaced wholesale by undo/redo.
    """

    def __init__(self) -> None:
        self._entries: List[LogEntry] = []

    def __len__(self) -> int:
        return len(self._entries)

    def add(self, message: str, category: Union[LogCategory, str]) -> LogEntry:
        entry = LogEntry(message=message, category=LogCategory(category))
        self._entries.append(entry)
        # Forward to standard logging for visibility if configured.
        if entry.category in _LOUD:
            logger.info(message)
        else:
            logger.debug(message)
        return entry

    def entries(self) -> List[LogEntry]:
        """Entries newest first."""
        return list(reversed(self._entries))

    def freeze(self) -> Tuple[LogEntry, ...]:
        """Structural capture in insertion order, for snapshots."""
        return tuple(self._entries)

    def restore(self, entries: Iterable[LogEntry]) -> None:
        self._entries = list(entries)

    def clear(self) -> None:
        logger.debug("Clearing action log entries (count=%d)", len(self._entries))
        self._entries.clear()

    def to_text(self) -> str:
        return "\n".join(f"[{e.timestamp:%H:%M:%S}] {e.message}" for e in self.entries())
