from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .log import LogEntry
from .state import CombatState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Snapshot:
    """Immutable capture of the combat state and the action log.

    ``state`` is a private copy; callers receive further copies from
    ``restore_state()`` so the stored one is never mutated.
    """

    state: CombatState
    log: Tuple[LogEntry, ...]

    @classmethod
    def capture(cls, state: CombatState, log: Tuple[LogEntry, ...]) -> "Snapshot":
        return cls(state=state.copy(), log=tuple(log))

    def restore_state(self) -> CombatState:
        return self.state.copy()


class SnapshotStore:
    """Bounded linear undo/redo history.

    Holds at most ``max_history`` snapshots and a cursor pointing at the one
    that matches the live state. Saving after an undo discards the undone
    branch; when the bound is exceeded the oldest snapshot is evicted.
    """

    def __init__(self, max_history: int = 50) -> None:
        if max_history < 1:
            raise ValueError("max_history must be >= 1")
        self._max_history = max_history
        self._snapshots: List[Snapshot] = []
        self._cursor = -1

    @property
    def max_history(self) -> int:
        return self._max_history

    @property
    def cursor(self) -> int:
        return self._cursor

    def __len__(self) -> int:
        return len(self._snapshots)

    @property
    def can_undo(self) -> bool:
        return self._cursor > 0

    @property
    def can_redo(self) -> bool:
        return self._cursor < len(self._snapshots) - 1

    @property
    def current(self) -> Optional[Snapshot]:
        if self._cursor < 0:
            return None
        return self._snapshots[self._cursor]

    def reset(self, baseline: Snapshot) -> None:
        """Drop all history and start over from ``baseline`` at cursor 0."""
        self._snapshots = [baseline]
        self._cursor = 0
        logger.debug("History reset to a single baseline snapshot")

    def save(self, snapshot: Snapshot) -> None:
        del self._snapshots[self._cursor + 1:]
        self._snapshots.append(snapshot)
        if len(self._snapshots) > self._max_history:
            dropped = len(self._snapshots) - self._max_history
            del self._snapshots[0:dropped]
            logger.debug("History bound exceeded, evicted=%d oldest snapshots", dropped)
        self._cursor = min(self._cursor + 1, self._max_history - 1)
        logger.debug("Saved snapshot %d/%d", self._cursor + 1, len(self._snapshots))

    def undo(self) -> Optional[Snapshot]:
        """Step back one snapshot; returns it, or None at the oldest entry."""
        if not self.can_undo:
            return None
        self._cursor -= 1
        logger.debug("Undo -> cursor=%d", self._cursor)
        return self._snapshots[self._cursor]

    def redo(self) -> Optional[Snapshot]:
        """Step forward one snapshot; returns it, or None at the newest entry."""
        if not self.can_redo:
            return None
        self._cursor += 1
        logger.debug("Redo -> cursor=%d", self._cursor)
        return self._snapshots[self._cursor]
