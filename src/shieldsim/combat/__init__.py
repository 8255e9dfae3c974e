"""
Combat package for the shield simulator.

Contains:
- Combat state and shield configuration records.
- Volley resolution shared by damage application and fatality previews.
- Clamped healing, over-time regeneration handles and EHP.
- The action log and the bounded undo/redo snapshot store.
- ShieldSimulator, the engine instance exposing every operation.
"""

from .damage import DEFEAT_THRESHOLD, Volley, VolleyOutcome, is_fatal, resolve_volley
from .ehp import calculate_ehp
from .healing import Regeneration
from .history import Snapshot, SnapshotStore
from .log import ActionLog, LogCategory, LogEntry
from .simulator import DamageResult, ShieldSimulator
from .state import CombatState, HealTarget, ShieldConfiguration

__all__ = [
    "DEFEAT_THRESHOLD",
    "ActionLog",
    "CombatState",
    "DamageResult",
    "HealTarget",
    "LogCategory",
    "LogEntry",
    "Regeneration",
    "ShieldConfiguration",
    "ShieldSimulator",
    "Snapshot",
    "SnapshotStore",
    "Volley",
    "VolleyOutcome",
    "calculate_ehp",
    "is_fatal",
    "resolve_volley",
]
