"""
bao_engine: Operation engine, availability oracle, history and goal checks.

Modules:
- operations.py: OperationKind, Axiom, Selection, LevelConstraints, OperationResult
- engine.py: apply() dispatch over the axiom laws
- availability.py: can_apply() / evaluate_availability() without side effects
- history.py: linear undo/redo over forest snapshots
- goal.py: is_solved() and status derivation
- session.py: PuzzleSession state container
"""

from .availability import Availability, can_apply, control_availability, evaluate_availability
from .engine import apply
from .goal import GameStatus, derive_status, forests_equivalent, forms_equivalent, is_solved
from .history import HistoryState
from .operations import (
    Axiom,
    LevelConstraints,
    OperationKind,
    OperationResult,
    Selection,
)
from .session import PuzzleSession

__all__ = [
    "apply",
    "can_apply",
    "evaluate_availability",
    "control_availability",
    "Availability",
    "is_solved",
    "forms_equivalent",
    "forests_equivalent",
    "derive_status",
    "GameStatus",
    "HistoryState",
    "Axiom",
    "OperationKind",
    "OperationResult",
    "Selection",
    "LevelConstraints",
    "PuzzleSession",
]
