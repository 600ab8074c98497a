"""
Puzzle session: the explicit state container a UI owns.

Holds the loaded level, the (current, past, future) history triple and the
derived status. Every call returns a new session; the engine functions it
delegates to stay stateless.
"""

import logging
from dataclasses import dataclass, replace
from typing import Any, Optional, Tuple

from bao_core.form import clone_forest
from bao_core.types import Forest
from bao_laws.errors import NotApplicable

from . import history
from .availability import LOAD_LEVEL_REASON, Availability, can_apply, evaluate_availability
from .engine import apply
from .goal import GameStatus, derive_status
from .history import HistoryState
from .operations import (
    EMPTY_SELECTION,
    UNCONSTRAINED,
    LevelConstraints,
    OperationKind,
    OperationResult,
    Selection,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PuzzleSession:
    """
    level: the loaded level (anything with start, goal and constraints), or
        None before the first load
    """
    level: Optional[Any] = None
    history: HistoryState = HistoryState()
    goal: Optional[Forest] = None
    status: GameStatus = GameStatus.IDLE

    @property
    def forest(self) -> Forest:
        return self.history.current

    @property
    def moves(self) -> int:
        return len(self.history.past)

    @property
    def constraints(self) -> LevelConstraints:
        if self.level is None:
            return UNCONSTRAINED
        return self.level.constraints

    @property
    def is_idle(self) -> bool:
        return self.level is None


def _with_history(session: PuzzleSession, state: HistoryState) -> PuzzleSession:
    status = derive_status(
        state.current,
        session.goal,
        moves=len(state.past),
        max_moves=session.constraints.max_moves,
    )
    return replace(session, history=state, status=status)


def load_level(level: Any) -> PuzzleSession:
    """
    Start a session on `level`; start and goal forests are copied so every
    load gets fresh identities.
    """
    session = PuzzleSession(level=level, goal=clone_forest(level.goal))
    logger.debug("loaded level %s", getattr(level, "id", "?"))
    return _with_history(session, history.start(clone_forest(level.start)))


def reset(session: PuzzleSession) -> PuzzleSession:
    """Back to the level's start with empty history."""
    if session.level is None:
        return session
    return load_level(session.level)


def apply_operation(
    session: PuzzleSession,
    kind: OperationKind,
    selection: Selection = EMPTY_SELECTION,
) -> Tuple[PuzzleSession, OperationResult]:
    """
    Apply an operation to the current forest.

    On success the old forest is pushed to history, redo is cleared and the
    status re-derived. On failure the session is returned unchanged.
    """
    if session.is_idle:
        return session, OperationResult(error=NotApplicable(LOAD_LEVEL_REASON))
    result = apply(kind, session.forest, selection, session.constraints)
    if not result.ok:
        return session, result
    return _with_history(session, history.record(session.history, result.forest)), result


def undo(session: PuzzleSession) -> PuzzleSession:
    if not session.history.can_undo:
        return session
    return _with_history(session, history.undo(session.history))


def redo(session: PuzzleSession) -> PuzzleSession:
    if not session.history.can_redo:
        return session
    return _with_history(session, history.redo(session.history))


def availability(session: PuzzleSession, selection: Selection = EMPTY_SELECTION):
    """Availability map for the session's current forest and constraints."""
    forest = None if session.is_idle else session.forest
    return evaluate_availability(forest, selection, session.constraints)


def can_apply_in_session(
    session: PuzzleSession,
    kind: OperationKind,
    selection: Selection = EMPTY_SELECTION,
) -> Availability:
    if session.is_idle:
        return Availability(False, LOAD_LEVEL_REASON)
    return can_apply(kind, session.forest, selection, session.constraints)
