"""
Linear undo/redo over immutable forest snapshots.

Forms are never mutated after construction, so snapshots are shared rather
than copied. Every transition returns a new HistoryState; nothing is
modified in place.
"""

import logging
from dataclasses import dataclass, replace
from typing import Tuple

from bao_core.types import Forest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HistoryState:
    """
    current: the forest the player sees
    past: earlier forests, oldest first
    future: undone forests, next-to-redo first
    """
    current: Forest = ()
    past: Tuple[Forest, ...] = ()
    future: Tuple[Forest, ...] = ()

    @property
    def can_undo(self) -> bool:
        return bool(self.past)

    @property
    def can_redo(self) -> bool:
        return bool(self.future)


def start(forest: Forest) -> HistoryState:
    return HistoryState(current=tuple(forest))


def record(state: HistoryState, forest: Forest) -> HistoryState:
    """Adopt a new forest; the old one goes to `past` and redo is cleared."""
    return HistoryState(
        current=tuple(forest),
        past=state.past + (state.current,),
        future=(),
    )


def undo(state: HistoryState) -> HistoryState:
    """Step back one snapshot; no-op when there is nothing to undo."""
    if not state.past:
        return state
    logger.debug("undo: %d snapshots behind", len(state.past) - 1)
    return replace(
        state,
        current=state.past[-1],
        past=state.past[:-1],
        future=(state.current,) + state.future,
    )


def redo(state: HistoryState) -> HistoryState:
    """Step forward one snapshot; no-op when there is nothing to redo."""
    if not state.future:
        return state
    logger.debug("redo: %d snapshots ahead", len(state.future) - 1)
    return replace(
        state,
        current=state.future[0],
        past=state.past + (state.current,),
        future=state.future[1:],
    )
