"""
Goal evaluation: has the player's forest reached the level's goal?

Equality is structural: identities and sibling order are ignored, and there
is no subset or superset matching.
"""

from enum import Enum
from typing import Optional, Sequence

from bao_core.signature import canonical_signature, canonical_signature_forest
from bao_core.types import Form


class GameStatus(Enum):
    IDLE = "idle"
    IN_PROGRESS = "in_progress"
    WON = "won"


def forms_equivalent(left: Form, right: Form) -> bool:
    return canonical_signature(left) == canonical_signature(right)


def forests_equivalent(left: Sequence[Form], right: Sequence[Form]) -> bool:
    """Multiset equality of two forests."""
    if len(left) != len(right):
        return False
    return canonical_signature_forest(left) == canonical_signature_forest(right)


def is_solved(current: Sequence[Form], goal: Sequence[Form]) -> bool:
    return forests_equivalent(current, goal)


def derive_status(
    current: Optional[Sequence[Form]],
    goal: Optional[Sequence[Form]],
    moves: int = 0,
    max_moves: Optional[int] = None,
) -> GameStatus:
    """
    IDLE before a level is loaded, WON when solved within the move budget
    (if any), IN_PROGRESS otherwise.
    """
    if current is None or goal is None:
        return GameStatus.IDLE
    within_budget = max_moves is None or moves <= max_moves
    if within_budget and is_solved(current, goal):
        return GameStatus.WON
    return GameStatus.IN_PROGRESS
