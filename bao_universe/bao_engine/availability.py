"""
Availability oracle.

Answers "could this operation run on this selection?" by running the same
precondition resolvers apply() uses, without building any output. Safe to
call on every selection change.
"""

from dataclasses import dataclass
from typing import Dict, Optional

from bao_core.types import Forest
from bao_laws.errors import OperationError

from .engine import check
from .operations import (
    EMPTY_SELECTION,
    OPERATION_CONTROLS,
    LevelConstraints,
    OperationKind,
    Selection,
    parse_operation,
)

LOAD_LEVEL_REASON = "Load a level to use axiom actions."

FALLBACK_REASONS = {
    OperationKind.CLARIFY: "Select a round-square pair to clarify.",
    OperationKind.ENFOLD_FRAME: "Select sibling forms or choose a parent to add a frame.",
    OperationKind.ENFOLD_MARK: "Select sibling forms or choose a parent to add a mark.",
    OperationKind.DISPERSE: "Select contents inside a single square to disperse.",
    OperationKind.COLLECT: "Select round frames that share the same context to collect.",
    OperationKind.CANCEL: "Select a form and its reflection (or an empty angle) to cancel.",
    OperationKind.CREATE: "Choose a parent or template to create a reflection pair.",
}


@dataclass(frozen=True)
class Availability:
    available: bool
    reason: Optional[str] = None


AVAILABLE = Availability(available=True)


def can_apply(
    kind: OperationKind,
    forest: Forest,
    selection: Selection = EMPTY_SELECTION,
    constraints: Optional[LevelConstraints] = None,
) -> Availability:
    """
    Availability of one operation.

    Returns:
        Availability(True) or Availability(False, reason) where reason is
        the refusing precondition's message
    """
    kind = parse_operation(kind)
    try:
        check(kind, forest, selection, constraints)
    except OperationError as e:
        return Availability(available=False, reason=e.reason or FALLBACK_REASONS[kind])
    return AVAILABLE


def evaluate_availability(
    forest: Optional[Forest],
    selection: Selection = EMPTY_SELECTION,
    constraints: Optional[LevelConstraints] = None,
) -> Dict[OperationKind, Availability]:
    """
    Availability of all seven operations, evaluated independently.

    A forest of None means no level is loaded: everything is unavailable.
    """
    if forest is None:
        return {kind: Availability(False, LOAD_LEVEL_REASON) for kind in OperationKind}
    return {kind: can_apply(kind, forest, selection, constraints) for kind in OperationKind}


def control_availability(
    control: str,
    forest: Optional[Forest],
    selection: Selection = EMPTY_SELECTION,
    constraints: Optional[LevelConstraints] = None,
) -> Availability:
    """
    Availability of a UI control that offers a choice between related
    operations (e.g. "enfold" = frame or mark): available if any choice is.

    Raises:
        ValueError: Unknown control
    """
    if control not in OPERATION_CONTROLS:
        raise ValueError(f"Unknown control '{control}'. Valid: {list(OPERATION_CONTROLS)}")
    if forest is None:
        return Availability(False, LOAD_LEVEL_REASON)

    first_refusal = None
    for kind in OPERATION_CONTROLS[control]:
        availability = can_apply(kind, forest, selection, constraints)
        if availability.available:
            return availability
        if first_refusal is None:
            first_refusal = availability
    return first_refusal
