"""
Axiom operation engine.

apply() is pure: it never mutates the forest or the selection it is given,
and is all-or-nothing. Failures come back as OperationResult values carrying
a typed OperationError; the caller's forest is left as it was.
"""

import logging
from typing import Callable, Dict, Optional

from bao_core.types import Forest
from bao_laws import arrangement, inversion, reflection
from bao_laws.errors import NotApplicable, OperationError

from .operations import (
    EMPTY_SELECTION,
    UNCONSTRAINED,
    LevelConstraints,
    OperationKind,
    OperationResult,
    Selection,
    parse_operation,
)

logger = logging.getLogger(__name__)

OPERATIONS: Dict[OperationKind, Callable[[Forest, Selection], Forest]] = {
    OperationKind.CLARIFY: lambda forest, sel: inversion.clarify(forest, sel.node_ids),
    OperationKind.ENFOLD_FRAME: lambda forest, sel: inversion.enfold(
        forest, sel.node_ids, sel.parent_id, "frame"
    ),
    OperationKind.ENFOLD_MARK: lambda forest, sel: inversion.enfold(
        forest, sel.node_ids, sel.parent_id, "mark"
    ),
    OperationKind.DISPERSE: lambda forest, sel: arrangement.disperse(forest, sel.node_ids),
    OperationKind.COLLECT: lambda forest, sel: arrangement.collect(forest, sel.node_ids),
    OperationKind.CANCEL: lambda forest, sel: reflection.cancel(forest, sel.node_ids),
    OperationKind.CREATE: lambda forest, sel: reflection.create(
        forest, sel.node_ids, sel.parent_id
    ),
}

# Precondition checks only; same code paths as OPERATIONS, no output built
RESOLVERS: Dict[OperationKind, Callable[[Forest, Selection], object]] = {
    OperationKind.CLARIFY: lambda forest, sel: inversion.resolve_clarify(forest, sel.node_ids),
    OperationKind.ENFOLD_FRAME: lambda forest, sel: inversion.resolve_enfold(
        forest, sel.node_ids, sel.parent_id, "frame"
    ),
    OperationKind.ENFOLD_MARK: lambda forest, sel: inversion.resolve_enfold(
        forest, sel.node_ids, sel.parent_id, "mark"
    ),
    OperationKind.DISPERSE: lambda forest, sel: arrangement.resolve_disperse(forest, sel.node_ids),
    OperationKind.COLLECT: lambda forest, sel: arrangement.resolve_collect(forest, sel.node_ids),
    OperationKind.CANCEL: lambda forest, sel: reflection.resolve_cancel(forest, sel.node_ids),
    OperationKind.CREATE: lambda forest, sel: reflection.resolve_create(
        forest, sel.node_ids, sel.parent_id
    ),
}


def check(
    kind: OperationKind,
    forest: Forest,
    selection: Selection = EMPTY_SELECTION,
    constraints: Optional[LevelConstraints] = None,
) -> None:
    """
    Run the precondition for `kind` without building output.

    Raises:
        OperationError: If the operation cannot be applied
    """
    kind = parse_operation(kind)
    blocked = (constraints or UNCONSTRAINED).blocked_reason(kind)
    if blocked is not None:
        raise NotApplicable(blocked)
    RESOLVERS[kind](tuple(forest), selection)


def apply(
    kind: OperationKind,
    forest: Forest,
    selection: Selection = EMPTY_SELECTION,
    constraints: Optional[LevelConstraints] = None,
) -> OperationResult:
    """
    Apply one axiom operation.

    Args:
        kind: Operation (OperationKind or its name)
        forest: Current forest (not modified)
        selection: Selected identities and optional insertion parent
        constraints: Level limits on axioms/operations

    Returns:
        OperationResult with the new forest, or with the OperationError
        describing why nothing changed

    Raises:
        ValueError: Unknown operation name
    """
    kind = parse_operation(kind)
    forest = tuple(forest)
    blocked = (constraints or UNCONSTRAINED).blocked_reason(kind)
    if blocked is not None:
        logger.debug("%s blocked by level constraints: %s", kind.value, blocked)
        return OperationResult(error=NotApplicable(blocked))

    try:
        result = OPERATIONS[kind](forest, selection)
    except OperationError as e:
        logger.debug("%s rejected: %s", kind.value, e)
        return OperationResult(error=e)

    logger.debug("%s applied: %d -> %d top-level forms", kind.value, len(forest), len(result))
    return OperationResult(forest=result)
