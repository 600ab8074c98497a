"""
Scripted solution replay.

A step is {"op": kind, "select": [path, ...], "parent": path or None}.
Paths are resolved against the forest as it stands when the step runs, so
identities never appear in level data.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

from bao_core.forest import node_at_path, parse_path
from bao_core.types import Forest
from bao_engine.operations import OperationKind, OperationResult, Selection, parse_operation
from bao_engine.session import PuzzleSession, apply_operation, load_level

from .types import LevelDefinition

logger = logging.getLogger(__name__)


class ReplayError(ValueError):
    """Raised when a scripted step cannot be resolved against the forest."""


@dataclass(frozen=True)
class StepOutcome:
    index: int
    kind: OperationKind
    result: OperationResult


@dataclass(frozen=True)
class ReplayResult:
    session: PuzzleSession
    steps: Tuple[StepOutcome, ...]

    @property
    def all_applied(self) -> bool:
        return all(step.result.ok for step in self.steps)

    @property
    def failed_steps(self) -> List[StepOutcome]:
        return [step for step in self.steps if not step.result.ok]


def _resolve_id(forest: Forest, path_text: str, index: int) -> str:
    try:
        return node_at_path(forest, parse_path(path_text)).id
    except (IndexError, ValueError) as e:
        raise ReplayError(f"Step {index}: cannot resolve path '{path_text}': {e}")


def resolve_step(forest: Forest, step: Dict[str, Any], index: int = 0) -> Tuple[OperationKind, Selection]:
    """
    Turn a scripted step into an operation and a Selection over `forest`.

    Raises:
        ReplayError: Missing op, unknown op, or a path outside the forest
    """
    if "op" not in step:
        raise ReplayError(f"Step {index}: missing 'op'")
    try:
        kind = parse_operation(step["op"])
    except ValueError as e:
        raise ReplayError(f"Step {index}: {e}")
    node_ids = tuple(_resolve_id(forest, path, index) for path in step.get("select") or [])
    parent = step.get("parent")
    parent_id = _resolve_id(forest, parent, index) if parent is not None else None
    return kind, Selection(node_ids=node_ids, parent_id=parent_id)


def replay_solution(
    level: LevelDefinition,
    steps: Optional[Iterable[Dict[str, Any]]] = None,
) -> ReplayResult:
    """
    Load `level` and apply its scripted steps in order.

    Args:
        level: Hydrated level
        steps: Steps to run (defaults to the level's own solution)

    Returns:
        ReplayResult with the final session and every step's OperationResult.
        A refused step leaves the session as it was; later steps still run.

    Raises:
        ReplayError: If a step cannot be resolved
    """
    steps = list(level.solution if steps is None else steps)
    session = load_level(level)
    outcomes: List[StepOutcome] = []
    for i, step in enumerate(steps):
        kind, selection = resolve_step(session.forest, step, i)
        session, result = apply_operation(session, kind, selection)
        if not result.ok:
            logger.debug("level %s step %d (%s) refused: %s", level.id, i, kind.value, result.error)
        outcomes.append(StepOutcome(index=i, kind=kind, result=result))
    return ReplayResult(session=session, steps=tuple(outcomes))
