"""
Level data shapes and validation.

Declarative node:  {"boundary": "round", "label"?: str, "children"?: [...]}
Declarative level: {"id", "name", "description"?, "start", "goal",
                    "allowedAxioms"?, "allowedOperations"?, "maxMoves"?,
                    "difficulty", "solution"?}
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from bao_core.types import BoundaryType, Forest
from bao_engine.operations import (
    UNCONSTRAINED,
    LevelConstraints,
    parse_axiom,
    parse_operation,
)

RawFormNode = Dict[str, Any]
RawLevel = Dict[str, Any]

MIN_DIFFICULTY = 1
MAX_DIFFICULTY = 5


class LevelFormatError(ValueError):
    """Raised when declarative level data is malformed."""

    def __init__(self, message: str, level_id: Optional[str] = None):
        self.level_id = level_id
        prefix = f"[{level_id}] " if level_id else ""
        super().__init__(f"{prefix}{message}")


@dataclass(frozen=True)
class LevelDefinition:
    """A hydrated level: live forests plus the level's limits."""
    id: str
    name: str
    start: Forest
    goal: Forest
    difficulty: int
    description: Optional[str] = None
    constraints: LevelConstraints = UNCONSTRAINED
    solution: Tuple[Dict[str, Any], ...] = field(default_factory=tuple)

    @property
    def max_moves(self) -> Optional[int]:
        return self.constraints.max_moves


def validate_raw_node(node: Any, where: str, level_id: Optional[str] = None) -> None:
    """
    Raises:
        LevelFormatError: Unknown boundary, atom without label, atom with
            children, label on a non-atom, or malformed children
    """
    if not isinstance(node, dict):
        raise LevelFormatError(f"{where}: expected an object, got {type(node).__name__}", level_id)
    try:
        boundary = BoundaryType(node.get("boundary"))
    except ValueError:
        raise LevelFormatError(f"{where}: unknown boundary {node.get('boundary')!r}", level_id)

    children = node.get("children")
    if boundary is BoundaryType.ATOM:
        label = node.get("label")
        if not isinstance(label, str) or not label:
            raise LevelFormatError(f"{where}: atom requires a non-empty label", level_id)
        if children:
            raise LevelFormatError(f"{where}: atom cannot have children", level_id)
        return

    if "label" in node and node["label"] is not None:
        raise LevelFormatError(f"{where}: only atoms carry labels", level_id)
    if children is None:
        return
    if not isinstance(children, list):
        raise LevelFormatError(f"{where}: children must be a list", level_id)
    for i, child in enumerate(children):
        validate_raw_node(child, f"{where}/{i}", level_id)


def _validate_forest(raw_forest: Any, key: str, level_id: str) -> None:
    if not isinstance(raw_forest, list):
        raise LevelFormatError(f"'{key}' must be a list of nodes", level_id)
    for i, node in enumerate(raw_forest):
        validate_raw_node(node, f"{key}/{i}", level_id)


def validate_raw_level(raw: Any) -> None:
    """
    Check a declarative level before hydration.

    Raises:
        LevelFormatError: On any structural problem
    """
    if not isinstance(raw, dict):
        raise LevelFormatError(f"Level must be an object, got {type(raw).__name__}")
    level_id = raw.get("id")
    if not isinstance(level_id, str) or not level_id:
        raise LevelFormatError("Level requires a non-empty string 'id'")
    if not isinstance(raw.get("name"), str):
        raise LevelFormatError("Level requires a string 'name'", level_id)

    for key in ("start", "goal"):
        if key not in raw:
            raise LevelFormatError(f"Level requires '{key}'", level_id)
        _validate_forest(raw[key], key, level_id)

    difficulty = raw.get("difficulty")
    if not isinstance(difficulty, int) or not MIN_DIFFICULTY <= difficulty <= MAX_DIFFICULTY:
        raise LevelFormatError(
            f"difficulty must be an integer in [{MIN_DIFFICULTY}, {MAX_DIFFICULTY}], got {difficulty!r}",
            level_id,
        )

    max_moves = raw.get("maxMoves")
    if max_moves is not None and (not isinstance(max_moves, int) or max_moves < 0):
        raise LevelFormatError(f"maxMoves must be a non-negative integer, got {max_moves!r}", level_id)

    try:
        for axiom in raw.get("allowedAxioms") or []:
            parse_axiom(axiom)
        for operation in raw.get("allowedOperations") or []:
            parse_operation(operation)
    except ValueError as e:
        raise LevelFormatError(str(e), level_id)


def constraints_from_raw(raw: RawLevel) -> LevelConstraints:
    return LevelConstraints.build(
        allowed_axioms=raw.get("allowedAxioms"),
        allowed_operations=raw.get("allowedOperations"),
        max_moves=raw.get("maxMoves"),
    )
