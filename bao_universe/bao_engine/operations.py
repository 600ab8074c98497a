"""
Operation contract types: what the engine is asked to do and what it returns.
"""

from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Iterable, Optional, Tuple

from bao_core.types import Forest
from bao_laws.errors import ErrorKind, OperationError


class Axiom(str, Enum):
    INVERSION = "inversion"
    ARRANGEMENT = "arrangement"
    REFLECTION = "reflection"


class OperationKind(str, Enum):
    """The seven axiom operations (three forward/inverse pairs)."""
    CLARIFY = "clarify"
    ENFOLD_FRAME = "enfoldFrame"
    ENFOLD_MARK = "enfoldMark"
    DISPERSE = "disperse"
    COLLECT = "collect"
    CANCEL = "cancel"
    CREATE = "create"

    @property
    def axiom(self) -> Axiom:
        return AXIOM_OF[self]


AXIOM_OF = {
    OperationKind.CLARIFY: Axiom.INVERSION,
    OperationKind.ENFOLD_FRAME: Axiom.INVERSION,
    OperationKind.ENFOLD_MARK: Axiom.INVERSION,
    OperationKind.DISPERSE: Axiom.ARRANGEMENT,
    OperationKind.COLLECT: Axiom.ARRANGEMENT,
    OperationKind.CANCEL: Axiom.REFLECTION,
    OperationKind.CREATE: Axiom.REFLECTION,
}

# UI controls that offer a choice between related operations
OPERATION_CONTROLS = {
    "clarify": (OperationKind.CLARIFY,),
    "enfold": (OperationKind.ENFOLD_FRAME, OperationKind.ENFOLD_MARK),
    "disperse": (OperationKind.DISPERSE,),
    "collect": (OperationKind.COLLECT,),
    "cancel": (OperationKind.CANCEL,),
    "create": (OperationKind.CREATE,),
}


def parse_operation(name) -> OperationKind:
    """
    Accept an OperationKind, its value ("enfoldFrame") or its enum name
    ("enfold_frame", case-insensitive).

    Raises:
        ValueError: Unknown operation
    """
    if isinstance(name, OperationKind):
        return name
    for kind in OperationKind:
        if name == kind.value or str(name).upper() == kind.name:
            return kind
    raise ValueError(f"Unknown operation '{name}'. Valid: {[kind.value for kind in OperationKind]}")


def parse_axiom(name) -> Axiom:
    if isinstance(name, Axiom):
        return name
    try:
        return Axiom(name)
    except ValueError:
        raise ValueError(f"Unknown axiom '{name}'. Valid: {[axiom.value for axiom in Axiom]}")


@dataclass(frozen=True)
class Selection:
    """
    What the player points at.

    node_ids: selected identities (duplicates ignored)
    parent_id: insertion point for enfold-from-void and create; None means
        top level
    """
    node_ids: Tuple[str, ...] = ()
    parent_id: Optional[str] = None

    @classmethod
    def of(cls, *node_ids: str, parent_id: Optional[str] = None) -> "Selection":
        return cls(node_ids=tuple(node_ids), parent_id=parent_id)


EMPTY_SELECTION = Selection()


@dataclass(frozen=True)
class LevelConstraints:
    """
    Per-level limits. None or empty allowed sets mean "everything allowed".
    """
    allowed_axioms: Optional[FrozenSet[Axiom]] = None
    allowed_operations: Optional[FrozenSet[OperationKind]] = None
    max_moves: Optional[int] = None

    @classmethod
    def build(
        cls,
        allowed_axioms: Optional[Iterable] = None,
        allowed_operations: Optional[Iterable] = None,
        max_moves: Optional[int] = None,
    ) -> "LevelConstraints":
        axioms = frozenset(parse_axiom(a) for a in allowed_axioms) if allowed_axioms else None
        operations = (
            frozenset(parse_operation(op) for op in allowed_operations) if allowed_operations else None
        )
        return cls(allowed_axioms=axioms, allowed_operations=operations, max_moves=max_moves)

    def blocked_reason(self, kind: OperationKind) -> Optional[str]:
        """Reason the level forbids `kind`, or None if it is allowed."""
        if self.allowed_axioms and kind.axiom not in self.allowed_axioms:
            return f"This level disables {kind.axiom.value} actions."
        if self.allowed_operations and kind not in self.allowed_operations:
            return f"This level disables {kind.value}."
        return None


UNCONSTRAINED = LevelConstraints()


@dataclass(frozen=True)
class OperationResult:
    """Either the new forest or the reason the operation was refused."""
    forest: Optional[Forest] = None
    error: Optional[OperationError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def error_kind(self) -> Optional[ErrorKind]:
        return self.error.kind if self.error is not None else None

    def unwrap(self) -> Forest:
        """The new forest; raises the stored OperationError on failure."""
        if self.error is not None:
            raise self.error
        return self.forest
