"""
Core type definitions for the Laws of Form engine.

A Form is one drawn distinction: a round, square or angle boundary holding
child forms, or an atom leaf carrying a label. Void is not a value here; it
is simply the empty Forest.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import NewType, Optional, Tuple


class BoundaryType(str, Enum):
    """Boundary shapes. Atoms are labelled leaves."""
    ROUND = "round"
    SQUARE = "square"
    ANGLE = "angle"
    ATOM = "atom"


# Hash type (64-bit from SHA-256)
Hash64 = NewType("Hash64", int)


@dataclass(frozen=True, eq=False)
class Form:
    """
    Immutable boundary node.

    Identity (`id`) is unique per construction and carries no algebraic
    meaning. Children order exists only for stable rendering; algebraic
    comparisons go through canonical signatures, never through `==`, which
    is object identity for Forms.

    Invariants:
        - label is present iff boundary is ATOM
        - atoms have no children
    """
    id: str
    boundary: BoundaryType
    children: Tuple["Form", ...] = field(default_factory=tuple)
    label: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.boundary, BoundaryType):
            raise ValueError(f"Invalid boundary {self.boundary!r}")
        if self.boundary is BoundaryType.ATOM:
            if self.label is None or self.label == "":
                raise ValueError("Atom forms require a non-empty label")
            if self.children:
                raise ValueError("Atom forms cannot have children")
        elif self.label is not None:
            raise ValueError(f"Only atoms carry labels, got label on {self.boundary.value}")

    @property
    def is_atom(self) -> bool:
        return self.boundary is BoundaryType.ATOM

    def __repr__(self) -> str:
        if self.is_atom:
            return f"Form(atom {self.label!r})"
        return f"Form({self.boundary.value}, {len(self.children)} children)"


# Unordered multiset of top-level forms; storage order is incidental
Forest = Tuple[Form, ...]

# Child-index path from the top level, e.g. (0, 1) = second child of first root
Path = Tuple[int, ...]


# Complementary pairs for the inversion axiom
COMPLEMENT = {
    BoundaryType.ROUND: BoundaryType.SQUARE,
    BoundaryType.SQUARE: BoundaryType.ROUND,
}
