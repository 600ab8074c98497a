"""
Operation failure taxonomy.

Laws raise these while checking preconditions; the engine turns them into
returned results. A failed operation never changes the forest.
"""

from enum import Enum


class ErrorKind(Enum):
    """
    Why an operation could not be applied.

    NOT_APPLICABLE: the selected structure does not satisfy the precondition
    SELECTION_MISMATCH: the selection names identities absent from the forest
    STRUCTURAL_MISMATCH: collect/cancel found no matching subset or pairing
    """
    NOT_APPLICABLE = "not_applicable"
    SELECTION_MISMATCH = "selection_mismatch"
    STRUCTURAL_MISMATCH = "structural_mismatch"


class OperationError(Exception):
    """Base class for operation failures."""

    kind: ErrorKind = ErrorKind.NOT_APPLICABLE

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"[{self.kind.value}] {reason}")


class NotApplicable(OperationError):
    kind = ErrorKind.NOT_APPLICABLE


class SelectionMismatch(OperationError):
    kind = ErrorKind.SELECTION_MISMATCH


class StructuralMismatch(OperationError):
    kind = ErrorKind.STRUCTURAL_MISMATCH
