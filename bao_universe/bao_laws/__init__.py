"""
bao_laws: The three Laws of Form axioms as forward/inverse operation pairs.

Axioms:
- inversion.py: clarify <-> enfold (frame / mark)
- arrangement.py: disperse <-> collect
- reflection.py: cancel <-> create

Shared pieces:
- errors.py: NotApplicable / SelectionMismatch / StructuralMismatch
- matching.py: signature multisets and reflection chains
- selection.py: resolving identities to located nodes
"""

from .arrangement import collect, disperse
from .errors import (
    ErrorKind,
    NotApplicable,
    OperationError,
    SelectionMismatch,
    StructuralMismatch,
)
from .inversion import clarify, enfold, enfold_frame, enfold_mark
from .reflection import cancel, create, reflect

__all__ = [
    "clarify",
    "enfold",
    "enfold_frame",
    "enfold_mark",
    "disperse",
    "collect",
    "cancel",
    "create",
    "reflect",
    "ErrorKind",
    "OperationError",
    "NotApplicable",
    "SelectionMismatch",
    "StructuralMismatch",
]
