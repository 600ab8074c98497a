"""
bao_core: Core primitives for the Laws of Form engine.

Provides:
- types: BoundaryType, Form, Forest and other fundamental types
- form: Fresh-identity construction, deep copies, traversal
- signature: Canonical order-independent signatures and hash64
- forest: Locating nodes and rebuilding trees around an edit
- notation: "( [ ] < > atom" text notation
"""

from .form import angle, atom, create_form, deep_clone, round_, square
from .signature import canonical_signature, canonical_signature_forest
from .types import BoundaryType, Forest, Form

__all__ = [
    "BoundaryType",
    "Form",
    "Forest",
    "create_form",
    "round_",
    "square",
    "angle",
    "atom",
    "deep_clone",
    "canonical_signature",
    "canonical_signature_forest",
]
