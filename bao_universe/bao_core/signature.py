"""
Canonical signatures and deterministic hashing.

Provides:
- canonical_signature: order-independent structural fingerprint of a Form
- canonical_signature_forest: sorted signature list of a Forest
- hash64: SHA-256 canonical hash truncated to 64-bit int
- forest_fingerprint: hash64 of a forest's sorted signatures

Signatures ignore identities and sibling order. Two forms are algebraically
equal iff their signatures are equal; two forests are equal iff their sorted
signature lists are element-wise equal (multiset equality).

All functions are deterministic and stable across runs.
No use of Python's built-in hash() (non-deterministic).
"""

import hashlib
import json
from typing import Any, Iterable, List

from .types import BoundaryType, Forest, Form, Hash64

# One-character tags; "[" "]" "," never appear in a tag and atom labels are
# length-prefixed, so no label text can be read as structure.
BOUNDARY_TAGS = {
    BoundaryType.ROUND: "r",
    BoundaryType.SQUARE: "s",
    BoundaryType.ANGLE: "a",
    BoundaryType.ATOM: "t",
}


def canonical_signature(form: Form) -> str:
    """
    Order-invariant signature for structural comparisons.

    Layout: tag + label part (atoms only) + "[" + sorted child signatures
    joined by "," + "]".

    Examples:
        round(square(round()))  ->  "r[s[r[]]]"
        atom("x")               ->  "t1:x[]"

    Acceptance:
        - Invariant under any permutation of children, recursively
        - Ignores runtime identities
        - Distinct structures give distinct signatures
    """
    label_part = ""
    if form.label is not None:
        label_part = f"{len(form.label)}:{form.label}"
    child_signatures = sorted(canonical_signature(child) for child in form.children)
    return f"{BOUNDARY_TAGS[form.boundary]}{label_part}[{','.join(child_signatures)}]"


def canonical_signature_forest(forms: Iterable[Form]) -> List[str]:
    """Sorted per-form signatures: the forest's fingerprint."""
    return sorted(canonical_signature(form) for form in forms)


def hash64(obj: Any) -> Hash64:
    """
    Deterministic 64-bit hash using SHA-256 on canonical JSON.

    - Uses canonical JSON serialization (sorted keys, no whitespace)
    - Truncates to 64-bit integer (first 8 bytes)

    Examples:
        >>> hash64(["r[]"]) == hash64(["r[]"])
        True
    """
    canonical_json = json.dumps(obj, sort_keys=True, separators=(",", ":"))
    sha = hashlib.sha256(canonical_json.encode("utf-8"))
    hash_int = int.from_bytes(sha.digest()[:8], byteorder="big", signed=False)
    return Hash64(hash_int)


def forest_fingerprint(forest: Forest) -> Hash64:
    """
    Compact digest of a forest, for receipts and stable diffing.

    Goal checks compare full signature lists, not this digest.
    """
    return hash64(canonical_signature_forest(forest))
