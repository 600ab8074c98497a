"""
Unit tests for bao_core/signature.py.

Acceptance criteria:
- canonical_signature invariant under any permutation of children, recursively
- identities never influence signatures
- structurally distinct trees give distinct signatures, whatever the labels
- hash64 deterministic, 64-bit
"""

import itertools

from bao_core.form import angle, atom, create_form, deep_clone, round_, square
from bao_core.notation import parse_forest
from bao_core.signature import (
    canonical_signature,
    canonical_signature_forest,
    forest_fingerprint,
    hash64,
)


class TestCanonicalSignature:
    """Structural fingerprints of single forms."""

    def test_known_layout(self):
        assert canonical_signature(round_(square(round_()))) == "r[s[r[]]]"

    def test_atom_label_is_length_prefixed(self):
        assert canonical_signature(atom("x")) == "t1:x[]"
        assert canonical_signature(atom("foo")) == "t3:foo[]"

    def test_bare_angle(self):
        assert canonical_signature(angle()) == "a[]"

    def test_boundaries_distinguished(self):
        sigs = {canonical_signature(f) for f in (round_(), square(), angle())}
        assert len(sigs) == 3

    def test_ignores_identity(self):
        form = round_(square(atom("a")), angle())
        copy = deep_clone(form)
        assert copy.id != form.id
        assert canonical_signature(copy) == canonical_signature(form)

    def test_child_permutations_top_level(self):
        """Every ordering of four distinct children gives one signature."""
        children = [atom("a"), round_(), square(atom("b")), angle(round_())]
        sigs = {
            canonical_signature(round_(*(deep_clone(c) for c in order)))
            for order in itertools.permutations(children)
        }
        assert len(sigs) == 1

    def test_child_permutations_recursive(self):
        """Permuting nested children at every depth leaves the signature alone."""
        inner = [atom("x"), round_(), angle()]
        outer_extra = [atom("y"), square()]
        sigs = set()
        for inner_order in itertools.permutations(inner):
            for outer_order in itertools.permutations(outer_extra):
                nested = square(*(deep_clone(c) for c in inner_order))
                form = round_(*(deep_clone(c) for c in outer_order), nested)
                sigs.add(canonical_signature(form))
                form_rev = round_(nested, *(deep_clone(c) for c in outer_order))
                sigs.add(canonical_signature(form_rev))
        assert len(sigs) == 1

    def test_nesting_versus_juxtaposition(self):
        """(()) and () () are different forms."""
        nested = round_(round_())
        sibling = round_(round_(), round_())
        assert canonical_signature(nested) != canonical_signature(sibling)

    def test_label_cannot_forge_structure(self):
        """A label full of delimiters cannot collide with real children."""
        forged = round_(atom("a[],t1:b"))
        genuine = round_(atom("a"), atom("b"))
        assert canonical_signature(forged) != canonical_signature(genuine)

    def test_label_cannot_forge_length_prefix(self):
        assert canonical_signature(atom("1:a")) != canonical_signature(atom("a"))
        assert canonical_signature(atom("ab")) != canonical_signature(atom("a"))

    def test_create_form_accepts_string_boundary(self):
        assert canonical_signature(create_form("square", atom("a"))) == "s[t1:a[]]"


class TestForestSignature:
    """Sorted signature lists (multiset fingerprints)."""

    def test_sorted(self):
        forest = parse_forest("[a] () <>")
        result = canonical_signature_forest(forest)
        assert result == sorted(result)
        assert len(result) == 3

    def test_order_irrelevant(self):
        forms = parse_forest("a (b) [c] <d>")
        sigs = {tuple(canonical_signature_forest(order)) for order in itertools.permutations(forms)}
        assert len(sigs) == 1

    def test_multiplicity_matters(self):
        assert canonical_signature_forest(parse_forest("() ()")) != canonical_signature_forest(
            parse_forest("()")
        )

    def test_empty_forest(self):
        assert canonical_signature_forest(()) == []


class TestHash64:
    """Deterministic hashing for receipts."""

    def test_determinism(self):
        obj = ["r[]", "s[t1:a[]]"]
        assert hash64(obj) == hash64(list(obj))

    def test_dict_order_irrelevance(self):
        assert hash64({"a": 1, "b": 2}) == hash64({"b": 2, "a": 1})

    def test_returns_64bit_int(self):
        h = hash64("test")
        assert 0 <= h < 2**64

    def test_fingerprint_ignores_order_and_identity(self):
        left = parse_forest("(a) [b] <>")
        right = parse_forest("<> [b] (a)")
        assert forest_fingerprint(left) == forest_fingerprint(right)

    def test_fingerprint_distinguishes_forests(self):
        assert forest_fingerprint(parse_forest("(a)")) != forest_fingerprint(parse_forest("[a]"))
