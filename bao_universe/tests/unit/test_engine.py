"""
Unit tests for bao_engine/engine.py and bao_engine/operations.py.

Acceptance criteria:
- apply() returns results, never raises for operation failures
- failures carry the right ErrorKind and leave the forest untouched
- level constraints gate operations by axiom and by name
"""

import pytest

from bao_core.form import collect_form_ids
from bao_core.notation import parse_forest
from bao_core.signature import canonical_signature_forest
from bao_engine.engine import apply, check
from bao_engine.operations import (
    Axiom,
    LevelConstraints,
    OperationKind,
    Selection,
    parse_axiom,
    parse_operation,
)
from bao_laws.errors import ErrorKind, NotApplicable, OperationError


def _sigs(text):
    return canonical_signature_forest(parse_forest(text))


class TestOperationKinds:
    def test_seven_operations(self):
        assert len(OperationKind) == 7

    def test_axiom_grouping(self):
        grouped = {}
        for kind in OperationKind:
            grouped.setdefault(kind.axiom, set()).add(kind)
        assert grouped[Axiom.INVERSION] == {
            OperationKind.CLARIFY,
            OperationKind.ENFOLD_FRAME,
            OperationKind.ENFOLD_MARK,
        }
        assert grouped[Axiom.ARRANGEMENT] == {OperationKind.DISPERSE, OperationKind.COLLECT}
        assert grouped[Axiom.REFLECTION] == {OperationKind.CANCEL, OperationKind.CREATE}

    @pytest.mark.parametrize("name", ["enfoldFrame", "ENFOLD_FRAME", "enfold_frame"])
    def test_parse_operation_spellings(self, name):
        assert parse_operation(name) is OperationKind.ENFOLD_FRAME

    def test_parse_operation_unknown(self):
        with pytest.raises(ValueError, match="Valid"):
            parse_operation("explode")

    def test_parse_axiom(self):
        assert parse_axiom("reflection") is Axiom.REFLECTION
        with pytest.raises(ValueError):
            parse_axiom("gravity")

    def test_selection_of(self):
        selection = Selection.of("a", "b", parent_id="p")
        assert selection.node_ids == ("a", "b")
        assert selection.parent_id == "p"


class TestApply:
    def test_success(self):
        forest = parse_forest("([()])")
        result = apply(OperationKind.CLARIFY, forest, Selection.of(forest[0].id))
        assert result.ok
        assert result.error_kind is None
        assert canonical_signature_forest(result.unwrap()) == _sigs("()")

    def test_accepts_operation_name(self):
        result = apply("create", ())
        assert canonical_signature_forest(result.forest) == _sigs("<>")

    def test_unknown_operation_raises(self):
        with pytest.raises(ValueError):
            apply("explode", ())

    @pytest.mark.parametrize(
        "kind, text, expected",
        [
            (OperationKind.CLARIFY, "(a)", ErrorKind.NOT_APPLICABLE),
            (OperationKind.DISPERSE, "[a]", ErrorKind.NOT_APPLICABLE),
            (OperationKind.CANCEL, "a <b>", ErrorKind.STRUCTURAL_MISMATCH),
            (OperationKind.COLLECT, "(a [b]) (c [d])", ErrorKind.STRUCTURAL_MISMATCH),
        ],
    )
    def test_failure_kinds(self, kind, text, expected):
        forest = parse_forest(text)
        result = apply(kind, forest, Selection.of(*(form.id for form in forest)))
        assert not result.ok
        assert result.forest is None
        assert result.error_kind is expected
        assert result.error.reason

    def test_stale_selection(self):
        result = apply(OperationKind.ENFOLD_MARK, parse_forest("a"), Selection.of("gone"))
        assert result.error_kind is ErrorKind.SELECTION_MISMATCH

    def test_unwrap_raises_stored_error(self):
        result = apply(OperationKind.CLARIFY, parse_forest("a"), Selection.of("gone"))
        with pytest.raises(OperationError):
            result.unwrap()

    @pytest.mark.parametrize("kind", list(OperationKind))
    def test_never_mutates_input(self, kind):
        forest = parse_forest("(a [b c]) <a> a ([()])")
        ids_before = collect_form_ids(forest)
        sigs_before = canonical_signature_forest(forest)
        selection = Selection.of(forest[1].id, forest[2].id)
        apply(kind, forest, selection)
        assert collect_form_ids(forest) == ids_before
        assert canonical_signature_forest(forest) == sigs_before


class TestConstraints:
    def test_axiom_blocked(self):
        constraints = LevelConstraints.build(allowed_axioms=["inversion"])
        result = apply(OperationKind.CREATE, (), constraints=constraints)
        assert result.error_kind is ErrorKind.NOT_APPLICABLE
        assert result.error.reason == "This level disables reflection actions."

    def test_operation_blocked(self):
        constraints = LevelConstraints.build(allowed_operations=["enfoldMark"])
        result = apply(OperationKind.ENFOLD_FRAME, (), constraints=constraints)
        assert result.error.reason == "This level disables enfoldFrame."

    def test_allowed_passes(self):
        constraints = LevelConstraints.build(allowed_axioms=["reflection"], allowed_operations=["create"])
        assert apply(OperationKind.CREATE, (), constraints=constraints).ok

    def test_empty_lists_allow_everything(self):
        constraints = LevelConstraints.build(allowed_axioms=[], allowed_operations=[])
        assert constraints.blocked_reason(OperationKind.COLLECT) is None

    def test_check_raises(self):
        constraints = LevelConstraints.build(allowed_axioms=["arrangement"])
        with pytest.raises(NotApplicable):
            check(OperationKind.CLARIFY, parse_forest("([a])"), constraints=constraints)
