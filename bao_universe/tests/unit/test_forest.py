"""
Unit tests for bao_core/forest.py (locating and rebuilding).
"""

import pytest

from bao_core.forest import (
    index_forest,
    insert_children,
    node_at_path,
    parse_path,
    replace_in_parent,
    replace_node,
    shared_parent,
    unique_ids,
)
from bao_core.form import atom, round_, square
from bao_core.notation import parse_forest
from bao_core.signature import canonical_signature_forest


def _sigs(text):
    return canonical_signature_forest(parse_forest(text))


class TestIndex:
    def test_index_covers_every_node(self):
        forest = parse_forest("(a [b]) c")
        index = index_forest(forest)
        assert len(index) == 5

    def test_parents_and_positions(self):
        forest = parse_forest("(a [b]) c")
        index = index_forest(forest)
        outer = forest[0]
        sq = outer.children[1]
        assert index[outer.id].parent is None
        assert index[sq.id].parent is outer
        assert index[sq.id].index == 1
        assert index[sq.children[0].id].parent is sq

    def test_unique_ids_keeps_first_seen_order(self):
        assert unique_ids(["b", "a", "b", "c", "a"]) == ("b", "a", "c")

    def test_shared_parent(self):
        forest = parse_forest("(a b) c")
        index = index_forest(forest)
        a, b = forest[0].children
        shared, parent = shared_parent([index[a.id], index[b.id]])
        assert shared and parent is forest[0]
        shared, _ = shared_parent([index[a.id], index[forest[1].id]])
        assert not shared


class TestReplace:
    def test_replace_node_rebuilds_ancestors_only(self):
        forest = parse_forest("[x (y)] (z)")
        target = forest[0].children[1]
        untouched = forest[0].children[0]
        result = replace_node(forest, target.id, [atom("w")])

        assert result[0].id != forest[0].id
        assert result[0].children[0] is untouched
        assert result[1] is forest[1]
        assert canonical_signature_forest(result) == _sigs("[x w] (z)")

    def test_replace_node_with_nothing(self):
        forest = parse_forest("(a b)")
        result = replace_node(forest, forest[0].children[0].id, [])
        assert canonical_signature_forest(result) == _sigs("(b)")

    def test_replace_node_absent_id(self):
        forest = parse_forest("(a)")
        result = replace_node(forest, "missing", [])
        assert result[0] is forest[0]

    def test_replace_in_parent_takes_first_position(self):
        forest = parse_forest("a b c d")
        ids = [forest[1].id, forest[3].id]
        marker = round_()
        result = replace_in_parent(forest, None, ids, [marker])
        assert [f.label for f in result if f.is_atom] == ["a", "c"]
        assert result[1] is marker

    def test_replace_in_parent_nested(self):
        forest = parse_forest("[a b c]")
        sq = forest[0]
        result = replace_in_parent(forest, sq, [sq.children[0].id], [])
        assert canonical_signature_forest(result) == _sigs("[b c]")

    def test_insert_children_top_level(self):
        forest = parse_forest("a")
        result = insert_children(forest, None, [square()])
        assert len(result) == 2
        assert result[0] is forest[0]

    def test_insert_children_nested(self):
        forest = parse_forest("([a])")
        sq = forest[0].children[0]
        result = insert_children(forest, sq.id, [atom("b")])
        assert canonical_signature_forest(result) == _sigs("([a b])")


class TestPaths:
    def test_parse_path(self):
        assert parse_path("0/1/2") == (0, 1, 2)
        assert parse_path("/3/") == (3,)

    def test_parse_path_rejects_garbage(self):
        with pytest.raises(ValueError):
            parse_path("0/x")
        with pytest.raises(ValueError):
            parse_path("")

    def test_node_at_path(self):
        forest = parse_forest("a ([b c])")
        assert node_at_path(forest, (1, 0, 1)).label == "c"

    def test_node_at_path_out_of_range(self):
        forest = parse_forest("a")
        with pytest.raises(IndexError):
            node_at_path(forest, (0, 0))
