"""
Unit tests for bao_engine/goal.py.
"""

import itertools

from bao_core.notation import parse_forest
from bao_engine.goal import GameStatus, derive_status, forests_equivalent, forms_equivalent, is_solved


class TestEquivalence:
    def test_forms(self):
        left, right = parse_forest("(a [b c]) ([c b] a)")
        assert forms_equivalent(left, right)

    def test_forms_differ(self):
        left, right = parse_forest("(a) [a]")
        assert not forms_equivalent(left, right)

    def test_forests_multiset(self):
        assert forests_equivalent(parse_forest("() []"), parse_forest("[] ()"))
        assert not forests_equivalent(parse_forest("() ()"), parse_forest("()"))
        assert not forests_equivalent(parse_forest("() ()"), parse_forest("() []"))


class TestIsSolved:
    def test_goal_order_irrelevant(self):
        current = parse_forest("(a) [b] <c> d")
        goal = parse_forest("d <c> [b] (a)")
        for order in itertools.permutations(goal):
            assert is_solved(current, order)

    def test_no_subset_matching(self):
        assert not is_solved(parse_forest("() []"), parse_forest("()"))
        assert not is_solved(parse_forest("()"), parse_forest("() []"))

    def test_void(self):
        assert is_solved((), ())
        assert not is_solved((), parse_forest("<>"))


class TestStatus:
    def test_idle_before_load(self):
        assert derive_status(None, None) is GameStatus.IDLE
        assert derive_status(parse_forest("a"), None) is GameStatus.IDLE

    def test_in_progress(self):
        assert derive_status(parse_forest("a"), parse_forest("b")) is GameStatus.IN_PROGRESS

    def test_won(self):
        assert derive_status(parse_forest("a"), parse_forest("a"), moves=3) is GameStatus.WON

    def test_move_budget(self):
        current, goal = parse_forest("a"), parse_forest("a")
        assert derive_status(current, goal, moves=2, max_moves=2) is GameStatus.WON
        assert derive_status(current, goal, moves=3, max_moves=2) is GameStatus.IN_PROGRESS
