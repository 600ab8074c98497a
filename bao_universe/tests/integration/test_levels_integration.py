"""
Integration tests: catalog levels end to end.

Tests interaction with:
- bao_levels (hydration, catalog, replay)
- bao_engine (session, history, goal)
- integration_tests.utils (receipts, summary statistics)

Covers:
- Every built-in level solved by its scripted solution
- Original end-to-end scenarios (unwrap, split the context)
- Undo all the way back to the start
- Receipts structure and level file loading
"""

import json
from pathlib import Path

import pytest

from bao_core.signature import canonical_signature_forest
from bao_engine import session as sessions
from bao_engine.goal import GameStatus, is_solved
from bao_engine.operations import OperationKind, Selection
from bao_levels.catalog import RAW_LEVELS, get_level, load_catalog
from bao_levels.loader import hydrate_level
from bao_levels.replay import replay_solution
from integration_tests.utils import (
    build_receipt,
    compute_summary_stats,
    load_raw_levels,
    save_receipt,
)


# ============================================================================
# Catalog replay
# ============================================================================


@pytest.mark.parametrize("level_id", [raw["id"] for raw in RAW_LEVELS])
def test_scripted_solution_wins(level_id):
    level = get_level(level_id)
    replay = replay_solution(level)
    assert replay.all_applied, [step.result.error for step in replay.failed_steps]
    assert is_solved(replay.session.forest, level.goal)
    assert replay.session.status is GameStatus.WON


@pytest.mark.parametrize("level_id", [raw["id"] for raw in RAW_LEVELS])
def test_replay_deterministic(level_id):
    first = replay_solution(get_level(level_id))
    second = replay_solution(get_level(level_id))
    assert canonical_signature_forest(first.session.forest) == canonical_signature_forest(
        second.session.forest
    )


def test_undo_to_start():
    for level in load_catalog():
        replay = replay_solution(level)
        session = replay.session
        while session.history.can_undo:
            session = sessions.undo(session)
        assert canonical_signature_forest(session.forest) == canonical_signature_forest(level.start)


# ============================================================================
# End-to-end scenarios
# ============================================================================


def test_first_unwrap():
    """[round(square(round()))] clarified on the outer node gives [round()]."""
    session = sessions.load_level(get_level("level-01"))
    session, result = sessions.apply_operation(
        session, OperationKind.CLARIFY, Selection.of(session.forest[0].id)
    )
    assert result.ok
    assert canonical_signature_forest(session.forest) == ["r[]"]
    assert session.status is GameStatus.WON


def test_split_the_context():
    """Dispersing the square of round(square(round(), round())) gives two frames."""
    session = sessions.load_level(get_level("level-02"))
    sq = session.forest[0].children[0]
    session, result = sessions.apply_operation(session, OperationKind.DISPERSE, Selection.of(sq.id))
    assert result.ok
    assert canonical_signature_forest(session.forest) == ["r[s[r[]]]", "r[s[r[]]]"]
    assert session.status is GameStatus.WON


def test_create_then_cancel_from_void():
    session = sessions.load_level(get_level("level-03"))
    session, _ = sessions.apply_operation(session, OperationKind.CREATE)
    assert session.status is GameStatus.WON
    session, result = sessions.apply_operation(
        session, OperationKind.CANCEL, Selection.of(session.forest[0].id)
    )
    assert result.ok
    assert session.forest == ()
    assert session.status is GameStatus.IN_PROGRESS


def test_goal_order_irrelevant():
    raw = dict(get_raw("level-02"))
    raw["goal"] = list(reversed(raw["goal"]))
    level = hydrate_level(raw)
    assert replay_solution(level).session.status is GameStatus.WON


def get_raw(level_id):
    return next(raw for raw in RAW_LEVELS if raw["id"] == level_id)


# ============================================================================
# Receipts
# ============================================================================


def test_receipt_round_trip(tmp_path: Path):
    receipt = build_receipt(
        level_id="level-01",
        replay_data={"steps": 1, "moves": 1, "refused_steps": 0, "deterministic": True},
        status="PASS",
    )
    save_receipt(receipt, tmp_path)
    saved = json.loads((tmp_path / "level-01.json").read_text())
    assert saved["status"] == "PASS"
    assert saved["replay"]["moves"] == 1
    assert "error" not in saved


def test_summary_stats():
    receipts = [
        build_receipt("a", replay_data={"moves": 1, "refused_steps": 0, "deterministic": True}),
        build_receipt("b", replay_data={"moves": 3, "refused_steps": 1, "deterministic": True}, status="FAIL"),
        build_receipt("c", status="FAIL", error="bad level"),
    ]
    stats = compute_summary_stats(receipts)
    assert stats["total_levels"] == 3
    assert stats["passed"] == 1
    assert stats["replay"]["max_moves"] == 3
    assert stats["replay"]["refused_steps"] == 1
    assert stats["replay"]["determinism_pass_rate"] == 1.0


def test_load_levels_file(tmp_path: Path):
    levels_file = tmp_path / "levels.json"
    levels_file.write_text(json.dumps(RAW_LEVELS[:2]))
    loaded = load_raw_levels(levels_file, limit=1)
    assert [raw["id"] for raw in loaded] == ["level-01"]


def test_load_levels_defaults_to_catalog():
    assert len(load_raw_levels()) == len(RAW_LEVELS)


def test_load_levels_missing_file(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_raw_levels(tmp_path / "nope.json")


def test_load_levels_not_a_list(tmp_path: Path):
    levels_file = tmp_path / "levels.json"
    levels_file.write_text(json.dumps({"id": "x"}))
    with pytest.raises(ValueError):
        load_raw_levels(levels_file)
