#!/usr/bin/env python3
"""
Level Replay Integration Run

Hydrates every level, replays its scripted solution through a PuzzleSession
and checks the result against the goal.

Critical Invariants:
- solved = True (final forest equals the goal as a multiset)
- refused_steps = 0 (every scripted step is applicable)
- deterministic = True (a second hydration + replay gives the same
  signatures)

Usage:
    python run_levels.py --limit 5
    python run_levels.py --levels-file my_levels.json --verbose
"""

import argparse
import logging
import sys
from pathlib import Path

# Add parent directory to path to import bao_core and friends
sys.path.insert(0, str(Path(__file__).parent.parent))

from bao_core.signature import canonical_signature_forest, forest_fingerprint
from bao_engine.goal import GameStatus, is_solved
from bao_levels.loader import hydrate_level
from bao_levels.replay import replay_solution

from utils import (
    build_receipt,
    compute_summary_stats,
    load_raw_levels,
    save_receipt,
    setup_logger,
)

INTEGRATION_DIR = Path(__file__).parent

DEFAULT_CONFIG = {
    "levels_file": None,
    "limit": None,
    "log_dir": INTEGRATION_DIR / "logs",
    "receipts_dir": INTEGRATION_DIR / "receipts" / "levels",
    "verbose": False,
}


def validate_level(raw_level, logger):
    """
    Replay one level's solution twice and check the outcome.

    Returns:
        Receipt dictionary
    """
    level_id = raw_level.get("id", "<unknown>") if isinstance(raw_level, dict) else "<unknown>"
    try:
        level = hydrate_level(raw_level)
        logger.info(f"Level {level_id}: replaying {len(level.solution)} steps")

        first = replay_solution(level)
        second = replay_solution(hydrate_level(raw_level))

        final = first.session.forest
        signatures = canonical_signature_forest(final)
        deterministic = signatures == canonical_signature_forest(second.session.forest)
        solved = is_solved(final, level.goal)
        refused = first.failed_steps

        for step in refused:
            logger.warning(
                f"Level {level_id}: step {step.index} ({step.kind.value}) refused - "
                f"{step.result.error.reason}"
            )

        replay_data = {
            "steps": len(first.steps),
            "moves": first.session.moves,
            "refused_steps": len(refused),
            "max_moves": level.max_moves,
            "final_status": first.session.status.value,
            "deterministic": deterministic,
        }
        forest_data = {
            "final": signatures,
            "goal": canonical_signature_forest(level.goal),
            "final_fingerprint": forest_fingerprint(final),
        }

        status = "PASS"
        if not solved:
            status = "FAIL"
            logger.error(f"Level {level_id}: FAIL - final forest does not match the goal")
        elif first.session.status is not GameStatus.WON:
            status = "FAIL"
            logger.error(f"Level {level_id}: FAIL - solved but not won (move budget exceeded)")
        elif not deterministic:
            status = "FAIL"
            logger.error(f"Level {level_id}: FAIL - replay not deterministic")
        else:
            logger.info(f"Level {level_id}: PASS in {first.session.moves} moves")

        return build_receipt(
            level_id=level_id,
            replay_data=replay_data,
            forest_data=forest_data,
            status=status,
        )

    except ValueError as e:
        logger.error(f"Level {level_id}: Invalid level - {type(e).__name__}: {e}")
        return build_receipt(level_id=level_id, status="FAIL", error=str(e))


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Level Replay Integration Run: scripted solutions against goals"
    )
    parser.add_argument(
        "--levels-file",
        type=Path,
        default=DEFAULT_CONFIG["levels_file"],
        help="JSON file with a list of levels (default: built-in catalog)",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=DEFAULT_CONFIG["limit"],
        help="Number of levels to replay (default: all)",
    )
    parser.add_argument(
        "--log-dir",
        type=Path,
        default=DEFAULT_CONFIG["log_dir"],
        help="Directory for the run log",
    )
    parser.add_argument(
        "--receipts-dir",
        type=Path,
        default=DEFAULT_CONFIG["receipts_dir"],
        help="Directory for per-level JSON receipts",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        default=DEFAULT_CONFIG["verbose"],
        help="Log engine decisions at DEBUG level",
    )
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)

    level = logging.DEBUG if args.verbose else logging.INFO
    logger = setup_logger("run_levels", args.log_dir / "run_levels.log", level=level)
    if args.verbose:
        # Route the engine's module loggers through the same handlers
        for name in ("bao_engine", "bao_levels"):
            engine_logger = logging.getLogger(name)
            engine_logger.setLevel(logging.DEBUG)
            engine_logger.handlers = list(logger.handlers)

    logger.info("=" * 80)
    logger.info("Level Replay Integration Run")
    logger.info(f"Levels file: {args.levels_file or 'built-in catalog'}")
    logger.info(f"Level limit: {args.limit}")
    logger.info("=" * 80)

    raw_levels = load_raw_levels(args.levels_file, args.limit)
    logger.info(f"Loaded {len(raw_levels)} levels")

    receipts = []
    for raw_level in raw_levels:
        receipt = validate_level(raw_level, logger)
        receipts.append(receipt)
        save_receipt(receipt, args.receipts_dir)

    logger.info("=" * 80)
    logger.info("SUMMARY STATISTICS")
    logger.info("=" * 80)

    stats = compute_summary_stats(receipts)

    logger.info(f"Total levels: {stats['total_levels']}")
    logger.info(f"Passed: {stats['passed']}")
    logger.info(f"Failed: {stats['failed']}")
    logger.info(f"Pass rate: {stats['pass_rate']:.2%}")

    if "replay" in stats:
        logger.info("Replay Statistics:")
        logger.info(f"  Average moves: {stats['replay']['avg_moves']:.1f}")
        logger.info(f"  Max moves: {stats['replay']['max_moves']}")
        logger.info(f"  Refused steps: {stats['replay']['refused_steps']}")
        logger.info(f"  Determinism pass rate: {stats['replay']['determinism_pass_rate']:.2%}")

    logger.info("=" * 80)
    logger.info(f"Level replay complete. Receipts saved to: {args.receipts_dir}")
    logger.info("=" * 80)

    return 0 if stats["failed"] == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
