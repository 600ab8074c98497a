"""
Utility functions for level replay integration runs.

Provides:
- Level loading from the built-in catalog or a JSON levels file
- Receipt generation
- Summary statistics
- Logging setup
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from bao_levels.catalog import RAW_LEVELS


def load_raw_levels(
    levels_file: Optional[Path] = None, limit: Optional[int] = None
) -> List[Dict[str, Any]]:
    """
    Load declarative levels.

    Args:
        levels_file: JSON file holding a list of levels (built-in catalog if None)
        limit: Optional limit on number of levels to load

    Returns:
        List of raw level dicts, not yet validated

    Raises:
        FileNotFoundError: If levels_file doesn't exist
        ValueError: If the file does not hold a JSON list
    """
    if levels_file is None:
        raw_levels = list(RAW_LEVELS)
    else:
        if not levels_file.exists():
            raise FileNotFoundError(f"Levels file not found: {levels_file}")
        with open(levels_file, "r") as f:
            raw_levels = json.load(f)
        if not isinstance(raw_levels, list):
            raise ValueError(f"Levels file must hold a JSON list, got {type(raw_levels).__name__}")

    if limit is not None:
        raw_levels = raw_levels[:limit]

    return raw_levels


def setup_logger(name: str, log_file: Path, level=logging.INFO) -> logging.Logger:
    """
    Setup logger for integration runs.

    Args:
        name: Logger name
        log_file: Path to log file
        level: Logging level

    Returns:
        Configured logger
    """
    log_file.parent.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Clear any existing handlers
    logger.handlers = []

    file_handler = logging.FileHandler(log_file, mode="w")
    file_handler.setLevel(level)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)

    formatter = logging.Formatter(
        "[%(asctime)s] %(levelname)s: %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
    )
    file_handler.setFormatter(formatter)
    console_handler.setFormatter(formatter)

    logger.addHandler(file_handler)
    logger.addHandler(console_handler)

    return logger


def build_receipt(
    level_id: str,
    replay_data: Optional[Dict[str, Any]] = None,
    forest_data: Optional[Dict[str, Any]] = None,
    status: str = "PASS",
    error: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Build a receipt dictionary for one level.

    Args:
        level_id: Level identifier
        replay_data: Step counts, refusals and final status
        forest_data: Signatures and fingerprints of the final and goal forests
        status: "PASS" or "FAIL"
        error: Error message if status is FAIL

    Returns:
        Receipt dictionary
    """
    receipt = {
        "level_id": level_id,
        "timestamp": datetime.now().isoformat(),
        "status": status,
    }

    if replay_data is not None:
        receipt["replay"] = replay_data

    if forest_data is not None:
        receipt["forest"] = forest_data

    if error is not None:
        receipt["error"] = error

    return receipt


def save_receipt(receipt: Dict[str, Any], output_dir: Path) -> None:
    """
    Save receipt to JSON file.

    Args:
        receipt: Receipt dictionary
        output_dir: Directory to save receipt (e.g., receipts/levels/)
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    receipt_file = output_dir / f"{receipt['level_id']}.json"

    with open(receipt_file, "w") as f:
        json.dump(receipt, f, indent=2)


def compute_summary_stats(receipts: List[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Compute summary statistics from a list of receipts.

    Args:
        receipts: List of receipt dictionaries

    Returns:
        Summary statistics dictionary
    """
    total = len(receipts)
    passed = sum(1 for r in receipts if r["status"] == "PASS")

    stats = {
        "total_levels": total,
        "passed": passed,
        "failed": total - passed,
        "pass_rate": passed / total if total > 0 else 0.0,
    }

    replay_receipts = [r for r in receipts if "replay" in r]
    if replay_receipts:
        moves = [r["replay"]["moves"] for r in replay_receipts]
        stats["replay"] = {
            "avg_moves": sum(moves) / len(moves),
            "max_moves": max(moves),
            "refused_steps": sum(r["replay"]["refused_steps"] for r in replay_receipts),
            "determinism_pass_rate": sum(
                1 for r in replay_receipts if r["replay"].get("deterministic", False)
            )
            / len(replay_receipts),
        }

    return stats
