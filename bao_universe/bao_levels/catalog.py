"""
Built-in level catalog.

Levels are kept declarative (plain dicts) and hydrated on demand, so every
load gets fresh identities. Each level carries a scripted solution: steps
address nodes by child-index path ("0/1") against the forest at that step.
"""

from typing import List, Optional

from .loader import hydrate_level
from .types import LevelDefinition, RawFormNode, RawLevel


def _round(*children: RawFormNode) -> RawFormNode:
    return {"boundary": "round", "children": list(children)}


def _square(*children: RawFormNode) -> RawFormNode:
    return {"boundary": "square", "children": list(children)}


def _angle(*children: RawFormNode) -> RawFormNode:
    return {"boundary": "angle", "children": list(children)}


def _atom(label: str) -> RawFormNode:
    return {"boundary": "atom", "label": label}


RAW_LEVELS: List[RawLevel] = [
    {
        "id": "level-01",
        "name": "First Unwrap",
        "description": "Remove the paired boundaries to reveal the unit.",
        "difficulty": 1,
        "allowedAxioms": ["inversion"],
        "start": [_round(_square(_round()))],
        "goal": [_round()],
        "solution": [{"op": "clarify", "select": ["0"]}],
    },
    {
        "id": "level-02",
        "name": "Split the Context",
        "description": "Disperse the shared square into separate frames.",
        "difficulty": 1,
        "allowedAxioms": ["arrangement"],
        "start": [_round(_square(_round(), _round()))],
        "goal": [_round(_square(_round())), _round(_square(_round()))],
        "solution": [{"op": "disperse", "select": ["0/0"]}],
    },
    {
        "id": "level-03",
        "name": "Create and Cancel",
        "description": "Create a reflected pair from nothing.",
        "difficulty": 1,
        "allowedAxioms": ["reflection"],
        "start": [],
        "goal": [_angle()],
        "solution": [{"op": "create", "select": []}],
    },
    {
        "id": "level-04",
        "name": "Gather the Frames",
        "description": "Collect two frames that share a context into one.",
        "difficulty": 2,
        "allowedAxioms": ["arrangement"],
        "start": [
            _round(_atom("a"), _square(_atom("b"))),
            _round(_atom("a"), _square(_atom("c"))),
        ],
        "goal": [_round(_atom("a"), _square(_atom("b"), _atom("c")))],
        "solution": [{"op": "collect", "select": ["0", "1"]}],
    },
    {
        "id": "level-05",
        "name": "Mirror Image",
        "description": "A form beside its reflection is nothing at all.",
        "difficulty": 2,
        "allowedAxioms": ["reflection"],
        "start": [_atom("a"), _angle(_atom("a"))],
        "goal": [],
        "solution": [{"op": "cancel", "select": ["0", "1"]}],
    },
    {
        "id": "level-06",
        "name": "Make a Mark",
        "description": "Wrap the atom in a square around a round.",
        "difficulty": 2,
        "allowedOperations": ["enfoldMark"],
        "start": [_atom("a")],
        "goal": [_square(_round(_atom("a")))],
        "solution": [{"op": "enfoldMark", "select": ["0"]}],
    },
    {
        "id": "level-07",
        "name": "Unpack Both",
        "description": "Split the frame, then unwrap each half.",
        "difficulty": 3,
        "allowedAxioms": ["inversion", "arrangement"],
        "maxMoves": 3,
        "start": [_round(_square(_atom("a"), _atom("b")))],
        "goal": [_atom("a"), _atom("b")],
        "solution": [
            {"op": "disperse", "select": ["0/0"]},
            {"op": "clarify", "select": ["0"]},
            {"op": "clarify", "select": ["1"]},
        ],
    },
    {
        "id": "level-08",
        "name": "Reflected Frame",
        "description": "Build a reflection pair inside a square, then clear it away.",
        "difficulty": 3,
        "allowedAxioms": ["reflection", "inversion"],
        "start": [_round(_square(_atom("x")))],
        "goal": [_atom("x")],
        "solution": [
            {"op": "create", "select": [], "parent": "0/0"},
            {"op": "cancel", "select": ["0/0/1"]},
            {"op": "clarify", "select": ["0"]},
        ],
    },
]


def load_catalog(limit: Optional[int] = None) -> List[LevelDefinition]:
    """Hydrate the built-in levels (first `limit` of them if given)."""
    raw_levels = RAW_LEVELS if limit is None else RAW_LEVELS[:limit]
    return [hydrate_level(raw) for raw in raw_levels]


def get_level(level_id: str) -> LevelDefinition:
    """
    Raises:
        KeyError: Unknown level id
    """
    for raw in RAW_LEVELS:
        if raw["id"] == level_id:
            return hydrate_level(raw)
    raise KeyError(f"Unknown level '{level_id}'")
