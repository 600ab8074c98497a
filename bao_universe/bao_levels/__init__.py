"""
bao_levels: Declarative level data, hydration and the built-in catalog.

Modules:
- types.py: LevelDefinition, LevelFormatError, raw level validation
- loader.py: hydrate declarative nodes into live Forms
- serializer.py: canonical JSON output of a forest
- catalog.py: built-in levels with scripted solutions
- replay.py: run a scripted solution through a PuzzleSession
"""

from .catalog import RAW_LEVELS, get_level, load_catalog
from .loader import hydrate_forest, hydrate_form, hydrate_level, hydrate_levels
from .replay import ReplayError, ReplayResult, replay_solution
from .serializer import format_forest_as_json, serialize_forest
from .types import LevelDefinition, LevelFormatError, validate_raw_level

__all__ = [
    "LevelDefinition",
    "LevelFormatError",
    "validate_raw_level",
    "hydrate_form",
    "hydrate_forest",
    "hydrate_level",
    "hydrate_levels",
    "serialize_forest",
    "format_forest_as_json",
    "RAW_LEVELS",
    "load_catalog",
    "get_level",
    "replay_solution",
    "ReplayResult",
    "ReplayError",
]
