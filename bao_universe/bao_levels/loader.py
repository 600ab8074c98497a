"""
Level hydration: declarative nodes -> live Forms with fresh identities.

Hydrating the same level twice gives signature-equal, identity-distinct
forests.
"""

from typing import Iterable, List

from bao_core.form import create_form
from bao_core.types import BoundaryType, Forest, Form

from .types import (
    LevelDefinition,
    RawFormNode,
    RawLevel,
    constraints_from_raw,
    validate_raw_level,
    validate_raw_node,
)


def hydrate_form(node: RawFormNode) -> Form:
    boundary = BoundaryType(node["boundary"])
    if boundary is BoundaryType.ATOM:
        return create_form(boundary, label=node["label"])
    children = [hydrate_form(child) for child in node.get("children") or []]
    return create_form(boundary, *children)


def hydrate_forest(nodes: Iterable[RawFormNode]) -> Forest:
    """
    Raises:
        LevelFormatError: If any node is malformed
    """
    nodes = list(nodes)
    for i, node in enumerate(nodes):
        validate_raw_node(node, str(i))
    return tuple(hydrate_form(node) for node in nodes)


def hydrate_level(raw: RawLevel) -> LevelDefinition:
    """
    Validate and instantiate one declarative level.

    Raises:
        LevelFormatError: If the level data is malformed
    """
    validate_raw_level(raw)
    return LevelDefinition(
        id=raw["id"],
        name=raw["name"],
        description=raw.get("description"),
        start=tuple(hydrate_form(node) for node in raw["start"]),
        goal=tuple(hydrate_form(node) for node in raw["goal"]),
        difficulty=raw["difficulty"],
        constraints=constraints_from_raw(raw),
        solution=tuple(raw.get("solution") or ()),
    )


def hydrate_levels(raw_levels: Iterable[RawLevel]) -> List[LevelDefinition]:
    return [hydrate_level(raw) for raw in raw_levels]
