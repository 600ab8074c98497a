"""
Selection resolution shared by every law.

A selection is a set of identities in the current forest. These helpers turn
it into located nodes or raise the matching OperationError.
"""

from typing import List, Optional, Sequence

from bao_core.forest import Located, index_forest, shared_parent, unique_ids
from bao_core.types import BoundaryType, Forest, Form

from .errors import NotApplicable, SelectionMismatch

SELECTION_STALE_REASON = "Selected form is no longer available."
PARENT_STALE_REASON = "Selected parent is no longer available."
PARENT_MISMATCH_REASON = "Select sibling nodes that share the same parent."


def require_located(forest: Forest, node_ids: Sequence[str]) -> List[Located]:
    """
    Locate every selected id, in first-seen order, ignoring duplicates.

    Raises:
        SelectionMismatch: If any id is absent from the forest
    """
    ids = unique_ids(node_ids)
    if not ids:
        return []
    index = index_forest(forest)
    missing = [node_id for node_id in ids if node_id not in index]
    if missing:
        raise SelectionMismatch(SELECTION_STALE_REASON)
    return [index[node_id] for node_id in ids]


def require_siblings(locations: Sequence[Located]) -> Optional[Form]:
    """
    Check that the located nodes share one parent (or are all top-level).

    Returns:
        The shared parent, None for top level

    Raises:
        NotApplicable: If the nodes sit under different parents
    """
    shared, parent = shared_parent(locations)
    if not shared:
        raise NotApplicable(PARENT_MISMATCH_REASON)
    return parent


def require_parent(forest: Forest, parent_id: Optional[str]) -> Optional[Form]:
    """
    Resolve an explicit insertion parent.

    Raises:
        SelectionMismatch: If the parent id is absent from the forest
    """
    if parent_id is None:
        return None
    index = index_forest(forest)
    if parent_id not in index:
        raise SelectionMismatch(PARENT_STALE_REASON)
    return index[parent_id].node


def is_container(form: Form) -> bool:
    return form.boundary is not BoundaryType.ATOM
