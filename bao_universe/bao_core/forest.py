"""
Forest surgery: locating nodes by identity and rebuilding trees around them.

Forms are immutable, so every edit rebuilds the path from the edited parent
up to its root with fresh identities. Untouched subtrees are shared.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .form import with_children
from .types import Forest, Form, Path


@dataclass(frozen=True)
class Located:
    """A node together with its immediate parent (None at top level)."""
    node: Form
    parent: Optional[Form]
    index: int  # position among the parent's children (or the top level)


def index_forest(forest: Forest) -> Dict[str, Located]:
    """Map every identity in the forest to its location."""
    index: Dict[str, Located] = {}
    stack: List[Located] = [
        Located(node=node, parent=None, index=i) for i, node in enumerate(forest)
    ]
    while stack:
        current = stack.pop()
        index[current.node.id] = current
        stack.extend(
            Located(node=child, parent=current.node, index=i)
            for i, child in enumerate(current.node.children)
        )
    return index


def unique_ids(ids: Iterable[str]) -> Tuple[str, ...]:
    """De-duplicate while keeping first-seen order."""
    seen = set()
    ordered = []
    for node_id in ids:
        if node_id not in seen:
            seen.add(node_id)
            ordered.append(node_id)
    return tuple(ordered)


def parent_key(located: Located) -> Optional[str]:
    return located.parent.id if located.parent is not None else None


def shared_parent(locations: Sequence[Located]) -> Tuple[bool, Optional[Form]]:
    """
    Check that all locations share one immediate parent.

    Returns:
        (shared, parent) where parent is None for top-level siblings
    """
    keys = {parent_key(entry) for entry in locations}
    if len(keys) != 1:
        return False, None
    return True, locations[0].parent


def siblings_of(forest: Forest, parent: Optional[Form]) -> Tuple[Form, ...]:
    return forest if parent is None else parent.children


def replace_in_parent(
    forest: Forest,
    parent: Optional[Form],
    removed_ids: Iterable[str],
    replacements: Sequence[Form],
) -> Forest:
    """
    Remove `removed_ids` from one sibling group and insert `replacements`
    where the first removed form stood (or at the end if none were removed).

    `parent` is the sibling group's container, None for the top level.
    """
    removed = set(removed_ids)
    siblings = siblings_of(forest, parent)
    kept: List[Form] = []
    insert_at: Optional[int] = None
    for child in siblings:
        if child.id in removed:
            if insert_at is None:
                insert_at = len(kept)
            continue
        kept.append(child)
    if insert_at is None:
        insert_at = len(kept)
    new_children = kept[:insert_at] + list(replacements) + kept[insert_at:]

    if parent is None:
        return tuple(new_children)
    return replace_node(forest, parent.id, [with_children(parent, new_children)])


def replace_node(forest: Forest, target_id: str, replacements: Sequence[Form]) -> Forest:
    """
    Replace the node `target_id` with zero or more forms, rebuilding its
    ancestors with fresh identities. Returns the forest unchanged when the
    id is absent.
    """

    def rewrite(node: Form) -> Tuple[List[Form], bool]:
        if node.id == target_id:
            return list(replacements), True
        changed = False
        new_children: List[Form] = []
        for child in node.children:
            forms, child_changed = rewrite(child)
            changed = changed or child_changed
            new_children.extend(forms)
        if not changed:
            return [node], False
        return [with_children(node, new_children)], True

    roots: List[Form] = []
    for root in forest:
        forms, _ = rewrite(root)
        roots.extend(forms)
    return tuple(roots)


def insert_children(forest: Forest, parent_id: Optional[str], new_forms: Sequence[Form]) -> Forest:
    """Append forms to a node's children, or to the top level when parent_id is None."""
    if parent_id is None:
        return tuple(forest) + tuple(new_forms)
    index = index_forest(forest)
    parent = index[parent_id].node
    return replace_node(forest, parent_id, [with_children(parent, parent.children + tuple(new_forms))])


def node_at_path(forest: Forest, path: Path) -> Form:
    """
    Resolve a child-index path.

    Raises:
        IndexError: If the path leaves the tree
        ValueError: If the path is empty
    """
    if not path:
        raise ValueError("node_at_path requires a non-empty path")
    node = forest[path[0]]
    for step in path[1:]:
        node = node.children[step]
    return node


def parse_path(text: str) -> Path:
    """Parse "0/1/2" into (0, 1, 2)."""
    text = text.strip().strip("/")
    if not text:
        raise ValueError("Empty path")
    try:
        return tuple(int(part) for part in text.split("/"))
    except ValueError:
        raise ValueError(f"Invalid path '{text}'; expected slash-separated indices")
