"""
Form construction, copying and traversal.

Every constructor assigns a fresh identity. Nothing here mutates an
existing Form; "changing" a tree always means building a new one.
"""

import uuid
from typing import Iterable, Iterator, Optional, Set

from .types import BoundaryType, Forest, Form


def new_form_id() -> str:
    """Fresh process-unique identity."""
    return uuid.uuid4().hex


def create_form(
    boundary: BoundaryType,
    *children: Form,
    label: Optional[str] = None,
) -> Form:
    """
    Build a Form with a fresh identity.

    Args:
        boundary: Boundary shape (BoundaryType or its string value)
        *children: Child forms (ignored order, kept for rendering)
        label: Atom label (atoms only)

    Raises:
        ValueError: If the boundary/label/children combination is invalid
    """
    return Form(
        id=new_form_id(),
        boundary=BoundaryType(boundary),
        children=tuple(children),
        label=label,
    )


def round_(*children: Form) -> Form:
    return create_form(BoundaryType.ROUND, *children)


def square(*children: Form) -> Form:
    return create_form(BoundaryType.SQUARE, *children)


def angle(*children: Form) -> Form:
    return create_form(BoundaryType.ANGLE, *children)


def atom(label: str) -> Form:
    return create_form(BoundaryType.ATOM, label=label)


def deep_clone(form: Form) -> Form:
    """Copy a tree by value, assigning fresh identities throughout."""
    return Form(
        id=new_form_id(),
        boundary=form.boundary,
        children=tuple(deep_clone(child) for child in form.children),
        label=form.label,
    )


def clone_forest(forms: Iterable[Form]) -> Forest:
    return tuple(deep_clone(form) for form in forms)


def with_children(form: Form, children: Iterable[Form]) -> Form:
    """Rebuild `form` with new children (fresh identity, same boundary)."""
    return create_form(form.boundary, *children)


def traverse(form: Form) -> Iterator[Form]:
    """
    Depth-first traversal visiting every node exactly once.

    Traversal order is implementation-defined.
    """
    stack = [form]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(current.children)


def traverse_forest(forest: Iterable[Form]) -> Iterator[Form]:
    for root in forest:
        yield from traverse(root)


def collect_form_ids(forest: Iterable[Form]) -> Set[str]:
    """All identities present anywhere in the forest."""
    return {node.id for node in traverse_forest(forest)}
