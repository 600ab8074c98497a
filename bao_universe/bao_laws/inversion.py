"""
Inversion axiom: ([A]) = A = [(A)].

- clarify: removes a complementary round/square pair, splicing the inner
  contents into the pair's position
- enfold (frame / mark): wraps sibling forms, or void, in a fresh pair

Each operation has a resolver that only checks the precondition and a
builder that produces the new forest. The availability oracle calls the
resolvers alone.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from bao_core.forest import Located, insert_children, replace_in_parent, replace_node
from bao_core.form import create_form, deep_clone
from bao_core.types import COMPLEMENT, BoundaryType, Forest, Form

from .errors import NotApplicable
from .selection import is_container, require_located, require_parent, require_siblings

CLARIFY_REASON = "Select a round-square pair to clarify."
ENFOLD_ATOM_PARENT_REASON = "Atoms cannot hold new boundaries."

# variant -> (outer, inner)
ENFOLD_VARIANTS = {
    "frame": (BoundaryType.ROUND, BoundaryType.SQUARE),
    "mark": (BoundaryType.SQUARE, BoundaryType.ROUND),
}


def invertible_child(form: Form) -> Optional[Form]:
    """The single complementary child of a round/square node, else None."""
    if len(form.children) != 1:
        return None
    child = form.children[0]
    if COMPLEMENT.get(form.boundary) is child.boundary:
        return child
    return None


def is_clarify_applicable(form: Form) -> bool:
    return invertible_child(form) is not None


# =============================================================================
# Clarify
# =============================================================================


@dataclass(frozen=True)
class ClarifyPlan:
    target: Located
    inner: Form


def resolve_clarify(forest: Forest, node_ids: Sequence[str]) -> ClarifyPlan:
    """
    Raises:
        SelectionMismatch: Unknown id
        NotApplicable: Not exactly one node, or no complementary pair
    """
    locations = require_located(forest, node_ids)
    if len(locations) != 1:
        raise NotApplicable(CLARIFY_REASON)
    target = locations[0]
    inner = invertible_child(target.node)
    if inner is None:
        raise NotApplicable(CLARIFY_REASON)
    return ClarifyPlan(target=target, inner=inner)


def clarify(forest: Forest, node_ids: Sequence[str]) -> Forest:
    """
    ([A]) => A and [(A)] => A.

    The inner node's children (zero, one or many) replace the pair in place;
    the rest of the forest is untouched.
    """
    plan = resolve_clarify(forest, node_ids)
    contents = [deep_clone(child) for child in plan.inner.children]
    return replace_node(forest, plan.target.node.id, contents)


# =============================================================================
# Enfold
# =============================================================================


@dataclass(frozen=True)
class EnfoldPlan:
    outer: BoundaryType
    inner: BoundaryType
    targets: Tuple[Located, ...]
    parent: Optional[Form]


def wrap_with_pair(forms: Sequence[Form], outer: BoundaryType, inner: BoundaryType) -> Form:
    """outer(inner(copies of forms)) with fresh identities."""
    return create_form(outer, create_form(inner, *(deep_clone(form) for form in forms)))


def resolve_enfold(
    forest: Forest,
    node_ids: Sequence[str],
    parent_id: Optional[str] = None,
    variant: str = "frame",
) -> EnfoldPlan:
    """
    Raises:
        ValueError: Unknown variant
        SelectionMismatch: Unknown node or parent id
        NotApplicable: Selected forms under different parents, or an atom parent
    """
    if variant not in ENFOLD_VARIANTS:
        raise ValueError(f"Unknown enfold variant '{variant}'. Valid: {list(ENFOLD_VARIANTS)}")
    outer, inner = ENFOLD_VARIANTS[variant]

    locations = require_located(forest, node_ids)
    if not locations:
        parent = require_parent(forest, parent_id)
        if parent is not None and not is_container(parent):
            raise NotApplicable(ENFOLD_ATOM_PARENT_REASON)
        return EnfoldPlan(outer=outer, inner=inner, targets=(), parent=parent)

    parent = require_siblings(locations)
    return EnfoldPlan(outer=outer, inner=inner, targets=tuple(locations), parent=parent)


def enfold(
    forest: Forest,
    node_ids: Sequence[str],
    parent_id: Optional[str] = None,
    variant: str = "frame",
) -> Forest:
    """
    A => ([A]) (frame) or A => [(A)] (mark).

    With no selection a fresh void pair is added at top level, or under
    `parent_id` when given. Otherwise the selected siblings are lifted into
    the new pair, which takes the place of the first selected form.
    """
    plan = resolve_enfold(forest, node_ids, parent_id, variant)
    if not plan.targets:
        wrapper = create_form(plan.outer, create_form(plan.inner))
        insert_id = plan.parent.id if plan.parent is not None else None
        return insert_children(forest, insert_id, [wrapper])

    moved: List[Form] = [entry.node for entry in plan.targets]
    wrapper = wrap_with_pair(moved, plan.outer, plan.inner)
    return replace_in_parent(forest, plan.parent, [form.id for form in moved], [wrapper])


def enfold_frame(forest: Forest, node_ids: Sequence[str], parent_id: Optional[str] = None) -> Forest:
    return enfold(forest, node_ids, parent_id, "frame")


def enfold_mark(forest: Forest, node_ids: Sequence[str], parent_id: Optional[str] = None) -> Forest:
    return enfold(forest, node_ids, parent_id, "mark")
