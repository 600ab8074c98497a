"""
Reflection axiom: A <A> = void.

- reflect: the angle-wrapped mirror of a form
- cancel: removes forms that pair up with their reflections
- create: adds a form together with its reflection, or a bare <> from void
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from bao_core.forest import Located, insert_children, replace_in_parent
from bao_core.form import angle, deep_clone
from bao_core.types import BoundaryType, Forest, Form

from .errors import NotApplicable, SelectionMismatch, StructuralMismatch
from .matching import find_group_reflection, partition_reflections
from .selection import require_located, require_parent, require_siblings

CANCEL_REASON = "Select a form and its reflection (or an empty angle) to cancel."
CANCEL_MATCH_REASON = "Selected forms do not pair up with their reflections."
CREATE_PARENT_REASON = "Reflections can only be created inside a square or at the top level."


def reflect(form: Form) -> Form:
    """
    Mirror of a form.

    A single-child angle reflects to (a copy of) its child; anything else is
    wrapped in a fresh angle. reflect is involutive except on nested
    single-child angles: reflect(reflect(<<a>>)) is a, not <<a>>.
    """
    if form.boundary is BoundaryType.ANGLE and len(form.children) == 1:
        return deep_clone(form.children[0])
    return angle(deep_clone(form))


# =============================================================================
# Cancel
# =============================================================================


@dataclass(frozen=True)
class CancelPlan:
    targets: Tuple[Located, ...]
    parent: Optional[Form]
    groups: Tuple[Tuple[int, ...], ...]  # indexes into targets


def resolve_cancel(forest: Forest, node_ids: Sequence[str]) -> CancelPlan:
    """
    The selection must partition into reflection pairs plus at most one bare
    angle, or be a group F1 ... Fn together with <F1 ... Fn>.

    Raises:
        SelectionMismatch: Unknown id
        NotApplicable: Empty selection or different parents
        StructuralMismatch: No valid partition
    """
    locations = require_located(forest, node_ids)
    if not locations:
        raise NotApplicable(CANCEL_REASON)
    parent = require_siblings(locations)
    forms = [entry.node for entry in locations]

    groups = partition_reflections(forms)
    if groups is None:
        group_index = find_group_reflection(forms)
        if group_index is None:
            raise StructuralMismatch(CANCEL_MATCH_REASON)
        groups = [tuple(range(len(forms)))]

    return CancelPlan(targets=tuple(locations), parent=parent, groups=tuple(groups))


def cancel(forest: Forest, node_ids: Sequence[str]) -> Forest:
    """Remove every matched form; nothing replaces them."""
    plan = resolve_cancel(forest, node_ids)
    removed = [entry.node.id for entry in plan.targets]
    return replace_in_parent(forest, plan.parent, removed, [])


# =============================================================================
# Create
# =============================================================================


@dataclass(frozen=True)
class CreatePlan:
    templates: Tuple[Form, ...]
    parent: Optional[Form]


def resolve_create(
    forest: Forest,
    template_ids: Sequence[str],
    parent_id: Optional[str] = None,
) -> CreatePlan:
    """
    Without an explicit parent_id the pair goes beside the templates, so they
    must be siblings; with no templates either it goes to the top level.

    Raises:
        SelectionMismatch: Unknown template id, unknown parent, or a parent
            (given or inferred) that is not a square
        NotApplicable: Templates under different parents and no parent_id
    """
    locations = require_located(forest, template_ids)
    if parent_id is not None or not locations:
        parent = require_parent(forest, parent_id)
    else:
        parent = require_siblings(locations)
    if parent is not None and parent.boundary is not BoundaryType.SQUARE:
        raise SelectionMismatch(CREATE_PARENT_REASON)
    templates = tuple(entry.node for entry in locations)
    return CreatePlan(templates=templates, parent=parent)


def reflection_pair(templates: Sequence[Form]) -> List[Form]:
    """
    Fresh copies of the templates followed by one fresh angle wrapping a
    second copy. No templates gives a single bare angle.
    """
    if not templates:
        return [angle()]
    copies = [deep_clone(form) for form in templates]
    return copies + [angle(*(deep_clone(form) for form in templates))]


def create(
    forest: Forest,
    template_ids: Sequence[str],
    parent_id: Optional[str] = None,
) -> Forest:
    """void => <>, and A => A A <A> (a template plus its reflection)."""
    plan = resolve_create(forest, template_ids, parent_id)
    insert_id = plan.parent.id if plan.parent is not None else None
    return insert_children(forest, insert_id, reflection_pair(plan.templates))
