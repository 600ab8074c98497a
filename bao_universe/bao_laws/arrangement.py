"""
Arrangement axiom: (A [B C]) = (A [B]) (A [C]).

- disperse: distributes the contents of a square across copies of its
  enclosing context P
- collect: merges same-context frames back into one, gathering their
  residual squares' contents into a single square

The context A and the residual squares are found by signature matching, so
children order and identities never matter.
"""

from collections import Counter
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from bao_core.forest import Located, index_forest, replace_in_parent, replace_node
from bao_core.form import deep_clone, round_, square
from bao_core.signature import canonical_signature
from bao_core.types import BoundaryType, Forest, Form

from .errors import NotApplicable, StructuralMismatch
from .matching import is_submultiset, multiset_intersection, same_multiset, signature_counts
from .selection import require_located, require_siblings

DISPERSE_REASON = "Select contents inside a single square to disperse."
TOP_LEVEL_SQUARE_REASON = "A top-level square has no context to disperse into."
ROUND_FRAME_REASON = "Only a square inside a round frame can be dispersed."
COLLECT_REASON = "Select round frames that share the same context to collect."
COLLECT_MATCH_REASON = "Selected frames do not share a common context around one square each."


# =============================================================================
# Disperse
# =============================================================================


@dataclass(frozen=True)
class DispersePlan:
    """
    frame: location of the context node P
    square: the square S being distributed
    context: P's children other than S (the shared context A)
    picked: S's children that each get their own copy of P
    remaining: S's children kept together in one remainder copy
    """
    frame: Located
    square: Form
    context: Tuple[Form, ...]
    picked: Tuple[Form, ...]
    remaining: Tuple[Form, ...]


def _same_node(left: Optional[Form], right: Optional[Form]) -> bool:
    if left is None or right is None:
        return left is right
    return left.id == right.id


def _plan_for_square(index, square_node: Form, picked_ids=None) -> DispersePlan:
    square_location = index[square_node.id]
    if square_location.parent is None:
        raise NotApplicable(TOP_LEVEL_SQUARE_REASON)
    frame = index[square_location.parent.id]
    if frame.node.boundary is not BoundaryType.ROUND:
        raise NotApplicable(ROUND_FRAME_REASON)
    context = tuple(child for child in frame.node.children if child.id != square_node.id)
    if picked_ids is None:
        picked, remaining = square_node.children, ()
    else:
        picked = tuple(child for child in square_node.children if child.id in picked_ids)
        remaining = tuple(child for child in square_node.children if child.id not in picked_ids)
    return DispersePlan(
        frame=frame,
        square=square_node,
        context=context,
        picked=picked,
        remaining=remaining,
    )


def resolve_disperse(forest: Forest, node_ids: Sequence[str]) -> DispersePlan:
    """
    Resolve the selection to one square S inside a context P.

    Two selection shapes are accepted, tried in this order:
        1. exactly one square S, every other selected node a sibling of S
           (all of S's contents are distributed)
        2. nodes that are all children of one square S (only those are
           distributed; the rest stay together)

    Raises:
        SelectionMismatch: Unknown id
        NotApplicable: No single square found, S is top-level, or P is not
            round
    """
    locations = require_located(forest, node_ids)
    if not locations:
        raise NotApplicable(DISPERSE_REASON)
    index = index_forest(forest)

    squares = [entry for entry in locations if entry.node.boundary is BoundaryType.SQUARE]
    if len(squares) == 1:
        target = squares[0]
        if all(_same_node(entry.parent, target.parent) for entry in locations):
            return _plan_for_square(index, target.node)

    parent = locations[0].parent
    if (
        parent is not None
        and parent.boundary is BoundaryType.SQUARE
        and all(_same_node(entry.parent, parent) for entry in locations)
    ):
        return _plan_for_square(index, parent, {entry.node.id for entry in locations})

    raise NotApplicable(DISPERSE_REASON)


def _frame_copy(context: Sequence[Form], contents: Sequence[Form]) -> Form:
    context_copies = [deep_clone(form) for form in context]
    return round_(*context_copies, square(*(deep_clone(form) for form in contents)))


def disperse(forest: Forest, node_ids: Sequence[str]) -> Forest:
    """
    (A [B C]) => (A [B]) (A [C]).

    One fresh round copy of P per distributed child, each holding fresh
    copies of the context. A square with no contents removes the whole branch.
    """
    plan = resolve_disperse(forest, node_ids)
    frames: List[Form] = []
    if plan.remaining:
        frames.append(_frame_copy(plan.context, plan.remaining))
    frames.extend(_frame_copy(plan.context, [content]) for content in plan.picked)
    return replace_node(forest, plan.frame.node.id, frames)


# =============================================================================
# Collect
# =============================================================================


@dataclass(frozen=True)
class CollectPlan:
    targets: Tuple[Located, ...]
    parent: Optional[Form]
    context: Tuple[Form, ...]
    squares: Tuple[Form, ...]


def _residual_square(form: Form, counts: Counter, context_counts: Counter) -> Optional[Form]:
    """A non-empty square child whose removal leaves exactly the context."""
    for child in form.children:
        if child.boundary is not BoundaryType.SQUARE or not child.children:
            continue
        rest = counts - Counter({canonical_signature(child): 1})
        if same_multiset(rest, context_counts):
            return child
    return None


def resolve_collect(forest: Forest, node_ids: Sequence[str]) -> CollectPlan:
    """
    Find a shared context A such that every selected form is exactly A plus
    one non-empty square.

    Raises:
        SelectionMismatch: Unknown id
        NotApplicable: Fewer than two forms, different parents, or a
            selected form that is not round
        StructuralMismatch: No common context / residual square partition
    """
    locations = require_located(forest, node_ids)
    if len(locations) < 2:
        raise NotApplicable(COLLECT_REASON)
    parent = require_siblings(locations)

    if any(entry.node.boundary is not BoundaryType.ROUND for entry in locations):
        raise NotApplicable(COLLECT_REASON)

    counts = [signature_counts(entry.node.children) for entry in locations]
    common = multiset_intersection(counts)
    first = locations[0].node

    tried = set()
    for candidate in first.children:
        if candidate.boundary is not BoundaryType.SQUARE or not candidate.children:
            continue
        candidate_signature = canonical_signature(candidate)
        if candidate_signature in tried:
            continue
        tried.add(candidate_signature)

        context_counts = counts[0] - Counter({candidate_signature: 1})
        if not is_submultiset(context_counts, common):
            continue

        squares = [candidate]
        for entry, entry_counts in zip(locations[1:], counts[1:]):
            match = _residual_square(entry.node, entry_counts, context_counts)
            if match is None:
                break
            squares.append(match)
        else:
            context = tuple(child for child in first.children if child.id != candidate.id)
            return CollectPlan(
                targets=tuple(locations),
                parent=parent,
                context=context,
                squares=tuple(squares),
            )

    raise StructuralMismatch(COLLECT_MATCH_REASON)


def collect(forest: Forest, node_ids: Sequence[str]) -> Forest:
    """
    (A [B]) (A [C]) => (A [B C]).

    The selected forms are replaced by one fresh round frame holding copies
    of A and a square with every residual content.
    """
    plan = resolve_collect(forest, node_ids)
    contents = [content for residual in plan.squares for content in residual.children]
    merged = _frame_copy(plan.context, contents)
    removed = [entry.node.id for entry in plan.targets]
    return replace_in_parent(forest, plan.parent, removed, [merged])
