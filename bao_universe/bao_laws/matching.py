"""
Shared multiset matching used by collect and cancel.

Forms are compared only through canonical signatures, so every routine here
works on signature multisets (Counters) rather than on identities.
"""

from collections import Counter
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from bao_core.signature import canonical_signature
from bao_core.types import BoundaryType, Form

# Base of the reflection chain <>, <<>>, ... (the reflection of void)
VOID_BASE = ""


def signature_counts(forms: Iterable[Form]) -> Counter:
    return Counter(canonical_signature(form) for form in forms)


def multiset_intersection(multisets: Sequence[Counter]) -> Counter:
    """Elements common to every multiset, with minimum multiplicity."""
    if not multisets:
        return Counter()
    common = Counter(multisets[0])
    for other in multisets[1:]:
        common &= other
    return common


def is_submultiset(part: Counter, whole: Counter) -> bool:
    return all(whole[key] >= count for key, count in part.items())


def same_multiset(left: Counter, right: Counter) -> bool:
    return +left == +right


def reflection_chain(form: Form) -> Tuple[str, int]:
    """
    Position of a form on its reflection chain.

    Strips single-child angles: X, <X>, <<X>> share base sig(X) with depths
    0, 1, 2. A bare angle <> sits at depth 1 above void, so <>, <<>> share
    the void base with depths 1, 2.

    Two forms are reflections of each other iff they share a base and their
    depths differ by exactly one.
    """
    depth = 0
    current = form
    while current.boundary is BoundaryType.ANGLE and len(current.children) == 1:
        depth += 1
        current = current.children[0]
    if current.boundary is BoundaryType.ANGLE and not current.children:
        return VOID_BASE, depth + 1
    return canonical_signature(current), depth


def partition_reflections(forms: Sequence[Form]) -> Optional[List[Tuple[int, ...]]]:
    """
    Partition forms into reflection pairs plus at most one bare angle.

    Along one chain only neighbouring depths pair up, so the deepest class
    must be absorbed entirely by the class below it; walking each chain from
    the top down either finds the partition or proves none exists.

    Returns:
        List of index groups (pairs, and possibly one singleton bare angle),
        or None if no partition exists
    """
    chains: Dict[str, Dict[int, List[int]]] = {}
    for i, form in enumerate(forms):
        base, depth = reflection_chain(form)
        chains.setdefault(base, {}).setdefault(depth, []).append(i)

    groups: List[Tuple[int, ...]] = []
    spare_bare_angle = False
    for base in sorted(chains):
        by_depth = {depth: list(members) for depth, members in chains[base].items()}
        floor = 1 if base == VOID_BASE else 0
        for depth in sorted(by_depth, reverse=True):
            upper = by_depth[depth]
            if not upper:
                continue
            if depth == floor:
                break
            lower = by_depth.get(depth - 1, [])
            if len(upper) > len(lower):
                return None
            for upper_index in upper:
                groups.append((lower.pop(), upper_index))
            by_depth[depth] = []
            by_depth[depth - 1] = lower
        leftover = by_depth.get(floor, [])
        if base == VOID_BASE and len(leftover) == 1 and not spare_bare_angle:
            spare_bare_angle = True
            groups.append((leftover[0],))
        elif leftover:
            return None
    return groups


def find_group_reflection(forms: Sequence[Form]) -> Optional[int]:
    """
    Index of an angle whose children are, as a multiset, exactly all the
    other forms (F1 ... Fn <F1 ... Fn>), or None.
    """
    if len(forms) < 3:
        return None
    for i, candidate in enumerate(forms):
        if candidate.boundary is not BoundaryType.ANGLE:
            continue
        if len(candidate.children) != len(forms) - 1:
            continue
        others = [form for j, form in enumerate(forms) if j != i]
        if same_multiset(signature_counts(candidate.children), signature_counts(others)):
            return i
    return None
