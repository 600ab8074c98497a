"""
Canonical serialization of forests back to declarative level data.

Nodes are ordered by canonical signature at every depth, so two
structurally equal forests serialize to identical output regardless of
identities or sibling order. Useful for stable diffing while authoring.
"""

import json
from typing import Iterable, List

from bao_core.signature import canonical_signature
from bao_core.types import Form

from .types import RawFormNode


def to_raw_node(form: Form) -> RawFormNode:
    node: RawFormNode = {"boundary": form.boundary.value}
    if form.label is not None:
        node["label"] = form.label
        return node
    children = sorted(form.children, key=canonical_signature)
    node["children"] = [to_raw_node(child) for child in children]
    return node


def serialize_forest(forms: Iterable[Form]) -> List[RawFormNode]:
    return [to_raw_node(form) for form in sorted(forms, key=canonical_signature)]


def format_forest_as_json(forms: Iterable[Form]) -> str:
    return json.dumps(serialize_forest(forms), indent=2)
