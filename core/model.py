"""Records that make up a graph schema representation."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class Token:
    id: str
    value: str


@dataclass(frozen=True)
class Type:
    kind: str
    item_kind: Optional[str] = None


@dataclass(frozen=True)
class Property:
    name: str
    types: List[Type]
    mandatory: bool = False


@dataclass(frozen=True)
class Ref:
    target_id: str


@dataclass
class NodeObjectType:
    id: str
    label_refs: List[Ref]
    # Appended to while rows are folded in
    properties: List[Property] = field(default_factory=list)


@dataclass
class RelationshipObjectType:
    id: str
    type_ref: Ref
    from_ref: Ref
    to_ref: Ref
    properties: List[Property] = field(default_factory=list)
