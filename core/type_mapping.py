"""Normalization of the property types reported by the graph."""
from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Optional

from core.model import Property, Type


TYPE_MAPPING = {
    'Long': 'integer',
    'Double': 'float',
}

_ARRAY_SUFFIX = 'Array'


def normalize(name: str) -> str:
    return TYPE_MAPPING.get(name, name).lower()


def normalize_type(raw: str) -> Type:
    """Map a raw type name such as ``Long`` or ``StringArray`` to a :class:`Type`.

    Names ending in ``Array`` become ``array`` types whose item kind is the
    normalized remainder, everything else is a scalar.
    """
    if raw.endswith(_ARRAY_SUFFIX):
        return Type('array', normalize(raw[:-len(_ARRAY_SUFFIX)]))
    return Type(normalize(raw))


def normalize_types(raw_types: Optional[Iterable[str]]) -> List[Type]:
    return [normalize_type(t) for t in (raw_types or [])]


def extract_property(row: Mapping[str, Any]) -> Optional[Property]:
    """Build the property a table row describes.

    Rows without a ``propertyName`` stand for label combinations or
    relationship types that carry no properties and yield ``None``.
    """
    name = row.get('propertyName')
    if name is None:
        return None
    return Property(
        name=name,
        types=normalize_types(row.get('propertyTypes')),
        mandatory=bool(row.get('mandatory')),
    )
