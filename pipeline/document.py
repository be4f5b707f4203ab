"""Assembly and JSON rendering of the graph schema representation."""
from __future__ import annotations

import json
from typing import Any, Callable, Dict, List, Mapping, Optional

from core.model import NodeObjectType, Property, Ref, RelationshipObjectType, Token, Type


def type_to_json(type_: Type) -> Dict[str, Any]:
    data: Dict[str, Any] = {'type': type_.kind}
    if type_.kind == 'array':
        data['items'] = {'type': type_.item_kind}
    return data


def type_list_to_json(types: List[Type]) -> Any:
    """None for no types, a single object for one type, a list otherwise."""
    if not types:
        return None
    if len(types) == 1:
        return type_to_json(types[0])
    return [type_to_json(t) for t in types]


def property_to_json(prop: Property) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        'token': prop.name,
        'type': type_list_to_json(prop.types),
    }
    if prop.mandatory:
        data['mandatory'] = True
    return data


def properties_to_json(properties: List[Property]) -> Optional[List[Dict[str, Any]]]:
    if not properties:
        return None
    return [property_to_json(p) for p in properties]


def ref_to_json(ref: Ref) -> Dict[str, str]:
    return {'$ref': ref.target_id}


def token_to_json(token: Token) -> Dict[str, str]:
    return {'$id': token.id, 'token': token.value}


def node_object_type_to_json(node_type: NodeObjectType) -> Dict[str, Any]:
    return {
        '$id': node_type.id,
        'labels': [ref_to_json(r) for r in node_type.label_refs],
        'properties': properties_to_json(node_type.properties),
    }


def relationship_object_type_to_json(rel_type: RelationshipObjectType) -> Dict[str, Any]:
    return {
        '$id': rel_type.id,
        'type': ref_to_json(rel_type.type_ref),
        'from': ref_to_json(rel_type.from_ref),
        'to': ref_to_json(rel_type.to_ref),
        'properties': properties_to_json(rel_type.properties),
    }


def build_document(
    node_labels: Mapping[str, Token],
    relationship_types: Mapping[str, Token],
    node_object_types: Mapping[str, NodeObjectType],
    relationship_object_types: Mapping[str, RelationshipObjectType],
) -> Dict[str, Any]:
    """Arrange the four tables, in insertion order, into the output document."""
    return {
        'graphSchemaRepresentation': {
            'graphSchema': {
                'nodeLabels': _values(node_labels, token_to_json),
                'relationshipTypes': _values(relationship_types, token_to_json),
                'nodeObjectTypes': _values(node_object_types, node_object_type_to_json),
                'relationshipObjectTypes': _values(relationship_object_types, relationship_object_type_to_json),
            }
        }
    }


def _values(table: Mapping[str, Any], encode: Callable[[Any], Dict[str, Any]]) -> List[Dict[str, Any]]:
    return [encode(v) for v in table.values()]


def render(document: Dict[str, Any], pretty_print: bool = False) -> str:
    if pretty_print:
        return json.dumps(document, ensure_ascii=False, indent=2)
    return json.dumps(document, ensure_ascii=False, separators=(',', ':'))
