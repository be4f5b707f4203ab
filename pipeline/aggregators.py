"""Fold the flat property tables into node and relationship object types."""
from __future__ import annotations

import logging
from contextlib import closing
from typing import Any, Callable, Dict, Iterable, Iterator, Mapping

from core.errors import DataAccessError, InconsistentSchemaError
from core.ids import structural_key
from core.model import NodeObjectType, Ref, RelationshipObjectType, Token
from core.type_mapping import extract_property

logger = logging.getLogger(__name__)

Row = Mapping[str, Any]


def _token_ref(tokens: Mapping[str, Token], name: str, kind: str) -> Ref:
    token = tokens.get(name)
    if token is None:
        raise InconsistentSchemaError(f"Property table references unknown {kind} {name!r}")
    return Ref(token.id)


def _rows(rows: Callable[[], Iterable[Row]], description: str) -> Iterator[Row]:
    """Iterate a table, reporting driver failures as DataAccessError."""
    try:
        table = rows()
        iterator = iter(table)
    except DataAccessError:
        raise
    except Exception as exc:
        raise DataAccessError(f"Querying {description} failed: {exc}") from exc

    try:
        while True:
            try:
                row = next(iterator)
            except StopIteration:
                return
            except DataAccessError:
                raise
            except Exception as exc:
                raise DataAccessError(f"Reading {description} failed: {exc}") from exc
            yield row
    finally:
        close = getattr(table, 'close', None)
        if callable(close):
            close()


def node_object_types(
    rows: Callable[[], Iterable[Row]],
    node_id_generator: Callable[[str], str],
    label_tokens: Mapping[str, Token],
) -> Dict[str, NodeObjectType]:
    """Group node property rows by label combination.

    ``rows`` is only invoked when there are labels in use. Rows must arrive
    ordered by ``nodeType``; the result keeps that order.
    """
    if not label_tokens:
        return {}

    result: Dict[str, NodeObjectType] = {}
    with closing(_rows(rows, 'node type properties')) as table:
        for row in table:
            object_id = node_id_generator(row['nodeType'])
            node_type = result.get(object_id)
            if node_type is None:
                labels = sorted(row.get('nodeLabels') or [])
                refs = [_token_ref(label_tokens, label, 'label') for label in labels]
                node_type = result[object_id] = NodeObjectType(object_id, refs)
                logger.debug(f"Node object type {object_id} for labels {labels}")

            prop = extract_property(row)
            if prop is not None:
                node_type.properties.append(prop)
    return result


def _endpoint_id(
    labels: Iterable[str],
    node_id_generator: Callable[[str], str],
    label_tokens: Mapping[str, Token],
    node_objects: Mapping[str, NodeObjectType],
    side: str,
) -> str:
    labels = list(labels)
    for label in labels:
        _token_ref(label_tokens, label, 'label')
    node_id = node_id_generator(structural_key(labels))
    if node_id not in node_objects:
        raise InconsistentSchemaError(
            f"Relationship {side} labels {sorted(labels)} match no node object type")
    return node_id


def relationship_object_types(
    rows: Callable[[], Iterable[Row]],
    node_id_generator: Callable[[str], str],
    relationship_id_generator: Callable[[str, str], str],
    type_tokens: Mapping[str, Token],
    label_tokens: Mapping[str, Token],
    node_objects: Mapping[str, NodeObjectType],
) -> Dict[str, RelationshipObjectType]:
    """Group relationship property rows by relationship type and target.

    Endpoints go through the same node id generator used for
    :func:`node_object_types` and must resolve to one of ``node_objects``.
    One relationship type with several distinct targets yields several object
    types sharing the type ref.
    """
    if not type_tokens:
        return {}

    result: Dict[str, RelationshipObjectType] = {}
    with closing(_rows(rows, 'relationship type properties')) as table:
        for row in table:
            rel_type = row['relType']
            from_id = _endpoint_id(row.get('fromLabels') or [], node_id_generator, label_tokens, node_objects, 'start')
            to_id = _endpoint_id(row.get('toLabels') or [], node_id_generator, label_tokens, node_objects, 'end')

            object_id = relationship_id_generator(rel_type, to_id)
            rel_object = result.get(object_id)
            if rel_object is None:
                type_ref = _token_ref(type_tokens, rel_type, 'relationship type')
                rel_object = result[object_id] = RelationshipObjectType(
                    object_id, type_ref, Ref(from_id), Ref(to_id))
                logger.debug(f"Relationship object type {object_id}: ({from_id})-[{rel_type}]->({to_id})")

            prop = extract_property(row)
            if prop is not None:
                rel_object.properties.append(prop)
    return result
