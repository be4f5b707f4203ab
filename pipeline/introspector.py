"""Graph schema introspection.

Builds a graph schema representation, as described by
https://github.com/neo4j/graph-schema-json-js-utils, from the schema facts a
graph reports. The facts come from a *schema source* offering:

- ``labels_in_use()`` and ``relationship_types_in_use()``: iterables of names,
  closed after use if they have a ``close`` method
- ``node_type_properties()``: rows with ``nodeType``, ``nodeLabels``,
  ``propertyName``, ``propertyTypes`` and ``mandatory``, ordered by ``nodeType``
- ``rel_type_properties()``: rows with ``relType``, ``fromLabels``,
  ``toLabels``, ``propertyName``, ``propertyTypes`` and ``mandatory``, ordered
  by ``relType``

:class:`storage.neo4j.schema_source.Neo4jSchemaSource` reads them from Neo4j.
"""
from __future__ import annotations

import logging
import time
from typing import Any, Dict, Mapping, Optional

from core.config import IntrospectionOptions
from core.ids import IdFactory, IdGenerators
from core.sanitize import sanitize_name
from core.tokens import Sanitizer, build_tokens
from pipeline.aggregators import node_object_types, relationship_object_types
from pipeline.document import build_document, render

logger = logging.getLogger(__name__)


class SchemaIntrospector:
    def __init__(
        self,
        source: Any,
        sanitizer: Sanitizer = sanitize_name,
        new_id: Optional[IdFactory] = None,
    ):
        self.source = source
        self.sanitizer = sanitizer
        self.new_id = new_id

    def build(self, options: IntrospectionOptions) -> Dict[str, Any]:
        """Collect tokens and object types and return the document as plain data."""
        start = time.time()
        # Generators carry caches and counters, never share them between calls
        ids = IdGenerators(options.use_constant_ids, self.new_id)

        node_labels = build_tokens(
            self.source.labels_in_use(), ids.node_label, options.quote_tokens, self.sanitizer)
        relationship_types = build_tokens(
            self.source.relationship_types_in_use(), ids.relationship_type, options.quote_tokens, self.sanitizer)

        node_objects = node_object_types(
            self.source.node_type_properties, ids.node_object, node_labels)
        relationship_objects = relationship_object_types(
            self.source.rel_type_properties, ids.node_object, ids.relationship_object, relationship_types,
            node_labels, node_objects)

        logger.info(
            "Introspected %s labels, %s relationship types, %s node object types, "
            "%s relationship object types in %.2fs",
            len(node_labels), len(relationship_types), len(node_objects),
            len(relationship_objects), time.time() - start,
        )
        return build_document(node_labels, relationship_types, node_objects, relationship_objects)

    def introspect(self, params: Optional[Mapping[str, Any]] = None) -> str:
        """Return the graph schema representation as a JSON string.

        ``params`` may hold ``useConstantIds`` (default true), ``prettyPrint``
        (default false) and ``quoteTokens`` (default true).
        """
        options = IntrospectionOptions.from_params(params)
        logger.debug(f"Introspecting with {options}")
        return render(self.build(options), options.pretty_print)


def introspect(source: Any, params: Optional[Mapping[str, Any]] = None, sanitizer: Sanitizer = sanitize_name) -> str:
    return SchemaIntrospector(source, sanitizer=sanitizer).introspect(params)
