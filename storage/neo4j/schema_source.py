"""Schema facts read from a Neo4j database."""
from __future__ import annotations

from contextlib import closing
from typing import Any, Dict, Iterator

from storage.neo4j.neo4j_utils import Neo4jConnection

LABELS_QUERY = "CALL db.labels() YIELD label RETURN label"

RELATIONSHIP_TYPES_QUERY = "CALL db.relationshipTypes() YIELD relationshipType RETURN relationshipType"

NODE_TYPE_PROPERTIES_QUERY = """
CALL db.schema.nodeTypeProperties()
YIELD nodeType, nodeLabels, propertyName, propertyTypes, mandatory
RETURN *
ORDER BY nodeType ASC
"""

# relType is reported as :`TYPE`, the substring strips the decoration
REL_TYPE_PROPERTIES_QUERY = """
CALL db.schema.relTypeProperties() YIELD relType, propertyName, propertyTypes, mandatory
WITH substring(relType, 2, size(relType)-3) AS relType, propertyName, propertyTypes, mandatory
MATCH (n)-[r]->(m) WHERE type(r) = relType
WITH DISTINCT labels(n) AS fromLabels, labels(m) AS toLabels, relType, propertyName, propertyTypes, mandatory
RETURN *
ORDER BY relType ASC
"""


class Neo4jSchemaSource:
    """Reads labels, relationship types and property tables through a connection."""

    def __init__(self, conn: Neo4jConnection):
        self.conn = conn

    def labels_in_use(self) -> Iterator[str]:
        with closing(self.conn.stream(LABELS_QUERY)) as records:
            for record in records:
                yield record['label']

    def relationship_types_in_use(self) -> Iterator[str]:
        with closing(self.conn.stream(RELATIONSHIP_TYPES_QUERY)) as records:
            for record in records:
                yield record['relationshipType']

    def node_type_properties(self) -> Iterator[Dict[str, Any]]:
        return self.conn.stream(NODE_TYPE_PROPERTIES_QUERY)

    def rel_type_properties(self) -> Iterator[Dict[str, Any]]:
        return self.conn.stream(REL_TYPE_PROPERTIES_QUERY)
