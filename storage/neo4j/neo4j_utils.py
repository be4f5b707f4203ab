"""
Neo4j connection helpers.
Read-only access used to collect schema facts.
"""

import logging
from typing import Any, Dict, Iterator, List, Optional

from neo4j import READ_ACCESS, GraphDatabase
from neo4j.exceptions import DriverError, Neo4jError

from core.config import Config
from core.errors import DataAccessError

logger = logging.getLogger(__name__)


class Neo4jConnection:
    """Neo4j connection manager."""

    def __init__(self, uri: str = 'bolt://localhost:7687', user: str = 'neo4j',
                 password: Optional[str] = None, database: Optional[str] = None):
        """
        Open a driver for the given database.

        Args:
            uri: Neo4j URI
            user: user name
            password: password
            database: database name, the server default when None
        """
        self.uri = uri
        self.user = user
        self.database = database

        try:
            self.driver = GraphDatabase.driver(
                self.uri,
                auth=(self.user, password),
                connection_acquisition_timeout=10.0,
                connection_timeout=10.0,
            )
            logger.info(f"Connected to Neo4j at {self.uri}")
        except (DriverError, Neo4jError, ValueError) as e:
            raise DataAccessError(f"Could not connect to Neo4j at {self.uri}: {e}") from e

    @classmethod
    def from_config(cls, config: Config) -> "Neo4jConnection":
        return cls(
            uri=config.neo4j_uri,
            user=config.neo4j_user,
            password=config.resolve_password(),
            database=config.neo4j_database,
        )

    def __enter__(self) -> "Neo4jConnection":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self):
        """Close the driver."""
        if hasattr(self, 'driver'):
            self.driver.close()
            logger.info("Neo4j connection closed")

    def execute_query(self, query: str, parameters: Dict[str, Any] = None) -> List[Dict[str, Any]]:
        """
        Run a Cypher query and fetch every record.

        Args:
            query: Cypher statement
            parameters: query parameters

        Returns:
            list of records as dicts
        """
        return list(self.stream(query, parameters))

    def stream(self, query: str, parameters: Dict[str, Any] = None) -> Iterator[Dict[str, Any]]:
        """
        Run a Cypher query and yield its records one by one.

        The session stays open until the generator is exhausted or closed.

        Args:
            query: Cypher statement
            parameters: query parameters
        """
        if parameters is None:
            parameters = {}

        logger.debug(f"Running query: {query.strip()}")
        try:
            with self.driver.session(database=self.database, default_access_mode=READ_ACCESS) as session:
                result = session.run(query, parameters)
                for record in result:
                    yield record.data()
        except (DriverError, Neo4jError) as e:
            logger.error(f"Query failed: {query.strip()}, error: {e}")
            raise DataAccessError(f"Query failed: {e}") from e
