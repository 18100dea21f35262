"""
Neo4j client with connection pooling and helper functions.

Provides:
- Connection pool management
- Read/write helpers that materialise results inside the session
- Node creation and paging helpers used by the audit log
"""

from contextlib import contextmanager
from typing import Any, Dict, List, Optional
from neo4j import GraphDatabase, Session
from loguru import logger

from app.utils.config import get_settings


class Neo4jClient:
    """Neo4j database client with connection pooling."""

    def __init__(self, uri: str = None, user: str = None, password: str = None):
        """Initialize Neo4j client."""
        settings = get_settings()
        self.uri = uri or settings.neo4j_uri
        self.user = user or settings.neo4j_user
        self.password = password or settings.neo4j_password

        self._driver = None

    def connect(self):
        """Establish connection to Neo4j."""
        if self._driver is None:
            logger.info(f"Connecting to Neo4j at {self.uri}...")
            self._driver = GraphDatabase.driver(
                self.uri,
                auth=(self.user, self.password),
                max_connection_lifetime=3600,
                max_connection_pool_size=50,
                connection_acquisition_timeout=120
            )
            self._driver.verify_connectivity()
            logger.success("Connected to Neo4j successfully")

    def close(self):
        """Close Neo4j connection."""
        if self._driver:
            logger.info("Closing Neo4j connection...")
            self._driver.close()
            self._driver = None

    @property
    def driver(self):
        """Get driver, connecting if necessary."""
        if self._driver is None:
            self.connect()
        return self._driver

    @contextmanager
    def session(self) -> Session:
        """Context manager for Neo4j session."""
        session = self.driver.session()
        try:
            yield session
        finally:
            session.close()

    def execute_write(self, query: str, parameters: Dict[str, Any] = None) -> List[Dict[str, Any]]:
        """Execute write query in a managed transaction and return its records."""
        with self.session() as session:
            return session.execute_write(
                lambda tx: [dict(record) for record in tx.run(query, parameters or {})]
            )

    def execute_read(self, query: str, parameters: Dict[str, Any] = None) -> List[Dict[str, Any]]:
        """Execute read query and return results as list of dicts."""
        with self.session() as session:
            return session.execute_read(
                lambda tx: [dict(record) for record in tx.run(query, parameters or {})]
            )

    def create_node(self, label: str, properties: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Create a node with given label and properties."""
        query = f"""
        CREATE (n:{label})
        SET n = $props
        RETURN n
        """
        records = self.execute_write(query, {"props": properties})
        return dict(records[0]["n"]) if records else None

    def count_nodes(self, label: str) -> int:
        """Count nodes carrying ``label``."""
        records = self.execute_read(f"MATCH (n:{label}) RETURN count(n) AS total")
        return records[0]["total"] if records else 0

    def page_nodes(
        self,
        label: str,
        order_by: str,
        skip: int,
        limit: int,
        descending: bool = True
    ) -> List[Dict[str, Any]]:
        """Return one page of ``label`` nodes ordered by a property."""
        direction = "DESC" if descending else "ASC"
        query = f"""
        MATCH (n:{label})
        RETURN n
        ORDER BY n.{order_by} {direction}
        SKIP $skip
        LIMIT $limit
        """
        records = self.execute_read(query, {"skip": skip, "limit": limit})
        return [dict(record["n"]) for record in records]


# Global client instance
_client: Optional[Neo4jClient] = None


def get_neo4j_client() -> Neo4jClient:
    """Get global Neo4j client instance."""
    global _client
    if _client is None:
        _client = Neo4jClient()
        _client.connect()
    return _client


def close_neo4j_client():
    """Close global Neo4j client."""
    global _client
    if _client:
        _client.close()
        _client = None
