"""
Tenant discovery for the File Ingest domain.

Company codes are read from the ``User`` nodes in Neo4j. Every distinct,
non-blank code is a tenant with its own drop folders. Codes that cannot be
used as a single folder name (path separators, ``.`` or ``..``) are skipped.
"""

from loguru import logger

from app.utils.helpers import is_safe_path_segment
from app.utils.neo4j_client import Neo4jClient, get_neo4j_client


class TenantDirectory:
    """Enumerates tenant codes currently in use by registered users."""

    QUERY = """
    MATCH (u:User)
    RETURN u.company_code AS company_code
    """

    def __init__(self, neo4j_client: Neo4jClient | None = None):
        self._neo4j = neo4j_client

    @property
    def neo4j(self) -> Neo4jClient:
        if self._neo4j is None:
            self._neo4j = get_neo4j_client()
        return self._neo4j

    def list_tenants(self) -> set[str]:
        """
        Return the distinct non-blank company codes.

        Store errors propagate: a pass must not run on a partial tenant list.
        """
        records = self.neo4j.execute_read(self.QUERY)

        tenants = set()
        for record in records:
            code = record.get("company_code")
            if code is None:
                continue
            code = str(code).strip()
            if not code:
                continue
            if not is_safe_path_segment(code):
                logger.warning(f"Skipping company code not usable as a folder name: {code!r}")
                continue
            tenants.add(code)

        logger.info(f"Found {len(tenants)} unique company codes")
        return tenants
