"""
File Ingestion Domain

Periodically sweeps per-company drop folders for spreadsheets:
- Tenants (company codes) are read from registered users
- AgencyList / PolicyList files are handed to their import collaborators
- Every file is archived to sukses/ or failed/ and logged once in Neo4j

Passes run on a fixed-delay timer or on demand; both share one lock.
"""

__all__ = ["collectors", "processors"]
