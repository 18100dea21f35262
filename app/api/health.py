"""
Health check endpoint.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from datetime import datetime

from app.utils.neo4j_client import get_neo4j_client
from app.utils.config import get_settings
from domains.file_ingest.service import FileManagerService, get_file_manager

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str
    timestamp: datetime
    neo4j_connected: bool
    scheduler_enabled: bool
    scheduler_alive: bool
    version: str


@router.get("/health", response_model=HealthResponse)
def health_check(service: FileManagerService = Depends(get_file_manager)):
    """
    Health check endpoint.

    Verifies:
    - API is running
    - Neo4j is connected
    - The scheduler thread is alive when enabled
    """
    settings = get_settings()
    neo4j_connected = False

    try:
        client = get_neo4j_client()
        # Simple query to verify connection
        result = client.execute_read("RETURN 1 AS test")
        neo4j_connected = len(result) > 0
    except Exception:
        pass

    scheduler = service.scheduler
    scheduler_ok = scheduler.is_alive or not scheduler.enabled

    return HealthResponse(
        status="healthy" if neo4j_connected and scheduler_ok else "degraded",
        timestamp=datetime.now(),
        neo4j_connected=neo4j_connected,
        scheduler_enabled=scheduler.enabled,
        scheduler_alive=scheduler.is_alive,
        version=settings.api_version
    )
