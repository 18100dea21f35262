"""
File Ingest Scheduler - Main FastAPI Application

Multi-tenant drop-folder ingestion service that:
- Sweeps per-company AgencyList / PolicyList folders for spreadsheets
- Hands each file to its import collaborator
- Archives every file to sukses/ or failed/ with an audit trail in Neo4j
- Runs on a fixed-delay timer and on demand
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
import sys

from app.utils.config import get_settings
from app.utils.neo4j_client import get_neo4j_client, close_neo4j_client
from app.api import health, file_manager
from domains.file_ingest.service import get_file_manager, close_file_manager


settings = get_settings()

# Configure logging
logger.remove()
logger.add(
    sys.stdout,
    format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>",
    level=settings.log_level.upper()
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info(f"Starting {settings.api_title} v{settings.api_version}")

    # Initialize Neo4j connection
    try:
        get_neo4j_client()
        logger.success("Neo4j connected successfully")
    except Exception as e:
        logger.error(f"Failed to connect to Neo4j: {e}")
        raise

    # Start the scheduled import timer (no-op when disabled)
    service = get_file_manager()
    service.scheduler.start()

    yield

    # Cleanup
    logger.info("Shutting down application...")
    close_file_manager()
    close_neo4j_client()
    logger.success("Application shut down complete")


# Create FastAPI app
app = FastAPI(
    title=settings.api_title,
    version=settings.api_version,
    description="Multi-tenant periodic spreadsheet ingestion",
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler."""
    logger.error(f"Unhandled exception: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "detail": str(exc) if settings.log_level == "DEBUG" else "An error occurred"
        }
    )


# Include routers
app.include_router(health.router, tags=["Health"])
app.include_router(file_manager.router, prefix="/file-manager", tags=["File Manager"])


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": "File Ingest Scheduler",
        "version": settings.api_version,
        "status": "operational",
        "docs": "/docs",
        "health": "/health"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=settings.api_port,
        reload=True,
        log_level=settings.log_level.lower()
    )
