"""
Configuration management for the File Ingest Scheduler.

Uses pydantic-settings to load configuration from environment variables
and .env files.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # Neo4j Configuration
    neo4j_uri: str = "bolt://localhost:7687"
    neo4j_user: str = "neo4j"
    neo4j_password: str = "fileingest"

    # API Configuration
    api_port: int = 8000
    log_level: str = "INFO"
    api_title: str = "File Ingest Scheduler API"
    api_version: str = "1.0.0"

    # Scheduler Configuration
    scheduler_base_path: Path = Path("/var/lib/fileingest/scheduler")
    scheduler_enabled: bool = True
    scheduler_interval_hours: int = Field(default=6, ge=1)
    scheduler_initial_delay_seconds: int = Field(default=60, ge=0)

    # Import collaborators, as "package.module:attribute"
    agency_importer: Optional[str] = None
    policy_importer: Optional[str] = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    def get_base_path(self) -> Path:
        """Return the drop-folder root with ``~`` expanded."""
        return self.scheduler_base_path.expanduser()


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
