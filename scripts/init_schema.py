#!/usr/bin/env python3
"""
Initialize Neo4j schema with constraints and indexes.

This script reads the Cypher schema file and executes each statement
to set up the scheduler log and tenant lookup indexes.

Usage:
    python scripts/init_schema.py [--schema PATH]
"""

import argparse
import sys
from pathlib import Path

from loguru import logger
from neo4j import GraphDatabase

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.utils.config import get_settings

DEFAULT_SCHEMA = Path(__file__).parent.parent / "schemas" / "file_ingest.cypher"


def split_statements(content: str) -> list[str]:
    """
    Split Cypher text into individual statements.

    Ignores comments and empty lines.
    """
    statements = []
    for stmt in content.split(";"):
        # Remove comment lines
        lines = [line for line in stmt.split("\n") if not line.strip().startswith("//")]
        stmt_clean = "\n".join(lines).strip()

        if stmt_clean:
            statements.append(stmt_clean)

    return statements


def execute_schema_statements(driver, statements: list[str]) -> tuple[int, int]:
    """Execute schema statements one by one."""
    success_count = 0
    failed_count = 0

    with driver.session() as session:
        for i, statement in enumerate(statements, 1):
            try:
                logger.info(f"Executing statement {i}/{len(statements)}...")
                logger.debug(f"Statement: {statement[:100]}...")

                session.run(statement).consume()

                logger.success(f"Statement {i} executed successfully")
                success_count += 1

            except Exception as e:
                # Constraints and indexes may already exist under another name
                if "already exists" in str(e) or "equivalent" in str(e):
                    logger.warning(f"Statement {i} already applied: {e}")
                    success_count += 1
                else:
                    logger.error(f"Statement {i} failed: {e}")
                    failed_count += 1

    return success_count, failed_count


def main(argv: list[str] | None = None) -> int:
    """Main initialization function."""
    parser = argparse.ArgumentParser(description="Apply the Neo4j schema for the file ingest scheduler.")
    parser.add_argument("--schema", type=Path, default=DEFAULT_SCHEMA, help="Cypher schema file")
    args = parser.parse_args(argv)

    logger.info("Starting Neo4j schema initialization...")
    settings = get_settings()

    logger.info(f"Connecting to Neo4j at {settings.neo4j_uri}...")
    driver = GraphDatabase.driver(
        settings.neo4j_uri, auth=(settings.neo4j_user, settings.neo4j_password)
    )

    try:
        driver.verify_connectivity()
        logger.success("Connected to Neo4j successfully")

        logger.info(f"Reading schema from {args.schema}...")
        statements = split_statements(args.schema.read_text(encoding="utf-8"))
        logger.info(f"Found {len(statements)} statements to execute")

        success, failed = execute_schema_statements(driver, statements)

        logger.info(f"Results: {success} applied, {failed} failed")
        if failed == 0:
            logger.success("Schema initialization completed successfully")
            return 0

        logger.warning(f"Schema initialization completed with {failed} failures")
        return 1

    except Exception as e:
        logger.error(f"Schema initialization failed: {e}")
        return 1

    finally:
        driver.close()
        logger.info("Disconnected from Neo4j")


if __name__ == "__main__":
    sys.exit(main())
