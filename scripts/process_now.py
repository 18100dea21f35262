#!/usr/bin/env python3
"""
Run one manual ingestion pass from the command line.

Sweeps every company's AgencyList / PolicyList folder once, exactly like
``POST /file-manager/process-now``, and exits non-zero if the pass could
not run (e.g. Neo4j unreachable).

Usage:
    python scripts/process_now.py [--base-path PATH]
"""

import argparse
import sys
from pathlib import Path

from loguru import logger

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.utils.config import get_settings
from app.utils.neo4j_client import close_neo4j_client
from domains.file_ingest.service import FileManagerService


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments."""
    parser = argparse.ArgumentParser(description="Process all pending drop-folder files once.")
    parser.add_argument(
        "--base-path",
        type=Path,
        default=None,
        help="Override SCHEDULER_BASE_PATH for this run",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    settings = get_settings()
    if args.base_path is not None:
        settings = settings.model_copy(update={"scheduler_base_path": args.base_path})

    try:
        service = FileManagerService.from_settings(settings)
        summary = service.process_now()
    except Exception as e:
        logger.error(f"Manual ingestion pass failed: {e}")
        return 1
    finally:
        close_neo4j_client()

    logger.success(
        f"Processed {summary.discovered} files for {summary.tenants} companies: "
        f"{summary.succeeded} succeeded, {summary.failed} failed"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
