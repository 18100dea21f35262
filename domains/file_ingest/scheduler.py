"""
Batch passes and their triggers.

Two entry points share one batch routine:

- the scheduled timer, a background thread that runs a pass every
  ``interval_hours`` (fixed delay, after an initial delay) while enabled;
- the manual trigger, which runs a pass on the caller's thread whether or
  not the timer is enabled.

Both go through the same non-blocking lock, so at most one pass is active
in the process. Multiple processes pointed at the same base path are not
coordinated.
"""

import threading
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from loguru import logger

from domains.file_ingest.collectors.folders import FileScanner, FolderLifecycle
from domains.file_ingest.collectors.tenants import TenantDirectory
from domains.file_ingest.models import ImportCategory, PassSummary, RunStatus, TriggerOrigin
from domains.file_ingest.processors.dispatcher import ImportDispatcher


class IngestionBusyError(RuntimeError):
    """Raised when a pass is requested while another one is running."""


class IngestionRunner:
    """Sweeps every tenant and category once per call."""

    def __init__(
        self,
        tenants: TenantDirectory,
        folders: FolderLifecycle,
        scanner: FileScanner,
        dispatcher: ImportDispatcher,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.tenants = tenants
        self.folders = folders
        self.scanner = scanner
        self.dispatcher = dispatcher
        self.clock = clock

        self._lock = threading.Lock()
        self.last_pass: Optional[PassSummary] = None

    @property
    def running(self) -> bool:
        return self._lock.locked()

    def run_pass(self, origin: TriggerOrigin) -> PassSummary:
        """
        Process every pending file once.

        Raises:
            IngestionBusyError: Another pass holds the lock
            Exception: Tenant enumeration failed; nothing was processed
        """
        if not self._lock.acquire(blocking=False):
            raise IngestionBusyError("An ingestion pass is already running")

        try:
            summary = PassSummary(origin=origin, started_at=self.clock())
            tenants = sorted(self.tenants.list_tenants())
            summary.tenants = len(tenants)

            for tenant in tenants:
                self.folders.ensure_folders(tenant)
                for category in ImportCategory:
                    for file in self.scanner.list_pending_files(tenant, category):
                        entry = self.dispatcher.process(tenant, category, file, origin)
                        summary.add(entry)

            summary.finished_at = self.clock()
            self.last_pass = summary
            logger.info(
                f"{origin.value} pass finished: {summary.discovered} files, "
                f"{summary.succeeded} succeeded, {summary.failed} failed"
            )
            return summary

        finally:
            self._lock.release()


class FileIngestScheduler:
    """Owns the timer thread and the run status."""

    def __init__(
        self,
        runner: IngestionRunner,
        base_path: Path,
        enabled: bool,
        interval_hours: int,
        initial_delay_seconds: float = 60,
        clock: Callable[[], datetime] = datetime.now,
    ):
        if interval_hours < 1:
            raise ValueError("interval_hours must be at least 1")

        self.runner = runner
        self.base_path = Path(base_path)
        self.enabled = enabled
        self.interval_hours = interval_hours
        self.initial_delay_seconds = initial_delay_seconds
        self.clock = clock

        self.last_scheduled_run: Optional[datetime] = None
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def interval_seconds(self) -> int:
        return self.interval_hours * 3600

    @property
    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def run_scheduled(self) -> Optional[PassSummary]:
        """One timer tick. Does nothing while the scheduler is disabled."""
        if not self.enabled:
            logger.info("Scheduler is disabled, skipping scheduled import")
            return None

        logger.info("Starting scheduled import process...")
        self.last_scheduled_run = self.clock()
        try:
            summary = self.runner.run_pass(TriggerOrigin.SCHEDULER)
        except IngestionBusyError:
            logger.warning("Previous ingestion pass still running, skipping this tick")
            return None

        logger.success("Scheduled import process completed")
        return summary

    def process_now(self) -> PassSummary:
        """Manual trigger, independent of the enabled flag."""
        logger.info("Manual process triggered")
        return self.runner.run_pass(TriggerOrigin.MANUAL)

    def status(self) -> RunStatus:
        return RunStatus(
            base_path=self.base_path,
            enabled=self.enabled,
            interval_hours=self.interval_hours,
            running=self.runner.running,
            last_scheduled_run=self.last_scheduled_run,
            next_run=RunStatus.estimate_next_run(
                self.last_scheduled_run, self.interval_hours, self.clock()
            ),
            last_pass=self.runner.last_pass,
        )

    def start(self) -> bool:
        """Start the timer thread; returns False when disabled or already running."""
        if not self.enabled:
            logger.info("Scheduler is disabled; only manual runs will process files")
            return False
        if self.is_alive:
            return False

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run_loop, name="file-ingest-scheduler", daemon=True
        )
        self._thread.start()
        logger.success(
            f"Scheduler started: first run in {self.initial_delay_seconds}s, "
            f"then every {self.interval_hours}h"
        )
        return True

    def stop(self, timeout: Optional[float] = None) -> bool:
        """
        Signal the timer thread and wait up to ``timeout`` for the current tick.

        Returns:
            False if the thread was still inside a pass when the wait ran out
        """
        self._stop_event.set()
        if self._thread is None:
            return True

        self._thread.join(timeout)
        if self._thread.is_alive():
            logger.warning("Scheduler thread still busy with a pass, leaving it to exit")
            return False

        self._thread = None
        logger.info("Scheduler stopped")
        return True

    def _run_loop(self):
        if self._stop_event.wait(self.initial_delay_seconds):
            return

        while True:
            try:
                self.run_scheduled()
            except Exception as e:
                # Tenant lookup failed; the next tick retries
                logger.error(f"Scheduled import failed: {e}")

            if self._stop_event.wait(self.interval_seconds):
                return
