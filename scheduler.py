"""
Background reconciliation scheduler.

Wraps an APScheduler BackgroundScheduler that runs each reconciliation sweep
as its own interval job. Sweeps may run in parallel with each other, but a
sweep never overlaps itself: APScheduler skips a run while the previous one
is in flight, and a per-job lock keeps manual runs from interleaving with
scheduled ones.
"""

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from utils.datetime_helpers import get_now

logger = logging.getLogger(__name__)

RESERVATION_FLAGS = 'reservation_flags'
MAINTENANCE_FLAGS = 'maintenance_flags'
HOLD_EXPIRY = 'hold_expiry'

JOBS = (RESERVATION_FLAGS, MAINTENANCE_FLAGS, HOLD_EXPIRY)


@dataclass(frozen=True)
class TickOutcome:
    """Result of one sweep run."""

    job: str
    started_at: datetime
    finished_at: datetime
    success: bool
    updated: dict = field(default_factory=dict)
    error: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            'job': self.job,
            'started_at': self.started_at.isoformat(),
            'finished_at': self.finished_at.isoformat(),
            'success': self.success,
            'updated': self.updated,
            'error': self.error,
        }


class ReconciliationScheduler:
    """Startable/stoppable handle for the reconciliation sweeps."""

    def __init__(self, app=None) -> None:
        self._app = None
        self._scheduler = None
        self._outcomes = {}
        self._outcomes_lock = threading.Lock()
        self._job_locks = {job: threading.Lock() for job in JOBS}
        if app is not None:
            self.init_app(app)

    def init_app(self, app) -> None:
        if self.running and app is not self._app:
            raise RuntimeError("Scheduler is running for another application")
        if app is not self._app:
            # Outcomes belong to the previously bound app's store
            with self._outcomes_lock:
                self._outcomes = {}
        self._app = app
        app.extensions['reconciliation_scheduler'] = self

    @property
    def running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    @property
    def interval_seconds(self) -> int:
        return self._app.config.get('RECONCILE_INTERVAL_SECONDS', 10)

    def start(self) -> None:
        if self.running:
            return
        if self._app is None:
            raise RuntimeError("Scheduler is not bound to an application")

        self._scheduler = BackgroundScheduler(timezone=self._app.config.get('TIMEZONE', 'UTC'))
        for job in JOBS:
            self._scheduler.add_job(
                self._scheduled_tick,
                trigger=IntervalTrigger(seconds=self.interval_seconds),
                args=[job],
                id=job,
                max_instances=1,
                coalesce=True,
                replace_existing=True,
            )
        self._scheduler.start()
        logger.info("Reconciliation scheduler started (every %ss)", self.interval_seconds)

    def shutdown(self, wait: bool = False) -> None:
        if self.running:
            self._scheduler.shutdown(wait=wait)
            logger.info("Reconciliation scheduler stopped")
        self._scheduler = None

    def run_once(self, job: str = None):
        """
        Run sweeps synchronously, waiting for any in-flight run of the same job.

        Args:
            job: One job name, or None for all jobs

        Returns:
            TickOutcome for one job, or a dict of outcomes by job
        """
        if job is not None:
            if job not in JOBS:
                raise ValueError(f"Unknown job: {job}")
            with self._job_locks[job]:
                return self._tick(job)

        outcomes = {}
        for name in JOBS:
            with self._job_locks[name]:
                outcomes[name] = self._tick(name)
        return outcomes

    def last_outcome(self, job: str = None):
        """Most recent outcome of a job, or of every job that has run."""
        with self._outcomes_lock:
            if job is not None:
                return self._outcomes.get(job)
            return dict(self._outcomes)

    def status(self) -> dict:
        return {
            'running': self.running,
            'interval_seconds': self.interval_seconds,
            'jobs': {
                job: outcome.to_dict() if outcome else None
                for job, outcome in ((j, self.last_outcome(j)) for j in JOBS)
            },
        }

    def _scheduled_tick(self, job: str) -> None:
        lock = self._job_locks[job]
        if not lock.acquire(blocking=False):
            logger.debug("Skipping %s tick, previous run still in flight", job)
            return
        try:
            self._tick(job)
        finally:
            lock.release()

    def _tick(self, job: str) -> TickOutcome:
        with self._app.app_context():
            started_at = get_now()
            try:
                updated = self._run_job(job)
                outcome = TickOutcome(job, started_at, get_now(), True, updated)
            except Exception as e:
                # A failed tick is retried by the next one; the schedule keeps going.
                logger.exception("Reconciliation tick %s failed", job)
                outcome = TickOutcome(job, started_at, get_now(), False, {}, str(e))

        with self._outcomes_lock:
            self._outcomes[job] = outcome
        return outcome

    def _run_job(self, job: str) -> dict:
        from blueprints.club.services.reconciliation_service import (
            sweep_expired_holds,
            sweep_maintenance_flags,
            sweep_reservation_flags,
        )

        if job == RESERVATION_FLAGS:
            return sweep_reservation_flags()
        if job == MAINTENANCE_FLAGS:
            return sweep_maintenance_flags(
                retention_days=self._app.config.get('WINDOW_RETENTION_DAYS')
            )
        return sweep_expired_holds()
