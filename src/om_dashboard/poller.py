"""Fixed-interval polling for the dashboard.

Each job has its own interval and keeps its last result. A failed fetch keeps
the previous data and records the error; DashboardAuthError propagates so the
caller can stop.
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from src.om_dashboard.client import DashboardAuthError, DashboardError

logger = logging.getLogger("om.dashboard")


@dataclass
class PollJob:
    name: str
    interval_seconds: float
    fetch: Callable[[], Any]
    data: Any = None
    error: str | None = None
    next_run: float = 0.0


@dataclass
class Poller:
    jobs: list[PollJob] = field(default_factory=list)
    clock: Callable[[], float] = time.monotonic

    def add(self, name: str, interval_seconds: float, fetch: Callable[[], Any]) -> PollJob:
        job = PollJob(name=name, interval_seconds=interval_seconds, fetch=fetch)
        self.jobs.append(job)
        return job

    def due(self) -> list[PollJob]:
        now = self.clock()
        return [job for job in self.jobs if now >= job.next_run]

    def run_due(self) -> list[PollJob]:
        """Run every due job once; returns the jobs that ran."""
        ran = self.due()
        for job in ran:
            try:
                job.data = job.fetch()
                job.error = None
            except DashboardAuthError:
                raise
            except DashboardError as exc:
                logger.warning("Poll %s failed: %s", job.name, exc)
                job.error = str(exc)
            job.next_run = self.clock() + job.interval_seconds
        return ran

    def seconds_until_next(self) -> float:
        if not self.jobs:
            return 0.0
        return max(0.0, min(job.next_run for job in self.jobs) - self.clock())

    def get(self, name: str) -> PollJob:
        for job in self.jobs:
            if job.name == name:
                return job
        raise KeyError(name)
