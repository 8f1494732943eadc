"""Periodic job registration backed by APScheduler."""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timedelta
from typing import Any, Callable, Iterable, Protocol

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.schedulers.base import BaseScheduler
from apscheduler.triggers.interval import IntervalTrigger

from ...config import settings
from ...errors import ScheduleRegistrationError
from ...utils.dates import local_zone

logger = logging.getLogger(__name__)


class JobScheduler(Protocol):
    """Registers periodic jobs and cancels them by tag."""

    def register(
        self,
        job_id: str,
        func: Callable[[], Any],
        *,
        initial_delay_ms: int,
        period: timedelta,
        tags: Iterable[str],
    ) -> None: ...

    def cancel_by_tag(self, tag: str) -> int: ...

    def job_ids(self, tag: str | None = None) -> list[str]: ...


class APSchedulerJobScheduler:
    """Adapts an APScheduler scheduler to tag-based periodic jobs.

    APScheduler has no notion of tags, so the tags given at registration are
    tracked here per job id.
    """

    def __init__(
        self,
        scheduler: BaseScheduler | None = None,
        *,
        max_instances: int | None = None,
        misfire_grace_seconds: int | None = None,
    ) -> None:
        if scheduler is None:
            scheduler = BackgroundScheduler(timezone=local_zone()) if settings.timezone else BackgroundScheduler()
        self.scheduler = scheduler
        self.max_instances = max_instances or settings.reminder_max_instances
        self.misfire_grace_seconds = misfire_grace_seconds or settings.reminder_misfire_grace_seconds
        self._tags: dict[str, set[str]] = {}
        self._lock = threading.Lock()

    def start(self, *, paused: bool = False) -> None:
        if not self.scheduler.running:
            self.scheduler.start(paused=paused)
            logger.info("Reminder job scheduler started")

    def shutdown(self, *, wait: bool = False) -> None:
        if self.scheduler.running:
            self.scheduler.shutdown(wait=wait)
            logger.info("Reminder job scheduler stopped")

    def register(
        self,
        job_id: str,
        func: Callable[[], Any],
        *,
        initial_delay_ms: int,
        period: timedelta,
        tags: Iterable[str],
    ) -> None:
        if initial_delay_ms < 0:
            raise ScheduleRegistrationError(job_id, f"negative initial delay {initial_delay_ms}ms")
        start_date = datetime.now(local_zone()) + timedelta(milliseconds=initial_delay_ms)
        trigger = IntervalTrigger(days=period.days, seconds=period.seconds, start_date=start_date)
        try:
            self.scheduler.add_job(
                func,
                trigger=trigger,
                id=job_id,
                name=job_id,
                replace_existing=True,
                max_instances=self.max_instances,
                coalesce=True,
                misfire_grace_time=self.misfire_grace_seconds,
            )
        except Exception as exc:
            raise ScheduleRegistrationError(job_id, str(exc)) from exc
        with self._lock:
            self._tags[job_id] = set(tags)
        logger.debug(f"Registered job {job_id} starting {start_date.isoformat()} every {period}")

    def cancel_by_tag(self, tag: str) -> int:
        with self._lock:
            job_ids = [job_id for job_id, tags in self._tags.items() if tag in tags]
            for job_id in job_ids:
                try:
                    self.scheduler.remove_job(job_id)
                except JobLookupError:
                    logger.debug(f"Job {job_id} already gone")
                del self._tags[job_id]
        return len(job_ids)

    def job_ids(self, tag: str | None = None) -> list[str]:
        with self._lock:
            return [job_id for job_id, tags in self._tags.items() if tag is None or tag in tags]

    def next_run_time(self, job_id: str) -> datetime | None:
        job = self.scheduler.get_job(job_id)
        if job is None:
            return None
        return getattr(job, "next_run_time", None)
