"""Daily reminder scheduling for the configured notification times."""

from __future__ import annotations

import logging
import threading
from datetime import datetime, time, timedelta, timezone
from typing import Any, Callable, Iterable, Optional

from ...config import settings
from ...models.domain import NotificationTime
from ...utils.dates import local_now
from .jobs import JobScheduler

logger = logging.getLogger(__name__)

REMINDER_PERIOD = timedelta(days=1)


def entry_tag(entry_id: str) -> str:
    return f"notification_{entry_id}"


def reminder_job_id(entry_id: str) -> str:
    return f"reminder_{entry_id}"


def next_fire_time(hour: int, minute: int, now: datetime) -> datetime:
    """Next local occurrence of hour:minute strictly after ``now``."""
    zone = now.tzinfo
    target_time = time(hour=hour, minute=minute)
    target = datetime.combine(now.date(), target_time, tzinfo=zone)
    if target <= now:
        target = datetime.combine(now.date() + timedelta(days=1), target_time, tzinfo=zone)
    return target


def compute_initial_delay(hour: int, minute: int, now: datetime) -> int:
    """Whole milliseconds from ``now`` until the next hour:minute, always positive.

    ``now`` must be timezone-aware; the delay is measured in real elapsed time,
    so a DST transition between now and the target is accounted for.
    """
    if now.tzinfo is None:
        raise ValueError("now must be timezone-aware")
    target = next_fire_time(hour, minute, now)
    delta = target.astimezone(timezone.utc) - now.astimezone(timezone.utc)
    return delta // timedelta(milliseconds=1)


class NotificationScheduler:
    """Keeps exactly one recurring daily reminder job per enabled notification time.

    ``reschedule`` cancels every reminder job and registers the enabled entries
    again as one serialized step. If a registration fails, the cancellations
    already done stay in effect and the error propagates to the caller.
    """

    def __init__(
        self,
        jobs: JobScheduler,
        reminder: Callable[[], Any],
        *,
        tag: str | None = None,
        now: Callable[[], datetime] = local_now,
    ) -> None:
        self.jobs = jobs
        self.reminder = reminder
        self.tag = tag or settings.reminder_tag
        self.now = now
        self._lock = threading.RLock()

    def calculate_initial_delay(self, entry: NotificationTime, now: Optional[datetime] = None) -> int:
        return compute_initial_delay(entry.hour, entry.minute, now or self.now())

    def reschedule(self, entries: Iterable[NotificationTime]) -> list[str]:
        """Replace all reminder jobs with one per enabled entry; returns scheduled entry ids."""
        entries = list(entries)
        with self._lock:
            cancelled = self.jobs.cancel_by_tag(self.tag)
            logger.info(f"Cancelled {cancelled} reminder jobs")
            scheduled: list[str] = []
            for entry in entries:
                if not entry.is_enabled:
                    continue
                self._register(entry)
                scheduled.append(entry.id)
            logger.info(f"Scheduled {len(scheduled)} of {len(entries)} reminder times")
            return scheduled

    def cancel(self, entry_id: str) -> None:
        with self._lock:
            self.jobs.cancel_by_tag(entry_tag(entry_id))
            logger.info(f"Cancelled reminder {entry_id}")

    def cancel_all(self) -> None:
        with self._lock:
            self.jobs.cancel_by_tag(self.tag)
            logger.info("Cancelled all reminders")

    def scheduled_ids(self) -> list[str]:
        prefix = reminder_job_id("")
        return [job_id[len(prefix):] for job_id in self.jobs.job_ids(self.tag)]

    def _register(self, entry: NotificationTime) -> None:
        delay_ms = self.calculate_initial_delay(entry)
        self.jobs.register(
            reminder_job_id(entry.id),
            self.reminder,
            initial_delay_ms=delay_ms,
            period=REMINDER_PERIOD,
            tags=(self.tag, entry_tag(entry.id)),
        )
        logger.info(f"Reminder {entry.id} at {entry.time_string} first fires in {delay_ms}ms")
