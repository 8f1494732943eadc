"""Settings actions: reminder times, data export/import and clearing data."""

from __future__ import annotations

import logging
import threading
from pathlib import Path

from ..data.customers_repository import CustomerStore
from ..data.preferences_repository import PreferencesRepository
from ..models.domain import NotificationTime
from .interchange import ExportFormat, ImportSummary, InterchangeService
from .notifications import NotificationScheduler

logger = logging.getLogger(__name__)


class SettingsService:
    """Every change to the reminder times is followed by a full reschedule.

    A change and its reschedule run under one lock, so the registered jobs
    always match the latest stored list.
    """

    def __init__(
        self,
        preferences: PreferencesRepository,
        scheduler: NotificationScheduler,
        interchange: InterchangeService,
        store: CustomerStore,
    ) -> None:
        self.preferences = preferences
        self.scheduler = scheduler
        self.interchange = interchange
        self.store = store
        self._lock = threading.RLock()

    # Reminder times

    def notification_times(self) -> list[NotificationTime]:
        return self.preferences.notification_times()

    def add_notification_time(self, hour: int, minute: int) -> NotificationTime:
        entry = NotificationTime(hour=hour, minute=minute)
        with self._lock:
            updated = self.preferences.add_notification_time(entry)
            self.scheduler.reschedule(updated)
        logger.info(f"Added reminder time {entry.time_string} ({entry.id})")
        return entry

    def update_notification_time(self, entry: NotificationTime) -> NotificationTime:
        with self._lock:
            updated = self.preferences.update_notification_time(entry)
            self.scheduler.reschedule(updated)
        logger.info(f"Updated reminder time {entry.id} to {entry.time_string}, enabled={entry.is_enabled}")
        return entry

    def remove_notification_time(self, time_id: str) -> None:
        with self._lock:
            updated = self.preferences.remove_notification_time(time_id)
            self.scheduler.cancel(time_id)
            self.scheduler.reschedule(updated)
        logger.info(f"Removed reminder time {time_id}")

    def reschedule(self) -> list[str]:
        with self._lock:
            return self.scheduler.reschedule(self.notification_times())

    # Data

    def export_data(self, fmt: ExportFormat) -> Path:
        return self.interchange.export(fmt)

    def import_data(self, payload: bytes, file_name: str) -> ImportSummary:
        return self.interchange.import_bytes(payload, file_name)

    def clear_all_data(self) -> None:
        self.store.clear_all()
        logger.info("Cleared all customers and follow-ups")
