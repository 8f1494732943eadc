"""Stored reminder times."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any, Optional

from ..config import settings
from ..models.domain import NotificationTime
from ..persistence.filesystem import FileStorage

logger = logging.getLogger(__name__)

PREFERENCES_FILE_NAME = "preferences.json"


def default_notification_times() -> list[NotificationTime]:
    return [NotificationTime(hour=settings.default_reminder_hour, minute=settings.default_reminder_minute)]


def _time_to_record(entry: NotificationTime) -> dict[str, Any]:
    return {"id": entry.id, "hour": entry.hour, "minute": entry.minute, "is_enabled": entry.is_enabled}


def _time_from_record(record: dict[str, Any]) -> NotificationTime:
    return NotificationTime(
        id=str(record["id"]),
        hour=int(record["hour"]),
        minute=int(record["minute"]),
        is_enabled=bool(record.get("is_enabled", True)),
    )


class PreferencesRepository:
    """Keeps the ordered list of reminder times, persisted as JSON when storage is given.

    A missing or unreadable preferences file yields the single default reminder.
    """

    def __init__(self, storage: FileStorage | None = None) -> None:
        self._storage = storage
        self._lock = threading.RLock()
        self._times: Optional[list[NotificationTime]] = None

    @property
    def preferences_path(self) -> Optional[Path]:
        if self._storage is None:
            return None
        return self._storage.root / PREFERENCES_FILE_NAME

    def notification_times(self) -> list[NotificationTime]:
        with self._lock:
            if self._times is None:
                self._times = self._load()
            return list(self._times)

    def set_notification_times(self, times: list[NotificationTime]) -> None:
        with self._lock:
            self._times = list(times)
            self._save()

    def add_notification_time(self, entry: NotificationTime) -> list[NotificationTime]:
        with self._lock:
            updated = self.notification_times() + [entry]
            self.set_notification_times(updated)
            return updated

    def remove_notification_time(self, time_id: str) -> list[NotificationTime]:
        with self._lock:
            current = self.notification_times()
            updated = [entry for entry in current if entry.id != time_id]
            if len(updated) == len(current):
                raise KeyError(f"Notification time not found: {time_id}")
            self.set_notification_times(updated)
            return updated

    def update_notification_time(self, entry: NotificationTime) -> list[NotificationTime]:
        with self._lock:
            current = self.notification_times()
            if not any(item.id == entry.id for item in current):
                raise KeyError(f"Notification time not found: {entry.id}")
            updated = [entry if item.id == entry.id else item for item in current]
            self.set_notification_times(updated)
            return updated

    def _load(self) -> list[NotificationTime]:
        path = self.preferences_path
        if path is None or not path.exists():
            return default_notification_times()
        try:
            payload = self._storage.read_json(path)
            return [_time_from_record(record) for record in payload.get("notification_times", [])]
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as exc:
            logger.warning(f"Unreadable preferences at {path}, using default reminder time: {exc}")
            return default_notification_times()

    def _save(self) -> None:
        path = self.preferences_path
        if path is None:
            return
        self._storage.write_json(
            path, {"notification_times": [_time_to_record(entry) for entry in self._times or []]}
        )
