"""User-alert facilities for reminder notifications."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def show(self, title: str, body: str) -> None: ...


@dataclass(slots=True)
class Alert:
    title: str
    body: str
    shown_at: datetime


class LoggingNotifier:
    """Writes alerts to the log and keeps the most recent ones for inspection."""

    def __init__(self, history_size: int = 50) -> None:
        self.history_size = history_size
        self._alerts: list[Alert] = []
        self._lock = threading.Lock()

    def show(self, title: str, body: str) -> None:
        alert = Alert(title=title, body=body, shown_at=datetime.now())
        with self._lock:
            self._alerts.append(alert)
            del self._alerts[: -self.history_size]
        logger.info(f"Reminder alert: {title} - {body}")

    @property
    def alerts(self) -> list[Alert]:
        with self._lock:
            return list(self._alerts)
