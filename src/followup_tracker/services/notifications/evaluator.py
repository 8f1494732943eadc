"""Decides, at each reminder fire, whether to alert about today's due customers."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional

from ...config import settings
from ...data.customers_repository import CustomerStore
from ...errors import EvaluationError
from ...utils.dates import local_today
from .notifier import Notifier

logger = logging.getLogger(__name__)

ErrorSink = Callable[[EvaluationError], None]


@dataclass(slots=True)
class ReminderOutcome:
    due_count: int
    alerted: bool
    error: Optional[EvaluationError] = None


class ReminderEvaluator:
    """Counts customers whose promise date is today and raises at most one alert.

    ``run`` never raises: a failed read counts as nothing due and is reported to
    the error sink, so the recurring job keeps its schedule.
    """

    def __init__(
        self,
        store: CustomerStore,
        notifier: Notifier,
        *,
        today: Callable[[], date] = local_today,
        error_sink: Optional[ErrorSink] = None,
        title: str | None = None,
        message_template: str | None = None,
    ) -> None:
        self.store = store
        self.notifier = notifier
        self.today = today
        self.error_sink = error_sink
        self.title = title or settings.notification_title
        self.message_template = message_template or settings.notification_message

    def run(self) -> ReminderOutcome:
        try:
            due_date = self.today()
            due_count = len(self.store.list_customers_for_date(due_date))
        except Exception as exc:
            error = EvaluationError(f"Unable to read customers for reminder: {exc}")
            error.__cause__ = exc
            logger.exception("Reminder evaluation failed; skipping this occurrence")
            self._report(error)
            return ReminderOutcome(due_count=0, alerted=False, error=error)

        if due_count <= 0:
            logger.info(f"No customers due on {due_date}; no reminder shown")
            return ReminderOutcome(due_count=0, alerted=False)

        try:
            self.notifier.show(self.title, self.message_template.format(count=due_count))
        except Exception as exc:
            error = EvaluationError(f"Unable to show reminder alert: {exc}")
            error.__cause__ = exc
            logger.exception("Reminder alert could not be shown")
            self._report(error)
            return ReminderOutcome(due_count=due_count, alerted=False, error=error)

        logger.info(f"Reminder shown for {due_count} customers due on {due_date}")
        return ReminderOutcome(due_count=due_count, alerted=True)

    __call__ = run

    def _report(self, error: EvaluationError) -> None:
        if self.error_sink is None:
            return
        try:
            self.error_sink(error)
        except Exception:
            logger.exception("Error sink failed while reporting a reminder evaluation error")
