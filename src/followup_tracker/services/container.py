"""Wiring of stores, schedulers and services for one running application."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ..data.customers_repository import CustomerRepository
from ..data.preferences_repository import PreferencesRepository
from ..persistence.filesystem import FileStorage
from .interchange import InterchangeService
from .notifications import (
    APSchedulerJobScheduler,
    JobScheduler,
    LoggingNotifier,
    NotificationScheduler,
    Notifier,
    ReminderEvaluator,
)
from .settings import SettingsService


@dataclass
class AppServices:
    storage: FileStorage
    customers: CustomerRepository
    preferences: PreferencesRepository
    jobs: JobScheduler
    notifier: Notifier
    evaluator: ReminderEvaluator
    scheduler: NotificationScheduler
    interchange: InterchangeService
    settings: SettingsService

    def start(self) -> None:
        """Start background job execution and register the stored reminder times."""
        if isinstance(self.jobs, APSchedulerJobScheduler):
            self.jobs.start()
        self.settings.reschedule()

    def stop(self) -> None:
        if isinstance(self.jobs, APSchedulerJobScheduler):
            self.jobs.shutdown()


def build_services(
    root: Path | None = None,
    *,
    jobs: JobScheduler | None = None,
    notifier: Notifier | None = None,
) -> AppServices:
    storage = FileStorage(root=root)
    customers = CustomerRepository(storage)
    preferences = PreferencesRepository(storage)
    jobs = jobs or APSchedulerJobScheduler()
    notifier = notifier or LoggingNotifier()
    evaluator = ReminderEvaluator(customers, notifier)
    scheduler = NotificationScheduler(jobs, evaluator.run)
    interchange = InterchangeService(customers, storage)
    return AppServices(
        storage=storage,
        customers=customers,
        preferences=preferences,
        jobs=jobs,
        notifier=notifier,
        evaluator=evaluator,
        scheduler=scheduler,
        interchange=interchange,
        settings=SettingsService(preferences, scheduler, interchange, customers),
    )
