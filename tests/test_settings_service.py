import threading
from datetime import datetime, timezone
from pathlib import Path

from followup_tracker.data.customers_repository import CustomerRepository
from followup_tracker.data.preferences_repository import PreferencesRepository
from followup_tracker.models.domain import NotificationTime
from followup_tracker.persistence.filesystem import FileStorage
from followup_tracker.services.interchange import InterchangeService
from followup_tracker.services.notifications.scheduler import NotificationScheduler
from followup_tracker.services.settings import SettingsService

NOW = datetime(2025, 1, 10, 8, 0, tzinfo=timezone.utc)


class FakeJobScheduler:
    def __init__(self) -> None:
        self.jobs: dict[str, set[str]] = {}

    def register(self, job_id, func, *, initial_delay_ms, period, tags):
        self.jobs[job_id] = set(tags)

    def cancel_by_tag(self, tag):
        matching = [job_id for job_id, tags in self.jobs.items() if tag in tags]
        for job_id in matching:
            del self.jobs[job_id]
        return len(matching)

    def job_ids(self, tag=None):
        return [job_id for job_id, tags in self.jobs.items() if tag is None or tag in tags]


class SlowPreferences(PreferencesRepository):
    """Pauses after storing a 10:00 entry, before the caller reschedules."""

    def __init__(self) -> None:
        super().__init__()
        self.stored = threading.Event()
        self.resume = threading.Event()

    def add_notification_time(self, entry):
        updated = super().add_notification_time(entry)
        if entry.hour == 10:
            self.stored.set()
            self.resume.wait(timeout=1.0)
        return updated


def _service(preferences: PreferencesRepository, jobs: FakeJobScheduler, tmp_path: Path) -> SettingsService:
    store = CustomerRepository()
    scheduler = NotificationScheduler(jobs, lambda: None, tag="call_reminders", now=lambda: NOW)
    return SettingsService(preferences, scheduler, InterchangeService(store, FileStorage(root=tmp_path)), store)


def _enabled_ids(service: SettingsService) -> list[str]:
    return sorted(entry.id for entry in service.notification_times() if entry.is_enabled)


def test_each_change_reschedules_the_stored_list(tmp_path: Path):
    jobs = FakeJobScheduler()
    service = _service(PreferencesRepository(), jobs, tmp_path)

    entry = service.add_notification_time(18, 30)
    assert sorted(service.scheduler.scheduled_ids()) == _enabled_ids(service)

    service.update_notification_time(NotificationTime(hour=18, minute=30, is_enabled=False, id=entry.id))
    assert entry.id not in service.scheduler.scheduled_ids()

    service.remove_notification_time(entry.id)
    assert [t.id for t in service.notification_times()] == service.scheduler.scheduled_ids()


def test_concurrent_additions_leave_one_job_per_enabled_time(tmp_path: Path):
    jobs = FakeJobScheduler()
    preferences = SlowPreferences()
    service = _service(preferences, jobs, tmp_path)
    service.reschedule()

    first = threading.Thread(target=service.add_notification_time, args=(10, 0))
    second = threading.Thread(target=service.add_notification_time, args=(11, 0))
    first.start()
    assert preferences.stored.wait(timeout=1.0)
    second.start()
    second.join(timeout=0.2)
    preferences.resume.set()
    first.join()
    second.join()

    assert len(service.notification_times()) == 3
    assert sorted(service.scheduler.scheduled_ids()) == _enabled_ids(service)
