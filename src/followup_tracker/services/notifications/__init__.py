"""Reminder scheduling and evaluation."""

from .evaluator import ReminderEvaluator, ReminderOutcome
from .jobs import APSchedulerJobScheduler, JobScheduler
from .notifier import LoggingNotifier, Notifier
from .scheduler import NotificationScheduler, compute_initial_delay, next_fire_time

__all__ = [
    "APSchedulerJobScheduler",
    "JobScheduler",
    "LoggingNotifier",
    "Notifier",
    "NotificationScheduler",
    "ReminderEvaluator",
    "ReminderOutcome",
    "compute_initial_delay",
    "next_fire_time",
]
