"""Error types shared by the interchange and notification services."""

from __future__ import annotations


class FollowUpTrackerError(Exception):
    """Base class for service errors."""


class RowParseError(FollowUpTrackerError):
    """A single import row could not be turned into a record.

    Row errors are returned as values by the row parsers and skipped by the
    reducer; they never abort an import.
    """

    def __init__(self, row_number: int, reason: str) -> None:
        super().__init__(f"Row {row_number}: {reason}")
        self.row_number = row_number
        self.reason = reason


class ContainerReadError(FollowUpTrackerError):
    """The whole file is unreadable or in an unsupported format."""


class ScheduleRegistrationError(FollowUpTrackerError):
    """A reminder job could not be registered with the job scheduler.

    Cancellations performed earlier in the same reschedule are not rolled back.
    """

    def __init__(self, entry_id: str, reason: str) -> None:
        super().__init__(f"Failed to register reminder '{entry_id}': {reason}")
        self.entry_id = entry_id
        self.reason = reason


class EvaluationError(FollowUpTrackerError):
    """A reminder fire could not read the customer collection."""
