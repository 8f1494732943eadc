"""Domain models for customers, follow-up calls and reminder times."""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from datetime import date
from typing import Optional


def new_id() -> str:
    return str(uuid.uuid4())


def now_millis() -> int:
    return time.time_ns() // 1_000_000


@dataclass(slots=True)
class Customer:
    """A customer who has promised a payment on a given date."""

    name: str
    phone_number: str
    amount: float
    promise_date: date
    notes: str = ""
    name_editable: bool = True
    phone_editable: bool = True
    amount_editable: bool = True
    id: str = field(default_factory=new_id)
    created_at: int = field(default_factory=now_millis)
    updated_at: int = field(default_factory=now_millis)


@dataclass(slots=True)
class FollowUp:
    """A logged call or contact attempt, optionally moving the promise date."""

    customer_id: str
    notes: str = ""
    timestamp: int = field(default_factory=now_millis)
    next_promise_date: Optional[date] = None
    id: str = field(default_factory=new_id)


@dataclass(slots=True)
class NotificationTime:
    """Daily reminder time of day."""

    hour: int
    minute: int
    is_enabled: bool = True
    id: str = field(default_factory=new_id)

    def __post_init__(self) -> None:
        if not 0 <= self.hour <= 23:
            raise ValueError(f"hour must be within 0-23, got {self.hour}")
        if not 0 <= self.minute <= 59:
            raise ValueError(f"minute must be within 0-59, got {self.minute}")

    @property
    def time_string(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"


@dataclass(slots=True)
class ExportData:
    """All customers and follow-ups moved by one export or import."""

    customers: list[Customer] = field(default_factory=list)
    follow_ups: list[FollowUp] = field(default_factory=list)
    exported_at: int = field(default_factory=now_millis)
