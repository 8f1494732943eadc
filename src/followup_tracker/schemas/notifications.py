"""Reminder time API schemas."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field

from ..models.domain import NotificationTime


class NotificationTimeCreate(BaseModel):
    hour: int = Field(..., ge=0, le=23)
    minute: int = Field(..., ge=0, le=59)


class NotificationTimeUpdate(BaseModel):
    hour: int = Field(..., ge=0, le=23)
    minute: int = Field(..., ge=0, le=59)
    isEnabled: bool = True


class NotificationTimeModel(BaseModel):
    id: str
    hour: int
    minute: int
    isEnabled: bool
    time: str

    @classmethod
    def from_domain(cls, entry: NotificationTime) -> "NotificationTimeModel":
        return cls(
            id=entry.id,
            hour=entry.hour,
            minute=entry.minute,
            isEnabled=entry.is_enabled,
            time=entry.time_string,
        )


class RescheduleResponse(BaseModel):
    scheduled: List[str]
