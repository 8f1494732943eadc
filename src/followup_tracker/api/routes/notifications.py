"""Reminder time endpoints."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Path, Response, status

from ..dependencies import get_settings_service
from ...errors import ScheduleRegistrationError
from ...models.domain import NotificationTime
from ...schemas.notifications import (
    NotificationTimeCreate,
    NotificationTimeModel,
    NotificationTimeUpdate,
    RescheduleResponse,
)
from ...services.settings import SettingsService

router = APIRouter(prefix="/notifications", tags=["notifications"])


def _registration_failed(exc: ScheduleRegistrationError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc))


@router.get("", response_model=List[NotificationTimeModel], status_code=status.HTTP_200_OK)
def list_notification_times(service: SettingsService = Depends(get_settings_service)) -> List[NotificationTimeModel]:
    return [NotificationTimeModel.from_domain(entry) for entry in service.notification_times()]


@router.post("", response_model=NotificationTimeModel, status_code=status.HTTP_201_CREATED)
def add_notification_time(
    payload: NotificationTimeCreate,
    service: SettingsService = Depends(get_settings_service),
) -> NotificationTimeModel:
    try:
        entry = service.add_notification_time(payload.hour, payload.minute)
    except ScheduleRegistrationError as exc:
        raise _registration_failed(exc) from exc
    return NotificationTimeModel.from_domain(entry)


@router.put("/{time_id}", response_model=NotificationTimeModel, status_code=status.HTTP_200_OK)
def update_notification_time(
    payload: NotificationTimeUpdate,
    time_id: str = Path(..., description="Reminder time identifier"),
    service: SettingsService = Depends(get_settings_service),
) -> NotificationTimeModel:
    entry = NotificationTime(id=time_id, hour=payload.hour, minute=payload.minute, is_enabled=payload.isEnabled)
    try:
        service.update_notification_time(entry)
    except KeyError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Notification time not found: {time_id}") from exc
    except ScheduleRegistrationError as exc:
        raise _registration_failed(exc) from exc
    return NotificationTimeModel.from_domain(entry)


@router.delete("/{time_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_notification_time(
    time_id: str = Path(..., description="Reminder time identifier"),
    service: SettingsService = Depends(get_settings_service),
) -> Response:
    try:
        service.remove_notification_time(time_id)
    except KeyError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Notification time not found: {time_id}") from exc
    except ScheduleRegistrationError as exc:
        raise _registration_failed(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/reschedule", response_model=RescheduleResponse, status_code=status.HTTP_200_OK)
def reschedule_notifications(service: SettingsService = Depends(get_settings_service)) -> RescheduleResponse:
    try:
        scheduled = service.reschedule()
    except ScheduleRegistrationError as exc:
        raise _registration_failed(exc) from exc
    return RescheduleResponse(scheduled=scheduled)
