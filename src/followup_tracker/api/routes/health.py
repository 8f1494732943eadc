"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from ..dependencies import get_services
from ...services.container import AppServices

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/reminders", status_code=status.HTTP_200_OK)
def health_reminders(services: AppServices = Depends(get_services)) -> dict:
    """Report which reminder times currently have a registered job."""
    return {"service": "reminders", "scheduled": services.scheduler.scheduled_ids()}
