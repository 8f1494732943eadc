"""Request-scoped access to the application's services."""

from __future__ import annotations

from fastapi import Request

from ..services.container import AppServices
from ..services.settings import SettingsService


def get_services(request: Request) -> AppServices:
    return request.app.state.services


def get_settings_service(request: Request) -> SettingsService:
    return get_services(request).settings
