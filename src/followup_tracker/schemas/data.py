"""Data import/export API schemas."""

from __future__ import annotations

from pydantic import BaseModel


class ImportResponse(BaseModel):
    fileName: str
    customers: int
    followUps: int


class ClearDataResponse(BaseModel):
    cleared: bool
