"""Customer data export/import endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import FileResponse

from ..dependencies import get_settings_service
from ...errors import ContainerReadError
from ...schemas.data import ClearDataResponse, ImportResponse
from ...services.interchange import ExportFormat, detect_format
from ...services.settings import SettingsService

router = APIRouter(prefix="/data", tags=["data"])


@router.get("/export", response_class=FileResponse, status_code=status.HTTP_200_OK)
def export_data(
    fmt: ExportFormat = Query(default=ExportFormat.CSV, alias="format", description="Export file format (csv or xlsx)"),
    service: SettingsService = Depends(get_settings_service),
) -> FileResponse:
    path = service.export_data(fmt)
    return FileResponse(path, media_type=fmt.media_type, filename=path.name)


@router.post("/import", response_model=ImportResponse, status_code=status.HTTP_200_OK)
async def import_data(
    file: UploadFile = File(...),
    service: SettingsService = Depends(get_settings_service),
) -> ImportResponse:
    """Import customers and follow-ups from a CSV or Excel export."""
    if not file.filename:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Filename is required.")
    try:
        detect_format(file.filename)
    except ContainerReadError as exc:
        raise HTTPException(status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE, detail=str(exc)) from exc

    payload = await file.read()
    try:
        summary = await run_in_threadpool(service.import_data, payload, file.filename)
    except ContainerReadError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    return ImportResponse(fileName=file.filename, customers=summary.customers, followUps=summary.follow_ups)


@router.delete("", response_model=ClearDataResponse, status_code=status.HTTP_200_OK)
def clear_data(service: SettingsService = Depends(get_settings_service)) -> ClearDataResponse:
    service.clear_all_data()
    return ClearDataResponse(cleared=True)
