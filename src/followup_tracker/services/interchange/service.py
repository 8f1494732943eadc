"""Export and import of the full customer/follow-up set through files."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable

from ...data.customers_repository import CustomerStore
from ...errors import ContainerReadError
from ...models.domain import ExportData
from ...persistence.filesystem import FileStorage
from .csv_codec import decode_csv, encode_csv
from .workbook_codec import decode_workbook, encode_workbook

logger = logging.getLogger(__name__)


class ExportFormat(str, Enum):
    CSV = "csv"
    XLSX = "xlsx"

    @property
    def media_type(self) -> str:
        if self is ExportFormat.CSV:
            return "text/csv"
        return "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


ENCODERS: dict[ExportFormat, Callable[[ExportData], bytes]] = {
    ExportFormat.CSV: encode_csv,
    ExportFormat.XLSX: encode_workbook,
}

DECODERS: dict[ExportFormat, Callable[[bytes], ExportData]] = {
    ExportFormat.CSV: decode_csv,
    ExportFormat.XLSX: decode_workbook,
}


def detect_format(file_name: str) -> ExportFormat:
    """Pick the import format from the file suffix."""
    suffix = Path(file_name).suffix.lower().lstrip(".")
    try:
        return ExportFormat(suffix)
    except ValueError as exc:
        raise ContainerReadError(
            f"Unsupported file format '{file_name}'. Only .csv and .xlsx files are supported."
        ) from exc


def encode(data: ExportData, fmt: ExportFormat) -> bytes:
    return ENCODERS[fmt](data)


def decode(payload: bytes, fmt: ExportFormat) -> ExportData:
    return DECODERS[fmt](payload)


@dataclass(slots=True)
class ImportSummary:
    customers: int
    follow_ups: int


class InterchangeService:
    """Moves every customer and follow-up between the store and export files."""

    def __init__(self, store: CustomerStore, storage: FileStorage | None = None) -> None:
        self.store = store
        self.storage = storage or FileStorage()

    def collect(self) -> ExportData:
        return ExportData(customers=self.store.list_customers(), follow_ups=self.store.list_follow_ups())

    def export(self, fmt: ExportFormat) -> Path:
        data = self.collect()
        path = self.storage.make_export_path(fmt.value)
        self.storage.write_bytes(path, encode(data, fmt))
        logger.info(
            f"Exported {len(data.customers)} customers and {len(data.follow_ups)} follow-ups to {path}"
        )
        return path

    def parse(self, payload: bytes, file_name: str) -> ExportData:
        return decode(payload, detect_format(file_name))

    def import_bytes(self, payload: bytes, file_name: str) -> ImportSummary:
        """Decode an uploaded file and upsert its records into the store."""
        data = self.parse(payload, file_name)
        self.store.import_data(data.customers, data.follow_ups)
        logger.info(
            f"Imported {len(data.customers)} customers and {len(data.follow_ups)} follow-ups from {file_name}"
        )
        return ImportSummary(customers=len(data.customers), follow_ups=len(data.follow_ups))

    def import_file(self, path: Path) -> ImportSummary:
        detect_format(path.name)
        try:
            payload = self.storage.read_bytes(path)
        except OSError as exc:
            raise ContainerReadError(f"Unable to read import file {path}: {exc}") from exc
        return self.import_bytes(payload, path.name)
