"""Two-sheet Excel workbook export/import of customers and follow-ups."""

from __future__ import annotations

import logging
import zipfile
from datetime import date, datetime
from io import BytesIO
from typing import Optional, Sequence, Union
from xml.etree.ElementTree import ParseError

from openpyxl import Workbook, load_workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.utils.exceptions import InvalidFileException

from ...errors import ContainerReadError, RowParseError
from ...models.domain import Customer, ExportData, FollowUp, now_millis
from ...utils.dates import format_date, parse_date
from .rows import cell_or_default, collect_rows, parse_bool, parse_millis

logger = logging.getLogger(__name__)

CUSTOMERS_SHEET = "Customers"
FOLLOW_UPS_SHEET = "FollowUps"

CUSTOMER_HEADERS = [
    "ID",
    "Name",
    "Phone",
    "Amount",
    "PromiseDate",
    "Notes",
    "NameEditable",
    "PhoneEditable",
    "AmountEditable",
    "CreatedAt",
    "UpdatedAt",
]
FOLLOW_UP_HEADERS = ["ID", "CustomerID", "Notes", "Timestamp", "NextPromiseDate"]


def _cell(value: str) -> str:
    # Control characters cannot be stored in worksheet XML
    return ILLEGAL_CHARACTERS_RE.sub("", value)


def encode_workbook(data: ExportData) -> bytes:
    workbook = Workbook()
    customer_sheet = workbook.active
    customer_sheet.title = CUSTOMERS_SHEET
    customer_sheet.append(CUSTOMER_HEADERS)
    for customer in data.customers:
        customer_sheet.append(
            [
                _cell(customer.id),
                _cell(customer.name),
                _cell(customer.phone_number),
                float(customer.amount),
                format_date(customer.promise_date),
                _cell(customer.notes),
                customer.name_editable,
                customer.phone_editable,
                customer.amount_editable,
                customer.created_at,
                customer.updated_at,
            ]
        )

    follow_up_sheet = workbook.create_sheet(FOLLOW_UPS_SHEET)
    follow_up_sheet.append(FOLLOW_UP_HEADERS)
    for follow_up in data.follow_ups:
        follow_up_sheet.append(
            [
                _cell(follow_up.id),
                _cell(follow_up.customer_id),
                _cell(follow_up.notes),
                follow_up.timestamp,
                format_date(follow_up.next_promise_date) if follow_up.next_promise_date else None,
            ]
        )

    buffer = BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def _text(value: object) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _identifier(value: object) -> Optional[str]:
    if value is None:
        return None
    text = _text(value).strip()
    return text or None


def _amount(value: object) -> float:
    if isinstance(value, bool):
        raise ValueError(f"Unable to parse amount from boolean '{value}'")
    if isinstance(value, (int, float)):
        return float(value)
    return float(str(value).replace(",", ""))


def _flag(value: object) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    return parse_bool(str(value))


def _millis(value: object) -> int:
    if isinstance(value, bool):
        raise ValueError(f"Unable to parse timestamp from boolean '{value}'")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"Timestamp '{value}' is not a whole number of milliseconds")
        return int(value)
    return parse_millis(str(value))


def _calendar_date(value: object) -> date:
    # Cells edited in a spreadsheet tool may come back as real dates
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return parse_date(str(value))


def parse_customer_cells(row_number: int, row: Sequence[object]) -> Union[Customer, RowParseError, None]:
    if not any(cell is not None for cell in row):
        return None
    customer_id = _identifier(cell_or_default(row, 0))
    if customer_id is None:
        return RowParseError(row_number, "missing customer id")
    promise_value = cell_or_default(row, 4)
    if promise_value is None or promise_value == "":
        return RowParseError(row_number, "missing promise date")
    try:
        return Customer(
            id=customer_id,
            name=_text(cell_or_default(row, 1, "")),
            phone_number=_text(cell_or_default(row, 2, "")),
            amount=_amount(cell_or_default(row, 3, 0.0)),
            promise_date=_calendar_date(promise_value),
            notes=_text(cell_or_default(row, 5, "")),
            name_editable=_flag(cell_or_default(row, 6, True)),
            phone_editable=_flag(cell_or_default(row, 7, True)),
            amount_editable=_flag(cell_or_default(row, 8, True)),
            created_at=_millis(cell_or_default(row, 9, now_millis())),
            updated_at=_millis(cell_or_default(row, 10, now_millis())),
        )
    except ValueError as exc:
        return RowParseError(row_number, str(exc))


def parse_follow_up_cells(row_number: int, row: Sequence[object]) -> Union[FollowUp, RowParseError, None]:
    if not any(cell is not None for cell in row):
        return None
    follow_up_id = _identifier(cell_or_default(row, 0))
    if follow_up_id is None:
        return RowParseError(row_number, "missing follow-up id")
    customer_id = _identifier(cell_or_default(row, 1))
    if customer_id is None:
        return RowParseError(row_number, "missing customer id")
    next_value = cell_or_default(row, 4)
    try:
        return FollowUp(
            id=follow_up_id,
            customer_id=customer_id,
            notes=_text(cell_or_default(row, 2, "")),
            timestamp=_millis(cell_or_default(row, 3, now_millis())),
            next_promise_date=_calendar_date(next_value) if next_value not in (None, "") else None,
        )
    except ValueError as exc:
        return RowParseError(row_number, str(exc))


def _sheet_rows(workbook, name: str) -> list[tuple[int, tuple]]:
    if name not in workbook.sheetnames:
        logger.warning(f"Workbook has no '{name}' sheet")
        return []
    sheet = workbook[name]
    return list(enumerate(sheet.iter_rows(min_row=2, values_only=True), start=2))


def decode_workbook(payload: bytes) -> ExportData:
    """Parse a workbook export; malformed rows are skipped, an unreadable file raises."""
    try:
        workbook = load_workbook(BytesIO(payload), read_only=True, data_only=True)
    except (InvalidFileException, ParseError, zipfile.BadZipFile, KeyError, OSError, ValueError) as exc:
        raise ContainerReadError(f"Unable to read workbook: {exc}") from exc

    # Sheet XML is only parsed while iterating rows in read-only mode
    try:
        customer_rows = _sheet_rows(workbook, CUSTOMERS_SHEET)
        follow_up_rows = _sheet_rows(workbook, FOLLOW_UPS_SHEET)
    except (ParseError, zipfile.BadZipFile, KeyError, OSError, ValueError, EOFError) as exc:
        raise ContainerReadError(f"Unable to read workbook sheets: {exc}") from exc
    finally:
        workbook.close()

    return ExportData(
        customers=collect_rows(customer_rows, parse_customer_cells, label="customer"),
        follow_ups=collect_rows(follow_up_rows, parse_follow_up_cells, label="follow-up"),
    )
