"""Flat row-tagged CSV export/import of customers and follow-ups."""

from __future__ import annotations

import csv
import io
from typing import Optional, Sequence, Union

from ...errors import ContainerReadError, RowParseError
from ...models.domain import Customer, ExportData, FollowUp
from ...utils.dates import format_date, parse_date
from .rows import collect_rows, format_bool, parse_bool, parse_millis

CSV_HEADERS = [
    "Type",
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
    "CustomerID",
    "Timestamp",
    "NextPromiseDate",
]

ROW_TYPE_CUSTOMER = "Customer"
ROW_TYPE_FOLLOW_UP = "FollowUp"

# Minimum number of leading columns each row type must carry.
MIN_CUSTOMER_FIELDS = 12
MIN_FOLLOW_UP_FIELDS = 15


def customer_to_row(customer: Customer) -> list[str]:
    return [
        ROW_TYPE_CUSTOMER,
        customer.id,
        customer.name,
        customer.phone_number,
        repr(float(customer.amount)),
        format_date(customer.promise_date),
        customer.notes,
        format_bool(customer.name_editable),
        format_bool(customer.phone_editable),
        format_bool(customer.amount_editable),
        str(customer.created_at),
        str(customer.updated_at),
        "",
        "",
        "",
    ]


def follow_up_to_row(follow_up: FollowUp) -> list[str]:
    return [
        ROW_TYPE_FOLLOW_UP,
        follow_up.id,
        "",
        "",
        "",
        "",
        follow_up.notes,
        "",
        "",
        "",
        "",
        "",
        follow_up.customer_id,
        str(follow_up.timestamp),
        format_date(follow_up.next_promise_date) if follow_up.next_promise_date else "",
    ]


def encode_csv(data: ExportData) -> bytes:
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(CSV_HEADERS)
    for customer in data.customers:
        writer.writerow(customer_to_row(customer))
    for follow_up in data.follow_ups:
        writer.writerow(follow_up_to_row(follow_up))
    return buffer.getvalue().encode("utf-8")


def parse_customer_row(row_number: int, row: Sequence[str]) -> Union[Customer, RowParseError, None]:
    if not row or row[0] != ROW_TYPE_CUSTOMER:
        return None
    if len(row) < MIN_CUSTOMER_FIELDS:
        return RowParseError(row_number, f"expected at least {MIN_CUSTOMER_FIELDS} fields, got {len(row)}")
    customer_id = row[1].strip()
    if not customer_id:
        return RowParseError(row_number, "missing customer id")
    try:
        return Customer(
            id=customer_id,
            name=row[2],
            phone_number=row[3],
            amount=float(row[4]),
            promise_date=parse_date(row[5]),
            notes=row[6],
            name_editable=parse_bool(row[7]),
            phone_editable=parse_bool(row[8]),
            amount_editable=parse_bool(row[9]),
            created_at=parse_millis(row[10]),
            updated_at=parse_millis(row[11]),
        )
    except ValueError as exc:
        return RowParseError(row_number, str(exc))


def parse_follow_up_row(row_number: int, row: Sequence[str]) -> Union[FollowUp, RowParseError, None]:
    if not row or row[0] != ROW_TYPE_FOLLOW_UP:
        return None
    if len(row) < MIN_FOLLOW_UP_FIELDS:
        return RowParseError(row_number, f"expected at least {MIN_FOLLOW_UP_FIELDS} fields, got {len(row)}")
    follow_up_id = row[1].strip()
    if not follow_up_id:
        return RowParseError(row_number, "missing follow-up id")
    next_promise: Optional[str] = row[14].strip() or None
    try:
        return FollowUp(
            id=follow_up_id,
            customer_id=row[12],
            notes=row[6],
            timestamp=parse_millis(row[13]),
            next_promise_date=parse_date(next_promise) if next_promise else None,
        )
    except ValueError as exc:
        return RowParseError(row_number, str(exc))


def decode_csv(payload: bytes) -> ExportData:
    """Parse a CSV export; malformed rows are skipped, an unreadable file raises."""
    try:
        text = payload.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise ContainerReadError(f"CSV file is not valid UTF-8: {exc}") from exc

    try:
        rows = list(csv.reader(io.StringIO(text, newline="")))
    except csv.Error as exc:
        raise ContainerReadError(f"Unable to read CSV file: {exc}") from exc

    if rows and rows[0] and rows[0][0].strip() == CSV_HEADERS[0]:
        rows = rows[1:]
        first_row_number = 2
    else:
        first_row_number = 1
    numbered = list(enumerate(rows, start=first_row_number))

    return ExportData(
        customers=collect_rows(numbered, parse_customer_row, label="customer"),
        follow_ups=collect_rows(numbered, parse_follow_up_row, label="follow-up"),
    )
