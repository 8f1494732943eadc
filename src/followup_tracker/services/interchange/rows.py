"""Shared cell coercion and the row reducer used by both import formats."""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Optional, Sequence, TypeVar, Union

from ...errors import RowParseError

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT")
RowResult = Union[RecordT, RowParseError, None]


def format_bool(value: bool) -> str:
    return "true" if value else "false"


def parse_bool(value: str) -> bool:
    """Anything other than a case-insensitive "true" reads as false."""
    return value.strip().lower() == "true"


def parse_millis(value: str) -> int:
    text = value.strip()
    try:
        return int(text)
    except ValueError:
        # Spreadsheet tools sometimes rewrite integers as "1700000000000.0"
        as_float = float(text)
        if not as_float.is_integer():
            raise
        return int(as_float)


def collect_rows(
    rows: Iterable[tuple[int, Sequence[object]]],
    parse_row: Callable[[int, Sequence[object]], "RowResult[RecordT]"],
    *,
    label: str,
) -> list[RecordT]:
    """Run ``parse_row`` over numbered rows, keeping records and skipping errors.

    A parser returns a record, a ``RowParseError`` for a malformed row, or
    ``None`` for a row that is not meant for it.
    """
    records: list[RecordT] = []
    skipped = 0
    for row_number, row in rows:
        result = parse_row(row_number, row)
        if result is None:
            continue
        if isinstance(result, RowParseError):
            skipped += 1
            logger.warning(f"Skipping {label} row: {result}")
            continue
        records.append(result)
    if skipped:
        logger.info(f"Parsed {len(records)} {label} rows, skipped {skipped} malformed rows")
    return records


def cell_or_default(row: Sequence[object], index: int, default: Optional[object] = None) -> object:
    if index >= len(row):
        return default
    value = row[index]
    return default if value is None else value
