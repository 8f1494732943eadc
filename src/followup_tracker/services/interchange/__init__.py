"""Customer/follow-up file interchange."""

from .csv_codec import decode_csv, encode_csv
from .service import ExportFormat, ImportSummary, InterchangeService, detect_format
from .workbook_codec import decode_workbook, encode_workbook

__all__ = [
    "encode_csv",
    "decode_csv",
    "encode_workbook",
    "decode_workbook",
    "detect_format",
    "ExportFormat",
    "ImportSummary",
    "InterchangeService",
]
