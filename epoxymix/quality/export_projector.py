"""
Export projection of mix records into a flat spreadsheet table.

One record in, one row out, input order preserved. Absent values become
empty strings since spreadsheets have no null.
"""

from __future__ import annotations

import csv
import io
import logging
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional

import pandas as pd

from .mix_record import CheckKind, MixRecord

logger = logging.getLogger(__name__)


EXPORT_COLUMNS = [
    "Timestamp",
    "Employee",
    "Part A",
    "Part B",
    "Ratio",
    "Startup",
    "Daily Check",
    "Shutdown",
]

# Character widths, same order as EXPORT_COLUMNS
COLUMN_WIDTHS = [20, 10, 10, 10, 10, 10, 12, 10]

SHEET_NAME = "Epoxy Mix Data"

FLAG_VALUE = "Yes"

ExportRow = Dict[str, str]


def _text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def _flag(record: MixRecord, kind: CheckKind) -> str:
    return FLAG_VALUE if record.check_kind == kind else ""


def project_row(record: MixRecord) -> ExportRow:
    return {
        "Timestamp": _text(record.timestamp),
        "Employee": _text(record.employee_id),
        "Part A": _text(record.part_a_gross),
        "Part B": _text(record.part_b_gross),
        "Ratio": _text(record.ratio),
        "Startup": _flag(record, CheckKind.STARTUP),
        "Daily Check": _flag(record, CheckKind.DAILY),
        "Shutdown": _flag(record, CheckKind.SHUTDOWN),
    }


def project_rows(records: Iterable[MixRecord]) -> List[ExportRow]:
    return [project_row(r) for r in records]


def export_filename(extension: str = "xlsx", today: Optional[date] = None) -> str:
    """EpoxyMix_Export_<ISO-date>.<ext>"""
    today = today or date.today()
    return f"EpoxyMix_Export_{today.isoformat()}.{extension.lstrip('.')}"


# ═══════════════════════════════════════════════════════════════════════════════
# WRITERS
# ═══════════════════════════════════════════════════════════════════════════════

def rows_to_frame(rows: List[ExportRow]) -> pd.DataFrame:
    return pd.DataFrame(rows, columns=EXPORT_COLUMNS, dtype=str)


def write_xlsx(rows: List[ExportRow]) -> bytes:
    """Render rows to an .xlsx workbook with one sheet."""
    df = rows_to_frame(rows)
    buffer = io.BytesIO()

    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name=SHEET_NAME, index=False)
        worksheet = writer.sheets[SHEET_NAME]
        for idx, width in enumerate(COLUMN_WIDTHS):
            letter = chr(ord("A") + idx)
            worksheet.column_dimensions[letter].width = width

    logger.info(f"Rendered xlsx export with {len(rows)} rows")
    return buffer.getvalue()


def write_csv(rows: List[ExportRow]) -> str:
    """Render rows to CSV text, with a BOM so Excel opens it as UTF-8."""
    output = io.StringIO()
    writer = csv.DictWriter(output, fieldnames=EXPORT_COLUMNS)
    writer.writeheader()
    writer.writerows(rows)
    logger.info(f"Rendered csv export with {len(rows)} rows")
    return "\ufeff" + output.getvalue()
