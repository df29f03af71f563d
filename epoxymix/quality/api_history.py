"""
════════════════════════════════════════════════════════════════════════════════
HISTORY API - Check Log, SPC Chart & Export
════════════════════════════════════════════════════════════════════════════════

Endpoints:
- GET /history/records - Latest records, newest first
- GET /history/checks  - Day-by-day startup/daily/shutdown compliance
- GET /history/spc     - Control chart points, limits and summary
- GET /history/export  - All records as .xlsx or .csv

Each request reads one snapshot from storage and derives its view from it.
"""

from __future__ import annotations

import io
import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse

from epoxymix.records.schemas import MixRecordRead, record_read
from epoxymix.records.service import get_db, select_records
from epoxymix.settings import AppSettings

from .check_aggregator import CheckAggregator
from .export_projector import export_filename, project_rows, write_csv, write_xlsx
from .spc_series import SeriesBuilder

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/history", tags=["History"])

NO_CHECK_DATA_MESSAGE = "No check data available"

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@router.get("/records", response_model=List[MixRecordRead])
def api_history_records(limit: Optional[int] = Query(None, ge=1, le=5000), db=Depends(get_db)):
    """Latest records, newest first."""
    limit = limit or AppSettings.get_config().history_limit
    return [record_read(r.to_dict()) for r in select_records(db, limit=limit)]


@router.get("/checks")
def api_history_checks(
    days: Optional[int] = Query(None, ge=1, le=366),
    end: Optional[date] = None,
    db=Depends(get_db),
):
    """Check log for the trailing window (default 14 days ending today)."""
    config = AppSettings.get_config()
    records = select_records(db, limit=config.history_limit)

    aggregator = CheckAggregator(AppSettings.get_timezone())
    reports = aggregator.recent(records, days=days or config.check_window_days, end=end)

    return {
        "has_data": bool(records),
        "message": None if records else NO_CHECK_DATA_MESSAGE,
        "days": [r.to_dict() for r in reports],
    }


@router.get("/spc")
def api_history_spc(db=Depends(get_db)):
    """SPC chart payload for the latest records."""
    records = select_records(db, limit=AppSettings.get_config().history_limit)
    return SeriesBuilder(AppSettings.get_timezone()).chart_payload(records)


@router.get("/export")
def api_history_export(
    export_format: str = Query("xlsx", alias="format", pattern="^(xlsx|csv)$"),
    db=Depends(get_db),
):
    """Download every record as a spreadsheet."""
    rows = project_rows(select_records(db))
    filename = export_filename(export_format)
    headers = {"Content-Disposition": f"attachment; filename={filename}"}

    logger.info(f"Exporting {len(rows)} records as {export_format}")

    if export_format == "csv":
        return StreamingResponse(
            iter([write_csv(rows)]),
            media_type="text/csv",
            headers=headers,
        )

    return StreamingResponse(
        io.BytesIO(write_xlsx(rows)),
        media_type=XLSX_MEDIA_TYPE,
        headers=headers,
    )
