"""
════════════════════════════════════════════════════════════════════════════════
MIX RECORDS API - Submission & Edit Endpoints
════════════════════════════════════════════════════════════════════════════════

Endpoints:
- POST /mix            - Submit a mix (validated, ratio computed, stored)
- POST /mix/preview    - Live ratio for the entry form (nothing stored)
- POST /edit/unlock    - Check the edit passcode
- GET /edit/records    - Latest records for the edit table (gated)
- PATCH /edit/records/{id}  - Edit employee, weights, ratio (gated)
- DELETE /edit/records/{id} - Delete a record (gated)
"""

from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from epoxymix.settings import AppSettings

from .access_gate import get_access_gate, require_edit_access
from .schemas import (
    MixEvaluationRead,
    MixPreviewIn,
    MixRecordRead,
    MixRecordUpdate,
    MixSubmissionIn,
    PasscodeIn,
    SubmissionResult,
    record_read,
)
from .service import delete_record, get_db, get_record, insert_record, select_records, update_record
from .submission import SubmissionError, prepare_submission, preview

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/mix", tags=["Mix Log"])
edit_router = APIRouter(
    prefix="/edit",
    tags=["Mix Log Edit"],
)


# =====================
# Submission
# =====================

@router.post("", response_model=SubmissionResult, status_code=status.HTTP_201_CREATED)
def api_submit_mix(payload: MixSubmissionIn, db=Depends(get_db)):
    """Submit an operator entry."""
    try:
        prepared = prepare_submission(payload)
    except SubmissionError as e:
        raise HTTPException(status_code=400, detail=str(e))

    record = insert_record(db, prepared)
    return SubmissionResult(
        record=record_read(record.to_dict()),
        evaluation=MixEvaluationRead(**prepared.evaluation.to_dict()),
    )


@router.post("/preview", response_model=MixEvaluationRead)
def api_preview_mix(payload: MixPreviewIn):
    """Compute the ratio for the weights entered so far."""
    return MixEvaluationRead(**preview(payload).to_dict())


# =====================
# Edit view
# =====================

@edit_router.post("/unlock", status_code=status.HTTP_204_NO_CONTENT)
def api_unlock(payload: PasscodeIn):
    """Verify the edit passcode."""
    if not get_access_gate().verify(payload.passcode):
        logger.warning("Invalid passcode entered on edit view")
        raise HTTPException(status_code=401, detail="Invalid passcode")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@edit_router.get("/records", response_model=List[MixRecordRead], dependencies=[Depends(require_edit_access)])
def api_edit_list(limit: Optional[int] = Query(None, ge=1, le=5000), db=Depends(get_db)):
    """Latest records for the edit table."""
    limit = limit or AppSettings.get_config().edit_limit
    return [record_read(r.to_dict()) for r in select_records(db, limit=limit)]


@edit_router.get("/records/{record_id}", response_model=MixRecordRead, dependencies=[Depends(require_edit_access)])
def api_edit_get(record_id: str, db=Depends(get_db)):
    return record_read(get_record(db, record_id).to_dict())


@edit_router.patch("/records/{record_id}", response_model=MixRecordRead, dependencies=[Depends(require_edit_access)])
def api_edit_update(record_id: str, payload: MixRecordUpdate, db=Depends(get_db)):
    """Edit employee, weights, cups, ratio or comments of a record."""
    return record_read(update_record(db, record_id, payload).to_dict())


@edit_router.delete("/records/{record_id}", dependencies=[Depends(require_edit_access)])
def api_edit_delete(record_id: str, db=Depends(get_db)):
    """Delete a record."""
    if not delete_record(db, record_id):
        raise HTTPException(status_code=404, detail="Record not found")
    return {"message": "Record deleted", "id": record_id}
