"""Storage operations for epoxy mix records.

This is the only place that knows about the flag columns; everything returned
from here is a MixRecord carrying a single CheckKind.
"""
from __future__ import annotations

import logging
from typing import Dict, Iterator, List, Optional

from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from epoxymix.quality.mix_record import CheckKind, MixRecord

from .models import EpoxyMixModel, SessionLocal
from .schemas import MixRecordUpdate
from .submission import PreparedSubmission

logger = logging.getLogger(__name__)

FLAG_VALUE = "Yes"

# Column per check kind, in precedence order for legacy rows with several flags
FLAG_COLUMNS = {
    CheckKind.STARTUP: "startup",
    CheckKind.DAILY: "daily_check",
    CheckKind.SHUTDOWN: "shutdown",
    CheckKind.RATIO_ONLY: "ratio_only",
}

EDITABLE_FIELDS = {
    "employee_id": "employee",
    "part_a": "part_a",
    "part_b": "part_b",
    "cup_a": "cup_a",
    "cup_b": "cup_b",
    "ratio": "ratio",
    "comments": "comments",
}


def get_db() -> Iterator[Session]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# =====================
# Flag <-> CheckKind
# =====================

def check_kind_flags(kind: Optional[CheckKind]) -> Dict[str, Optional[str]]:
    """Flag column values for a check kind ("Yes" on one column, None elsewhere)."""
    return {column: (FLAG_VALUE if k == kind else None) for k, column in FLAG_COLUMNS.items()}


def _check_kind_from_flags(row: EpoxyMixModel) -> Optional[CheckKind]:
    kinds = [k for k, column in FLAG_COLUMNS.items() if getattr(row, column)]
    if len(kinds) > 1:
        logger.warning(
            f"Record {row.uuid} has several check flags {[k.value for k in kinds]}; using {kinds[0].value}"
        )
    return kinds[0] if kinds else None


def to_mix_record(row: EpoxyMixModel) -> MixRecord:
    return MixRecord(
        record_id=row.uuid,
        timestamp=row.timestamp,
        employee_id=row.employee,
        part_a_gross=row.part_a,
        part_b_gross=row.part_b,
        cup_a_weight=row.cup_a,
        cup_b_weight=row.cup_b,
        ratio=row.ratio,
        check_kind=_check_kind_from_flags(row),
        comments=row.comments,
    )


def _storage_unavailable(action: str, e: SQLAlchemyError) -> HTTPException:
    logger.error(f"Storage failure during {action}: {e}")
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail="Storage unavailable",
    )


def _commit(db: Session, action: str) -> None:
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise _storage_unavailable(action, e) from e


def _first(db: Session, record_id: str) -> Optional[EpoxyMixModel]:
    try:
        return db.query(EpoxyMixModel).filter(EpoxyMixModel.uuid == record_id).first()
    except SQLAlchemyError as e:
        raise _storage_unavailable("lookup", e) from e


# =====================
# CRUD
# =====================

def select_records(
    db: Session,
    limit: Optional[int] = None,
    newest_first: bool = True,
) -> List[MixRecord]:
    """Records ordered by timestamp (newest first by default)."""
    order = EpoxyMixModel.timestamp.desc() if newest_first else EpoxyMixModel.timestamp.asc()
    query = db.query(EpoxyMixModel).order_by(order)
    if limit is not None:
        query = query.limit(limit)
    try:
        rows = query.all()
    except SQLAlchemyError as e:
        raise _storage_unavailable("select", e) from e
    return [to_mix_record(row) for row in rows]


def get_record(db: Session, record_id: str) -> MixRecord:
    row = _first(db, record_id)
    if not row:
        raise HTTPException(status_code=404, detail="Record not found")
    return to_mix_record(row)


def insert_record(db: Session, prepared: PreparedSubmission) -> MixRecord:
    """Insert a validated submission."""
    row = EpoxyMixModel(
        uuid=prepared.record_id,
        timestamp=prepared.timestamp,
        employee=prepared.employee_id,
        part_a=prepared.part_a,
        part_b=prepared.part_b,
        cup_a=prepared.cup_a,
        cup_b=prepared.cup_b,
        ratio=prepared.ratio_text,
        comments=prepared.comments,
        **check_kind_flags(prepared.check_kind),
    )
    db.add(row)
    _commit(db, "insert")
    db.refresh(row)

    status_text = prepared.evaluation.status.value if prepared.evaluation.status else "n/a"
    logger.info(
        f"Record {row.uuid} saved: kind={prepared.check_kind.value} "
        f"ratio={prepared.ratio_text} status={status_text}"
    )
    return to_mix_record(row)


def update_record(db: Session, record_id: str, update: MixRecordUpdate) -> MixRecord:
    """Apply an authorized edit. Timestamp and check kind never change."""
    row = _first(db, record_id)
    if not row:
        raise HTTPException(status_code=404, detail="Record not found")

    changes = update.model_dump(exclude_unset=True)
    for field, value in changes.items():
        column = EDITABLE_FIELDS.get(field)
        if column is None:
            continue
        if isinstance(value, str):
            value = value.strip() or None
        setattr(row, column, value)

    _commit(db, "update")
    db.refresh(row)
    logger.info(f"Record {record_id} updated: {sorted(changes)}")
    return to_mix_record(row)


def delete_record(db: Session, record_id: str) -> bool:
    row = _first(db, record_id)
    if not row:
        return False
    db.delete(row)
    _commit(db, "delete")
    logger.info(f"Record {record_id} deleted")
    return True
