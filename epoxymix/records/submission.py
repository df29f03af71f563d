"""
Submission path: validates an operator entry and computes its ratio.

Runs before any storage call; a rejected submission never reaches the DB.
The ratio computed here is the one persisted and is never recomputed later.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Union

from epoxymix.quality.mix_record import CheckKind
from epoxymix.quality.ratio_engine import MixEvaluation, evaluate_mix

from .schemas import EMPLOYEE_ID_PATTERN, MixPreviewIn, MixSubmissionIn

logger = logging.getLogger(__name__)


class SubmissionError(ValueError):
    """Operator input rejected before storage."""


@dataclass
class PreparedSubmission:
    """Validated submission, ready for insert."""
    record_id: str
    timestamp: str
    employee_id: int
    part_a: Optional[str]
    part_b: Optional[str]
    cup_a: Optional[str]
    cup_b: Optional[str]
    check_kind: CheckKind
    evaluation: MixEvaluation
    comments: Optional[str] = None

    @property
    def ratio_text(self) -> Optional[str]:
        return self.evaluation.ratio_text


def validate_employee_id(raw: str) -> int:
    text = (raw or "").strip()
    if not EMPLOYEE_ID_PATTERN.match(text):
        raise SubmissionError("Employee ID must be 2-4 digits")
    value = int(text)
    if value < 1:
        raise SubmissionError("Employee ID must be a positive number")
    return value


def _weight_text(value: Union[float, str, None]) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def preview(payload: MixPreviewIn) -> MixEvaluation:
    """Live ratio for the entry form; nothing is stored."""
    return evaluate_mix(payload.part_a, payload.part_b, payload.cup_a, payload.cup_b)


def prepare_submission(payload: MixSubmissionIn, now: Optional[datetime] = None) -> PreparedSubmission:
    """
    Validate a submission and derive its ratio.

    A submission without a selected check kind is kept as a ratio-only entry
    when a ratio can be computed, and rejected otherwise.

    Raises:
        SubmissionError: invalid employee id, or neither check kind nor ratio.
    """
    employee_id = validate_employee_id(payload.employee_id)

    evaluation = evaluate_mix(payload.part_a, payload.part_b, payload.cup_a, payload.cup_b)

    check_kind = payload.check_kind
    if check_kind is None:
        if evaluation.ratio is None:
            raise SubmissionError("Select a check type or enter Part A/Part B weights")
        check_kind = CheckKind.RATIO_ONLY

    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.astimezone()

    prepared = PreparedSubmission(
        record_id=str(uuid.uuid4()),
        timestamp=now.astimezone(timezone.utc).isoformat(),
        employee_id=employee_id,
        part_a=_weight_text(payload.part_a),
        part_b=_weight_text(payload.part_b),
        cup_a=_weight_text(payload.cup_a),
        cup_b=_weight_text(payload.cup_b),
        check_kind=check_kind,
        evaluation=evaluation,
        comments=(payload.comments or "").strip() or None,
    )

    logger.debug(
        f"Prepared submission {prepared.record_id}: employee={employee_id} "
        f"kind={check_kind.value} ratio={prepared.ratio_text}"
    )
    return prepared

