"""Pydantic schemas for the epoxy mix log API."""
from __future__ import annotations

import re
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, Field, field_validator

from epoxymix.quality.mix_record import CheckKind, parse_decimal

# Employee ids are typed as 2-4 digits on the tablet
EMPLOYEE_ID_PATTERN = re.compile(r"^[0-9]{2,4}$")

# Weights arrive either as numbers or as the text typed on the tablet
WeightInput = Optional[Union[float, str]]


class MixSubmissionIn(BaseModel):
    """Operator submission from the input view."""
    employee_id: str
    part_a: WeightInput = None
    cup_a: WeightInput = None
    part_b: WeightInput = None
    cup_b: WeightInput = None
    check_kind: Optional[CheckKind] = None
    comments: Optional[str] = Field(default=None, max_length=500)

    @field_validator("employee_id", mode="before")
    @classmethod
    def _employee_as_text(cls, v: Any) -> Any:
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


class MixPreviewIn(BaseModel):
    """Weights for a live ratio preview."""
    part_a: WeightInput = None
    cup_a: WeightInput = None
    part_b: WeightInput = None
    cup_b: WeightInput = None


class MixRecordUpdate(BaseModel):
    """
    Authorized edit of a stored record.

    Timestamp and check kind are immutable and therefore absent here.
    """
    employee_id: Optional[int] = None
    part_a: Optional[str] = None
    part_b: Optional[str] = None
    cup_a: Optional[str] = None
    cup_b: Optional[str] = None
    ratio: Optional[str] = None
    comments: Optional[str] = Field(default=None, max_length=500)

    @field_validator("employee_id", mode="before")
    @classmethod
    def _employee_id_digits(cls, v: Any) -> Any:
        if v is None or isinstance(v, bool):
            return v
        text = str(v).strip()
        if not EMPLOYEE_ID_PATTERN.match(text) or int(text) < 1:
            raise ValueError("Employee ID must be 2-4 digits")
        return int(text)

    @field_validator("ratio")
    @classmethod
    def _ratio_is_numeric(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        if parse_decimal(v) is None:
            raise ValueError("ratio must be a number")
        return v.strip()


class MixRecordRead(BaseModel):
    id: str
    timestamp: Optional[str] = None
    employee_id: Optional[int] = None
    part_a: Optional[str] = None
    part_b: Optional[str] = None
    cup_a: Optional[str] = None
    cup_b: Optional[str] = None
    ratio: Optional[str] = None
    check_kind: Optional[CheckKind] = None
    comments: Optional[str] = None


class MixEvaluationRead(BaseModel):
    net_a: Optional[str] = None
    net_b: Optional[str] = None
    ratio: Optional[str] = None
    status: Optional[str] = None


class SubmissionResult(BaseModel):
    record: MixRecordRead
    evaluation: MixEvaluationRead


class PasscodeIn(BaseModel):
    passcode: str = Field(min_length=1, max_length=16)


def record_read(data: Dict[str, Any]) -> MixRecordRead:
    return MixRecordRead.model_validate(data)
