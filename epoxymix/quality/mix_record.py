"""
Mix record domain types shared by the quality engines.

The storage layer converts its flag columns into a single CheckKind here;
everything under ``quality`` works only with MixRecord.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Dict, Optional, Union

logger = logging.getLogger(__name__)


class CheckKind(str, Enum):
    """Compliance check recorded with a mix."""
    STARTUP = "startup"
    DAILY = "daily"
    SHUTDOWN = "shutdown"
    RATIO_ONLY = "ratio-only"


# Slots tracked per calendar day by the check log
DAY_SLOTS = (CheckKind.STARTUP, CheckKind.DAILY, CheckKind.SHUTDOWN)


TimestampValue = Union[str, datetime, None]
NumericValue = Union[str, int, float, Decimal, None]


@dataclass(frozen=True)
class MixRecord:
    """One stored epoxy mix row, as read from storage."""
    record_id: str
    timestamp: TimestampValue = None
    employee_id: Optional[int] = None
    part_a_gross: Optional[str] = None
    part_b_gross: Optional[str] = None
    cup_a_weight: Optional[str] = None
    cup_b_weight: Optional[str] = None
    ratio: Optional[str] = None
    check_kind: Optional[CheckKind] = None
    comments: Optional[str] = None

    @property
    def parsed_timestamp(self) -> Optional[datetime]:
        return parse_timestamp(self.timestamp)

    @property
    def ratio_value(self) -> Optional[Decimal]:
        return parse_decimal(self.ratio)

    def to_dict(self) -> Dict[str, Any]:
        ts = self.timestamp.isoformat() if isinstance(self.timestamp, datetime) else self.timestamp
        return {
            "id": self.record_id,
            "timestamp": ts,
            "employee_id": self.employee_id,
            "part_a": self.part_a_gross,
            "part_b": self.part_b_gross,
            "cup_a": self.cup_a_weight,
            "cup_b": self.cup_b_weight,
            "ratio": self.ratio,
            "check_kind": self.check_kind.value if self.check_kind else None,
            "comments": self.comments,
        }


def parse_decimal(value: NumericValue) -> Optional[Decimal]:
    """
    Parse a weight or ratio into a finite Decimal.

    Returns None for missing, blank, non-numeric, NaN or infinite input.
    Floats go through ``str`` so 24.36 stays 24.36 and not its binary expansion.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float)):
        result = Decimal(str(value))
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            result = Decimal(text)
        except InvalidOperation:
            return None
    else:
        return None

    if not result.is_finite():
        return None
    return result


def parse_timestamp(value: TimestampValue) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp; None when missing or malformed."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        logger.debug(f"Unparseable timestamp: {value!r}")
        return None
