"""
════════════════════════════════════════════════════════════════════════════════
RATIO ENGINE - Mix Ratio Derivation & Control-Limit Classification
════════════════════════════════════════════════════════════════════════════════

Part A (resin) / Part B (hardener) ratio against fixed control limits:

    LCL = 11.878    CL = 12.12    UCL = 12.362

Regras:
- Net weight = gross - tare (cup). Missing or non-numeric input → None.
- Ratio = net A / net B. Missing input or zero denominator → None.
- Classification is inclusive at both limits and runs on the unrounded ratio.
- Ratios are persisted and displayed rounded to 3 decimal places.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP, localcontext
from enum import Enum
from typing import Any, Dict, Optional

from .mix_record import NumericValue, parse_decimal

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════════
# CONTROL LIMITS
# ═══════════════════════════════════════════════════════════════════════════════

LOWER_LIMIT = Decimal("11.878")
UPPER_LIMIT = Decimal("12.362")
CENTER_LINE = Decimal("12.12")

RATIO_PLACES = Decimal("0.001")


class RatioStatus(str, Enum):
    """Classification of a ratio against the control limits."""
    IN_RANGE = "ok"
    OUT_OF_RANGE = "out-of-range"


@dataclass(frozen=True)
class MixEvaluation:
    """Net weights, ratio and status computed for one mix."""
    net_a: Optional[Decimal]
    net_b: Optional[Decimal]
    ratio: Optional[Decimal]
    status: Optional[RatioStatus]

    @property
    def ratio_text(self) -> Optional[str]:
        return format_ratio(self.ratio) if self.ratio is not None else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "net_a": str(self.net_a) if self.net_a is not None else None,
            "net_b": str(self.net_b) if self.net_b is not None else None,
            "ratio": self.ratio_text,
            "status": self.status.value if self.status else None,
        }


# ═══════════════════════════════════════════════════════════════════════════════
# OPERATIONS
# ═══════════════════════════════════════════════════════════════════════════════

def net_weight(gross: NumericValue, tare: NumericValue) -> Optional[Decimal]:
    """gross - tare, or None when either side is not a finite number."""
    gross_value = parse_decimal(gross)
    tare_value = parse_decimal(tare)
    if gross_value is None or tare_value is None:
        return None
    return gross_value - tare_value


def ratio(net_a: NumericValue, net_b: NumericValue) -> Optional[Decimal]:
    """net_a / net_b, or None when not computable (missing input, net_b == 0)."""
    a = parse_decimal(net_a)
    b = parse_decimal(net_b)
    if a is None or b is None or b == 0:
        return None
    return a / b


def classify(ratio_value: NumericValue) -> RatioStatus:
    """
    Classify a ratio against the inclusive control limits.

    Raises:
        ValueError: if ``ratio_value`` is not a finite number.
    """
    value = parse_decimal(ratio_value)
    if value is None:
        raise ValueError(f"Cannot classify non-numeric ratio: {ratio_value!r}")
    if LOWER_LIMIT <= value <= UPPER_LIMIT:
        return RatioStatus.IN_RANGE
    return RatioStatus.OUT_OF_RANGE


def round_ratio(value: Decimal) -> Decimal:
    with localcontext() as ctx:
        # quantize needs room for every integer digit plus the 3 decimals
        ctx.prec = max(ctx.prec, value.adjusted() + 5)
        return value.quantize(RATIO_PLACES, rounding=ROUND_HALF_UP)


def format_ratio(value: Decimal) -> str:
    """Fixed 3-decimal text used for storage and display ("12.180")."""
    return f"{round_ratio(value):.3f}"


def evaluate_mix(
    part_a: NumericValue,
    part_b: NumericValue,
    cup_a: NumericValue = None,
    cup_b: NumericValue = None,
) -> MixEvaluation:
    """
    Evaluate a mix from gross weights and optional cup weights.

    A missing (None or blank) cup weight means the gross weight is used
    directly as net. A cup weight that is present but not numeric makes the
    net weight not computable.
    """
    net_a = parse_decimal(part_a) if _is_blank(cup_a) else net_weight(part_a, cup_a)
    net_b = parse_decimal(part_b) if _is_blank(cup_b) else net_weight(part_b, cup_b)

    value = ratio(net_a, net_b)
    status = classify(value) if value is not None else None

    return MixEvaluation(net_a=net_a, net_b=net_b, ratio=value, status=status)


def _is_blank(value: NumericValue) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def control_limits() -> Dict[str, float]:
    """Limits as plain floats for JSON payloads."""
    return {
        "lcl": float(LOWER_LIMIT),
        "cl": float(CENTER_LINE),
        "ucl": float(UPPER_LIMIT),
    }
