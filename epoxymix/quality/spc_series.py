"""
════════════════════════════════════════════════════════════════════════════════
SPC SERIES - Ratio Time Series for Control Charts
════════════════════════════════════════════════════════════════════════════════

Série cronológica dos rácios registados, classificados contra os limites
fixos de controlo (LCL / CL / UCL), para gráfico SPC e exportação.

- Only records with both a parseable ratio and timestamp become points.
- Points are ordered by time, ascending; equal timestamps keep input order.
- Nothing is cached: every call recomputes from the record list.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo
from decimal import Decimal
from typing import Any, Dict, Iterable, Iterator, List, Optional

import pandas as pd

from .mix_record import MixRecord
from .ratio_engine import RatioStatus, classify, control_limits
from .check_aggregator import to_local

logger = logging.getLogger(__name__)


# Y axis shown on the control chart
CHART_Y_DOMAIN = (11.5, 12.8)

NO_DATA_MESSAGE = "No ratio data available"

SERIES_COLUMNS = ["time", "label", "ratio", "in_range", "record_id", "employee_id"]


@dataclass(frozen=True)
class SeriesPoint:
    """One plotted ratio observation."""
    time: datetime
    ratio: Decimal
    in_range: bool
    record_id: str
    employee_id: Optional[int] = None

    def label(self, tz: Optional[tzinfo] = None) -> str:
        """Axis label, e.g. '10/18 07:35'."""
        return to_local(self.time, tz).strftime("%m/%d %H:%M")

    def to_dict(self, tz: Optional[tzinfo] = None) -> Dict[str, Any]:
        return {
            "time": self.time.isoformat(),
            "label": self.label(tz),
            "ratio": float(self.ratio),
            "in_range": self.in_range,
            "record_id": self.record_id,
            "employee_id": self.employee_id,
        }


def _sort_key(point: SeriesPoint, tz: Optional[tzinfo] = None) -> datetime:
    # Naive timestamps are local time in tz (server local when None)
    ts = point.time
    if ts.tzinfo is None and tz is not None:
        ts = ts.replace(tzinfo=tz)
    return ts.astimezone(timezone.utc)


class SeriesBuilder:
    """Builds SPC points from a snapshot of mix records."""

    def __init__(self, tz: Optional[tzinfo] = None):
        self.tz = tz

    def build(self, records: Iterable[MixRecord]) -> Iterator[SeriesPoint]:
        """
        Yield chart points in chronological order.

        Lazy: the record list is only read when iteration starts.
        """
        points: List[SeriesPoint] = []
        for record in records:
            value = record.ratio_value
            ts = record.parsed_timestamp
            if value is None or ts is None:
                continue
            points.append(SeriesPoint(
                time=ts,
                ratio=value,
                in_range=classify(value) == RatioStatus.IN_RANGE,
                record_id=record.record_id,
                employee_id=record.employee_id,
            ))

        # sorted() is stable, so ties keep input order
        yield from sorted(points, key=lambda p: _sort_key(p, self.tz))

    def to_frame(self, records: Iterable[MixRecord]) -> pd.DataFrame:
        """Series as a DataFrame (one row per point, SERIES_COLUMNS)."""
        rows = [p.to_dict(self.tz) for p in self.build(records)]
        df = pd.DataFrame(rows, columns=SERIES_COLUMNS)
        if not df.empty:
            df["time"] = pd.to_datetime(df["time"], utc=True, format="ISO8601")
        return df

    def summary(self, records: Iterable[MixRecord]) -> Dict[str, Any]:
        """Counts and basic descriptive values of the plotted ratios."""
        df = self.to_frame(records)
        if df.empty:
            return {
                "count": 0,
                "in_range": 0,
                "out_of_range": 0,
                "in_range_pct": None,
                "mean": None,
                "min": None,
                "max": None,
            }

        in_range = int(df["in_range"].sum())
        return {
            "count": int(len(df)),
            "in_range": in_range,
            "out_of_range": int(len(df)) - in_range,
            "in_range_pct": round(100.0 * in_range / len(df), 1),
            "mean": round(float(df["ratio"].mean()), 3),
            "min": round(float(df["ratio"].min()), 3),
            "max": round(float(df["ratio"].max()), 3),
        }

    def chart_payload(self, records: List[MixRecord]) -> Dict[str, Any]:
        """Everything a control chart needs: points, limits, axis, summary."""
        points = [p.to_dict(self.tz) for p in self.build(records)]
        return {
            "points": points,
            "limits": control_limits(),
            "y_domain": list(CHART_Y_DOMAIN),
            "summary": self.summary(records),
            "empty": not points,
            "message": NO_DATA_MESSAGE if not points else None,
        }


def build_series(records: Iterable[MixRecord]) -> Iterator[SeriesPoint]:
    """Functional shortcut for ``SeriesBuilder().build(records)``."""
    return SeriesBuilder().build(records)
