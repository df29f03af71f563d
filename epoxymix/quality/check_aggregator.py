"""
════════════════════════════════════════════════════════════════════════════════
CHECK AGGREGATOR - Daily Startup / Daily / Shutdown Compliance
════════════════════════════════════════════════════════════════════════════════

Reconstrói, por dia de calendário, se os checks de startup, daily e shutdown
foram registados numa janela de dias consecutivos.

Regras:
- Day identity = local calendar date of the record timestamp.
- Records without a parseable timestamp, or outside the window, are skipped.
- One record per (day, slot). When several qualify, the one processed last
  wins, so callers control precedence through input order.
- An empty slot is "missed". Days with every slot empty are dropped from the
  output, except the most recent day of the window, which is always shown.
- Output is newest day first.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, tzinfo
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .mix_record import CheckKind, DAY_SLOTS, MixRecord

logger = logging.getLogger(__name__)


DEFAULT_WINDOW_DAYS = 14


class SlotStatus(str, Enum):
    PRESENT = "present"
    MISSED = "missed"


# ═══════════════════════════════════════════════════════════════════════════════
# DATA STRUCTURES
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass
class DayReport:
    """Check compliance for one calendar day."""
    day: date
    startup: Optional[MixRecord] = None
    daily: Optional[MixRecord] = None
    shutdown: Optional[MixRecord] = None

    # True for the most recent day of the window
    is_current: bool = False

    tz: Optional[tzinfo] = field(default=None, repr=False, compare=False)

    def slot(self, kind: CheckKind) -> Optional[MixRecord]:
        if kind == CheckKind.STARTUP:
            return self.startup
        if kind == CheckKind.DAILY:
            return self.daily
        if kind == CheckKind.SHUTDOWN:
            return self.shutdown
        raise ValueError(f"{kind.value} is not a day slot")

    def assign(self, record: MixRecord) -> None:
        if record.check_kind == CheckKind.STARTUP:
            self.startup = record
        elif record.check_kind == CheckKind.DAILY:
            self.daily = record
        elif record.check_kind == CheckKind.SHUTDOWN:
            self.shutdown = record

    def status(self, kind: CheckKind) -> SlotStatus:
        return SlotStatus.PRESENT if self.slot(kind) is not None else SlotStatus.MISSED

    @property
    def has_any_check(self) -> bool:
        return any(self.slot(kind) is not None for kind in DAY_SLOTS)

    @property
    def missed_slots(self) -> List[CheckKind]:
        return [kind for kind in DAY_SLOTS if self.slot(kind) is None]

    def _slot_to_dict(self, kind: CheckKind) -> Dict[str, Any]:
        record = self.slot(kind)
        if record is None:
            return {"status": SlotStatus.MISSED.value}

        ts = record.parsed_timestamp
        local = to_local(ts, self.tz) if ts else None
        entry = {
            "status": SlotStatus.PRESENT.value,
            "record_id": record.record_id,
            "time": local.strftime("%I:%M %p").lstrip("0") if local else None,
            "employee_id": record.employee_id,
        }
        if kind == CheckKind.DAILY:
            entry["ratio"] = record.ratio
        return entry

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.day.isoformat(),
            "heading": f"{self.day:%A, %b} {self.day.day}, {self.day.year}",
            "is_current": self.is_current,
            "startup": self._slot_to_dict(CheckKind.STARTUP),
            "daily": self._slot_to_dict(CheckKind.DAILY),
            "shutdown": self._slot_to_dict(CheckKind.SHUTDOWN),
        }


# ═══════════════════════════════════════════════════════════════════════════════
# HELPERS
# ═══════════════════════════════════════════════════════════════════════════════

def to_local(ts: datetime, tz: Optional[tzinfo] = None) -> datetime:
    """
    Express a timestamp in local time.

    Aware timestamps are converted to ``tz`` (server local when None).
    Naive timestamps are taken as already local.
    """
    if ts.tzinfo is None:
        return ts
    return ts.astimezone(tz) if tz is not None else ts.astimezone()


def local_date(ts: datetime, tz: Optional[tzinfo] = None) -> date:
    return to_local(ts, tz).date()


def check_window(end: date, days: int = DEFAULT_WINDOW_DAYS) -> Tuple[date, date]:
    """Inclusive window of ``days`` consecutive days ending at ``end``."""
    if days < 1:
        raise ValueError(f"Window must cover at least one day, got {days}")
    return end - timedelta(days=days - 1), end


# ═══════════════════════════════════════════════════════════════════════════════
# AGGREGATOR
# ═══════════════════════════════════════════════════════════════════════════════

class CheckAggregator:
    """
    Buckets check records by calendar day and check kind.

    Stateless apart from the timezone used to resolve calendar days; every
    call works on the record list it is given and returns fresh reports.
    """

    def __init__(self, tz: Optional[tzinfo] = None):
        self.tz = tz

    def today(self, now: Optional[datetime] = None) -> date:
        now = now or datetime.now(self.tz)
        return local_date(now, self.tz)

    def aggregate(
        self,
        records: Iterable[MixRecord],
        window_start: date,
        window_end: date,
        suppress_empty: bool = True,
    ) -> List[DayReport]:
        """
        Build one DayReport per day in ``[window_start, window_end]``.

        Returns reports newest first. With ``suppress_empty`` days without any
        check are dropped, except ``window_end``.
        """
        if window_start > window_end:
            raise ValueError(f"Window start {window_start} is after window end {window_end}")

        reports: Dict[date, DayReport] = {}
        day = window_start
        while day <= window_end:
            reports[day] = DayReport(day=day, is_current=(day == window_end), tz=self.tz)
            day += timedelta(days=1)

        skipped = 0
        for record in records:
            if record.check_kind not in DAY_SLOTS:
                continue
            ts = record.parsed_timestamp
            if ts is None:
                skipped += 1
                continue
            report = reports.get(local_date(ts, self.tz))
            if report is None:
                continue
            report.assign(record)

        if skipped:
            logger.debug(f"Skipped {skipped} check records without a usable timestamp")

        ordered = sorted(reports.values(), key=lambda r: r.day, reverse=True)
        if suppress_empty:
            ordered = [r for r in ordered if r.has_any_check or r.is_current]
        return ordered

    def recent(
        self,
        records: Iterable[MixRecord],
        days: int = DEFAULT_WINDOW_DAYS,
        end: Optional[date] = None,
    ) -> List[DayReport]:
        """Reports for the trailing ``days`` ending at ``end`` (default today)."""
        window_start, window_end = check_window(end or self.today(), days)
        return self.aggregate(records, window_start, window_end)


def aggregate_checks(
    records: Iterable[MixRecord],
    window_start: date,
    window_end: date,
    tz: Optional[tzinfo] = None,
    suppress_empty: bool = True,
) -> List[DayReport]:
    """Functional shortcut for ``CheckAggregator(tz).aggregate(...)``."""
    return CheckAggregator(tz).aggregate(records, window_start, window_end, suppress_empty)
