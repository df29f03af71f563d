"""
Quality Module - Process Quality Monitoring
===========================================

Components:
- Ratio Engine: net weights, mix ratio, control-limit classification
- Check Aggregator: day-by-day startup/daily/shutdown compliance
- Series Builder: chronological SPC points for charting
- Export Projector: flat spreadsheet rows

All components are pure functions of the record snapshot they receive.
The HTTP router lives in ``quality.api_history``.
"""

from .mix_record import (
    CheckKind,
    MixRecord,
    DAY_SLOTS,
    parse_decimal,
    parse_timestamp,
)

from .ratio_engine import (
    LOWER_LIMIT,
    UPPER_LIMIT,
    CENTER_LINE,
    RatioStatus,
    MixEvaluation,
    net_weight,
    ratio,
    classify,
    format_ratio,
    evaluate_mix,
)

from .check_aggregator import (
    CheckAggregator,
    DayReport,
    SlotStatus,
    aggregate_checks,
    check_window,
)

from .spc_series import (
    SeriesBuilder,
    SeriesPoint,
    build_series,
)

from .export_projector import (
    EXPORT_COLUMNS,
    project_row,
    project_rows,
    export_filename,
    write_csv,
    write_xlsx,
)

__all__ = [
    "CheckKind",
    "MixRecord",
    "DAY_SLOTS",
    "parse_decimal",
    "parse_timestamp",
    "LOWER_LIMIT",
    "UPPER_LIMIT",
    "CENTER_LINE",
    "RatioStatus",
    "MixEvaluation",
    "net_weight",
    "ratio",
    "classify",
    "format_ratio",
    "evaluate_mix",
    "CheckAggregator",
    "DayReport",
    "SlotStatus",
    "aggregate_checks",
    "check_window",
    "SeriesBuilder",
    "SeriesPoint",
    "build_series",
    "EXPORT_COLUMNS",
    "project_row",
    "project_rows",
    "export_filename",
    "write_csv",
    "write_xlsx",
]
