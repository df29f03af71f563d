"""
Tests for the SPC series builder.
"""
import types
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from zoneinfo import ZoneInfo

import pandas as pd

from epoxymix.quality.mix_record import CheckKind
from epoxymix.quality.spc_series import NO_DATA_MESSAGE, SeriesBuilder, build_series


T0 = datetime(2026, 10, 18, 6, 0)


def t(n: int) -> datetime:
    return T0 + timedelta(hours=n)


class TestBuildSeries:

    def test_filters_and_sorts(self, make_record):
        records = [
            make_record(timestamp=t(2), ratio="12.0", record_id="b"),
            make_record(timestamp=t(1), ratio="11.9", record_id="a"),
            make_record(timestamp=t(3), ratio=None, record_id="c"),
        ]
        points = list(build_series(records))

        assert [p.record_id for p in points] == ["a", "b"]
        assert [p.ratio for p in points] == [Decimal("11.9"), Decimal("12.0")]
        assert all(p.in_range for p in points)

    def test_excludes_unparseable_values(self, make_record):
        records = [
            make_record(timestamp=t(1), ratio="abc"),
            make_record(timestamp="garbage", ratio="12.1"),
            make_record(timestamp=None, ratio="12.1"),
            make_record(timestamp=t(2), ratio=""),
        ]
        assert list(build_series(records)) == []

    def test_classification(self, make_record):
        records = [
            make_record(timestamp=t(1), ratio="11.878"),
            make_record(timestamp=t(2), ratio="12.362"),
            make_record(timestamp=t(3), ratio="11.877"),
            make_record(timestamp=t(4), ratio="12.400"),
        ]
        assert [p.in_range for p in build_series(records)] == [True, True, False, False]

    def test_equal_timestamps_keep_input_order(self, make_record):
        records = [
            make_record(timestamp=t(1), ratio="12.1", record_id="x"),
            make_record(timestamp=t(1), ratio="12.2", record_id="y"),
            make_record(timestamp=t(0), ratio="12.3", record_id="z"),
        ]
        assert [p.record_id for p in build_series(records)] == ["z", "x", "y"]

    def test_utc_suffix_and_offset_timestamps(self, make_record):
        records = [
            make_record(timestamp="2026-10-18T10:00:00+00:00", ratio="12.1", record_id="late"),
            make_record(timestamp="2026-10-17T10:00:00Z", ratio="12.1", record_id="early"),
        ]
        assert [p.record_id for p in build_series(records)] == ["early", "late"]

    def test_naive_timestamps_use_builder_timezone(self, make_record):
        records = [
            make_record(timestamp="2026-10-17T23:30:00+00:00", ratio="12.1", record_id="aware"),
            # 08:00 in Tokyo is 23:00 UTC the day before
            make_record(timestamp=datetime(2026, 10, 18, 8, 0), ratio="12.1", record_id="naive"),
        ]
        tokyo = SeriesBuilder(ZoneInfo("Asia/Tokyo")).build(records)
        assert [p.record_id for p in tokyo] == ["naive", "aware"]

        utc = SeriesBuilder(timezone.utc).build(records)
        assert [p.record_id for p in utc] == ["aware", "naive"]

    def test_lazy_and_recomputed(self, make_record):
        records = [make_record(timestamp=t(1), ratio="12.1")]
        series = build_series(records)
        assert isinstance(series, types.GeneratorType)

        records.append(make_record(timestamp=t(2), ratio="12.2"))
        assert len(list(series)) == 2
        assert len(list(build_series(records))) == 2

    def test_idempotent(self, sample_records):
        assert list(build_series(sample_records)) == list(build_series(sample_records))

    def test_ratio_only_records_are_plotted(self, make_record):
        records = [make_record(timestamp=t(1), ratio="12.1", check_kind=CheckKind.RATIO_ONLY)]
        assert len(list(build_series(records))) == 1


class TestChartPayload:

    def test_empty_state(self):
        payload = SeriesBuilder().chart_payload([])
        assert payload["points"] == []
        assert payload["empty"] is True
        assert payload["message"] == NO_DATA_MESSAGE
        assert payload["summary"]["count"] == 0
        assert payload["limits"] == {"lcl": 11.878, "cl": 12.12, "ucl": 12.362}

    def test_payload_points_and_summary(self, make_record):
        records = [
            make_record(timestamp=t(1), ratio="12.000"),
            make_record(timestamp=t(2), ratio="12.200"),
            make_record(timestamp=t(3), ratio="12.500"),
        ]
        payload = SeriesBuilder(timezone.utc).chart_payload(records)

        assert payload["empty"] is False
        assert payload["y_domain"] == [11.5, 12.8]
        assert [p["ratio"] for p in payload["points"]] == [12.0, 12.2, 12.5]
        assert payload["points"][0]["label"] == "10/18 07:00"

        summary = payload["summary"]
        assert summary["count"] == 3
        assert summary["in_range"] == 2
        assert summary["out_of_range"] == 1
        assert summary["in_range_pct"] == 66.7
        assert summary["mean"] == 12.233
        assert summary["min"] == 12.0
        assert summary["max"] == 12.5

    def test_to_frame(self, sample_records):
        df = SeriesBuilder().to_frame(sample_records)
        assert isinstance(df, pd.DataFrame)
        assert list(df["ratio"]) == [12.1, 12.4, 11.95]
        assert list(df["in_range"]) == [True, False, True]
