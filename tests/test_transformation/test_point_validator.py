"""
Tests for point validation against the trailing ingestion window.
"""

import math

import pytest

from chain_metrics.common.utils.date_utils import SECONDS_PER_DAY
from chain_metrics.shared.models import MetricPoint
from chain_metrics.transformation import PointValidator, filter_valid, parse_number


class TestParseNumber:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            (3, 3.0),
            (3.5, 3.5),
            ("3.5", 3.5),
            (" 42 ", 42.0),
            ("1e3", 1000.0),
        ],
    )
    def test_numeric_inputs(self, raw, expected):
        assert parse_number(raw) == expected

    @pytest.mark.parametrize(
        "raw",
        [
            None,
            True,
            False,
            "bad",
            "",
            [],
            {},
            math.nan,
            math.inf,
            "nan",
            "-inf",
            "1e400",
            10**400,
            -(10**400),
        ],
    )
    def test_rejected_inputs(self, raw):
        assert parse_number(raw) is None


class TestFilterValid:
    def test_mixed_input_keeps_only_recent_numeric_point(self, now):
        raw = [
            {"timestamp": now - 10, "value": "3.5"},
            {"timestamp": now - 40 * SECONDS_PER_DAY, "value": 2},
            {"timestamp": "bad", "value": 1},
        ]

        result = filter_valid(raw, now)

        assert result == [MetricPoint(timestamp=now - 10, value=3.5)]

    def test_window_bounds_are_inclusive(self, now):
        lower = now - 30 * SECONDS_PER_DAY
        raw = [
            {"timestamp": lower, "value": 1},
            {"timestamp": now, "value": 2},
            {"timestamp": lower - 1, "value": 3},
            {"timestamp": now + 1, "value": 4},
        ]

        result = filter_valid(raw, now)

        assert [p.value for p in result] == [1.0, 2.0]

    def test_preserves_input_order(self, now):
        raw = [
            {"timestamp": now - 100, "value": 1},
            {"timestamp": now - 300, "value": 2},
            {"timestamp": now - 200, "value": 3},
        ]

        result = filter_valid(raw, now)

        assert [p.timestamp for p in result] == [now - 100, now - 300, now - 200]

    def test_string_timestamps_are_parsed(self, now):
        result = filter_valid([{"timestamp": str(now - 5), "value": 1}], now)

        assert result[0].timestamp == now - 5
        assert isinstance(result[0].timestamp, int)

    @pytest.mark.parametrize(
        "item",
        [
            "not-a-dict",
            None,
            {"value": 1},
            {"timestamp": 1},
            {"timestamp": True, "value": 1},
            {"timestamp": 1, "value": "NaN"},
        ],
    )
    def test_malformed_entries_are_dropped(self, now, item):
        assert filter_valid([item], now) == []

    def test_oversized_integers_are_dropped(self, now):
        raw = [
            {"timestamp": 10**400, "value": 1},
            {"timestamp": now - 20, "value": 10**400},
            {"timestamp": now - 10, "value": 2},
        ]

        result = filter_valid(raw, now)

        assert result == [MetricPoint(timestamp=now - 10, value=2.0)]

    def test_empty_input(self, now):
        assert filter_valid([], now) == []


class TestPointValidatorEvents:
    def test_out_of_window_points_are_reported(self, now, events):
        validator = PointValidator(events=events)

        validator.filter_valid(
            [
                {"timestamp": now + 60, "value": 1},
                {"timestamp": now - 31 * SECONDS_PER_DAY, "value": 1},
            ],
            now,
            chain_id="C-chain",
        )

        rejected = events.named("tps_point_out_of_window")
        assert len(rejected) == 2
        assert rejected[0].fields["future"] is True
        assert rejected[1].fields["future"] is False
        assert all(e.fields["chain_id"] == "C-chain" for e in rejected)

    def test_invalid_points_are_reported(self, now, events):
        validator = PointValidator(events=events)

        validator.filter_valid([{"timestamp": "bad", "value": 1}, 7], now)

        assert events.names() == ["tps_point_invalid", "tps_point_invalid"]

    def test_custom_window(self, now, events):
        validator = PointValidator(window_days=1, events=events)

        result = validator.filter_valid(
            [
                {"timestamp": now - 2 * SECONDS_PER_DAY, "value": 1},
                {"timestamp": now - 3600, "value": 2},
            ],
            now,
        )

        assert [p.value for p in result] == [2.0]
        assert validator.window(now) == (now - SECONDS_PER_DAY, now)
