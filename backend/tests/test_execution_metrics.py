"""Tests for execution outcome statistics."""

from __future__ import annotations

import pathlib
import sys
from datetime import datetime, timedelta, timezone

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from backend.app.reporting.errors import InvalidTimeWindow, NoData  # noqa: E402
from backend.app.reporting.execution_metrics import (  # noqa: E402
    ExecutionSummary,
    bucket_by_day,
    bucket_by_hour_of_day,
    bucket_by_mode,
    duration_stats,
    summarize,
)
from backend.app.reporting.records import ExecutionRecord, TimeWindow  # noqa: E402

BASE = datetime(2024, 5, 1, tzinfo=timezone.utc)


def _execution(
    identifier: int,
    start: float = 0,
    stop: float | None = None,
    finished: bool = False,
    mode: str = "manual",
) -> ExecutionRecord:
    return ExecutionRecord(
        id=str(identifier),
        workflow_id="wf-1",
        started_at=BASE + timedelta(seconds=start),
        stopped_at=None if stop is None else BASE + timedelta(seconds=stop),
        finished=finished,
        mode=mode,
    )


def test_summarize_mixed_outcomes():
    executions = [
        _execution(1, start=0, stop=10, finished=True),
        _execution(2, start=0, stop=None, finished=False),
    ]

    assert summarize(executions) == ExecutionSummary(
        total=2,
        successful=1,
        failed=1,
        success_rate_percent=50.0,
        avg_duration_seconds=10.0,
    )


def test_summarize_empty_reports_no_data():
    summary = summarize([])

    assert summary.total == 0
    assert summary.successful == 0
    assert summary.failed == 0
    assert summary.success_rate_percent is NoData
    assert summary.avg_duration_seconds is NoData
    assert summary.success_rate_percent != 0.0
    assert not NoData


def test_summarize_counts_finished_without_stop_as_failed():
    summary = summarize([_execution(1, finished=True)])

    assert summary.successful == 1
    assert summary.failed == 1
    assert summary.success_rate_percent == 100.0
    assert summary.avg_duration_seconds is NoData


@pytest.mark.parametrize(
    "outcomes",
    [
        [True],
        [False],
        [True, False, False],
        [True, True, True, False],
    ],
)
def test_success_rate_stays_within_bounds(outcomes):
    executions = [
        _execution(index, stop=index + 1, finished=finished)
        for index, finished in enumerate(outcomes)
    ]

    summary = summarize(executions)

    assert 0.0 <= summary.success_rate_percent <= 100.0
    assert summary.successful <= summary.total


def test_average_duration_is_rounded():
    executions = [
        _execution(1, start=0, stop=1, finished=True),
        _execution(2, start=0, stop=2, finished=True),
        _execution(3, start=0, stop=2, finished=True),
    ]

    assert summarize(executions).avg_duration_seconds == 1.67


def test_duration_stats_identical_durations():
    executions = [_execution(index, start=index, stop=index + 7.5, finished=True) for index in range(3)]

    stats = duration_stats(executions)

    assert stats.avg == stats.min == stats.max == 7.5


def test_duration_stats_without_stopped_executions_is_empty():
    stats = duration_stats([_execution(1), _execution(2, finished=True)])

    assert stats.is_empty
    assert stats.avg is NoData
    assert stats.min is NoData
    assert stats.max is NoData


def test_bucket_by_day_orders_newest_first_without_gaps():
    day = 86400
    executions = [
        _execution(1, start=0, stop=5, finished=True),
        _execution(2, start=60, stop=70, finished=False),
        _execution(3, start=2 * day, stop=2 * day + 1, finished=True),
    ]

    buckets = bucket_by_day(executions)

    assert [bucket.date.isoformat() for bucket in buckets] == ["2024-05-03", "2024-05-01"]
    assert (buckets[1].total, buckets[1].successful, buckets[1].failed) == (2, 1, 1)
    assert buckets[1].success_rate_percent == 50.0
    assert (buckets[0].total, buckets[0].successful, buckets[0].failed) == (1, 1, 0)


def test_bucket_by_hour_always_returns_24_entries():
    buckets = bucket_by_hour_of_day([])

    assert len(buckets) == 24
    assert [bucket.hour for bucket in buckets] == list(range(24))
    assert all(bucket.execution_count == 0 for bucket in buckets)
    assert all(bucket.avg_duration_seconds is NoData for bucket in buckets)


def test_bucket_by_hour_averages_stopped_executions():
    hour = 3600
    executions = [
        _execution(1, start=5 * hour, stop=5 * hour + 10, finished=True),
        _execution(2, start=5 * hour + 60, stop=5 * hour + 80, finished=True),
        _execution(3, start=7 * hour),
    ]

    buckets = bucket_by_hour_of_day(executions)

    assert len(buckets) == 24
    assert buckets[5].execution_count == 2
    assert buckets[5].avg_duration_seconds == 15.0
    assert buckets[7].execution_count == 1
    assert buckets[7].avg_duration_seconds is NoData
    assert buckets[6].execution_count == 0


def test_bucket_by_mode():
    executions = [
        _execution(1, stop=1, finished=True, mode="manual"),
        _execution(2, stop=1, finished=False, mode="manual"),
        _execution(3, stop=1, finished=False, mode="webhook"),
    ]

    buckets = bucket_by_mode(executions)

    assert set(buckets) == {"manual", "webhook"}
    assert buckets["manual"].count == 2
    assert buckets["manual"].successful == 1
    assert buckets["manual"].success_rate_percent == 50.0
    assert buckets["webhook"].success_rate_percent == 0.0


def test_time_window_rejects_start_after_end():
    with pytest.raises(InvalidTimeWindow):
        TimeWindow(start=BASE + timedelta(days=1), end=BASE)


def test_time_window_last_and_contains():
    window = TimeWindow.last(7, now=BASE)

    assert window.days == 7
    assert window.contains(BASE - timedelta(days=3))
    assert window.contains(BASE)
    assert not window.contains(BASE - timedelta(days=8))
    # Naive timestamps are read as UTC.
    assert window.contains(datetime(2024, 4, 30))


@pytest.mark.parametrize("days", [float("nan"), float("inf"), 1e12, 1e6])
def test_time_window_last_rejects_unrepresentable_lengths(days):
    with pytest.raises(InvalidTimeWindow):
        TimeWindow.last(days, now=BASE)
