"""Execution outcome statistics over collections of execution records.

Every function here is pure and performs no filtering beyond what it
documents; callers hand in executions already restricted to the time window
or workflow they are interested in. Aggregates over an empty denominator are
reported as :data:`NoData` instead of ``0.0``.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date

from .errors import NoData
from .records import ExecutionRecord, Metric, as_utc

HOURS_PER_DAY = 24


@dataclass(frozen=True)
class ExecutionSummary:
    total: int
    successful: int
    failed: int
    success_rate_percent: Metric
    avg_duration_seconds: Metric


@dataclass(frozen=True)
class DurationStats:
    avg: Metric
    min: Metric
    max: Metric

    @classmethod
    def empty(cls) -> DurationStats:
        return cls(avg=NoData, min=NoData, max=NoData)

    @property
    def is_empty(self) -> bool:
        return self.avg is NoData


@dataclass(frozen=True)
class DayBucket:
    date: date
    total: int
    successful: int
    failed: int
    success_rate_percent: Metric


@dataclass(frozen=True)
class HourBucket:
    hour: int
    execution_count: int
    avg_duration_seconds: Metric


@dataclass(frozen=True)
class ModeBucket:
    count: int
    successful: int
    success_rate_percent: Metric


def success_rate(successful: int, total: int) -> Metric:
    """Return ``100 * successful / total`` rounded to 2 places."""

    if total == 0:
        return NoData
    return round(100.0 * successful / total, 2)


def rounded_mean(values: Iterable[float]) -> Metric:
    items = list(values)
    if not items:
        return NoData
    return round(sum(items) / len(items), 2)


def _durations(executions: Iterable[ExecutionRecord]) -> list[float]:
    return [
        execution.duration_seconds
        for execution in executions
        if execution.duration_seconds is not None
    ]


def summarize(executions: Iterable[ExecutionRecord]) -> ExecutionSummary:
    """Count outcomes and average the duration of stopped executions.

    An execution counts as failed when it did not finish or has no stop
    timestamp, so a finished execution lacking ``stopped_at`` is counted in
    both columns.
    """

    items = list(executions)
    total = len(items)
    successful = sum(1 for item in items if item.finished)
    failed = sum(1 for item in items if not item.finished or item.stopped_at is None)
    return ExecutionSummary(
        total=total,
        successful=successful,
        failed=failed,
        success_rate_percent=success_rate(successful, total),
        avg_duration_seconds=rounded_mean(_durations(items)),
    )


def duration_stats(executions: Iterable[ExecutionRecord]) -> DurationStats:
    durations = _durations(executions)
    if not durations:
        return DurationStats.empty()
    return DurationStats(
        avg=rounded_mean(durations),
        min=round(min(durations), 2),
        max=round(max(durations), 2),
    )


def bucket_by_day(executions: Iterable[ExecutionRecord]) -> list[DayBucket]:
    """Group executions by the calendar date they started on, newest first.

    Dates without executions are not filled in.
    """

    grouped: dict[date, list[ExecutionRecord]] = {}
    for execution in executions:
        day = as_utc(execution.started_at).date()
        grouped.setdefault(day, []).append(execution)

    buckets: list[DayBucket] = []
    for day in sorted(grouped, reverse=True):
        items = grouped[day]
        successful = sum(1 for item in items if item.finished)
        buckets.append(
            DayBucket(
                date=day,
                total=len(items),
                successful=successful,
                failed=len(items) - successful,
                success_rate_percent=success_rate(successful, len(items)),
            )
        )
    return buckets


def bucket_by_hour_of_day(executions: Iterable[ExecutionRecord]) -> list[HourBucket]:
    """Return exactly 24 buckets, one per hour of the day (UTC)."""

    counts = [0] * HOURS_PER_DAY
    durations: list[list[float]] = [[] for _ in range(HOURS_PER_DAY)]
    for execution in executions:
        hour = as_utc(execution.started_at).hour
        counts[hour] += 1
        if execution.duration_seconds is not None:
            durations[hour].append(execution.duration_seconds)

    return [
        HourBucket(
            hour=hour,
            execution_count=counts[hour],
            avg_duration_seconds=rounded_mean(durations[hour]),
        )
        for hour in range(HOURS_PER_DAY)
    ]


def bucket_by_mode(executions: Iterable[ExecutionRecord]) -> dict[str, ModeBucket]:
    totals: dict[str, int] = {}
    successes: dict[str, int] = {}
    for execution in executions:
        totals[execution.mode] = totals.get(execution.mode, 0) + 1
        if execution.finished:
            successes[execution.mode] = successes.get(execution.mode, 0) + 1

    return {
        mode: ModeBucket(
            count=count,
            successful=successes.get(mode, 0),
            success_rate_percent=success_rate(successes.get(mode, 0), count),
        )
        for mode, count in totals.items()
    }


__all__ = [
    "DayBucket",
    "DurationStats",
    "ExecutionSummary",
    "HourBucket",
    "ModeBucket",
    "bucket_by_day",
    "bucket_by_hour_of_day",
    "bucket_by_mode",
    "duration_stats",
    "rounded_mean",
    "success_rate",
    "summarize",
]
