"""Typed records consumed by the reporting core."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Union

from .errors import InvalidTimeWindow, NoDataType

Metric = Union[float, NoDataType]


def as_utc(moment: datetime) -> datetime:
    """Treat naive timestamps as UTC so they compare with aware ones."""

    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


@dataclass(frozen=True)
class WorkflowRecord:
    """A workflow row with its serialised graph columns."""

    id: str
    name: str
    active: bool
    created_at: datetime
    updated_at: datetime
    nodes: str | list | None = "[]"
    connections: str | dict | None = "{}"
    settings: str | dict | None = None
    tag_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class ExecutionRecord:
    """One run of a workflow."""

    id: str
    workflow_id: str
    started_at: datetime
    stopped_at: datetime | None = None
    finished: bool = False
    mode: str = "manual"
    wait_till: datetime | None = None
    data_size: int | None = None

    @property
    def duration_seconds(self) -> float | None:
        if self.stopped_at is None:
            return None
        return (self.stopped_at - self.started_at).total_seconds()

    @property
    def is_waiting(self) -> bool:
        return not self.finished and self.wait_till is not None


@dataclass(frozen=True)
class CredentialRecord:
    id: str
    name: str
    type: str
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class TagRecord:
    id: str
    name: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class NodeDescriptor:
    """A single node parsed out of a workflow's node list."""

    id: str | None
    type: str | None
    name: str | None = None
    credentials: dict = field(default_factory=dict, compare=False, hash=False)


@dataclass(frozen=True)
class ConnectionTarget:
    node: str
    type: str = "main"
    index: int = 0


ConnectionGraph = dict[str, dict[str, list[ConnectionTarget]]]


@dataclass(frozen=True)
class TimeWindow:
    """Inclusive ``[start, end]`` range applied to execution start times."""

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        object.__setattr__(self, "start", as_utc(self.start))
        object.__setattr__(self, "end", as_utc(self.end))
        if self.start > self.end:
            raise InvalidTimeWindow(
                f"window start {self.start.isoformat()} is after end {self.end.isoformat()}"
            )

    @classmethod
    def last(cls, days: float, now: datetime | None = None) -> TimeWindow:
        """Return the trailing window of ``days`` ending at ``now``."""

        if not math.isfinite(days):
            raise InvalidTimeWindow("window length must be a finite number")
        if days < 0:
            raise InvalidTimeWindow("window length must not be negative")
        end = now or datetime.now(timezone.utc)
        try:
            start = end - timedelta(days=days)
        except OverflowError as exc:
            raise InvalidTimeWindow(f"window of {days} days is out of range") from exc
        return cls(start=start, end=end)

    @property
    def days(self) -> float:
        return (self.end - self.start).total_seconds() / 86400

    def contains(self, moment: datetime) -> bool:
        return self.start <= as_utc(moment) <= self.end


__all__ = [
    "ConnectionGraph",
    "ConnectionTarget",
    "CredentialRecord",
    "ExecutionRecord",
    "Metric",
    "NodeDescriptor",
    "TagRecord",
    "TimeWindow",
    "WorkflowRecord",
    "as_utc",
]
