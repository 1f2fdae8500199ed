"""Error types and the ``NoData`` marker used by the reporting core."""

from __future__ import annotations


class ReportingError(Exception):
    """Base class for reporting errors."""


class GraphParseError(ReportingError):
    """Raised when a serialised workflow graph cannot be parsed."""

    def __init__(self, reason: str, workflow_id: str | None = None) -> None:
        self.reason = reason
        self.workflow_id = workflow_id
        if workflow_id is not None:
            message = f"workflow {workflow_id}: {reason}"
        else:
            message = reason
        super().__init__(message)


class InvalidTimeWindow(ReportingError):
    """Raised when a time window starts after it ends."""


class _NoDataType:
    """Marker for aggregates whose denominator is empty."""

    _instance: _NoDataType | None = None

    def __new__(cls) -> _NoDataType:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NoData"

    def __reduce__(self) -> str:
        return "NoData"


NoData = _NoDataType()
NoDataType = _NoDataType


def is_no_data(value: object) -> bool:
    return value is NoData


__all__ = [
    "GraphParseError",
    "InvalidTimeWindow",
    "NoData",
    "NoDataType",
    "ReportingError",
    "is_no_data",
]
