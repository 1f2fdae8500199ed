"""Pure reporting core for workflow execution and complexity metrics."""

from .errors import GraphParseError, InvalidTimeWindow, NoData, ReportingError
from .execution_metrics import (
    bucket_by_day,
    bucket_by_hour_of_day,
    bucket_by_mode,
    duration_stats,
    summarize,
)
from .graph_metrics import ComplexityTier, analyze_workflows, complexity_tier, parse_nodes
from .records import (
    CredentialRecord,
    ExecutionRecord,
    NodeDescriptor,
    TagRecord,
    TimeWindow,
    WorkflowRecord,
)
from .reports import REPORTS, ReportBuilder, UnknownReport

__all__ = [
    "REPORTS",
    "ComplexityTier",
    "CredentialRecord",
    "ExecutionRecord",
    "GraphParseError",
    "InvalidTimeWindow",
    "NoData",
    "NodeDescriptor",
    "ReportBuilder",
    "ReportingError",
    "TagRecord",
    "TimeWindow",
    "UnknownReport",
    "WorkflowRecord",
    "analyze_workflows",
    "bucket_by_day",
    "bucket_by_hour_of_day",
    "bucket_by_mode",
    "complexity_tier",
    "duration_stats",
    "parse_nodes",
    "summarize",
]
