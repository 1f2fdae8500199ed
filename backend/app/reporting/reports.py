"""Dashboard reports assembled from workflow, execution and graph metrics.

:class:`ReportBuilder` joins the record collections handed to it and exposes
one method per dashboard report. Each method returns an ordered list of
frozen dataclass rows; nothing here touches storage.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date, datetime
from functools import cached_property
from typing import Any

from .errors import NoData, ReportingError
from .execution_metrics import (
    bucket_by_day,
    bucket_by_hour_of_day,
    bucket_by_mode,
    duration_stats,
    rounded_mean,
    success_rate,
    summarize,
)
from .graph_metrics import (
    ComplexityTier,
    GraphSummary,
    aggregate_node_types,
    analyze_workflow,
    parse_settings,
)
from .records import (
    CredentialRecord,
    ExecutionRecord,
    Metric,
    TagRecord,
    TimeWindow,
    WorkflowRecord,
    as_utc,
)

logger = logging.getLogger(__name__)

DEFAULT_NODE_TYPES = (
    "n8n-nodes-base.httpRequest",
    "n8n-nodes-base.webhook",
    "n8n-nodes-base.code",
)
DEFAULT_FREQUENCY_DAYS = 30
MIN_EXECUTIONS = 5
BYTES_PER_MB = 1024.0 * 1024.0


@dataclass(frozen=True)
class TopWorkflowRow:
    workflow_id: str
    name: str
    execution_count: int
    successful_runs: int
    success_rate: Metric
    active: bool


@dataclass(frozen=True)
class FailureRateRow:
    workflow_id: str
    name: str
    total_executions: int
    failed_executions: int
    failure_rate_percent: Metric


@dataclass(frozen=True)
class SlowWorkflowRow:
    workflow_id: str
    name: str
    execution_count: int
    avg_duration_seconds: Metric
    max_duration_seconds: Metric
    min_duration_seconds: Metric


@dataclass(frozen=True)
class FailedExecutionRow:
    execution_id: str
    workflow_name: str
    started_at: datetime
    stopped_at: datetime | None
    mode: str
    wait_till: datetime | None
    duration_seconds: Metric


@dataclass(frozen=True)
class ActiveWorkflowRow:
    workflow_id: str
    name: str
    active: bool
    created_at: datetime
    updated_at: datetime
    total_executions: int
    last_execution: datetime | None


@dataclass(frozen=True)
class ModeRow:
    mode: str
    execution_count: int
    successful: int
    success_rate_percent: Metric


@dataclass(frozen=True)
class WaitingExecutionRow:
    execution_id: str
    workflow_name: str
    wait_till: datetime
    started_at: datetime
    mode: str


@dataclass(frozen=True)
class CredentialUsageRow:
    name: str
    type: str
    workflows_using: int
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class TagSummaryRow:
    tag_name: str
    workflow_count: int


@dataclass(frozen=True)
class DataSizeRow:
    workflow_name: str
    execution_count: int
    avg_data_size_bytes: Metric
    total_data_size_mb: Metric


@dataclass(frozen=True)
class DailySuccessRow:
    date: date
    total: int
    successful: int
    success_rate: Metric


@dataclass(frozen=True)
class FrequencyRow:
    name: str
    total_executions: int
    avg_executions_per_day: Metric
    first_execution: datetime
    last_execution: datetime


@dataclass(frozen=True)
class NodeCountRow:
    workflow_id: str
    name: str
    active: bool
    node_count: int
    created_at: datetime
    updated_at: datetime
    parse_error: str | None = None


@dataclass(frozen=True)
class ComplexityDistributionRow:
    complexity_level: ComplexityTier
    workflow_count: int
    avg_nodes_in_range: Metric


@dataclass(frozen=True)
class ConnectionRow:
    workflow_id: str
    name: str
    active: bool
    connection_count: int
    node_count: int
    updated_at: datetime


@dataclass(frozen=True)
class StatusComplexityRow:
    active: bool
    workflow_count: int
    avg_node_count: Metric
    min_nodes: int
    max_nodes: int


@dataclass(frozen=True)
class ComplexitySuccessRow:
    complexity_level: ComplexityTier
    workflow_count: int
    total_executions: int
    successful_executions: int
    success_rate_percent: Metric


@dataclass(frozen=True)
class NodeTypeMatchRow:
    workflow_id: str
    name: str
    active: bool
    node_type: str
    node_type_count: int


@dataclass(frozen=True)
class CreationTrendRow:
    creation_month: date
    workflows_created: int
    currently_active: int


@dataclass(frozen=True)
class UpdateFrequencyRow:
    workflow_id: str
    name: str
    active: bool
    created_at: datetime
    updated_at: datetime
    days_since_creation: int
    execution_count: int


@dataclass(frozen=True)
class UnusedWorkflowRow:
    workflow_id: str
    name: str
    active: bool
    node_count: int
    execution_count: int
    last_execution: datetime | None
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class SettingsRow:
    workflow_id: str
    name: str
    active: bool
    save_error_data: str | None
    save_success_data: str | None
    save_manual_executions: bool | None


@dataclass(frozen=True)
class ComplexityPerformanceRow:
    complexity_level: ComplexityTier
    execution_count: int
    avg_duration_seconds: Metric
    min_duration_seconds: Metric
    max_duration_seconds: Metric


@dataclass(frozen=True)
class ReportDefinition:
    """Registry entry describing how a report is invoked."""

    name: str
    title: str
    default_days: int | None
    params: frozenset[str] = frozenset()


def _definition(name: str, title: str, default_days: int | None, *params: str) -> ReportDefinition:
    return ReportDefinition(name=name, title=title, default_days=default_days, params=frozenset(params))


REPORTS: dict[str, ReportDefinition] = {
    definition.name: definition
    for definition in (
        _definition("execution_overview", "Workflow execution overview", 30),
        _definition("top_workflows", "Most executed workflows", 30, "limit"),
        _definition(
            "failure_leaderboard", "Highest failure rates", 7, "limit", "min_executions"
        ),
        _definition("daily_trend", "Execution trend by day", 30),
        _definition("hourly_trend", "Execution trend by hour", 7),
        _definition(
            "slowest_workflows", "Slowest workflows", 30, "limit", "min_executions"
        ),
        _definition("recent_failures", "Recent failed executions", 7, "limit"),
        _definition("active_workflow_status", "Active workflow status", None),
        _definition("mode_breakdown", "Execution mode breakdown", 30),
        _definition("waiting_executions", "Waiting executions", None),
        _definition("credential_usage", "Credential usage", None),
        _definition("tag_summary", "Workflow tags summary", None),
        _definition("data_size", "Execution data size", 30, "limit"),
        _definition("daily_success_rate", "Daily success rate", 30),
        _definition("execution_frequency", "Workflow execution frequency", 30),
        _definition("workflows_by_node_count", "Workflows by node count", None),
        _definition("complexity_distribution", "Workflow complexity distribution", None),
        _definition("node_type_usage", "Most used node types", None, "limit"),
        _definition("most_connected", "Workflows with most connections", None, "limit"),
        _definition("node_count_by_status", "Average nodes by status", None),
        _definition("success_by_complexity", "Success rate by complexity", 30),
        _definition(
            "workflows_with_node_types", "Workflows using node types", None, "node_types"
        ),
        _definition("creation_trend", "Workflow creation trend", None),
        _definition("update_frequency", "Workflow update frequency", 30, "limit"),
        _definition("empty_or_unused", "Empty or unused workflows", None),
        _definition("settings_analysis", "Workflow settings", None, "limit"),
        _definition("performance_by_complexity", "Performance by workflow size", 30),
    )
}


class UnknownReport(ReportingError):
    """Raised when a report name is not registered."""


def _desc_metric(value: Metric) -> tuple[int, float]:
    if value is NoData:
        return (1, 0.0)
    return (0, -value)


def _asc_metric(value: Metric) -> tuple[int, float]:
    if value is NoData:
        return (1, 0.0)
    return (0, value)


def _limited(rows: list, limit: int | None) -> list:
    if limit is None:
        return rows
    return rows[: max(limit, 0)]


def _serialized_nodes(workflow: WorkflowRecord) -> str:
    if workflow.nodes is None:
        return ""
    if isinstance(workflow.nodes, str):
        return workflow.nodes
    return json.dumps(workflow.nodes)


class ReportBuilder:
    """Build dashboard reports from already fetched records.

    ``window`` limits executions for reports that are time-windowed on the
    dashboard; reports over the whole execution history ignore it.
    Executions whose workflow is unknown are left out of reports that join
    against workflows.
    """

    def __init__(
        self,
        workflows: Iterable[WorkflowRecord],
        executions: Iterable[ExecutionRecord],
        credentials: Iterable[CredentialRecord] = (),
        tags: Iterable[TagRecord] = (),
        window: TimeWindow | None = None,
    ) -> None:
        self.workflows: list[WorkflowRecord] = list(workflows)
        self.executions: list[ExecutionRecord] = list(executions)
        self.credentials: list[CredentialRecord] = list(credentials)
        self.tags: list[TagRecord] = list(tags)
        self.window = window
        self._workflows_by_id = {workflow.id: workflow for workflow in self.workflows}

    def run(self, name: str, **params: Any) -> list:
        definition = REPORTS.get(name)
        if definition is None:
            raise UnknownReport(f"unknown report {name!r}")
        unexpected = set(params) - definition.params
        if unexpected:
            raise TypeError(f"{name} does not accept {', '.join(sorted(unexpected))}")
        logger.debug("Building report %s with %s", name, params)
        return getattr(self, name)(**params)

    @cached_property
    def windowed_executions(self) -> list[ExecutionRecord]:
        if self.window is None:
            return list(self.executions)
        return [item for item in self.executions if self.window.contains(item.started_at)]

    @cached_property
    def graph_summaries(self) -> dict[str, GraphSummary]:
        return {workflow.id: analyze_workflow(workflow) for workflow in self.workflows}

    def parse_failures(self) -> list[GraphSummary]:
        return [summary for summary in self.graph_summaries.values() if summary.parse_failed]

    def _group_by_workflow(
        self, executions: Iterable[ExecutionRecord]
    ) -> dict[str, list[ExecutionRecord]]:
        grouped: dict[str, list[ExecutionRecord]] = {}
        for execution in executions:
            if execution.workflow_id in self._workflows_by_id:
                grouped.setdefault(execution.workflow_id, []).append(execution)
        return grouped

    def _workflow_name(self, execution: ExecutionRecord) -> str | None:
        workflow = self._workflows_by_id.get(execution.workflow_id)
        return workflow.name if workflow is not None else None

    def _node_count(self, workflow_id: str) -> int:
        return self.graph_summaries[workflow_id].node_count

    def _tier(self, workflow_id: str) -> ComplexityTier:
        return self.graph_summaries[workflow_id].tier

    # Execution outcome reports

    def execution_overview(self) -> list:
        return [summarize(self.windowed_executions)]

    def top_workflows(self, limit: int | None = 10) -> list[TopWorkflowRow]:
        rows = []
        for workflow_id, items in self._group_by_workflow(self.windowed_executions).items():
            workflow = self._workflows_by_id[workflow_id]
            successful = sum(1 for item in items if item.finished)
            rows.append(
                TopWorkflowRow(
                    workflow_id=workflow_id,
                    name=workflow.name,
                    execution_count=len(items),
                    successful_runs=successful,
                    success_rate=success_rate(successful, len(items)),
                    active=workflow.active,
                )
            )
        rows.sort(key=lambda row: (-row.execution_count, row.name))
        return _limited(rows, limit)

    def failure_leaderboard(
        self, limit: int | None = 10, min_executions: int = MIN_EXECUTIONS
    ) -> list[FailureRateRow]:
        rows = []
        for workflow_id, items in self._group_by_workflow(self.windowed_executions).items():
            if len(items) < min_executions:
                continue
            failed = sum(1 for item in items if not item.finished)
            rows.append(
                FailureRateRow(
                    workflow_id=workflow_id,
                    name=self._workflows_by_id[workflow_id].name,
                    total_executions=len(items),
                    failed_executions=failed,
                    failure_rate_percent=success_rate(failed, len(items)),
                )
            )
        rows.sort(key=lambda row: (_desc_metric(row.failure_rate_percent), -row.total_executions))
        return _limited(rows, limit)

    def daily_trend(self) -> list:
        return bucket_by_day(self.windowed_executions)

    def hourly_trend(self) -> list:
        return bucket_by_hour_of_day(self.windowed_executions)

    def slowest_workflows(
        self, limit: int | None = 10, min_executions: int = MIN_EXECUTIONS
    ) -> list[SlowWorkflowRow]:
        stopped = (item for item in self.windowed_executions if item.stopped_at is not None)
        rows = []
        for workflow_id, items in self._group_by_workflow(stopped).items():
            if len(items) < min_executions:
                continue
            stats = duration_stats(items)
            rows.append(
                SlowWorkflowRow(
                    workflow_id=workflow_id,
                    name=self._workflows_by_id[workflow_id].name,
                    execution_count=len(items),
                    avg_duration_seconds=stats.avg,
                    max_duration_seconds=stats.max,
                    min_duration_seconds=stats.min,
                )
            )
        rows.sort(key=lambda row: _desc_metric(row.avg_duration_seconds))
        return _limited(rows, limit)

    def recent_failures(self, limit: int | None = 20) -> list[FailedExecutionRow]:
        rows = []
        for execution in self.windowed_executions:
            name = self._workflow_name(execution)
            if execution.finished or name is None:
                continue
            duration = execution.duration_seconds
            rows.append(
                FailedExecutionRow(
                    execution_id=execution.id,
                    workflow_name=name,
                    started_at=execution.started_at,
                    stopped_at=execution.stopped_at,
                    mode=execution.mode,
                    wait_till=execution.wait_till,
                    duration_seconds=NoData if duration is None else round(duration, 2),
                )
            )
        rows.sort(key=lambda row: as_utc(row.started_at), reverse=True)
        return _limited(rows, limit)

    def active_workflow_status(self) -> list[ActiveWorkflowRow]:
        grouped = self._group_by_workflow(self.executions)
        rows = []
        for workflow in self.workflows:
            if not workflow.active:
                continue
            items = grouped.get(workflow.id, [])
            rows.append(
                ActiveWorkflowRow(
                    workflow_id=workflow.id,
                    name=workflow.name,
                    active=workflow.active,
                    created_at=workflow.created_at,
                    updated_at=workflow.updated_at,
                    total_executions=len(items),
                    last_execution=max((item.started_at for item in items), key=as_utc)
                    if items
                    else None,
                )
            )
        ran = [row for row in rows if row.last_execution is not None]
        never_ran = [row for row in rows if row.last_execution is None]
        ran.sort(key=lambda row: as_utc(row.last_execution), reverse=True)
        return ran + never_ran

    def mode_breakdown(self) -> list[ModeRow]:
        rows = [
            ModeRow(
                mode=mode,
                execution_count=bucket.count,
                successful=bucket.successful,
                success_rate_percent=bucket.success_rate_percent,
            )
            for mode, bucket in bucket_by_mode(self.windowed_executions).items()
        ]
        rows.sort(key=lambda row: (-row.execution_count, row.mode))
        return rows

    def waiting_executions(self) -> list[WaitingExecutionRow]:
        rows = []
        for execution in self.executions:
            name = self._workflow_name(execution)
            if not execution.is_waiting or name is None:
                continue
            rows.append(
                WaitingExecutionRow(
                    execution_id=execution.id,
                    workflow_name=name,
                    wait_till=execution.wait_till,
                    started_at=execution.started_at,
                    mode=execution.mode,
                )
            )
        rows.sort(key=lambda row: as_utc(row.wait_till))
        return rows

    # Inventory reports

    def credential_usage(self) -> list[CredentialUsageRow]:
        """Count workflows whose serialised nodes mention each credential id.

        The match is a plain substring test, so an id that is a substring of
        another identifier also matches.
        """

        serialized = {workflow.id: _serialized_nodes(workflow) for workflow in self.workflows}
        rows = [
            CredentialUsageRow(
                name=credential.name,
                type=credential.type,
                workflows_using=sum(1 for text in serialized.values() if credential.id in text),
                created_at=credential.created_at,
                updated_at=credential.updated_at,
            )
            for credential in self.credentials
        ]
        rows.sort(key=lambda row: -row.workflows_using)
        return rows

    def tag_summary(self) -> list[TagSummaryRow]:
        tagged: dict[str, set[str]] = {}
        for workflow in self.workflows:
            for tag_id in workflow.tag_ids:
                tagged.setdefault(tag_id, set()).add(workflow.id)

        rows = [
            TagSummaryRow(tag_name=tag.name, workflow_count=len(tagged[tag.id]))
            for tag in self.tags
            if tagged.get(tag.id)
        ]
        rows.sort(key=lambda row: -row.workflow_count)
        return rows

    def data_size(self, limit: int | None = 10) -> list[DataSizeRow]:
        rows = []
        for workflow_id, items in self._group_by_workflow(self.windowed_executions).items():
            sizes = [item.data_size for item in items if item.data_size is not None]
            rows.append(
                DataSizeRow(
                    workflow_name=self._workflows_by_id[workflow_id].name,
                    execution_count=len(items),
                    avg_data_size_bytes=rounded_mean(sizes),
                    total_data_size_mb=round(sum(sizes) / BYTES_PER_MB, 2) if sizes else NoData,
                )
            )
        rows.sort(key=lambda row: _desc_metric(row.total_data_size_mb))
        return _limited(rows, limit)

    def daily_success_rate(self) -> list[DailySuccessRow]:
        return [
            DailySuccessRow(
                date=bucket.date,
                total=bucket.total,
                successful=bucket.successful,
                success_rate=bucket.success_rate_percent,
            )
            for bucket in bucket_by_day(self.windowed_executions)
        ]

    def execution_frequency(self, days: float | None = None) -> list[FrequencyRow]:
        if days is None:
            days = self.window.days if self.window is not None else DEFAULT_FREQUENCY_DAYS

        rows = []
        for workflow_id, items in self._group_by_workflow(self.windowed_executions).items():
            started = sorted((item.started_at for item in items), key=as_utc)
            rows.append(
                FrequencyRow(
                    name=self._workflows_by_id[workflow_id].name,
                    total_executions=len(items),
                    avg_executions_per_day=round(len(items) / days, 2) if days > 0 else NoData,
                    first_execution=started[0],
                    last_execution=started[-1],
                )
            )
        rows.sort(key=lambda row: (_desc_metric(row.avg_executions_per_day), row.name))
        return rows

    # Graph complexity reports

    def workflows_by_node_count(self) -> list[NodeCountRow]:
        rows = [
            NodeCountRow(
                workflow_id=workflow.id,
                name=workflow.name,
                active=workflow.active,
                node_count=self._node_count(workflow.id),
                created_at=workflow.created_at,
                updated_at=workflow.updated_at,
                parse_error=self.graph_summaries[workflow.id].error,
            )
            for workflow in self.workflows
        ]
        rows.sort(key=lambda row: -row.node_count)
        return rows

    def complexity_distribution(self) -> list[ComplexityDistributionRow]:
        counts: dict[ComplexityTier, list[int]] = {}
        for summary in self.graph_summaries.values():
            counts.setdefault(summary.tier, []).append(summary.node_count)

        rows = [
            ComplexityDistributionRow(
                complexity_level=tier,
                workflow_count=len(values),
                avg_nodes_in_range=rounded_mean(values),
            )
            for tier, values in counts.items()
        ]
        rows.sort(key=lambda row: _asc_metric(row.avg_nodes_in_range))
        return rows

    def node_type_usage(self, limit: int | None = 20) -> list:
        return _limited(aggregate_node_types(self.graph_summaries.values()), limit)

    def most_connected(self, limit: int | None = 20) -> list[ConnectionRow]:
        rows = [
            ConnectionRow(
                workflow_id=workflow.id,
                name=workflow.name,
                active=workflow.active,
                connection_count=self.graph_summaries[workflow.id].connection_count,
                node_count=self._node_count(workflow.id),
                updated_at=workflow.updated_at,
            )
            for workflow in self.workflows
        ]
        rows.sort(key=lambda row: -row.connection_count)
        return _limited(rows, limit)

    def node_count_by_status(self) -> list[StatusComplexityRow]:
        grouped: dict[bool, list[int]] = {}
        for workflow in self.workflows:
            grouped.setdefault(workflow.active, []).append(self._node_count(workflow.id))

        return [
            StatusComplexityRow(
                active=active,
                workflow_count=len(values),
                avg_node_count=rounded_mean(values),
                min_nodes=min(values),
                max_nodes=max(values),
            )
            for active, values in sorted(grouped.items(), reverse=True)
        ]

    def success_by_complexity(self) -> list[ComplexitySuccessRow]:
        grouped: dict[ComplexityTier, list[ExecutionRecord]] = {}
        workflows: dict[ComplexityTier, set[str]] = {}
        for workflow_id, items in self._group_by_workflow(self.windowed_executions).items():
            tier = self._tier(workflow_id)
            grouped.setdefault(tier, []).extend(items)
            workflows.setdefault(tier, set()).add(workflow_id)

        rows = []
        for tier, items in grouped.items():
            successful = sum(1 for item in items if item.finished)
            rows.append(
                ComplexitySuccessRow(
                    complexity_level=tier,
                    workflow_count=len(workflows[tier]),
                    total_executions=len(items),
                    successful_executions=successful,
                    success_rate_percent=success_rate(successful, len(items)),
                )
            )
        rows.sort(key=lambda row: -row.workflow_count)
        return rows

    def workflows_with_node_types(
        self, node_types: Sequence[str] = DEFAULT_NODE_TYPES
    ) -> list[NodeTypeMatchRow]:
        wanted = set(node_types)
        rows = []
        for workflow in self.workflows:
            histogram = self.graph_summaries[workflow.id].node_types
            for node_type, count in histogram.items():
                if node_type not in wanted:
                    continue
                rows.append(
                    NodeTypeMatchRow(
                        workflow_id=workflow.id,
                        name=workflow.name,
                        active=workflow.active,
                        node_type=node_type,
                        node_type_count=count,
                    )
                )
        rows.sort(key=lambda row: (row.name, row.node_type))
        return rows

    # Lifecycle reports

    def creation_trend(self) -> list[CreationTrendRow]:
        grouped: dict[date, list[WorkflowRecord]] = {}
        for workflow in self.workflows:
            month = as_utc(workflow.created_at).date().replace(day=1)
            grouped.setdefault(month, []).append(workflow)

        return [
            CreationTrendRow(
                creation_month=month,
                workflows_created=len(grouped[month]),
                currently_active=sum(1 for workflow in grouped[month] if workflow.active),
            )
            for month in sorted(grouped, reverse=True)
        ]

    def update_frequency(self, limit: int | None = 20) -> list[UpdateFrequencyRow]:
        grouped = self._group_by_workflow(self.windowed_executions)
        rows = []
        for workflow in self.workflows:
            created = as_utc(workflow.created_at)
            updated = as_utc(workflow.updated_at)
            if updated <= created:
                continue
            rows.append(
                UpdateFrequencyRow(
                    workflow_id=workflow.id,
                    name=workflow.name,
                    active=workflow.active,
                    created_at=workflow.created_at,
                    updated_at=workflow.updated_at,
                    days_since_creation=(updated.date() - created.date()).days,
                    execution_count=len(grouped.get(workflow.id, [])),
                )
            )
        rows.sort(key=lambda row: as_utc(row.updated_at), reverse=True)
        return _limited(rows, limit)

    def empty_or_unused(self) -> list[UnusedWorkflowRow]:
        grouped = self._group_by_workflow(self.executions)
        rows = []
        for workflow in self.workflows:
            items = grouped.get(workflow.id, [])
            count = self._node_count(workflow.id)
            if count != 0 and items:
                continue
            rows.append(
                UnusedWorkflowRow(
                    workflow_id=workflow.id,
                    name=workflow.name,
                    active=workflow.active,
                    node_count=count,
                    execution_count=len(items),
                    last_execution=max((item.started_at for item in items), key=as_utc)
                    if items
                    else None,
                    created_at=workflow.created_at,
                    updated_at=workflow.updated_at,
                )
            )
        rows.sort(key=lambda row: as_utc(row.updated_at), reverse=True)
        return rows

    def settings_analysis(self, limit: int | None = 50) -> list[SettingsRow]:
        rows = []
        for workflow in self.workflows:
            if workflow.settings is None:
                continue
            settings = parse_settings(workflow.settings, workflow.id)
            rows.append(
                SettingsRow(
                    workflow_id=workflow.id,
                    name=workflow.name,
                    active=workflow.active,
                    save_error_data=settings.save_error_data,
                    save_success_data=settings.save_success_data,
                    save_manual_executions=settings.save_manual_executions,
                )
            )
        return _limited(rows, limit)

    def performance_by_complexity(self) -> list[ComplexityPerformanceRow]:
        stopped = (item for item in self.windowed_executions if item.stopped_at is not None)
        grouped: dict[ComplexityTier, list[ExecutionRecord]] = {}
        for workflow_id, items in self._group_by_workflow(stopped).items():
            grouped.setdefault(self._tier(workflow_id), []).extend(items)

        rows = []
        for tier, items in grouped.items():
            stats = duration_stats(items)
            rows.append(
                ComplexityPerformanceRow(
                    complexity_level=tier,
                    execution_count=len(items),
                    avg_duration_seconds=stats.avg,
                    min_duration_seconds=stats.min,
                    max_duration_seconds=stats.max,
                )
            )
        rows.sort(key=lambda row: _desc_metric(row.avg_duration_seconds))
        return rows


__all__ = [
    "DEFAULT_NODE_TYPES",
    "REPORTS",
    "ReportBuilder",
    "ReportDefinition",
    "UnknownReport",
]
