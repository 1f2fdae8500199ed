"""Structural metrics derived from a workflow's serialised node graph."""

from __future__ import annotations

import json
import logging
from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .errors import GraphParseError
from .records import ConnectionGraph, ConnectionTarget, NodeDescriptor, WorkflowRecord

logger = logging.getLogger(__name__)


class ComplexityTier(Enum):
    """Workflow size buckets; bounds are inclusive and ``None`` is unbounded."""

    EMPTY = ("0 nodes (empty)", 0, 0)
    SIMPLE = ("1-5 nodes (simple)", 1, 5)
    MODERATE = ("6-10 nodes (moderate)", 6, 10)
    COMPLEX = ("11-20 nodes (complex)", 11, 20)
    VERY_COMPLEX = ("20+ nodes (very complex)", 21, None)

    def __init__(self, label: str, low: int, high: int | None) -> None:
        self.label = label
        self.low = low
        self.high = high

    def includes(self, count: int) -> bool:
        return count >= self.low and (self.high is None or count <= self.high)


def complexity_tier(count: int) -> ComplexityTier:
    if count < 0:
        raise ValueError("node count must not be negative")
    for tier in ComplexityTier:
        if tier.includes(count):
            return tier
    raise AssertionError(f"no complexity tier for {count}")  # pragma: no cover


@dataclass(frozen=True)
class GraphSummary:
    workflow_id: str
    node_count: int
    connection_count: int
    edge_count: int
    tier: ComplexityTier
    node_types: Counter = field(default_factory=Counter, compare=False, hash=False)
    error: str | None = None

    @property
    def parse_failed(self) -> bool:
        return self.error is not None


@dataclass(frozen=True)
class NodeTypeUsage:
    node_type: str
    usage_count: int
    workflows_using: int


@dataclass(frozen=True)
class WorkflowSettings:
    save_error_data: str | None = None
    save_success_data: str | None = None
    save_manual_executions: bool | None = None


def _decode(serialized: Any, expected: type, label: str) -> Any:
    if serialized is None:
        return expected()
    if isinstance(serialized, (bytes, bytearray)):
        serialized = serialized.decode("utf-8", errors="replace")
    if isinstance(serialized, str):
        if not serialized.strip():
            return expected()
        try:
            serialized = json.loads(serialized)
        except (ValueError, RecursionError) as exc:
            raise GraphParseError(f"{label} is not valid JSON: {exc}") from exc
    if serialized is None:
        return expected()
    if not isinstance(serialized, expected):
        raise GraphParseError(
            f"{label} must be a JSON {expected.__name__}, got {type(serialized).__name__}"
        )
    return serialized


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


def parse_nodes(serialized: Any) -> list[NodeDescriptor]:
    """Parse a node list; absent or blank input is an empty workflow."""

    raw_nodes = _decode(serialized, list, "nodes")
    nodes: list[NodeDescriptor] = []
    for index, raw in enumerate(raw_nodes):
        if not isinstance(raw, dict):
            raise GraphParseError(f"nodes[{index}] must be an object")
        credentials = raw.get("credentials")
        nodes.append(
            NodeDescriptor(
                id=_optional_str(raw.get("id")),
                type=_optional_str(raw.get("type")),
                name=_optional_str(raw.get("name")),
                credentials=credentials if isinstance(credentials, dict) else {},
            )
        )
    return nodes


def _parse_targets(source: str, port: str, value: Any) -> list[ConnectionTarget]:
    if not isinstance(value, list):
        raise GraphParseError(f"connections[{source!r}][{port!r}] must be a list")

    targets: list[ConnectionTarget] = []
    # n8n nests one list of targets per output index.
    for output_index, item in enumerate(value):
        entries = item if isinstance(item, list) else [item]
        for entry in entries:
            if entry is None:
                continue
            if not isinstance(entry, dict) or "node" not in entry:
                raise GraphParseError(
                    f"connections[{source!r}][{port!r}] contains an invalid target"
                )
            index = entry.get("index", output_index)
            targets.append(
                ConnectionTarget(
                    node=str(entry["node"]),
                    type=str(entry.get("type", port)),
                    index=index if isinstance(index, int) else output_index,
                )
            )
    return targets


def parse_connections(serialized: Any) -> ConnectionGraph:
    raw_graph = _decode(serialized, dict, "connections")
    graph: ConnectionGraph = {}
    for source, ports in raw_graph.items():
        if not isinstance(ports, dict):
            raise GraphParseError(f"connections[{source!r}] must be an object")
        graph[str(source)] = {
            str(port): _parse_targets(source, port, value) for port, value in ports.items()
        }
    return graph


def node_count(nodes: Iterable[NodeDescriptor]) -> int:
    return sum(1 for _ in nodes)


def connection_count(graph: ConnectionGraph) -> int:
    return len(graph)


def edge_count(graph: ConnectionGraph) -> int:
    return sum(len(targets) for ports in graph.values() for targets in ports.values())


def node_type_histogram(nodes: Iterable[NodeDescriptor]) -> Counter:
    return Counter(node.type for node in nodes if node.type)


def credential_ids_in(nodes: Iterable[NodeDescriptor]) -> set[str]:
    """Return credential ids referenced by the nodes' ``credentials`` blocks."""

    found: set[str] = set()
    for node in nodes:
        for reference in node.credentials.values():
            if isinstance(reference, dict) and reference.get("id") is not None:
                found.add(str(reference["id"]))
    return found


def analyze_workflow(workflow: WorkflowRecord) -> GraphSummary:
    """Summarise one workflow, reporting parse failures instead of raising."""

    try:
        nodes = parse_nodes(workflow.nodes)
        graph = parse_connections(workflow.connections)
    except GraphParseError as exc:
        logger.warning("Skipping graph metrics for workflow %s: %s", workflow.id, exc.reason)
        return GraphSummary(
            workflow_id=workflow.id,
            node_count=0,
            connection_count=0,
            edge_count=0,
            tier=ComplexityTier.EMPTY,
            error=exc.reason,
        )

    count = node_count(nodes)
    return GraphSummary(
        workflow_id=workflow.id,
        node_count=count,
        connection_count=connection_count(graph),
        edge_count=edge_count(graph),
        tier=complexity_tier(count),
        node_types=node_type_histogram(nodes),
    )


def analyze_workflows(workflows: Iterable[WorkflowRecord]) -> list[GraphSummary]:
    return [analyze_workflow(workflow) for workflow in workflows]


def aggregate_node_types(summaries: Iterable[GraphSummary]) -> list[NodeTypeUsage]:
    usage: Counter = Counter()
    workflows_using: Counter = Counter()
    for summary in summaries:
        usage.update(summary.node_types)
        workflows_using.update(summary.node_types.keys())

    rows = [
        NodeTypeUsage(
            node_type=node_type,
            usage_count=count,
            workflows_using=workflows_using[node_type],
        )
        for node_type, count in usage.items()
    ]
    rows.sort(key=lambda row: (-row.usage_count, row.node_type))
    return rows


def _optional_bool(value: Any) -> bool | None:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in {"true", "false"}:
        return value.strip().lower() == "true"
    return None


def parse_settings(serialized: Any, workflow_id: str | None = None) -> WorkflowSettings:
    try:
        settings = _decode(serialized, dict, "settings")
    except GraphParseError as exc:
        logger.warning("Ignoring settings of workflow %s: %s", workflow_id, exc.reason)
        return WorkflowSettings()

    return WorkflowSettings(
        save_error_data=_optional_str(settings.get("saveDataErrorExecution")),
        save_success_data=_optional_str(settings.get("saveDataSuccessExecution")),
        save_manual_executions=_optional_bool(settings.get("saveManualExecutions")),
    )


__all__ = [
    "ComplexityTier",
    "GraphSummary",
    "NodeTypeUsage",
    "WorkflowSettings",
    "aggregate_node_types",
    "analyze_workflow",
    "analyze_workflows",
    "complexity_tier",
    "connection_count",
    "credential_ids_in",
    "edge_count",
    "node_count",
    "node_type_histogram",
    "parse_connections",
    "parse_nodes",
    "parse_settings",
]
