"""Tests for workflow graph parsing and complexity metrics."""

from __future__ import annotations

import json
import logging
import pathlib
import sys
from datetime import datetime, timezone

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from backend.app.reporting.errors import GraphParseError  # noqa: E402
from backend.app.reporting.graph_metrics import (  # noqa: E402
    ComplexityTier,
    aggregate_node_types,
    analyze_workflow,
    analyze_workflows,
    complexity_tier,
    connection_count,
    credential_ids_in,
    edge_count,
    node_type_histogram,
    parse_connections,
    parse_nodes,
    parse_settings,
)
from backend.app.reporting.records import ConnectionTarget, WorkflowRecord  # noqa: E402

CREATED = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _workflow(identifier: str, nodes: object = "[]", connections: object = "{}") -> WorkflowRecord:
    return WorkflowRecord(
        id=identifier,
        name=identifier.title(),
        active=True,
        created_at=CREATED,
        updated_at=CREATED,
        nodes=nodes,
        connections=connections,
    )


def _nodes(*node_types: str) -> str:
    return json.dumps(
        [
            {"id": f"n{index}", "name": f"Node {index}", "type": node_type}
            for index, node_type in enumerate(node_types)
        ]
    )


@pytest.mark.parametrize(
    ("count", "tier"),
    [
        (0, ComplexityTier.EMPTY),
        (1, ComplexityTier.SIMPLE),
        (5, ComplexityTier.SIMPLE),
        (6, ComplexityTier.MODERATE),
        (10, ComplexityTier.MODERATE),
        (11, ComplexityTier.COMPLEX),
        (20, ComplexityTier.COMPLEX),
        (21, ComplexityTier.VERY_COMPLEX),
        (400, ComplexityTier.VERY_COMPLEX),
    ],
)
def test_complexity_tier_boundaries(count, tier):
    assert complexity_tier(count) is tier


def test_complexity_tier_rejects_negative_counts():
    with pytest.raises(ValueError):
        complexity_tier(-1)


def test_complexity_tier_labels():
    assert ComplexityTier.EMPTY.label == "0 nodes (empty)"
    assert ComplexityTier.VERY_COMPLEX.label == "20+ nodes (very complex)"


@pytest.mark.parametrize("serialized", ["[]", None, "", "   ", "null", []])
def test_parse_nodes_treats_absent_input_as_empty(serialized):
    assert parse_nodes(serialized) == []


@pytest.mark.parametrize("serialized", ["[{broken", '{"id": "n1"}', "[1, 2]", "42"])
def test_parse_nodes_rejects_malformed_input(serialized):
    with pytest.raises(GraphParseError):
        parse_nodes(serialized)


def test_parse_nodes_reads_descriptors():
    nodes = parse_nodes(_nodes("n8n-nodes-base.webhook", "n8n-nodes-base.code"))

    assert [(node.id, node.type, node.name) for node in nodes] == [
        ("n0", "n8n-nodes-base.webhook", "Node 0"),
        ("n1", "n8n-nodes-base.code", "Node 1"),
    ]


def test_parse_connections_nested_output_lists():
    graph = parse_connections(
        json.dumps(
            {
                "Start": {
                    "main": [
                        [
                            {"node": "Set", "type": "main", "index": 0},
                            {"node": "IF", "type": "main", "index": 0},
                        ]
                    ]
                },
                "Set": {"main": [[{"node": "IF", "type": "main", "index": 0}]]},
            }
        )
    )

    assert connection_count(graph) == 2
    assert edge_count(graph) == 3
    assert graph["Set"]["main"] == [ConnectionTarget(node="IF", type="main", index=0)]


def test_parse_connections_flat_target_list():
    graph = parse_connections({"A": {"main": [{"node": "B"}]}})

    assert graph == {"A": {"main": [ConnectionTarget(node="B", type="main", index=0)]}}


def test_parse_connections_rejects_invalid_targets():
    with pytest.raises(GraphParseError):
        parse_connections('{"A": {"main": [["B"]]}}')
    with pytest.raises(GraphParseError):
        parse_connections("[]")


def test_node_type_histogram_skips_untyped_nodes():
    nodes = parse_nodes(
        json.dumps(
            [
                {"id": "1", "type": "n8n-nodes-base.code"},
                {"id": "2", "type": "n8n-nodes-base.code"},
                {"id": "3", "type": "n8n-nodes-base.set"},
                {"id": "4"},
            ]
        )
    )

    assert node_type_histogram(nodes) == {"n8n-nodes-base.code": 2, "n8n-nodes-base.set": 1}


def test_empty_workflow_has_zero_nodes():
    summary = analyze_workflow(_workflow("empty", nodes="[]"))

    assert summary.node_count == 0
    assert summary.tier is ComplexityTier.EMPTY
    assert summary.error is None
    assert not summary.parse_failed


def test_batch_isolates_malformed_workflow(caplog):
    workflows = [
        _workflow("first", nodes=_nodes("a", "b", "c"), connections='{"Node 0": {"main": [[{"node": "Node 1"}]]}}'),
        _workflow("broken", nodes="[{not json"),
        _workflow("third", nodes=_nodes(*["x"] * 7)),
    ]

    with caplog.at_level(logging.WARNING):
        summaries = analyze_workflows(workflows)

    assert [summary.workflow_id for summary in summaries] == ["first", "broken", "third"]
    assert summaries[0].node_count == 3
    assert summaries[0].connection_count == 1
    assert summaries[0].tier is ComplexityTier.SIMPLE
    assert summaries[1].node_count == 0
    assert summaries[1].parse_failed
    assert "not valid JSON" in summaries[1].error
    assert summaries[2].node_count == 7
    assert summaries[2].tier is ComplexityTier.MODERATE
    assert "broken" in caplog.text


def test_batch_isolates_deeply_nested_graph():
    workflows = [
        _workflow("ok", nodes="[]"),
        _workflow("deep", nodes="[" * 200000),
        _workflow("after", nodes=_nodes("a", "b")),
    ]

    summaries = analyze_workflows(workflows)

    assert [summary.parse_failed for summary in summaries] == [False, True, False]
    assert summaries[1].tier is ComplexityTier.EMPTY
    assert summaries[2].node_count == 2


def test_aggregate_node_types_counts_workflows():
    summaries = analyze_workflows(
        [
            _workflow("one", nodes=_nodes("code", "code", "set")),
            _workflow("two", nodes=_nodes("code")),
            _workflow("bad", nodes="{"),
        ]
    )

    usage = aggregate_node_types(summaries)

    assert [(row.node_type, row.usage_count, row.workflows_using) for row in usage] == [
        ("code", 3, 2),
        ("set", 1, 1),
    ]


def test_parse_settings():
    settings = parse_settings(
        json.dumps(
            {
                "saveDataErrorExecution": "all",
                "saveDataSuccessExecution": "none",
                "saveManualExecutions": "true",
            }
        )
    )

    assert settings.save_error_data == "all"
    assert settings.save_success_data == "none"
    assert settings.save_manual_executions is True


def test_parse_settings_malformed_yields_empty_flags():
    settings = parse_settings("{oops", workflow_id="wf-1")

    assert settings.save_error_data is None
    assert settings.save_success_data is None
    assert settings.save_manual_executions is None


def test_credential_ids_in_reads_structured_references():
    nodes = parse_nodes(
        json.dumps(
            [
                {"id": "1", "type": "slack", "credentials": {"slackApi": {"id": "7", "name": "Slack"}}},
                {"id": "2", "type": "code"},
            ]
        )
    )

    assert credential_ids_in(nodes) == {"7"}
