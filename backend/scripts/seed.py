"""Seed the database with demo workflows, executions, credentials and tags."""
from __future__ import annotations

import json
import pathlib
import random
import sys
from datetime import datetime, timedelta

ROOT = pathlib.Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from backend.app import Config, create_app
from backend.app.extensions import db
from backend.app.models import Credential, Execution, Tag, Workflow

DEMO_CREDENTIAL_ID = "cred-slack-demo"
MODES = ["manual", "trigger", "webhook", "retry"]


class SeedConfig(Config):
    CREATE_TABLES = True


def _linear_graph(node_types: list[str], credential_id: str | None = None) -> tuple[str, str]:
    """Build a chain of nodes and its connection map."""

    nodes = []
    connections: dict[str, object] = {}
    for index, node_type in enumerate(node_types, start=1):
        name = f"Step {index}"
        node: dict[str, object] = {
            "id": f"node-{index}",
            "name": name,
            "type": node_type,
            "typeVersion": 1,
            "position": [index * 220, 300],
            "parameters": {},
        }
        if credential_id is not None and node_type == "n8n-nodes-base.slack":
            node["credentials"] = {"slackApi": {"id": credential_id, "name": "Slack"}}
        nodes.append(node)
        if index < len(node_types):
            connections[name] = {
                "main": [[{"node": f"Step {index + 1}", "type": "main", "index": 0}]]
            }
    return json.dumps(nodes), json.dumps(connections)


def _ensure_workflow(
    workflow_id: str, name: str, node_types: list[str], active: bool, tags: list[Tag]
) -> tuple[Workflow, bool]:
    workflow = db.session.get(Workflow, workflow_id)
    if workflow is not None:
        return workflow, False

    nodes, connections = _linear_graph(node_types, DEMO_CREDENTIAL_ID)
    workflow = Workflow(
        id=workflow_id,
        name=name,
        active=active,
        nodes=nodes,
        connections=connections,
        settings=json.dumps(
            {
                "saveDataErrorExecution": "all",
                "saveDataSuccessExecution": "none",
                "saveManualExecutions": True,
            }
        ),
        tags=tags,
    )
    db.session.add(workflow)
    return workflow, True


def _ensure_tag(tag_id: str, name: str) -> Tag:
    tag = db.session.get(Tag, tag_id)
    if tag is None:
        tag = Tag(id=tag_id, name=name)
        db.session.add(tag)
    return tag


def _seed_executions(workflow: Workflow, count: int, rng: random.Random) -> int:
    now = datetime.utcnow()
    for _ in range(count):
        started = now - timedelta(days=rng.uniform(0, 30), hours=rng.uniform(0, 24))
        finished = rng.random() > 0.2
        stopped = started + timedelta(seconds=rng.uniform(0.5, 90)) if finished else None
        db.session.add(
            Execution(
                workflow_id=workflow.id,
                finished=finished,
                mode=rng.choice(MODES),
                started_at=started,
                stopped_at=stopped,
                data=json.dumps({"items": rng.randint(1, 50)}),
            )
        )
    return count


def main() -> None:
    app = create_app(SeedConfig)
    rng = random.Random(42)
    with app.app_context():
        if db.session.get(Credential, DEMO_CREDENTIAL_ID) is None:
            db.session.add(Credential(id=DEMO_CREDENTIAL_ID, name="Slack", type="slackApi"))

        ops = _ensure_tag("tag-ops", "ops")
        sales = _ensure_tag("tag-sales", "sales")

        demo = [
            ("wf-lead-sync", "Lead Sync", ["n8n-nodes-base.webhook", "n8n-nodes-base.set",
                                           "n8n-nodes-base.httpRequest"], True, [sales]),
            ("wf-alerts", "Error Alerts", ["n8n-nodes-base.errorTrigger", "n8n-nodes-base.code",
                                           "n8n-nodes-base.slack"], True, [ops]),
            ("wf-draft", "Draft", [], False, []),
        ]

        created_workflows = 0
        created_executions = 0
        for workflow_id, name, node_types, active, tags in demo:
            workflow, created = _ensure_workflow(workflow_id, name, node_types, active, tags)
            created_workflows += int(created)
            if created and node_types:
                created_executions += _seed_executions(workflow, 25, rng)

        db.session.commit()

        print(
            "Seed completed",
            f"workflows created={created_workflows}",
            f"executions created={created_executions}",
        )


if __name__ == "__main__":
    main()
