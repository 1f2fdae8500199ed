"""Read platform tables and convert rows into reporting records."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from sqlalchemy import func
from sqlalchemy.orm import selectinload

from .extensions import db
from .models import Credential, Execution, Tag, Workflow
from .reporting.records import (
    CredentialRecord,
    ExecutionRecord,
    TagRecord,
    TimeWindow,
    WorkflowRecord,
    as_utc,
)


@dataclass
class Snapshot:
    """Record collections fetched in one pass for a report run."""

    workflows: list[WorkflowRecord] = field(default_factory=list)
    executions: list[ExecutionRecord] = field(default_factory=list)
    credentials: list[CredentialRecord] = field(default_factory=list)
    tags: list[TagRecord] = field(default_factory=list)


def _optional_utc(value):
    return as_utc(value) if value is not None else None


def _naive_utc(moment: datetime) -> datetime:
    return moment.astimezone(timezone.utc).replace(tzinfo=None)


def workflow_to_record(workflow: Workflow) -> WorkflowRecord:
    return WorkflowRecord(
        id=str(workflow.id),
        name=workflow.name,
        active=bool(workflow.active),
        created_at=as_utc(workflow.created_at),
        updated_at=as_utc(workflow.updated_at),
        nodes=workflow.nodes,
        connections=workflow.connections,
        settings=workflow.settings,
        tag_ids=tuple(str(tag.id) for tag in workflow.tags),
    )


def load_workflows() -> list[WorkflowRecord]:
    workflows = (
        Workflow.query.options(selectinload(Workflow.tags))
        .order_by(Workflow.created_at.asc())
        .all()
    )
    return [workflow_to_record(workflow) for workflow in workflows]


def load_executions(window: TimeWindow | None = None) -> list[ExecutionRecord]:
    """Load executions, restricted to ``window`` when given.

    The payload column is never fetched; only its length is selected.
    """

    query = db.session.query(
        Execution.id,
        Execution.workflow_id,
        Execution.started_at,
        Execution.stopped_at,
        Execution.finished,
        Execution.mode,
        Execution.wait_till,
        func.length(Execution.data).label("data_size"),
    )
    if window is not None:
        # Stored timestamps are naive UTC.
        query = query.filter(
            Execution.started_at >= _naive_utc(window.start),
            Execution.started_at <= _naive_utc(window.end),
        )

    return [
        ExecutionRecord(
            id=str(row.id),
            workflow_id=str(row.workflow_id),
            started_at=as_utc(row.started_at),
            stopped_at=_optional_utc(row.stopped_at),
            finished=bool(row.finished),
            mode=row.mode,
            wait_till=_optional_utc(row.wait_till),
            data_size=row.data_size,
        )
        for row in query.order_by(Execution.started_at.asc()).all()
    ]


def load_credentials() -> list[CredentialRecord]:
    return [
        CredentialRecord(
            id=str(credential.id),
            name=credential.name,
            type=credential.type,
            created_at=as_utc(credential.created_at),
            updated_at=as_utc(credential.updated_at),
        )
        for credential in Credential.query.order_by(Credential.name.asc()).all()
    ]


def load_tags() -> list[TagRecord]:
    return [
        TagRecord(
            id=str(tag.id),
            name=tag.name,
            created_at=_optional_utc(tag.created_at),
            updated_at=_optional_utc(tag.updated_at),
        )
        for tag in Tag.query.order_by(Tag.name.asc()).all()
    ]


def load_snapshot(window: TimeWindow | None = None) -> Snapshot:
    return Snapshot(
        workflows=load_workflows(),
        executions=load_executions(window),
        credentials=load_credentials(),
        tags=load_tags(),
    )


__all__ = [
    "Snapshot",
    "load_credentials",
    "load_executions",
    "load_snapshot",
    "load_tags",
    "load_workflows",
    "workflow_to_record",
]
