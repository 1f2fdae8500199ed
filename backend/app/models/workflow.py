"""Workflow and tag association model definitions."""

from __future__ import annotations

from datetime import datetime

from ..extensions import db

workflows_tags = db.Table(
    "workflows_tags",
    db.Column(
        "workflowId",
        db.String(36),
        db.ForeignKey("workflow_entity.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    db.Column(
        "tagId",
        db.String(36),
        db.ForeignKey("tag_entity.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class Workflow(db.Model):
    """A stored automation graph with its serialised nodes and connections."""

    __tablename__ = "workflow_entity"

    id = db.Column(db.String(36), primary_key=True)
    name = db.Column(db.String(128), nullable=False)
    active = db.Column(db.Boolean, nullable=False, default=False)
    nodes = db.Column(db.Text, nullable=False, default="[]")
    connections = db.Column(db.Text, nullable=False, default="{}")
    settings = db.Column(db.Text, nullable=True)
    created_at = db.Column("createdAt", db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(
        "updatedAt",
        db.DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )

    tags = db.relationship("Tag", secondary=workflows_tags, back_populates="workflows")
    executions = db.relationship("Execution", back_populates="workflow")

    def __repr__(self) -> str:  # pragma: no cover - repr not critical for tests
        return f"<Workflow {self.name!r}>"
