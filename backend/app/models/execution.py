"""Execution model definition."""

from __future__ import annotations

from ..extensions import db


class Execution(db.Model):
    """One run of a workflow."""

    __tablename__ = "execution_entity"

    id = db.Column(db.Integer, primary_key=True)
    workflow_id = db.Column(
        "workflowId",
        db.String(36),
        db.ForeignKey("workflow_entity.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    finished = db.Column(db.Boolean, nullable=False, default=False)
    mode = db.Column(db.String(32), nullable=False, default="manual")
    started_at = db.Column("startedAt", db.DateTime, nullable=False, index=True)
    stopped_at = db.Column("stoppedAt", db.DateTime, nullable=True)
    wait_till = db.Column("waitTill", db.DateTime, nullable=True)
    data = db.Column(db.Text, nullable=True)

    workflow = db.relationship("Workflow", back_populates="executions")

    def __repr__(self) -> str:  # pragma: no cover - repr not critical for tests
        return f"<Execution {self.id} of {self.workflow_id}>"
