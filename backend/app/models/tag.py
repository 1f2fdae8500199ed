"""Tag model definition."""

from __future__ import annotations

from datetime import datetime

from ..extensions import db
from .workflow import workflows_tags


class Tag(db.Model):
    """Label attached to workflows."""

    __tablename__ = "tag_entity"

    id = db.Column(db.String(36), primary_key=True)
    name = db.Column(db.String(24), unique=True, nullable=False)
    created_at = db.Column("createdAt", db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(
        "updatedAt",
        db.DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )

    workflows = db.relationship("Workflow", secondary=workflows_tags, back_populates="tags")

    def __repr__(self) -> str:  # pragma: no cover - repr not critical for tests
        return f"<Tag {self.name!r}>"
