"""Credential model definition."""

from __future__ import annotations

from datetime import datetime

from ..extensions import db


class Credential(db.Model):
    """Stored integration credentials; only metadata is read for reports."""

    __tablename__ = "credentials_entity"

    id = db.Column(db.String(36), primary_key=True)
    name = db.Column(db.String(128), nullable=False)
    type = db.Column(db.String(128), nullable=False)
    data = db.Column(db.Text, nullable=True)
    created_at = db.Column("createdAt", db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(
        "updatedAt",
        db.DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )

    def __repr__(self) -> str:  # pragma: no cover - repr not critical for tests
        return f"<Credential {self.name!r} ({self.type})>"
