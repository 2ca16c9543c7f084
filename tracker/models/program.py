"""
Program Tracker
Program domain model.

A Program is the top-level funded initiative owned by a user. Its projects
are removed with it.
"""

from datetime import datetime, timezone

from tracker.models import db
from tracker.models.base import OwnedModel

PROGRAM_CATEGORIES = ("innovation", "digital", "sustainability", "formation")
PROGRAM_STATUSES = ("active", "pending", "completed")


class Program(OwnedModel):
    """Economic-development program."""

    __tablename__ = "programs"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, default="")
    category = db.Column(
        db.String(100),
        nullable=False,
        comment="innovation | digital | sustainability | formation",
    )
    status = db.Column(
        db.String(50),
        nullable=False,
        default="active",
        comment="active | pending | completed",
    )
    budget = db.Column(db.Numeric(12, 2), nullable=False)
    start_date = db.Column(db.Date, nullable=False)
    end_date = db.Column(db.Date, nullable=True)

    # Metadata
    created_at = db.Column(
        db.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at = db.Column(
        db.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # ── Relationships ────────────────────────────────────────────────────
    owner = db.relationship("User", back_populates="programs")
    projects = db.relationship(
        "Project", back_populates="program", lazy="dynamic",
        cascade="all, delete-orphan",
    )

    def to_dict(self, include_children=False):
        """Serialize program to dictionary."""
        result = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "status": self.status,
            "budget": str(self.budget) if self.budget is not None else None,
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "end_date": self.end_date.isoformat() if self.end_date else None,
            "user_id": self.user_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
        if include_children:
            result["projects"] = [p.to_dict() for p in self.projects]
        return result

    def __repr__(self):
        return f"<Program {self.id}: {self.name}>"
