"""Project domain model for Program -> Project hierarchy."""

from datetime import datetime, timezone

from tracker.models import db
from tracker.models.base import OwnedModel

PROJECT_STATUSES = ("not-started", "in-progress", "completed", "on-hold")
PROJECT_PRIORITIES = ("high", "medium", "low")


class Project(OwnedModel):
    """Unit of work belonging to exactly one Program."""

    __tablename__ = "projects"

    id = db.Column(db.Integer, primary_key=True)
    program_id = db.Column(
        db.Integer,
        db.ForeignKey("programs.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, default="")
    status = db.Column(
        db.String(50), nullable=False, default="not-started",
        comment="not-started | in-progress | completed | on-hold",
    )
    priority = db.Column(
        db.String(20), nullable=False, default="medium",
        comment="high | medium | low",
    )
    budget = db.Column(db.Numeric(12, 2), nullable=False)
    progress = db.Column(db.Integer, nullable=False, default=0, comment="0-100")
    start_date = db.Column(db.Date, nullable=False)
    deadline = db.Column(db.Date, nullable=False)

    created_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    owner = db.relationship("User", back_populates="projects")
    program = db.relationship("Program", back_populates="projects")

    __table_args__ = (
        db.Index("ix_projects_user_program", "user_id", "program_id"),
    )

    def to_dict(self) -> dict:
        """Serialize core project fields for API responses."""
        return {
            "id": self.id,
            "program_id": self.program_id,
            "name": self.name,
            "description": self.description,
            "status": self.status,
            "priority": self.priority,
            "budget": str(self.budget) if self.budget is not None else None,
            "progress": self.progress,
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "deadline": self.deadline.isoformat() if self.deadline else None,
            "user_id": self.user_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self) -> str:
        return f"<Project {self.id}: {self.name}>"
