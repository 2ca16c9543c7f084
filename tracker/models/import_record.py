"""
Import ledger model - one immutable row per spreadsheet upload attempt.
"""

from datetime import datetime, timezone

from tracker.models import db
from tracker.models.base import OwnedModel

IMPORT_STATUSES = ("success", "partial", "error")


class ImportRecord(OwnedModel):
    __tablename__ = "import_history"

    id = db.Column(db.Integer, primary_key=True)
    filename = db.Column(db.String(255), nullable=False)
    status = db.Column(db.String(50), nullable=False, comment="success | partial | error")
    records_imported = db.Column(db.Integer, nullable=False, default=0)
    errors = db.Column(db.JSON, nullable=True)
    created_at = db.Column(
        db.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        index=True,
    )

    owner = db.relationship("User", back_populates="imports")

    def to_dict(self):
        return {
            "id": self.id,
            "filename": self.filename,
            "status": self.status,
            "records_imported": self.records_imported,
            "errors": list(self.errors) if self.errors else None,
            "user_id": self.user_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f"<ImportRecord {self.id}: {self.filename} {self.status}>"
