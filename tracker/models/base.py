"""
OwnedModel - Abstract base class for user-owned models.

Every record in the tracker belongs to exactly one user. Models inherit
from OwnedModel instead of db.Model directly. This adds:
  - user_id FK column with index
  - query_for_owner(user_id) classmethod
"""

from tracker.models import db


class OwnedModel(db.Model):
    """Abstract base for owner-scoped tables."""
    __abstract__ = True

    user_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    @classmethod
    def query_for_owner(cls, user_id):
        """Return a query filtered by user_id."""
        return cls.query.filter_by(user_id=user_id)
