"""
Auth Models - users.

Login state lives in the signed Flask session cookie; only the user
record and its password hash are persisted.
"""

from datetime import datetime, timezone

from tracker.models import db


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(100), unique=True, nullable=False)
    email = db.Column(db.String(200), unique=True)
    first_name = db.Column(db.String(100))
    last_name = db.Column(db.String(100))
    password_hash = db.Column(db.String(256), nullable=False)
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(
        db.DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    programs = db.relationship(
        "Program", back_populates="owner", lazy="dynamic",
    )
    projects = db.relationship(
        "Project", back_populates="owner", lazy="dynamic",
    )
    imports = db.relationship(
        "ImportRecord", back_populates="owner", lazy="dynamic",
    )

    def to_dict(self):
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "first_name": self.first_name,
            "last_name": self.last_name,
        }

    def __repr__(self):
        return f"<User {self.id}: {self.username}>"
