"""Shared utility functions.

parse_date_input:    date parsing that raises ValueError on bad input
commit_or_raise:     commit helper translating integrity errors into ConflictError
"""
import logging
from datetime import date, datetime

from openpyxl.utils.datetime import from_excel
from sqlalchemy.exc import IntegrityError

from tracker.core.exceptions import ConflictError
from tracker.models import db

logger = logging.getLogger(__name__)


def parse_date_input(value):
    """Parse a date value, raising ValueError on bad input.

    Returns None for empty input. Supports:
    - date / datetime objects (spreadsheet cells are often already typed)
    - Excel serial day numbers (int/float cells formatted as dates)
    - YYYY-MM-DD and YYYY-MM-DDTHH:MM:SS (ISO)
    - DD.MM.YYYY (European format)
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Invalid date: {value!r}")
    if isinstance(value, (int, float)):
        try:
            return from_excel(value).date()
        except (ValueError, TypeError, OverflowError, AttributeError) as exc:
            raise ValueError(f"Invalid date: {value!r}") from exc

    text = str(value).strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    try:
        return datetime.strptime(text, "%d.%m.%Y").date()
    except ValueError as exc:
        raise ValueError(
            "Invalid date format. Use YYYY-MM-DD or DD.MM.YYYY."
        ) from exc


# ── Database commit helper ───────────────────────────────────────────────────

def commit_or_raise(resource: str):
    """Commit the current SQLAlchemy session.

    IntegrityError → rollback + ConflictError (duplicate / constraint violation).
    Any other error is rolled back and re-raised for the caller to handle.
    """
    try:
        db.session.commit()
    except IntegrityError as exc:
        db.session.rollback()
        logger.warning("Integrity error on commit (%s): %s", resource, exc.orig)
        raise ConflictError(resource, "constraint", str(exc.orig)) from exc
    except Exception:
        db.session.rollback()
        logger.exception("Unexpected database error on commit (%s)", resource)
        raise
