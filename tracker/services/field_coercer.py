"""
Field coercion for program and project rows.

Turns a raw row (spreadsheet cells or a JSON body) into the typed shape the
record store inserts. Coercion never raises: every function returns the
tuple-return pair used across the services layer.

    data, err = coerce_program(row)
    if err:
        ...  # err is a human-readable reason, e.g. "invalid budget"

Columns are looked up by their spreadsheet header ("startDate") first and
by the snake_case API name ("start_date") second.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal, InvalidOperation

from tracker.models.program import PROGRAM_CATEGORIES, PROGRAM_STATUSES
from tracker.models.project import PROJECT_PRIORITIES, PROJECT_STATUSES
from tracker.utils.helpers import parse_date_input

logger = logging.getLogger(__name__)

# Numeric(12, 2) upper bound
MAX_BUDGET = Decimal("9999999999.99")
NAME_MAX_LENGTH = 255

_ALIASES = {
    "startDate": "start_date",
    "endDate": "end_date",
    "programId": "program_id",
}


def is_present(value) -> bool:
    """True unless the cell is None or an all-whitespace string."""
    if value is None:
        return False
    if isinstance(value, str) and not value.strip():
        return False
    return True


def get_field(row: dict, column: str):
    """Return the raw value for *column*, falling back to its snake_case alias."""
    value = row.get(column)
    if not is_present(value) and column in _ALIASES:
        value = row.get(_ALIASES[column])
    return value if is_present(value) else None


def has_field(row: dict, column: str) -> bool:
    return get_field(row, column) is not None


# ── Scalar coercers (raise ValueError, caught by the row coercers) ──────


def _to_text(value) -> str:
    return value if isinstance(value, str) else str(value)


def _to_budget(value) -> Decimal:
    if isinstance(value, bool):
        raise ValueError("boolean budget")
    try:
        amount = Decimal(_to_text(value).strip().replace(" ", ""))
    except InvalidOperation as exc:
        raise ValueError("non-numeric budget") from exc
    if not amount.is_finite() or amount < 0 or amount > MAX_BUDGET:
        raise ValueError("budget out of range")
    return amount.quantize(Decimal("0.01"))


def _to_int(value) -> int:
    if isinstance(value, bool):
        raise ValueError("boolean")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError("not an integer")
        return int(value)
    text = _to_text(value).strip()
    try:
        return int(text)
    except ValueError:
        number = float(text)
        if not number.is_integer():
            raise
        return int(number)


def _enum(value, allowed) -> str:
    text = _to_text(value).strip()
    if text not in allowed:
        raise ValueError(text)
    return text


# ── Row coercers ─────────────────────────────────────────────────────────


def _coerce_common(row: dict, partial: bool, data: dict) -> str | None:
    """Fields shared by programs and projects: name, description, budget, startDate."""
    name = get_field(row, "name")
    if name is not None:
        name = _to_text(name)
        if len(name) > NAME_MAX_LENGTH:
            return "name is too long"
        data["name"] = name
    elif not partial or "name" in row:
        return "name is required"

    description = get_field(row, "description")
    if description is not None:
        data["description"] = _to_text(description)
    elif not partial or "description" in row:
        data["description"] = ""

    budget = get_field(row, "budget")
    if budget is not None:
        try:
            data["budget"] = _to_budget(budget)
        except ValueError:
            return "invalid budget"
    elif not partial or "budget" in row:
        return "invalid budget"

    start = get_field(row, "startDate")
    if start is not None:
        try:
            data["start_date"] = parse_date_input(start)
        except ValueError:
            return "invalid startDate"
    elif not partial:
        data["start_date"] = date.today()

    return None


def coerce_program(row: dict, partial: bool = False) -> tuple[dict | None, str | None]:
    """Validate a program row.

    Returns (data, None) or (None, reason). With partial=True only the
    fields present in *row* are validated and no defaults are applied.
    """
    data: dict = {}
    err = _coerce_common(row, partial, data)
    if err:
        return None, err

    category = get_field(row, "category")
    if category is not None:
        try:
            data["category"] = _enum(category, PROGRAM_CATEGORIES)
        except ValueError:
            return None, "invalid category"
    elif not partial or "category" in row:
        return None, "invalid category"

    status = get_field(row, "status")
    if status is not None:
        try:
            data["status"] = _enum(status, PROGRAM_STATUSES)
        except ValueError:
            return None, "invalid status"
    elif not partial:
        data["status"] = "active"

    end = get_field(row, "endDate")
    if end is not None:
        try:
            data["end_date"] = parse_date_input(end)
        except ValueError:
            return None, "invalid endDate"
    elif not partial or "endDate" in row or "end_date" in row:
        data["end_date"] = None

    if data.get("start_date") and data.get("end_date") and data["end_date"] < data["start_date"]:
        return None, "endDate precedes startDate"

    return data, None


def coerce_project(row: dict, partial: bool = False) -> tuple[dict | None, str | None]:
    """Validate a project row. Same contract as coerce_program."""
    data: dict = {}
    err = _coerce_common(row, partial, data)
    if err:
        return None, err

    program_id = get_field(row, "programId")
    if program_id is not None:
        try:
            data["program_id"] = _to_int(program_id)
        except ValueError:
            return None, "invalid programId"
        if data["program_id"] <= 0:
            return None, "invalid programId"
    elif not partial:
        return None, "programId is required"

    status = get_field(row, "status")
    if status is not None:
        try:
            data["status"] = _enum(status, PROJECT_STATUSES)
        except ValueError:
            return None, "invalid status"
    elif not partial:
        data["status"] = "not-started"

    priority = get_field(row, "priority")
    if priority is not None:
        try:
            data["priority"] = _enum(priority, PROJECT_PRIORITIES)
        except ValueError:
            return None, "invalid priority"
    elif not partial:
        data["priority"] = "medium"

    progress = get_field(row, "progress")
    if progress is not None:
        try:
            data["progress"] = _to_int(progress)
        except ValueError:
            return None, "invalid progress"
        if not 0 <= data["progress"] <= 100:
            return None, "invalid progress"
    elif not partial:
        data["progress"] = 0

    deadline = get_field(row, "deadline")
    if deadline is not None:
        try:
            data["deadline"] = parse_date_input(deadline)
        except ValueError:
            return None, "invalid deadline"
    elif not partial or "deadline" in row:
        return None, "deadline is required"

    if data.get("start_date") and data.get("deadline") and data["deadline"] < data["start_date"]:
        return None, "deadline precedes startDate"

    return data, None
