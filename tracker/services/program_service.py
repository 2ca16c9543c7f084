"""Program service layer - owner-scoped program CRUD.

Transaction policy: public write functions call commit on success and
roll back on failure, so every create is an independent unit of work.
"""
import logging

from sqlalchemy import or_

from tracker.core.exceptions import ValidationError
from tracker.models import db
from tracker.models.program import Program
from tracker.services.field_coercer import coerce_program
from tracker.services.helpers.scoped_queries import get_owned
from tracker.utils.helpers import commit_or_raise

logger = logging.getLogger(__name__)


def list_programs(owner_id: int, *, status=None, category=None, search=None) -> list[Program]:
    """Return the owner's programs, newest first, with optional filters."""
    query = Program.query_for_owner(owner_id)
    if status:
        query = query.filter(Program.status == status)
    if category:
        query = query.filter(Program.category == category)
    if search:
        pattern = f"%{search.strip()}%"
        query = query.filter(or_(Program.name.ilike(pattern), Program.description.ilike(pattern)))
    return query.order_by(Program.created_at.desc(), Program.id.desc()).all()


def get_program(program_id: int, owner_id: int) -> Program:
    """Return a program owned by *owner_id* or raise NotFoundError."""
    return get_owned(Program, program_id, user_id=owner_id)


def create_program(data: dict, owner_id: int) -> Program:
    """Insert a program from already-coerced *data*."""
    program = Program(
        user_id=owner_id,
        name=data["name"],
        description=data.get("description", ""),
        category=data["category"],
        status=data.get("status", "active"),
        budget=data["budget"],
        start_date=data["start_date"],
        end_date=data.get("end_date"),
    )
    db.session.add(program)
    commit_or_raise("Program")
    logger.info("Program created: id=%s owner=%s", program.id, owner_id)
    return program


def create_program_from_payload(payload: dict, owner_id: int) -> Program:
    """Validate a raw API payload and insert it."""
    data, err = coerce_program(payload)
    if err:
        raise ValidationError(err)
    return create_program(data, owner_id)


def update_program(program_id: int, payload: dict, owner_id: int) -> Program:
    """Apply a partial update to an owned program."""
    program = get_program(program_id, owner_id)
    data, err = coerce_program(payload, partial=True)
    if err:
        raise ValidationError(err)

    start = data.get("start_date", program.start_date)
    end = data.get("end_date", program.end_date)
    if start and end and end < start:
        raise ValidationError("endDate precedes startDate")

    for attr, value in data.items():
        setattr(program, attr, value)
    commit_or_raise("Program")
    return program


def delete_program(program_id: int, owner_id: int) -> None:
    """Delete an owned program and, by cascade, all of its projects."""
    program = get_program(program_id, owner_id)
    name = program.name
    db.session.delete(program)
    commit_or_raise("Program")
    logger.info("Program deleted: id=%s name=%s owner=%s", program_id, name, owner_id)
