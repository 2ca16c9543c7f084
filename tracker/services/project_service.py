"""Project CRUD service with strict owner/program ownership checks."""

from __future__ import annotations

import logging

from sqlalchemy import or_

from tracker.core.exceptions import NotFoundError, ValidationError
from tracker.models import db
from tracker.models.program import Program
from tracker.models.project import Project
from tracker.services.field_coercer import coerce_project
from tracker.services.helpers.scoped_queries import get_owned, get_owned_or_none
from tracker.utils.helpers import commit_or_raise

logger = logging.getLogger(__name__)


def _require_owned_program(program_id: int, owner_id: int) -> Program:
    """The program reference must resolve within the same owner's scope."""
    program = get_owned_or_none(Program, program_id, user_id=owner_id)
    if program is None:
        raise NotFoundError(resource="program", resource_id=program_id, user_id=owner_id)
    return program


def list_projects(
    owner_id: int,
    *,
    program_id: int | None = None,
    status: str | None = None,
    priority: str | None = None,
    search: str | None = None,
) -> list[Project]:
    """List the owner's projects, newest first."""
    query = Project.query_for_owner(owner_id)
    if program_id is not None:
        query = query.filter(Project.program_id == program_id)
    if status:
        query = query.filter(Project.status == status)
    if priority:
        query = query.filter(Project.priority == priority)
    if search:
        pattern = f"%{search.strip()}%"
        query = query.filter(or_(Project.name.ilike(pattern), Project.description.ilike(pattern)))
    return query.order_by(Project.created_at.desc(), Project.id.desc()).all()


def get_project(project_id: int, owner_id: int) -> Project:
    return get_owned(Project, project_id, user_id=owner_id)


def create_project(data: dict, owner_id: int) -> Project:
    """Insert a project from already-coerced *data*.

    Raises NotFoundError when program_id does not name a program of the
    same owner.
    """
    program = _require_owned_program(data["program_id"], owner_id)

    project = Project(
        user_id=owner_id,
        program_id=program.id,
        name=data["name"],
        description=data.get("description", ""),
        status=data.get("status", "not-started"),
        priority=data.get("priority", "medium"),
        budget=data["budget"],
        progress=data.get("progress", 0),
        start_date=data["start_date"],
        deadline=data["deadline"],
    )
    db.session.add(project)
    commit_or_raise("Project")
    logger.info("Project created: id=%s program=%s owner=%s", project.id, program.id, owner_id)
    return project


def create_project_from_payload(payload: dict, owner_id: int) -> Project:
    data, err = coerce_project(payload)
    if err:
        raise ValidationError(err)
    return create_project(data, owner_id)


def update_project(project_id: int, payload: dict, owner_id: int) -> Project:
    """Apply a partial update; moving to another program re-checks the reference."""
    project = get_project(project_id, owner_id)
    data, err = coerce_project(payload, partial=True)
    if err:
        raise ValidationError(err)

    if "program_id" in data and data["program_id"] != project.program_id:
        _require_owned_program(data["program_id"], owner_id)

    start = data.get("start_date", project.start_date)
    deadline = data.get("deadline", project.deadline)
    if start and deadline and deadline < start:
        raise ValidationError("deadline precedes startDate")

    for attr, value in data.items():
        setattr(project, attr, value)
    commit_or_raise("Project")
    return project


def delete_project(project_id: int, owner_id: int) -> None:
    project = get_project(project_id, owner_id)
    db.session.delete(project)
    commit_or_raise("Project")
    logger.info("Project deleted: id=%s owner=%s", project_id, owner_id)
