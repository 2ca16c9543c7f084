"""
Dashboard statistics - per-owner program/project KPIs.
"""

import logging

from sqlalchemy import func

from tracker.models import db
from tracker.models.program import Program
from tracker.models.project import Project

logger = logging.getLogger(__name__)


def get_statistics(owner_id: int) -> dict:
    """High-level KPIs for the owner's dashboard."""
    total_programs = Program.query_for_owner(owner_id).count()
    active_programs = Program.query_for_owner(owner_id).filter_by(status="active").count()
    total_projects = Project.query_for_owner(owner_id).count()
    active_projects = Project.query_for_owner(owner_id).filter_by(status="in-progress").count()
    completed_projects = Project.query_for_owner(owner_id).filter_by(status="completed").count()

    total_budget = (
        db.session.query(func.coalesce(func.sum(Program.budget), 0))
        .filter(Program.user_id == owner_id)
        .scalar()
    )
    avg_progress = (
        db.session.query(func.avg(Project.progress))
        .filter(Project.user_id == owner_id)
        .scalar()
    )

    return {
        "totalPrograms": total_programs,
        "activePrograms": active_programs,
        "totalProjects": total_projects,
        "activeProjects": active_projects,
        "completedProjects": completed_projects,
        "totalBudget": float(total_budget or 0),
        "avgProgress": int(round(float(avg_progress))) if avg_progress is not None else 0,
    }
