"""
Program Tracker
Program Blueprint - CRUD API for programs and projects.

Endpoints:
    Programs:
        GET    /api/v1/programs                  - List (filters: status, category, search)
        POST   /api/v1/programs                  - Create
        GET    /api/v1/programs/<id>              - Detail (+ projects)
        PUT    /api/v1/programs/<id>              - Update
        DELETE /api/v1/programs/<id>              - Delete (cascades to projects)

    Projects:
        GET    /api/v1/projects                  - List (filters: program_id, status, priority, search)
        POST   /api/v1/projects                  - Create
        GET    /api/v1/projects/<id>              - Detail
        PUT    /api/v1/projects/<id>              - Update
        DELETE /api/v1/projects/<id>              - Delete

Every lookup is scoped by the session user; another user's record answers
404 exactly like a missing one.
"""

import logging

from flask import Blueprint, g, jsonify, request

from tracker.auth import login_required
from tracker.core.exceptions import ValidationError
from tracker.services import program_service, project_service
from tracker.utils.errors import E, api_error

logger = logging.getLogger(__name__)

program_bp = Blueprint("program", __name__, url_prefix="/api/v1")


def _json_body() -> dict:
    """Request JSON as a dict; an absent or unparseable body counts as empty."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


# ═════════════════════════════════════════════════════════════════════════════
# PROGRAMS
# ═════════════════════════════════════════════════════════════════════════════

@program_bp.route("/programs", methods=["GET"])
@login_required
def list_programs():
    """Return the user's programs, optionally filtered."""
    programs = program_service.list_programs(
        g.current_user_id,
        status=request.args.get("status"),
        category=request.args.get("category"),
        search=request.args.get("search"),
    )
    return jsonify([p.to_dict() for p in programs]), 200


@program_bp.route("/programs", methods=["POST"])
@login_required
def create_program():
    data = _json_body()
    program = program_service.create_program_from_payload(data, g.current_user_id)
    return jsonify(program.to_dict()), 201


@program_bp.route("/programs/<int:program_id>", methods=["GET"])
@login_required
def get_program(program_id):
    program = program_service.get_program(program_id, g.current_user_id)
    return jsonify(program.to_dict(include_children=True)), 200


@program_bp.route("/programs/<int:program_id>", methods=["PUT"])
@login_required
def update_program(program_id):
    data = _json_body()
    program = program_service.update_program(program_id, data, g.current_user_id)
    return jsonify(program.to_dict()), 200


@program_bp.route("/programs/<int:program_id>", methods=["DELETE"])
@login_required
def delete_program(program_id):
    """Delete a program and all of its projects."""
    program_service.delete_program(program_id, g.current_user_id)
    return "", 204


# ═════════════════════════════════════════════════════════════════════════════
# PROJECTS
# ═════════════════════════════════════════════════════════════════════════════

@program_bp.route("/projects", methods=["GET"])
@login_required
def list_projects():
    raw_program_id = request.args.get("program_id") or request.args.get("programId")
    program_id = None
    if raw_program_id:
        try:
            program_id = int(raw_program_id)
        except ValueError:
            return api_error(E.VALIDATION_INVALID, "program_id must be an integer")

    projects = project_service.list_projects(
        g.current_user_id,
        program_id=program_id,
        status=request.args.get("status"),
        priority=request.args.get("priority"),
        search=request.args.get("search"),
    )
    return jsonify([p.to_dict() for p in projects]), 200


@program_bp.route("/projects", methods=["POST"])
@login_required
def create_project():
    data = _json_body()
    project = project_service.create_project_from_payload(data, g.current_user_id)
    return jsonify(project.to_dict()), 201


@program_bp.route("/projects/<int:project_id>", methods=["GET"])
@login_required
def get_project(project_id):
    project = project_service.get_project(project_id, g.current_user_id)
    return jsonify(project.to_dict()), 200


@program_bp.route("/projects/<int:project_id>", methods=["PUT"])
@login_required
def update_project(project_id):
    data = _json_body()
    project = project_service.update_project(project_id, data, g.current_user_id)
    return jsonify(project.to_dict()), 200


@program_bp.route("/projects/<int:project_id>", methods=["DELETE"])
@login_required
def delete_project(project_id):
    project_service.delete_project(project_id, g.current_user_id)
    return "", 204
