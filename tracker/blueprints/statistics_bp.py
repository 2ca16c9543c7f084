"""
Statistics Blueprint.

Endpoints:
    GET /api/v1/statistics  - dashboard KPIs for the current user
"""

from flask import Blueprint, g, jsonify

from tracker.auth import login_required
from tracker.services.statistics_service import get_statistics

statistics_bp = Blueprint("statistics_bp", __name__, url_prefix="/api/v1")


@statistics_bp.route("/statistics", methods=["GET"])
@login_required
def statistics():
    return jsonify(get_statistics(g.current_user_id)), 200
