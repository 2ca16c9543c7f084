"""
Auth Blueprint - session authentication endpoints.

  POST /api/v1/auth/login       - Username + password → session cookie
  POST /api/v1/auth/logout      - Clear session
  GET  /api/v1/auth/user        - Current user profile
"""

from flask import Blueprint, jsonify, request

from tracker.auth import current_user, login_user, logout_user
from tracker.services.user_service import UserServiceError, authenticate_user
from tracker.utils.errors import E, api_error

auth_bp = Blueprint("auth_bp", __name__, url_prefix="/api/v1/auth")


@auth_bp.route("/login", methods=["POST"])
def login():
    """
    Authenticate with username + password.

    Body: { "username": "...", "password": "..." }
    """
    data = request.get_json(silent=True) or {}
    username = str(data.get("username", "")).strip()
    password = str(data.get("password", ""))

    if not username or not password:
        return api_error(E.VALIDATION_REQUIRED, "Username and password are required")

    try:
        user = authenticate_user(username, password)
    except UserServiceError as e:
        return api_error(E.UNAUTHORIZED, e.message, status=e.status_code)

    login_user(user)
    return jsonify(user.to_dict()), 200


@auth_bp.route("/logout", methods=["POST"])
def logout():
    logout_user()
    return jsonify({"message": "Logged out"}), 200


@auth_bp.route("/user", methods=["GET"])
def me():
    user = current_user()
    if user is None:
        return api_error(E.UNAUTHORIZED, "Unauthorized")
    return jsonify(user.to_dict()), 200
