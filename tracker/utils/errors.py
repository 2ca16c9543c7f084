"""JSON error bodies for the API.

Every error response has the same shape::

    {"error": "<human readable>", "code": "ERR_...", "details": {...}}

``details`` is only present when there is something to put in it.

    from tracker.utils.errors import api_error, E

    return api_error(E.NOT_FOUND, "Program not found")
"""

from __future__ import annotations

from flask import jsonify


class E:
    """Machine-readable error codes."""

    VALIDATION_REQUIRED = "ERR_VALIDATION_REQUIRED"
    VALIDATION_INVALID = "ERR_VALIDATION_INVALID"
    UNAUTHORIZED = "ERR_UNAUTHORIZED"
    NOT_FOUND = "ERR_NOT_FOUND"
    CONFLICT_DUPLICATE = "ERR_CONFLICT_DUPLICATE"
    PAYLOAD_TOO_LARGE = "ERR_PAYLOAD_TOO_LARGE"
    UNSUPPORTED_MEDIA = "ERR_UNSUPPORTED_MEDIA"
    DATABASE = "ERR_DATABASE"
    INTERNAL = "ERR_INTERNAL"


_STATUS_BY_CODE: dict[str, int] = {
    E.VALIDATION_REQUIRED: 400,
    E.VALIDATION_INVALID: 400,
    E.UNAUTHORIZED: 401,
    E.NOT_FOUND: 404,
    E.CONFLICT_DUPLICATE: 409,
    E.PAYLOAD_TOO_LARGE: 413,
    E.UNSUPPORTED_MEDIA: 415,
    E.DATABASE: 500,
    E.INTERNAL: 500,
}


def api_error(code: str, message: str, *, status: int | None = None, details: dict | None = None):
    """Build ``(response, status)`` for a Flask view or error handler.

    The HTTP status comes from *status* when given, otherwise from the code
    table, otherwise 400.
    """
    body: dict = {"error": message, "code": code}
    if details:
        body["details"] = details
    return jsonify(body), status or _STATUS_BY_CODE.get(code, 400)
