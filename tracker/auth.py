"""
Program Tracker
Session authentication.

Provides:
    - login_user / logout_user helpers around the signed Flask session
    - login_required decorator that loads the current user into ``g``

Security model:
    - All /api/v1/* resource endpoints require a logged-in session
    - Every query downstream is scoped by ``g.current_user_id``
"""

import functools
import logging

from flask import g, session

from tracker.services.user_service import get_user_by_id
from tracker.utils.errors import E, api_error

logger = logging.getLogger(__name__)

_SESSION_KEY = "user_id"


def login_user(user):
    """Bind *user* to the current session."""
    session.clear()
    session[_SESSION_KEY] = user.id
    session.permanent = True
    logger.info("User logged in: id=%s", user.id)


def logout_user():
    user_id = session.pop(_SESSION_KEY, None)
    session.clear()
    if user_id is not None:
        logger.info("User logged out: id=%s", user_id)
    return user_id


def current_user():
    """Return the logged-in User or None, and record it on ``g``."""
    user_id = session.get(_SESSION_KEY)
    user = get_user_by_id(user_id) if user_id is not None else None
    g.current_user = user
    g.current_user_id = user.id if user else None
    return user


def login_required(f):
    """
    Decorator: require a logged-in session for the endpoint.

    Sets g.current_user and g.current_user_id.
    """
    @functools.wraps(f)
    def decorated(*args, **kwargs):
        if current_user() is None:
            return api_error(E.UNAUTHORIZED, "Unauthorized")
        return f(*args, **kwargs)

    return decorated
