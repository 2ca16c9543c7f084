"""
Owner-scoped query helpers.

Every get-by-id in the tracker MUST use these helpers instead of
Model.query.get(pk) or db.session.get(Model, pk). Direct .get() calls
bypass owner isolation.

Usage:
    program = get_owned(Program, program_id, user_id=user_id)
    program = get_owned_or_none(Program, program_id, user_id=user_id)

Cross-owner access is indistinguishable from a missing record: both raise
NotFoundError (→ HTTP 404) or return None.
"""

import logging

from sqlalchemy import select

from tracker.core.exceptions import NotFoundError
from tracker.models import db

logger = logging.getLogger(__name__)


def get_owned(model, pk, *, user_id):
    """Fetch a single entity by PK, filtered by its owner.

    Raises:
        ValueError: If no owner scope is provided or the model has no user_id column.
        NotFoundError: If the entity does not exist OR belongs to another user.
    """
    if user_id is None:
        raise ValueError(
            f"{model.__name__} id={pk} requires an owner scope. "
            "Unscoped lookups are forbidden - they bypass owner isolation."
        )
    if not hasattr(model, "user_id"):
        raise ValueError(f"{model.__name__} has no user_id column; refusing unscoped lookup")

    stmt = select(model).where(model.id == pk, model.user_id == user_id)
    result = db.session.execute(stmt).scalar_one_or_none()

    if result is None:
        logger.debug("get_owned: %s id=%s not found for user=%s", model.__name__, pk, user_id)
        raise NotFoundError(resource=model.__name__, resource_id=pk, user_id=user_id)

    return result


def get_owned_or_none(model, pk, *, user_id):
    """Same as get_owned but returns None instead of raising NotFoundError."""
    try:
        return get_owned(model, pk, user_id=user_id)
    except NotFoundError:
        return None
