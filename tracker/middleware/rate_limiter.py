"""
Rate limiting configuration.

Applies per-blueprint rate limits using Flask-Limiter.
The Limiter instance is created in tracker/__init__.py with no default
limits; this module applies granular limits per route category.

Usage:
    from tracker.middleware.rate_limiter import init_rate_limits
    init_rate_limits(app, limiter)
"""

import logging

logger = logging.getLogger(__name__)


def init_rate_limits(app, limiter):
    """
    Apply rate limits to API blueprints.

    Limits (per remote IP):
        - Login:            10/minute  (credential guessing)
        - Import uploads:   10/minute  (workbook decoding is expensive)
        - CRUD endpoints:   120/minute
        - Health check:     exempt

    Rate limiting is disabled in testing mode.
    """

    if app.config.get("TESTING"):
        app.logger.info("Rate limiter disabled (TESTING=True)")
        return

    for bp_name in ("auth_bp", "import_bp"):
        bp = app.blueprints.get(bp_name)
        if bp:
            limiter.limit("10/minute")(bp)

    for bp_name in ("program", "statistics_bp"):
        bp = app.blueprints.get(bp_name)
        if bp:
            limiter.limit("120/minute")(bp)

    bp = app.blueprints.get("health_bp")
    if bp:
        limiter.exempt(bp)

    app.logger.info("Rate limiter configured: auth/import: 10/min, CRUD: 120/min")
