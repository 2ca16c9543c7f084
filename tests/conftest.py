"""
Shared pytest fixtures for the Program Tracker test suite.

Provides:
    - app: Flask application (session-scoped)
    - _setup_db: Database table creation/teardown (session-scoped)
    - session: Per-test DB cleanup w/ rollback + recreate (autouse)
    - client: Flask test client (function-scoped, anonymous)
    - user / other_user: Pre-created accounts
    - auth_client / other_client: Test clients logged in as user / other_user
"""

import pytest

from tracker import create_app
from tracker.models import db as _db
from tracker.services.user_service import create_user

TEST_PASSWORD = "s3cret-pass"


# ── App & DB fixtures ────────────────────────────────────────────────────


@pytest.fixture(scope="session")
def app():
    """Create the Flask application once per test session."""
    application = create_app("testing")
    return application


@pytest.fixture(scope="session")
def _setup_db(app):
    """Create all tables at session start, drop at end."""
    with app.app_context():
        _db.create_all()
    yield
    with app.app_context():
        _db.drop_all()


@pytest.fixture(autouse=True)
def session(app, _setup_db):
    """Per-test: open app context, rollback after test, recreate tables."""
    with app.app_context():
        yield
        _db.session.rollback()
        _db.drop_all()
        _db.create_all()


@pytest.fixture()
def client(app):
    """Flask test client."""
    return app.test_client()


# ── Account fixtures ─────────────────────────────────────────────────────


@pytest.fixture()
def user():
    return create_user("alice", TEST_PASSWORD, email="alice@example.com")


@pytest.fixture()
def other_user():
    return create_user("bob", TEST_PASSWORD, email="bob@example.com")


def _login(app, username):
    c = app.test_client()
    res = c.post("/api/v1/auth/login", json={"username": username, "password": TEST_PASSWORD})
    assert res.status_code == 200, res.get_json()
    return c


@pytest.fixture()
def auth_client(app, user):
    """Test client with an active session for ``user``."""
    return _login(app, user.username)


@pytest.fixture()
def other_client(app, other_user):
    """Test client with an active session for ``other_user``."""
    return _login(app, other_user.username)


# ── Convenience fixtures ─────────────────────────────────────────────────


@pytest.fixture()
def program(auth_client):
    """Create and return a test Program via the API."""
    res = auth_client.post(
        "/api/v1/programs",
        json={
            "name": "Test Program",
            "category": "innovation",
            "budget": "100000",
            "start_date": "2024-01-01",
            "end_date": "2024-12-31",
        },
    )
    assert res.status_code == 201, res.get_json()
    return res.get_json()
