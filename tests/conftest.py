"""Shared test fixtures for the taskboard API test suite.

Provides:
- app: Flask app configured for testing (in-memory SQLite, rate limits off)
- client: Flask test client
- db_session: clean database per test (tables created/dropped)
- seed_data: users with tokens, the default section template, and a
  workspace with its provisioned "General Tasks" board
"""

import pytest
from flask import g

from app import create_app
from app.extensions import db as _db
from app.models.board import Board, BoardSection
from app.models.user import User
from app.models.workspace import WorkspaceMember
from app.services import board_service, section_service


@pytest.fixture(scope="session")
def app():
    """Create the Flask application configured for testing."""
    app = create_app("testing")

    # Requests reuse the test's app context (and its `g`); load the
    # bearer-token user afresh every time.
    @app.before_request
    def _forget_previous_user():
        g.pop("_login_user", None)

    yield app


@pytest.fixture(autouse=True)
def db_session(app):
    """Create all tables before each test, drop after.

    The app context stays pushed for the whole test, so the test client
    and the test body share one session.
    """
    with app.app_context():
        _db.create_all()
        yield _db.session
        _db.session.rollback()
        _db.drop_all()


@pytest.fixture
def client(app):
    """Flask test client."""
    return app.test_client()


@pytest.fixture
def seed_data(app, db_session):
    """Seed the database with users, the section template, and one workspace.

    Returns a dict of plain IDs and tokens for easy access in tests.
    """
    # --- Users ---
    admin = User(
        email="admin@taskboard.local",
        full_name="Admin User",
        is_admin=True,
        api_token="admin-token",
    )
    member = User(
        email="member@taskboard.local",
        full_name="Member User",
        is_admin=False,
        api_token="member-token",
    )
    outsider = User(
        email="outsider@taskboard.local",
        full_name="Outsider User",
        is_admin=False,
        api_token="outsider-token",
    )
    db_session.add_all([admin, member, outsider])
    db_session.flush()

    # --- Section template: To Do, Doing, QA Testing, Done, ... ---
    section_service.seed_defaults(created_by=admin.id)
    sections = section_service.default_sections()

    # --- Workspace + "General Tasks" board with provisioned sections ---
    workspace = board_service.create_workspace(
        "Acme Corp", created_by=admin.id, bg_color="#112233"
    )
    db_session.add(WorkspaceMember(
        user_id=member.id, workspace_id=workspace.id, role="member",
    ))
    db_session.commit()

    board = Board.query.filter_by(workspace_id=workspace.id).first()
    containers = (
        BoardSection.query
        .filter_by(board_id=board.id)
        .order_by(BoardSection.position)
        .all()
    )

    return {
        "admin_id": admin.id,
        "admin_token": admin.api_token,
        "member_id": member.id,
        "member_token": member.api_token,
        "outsider_id": outsider.id,
        "outsider_token": outsider.api_token,
        "workspace_id": workspace.id,
        "board_id": board.id,
        "section_ids": [s.id for s in sections],
        # board section ids, same order as section_ids
        "container_ids": [c.id for c in containers],
    }
