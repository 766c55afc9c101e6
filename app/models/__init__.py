# Models package — import all models here so Alembic can discover them.

from app.models.user import User  # noqa: F401
from app.models.workspace import Workspace, WorkspaceMember  # noqa: F401
from app.models.section import Section  # noqa: F401
from app.models.board import Board, BoardSection  # noqa: F401
from app.models.card import Card  # noqa: F401
from app.models.audit import AuditEvent  # noqa: F401
