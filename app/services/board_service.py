"""Board service — workspace and board lifecycle, access checks, card removal.

- create_workspace: workspace + owner membership + default board
- create_board: board + its default sections (section_service.provision)
- delete_board / delete_card: removals (cascade; no renumbering)
- user_can_access_workspace: admin or member

Functions flush but do NOT commit — the caller commits.
"""

import logging
import re

from flask import current_app

from app.extensions import db
from app.models.audit import AuditEvent
from app.models.board import Board, BoardSection
from app.models.workspace import Workspace, WorkspaceMember
from app.services import card_store, section_service

logger = logging.getLogger(__name__)

HEX_COLOR_RE = re.compile(r"^#[0-9A-Fa-f]{6}$")


def slugify(value):
    """Convert a string to a URL-safe slug: lowercase, only a-z 0-9 and hyphens."""
    value = (value or "").lower()
    value = re.sub(r"[^a-z0-9\s-]", "", value)   # strip non-alphanumeric
    value = re.sub(r"[\s-]+", "-", value)          # collapse whitespace/hyphens
    return value.strip("-")


def _unique_slug(name):
    base = slugify(name) or "workspace"
    slug = base
    n = 2
    while Workspace.query.filter_by(slug=slug).first() is not None:
        slug = f"{base}-{n}"
        n += 1
    return slug


def _check_color(bg_color):
    if bg_color is None:
        return current_app.config.get("DEFAULT_BG_COLOR")
    if not isinstance(bg_color, str) or not HEX_COLOR_RE.match(bg_color):
        raise ValueError("bg_color must be a hex color like #FFEEDD.")
    return bg_color


def create_board(workspace_id, name, created_by, bg_color=None, admin_id=None):
    """Create a board and seed it with the default sections.

    Returns:
        The created Board.

    Raises:
        ValueError: If the name is empty, the color is malformed, or the
            workspace does not exist.
    """
    name = (name or "").strip()
    if not name:
        raise ValueError("Name is required.")
    bg_color = _check_color(bg_color)

    workspace = db.session.get(Workspace, workspace_id)
    if workspace is None:
        raise ValueError(f"Workspace {workspace_id} not found.")

    board = Board(
        name=name,
        bg_color=bg_color,
        workspace_id=workspace.id,
        admin_id=admin_id,
        created_by=created_by,
    )
    db.session.add(board)
    db.session.flush()

    containers = section_service.provision(board.id, created_by=created_by)

    db.session.add(AuditEvent(
        workspace_id=workspace.id,
        actor_user_id=created_by,
        action="board.created",
        metadata_={
            "board_id": board.id,
            "name": name,
            "sections": len(containers),
        },
    ))
    db.session.flush()
    return board


def create_workspace(name, created_by, bg_color=None):
    """Create a workspace, make the creator its owner, and add the default board.

    Returns:
        The created Workspace.

    Raises:
        ValueError: If the name is empty or the color is malformed.
    """
    name = (name or "").strip()
    if not name:
        raise ValueError("Name is required.")
    bg_color = _check_color(bg_color)

    workspace = Workspace(
        name=name,
        slug=_unique_slug(name),
        bg_color=bg_color,
        admin_id=created_by,
        created_by=created_by,
    )
    db.session.add(workspace)
    db.session.flush()

    db.session.add(WorkspaceMember(
        user_id=created_by,
        workspace_id=workspace.id,
        role="owner",
    ))

    db.session.add(AuditEvent(
        workspace_id=workspace.id,
        actor_user_id=created_by,
        action="workspace.created",
        metadata_={"name": name, "slug": workspace.slug},
    ))

    create_board(
        workspace.id,
        current_app.config.get("DEFAULT_BOARD_NAME", "General Tasks"),
        created_by,
        bg_color=bg_color,
    )
    logger.info(f"Workspace {workspace.slug} created by {created_by}")
    return workspace


def delete_board(board_id, actor_user_id):
    """Delete a board with all its board sections and cards.

    Returns:
        True if a board was deleted, False if it did not exist.
    """
    board = db.session.get(Board, board_id)
    if board is None:
        return False
    workspace_id = board.workspace_id
    db.session.delete(board)
    db.session.add(AuditEvent(
        workspace_id=workspace_id,
        actor_user_id=actor_user_id,
        action="board.deleted",
        metadata_={"board_id": board_id, "name": board.name},
    ))
    db.session.flush()
    return True


def delete_card(card_id, actor_user_id):
    """Delete a card. Siblings keep their positions (the gap stays).

    Raises:
        ItemNotFound: If the card does not exist.
    """
    card = card_store.find(card_id)
    container = card.board_section
    db.session.add(AuditEvent(
        workspace_id=container.board.workspace_id,
        actor_user_id=actor_user_id,
        action="card.deleted",
        metadata_={
            "card_id": card.id,
            "board_section_id": container.id,
            "position": card.position,
        },
    ))
    card_store.delete(card)


def user_can_access_workspace(user, workspace_id):
    """Admins see every workspace; everyone else needs a membership."""
    if user.is_admin:
        return True
    return WorkspaceMember.query.filter_by(
        user_id=user.id, workspace_id=workspace_id
    ).first() is not None


def workspaces_for(user):
    """Workspaces visible to `user`, oldest first."""
    query = Workspace.query
    if not user.is_admin:
        query = query.join(WorkspaceMember).filter(
            WorkspaceMember.user_id == user.id
        )
    return query.order_by(Workspace.created_at.asc(), Workspace.name.asc()).all()


def visible_container_ids(user):
    """BoardSection ids on boards the user can see, or None for admins."""
    if user.is_admin:
        return None
    rows = (
        db.session.query(BoardSection.id)
        .join(Board, Board.id == BoardSection.board_id)
        .join(WorkspaceMember, WorkspaceMember.workspace_id == Board.workspace_id)
        .filter(WorkspaceMember.user_id == user.id)
        .all()
    )
    return [row.id for row in rows]
