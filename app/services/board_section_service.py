"""Board section lookups and placement — the registry of card containers.

A card container is the BoardSection row pairing one board with one
section definition. Callers address it either directly by id or by the
(board_id, section_id) pair; both raise ContainerNotFound when missing.

Boards get their template sections from section_service.provision();
place() / reposition() / remove() arrange sections on a board afterwards.
"""

from datetime import datetime, timezone

from app.errors import ContainerNotFound
from app.extensions import db
from app.models.audit import AuditEvent
from app.models.board import Board, BoardSection
from app.models.section import Section


def resolve(board_id, section_id):
    """Return the BoardSection hosting cards for (board_id, section_id).

    Raises:
        ContainerNotFound: If the section was never provisioned on the board.
    """
    container = BoardSection.query.filter_by(
        board_id=board_id, section_id=section_id
    ).first()
    if container is None:
        raise ContainerNotFound(board_id=board_id, section_id=section_id)
    return container


def get(container_id):
    """Return the BoardSection with this id, or raise ContainerNotFound."""
    container = db.session.get(BoardSection, container_id)
    if container is None:
        raise ContainerNotFound(container_id=container_id)
    return container


def lock(container_id):
    """Claim a BoardSection for a reorder inside the current transaction.

    Takes a row lock where the backend supports SELECT ... FOR UPDATE and
    bumps the row's version. A concurrent transaction that already bumped
    it makes our flush fail with StaleDataError.
    """
    container = (
        BoardSection.query
        .filter_by(id=container_id)
        .with_for_update()
        .populate_existing()
        .first()
    )
    if container is None:
        raise ContainerNotFound(container_id=container_id)
    container.updated_at = datetime.now(timezone.utc)
    db.session.flush()
    return container


def _check_rank(position):
    if isinstance(position, bool) or not isinstance(position, int) or position < 1:
        raise ValueError("Position must be a positive integer.")


def place(board_id, section_id, position=None, created_by=None):
    """Put a section definition on an existing board.

    The new board section goes after the board's last one unless
    `position` is given. Flushes but does NOT commit.

    Returns:
        The created BoardSection.

    Raises:
        ValueError: If the board or section does not exist, the section is
            already on the board, or position is not a positive int.
    """
    board = db.session.get(Board, board_id)
    if board is None:
        raise ValueError(f"Board {board_id} not found.")
    if db.session.get(Section, section_id) is None:
        raise ValueError(f"Section {section_id} not found.")
    if BoardSection.query.filter_by(board_id=board_id, section_id=section_id).first():
        raise ValueError("Section is already on this board.")

    if position is None:
        last = (
            db.session.query(db.func.max(BoardSection.position))
            .filter(BoardSection.board_id == board_id)
            .scalar()
        )
        position = (last or 0) + 1
    else:
        _check_rank(position)

    container = BoardSection(
        board_id=board_id,
        section_id=section_id,
        position=position,
        created_by=created_by,
    )
    db.session.add(container)
    db.session.add(AuditEvent(
        workspace_id=board.workspace_id,
        actor_user_id=created_by,
        action="board_section.placed",
        metadata_={"board_id": board_id, "section_id": section_id, "position": position},
    ))
    db.session.flush()
    return container


def reposition(container_id, position, actor_user_id=None):
    """Change where a board section sits on its board. Cards are untouched.

    Raises:
        ContainerNotFound: If the board section does not exist.
        ValueError: If position is not a positive int.
    """
    _check_rank(position)
    container = get(container_id)
    old_position = container.position
    container.position = position
    db.session.add(AuditEvent(
        workspace_id=container.board.workspace_id,
        actor_user_id=actor_user_id,
        action="board_section.moved",
        metadata_={
            "board_section_id": container.id,
            "from_position": old_position,
            "to_position": position,
        },
    ))
    db.session.flush()
    return container


def remove(container_id, actor_user_id=None):
    """Take a section off its board, deleting the cards it holds.

    Raises:
        ContainerNotFound: If the board section does not exist.
    """
    container = get(container_id)
    db.session.add(AuditEvent(
        workspace_id=container.board.workspace_id,
        actor_user_id=actor_user_id,
        action="board_section.removed",
        metadata_={
            "board_section_id": container.id,
            "board_id": container.board_id,
            "section_id": container.section_id,
            "cards": container.cards.count(),
        },
    ))
    db.session.delete(container)
    db.session.flush()
