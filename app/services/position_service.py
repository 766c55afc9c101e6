"""Position service — ordered placement of cards inside board sections.

Keeps one invariant: within a board section no two cards share a
position. Gaps are fine (deleting or moving a card out leaves one), and
a caller may drop a card far past the current last position.

Every placement follows the same pattern:
    1. lock the destination board section (row lock + version bump)
    2. shift every card at or after the target position down by one
    3. put the new / moved / copied card at the target position
and commits as a single transaction. A lost race (StaleDataError from
the version check, IntegrityError from uq_card_section_position) rolls
back and retries from a fresh read, up to POSITION_RETRY_ATTEMPTS times,
then raises ConcurrentModification. Any other database error rolls back
and raises PersistenceFailure.

Card text (title, description) is sanitized with bleach.clean().
"""

import logging
from functools import wraps

import bleach
from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm.exc import StaleDataError

from app.errors import BoardError, ConcurrentModification, PersistenceFailure
from app.extensions import db
from app.models.audit import AuditEvent
from app.services import board_section_service, card_store

logger = logging.getLogger(__name__)

# Unique indexes a concurrent reorder can trip over. Any other integrity
# error is a rejected write, not a lost race.
ORDERING_CONSTRAINTS = (
    "uq_card_section_position",
    "uq_board_section",
    "cards.board_section_id, cards.position",
    "board_sections.board_id, board_sections.section_id",
)


def _sanitize(text):
    """Strip all HTML tags from user input."""
    if text is None:
        return text
    if not isinstance(text, str):
        raise ValueError("Card text must be a string.")
    return bleach.clean(text, tags=[], strip=True).strip()


def _check_position(position):
    if isinstance(position, bool) or not isinstance(position, int) or position < 1:
        raise ValueError("Position must be a positive integer.")


def _is_position_conflict(error):
    """True if an IntegrityError came from one of the ordering unique indexes.

    PostgreSQL and MySQL name the constraint; SQLite names its columns.
    """
    message = str(error.orig)
    return any(marker in message for marker in ORDERING_CONSTRAINTS)


def transactional(operation):
    """Run `operation` and commit, retrying lost races with a fresh snapshot."""

    @wraps(operation)
    def wrapper(*args, **kwargs):
        attempts = current_app.config.get("POSITION_RETRY_ATTEMPTS", 3)
        for attempt in range(1, attempts + 1):
            try:
                result = operation(*args, **kwargs)
                db.session.commit()
                return result
            except (BoardError, ValueError):
                db.session.rollback()
                raise
            except (StaleDataError, IntegrityError) as e:
                db.session.rollback()
                if isinstance(e, IntegrityError) and not _is_position_conflict(e):
                    logger.error(f"{operation.__name__}: write rejected: {e.orig}")
                    raise PersistenceFailure() from e
                logger.warning(
                    f"{operation.__name__}: conflicting write "
                    f"(attempt {attempt}/{attempts}): {e.__class__.__name__}"
                )
            except SQLAlchemyError as e:
                db.session.rollback()
                logger.error(f"{operation.__name__}: database error: {e}")
                raise PersistenceFailure() from e
        raise ConcurrentModification()

    return wrapper


def _audit(action, container, actor_user_id, **metadata):
    db.session.add(AuditEvent(
        workspace_id=container.board.workspace_id,
        actor_user_id=actor_user_id,
        action=action,
        metadata_=metadata,
    ))


def _place(container_id, position):
    """Lock the board section and open a slot at `position`."""
    container = board_section_service.lock(container_id)
    shifted = card_store.shift_from(container.id, position)
    if shifted:
        logger.debug(
            f"Shifted {shifted} card(s) in board section {container.id} "
            f"from position {position}"
        )
    return container


@transactional
def insert_at(container_id, position, title, description, owner_id):
    """Create a card at `position` in a board section.

    Cards already at `position` or later move down by one first.

    Args:
        container_id: BoardSection UUID string.
        position: Positive int chosen by the caller.
        title: Card title (will be sanitized, required).
        description: Card description (will be sanitized).
        owner_id: UUID of the acting user, stored as created_by.

    Returns:
        The created Card, at exactly `position`.

    Raises:
        ValueError: If position is not a positive int or title is empty.
        ContainerNotFound: If the board section does not exist.
    """
    _check_position(position)
    title = _sanitize(title)
    description = _sanitize(description) or ""
    if not title:
        raise ValueError("Title is required.")

    container = _place(container_id, position)
    card = card_store.insert(container.id, position, title, description, owner_id)

    _audit(
        "card.created", container, owner_id,
        card_id=card.id, board_section_id=container.id, position=position,
    )
    db.session.flush()
    logger.info(f"Card {card.id} created in board section {container.id} at {position}")
    return card


@transactional
def move(card_id, board_id, section_id, position, owner_id):
    """Move a card to `position` in the (board_id, section_id) board section.

    Only the destination is reshuffled; the card's old slot is left empty.
    Moving within the same board section works the same way.

    Raises:
        ValueError: If position is not a positive int.
        ItemNotFound: If the card does not exist.
        ContainerNotFound: If the section is not on that board.
    """
    _check_position(position)
    card = card_store.find(card_id)
    target = board_section_service.resolve(board_id, section_id)
    source_id, source_position = card.board_section_id, card.position

    container = _place(target.id, position)
    card.board_section_id = container.id
    card.position = position
    db.session.flush()

    _audit(
        "card.moved", container, owner_id,
        card_id=card.id,
        from_board_section_id=source_id,
        from_position=source_position,
        to_board_section_id=container.id,
        to_position=position,
    )
    db.session.flush()
    logger.info(
        f"Card {card.id} moved from {source_id}#{source_position} "
        f"to {container.id}#{position}"
    )
    return card


@transactional
def copy(card_id, board_id, section_id, position, owner_id):
    """Copy a card's title and description into another board section.

    The copy is a brand new card owned by `owner_id`; the source card is
    not touched.

    Raises:
        ValueError: If position is not a positive int.
        ItemNotFound: If the source card does not exist.
        ContainerNotFound: If the section is not on that board.
    """
    _check_position(position)
    source = card_store.find(card_id)
    target = board_section_service.resolve(board_id, section_id)

    container = _place(target.id, position)
    card = card_store.insert(
        container.id, position, source.title, source.description, owner_id
    )

    _audit(
        "card.copied", container, owner_id,
        card_id=card.id, source_card_id=source.id,
        board_section_id=container.id, position=position,
    )
    db.session.flush()
    logger.info(f"Card {source.id} copied to {card.id} in {container.id}#{position}")
    return card


def list_ordered(container_id):
    """Cards in a board section, ascending by position (id breaks ties)."""
    return card_store.find_by_container(container_id)


def list_positions(container_id):
    """Position values in a board section, ascending. Empty list if no cards."""
    return card_store.positions(container_id)
