"""Card store — the narrow persistence port the ordering service writes through.

Nothing here knows about ordering rules; position_service decides what
to shift and where to place. Functions flush but do NOT commit.
"""

from sqlalchemy import or_, update

from app.errors import ItemNotFound
from app.extensions import db
from app.models.card import Card


def find(card_id):
    """Return the Card with this id, or raise ItemNotFound."""
    card = db.session.get(Card, card_id)
    if card is None:
        raise ItemNotFound(card_id)
    return card


def find_by_container(container_id):
    """All cards in a board section, ascending by position then id."""
    return (
        Card.query
        .filter_by(board_section_id=container_id)
        .order_by(Card.position.asc(), Card.id.asc())
        .all()
    )


def positions(container_id):
    """Position values in a board section, ascending."""
    rows = (
        db.session.query(Card.position)
        .filter(Card.board_section_id == container_id)
        .order_by(Card.position.asc(), Card.id.asc())
        .all()
    )
    return [row.position for row in rows]


def shift_from(container_id, position):
    """Add one to the position of every card at or after `position`.

    Runs as two bulk UPDATEs: first park the affected rows at their new
    value negated, then flip the sign back. Every intermediate state is
    free of duplicates, so uq_card_section_position holds on backends
    that check unique indexes row by row (SQLite, MySQL).

    Returns the number of cards shifted.
    """
    parked = db.session.execute(
        update(Card)
        .where(Card.board_section_id == container_id, Card.position >= position)
        .values(position=-(Card.position + 1))
        .execution_options(synchronize_session="fetch")
    )
    db.session.execute(
        update(Card)
        .where(Card.board_section_id == container_id, Card.position < 0)
        .values(position=-Card.position)
        .execution_options(synchronize_session="fetch")
    )
    return parked.rowcount


def insert(container_id, position, title, description, created_by):
    card = Card(
        board_section_id=container_id,
        position=position,
        title=title,
        description=description or "",
        created_by=created_by,
    )
    db.session.add(card)
    db.session.flush()
    return card


def delete(card):
    db.session.delete(card)
    db.session.flush()


def search(text, container_ids=None):
    """Cards whose title or description contains `text` (case-insensitive).

    Args:
        text: Substring to look for.
        container_ids: Optional iterable restricting the search to these
            board sections (used to scope non-admin users to their boards).
    """
    pattern = f"%{text}%"
    query = Card.query.filter(
        or_(Card.title.ilike(pattern), Card.description.ilike(pattern))
    )
    if container_ids is not None:
        query = query.filter(Card.board_section_id.in_(list(container_ids)))
    return query.order_by(Card.created_at.desc(), Card.id.asc()).all()
