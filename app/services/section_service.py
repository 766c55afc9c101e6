"""Section service — the default section template and board provisioning.

The template is the list of Section rows with type == Section.TEMPLATE,
in `position` order. provision() copies it onto a new board as
BoardSection rows numbered 1..n. update_section() / delete_section()
maintain the definitions themselves.

Functions flush but do NOT commit — the caller commits.
"""

import logging

from app.extensions import db
from app.models.board import BoardSection
from app.models.section import Section

logger = logging.getLogger(__name__)


def default_sections():
    """Template sections in display order."""
    return (
        Section.query
        .filter_by(type=Section.TEMPLATE)
        .order_by(Section.position.asc(), Section.created_at.asc())
        .all()
    )


def provision(board_id, created_by=None):
    """Place every template section on a freshly created board.

    BoardSection.position is the 1-based rank in the template, regardless
    of the gaps in Section.position. Call exactly once per board: a second
    call collides with uq_board_section and fails at flush.

    Returns:
        The created BoardSection rows, in order.
    """
    containers = []
    for rank, section in enumerate(default_sections(), start=1):
        container = BoardSection(
            board_id=board_id,
            section_id=section.id,
            position=rank,
            created_by=created_by,
        )
        db.session.add(container)
        containers.append(container)
    db.session.flush()

    logger.info(f"Provisioned {len(containers)} section(s) on board {board_id}")
    return containers


def _clean_title(title):
    if title is not None and not isinstance(title, str):
        raise ValueError("Title must be a string.")
    title = (title or "").strip()
    if not title:
        raise ValueError("Title is required.")
    return title


def _check_type(section_type):
    if isinstance(section_type, bool) or not isinstance(section_type, int) \
            or section_type not in Section.TYPES:
        raise ValueError(
            f"Invalid section type '{section_type}'. "
            f"Must be one of: {', '.join(str(t) for t in Section.TYPES)}"
        )


def create_section(title, created_by=None, section_type=Section.TEMPLATE):
    """Append a section definition after the current last one.

    Raises:
        ValueError: If title is empty or section_type is unknown.
    """
    title = _clean_title(title)
    _check_type(section_type)

    max_pos = db.session.query(db.func.max(Section.position)).scalar() or 0
    section = Section(
        title=title,
        position=max_pos + 1,
        type=section_type,
        created_by=created_by,
    )
    db.session.add(section)
    db.session.flush()
    return section


def seed_defaults(created_by=None):
    """Create the default template sections that don't exist yet.

    Returns:
        The number of sections created.
    """
    existing = {s.title for s in default_sections()}
    created = 0
    for title in Section.DEFAULT_TITLES:
        if title in existing:
            continue
        create_section(title, created_by=created_by)
        created += 1
    return created


def update_section(section_id, title=None, position=None, section_type=None):
    """Rename, reorder or retype a section definition.

    Only the arguments that are not None change. Boards that already carry
    the section keep their own board section positions.

    Raises:
        ValueError: If the section is not found or a value is invalid.
    """
    section = db.session.get(Section, section_id)
    if section is None:
        raise ValueError(f"Section {section_id} not found.")

    if title is not None:
        section.title = _clean_title(title)
    if position is not None:
        if isinstance(position, bool) or not isinstance(position, int) or position < 1:
            raise ValueError("Position must be a positive integer.")
        section.position = position
    if section_type is not None:
        _check_type(section_type)
        section.type = section_type

    db.session.flush()
    return section


def delete_section(section_id):
    """Delete a section definition that no board uses.

    Raises:
        ValueError: If the section is not found or is still placed on a board.
    """
    section = db.session.get(Section, section_id)
    if section is None:
        raise ValueError(f"Section {section_id} not found.")

    in_use = BoardSection.query.filter_by(section_id=section_id).count()
    if in_use:
        raise ValueError(
            f"Section is on {in_use} board(s). Remove it from those boards first."
        )

    db.session.delete(section)
    db.session.flush()
    logger.info(f"Deleted section {section.title}")
