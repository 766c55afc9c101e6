"""JSON-safe dicts for the API blueprints."""


def _iso(value):
    return value.isoformat() if value else None


def card_dict(card):
    """Serialize a Card to a JSON-safe dict."""
    container = card.board_section
    return {
        "id": card.id,
        "title": card.title,
        "description": card.description or "",
        "board_section_id": card.board_section_id,
        "board_id": container.board_id if container else None,
        "section_id": container.section_id if container else None,
        "position_id": card.position,
        "created_by": card.created_by,
        "created_at": _iso(card.created_at),
        "updated_at": _iso(card.updated_at),
    }


def section_dict(section):
    return {
        "id": section.id,
        "title": section.title,
        "position": section.position,
        "type": section.type,
    }


def board_section_dict(container, cards=None):
    data = {
        "id": container.id,
        "board_id": container.board_id,
        "section_id": container.section_id,
        "title": container.section.title if container.section else None,
        "position": container.position,
    }
    if cards is not None:
        data["cards"] = [card_dict(c) for c in cards]
    return data


def board_dict(board, with_sections=False):
    data = {
        "id": board.id,
        "name": board.name,
        "bg_color": board.bg_color,
        "workspace_id": board.workspace_id,
        "admin_id": board.admin_id,
        "created_by": board.created_by,
        "created_at": _iso(board.created_at),
    }
    if with_sections:
        data["sections"] = [board_section_dict(c) for c in board.sections]
    return data


def workspace_dict(workspace):
    return {
        "id": workspace.id,
        "name": workspace.name,
        "slug": workspace.slug,
        "bg_color": workspace.bg_color,
        "admin_id": workspace.admin_id,
        "created_by": workspace.created_by,
        "created_at": _iso(workspace.created_at),
        "boards": [board_dict(b) for b in workspace.boards],
    }
