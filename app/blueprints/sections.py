"""Sections blueprint — /sections/*

Section definitions (the default template) and per-section card reads.

`<section_id>` in the card routes names a section definition; pass
`?board_id=` to pick the board it is placed on. Without board_id the id
is taken as a board section id directly.

Route Map:
  GET    /sections                        — Template sections in order
  POST   /sections                        — Append a section definition (admin)
  PUT    /sections/<id>                   — Rename / reorder / retype (admin)
  DELETE /sections/<id>                   — Delete an unused definition (admin)
  GET    /sections/<id>/positions         — Card positions, ascending
  GET    /sections/<id>/cards             — Cards, ascending by position
"""

from flask import Blueprint, abort, request
from flask_login import current_user

from app.decorators import admin_required, require_workspace_access, token_required
from app.extensions import db
from app.models.section import Section
from app.responses import fail, ok, positive_int
from app.serializers import board_section_dict, section_dict
from app.services import board_section_service, position_service, section_service

sections_bp = Blueprint("sections", __name__, url_prefix="/sections")


def _container_for(section_id):
    """Resolve the board section addressed by the URL and check access."""
    board_id = request.args.get("board_id")
    if board_id:
        container = board_section_service.resolve(board_id, section_id)
    else:
        container = board_section_service.get(section_id)
    require_workspace_access(container.board.workspace_id)
    return container


def _section_type(value, errors):
    """0/1 as a JSON int or a digit string."""
    if isinstance(value, str) and value.strip().isdecimal():
        value = int(value.strip())
    if isinstance(value, bool) or not isinstance(value, int) or value not in Section.TYPES:
        errors.append("type must be 0 or 1.")
        return None
    return value


def _get_section_or_404(section_id):
    section = db.session.get(Section, section_id)
    if section is None:
        abort(404, description="Section not found.")
    return section


@sections_bp.route("")
@token_required
def list_sections():
    sections = section_service.default_sections()
    return ok(
        "Section list retrieved successfully.",
        [section_dict(s) for s in sections],
    )


@sections_bp.route("", methods=["POST"])
@admin_required
def create_section():
    data = request.get_json(silent=True) or {}
    errors = []
    section_type = _section_type(data.get("type", Section.TEMPLATE), errors)
    if errors:
        return fail("Validation failed", 422, errors)

    try:
        section = section_service.create_section(
            data.get("title"),
            created_by=current_user.id,
            section_type=section_type,
        )
    except ValueError as e:
        return fail("Validation failed", 422, [str(e)])

    db.session.commit()
    return ok("Section created successfully.", section_dict(section), 201)


@sections_bp.route("/<section_id>", methods=["PUT"])
@admin_required
def update_section(section_id):
    section = _get_section_or_404(section_id)
    data = request.get_json(silent=True) or {}
    errors = []
    position = positive_int(data, "position", errors) if "position" in data else None
    section_type = _section_type(data["type"], errors) if "type" in data else None
    if errors:
        return fail("Validation failed", 422, errors)

    try:
        section = section_service.update_section(
            section.id,
            title=data.get("title"),
            position=position,
            section_type=section_type,
        )
    except ValueError as e:
        return fail("Validation failed", 422, [str(e)])

    db.session.commit()
    return ok("Section updated successfully.", section_dict(section))


@sections_bp.route("/<section_id>", methods=["DELETE"])
@admin_required
def delete_section(section_id):
    section = _get_section_or_404(section_id)
    try:
        section_service.delete_section(section.id)
    except ValueError as e:
        return fail(str(e), 422)

    db.session.commit()
    return ok("Section deleted successfully.")


@sections_bp.route("/<section_id>/positions")
@token_required
def section_positions(section_id):
    container = _container_for(section_id)
    positions = position_service.list_positions(container.id)
    return ok("Section positions retrieved successfully.", positions)


@sections_bp.route("/<section_id>/cards")
@token_required
def section_cards(section_id):
    container = _container_for(section_id)
    cards = position_service.list_ordered(container.id)
    return ok(
        "Section cards retrieved successfully.",
        board_section_dict(container, cards=cards),
    )
