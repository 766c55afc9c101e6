"""Boards blueprint — /boards/*

Creating a board also places the default sections on it.

Route Map:
  POST   /boards                           — Create board + default sections (admin)
  GET    /boards/<id>                      — Board with its sections in order
  GET    /boards/<id>/cards                — Every card, grouped by section, in order
  DELETE /boards/<id>                      — Delete board, its sections and cards (admin)
  POST   /boards/<id>/sections             — Place a section on the board
  PUT    /boards/<id>/sections/<bs_id>     — Move a board section on the board
  DELETE /boards/<id>/sections/<bs_id>     — Take a section (and its cards) off
"""

from flask import Blueprint, abort, request
from flask_login import current_user
from sqlalchemy.exc import IntegrityError

from app.decorators import admin_required, require_workspace_access, token_required
from app.extensions import db
from app.models.board import Board
from app.responses import fail, ok, positive_int, required_str
from app.serializers import board_dict, board_section_dict
from app.services import board_section_service, board_service, position_service

boards_bp = Blueprint("boards", __name__, url_prefix="/boards")


def _get_board_or_404(board_id):
    board = db.session.get(Board, board_id)
    if board is None:
        abort(404, description="Board not found.")
    return board


@boards_bp.route("", methods=["POST"])
@admin_required
def create_board():
    data = request.get_json(silent=True) or {}
    errors = []
    name = required_str(data, "name", errors)
    workspace_id = required_str(data, "workspace_id", errors)
    if errors:
        return fail("Validation failed", 422, errors)

    try:
        board = board_service.create_board(
            workspace_id,
            name,
            created_by=current_user.id,
            bg_color=data.get("bg_color"),
            admin_id=data.get("admin_id"),
        )
    except ValueError as e:
        return fail("Validation failed", 422, [str(e)])

    db.session.commit()
    return ok("Board created successfully.", board_dict(board, with_sections=True), 201)


@boards_bp.route("/<board_id>")
@token_required
def show_board(board_id):
    board = _get_board_or_404(board_id)
    require_workspace_access(board.workspace_id)
    return ok("Board details retrieved successfully.", board_dict(board, with_sections=True))


@boards_bp.route("/<board_id>/cards")
@token_required
def board_cards(board_id):
    board = _get_board_or_404(board_id)
    require_workspace_access(board.workspace_id)
    data = [
        board_section_dict(container, cards=position_service.list_ordered(container.id))
        for container in board.sections
    ]
    return ok("Cards retrieved successfully.", data)


@boards_bp.route("/<board_id>", methods=["DELETE"])
@admin_required
def delete_board(board_id):
    if not board_service.delete_board(board_id, current_user.id):
        abort(404, description="Board not found.")
    db.session.commit()
    return ok("Board deleted successfully.")


# ─── Board sections ──────────────────────────────────────────────

def _container_on_board(board, container_id):
    container = board_section_service.get(container_id)
    if container.board_id != board.id:
        abort(404, description="Board section not found on this board.")
    return container


@boards_bp.route("/<board_id>/sections", methods=["POST"])
@token_required
def place_section(board_id):
    board = _get_board_or_404(board_id)
    require_workspace_access(board.workspace_id)

    data = request.get_json(silent=True) or {}
    errors = []
    section_id = required_str(data, "section_id", errors)
    position = positive_int(data, "position", errors) if "position" in data else None
    if errors:
        return fail("Validation failed", 422, errors)

    try:
        container = board_section_service.place(
            board.id, section_id, position=position, created_by=current_user.id
        )
        db.session.commit()
    except ValueError as e:
        db.session.rollback()
        return fail(str(e), 422)
    except IntegrityError:
        db.session.rollback()
        return fail("Section is already on this board.", 422)

    return ok("Board section created successfully.", board_section_dict(container), 201)


@boards_bp.route("/<board_id>/sections/<container_id>", methods=["PUT"])
@token_required
def move_section(board_id, container_id):
    board = _get_board_or_404(board_id)
    require_workspace_access(board.workspace_id)
    container = _container_on_board(board, container_id)

    errors = []
    position = positive_int(request.get_json(silent=True) or {}, "position", errors)
    if errors:
        return fail("Validation failed", 422, errors)

    board_section_service.reposition(container.id, position, actor_user_id=current_user.id)
    db.session.commit()
    return ok("Board section updated successfully.", board_section_dict(container))


@boards_bp.route("/<board_id>/sections/<container_id>", methods=["DELETE"])
@token_required
def remove_section(board_id, container_id):
    board = _get_board_or_404(board_id)
    require_workspace_access(board.workspace_id)
    container = _container_on_board(board, container_id)

    board_section_service.remove(container.id, actor_user_id=current_user.id)
    db.session.commit()
    return ok("Board section deleted successfully.")
