"""Cards blueprint — /cards/*

Card placement API. Every write goes through position_service so the
board section's positions stay collision-free. All routes need a bearer
token; non-admins must belong to the board's workspace.

Route Map:
  POST   /cards                 — Create card at position_id
  GET    /cards/search?title=   — Search title/description
  GET    /cards/<id>            — Card detail
  PUT    /cards/<id>/move       — Move card to (board_id, section_id, position_id)
  POST   /cards/<id>/copy       — Copy card to (board_id, section_id, position_id)
  DELETE /cards/<id>            — Delete card (siblings keep their positions)
"""

from flask import Blueprint, current_app, request
from flask_login import current_user

from app.decorators import require_workspace_access, token_required
from app.extensions import db, limiter
from app.responses import fail, ok, optional_str, positive_int, required_str
from app.serializers import card_dict
from app.services import (
    board_section_service,
    board_service,
    card_store,
    position_service,
)

cards_bp = Blueprint("cards", __name__, url_prefix="/cards")


def _write_limit():
    return current_app.config.get("CARD_WRITE_RATE_LIMIT", "60 per minute")


def _placement_args(data):
    """Pull (board_id, section_id, position_id) out of a move/copy body."""
    errors = []
    board_id = required_str(data, "board_id", errors)
    section_id = required_str(data, "section_id", errors)
    position = positive_int(data, "position_id", errors)
    return board_id, section_id, position, errors


# ─── Create ──────────────────────────────────────────────────────

@cards_bp.route("", methods=["POST"])
@limiter.limit(_write_limit)
@token_required
def create_card():
    data = request.get_json(silent=True) or {}
    errors = []
    title = required_str(data, "title", errors)
    description = optional_str(data, "description", errors)
    container_id = required_str(data, "board_section_id", errors)
    position = positive_int(data, "position_id", errors)
    if errors:
        return fail("Validation failed", 422, errors)

    container = board_section_service.get(container_id)
    require_workspace_access(container.board.workspace_id)

    try:
        card = position_service.insert_at(
            container.id,
            position,
            title=title,
            description=description,
            owner_id=current_user.id,
        )
    except ValueError as e:
        return fail("Validation failed", 422, [str(e)])

    return ok("Card created successfully.", card_dict(card), 201)


# ─── Read ────────────────────────────────────────────────────────

@cards_bp.route("/search")
@token_required
def search_cards():
    text = (request.args.get("title") or "").strip()
    if not text:
        return fail("Validation failed", 422, ["title is required."])

    cards = card_store.search(
        text, container_ids=board_service.visible_container_ids(current_user)
    )
    if not cards:
        return fail("No cards found matching the criteria", 404)

    data = []
    for card in cards:
        item = card_dict(card)
        item["board_name"] = card.board_section.board.name
        item["section_name"] = card.board_section.section.title
        data.append(item)
    return ok("Cards retrieved successfully.", data)


@cards_bp.route("/<card_id>")
@token_required
def show_card(card_id):
    card = card_store.find(card_id)
    require_workspace_access(card.board_section.board.workspace_id)
    return ok("Card details retrieved successfully.", card_dict(card))


# ─── Move / Copy ─────────────────────────────────────────────────

@cards_bp.route("/<card_id>/move", methods=["PUT"])
@limiter.limit(_write_limit)
@token_required
def move_card(card_id):
    board_id, section_id, position, errors = _placement_args(
        request.get_json(silent=True) or {}
    )
    if errors:
        return fail("Validation failed", 422, errors)

    card = card_store.find(card_id)
    require_workspace_access(card.board_section.board.workspace_id)
    target = board_section_service.resolve(board_id, section_id)
    require_workspace_access(target.board.workspace_id)

    card = position_service.move(
        card.id, board_id, section_id, position, owner_id=current_user.id
    )
    return ok("Card moved successfully.", card_dict(card))


@cards_bp.route("/<card_id>/copy", methods=["POST"])
@limiter.limit(_write_limit)
@token_required
def copy_card(card_id):
    board_id, section_id, position, errors = _placement_args(
        request.get_json(silent=True) or {}
    )
    if errors:
        return fail("Validation failed", 422, errors)

    source = card_store.find(card_id)
    require_workspace_access(source.board_section.board.workspace_id)
    target = board_section_service.resolve(board_id, section_id)
    require_workspace_access(target.board.workspace_id)

    card = position_service.copy(
        source.id, board_id, section_id, position, owner_id=current_user.id
    )
    return ok("Card copied successfully.", card_dict(card), 201)


# ─── Delete ──────────────────────────────────────────────────────

@cards_bp.route("/<card_id>", methods=["DELETE"])
@limiter.limit(_write_limit)
@token_required
def delete_card(card_id):
    card = card_store.find(card_id)
    require_workspace_access(card.board_section.board.workspace_id)
    board_service.delete_card(card.id, current_user.id)
    db.session.commit()
    return ok("Card deleted successfully.")
