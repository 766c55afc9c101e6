"""Workspaces blueprint — /workspaces/*

Route Map:
  GET  /workspaces   — Admin: every workspace. Others: their memberships.
  POST /workspaces   — Create workspace + "General Tasks" board (admin)
"""

from flask import Blueprint, request
from flask_login import current_user

from app.decorators import admin_required, token_required
from app.extensions import db
from app.responses import fail, ok, required_str
from app.serializers import workspace_dict
from app.services import board_service

workspaces_bp = Blueprint("workspaces", __name__, url_prefix="/workspaces")


@workspaces_bp.route("")
@token_required
def list_workspaces():
    workspaces = board_service.workspaces_for(current_user)
    if not workspaces:
        return fail("You don't have access to any of the workspaces.", 404)
    return ok(
        "Workspace list retrieved successfully.",
        [workspace_dict(w) for w in workspaces],
    )


@workspaces_bp.route("", methods=["POST"])
@admin_required
def create_workspace():
    data = request.get_json(silent=True) or {}
    errors = []
    name = required_str(data, "name", errors)
    if errors:
        return fail("Validation failed", 422, errors)

    try:
        workspace = board_service.create_workspace(
            name, created_by=current_user.id, bg_color=data.get("bg_color")
        )
    except ValueError as e:
        return fail("Validation failed", 422, [str(e)])

    db.session.commit()
    return ok("Workspace created successfully.", workspace_dict(workspace), 201)
