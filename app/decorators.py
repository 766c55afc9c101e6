"""
Custom route decorators for access control.

- token_required: ensures the request carries a valid bearer token.
- admin_required: ensures the user is authenticated AND has is_admin=True.
- require_workspace_access: aborts 403 unless the user may see a workspace.
"""

from functools import wraps

from flask import abort
from flask_login import current_user, login_required

token_required = login_required


def admin_required(f):
    """Require a bearer token + is_admin flag."""

    @wraps(f)
    @login_required
    def decorated(*args, **kwargs):
        if not current_user.is_admin:
            abort(403, description="Admin access required.")
        return f(*args, **kwargs)

    return decorated


def require_workspace_access(workspace_id):
    """Abort with 403 unless current_user is an admin or a member."""
    # Imported lazily to avoid circular imports at app creation
    from app.services.board_service import user_can_access_workspace

    if not user_can_access_workspace(current_user, workspace_id):
        abort(403, description="No access to this workspace.")
