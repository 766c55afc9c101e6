"""Add performance indexes for frequently queried columns.

Revision ID: add_performance_indexes
Revises: b7d41c9e2a63
Create Date: 2026-10-19

"""

from alembic import op


revision = "add_performance_indexes"
down_revision = "b7d41c9e2a63"
branch_labels = None
depends_on = None


def upgrade():
    # Board sections - listed per board in position order
    op.create_index(
        "ix_board_sections_board_position", "board_sections", ["board_id", "position"]
    )

    # Boards - listed per workspace
    op.create_index("ix_boards_workspace_id", "boards", ["workspace_id"])

    # Workspace members - every access check filters by user
    op.create_index("ix_workspace_members_user_id", "workspace_members", ["user_id"])

    # Sections - template read filters by type, orders by position
    op.create_index("ix_sections_type_position", "sections", ["type", "position"])

    # Audit events - activity feed per workspace
    op.create_index(
        "ix_audit_events_workspace_created",
        "audit_events",
        ["workspace_id", "created_at"],
    )


def downgrade():
    op.drop_index("ix_audit_events_workspace_created", table_name="audit_events")
    op.drop_index("ix_sections_type_position", table_name="sections")
    op.drop_index("ix_workspace_members_user_id", table_name="workspace_members")
    op.drop_index("ix_boards_workspace_id", table_name="boards")
    op.drop_index("ix_board_sections_board_position", table_name="board_sections")
