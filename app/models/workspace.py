"""Workspace models.

- Workspace: the top-level container for boards (one per team or client).
- WorkspaceMember: join table linking users to workspaces.
"""

import uuid

from app.extensions import db


class Workspace(db.Model):
    __tablename__ = "workspaces"

    id = db.Column(
        db.String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    name = db.Column(db.String(255), nullable=False)
    slug = db.Column(db.String(255), unique=True, nullable=False)
    bg_color = db.Column(db.String(7), nullable=True)  # hex color
    admin_id = db.Column(
        db.String(36), db.ForeignKey("users.id"), nullable=True
    )
    created_by = db.Column(
        db.String(36), db.ForeignKey("users.id"), nullable=False
    )
    created_at = db.Column(
        db.DateTime(timezone=True), server_default=db.func.now()
    )
    updated_at = db.Column(
        db.DateTime(timezone=True),
        server_default=db.func.now(),
        onupdate=db.func.now(),
    )

    # --- Relationships ---
    members = db.relationship(
        "WorkspaceMember",
        back_populates="workspace",
        lazy="dynamic",
        cascade="all",
    )
    boards = db.relationship(
        "Board",
        back_populates="workspace",
        lazy="dynamic",
        cascade="all",
        order_by="Board.created_at",
    )
    audit_events = db.relationship(
        "AuditEvent", back_populates="workspace", lazy="dynamic"
    )

    def __repr__(self):
        return f"<Workspace {self.name}>"


class WorkspaceMember(db.Model):
    __tablename__ = "workspace_members"

    id = db.Column(
        db.String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    user_id = db.Column(
        db.String(36), db.ForeignKey("users.id"), nullable=False
    )
    workspace_id = db.Column(
        db.String(36),
        db.ForeignKey("workspaces.id", ondelete="CASCADE"),
        nullable=False,
    )
    role = db.Column(db.String(50), default="member")  # owner | member
    created_at = db.Column(
        db.DateTime(timezone=True), server_default=db.func.now()
    )

    __table_args__ = (
        db.UniqueConstraint(
            "user_id", "workspace_id", name="uq_user_workspace"
        ),
    )

    # --- Relationships ---
    user = db.relationship("User", back_populates="workspace_memberships")
    workspace = db.relationship("Workspace", back_populates="members")

    def __repr__(self):
        return f"<WorkspaceMember user={self.user_id} workspace={self.workspace_id}>"
