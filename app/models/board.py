"""Board models.

- Board: a kanban board inside a workspace.
- BoardSection: one section definition placed on one board. This is the
  container cards live in; cards reference it by board_section_id.

BoardSection carries a version counter (SQLAlchemy version_id_col). Every
card shift bumps it, so two transactions reordering the same container
cannot both commit: the loser gets StaleDataError and retries.
"""

import uuid

from app.extensions import db


class Board(db.Model):
    __tablename__ = "boards"

    id = db.Column(
        db.String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    name = db.Column(db.String(255), nullable=False)
    bg_color = db.Column(db.String(7), nullable=True)  # hex color
    workspace_id = db.Column(
        db.String(36),
        db.ForeignKey("workspaces.id", ondelete="CASCADE"),
        nullable=False,
    )
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
    workspace = db.relationship("Workspace", back_populates="boards")
    sections = db.relationship(
        "BoardSection",
        back_populates="board",
        cascade="all",
        order_by="BoardSection.position",
    )

    def __repr__(self):
        return f"<Board {self.name}>"


class BoardSection(db.Model):
    __tablename__ = "board_sections"

    id = db.Column(
        db.String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    board_id = db.Column(
        db.String(36),
        db.ForeignKey("boards.id", ondelete="CASCADE"),
        nullable=False,
    )
    section_id = db.Column(
        db.String(36), db.ForeignKey("sections.id"), nullable=False
    )
    position = db.Column(db.Integer, nullable=False)  # order on the board, 1-based
    created_by = db.Column(
        db.String(36), db.ForeignKey("users.id"), nullable=True
    )
    version = db.Column(db.Integer, nullable=False)
    created_at = db.Column(
        db.DateTime(timezone=True), server_default=db.func.now()
    )
    updated_at = db.Column(
        db.DateTime(timezone=True),
        server_default=db.func.now(),
        onupdate=db.func.now(),
    )

    __table_args__ = (
        db.UniqueConstraint(
            "board_id", "section_id", name="uq_board_section"
        ),
    )
    __mapper_args__ = {"version_id_col": version}

    # --- Relationships ---
    board = db.relationship("Board", back_populates="sections")
    section = db.relationship("Section")
    cards = db.relationship(
        "Card",
        back_populates="board_section",
        lazy="dynamic",
        cascade="all",
        order_by="Card.position",
    )

    def __repr__(self):
        return f"<BoardSection board={self.board_id} section={self.section_id} pos={self.position}>"
