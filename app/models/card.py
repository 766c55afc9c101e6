"""Card model.

A card lives in exactly one BoardSection at a time. Positions are unique
within a board section (uq_card_section_position) but need not be
contiguous: deleting or moving a card out leaves a gap.
"""

import uuid

from app.extensions import db


class Card(db.Model):
    __tablename__ = "cards"

    id = db.Column(
        db.String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, default="")
    board_section_id = db.Column(
        db.String(36),
        db.ForeignKey("board_sections.id", ondelete="CASCADE"),
        nullable=False,
    )
    position = db.Column(db.Integer, nullable=False)
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

    __table_args__ = (
        db.UniqueConstraint(
            "board_section_id", "position", name="uq_card_section_position"
        ),
    )

    # --- Relationships ---
    board_section = db.relationship("BoardSection", back_populates="cards")
    creator = db.relationship("User", foreign_keys=[created_by])

    def __repr__(self):
        return f"<Card {self.title[:40]} pos={self.position}>"
