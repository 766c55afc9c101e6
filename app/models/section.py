"""Section definition model.

A Section is a named lane ("To Do", "Done", ...). Sections of type
TEMPLATE form the admin-curated default list that every new board is
seeded with, in `position` order.
"""

import uuid

from app.extensions import db


class Section(db.Model):
    __tablename__ = "sections"

    TEMPLATE = 0
    CUSTOM = 1
    TYPES = [TEMPLATE, CUSTOM]

    # -- Seeded by `flask seed-sections` --
    DEFAULT_TITLES = [
        "To Do",
        "Doing",
        "QA Testing",
        "Done",
        "Pending Client Approval",
        "Completed",
    ]

    id = db.Column(
        db.String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    title = db.Column(db.String(255), nullable=False)
    position = db.Column(db.Integer, nullable=False, default=0)
    type = db.Column(db.Integer, nullable=False, default=TEMPLATE)
    created_by = db.Column(
        db.String(36), db.ForeignKey("users.id"), nullable=True
    )
    created_at = db.Column(
        db.DateTime(timezone=True), server_default=db.func.now()
    )
    updated_at = db.Column(
        db.DateTime(timezone=True),
        server_default=db.func.now(),
        onupdate=db.func.now(),
    )

    def __repr__(self):
        return f"<Section {self.title}>"
