"""Tests for the section template and board provisioning.

Covers:
- default_sections ordering (position, then age) and CUSTOM exclusion
- provision: 1-based ranks regardless of gaps in Section.position
- provision twice on one board fails on uq_board_section
- create_section: append after the last, validation
- seed_defaults: idempotent
- board_section_service: resolve / get / lock
- place / reposition / remove sections on a board
- update_section / delete_section
"""

import pytest
from sqlalchemy.exc import IntegrityError

from app.errors import ContainerNotFound
from app.extensions import db
from app.models.audit import AuditEvent
from app.models.board import BoardSection
from app.models.card import Card
from app.models.section import Section
from app.models.user import User
from app.services import board_section_service, board_service, position_service, section_service


# ─── Helpers ───────────────────────────────────────────────

def _make_admin(db_session):
    user = User(email="owner@example.com", full_name="Owner", is_admin=True)
    db_session.add(user)
    db_session.flush()
    return user


def _make_section(db_session, title, position, section_type=Section.TEMPLATE):
    section = Section(title=title, position=position, type=section_type)
    db_session.add(section)
    db_session.flush()
    return section


# ─── Template ─────────────────────────────────────────────

class TestDefaultSections:

    def test_ordered_by_position(self, db_session):
        _make_section(db_session, "Later", 30)
        _make_section(db_session, "First", 10)
        _make_section(db_session, "Middle", 20)

        titles = [s.title for s in section_service.default_sections()]
        assert titles == ["First", "Middle", "Later"]

    def test_custom_sections_excluded(self, db_session):
        _make_section(db_session, "Template", 1)
        _make_section(db_session, "Custom", 2, section_type=Section.CUSTOM)

        titles = [s.title for s in section_service.default_sections()]
        assert titles == ["Template"]

    def test_empty_template(self, db_session):
        assert section_service.default_sections() == []


class TestProvision:

    def test_ranks_ignore_gaps(self, db_session):
        admin = _make_admin(db_session)
        _make_section(db_session, "A", 5)
        _make_section(db_session, "B", 40)
        _make_section(db_session, "C", 41)
        _make_section(db_session, "Private", 7, section_type=Section.CUSTOM)

        workspace = board_service.create_workspace("Gapped", created_by=admin.id)
        board = workspace.boards.first()

        placed = [
            (c.section.title, c.position)
            for c in BoardSection.query.filter_by(board_id=board.id)
            .order_by(BoardSection.position).all()
        ]
        assert placed == [("A", 1), ("B", 2), ("C", 3)]

    def test_default_template_on_new_board(self, seed_data):
        containers = (
            BoardSection.query
            .filter_by(board_id=seed_data["board_id"])
            .order_by(BoardSection.position)
            .all()
        )
        assert [c.position for c in containers] == [1, 2, 3, 4, 5, 6]
        assert [c.section.title for c in containers] == Section.DEFAULT_TITLES
        assert all(c.created_by == seed_data["admin_id"] for c in containers)

    def test_second_provision_violates_uniqueness(self, seed_data, db_session):
        with pytest.raises(IntegrityError):
            section_service.provision(seed_data["board_id"])
        db_session.rollback()

    def test_provision_with_no_template(self, db_session):
        admin = _make_admin(db_session)
        workspace = board_service.create_workspace("Bare", created_by=admin.id)
        board = workspace.boards.first()

        assert BoardSection.query.filter_by(board_id=board.id).count() == 0


class TestCreateSection:

    def test_appends_after_last(self, db_session):
        _make_section(db_session, "A", 3)
        _make_section(db_session, "B", 8)

        section = section_service.create_section("  Blocked  ")

        assert section.title == "Blocked"
        assert section.position == 9
        assert section.type == Section.TEMPLATE

    def test_first_section_gets_position_one(self, db_session):
        section = section_service.create_section("Only")
        assert section.position == 1

    def test_custom_type(self, db_session):
        section = section_service.create_section("Mine", section_type=Section.CUSTOM)
        assert section.type == Section.CUSTOM
        assert section_service.default_sections() == []

    @pytest.mark.parametrize("title", [None, "", "   "])
    def test_title_required(self, db_session, title):
        with pytest.raises(ValueError, match="Title is required"):
            section_service.create_section(title)

    def test_unknown_type_rejected(self, db_session):
        with pytest.raises(ValueError, match="Invalid section type"):
            section_service.create_section("Odd", section_type=7)


class TestSeedDefaults:

    def test_creates_default_titles_in_order(self, db_session):
        created = section_service.seed_defaults()

        assert created == len(Section.DEFAULT_TITLES)
        titles = [s.title for s in section_service.default_sections()]
        assert titles == Section.DEFAULT_TITLES

    def test_rerun_creates_nothing(self, db_session):
        section_service.seed_defaults()
        assert section_service.seed_defaults() == 0
        assert Section.query.count() == len(Section.DEFAULT_TITLES)

    def test_fills_in_missing_titles(self, db_session):
        _make_section(db_session, "Doing", 1)

        created = section_service.seed_defaults()

        assert created == len(Section.DEFAULT_TITLES) - 1
        assert Section.query.filter_by(title="Doing").count() == 1


# ─── Board section lookups ────────────────────────────────

class TestBoardSectionLookups:

    def test_resolve(self, seed_data):
        container = board_section_service.resolve(
            seed_data["board_id"], seed_data["section_ids"][2]
        )
        assert container.id == seed_data["container_ids"][2]
        assert container.section.title == "QA Testing"

    def test_resolve_unknown_pair(self, seed_data):
        with pytest.raises(ContainerNotFound) as exc_info:
            board_section_service.resolve("no-board", seed_data["section_ids"][0])
        assert exc_info.value.status_code == 404
        assert exc_info.value.board_id == "no-board"

    def test_get(self, seed_data):
        container = board_section_service.get(seed_data["container_ids"][0])
        assert container.section_id == seed_data["section_ids"][0]

    def test_get_unknown(self, seed_data):
        with pytest.raises(ContainerNotFound):
            board_section_service.get("missing")

    def test_lock_bumps_version(self, seed_data, db_session):
        container_id = seed_data["container_ids"][0]
        before = db.session.get(BoardSection, container_id).version

        locked = board_section_service.lock(container_id)
        db_session.commit()

        assert locked.version == before + 1

    def test_lock_unknown(self, seed_data):
        with pytest.raises(ContainerNotFound):
            board_section_service.lock("missing")


# ─── Placing sections on a board ──────────────────────────

class TestPlace:

    def test_appends_after_last(self, seed_data, db_session):
        custom = section_service.create_section("Blocked", section_type=Section.CUSTOM)

        container = board_section_service.place(
            seed_data["board_id"], custom.id, created_by=seed_data["admin_id"]
        )

        assert container.position == 7
        assert board_section_service.resolve(seed_data["board_id"], custom.id).id == container.id
        event = AuditEvent.query.filter_by(action="board_section.placed").one()
        assert event.metadata_["section_id"] == custom.id
        assert event.actor_user_id == seed_data["admin_id"]

    def test_explicit_position(self, seed_data, db_session):
        custom = section_service.create_section("Triage", section_type=Section.CUSTOM)

        container = board_section_service.place(seed_data["board_id"], custom.id, position=2)

        assert container.position == 2

    def test_first_section_on_empty_board(self, seed_data, db_session):
        board = board_service.create_board(
            seed_data["workspace_id"], "Roadmap", created_by=seed_data["admin_id"]
        )
        for container in BoardSection.query.filter_by(board_id=board.id).all():
            board_section_service.remove(container.id)

        container = board_section_service.place(board.id, seed_data["section_ids"][0])

        assert container.position == 1

    def test_placed_section_holds_cards(self, seed_data, db_session):
        custom = section_service.create_section("Blocked", section_type=Section.CUSTOM)
        container = board_section_service.place(seed_data["board_id"], custom.id)
        db_session.commit()

        position_service.insert_at(container.id, 1, "Waiting", "", owner_id=seed_data["admin_id"])

        assert position_service.list_positions(container.id) == [1]

    def test_duplicate_pair(self, seed_data):
        with pytest.raises(ValueError, match="already on this board"):
            board_section_service.place(seed_data["board_id"], seed_data["section_ids"][0])

    def test_unknown_board(self, seed_data):
        with pytest.raises(ValueError, match="Board missing not found"):
            board_section_service.place("missing", seed_data["section_ids"][0])

    def test_unknown_section(self, seed_data):
        with pytest.raises(ValueError, match="Section missing not found"):
            board_section_service.place(seed_data["board_id"], "missing")

    @pytest.mark.parametrize("position", [0, -1, 1.5, "2", True])
    def test_bad_position(self, seed_data, db_session, position):
        custom = section_service.create_section("Later", section_type=Section.CUSTOM)
        with pytest.raises(ValueError, match="positive integer"):
            board_section_service.place(seed_data["board_id"], custom.id, position=position)


class TestReposition:

    def test_moves_and_audits(self, seed_data):
        done = seed_data["container_ids"][3]

        container = board_section_service.reposition(done, 1, actor_user_id=seed_data["member_id"])

        assert container.position == 1
        event = AuditEvent.query.filter_by(action="board_section.moved").one()
        assert event.metadata_["from_position"] == 4
        assert event.metadata_["to_position"] == 1

    def test_cards_keep_positions(self, seed_data, db_session):
        todo = seed_data["container_ids"][0]
        db_session.add(Card(board_section_id=todo, position=3, title="Stay", created_by=seed_data["admin_id"]))
        db_session.flush()

        board_section_service.reposition(todo, 5)

        assert position_service.list_positions(todo) == [3]

    def test_unknown(self, seed_data):
        with pytest.raises(ContainerNotFound):
            board_section_service.reposition("missing", 1)

    def test_bad_position(self, seed_data):
        with pytest.raises(ValueError):
            board_section_service.reposition(seed_data["container_ids"][0], 0)


class TestRemove:

    def test_deletes_cards_with_it(self, seed_data, db_session):
        todo, doing = seed_data["container_ids"][:2]
        db_session.add_all([
            Card(board_section_id=todo, position=1, title="A", created_by=seed_data["admin_id"]),
            Card(board_section_id=todo, position=2, title="B", created_by=seed_data["admin_id"]),
            Card(board_section_id=doing, position=1, title="C", created_by=seed_data["admin_id"]),
        ])
        db_session.commit()

        board_section_service.remove(todo, actor_user_id=seed_data["admin_id"])
        db_session.commit()

        assert db.session.get(BoardSection, todo) is None
        assert [c.title for c in Card.query.all()] == ["C"]
        event = AuditEvent.query.filter_by(action="board_section.removed").one()
        assert event.metadata_["cards"] == 2

    def test_section_can_be_placed_again(self, seed_data, db_session):
        todo = seed_data["container_ids"][0]
        board_section_service.remove(todo)

        container = board_section_service.place(seed_data["board_id"], seed_data["section_ids"][0])

        assert container.id != todo

    def test_unknown(self, seed_data):
        with pytest.raises(ContainerNotFound):
            board_section_service.remove("missing")


# ─── Section definitions ──────────────────────────────────

class TestUpdateSection:

    def test_rename(self, seed_data):
        section = section_service.update_section(seed_data["section_ids"][0], title="  Backlog ")
        assert section.title == "Backlog"

    def test_reorder_template(self, seed_data):
        last = seed_data["section_ids"][-1]

        section_service.update_section(last, position=1)
        section_service.update_section(seed_data["section_ids"][0], position=2)

        assert section_service.default_sections()[0].id == last

    def test_board_positions_untouched(self, seed_data):
        section_service.update_section(seed_data["section_ids"][0], position=99)

        container = db.session.get(BoardSection, seed_data["container_ids"][0])
        assert container.position == 1

    def test_retype_drops_from_template(self, seed_data):
        section_service.update_section(seed_data["section_ids"][0], section_type=Section.CUSTOM)

        titles = [s.title for s in section_service.default_sections()]
        assert "To Do" not in titles

    @pytest.mark.parametrize("kwargs, message", [
        ({"title": "   "}, "Title is required"),
        ({"title": 42}, "Title must be a string"),
        ({"position": 0}, "positive integer"),
        ({"position": 2.5}, "positive integer"),
        ({"section_type": 7}, "Invalid section type"),
    ])
    def test_invalid_values(self, seed_data, kwargs, message):
        with pytest.raises(ValueError, match=message):
            section_service.update_section(seed_data["section_ids"][0], **kwargs)

    def test_unknown(self, db_session):
        with pytest.raises(ValueError, match="not found"):
            section_service.update_section("missing", title="Nope")


class TestDeleteSection:

    def test_deletes_unused_section(self, seed_data, db_session):
        custom = section_service.create_section("Scratch", section_type=Section.CUSTOM)
        db_session.commit()

        section_service.delete_section(custom.id)
        db_session.commit()

        assert db.session.get(Section, custom.id) is None

    def test_refuses_section_on_a_board(self, seed_data):
        with pytest.raises(ValueError, match="on 1 board"):
            section_service.delete_section(seed_data["section_ids"][0])

        assert db.session.get(Section, seed_data["section_ids"][0]) is not None

    def test_unknown(self, db_session):
        with pytest.raises(ValueError, match="not found"):
            section_service.delete_section("missing")
