"""Tests for EditableSession: working copy, commit, discard."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest
from generalis.auth import AuthState
from generalis.content import ContentDocument, GalleryImage, MenuItem, default_content
from generalis.editor import EditableSession
from generalis.errors import AccessDenied, InvalidEdit, SaveFailed
from generalis.store import ContentGateway, JsonFileGateway


@pytest.fixture()
def unlocked() -> AuthState:
    return AuthState(unlocked=True)


@pytest.fixture()
def gateway(tmp_path: Path) -> JsonFileGateway:
    return JsonFileGateway(tmp_path / "content.json")


@pytest.fixture()
def session(gateway: JsonFileGateway, unlocked: AuthState) -> EditableSession:
    return EditableSession(default_content(), gateway, unlocked)


class TestAccess:
    def test_locked_state_cannot_open(self, gateway: JsonFileGateway):
        with pytest.raises(AccessDenied):
            EditableSession(default_content(), gateway, AuthState())

    def test_closed_session_rejects_edits(self, session: EditableSession):
        session.close()
        with pytest.raises(InvalidEdit, match="closed"):
            session.set_field("about", "late")


class TestScalarEdits:
    def test_set_field_changes_working_copy_only(self, session: EditableSession):
        session.set_field("hero.subtitle", "New subtitle")
        assert session.document.hero.subtitle == "New subtitle"
        assert session.baseline.hero.subtitle == default_content().hero.subtitle
        assert session.is_dirty

    def test_set_contact_field(self, session: EditableSession):
        session.set_field("contact.phone", "+254 700 000 000")
        assert session.document.contact.phone == "+254 700 000 000"
        assert session.document.contact.address == default_content().contact.address

    def test_rejects_non_text(self, session: EditableSession):
        with pytest.raises(InvalidEdit):
            session.set_field("about", 42)  # type: ignore[arg-type]

    def test_set_rules(self, session: EditableSession):
        session.set_rules(["No pets", "Smart casual"])
        assert session.document.rules == ["No pets", "Smart casual"]

    def test_set_category_title(self, session: EditableSession):
        session.set_category_title("fullMenu", 0, "Small Plates")
        assert session.document.menu.full_menu[0].title == "Small Plates"

    def test_document_is_a_copy(self, session: EditableSession):
        session.document.hero.title = "mutated outside"
        assert session.document.hero.title == default_content().hero.title


class TestListEdits:
    def test_remove_gallery_item_shifts_later_items(self, session: EditableSession):
        before = session.document.gallery
        assert len(before) == 4

        session.remove_list_item("gallery", 1)

        after = session.document.gallery
        assert after == [before[0], before[2], before[3]]

    def test_remove_out_of_range(self, session: EditableSession):
        with pytest.raises(InvalidEdit):
            session.remove_list_item("gallery", 4)
        with pytest.raises(InvalidEdit):
            session.remove_list_item("gallery", -1)

    def test_bool_is_not_an_index(self, session: EditableSession):
        with pytest.raises(InvalidEdit):
            session.remove_list_item("gallery", True)  # type: ignore[arg-type]

    def test_add_blank_event(self, session: EditableSession):
        index = session.add_list_item("events")
        event = session.document.events[index]
        assert index == len(default_content().events)
        assert event.title == ""

    def test_add_blank_menu_item(self, session: EditableSession):
        index = session.add_list_item("menu.overview[1].items")
        item = session.document.menu.overview[1].items[index]
        assert item == MenuItem(name="New Item", price="KSh 0")

    def test_blank_items_are_independent(self, session: EditableSession):
        session.add_list_item("gallery")
        session.add_list_item("gallery")
        session.update_list_item("gallery", 4, "caption", "first")
        assert session.document.gallery[5].caption == ""

    def test_add_validated_item(self, session: EditableSession):
        index = session.add_list_item("gallery", {"src": "https://example.com/x.jpg", "caption": "Sea view"})
        assert session.document.gallery[index] == GalleryImage(
            src="https://example.com/x.jpg", caption="Sea view"
        )

    def test_add_invalid_item(self, session: EditableSession):
        with pytest.raises(InvalidEdit, match="GalleryImage"):
            session.add_list_item("gallery", {"src": "https://example.com/x.jpg"})
        assert len(session.document.gallery) == 4

    def test_update_item_field(self, session: EditableSession):
        session.update_list_item("team", 0, "role", "Head Chef")
        assert session.document.team[0].role == "Head Chef"

    def test_update_menu_item_image(self, session: EditableSession):
        session.update_list_item("menu.fullMenu[0].items", 1, "image", "data:image/png;base64,AAAA")
        assert session.document.menu.full_menu[0].items[1].image == "data:image/png;base64,AAAA"

    def test_update_unknown_field(self, session: EditableSession):
        with pytest.raises(InvalidEdit, match="no field"):
            session.update_list_item("events", 0, "venue", "Beach")

    def test_update_wrong_type(self, session: EditableSession):
        with pytest.raises(InvalidEdit):
            session.update_list_item("events", 0, "title", ["not", "text"])
        assert session.document.events[0] == default_content().events[0]

    def test_missing_menu_category(self, session: EditableSession):
        with pytest.raises(InvalidEdit):
            session.add_list_item("menu.overview[99].items")


class TestCommit:
    def test_commit_persists_and_updates_baseline(
        self, session: EditableSession, gateway: JsonFileGateway
    ):
        session.set_field("about", "Committed about")
        committed = session.commit()

        assert committed.about == "Committed about"
        assert session.baseline.about == "Committed about"
        assert not session.is_dirty
        assert gateway.load().about == "Committed about"

    def test_commit_notifies_callback(self, gateway: JsonFileGateway, unlocked: AuthState):
        seen: list[ContentDocument] = []
        session = EditableSession(default_content(), gateway, unlocked, on_commit=seen.append)
        session.set_field("specials", "Two-for-one Tuesdays")
        session.commit()
        assert [doc.specials for doc in seen] == ["Two-for-one Tuesdays"]

    def test_failed_commit_keeps_working_copy(self, unlocked: AuthState):
        failing = MagicMock(spec=ContentGateway)
        failing.save.side_effect = SaveFailed("disk full")
        session = EditableSession(default_content(), failing, unlocked)
        session.set_field("about", "Unsaved about")
        session.remove_list_item("gallery", 0)
        before = session.document

        with pytest.raises(SaveFailed):
            session.commit()

        assert session.document == before
        assert session.baseline == default_content()
        assert session.is_dirty

    def test_retry_after_failure(self, unlocked: AuthState):
        flaky = MagicMock(spec=ContentGateway)
        flaky.save.side_effect = [SaveFailed("timeout"), None]
        session = EditableSession(default_content(), flaky, unlocked)
        session.set_field("about", "Retry me")

        with pytest.raises(SaveFailed):
            session.commit()
        assert session.commit().about == "Retry me"
        assert flaky.save.call_count == 2

    def test_reentrant_commit_is_rejected(self, unlocked: AuthState):
        gateway = MagicMock(spec=ContentGateway)
        session = EditableSession(default_content(), gateway, unlocked)
        inner_errors: list[Exception] = []

        def _save(_doc):
            try:
                session.commit()
            except SaveFailed as exc:
                inner_errors.append(exc)

        gateway.save.side_effect = _save
        session.commit()

        assert len(inner_errors) == 1
        assert "already in progress" in str(inner_errors[0])
        assert gateway.save.call_count == 1

    def test_discard_restores_baseline(self, session: EditableSession):
        session.set_field("about", "Throwaway")
        session.remove_list_item("team", 0)
        session.discard()
        assert session.document == session.baseline
        assert not session.is_dirty


class TestFillMissingCaptions:
    def test_applies_generated_captions(self, session: EditableSession):
        session.add_list_item("gallery", {"src": "https://example.com/new.jpg", "caption": ""})
        client = MagicMock()
        client.generate_missing_captions.side_effect = lambda images, on_progress=None: [
            img.model_copy(update={"caption": img.caption or "Generated"}) for img in images
        ]

        assert session.fill_missing_captions(client) == 1
        assert session.document.gallery[-1].caption == "Generated"

    def test_closed_session_discards_results(self, session: EditableSession):
        session.add_list_item("gallery", {"src": "https://example.com/new.jpg", "caption": ""})
        client = MagicMock()

        def _generate(images, on_progress=None):
            session.close()
            return [img.model_copy(update={"caption": "Late"}) for img in images]

        client.generate_missing_captions.side_effect = _generate

        assert session.fill_missing_captions(client) == 0
        assert session.document.gallery[-1].caption == ""
