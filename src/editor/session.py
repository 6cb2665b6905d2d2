"""In-memory editing of the content document.

An EditableSession holds a private working copy of the baseline
document.  Edits only ever touch that copy; the baseline changes only
when ``commit()`` succeeds.  A failed commit leaves the working copy
exactly as it was so the operator can retry.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from generalis.auth import AuthState
from generalis.content.models import (
    ContentDocument,
    Event,
    GalleryImage,
    MenuCategory,
    MenuItem,
    TeamMember,
    Testimonial,
)
from generalis.editor.paths import ListPath, ListSection, MenuSection, ScalarField
from generalis.errors import InvalidEdit, SaveFailed
from generalis.store.base import ContentGateway
from pydantic import BaseModel, ValidationError

if TYPE_CHECKING:
    from generalis.enrichment.captions import CaptionClient, ProgressCallback

logger = logging.getLogger(__name__)

CommitCallback = Callable[[ContentDocument], None]

# Blank entries appended by "Add" buttons in the admin panel.
BLANK_ITEMS: dict[ListSection, BaseModel] = {
    ListSection.EVENTS: Event(image="", title="", date="", description=""),
    ListSection.GALLERY: GalleryImage(src="", caption=""),
    ListSection.TESTIMONIALS: Testimonial(quote="", author="", location=""),
    ListSection.TEAM: TeamMember(image="", name="", role="", bio=""),
    ListSection.MENU: MenuItem(name="New Item", price="KSh 0"),
}


class EditableSession:
    """A single operator's working copy of the content document."""

    def __init__(
        self,
        baseline: ContentDocument,
        gateway: ContentGateway,
        auth: AuthState,
        *,
        on_commit: CommitCallback | None = None,
    ) -> None:
        auth.require()
        self._auth = auth
        self._gateway = gateway
        self._on_commit = on_commit
        self._baseline = baseline.model_copy(deep=True)
        self._working = baseline.model_copy(deep=True)
        self._closed = False
        self._committing = False

    # ── State ────────────────────────────────────────────────────

    @property
    def document(self) -> ContentDocument:
        """A copy of the working document."""
        return self._working.model_copy(deep=True)

    @property
    def baseline(self) -> ContentDocument:
        """A copy of the last loaded or committed document."""
        return self._baseline.model_copy(deep=True)

    @property
    def is_dirty(self) -> bool:
        return self._working != self._baseline

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """End the session.  Late results for it are discarded."""
        self._closed = True

    def _require_open(self) -> None:
        if self._closed:
            raise InvalidEdit("This editing session has been closed")
        self._auth.require()

    # ── Scalar fields ────────────────────────────────────────────

    def set_field(self, field: ScalarField | str, value: str) -> None:
        """Replace one plain text field."""
        self._require_open()
        target = ScalarField.parse(str(field))
        if not isinstance(value, str):
            raise InvalidEdit(f"{target} must be text, got {type(value).__name__}")

        doc = self._working
        if target is ScalarField.HERO_TITLE:
            doc.hero = doc.hero.model_copy(update={"title": value})
        elif target is ScalarField.HERO_SUBTITLE:
            doc.hero = doc.hero.model_copy(update={"subtitle": value})
        elif target is ScalarField.ABOUT:
            doc.about = value
        elif target is ScalarField.SPECIALS:
            doc.specials = value
        elif target is ScalarField.CONTACT_ADDRESS:
            doc.contact = doc.contact.model_copy(update={"address": value})
        elif target is ScalarField.CONTACT_PHONE:
            doc.contact = doc.contact.model_copy(update={"phone": value})

    def set_rules(self, rules: list[str]) -> None:
        """Replace the house rules list."""
        self._require_open()
        if not all(isinstance(rule, str) for rule in rules):
            raise InvalidEdit("House rules must all be text")
        self._working.rules = list(rules)

    def set_category_title(self, menu: MenuSection | str, index: int, title: str) -> None:
        """Rename one menu category."""
        self._require_open()
        categories = self._menu_categories(MenuSection.parse(str(menu)))
        self._check_index(categories, index, f"menu.{menu}")
        if not isinstance(title, str):
            raise InvalidEdit("Category title must be text")
        categories[index] = categories[index].model_copy(update={"title": title})

    # ── Lists ────────────────────────────────────────────────────

    def add_list_item(self, path: ListPath | str, item: BaseModel | dict | None = None) -> int:
        """Append *item* (or a blank entry) to a list.

        Returns:
            Index of the new element.
        """
        self._require_open()
        list_path = ListPath.parse(path)
        items = self._resolve(list_path)
        if item is None:
            new_item = BLANK_ITEMS[list_path.section].model_copy()
        else:
            new_item = self._coerce(list_path, item)
        items.append(new_item)
        return len(items) - 1

    def remove_list_item(self, path: ListPath | str, index: int) -> None:
        """Remove the element at *index*; later elements shift down."""
        self._require_open()
        list_path = ListPath.parse(path)
        items = self._resolve(list_path)
        self._check_index(items, index, str(list_path))
        del items[index]

    def update_list_item(self, path: ListPath | str, index: int, field: str, value: Any) -> None:
        """Replace one field of one list element."""
        self._require_open()
        list_path = ListPath.parse(path)
        items = self._resolve(list_path)
        self._check_index(items, index, str(list_path))

        model = list_path.item_model
        if field not in model.model_fields:
            allowed = ", ".join(model.model_fields)
            raise InvalidEdit(f"{list_path} items have no field {field!r} (expected: {allowed})")
        data = items[index].model_dump()
        data[field] = value
        items[index] = self._coerce(list_path, data)

    # ── Captions ─────────────────────────────────────────────────

    def fill_missing_captions(
        self,
        client: CaptionClient,
        on_progress: ProgressCallback | None = None,
    ) -> int:
        """Ask *client* for captions for every uncaptioned gallery image.

        Returns:
            Number of captions applied (0 if the session closed meanwhile).
        """
        self._require_open()
        before = list(self._working.gallery)
        filled = client.generate_missing_captions(before, on_progress=on_progress)
        if self._closed:
            logger.info("Session closed during caption generation, discarding results")
            return 0
        self._working.gallery = filled
        return sum(1 for old, new in zip(before, filled) if old.caption != new.caption)

    # ── Lifecycle ────────────────────────────────────────────────

    def discard(self) -> None:
        """Throw away all uncommitted edits."""
        self._working = self._baseline.model_copy(deep=True)

    def commit(self) -> ContentDocument:
        """Save the working copy as the new document.

        Returns:
            The committed document (a copy).

        Raises:
            SaveFailed: If the gateway rejected the save or a save is
                already running.  The working copy is left unchanged.
        """
        self._require_open()
        if self._committing:
            raise SaveFailed("a save is already in progress")
        self._committing = True
        try:
            snapshot = self._working.model_copy(deep=True)
            self._gateway.save(snapshot)
        finally:
            self._committing = False

        self._baseline = snapshot
        logger.info("Committed content changes")
        if self._on_commit is not None:
            self._on_commit(snapshot.model_copy(deep=True))
        return snapshot.model_copy(deep=True)

    # ── Private helpers ──────────────────────────────────────────

    def _menu_categories(self, menu: MenuSection) -> list[MenuCategory]:
        if menu is MenuSection.OVERVIEW:
            return self._working.menu.overview
        return self._working.menu.full_menu

    def _resolve(self, path: ListPath) -> list:
        doc = self._working
        if path.section is ListSection.EVENTS:
            return doc.events
        if path.section is ListSection.GALLERY:
            return doc.gallery
        if path.section is ListSection.TESTIMONIALS:
            return doc.testimonials
        if path.section is ListSection.TEAM:
            return doc.team
        categories = self._menu_categories(path.menu)  # type: ignore[arg-type]
        self._check_index(categories, path.category, f"menu.{path.menu}")  # type: ignore[arg-type]
        return categories[path.category].items  # type: ignore[index]

    @staticmethod
    def _check_index(items: list, index: int, label: str) -> None:
        if not isinstance(index, int) or isinstance(index, bool) or not 0 <= index < len(items):
            raise InvalidEdit(f"No element {index!r} in {label} ({len(items)} element(s))")

    @staticmethod
    def _coerce(path: ListPath, item: BaseModel | dict) -> BaseModel:
        model = path.item_model
        data = item.model_dump() if isinstance(item, BaseModel) else item
        try:
            return model.model_validate(data)
        except ValidationError as exc:
            raise InvalidEdit(f"Invalid {model.__name__} for {path}: {exc.error_count()} error(s)") from exc
