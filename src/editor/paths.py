"""Addresses for the fields and lists the editor may change.

The editor only touches a closed set of locations, each tied to a
schema type, so every edit can be validated against the schema.
"""

from __future__ import annotations

import re
from enum import StrEnum

from generalis.content.models import (
    Event,
    GalleryImage,
    MenuItem,
    TeamMember,
    Testimonial,
)
from generalis.errors import InvalidEdit
from pydantic import BaseModel, ConfigDict


class ScalarField(StrEnum):
    """Plain text fields replaced as a whole."""

    HERO_TITLE = "hero.title"
    HERO_SUBTITLE = "hero.subtitle"
    ABOUT = "about"
    SPECIALS = "specials"
    CONTACT_ADDRESS = "contact.address"
    CONTACT_PHONE = "contact.phone"

    @classmethod
    def parse(cls, value: str) -> ScalarField:
        try:
            return cls(value)
        except ValueError:
            allowed = ", ".join(f.value for f in cls)
            raise InvalidEdit(f"Unknown field {value!r} (expected one of: {allowed})") from None


class ListSection(StrEnum):
    EVENTS = "events"
    GALLERY = "gallery"
    TESTIMONIALS = "testimonials"
    TEAM = "team"
    MENU = "menu"


class MenuSection(StrEnum):
    OVERVIEW = "overview"
    FULL_MENU = "fullMenu"

    @classmethod
    def parse(cls, value: str) -> MenuSection:
        if value in ("full_menu", "full"):
            return cls.FULL_MENU
        try:
            return cls(value)
        except ValueError:
            raise InvalidEdit(f"Unknown menu {value!r} (expected overview or fullMenu)") from None


ITEM_MODELS: dict[ListSection, type[BaseModel]] = {
    ListSection.EVENTS: Event,
    ListSection.GALLERY: GalleryImage,
    ListSection.TESTIMONIALS: Testimonial,
    ListSection.TEAM: TeamMember,
    ListSection.MENU: MenuItem,
}

# Field holding the image reference, for lists whose items have one.
IMAGE_FIELDS: dict[ListSection, str] = {
    ListSection.EVENTS: "image",
    ListSection.GALLERY: "src",
    ListSection.TEAM: "image",
    ListSection.MENU: "image",
}

_MENU_PATH_RE = re.compile(r"^menu\.(?P<menu>overview|fullMenu|full_menu)(?:\[(?P<a>\d+)\]|\.(?P<b>\d+))\.items$")


class ListPath(BaseModel):
    """Location of an editable list.

    Top-level lists are addressed by name (``"gallery"``).  Menu item
    lists are addressed per category (``"menu.overview[0].items"``).
    """

    model_config = ConfigDict(frozen=True)

    section: ListSection
    menu: MenuSection | None = None
    category: int | None = None

    @classmethod
    def parse(cls, path: str | ListPath) -> ListPath:
        """Parse a path string.

        Raises:
            InvalidEdit: If the path does not name an editable list.
        """
        if isinstance(path, ListPath):
            return path
        text = str(path).strip()
        match = _MENU_PATH_RE.match(text)
        if match:
            category = int(match.group("a") or match.group("b"))
            return cls.menu_items(MenuSection.parse(match.group("menu")), category)
        try:
            section = ListSection(text)
        except ValueError:
            raise InvalidEdit(f"Unknown list {text!r}") from None
        if section is ListSection.MENU:
            raise InvalidEdit("Menu item lists need a category, e.g. 'menu.overview[0].items'")
        return cls(section=section)

    @classmethod
    def menu_items(cls, menu: MenuSection | str, category: int) -> ListPath:
        return cls(section=ListSection.MENU, menu=MenuSection.parse(str(menu)), category=category)

    @property
    def item_model(self) -> type[BaseModel]:
        return ITEM_MODELS[self.section]

    @property
    def image_field(self) -> str | None:
        return IMAGE_FIELDS.get(self.section)

    def __str__(self) -> str:
        if self.section is ListSection.MENU:
            return f"menu.{self.menu}[{self.category}].items"
        return self.section.value
