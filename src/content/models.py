"""Content domain models — pure Pydantic v2 data types.

A single ContentDocument holds everything the site renders: hero copy,
about text, specials, both menus, events, gallery, testimonials, team,
house rules and contact details.  Every field is required so that a
partially persisted record fails validation instead of rendering half
a page.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class _Content(BaseModel):
    """Shared config: accept both attribute names and wire aliases."""

    model_config = ConfigDict(populate_by_name=True)


class Hero(_Content):
    """Hero banner.  ``title`` may embed inline HTML."""

    title: str
    subtitle: str


class MenuItem(_Content):
    """A dish or drink.  ``price`` is display text, not a number."""

    name: str
    price: str
    image: str | None = None


class MenuCategory(_Content):
    title: str
    items: list[MenuItem]


class Menu(_Content):
    """The short overview menu and the full menu."""

    overview: list[MenuCategory]
    full_menu: list[MenuCategory] = Field(alias="fullMenu")


class Event(_Content):
    image: str
    title: str
    date: str  # display string, never parsed
    description: str


class GalleryImage(_Content):
    """A gallery photo.  ``src`` is a remote URL or a ``data:`` URL."""

    src: str
    caption: str


class Testimonial(_Content):
    quote: str
    author: str
    location: str


class TeamMember(_Content):
    image: str
    name: str
    role: str
    bio: str


class Contact(_Content):
    address: str
    phone: str


class ContentDocument(_Content):
    """Root record for all editable site content.

    There is exactly one of these per site.  It is replaced wholesale on
    save; there is no per-field persistence.
    """

    hero: Hero
    about: str
    specials: str
    menu: Menu
    events: list[Event]
    gallery: list[GalleryImage]
    testimonials: list[Testimonial]
    team: list[TeamMember]
    rules: list[str]
    contact: Contact

    def to_payload(self) -> dict:
        """Serialize to the JSON-compatible wire form (camelCase keys)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    @classmethod
    def from_payload(cls, payload: object) -> ContentDocument:
        """Validate a wire-form payload.

        Raises pydantic.ValidationError if any field is missing or has
        the wrong shape.
        """
        return cls.model_validate(payload)
