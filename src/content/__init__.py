"""Content domain: the site's single editable document.

Exposes the ContentDocument schema and the built-in default document
served whenever nothing usable has been persisted.
"""

from generalis.content.defaults import DEFAULT_CONTENT, default_content
from generalis.content.models import (
    Contact,
    ContentDocument,
    Event,
    GalleryImage,
    Hero,
    Menu,
    MenuCategory,
    MenuItem,
    TeamMember,
    Testimonial,
)

__all__ = [
    "DEFAULT_CONTENT",
    "Contact",
    "ContentDocument",
    "Event",
    "GalleryImage",
    "Hero",
    "Menu",
    "MenuCategory",
    "MenuItem",
    "TeamMember",
    "Testimonial",
    "default_content",
]
