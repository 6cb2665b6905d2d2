"""Operator editing of the content document."""

from generalis.editor.paths import ListPath, ListSection, MenuSection, ScalarField
from generalis.editor.session import EditableSession

__all__ = [
    "EditableSession",
    "ListPath",
    "ListSection",
    "MenuSection",
    "ScalarField",
]
