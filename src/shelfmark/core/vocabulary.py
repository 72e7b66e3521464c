"""Fixed category vocabulary shared by classification, validation and filtering."""

from __future__ import annotations

from enum import StrEnum


class Category(StrEnum):
    FICTION = "Fiction"
    NON_FICTION = "Non Fiction"
    SCIENCE = "Science"
    HISTORY = "History"
    TECHNOLOGY = "Technology"
    ARTS = "Arts"
    OTHERS = "Others"


CATEGORIES: tuple[str, ...] = tuple(c.value for c in Category)
DEFAULT_CATEGORY = Category.OTHERS


def is_category(value: object) -> bool:
    """Exact, case-sensitive membership test."""
    return isinstance(value, str) and value in CATEGORIES
