"""Gate for catalog records before create/update.

Checks run in a fixed order and stop at the first violation:

1. title and author are non-empty after trimming and within length limits
2. isbn is 10-13 digits with no separators
3. 0 <= available_copies <= total_copies and total_copies >= 1
4. 1000 <= published_year <= current year
5. category is in the fixed vocabulary

The reason strings are user-facing.
"""

from __future__ import annotations

from typing import Any

from .errors import ValidationFailure
from .isbn import is_normalized_isbn
from .models import current_year as _current_year
from .vocabulary import CATEGORIES, is_category

MAX_TITLE_LENGTH = 200
MAX_AUTHOR_LENGTH = 100
MIN_PUBLISHED_YEAR = 1000


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def validation_error(record: Any, current_year: int | None = None) -> str | None:
    """Return the reason for the first violated invariant, or None."""
    if current_year is None:
        current_year = _current_year()

    title = _text(record.title)
    if not title:
        return "Title is required"
    if len(title) > MAX_TITLE_LENGTH:
        return f"Title must be at most {MAX_TITLE_LENGTH} characters"
    author = _text(record.author)
    if not author:
        return "Author is required"
    if len(author) > MAX_AUTHOR_LENGTH:
        return f"Author must be at most {MAX_AUTHOR_LENGTH} characters"

    if not _text(record.isbn):
        return "ISBN is required"
    if not is_normalized_isbn(record.isbn):
        return "ISBN must be 10-13 digits"

    available, total = record.available_copies, record.total_copies
    if not _is_int(available) or available < 0:
        return "Available copies cannot be negative"
    if not _is_int(total) or total < 1:
        return "Total copies must be at least 1"
    if available > total:
        return "Available copies cannot exceed total copies"

    year = record.published_year
    if not _is_int(year) or not MIN_PUBLISHED_YEAR <= year <= current_year:
        return "Published year must be valid"

    if not is_category(record.category):
        return f"Category must be one of: {', '.join(CATEGORIES)}"
    return None


def validate_record(record: Any, current_year: int | None = None) -> None:
    """Raise ValidationFailure unless every invariant holds."""
    reason = validation_error(record, current_year=current_year)
    if reason is not None:
        raise ValidationFailure(reason)


def is_valid(record: Any, current_year: int | None = None) -> bool:
    return validation_error(record, current_year=current_year) is None
