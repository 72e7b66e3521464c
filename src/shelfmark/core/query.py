"""In-memory search and filtering over catalog listings."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, TypeVar

T = TypeVar("T")


def _norm(s: str | None) -> str:
    return (s or "").lower()


@dataclass(frozen=True)
class FilterCriteria:
    """Listing filters. Empty values do not exclude anything.

    ``search`` matches title or author (the member-facing search box),
    ``category`` matches exactly, ``author`` matches author only (the admin
    "manage books" view).
    """

    search: str | None = None
    category: str | None = None
    author: str | None = None

    @property
    def is_empty(self) -> bool:
        return not (self.search or self.category or self.author)

    def as_params(self) -> dict[str, str]:
        """Non-empty criteria, in the shape the catalog store accepts."""
        params = {"search": self.search, "category": self.category, "author": self.author}
        return {k: v for k, v in params.items() if v}


def _matches(book: Any, criteria: FilterCriteria) -> bool:
    if criteria.search:
        needle = _norm(criteria.search)
        if needle not in _norm(book.title) and needle not in _norm(book.author):
            return False
    if criteria.category and book.category != criteria.category:
        return False
    if criteria.author and _norm(criteria.author) not in _norm(book.author):
        return False
    return True


def filter_books(
    records: Iterable[T],
    criteria: FilterCriteria | None = None,
    *,
    search: str | None = None,
    category: str | None = None,
    author: str | None = None,
) -> list[T]:
    """Return the records matching every supplied criterion, in input order.

    Keyword arguments are used when ``criteria`` is not given.
    """
    if criteria is None:
        criteria = FilterCriteria(search=search, category=category, author=author)
    if criteria.is_empty:
        return list(records)
    return [book for book in records if _matches(book, criteria)]


def search_admin(records: Iterable[T], query: str | None) -> list[T]:
    """Admin listing search over title, author (case-insensitive) and isbn."""
    if not query:
        return list(records)
    needle = _norm(query)
    return [
        book
        for book in records
        if needle in _norm(book.title)
        or needle in _norm(book.author)
        or query in (book.isbn or "")
    ]
