"""Data models for catalog records and external bibliographic data."""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from datetime import date
from typing import Any

from .errors import ValidationFailure
from .vocabulary import DEFAULT_CATEGORY


def current_year() -> int:
    return date.today().year


@dataclass(frozen=True)
class BookRecord:
    """A persisted catalog entry. Owned by the catalog store."""

    id: str
    title: str
    author: str
    isbn: str
    category: str = DEFAULT_CATEGORY
    published_year: int = 0
    total_copies: int = 1
    available_copies: int = 0

    @property
    def is_available(self) -> bool:
        return self.available_copies > 0

    @property
    def borrowed_copies(self) -> int:
        return self.total_copies - self.available_copies

    @property
    def availability_ratio(self) -> float:
        if self.total_copies <= 0:
            return 0.0
        return self.available_copies / self.total_copies


@dataclass
class DraftRecord:
    """A book record under admin edit.

    New drafts have no ``id``; drafts hydrated from a stored record carry it,
    and from then on ``isbn`` is read-only through ``set_field``.
    """

    title: str = ""
    author: str = ""
    isbn: str = ""
    category: str = DEFAULT_CATEGORY
    published_year: int = field(default_factory=current_year)
    total_copies: int = 1
    available_copies: int = 0
    id: str | None = None
    year_inferred: bool = False

    @classmethod
    def new(cls) -> DraftRecord:
        return cls()

    @classmethod
    def from_record(cls, book: BookRecord) -> DraftRecord:
        return cls(
            id=book.id,
            title=book.title,
            author=book.author,
            isbn=book.isbn,
            category=book.category,
            published_year=book.published_year,
            total_copies=book.total_copies,
            available_copies=book.available_copies,
        )

    @property
    def is_new(self) -> bool:
        return self.id is None

    @property
    def isbn_editable(self) -> bool:
        return self.is_new

    def set_field(self, name: str, value: Any) -> None:
        if name in ("id", "year_inferred") or name not in _DRAFT_FIELDS:
            raise ValueError(f"Unknown or read-only field: {name}")
        if name == "isbn" and not self.isbn_editable and value != self.isbn:
            raise ValidationFailure("ISBN cannot be changed")
        setattr(self, name, value)
        if name == "published_year":
            self.year_inferred = False

    def copy(self, **changes: Any) -> DraftRecord:
        return replace(self, **changes)

    def to_record(self, book_id: str) -> BookRecord:
        return BookRecord(
            id=book_id,
            title=self.title.strip(),
            author=self.author.strip(),
            isbn=self.isbn,
            category=self.category,
            published_year=self.published_year,
            total_copies=self.total_copies,
            available_copies=self.available_copies,
        )


_DRAFT_FIELDS = {f.name for f in fields(DraftRecord)}


@dataclass(frozen=True)
class BibliographicRecord:
    """Read-only result of an external ISBN lookup. Has no inventory."""

    isbn: str
    title: str = ""
    authors: list[str] = field(default_factory=list)
    subjects: list[str] = field(default_factory=list)
    publish_date: str = ""
    published_year: int | None = None
    year_inferred: bool = False


# REST payload keys, as used by the catalog backend.
_PAYLOAD_KEYS = {
    "title": "title",
    "author": "author",
    "isbn": "isbn",
    "category": "category",
    "published_year": "publishedYear",
    "total_copies": "totalCopies",
    "available_copies": "availableCopies",
}


def to_payload(record: BookRecord | DraftRecord) -> dict[str, Any]:
    """Serialize a record to the backend's camelCase JSON shape."""
    payload = {key: getattr(record, attr) for attr, key in _PAYLOAD_KEYS.items()}
    payload["category"] = str(record.category)
    if record.id is not None:
        payload["_id"] = record.id
    return payload


def _int_or(value: Any, default: int) -> int:
    if isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def draft_from_payload(data: dict[str, Any]) -> DraftRecord:
    """Build a draft from a JSON body.

    Missing keys take the empty-form defaults. Numeric values that are present
    are kept as sent, so a malformed count or year reaches the validator
    instead of being coerced.
    """
    draft = DraftRecord()
    return draft.copy(
        id=data.get("_id") or data.get("id") or None,
        title=str(data.get("title") or ""),
        author=str(data.get("author") or ""),
        isbn=str(data.get("isbn") or ""),
        category=str(data.get("category") or DEFAULT_CATEGORY),
        published_year=data.get("publishedYear", draft.published_year),
        total_copies=data.get("totalCopies", draft.total_copies),
        available_copies=data.get("availableCopies", draft.available_copies),
        year_inferred=bool(data.get("yearInferred", False)),
    )


def record_from_payload(data: dict[str, Any]) -> BookRecord:
    """Build a stored record from the backend's JSON shape."""
    return BookRecord(
        id=str(data.get("_id") or data.get("id") or ""),
        title=str(data.get("title") or ""),
        author=str(data.get("author") or ""),
        isbn=str(data.get("isbn") or ""),
        category=str(data.get("category") or DEFAULT_CATEGORY),
        published_year=_int_or(data.get("publishedYear"), 0),
        total_copies=_int_or(data.get("totalCopies"), 1),
        available_copies=_int_or(data.get("availableCopies"), 0),
    )
