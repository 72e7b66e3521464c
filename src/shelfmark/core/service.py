"""Catalog operations: listing, ISBN enrichment and admin submission."""

from __future__ import annotations

import structlog

from .fetcher import BookFetcher
from .isbn import normalize_isbn
from .merge import merge_enrichment
from .models import BookRecord, DraftRecord
from .query import FilterCriteria, filter_books
from .session import Session, require_admin
from .store import CatalogStore
from .validation import validate_record

log = structlog.get_logger()


class CatalogService:
    """Ties the fetcher, merger, validator and store together.

    Role checks happen here; the store and the pure helpers know nothing
    about sessions.
    """

    def __init__(self, store: CatalogStore, fetcher: BookFetcher | None = None) -> None:
        self.store = store
        self.fetcher = fetcher or BookFetcher()

    def _store_for(self, session: Session) -> CatalogStore:
        with_session = getattr(self.store, "with_session", None)
        return with_session(session) if with_session else self.store

    async def list_books(
        self, criteria: FilterCriteria | None = None, session: Session | None = None
    ) -> list[BookRecord]:
        criteria = criteria or FilterCriteria()
        books = await self._store_for(session or Session.anonymous()).list(criteria)
        # Re-apply locally; remote stores may ignore some filters.
        return filter_books(books, criteria)

    async def get_book(self, book_id: str, session: Session | None = None) -> BookRecord:
        return await self._store_for(session or Session.anonymous()).get(book_id)

    async def enrich(self, session: Session, draft: DraftRecord, raw_isbn: str) -> DraftRecord:
        """Look up ``raw_isbn`` and merge the result into a copy of ``draft``."""
        require_admin(session)
        isbn = normalize_isbn(raw_isbn)
        external = await self.fetcher.lookup(isbn)
        merged = merge_enrichment(draft, external)
        if merged.year_inferred:
            log.info("published_year_inferred", isbn=isbn, publish_date=external.publish_date)
        return merged

    async def submit(self, session: Session, draft: DraftRecord) -> BookRecord:
        """Validate and persist a draft: create when new, update otherwise."""
        require_admin(session)
        validate_record(draft)
        store = self._store_for(session)
        if draft.is_new:
            book = await store.create(draft)
        else:
            book = await store.update(draft.id, draft)
        log.info("book_submitted", book_id=book.id, created=draft.is_new)
        return book

    async def delete_book(self, session: Session, book_id: str) -> None:
        require_admin(session)
        await self._store_for(session).delete(book_id)
