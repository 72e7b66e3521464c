"""Catalog store collaborators: an in-memory store and a REST client."""

from __future__ import annotations

import asyncio
import uuid
from typing import Any, Protocol

import httpx
import structlog

from .errors import NotFound, TransportFailure, ValidationFailure
from .models import BookRecord, DraftRecord, record_from_payload, to_payload
from .query import FilterCriteria, filter_books
from .session import Session
from .validation import validate_record

log = structlog.get_logger()


class CatalogStore(Protocol):
    async def list(self, criteria: FilterCriteria | None = None) -> list[BookRecord]: ...

    async def get(self, book_id: str) -> BookRecord: ...

    async def create(self, draft: DraftRecord) -> BookRecord: ...

    async def update(self, book_id: str, draft: DraftRecord) -> BookRecord: ...

    async def delete(self, book_id: str) -> None: ...


class InMemoryCatalogStore:
    """Dict-backed store. Updates are last-write-wins."""

    def __init__(self, books: list[BookRecord] | None = None) -> None:
        self._books: dict[str, BookRecord] = {b.id: b for b in books or []}

    def __len__(self) -> int:
        return len(self._books)

    async def list(self, criteria: FilterCriteria | None = None) -> list[BookRecord]:
        return filter_books(self._books.values(), criteria)

    async def get(self, book_id: str) -> BookRecord:
        book = self._books.get(book_id)
        if book is None:
            raise NotFound("Book not found")
        return book

    async def create(self, draft: DraftRecord) -> BookRecord:
        validate_record(draft)
        book = draft.to_record(uuid.uuid4().hex[:12])
        self._books[book.id] = book
        log.info("book_created", book_id=book.id, isbn=book.isbn)
        return book

    async def update(self, book_id: str, draft: DraftRecord) -> BookRecord:
        existing = await self.get(book_id)
        if draft.isbn != existing.isbn:
            raise ValidationFailure("ISBN cannot be changed")
        validate_record(draft)
        book = draft.to_record(book_id)
        self._books[book_id] = book
        log.info("book_updated", book_id=book_id)
        return book

    async def delete(self, book_id: str) -> None:
        if self._books.pop(book_id, None) is None:
            raise NotFound("Book not found")
        log.info("book_deleted", book_id=book_id)


def _error_message(resp: httpx.Response, default: str) -> str:
    try:
        body = resp.json()
    except ValueError:
        return default
    if not isinstance(body, dict):
        return default
    if body.get("message"):
        return str(body["message"])
    errors = body.get("errors")
    if isinstance(errors, list) and errors:
        return ", ".join(str(e) for e in errors)
    return default


class HttpCatalogStore:
    """Client for the catalog REST backend (``/books`` resource).

    Responses wrap results as ``{"data": {"books": [...]}}`` or
    ``{"data": {"book": {...}}}``.
    """

    def __init__(
        self,
        base_url: str,
        session: Session | None = None,
        timeout: float = 10,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.session = session or Session.anonymous()
        self.timeout = timeout
        self.transport = transport

    def with_session(self, session: Session) -> HttpCatalogStore:
        return HttpCatalogStore(self.base_url, session, self.timeout, self.transport)

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.session.token:
            headers["Authorization"] = f"Bearer {self.session.token}"
        return headers

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        url = f"{self.base_url}{path}"
        try:
            async with asyncio.timeout(self.timeout):
                async with httpx.AsyncClient(transport=self.transport) as client:
                    resp = await client.request(
                        method, url, headers=self._headers(), timeout=self.timeout, **kwargs
                    )
        except httpx.HTTPError as e:
            log.warning("catalog_api_error", method=method, path=path, error=str(e))
            raise TransportFailure("Catalog service unavailable") from e
        except TimeoutError as e:
            log.warning("catalog_api_timeout", method=method, path=path, timeout=self.timeout)
            raise TransportFailure("Catalog service timed out") from e

        if resp.status_code == 404:
            raise NotFound(_error_message(resp, "Book not found"))
        if resp.status_code in (400, 422):
            raise ValidationFailure(_error_message(resp, "Invalid book data"))
        if resp.is_error:
            log.warning("catalog_api_status", method=method, path=path, status=resp.status_code)
            raise TransportFailure(_error_message(resp, "Failed to save book. Please try again."))
        if not resp.content:
            return {}
        try:
            return resp.json()
        except ValueError as e:
            raise TransportFailure("Catalog service returned invalid JSON") from e

    @staticmethod
    def _data(body: Any) -> dict:
        data = body.get("data") if isinstance(body, dict) else None
        return data if isinstance(data, dict) else {}

    async def list(self, criteria: FilterCriteria | None = None) -> list[BookRecord]:
        params = criteria.as_params() if criteria else {}
        body = await self._request("GET", "/books", params=params)
        return [record_from_payload(b) for b in self._data(body).get("books") or []]

    async def get(self, book_id: str) -> BookRecord:
        body = await self._request("GET", f"/books/{book_id}")
        book = self._data(body).get("book")
        if not book:
            raise NotFound("Book not found")
        return record_from_payload(book)

    async def create(self, draft: DraftRecord) -> BookRecord:
        payload = to_payload(draft)
        payload.pop("_id", None)
        body = await self._request("POST", "/books", json=payload)
        book = self._data(body).get("book")
        if book:
            return record_from_payload(book)
        return draft.to_record("")

    async def update(self, book_id: str, draft: DraftRecord) -> BookRecord:
        payload = to_payload(draft)
        payload.pop("_id", None)
        body = await self._request("PUT", f"/books/{book_id}", json=payload)
        book = self._data(body).get("book")
        if book:
            return record_from_payload(book)
        return draft.to_record(book_id)

    async def delete(self, book_id: str) -> None:
        await self._request("DELETE", f"/books/{book_id}")
