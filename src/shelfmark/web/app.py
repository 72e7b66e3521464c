"""FastAPI REST surface for the Shelfmark catalog."""

from __future__ import annotations

import os
from datetime import datetime, timezone

from dotenv import load_dotenv

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ..core.errors import (
    CatalogError,
    Forbidden,
    InvalidIsbn,
    NotFound,
    TransportFailure,
    ValidationFailure,
)
from ..core.fetcher import BookFetcher
from ..core.models import draft_from_payload, to_payload
from ..core.query import FilterCriteria, search_admin
from ..core.service import CatalogService
from ..core.session import Role, Session
from ..core.store import HttpCatalogStore, InMemoryCatalogStore
from ..core.vocabulary import CATEGORIES

load_dotenv()

log = structlog.get_logger()

_STATUS_BY_ERROR: list[tuple[type[CatalogError], int]] = [
    (InvalidIsbn, 400),
    (ValidationFailure, 400),
    (Forbidden, 403),
    (NotFound, 404),
    (TransportFailure, 502),
]


def build_service() -> CatalogService:
    """Service wired from the environment."""
    api_url = os.environ.get("CATALOG_API_URL", "")
    store = HttpCatalogStore(api_url) if api_url else InMemoryCatalogStore()
    log.info("catalog_store_selected", store=type(store).__name__)
    return CatalogService(store, BookFetcher())


def _session(request: Request) -> Session:
    """Role arrives from the auth layer in front of this app."""
    token = None
    auth = request.headers.get("authorization", "")
    if auth.lower().startswith("bearer "):
        token = auth[7:].strip() or None
    return Session(role=Role.parse(request.headers.get("x-role")), token=token)


def _service(request: Request) -> CatalogService:
    return request.app.state.service


async def _json_object(request: Request) -> dict:
    try:
        body = await request.json()
    except ValueError as e:
        raise ValidationFailure("Request body must be valid JSON") from e
    if not isinstance(body, dict):
        raise ValidationFailure("Request body must be a JSON object")
    return body


app = FastAPI(title="Shelfmark", docs_url=None, redoc_url=None)
app.state.service = build_service()


@app.middleware("http")
async def security_headers(request: Request, call_next):
    response = await call_next(request)
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    return response


@app.exception_handler(CatalogError)
async def catalog_error(request: Request, exc: CatalogError):
    status = 500
    for error_type, code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            status = code
            break
    if status >= 500:
        log.warning("request_failed", path=request.url.path, error=exc.message)
    return JSONResponse({"error": exc.message}, status_code=status)


@app.get("/health")
async def health():
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": "0.1.0",
        "environment": os.environ.get("ENV", "dev"),
    }


@app.get("/api/categories")
async def categories():
    return {"categories": list(CATEGORIES)}


@app.get("/api/books")
async def list_books(
    request: Request,
    search: str | None = None,
    category: str | None = None,
    author: str | None = None,
    q: str | None = None,
):
    criteria = FilterCriteria(search=search, category=category, author=author)
    books = await _service(request).list_books(criteria, _session(request))
    if q:
        books = search_admin(books, q)
    return {"data": {"books": [to_payload(b) for b in books]}, "count": len(books)}


@app.get("/api/books/{book_id}")
async def get_book(request: Request, book_id: str):
    book = await _service(request).get_book(book_id, _session(request))
    payload = to_payload(book)
    payload["borrowedCopies"] = book.borrowed_copies
    payload["isAvailable"] = book.is_available
    return {"data": {"book": payload}}


@app.post("/api/books", status_code=201)
async def create_book(request: Request):
    body = await _json_object(request)
    draft = draft_from_payload(body).copy(id=None)
    book = await _service(request).submit(_session(request), draft)
    return {"data": {"book": to_payload(book)}}


@app.put("/api/books/{book_id}")
async def update_book(request: Request, book_id: str):
    body = await _json_object(request)
    draft = draft_from_payload(body).copy(id=book_id)
    book = await _service(request).submit(_session(request), draft)
    return {"data": {"book": to_payload(book)}}


@app.delete("/api/books/{book_id}")
async def delete_book(request: Request, book_id: str):
    await _service(request).delete_book(_session(request), book_id)
    return {"status": "ok"}


@app.post("/api/lookup")
async def lookup(request: Request):
    """Enrich a draft from Open Library by ISBN."""
    body = await _json_object(request)
    raw_isbn = str(body.get("isbn") or "")
    draft_body = body.get("draft") or {}
    if not isinstance(draft_body, dict):
        raise ValidationFailure("draft must be a JSON object")
    draft = draft_from_payload(draft_body)
    merged = await _service(request).enrich(_session(request), draft, raw_isbn)
    payload = to_payload(merged)
    payload["yearInferred"] = merged.year_inferred
    return {"data": {"book": payload}}


def main():
    port = int(os.environ.get("PORT", "8000"))
    is_dev = os.environ.get("ENV", "dev") == "dev"
    uvicorn.run(
        "shelfmark.web.app:app",
        host="0.0.0.0",
        port=port,
        reload=is_dev,
    )
