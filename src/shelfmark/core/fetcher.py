"""Fetch bibliographic data for an ISBN from Open Library."""

from __future__ import annotations

import asyncio
import os
import re
import time

import httpx
import structlog

from .classifier import subject_names
from .errors import NotFound, TransportFailure
from .isbn import normalize_isbn
from .models import BibliographicRecord, current_year as _current_year

log = structlog.get_logger()

# Open Library API compliance (https://openlibrary.org/developers/api)
# Identified requests get 3 req/s; unidentified get 1 req/s.
_OL_CONTACT = os.environ.get("OL_CONTACT_EMAIL", "")
_OL_USER_AGENT = f"Shelfmark/0.1.0 ({_OL_CONTACT})" if _OL_CONTACT else "Shelfmark/0.1.0"
_OL_MIN_INTERVAL = 0.35  # seconds between Open Library requests (~2.8 req/s, within 3 req/s limit)

OL_BASE_URL = os.environ.get("OPENLIBRARY_BASE_URL", "https://openlibrary.org")
LOOKUP_TIMEOUT = float(os.environ.get("LOOKUP_TIMEOUT", "10"))  # seconds

_YEAR = re.compile(r"[0-9]{4}")
MIN_PUBLISHED_YEAR = 1000


def _as_text(value: object) -> str:
    """Strings and numbers as text; anything else counts as absent."""
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return ""


def _as_list(value: object) -> list:
    return value if isinstance(value, list) else []


def extract_published_year(
    publish_date: str | None, current_year: int | None = None
) -> tuple[int, bool]:
    """Pull a year out of a free-text publish date.

    Returns (year, inferred). When no plausible 4-digit year is present the
    current year is returned with inferred=True.
    """
    if current_year is None:
        current_year = _current_year()
    if publish_date:
        match = _YEAR.search(publish_date)
        if match:
            year = int(match.group())
            if MIN_PUBLISHED_YEAR <= year <= current_year:
                return year, False
    return current_year, True


class BookFetcher:
    """Looks up a single ISBN against the Open Library Books API.

    One outbound request per lookup, no caching and no retries. A missing
    key is ``NotFound``; anything else that goes wrong is ``TransportFailure``.
    """

    def __init__(
        self,
        base_url: str = OL_BASE_URL,
        timeout: float = LOOKUP_TIMEOUT,
        min_interval: float = _OL_MIN_INTERVAL,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.min_interval = min_interval
        self.transport = transport
        self._ol_last_request: float = 0.0  # monotonic timestamp of last OL request
        self._throttle = asyncio.Lock()

    async def _ol_get(
        self, client: httpx.AsyncClient, url: str, **kwargs: object
    ) -> httpx.Response:
        """Rate-limited GET for Open Library endpoints.

        Enforces per-request throttling and sets the required User-Agent header.
        """
        kwargs.setdefault("timeout", self.timeout)
        kwargs.setdefault("headers", {})
        kwargs["headers"]["User-Agent"] = _OL_USER_AGENT  # type: ignore[index]
        kwargs["headers"]["Accept"] = "application/json"  # type: ignore[index]

        # Enforce minimum interval between OL requests, across concurrent lookups
        async with self._throttle:
            now = time.monotonic()
            elapsed = now - self._ol_last_request
            if elapsed < self.min_interval:
                await asyncio.sleep(self.min_interval - elapsed)
            self._ol_last_request = time.monotonic()

        return await client.get(url, **kwargs)

    async def fetch_record(
        self, client: httpx.AsyncClient, isbn: str
    ) -> BibliographicRecord:
        """Fetch and shape the Open Library entry for an ISBN."""
        isbn = normalize_isbn(isbn)
        bibkey = f"ISBN:{isbn}"
        url = f"{self.base_url}/api/books"
        params = {"bibkeys": bibkey, "format": "json", "jscmd": "data"}
        try:
            resp = await self._ol_get(client, url, params=params, follow_redirects=True)
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPError as e:
            log.warning("openlibrary_error", isbn=isbn, error=str(e))
            raise TransportFailure("Failed to fetch book information") from e
        except ValueError as e:
            log.warning("openlibrary_bad_payload", isbn=isbn, error=str(e))
            raise TransportFailure("Failed to fetch book information") from e

        entry = data.get(bibkey) if isinstance(data, dict) else None
        if not entry:
            log.debug("openlibrary_no_match", isbn=isbn)
            raise NotFound("Book not found. Please check the ISBN and try again.")
        if not isinstance(entry, dict):
            log.warning("openlibrary_bad_payload", isbn=isbn, entry_type=type(entry).__name__)
            raise TransportFailure("Failed to fetch book information")

        authors = []
        for author in _as_list(entry.get("authors")):
            name = author.get("name", "") if isinstance(author, dict) else ""
            if isinstance(name, str) and name:
                authors.append(name)

        publish_date = _as_text(entry.get("publish_date"))
        year, inferred = extract_published_year(publish_date)

        record = BibliographicRecord(
            isbn=isbn,
            title=_as_text(entry.get("title")),
            authors=authors,
            subjects=subject_names(_as_list(entry.get("subjects"))),
            publish_date=publish_date,
            published_year=year,
            year_inferred=inferred,
        )
        log.debug(
            "openlibrary_hit",
            isbn=isbn,
            title=record.title,
            authors=authors,
            subjects_count=len(record.subjects),
            year=year,
            year_inferred=inferred,
        )
        return record

    async def lookup(self, isbn: str) -> BibliographicRecord:
        """Look up one ISBN with a short-lived client.

        The whole lookup, throttle wait included, is bounded by ``timeout``.
        """
        try:
            async with asyncio.timeout(self.timeout):
                async with httpx.AsyncClient(transport=self.transport) as client:
                    return await self.fetch_record(client, isbn)
        except TimeoutError as e:
            log.warning("openlibrary_timeout", isbn=isbn, timeout=self.timeout)
            raise TransportFailure("Timed out fetching book information") from e
