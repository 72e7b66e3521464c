"""
Shared fixtures for catalog tests.

Open Library and the catalog backend are replaced with httpx.MockTransport,
so no test touches the network.
"""

import json

import httpx
import pytest

from shelfmark.core.models import BookRecord, DraftRecord


@pytest.fixture
def books():
    """Two-book listing used by filter tests."""
    return [
        BookRecord(id="b1", title="Dune", author="Herbert", isbn="9780441013593",
                   category="Science", published_year=1965, total_copies=3, available_copies=1),
        BookRecord(id="b2", title="Emma", author="Austen", isbn="9780141439587",
                   category="Fiction", published_year=1815, total_copies=2, available_copies=0),
    ]


@pytest.fixture
def draft():
    """Admin-entered draft with inventory counts already filled in."""
    return DraftRecord(
        title="Working title",
        author="Someone",
        isbn="",
        category="Others",
        published_year=2001,
        total_copies=5,
        available_copies=3,
    )


@pytest.fixture
def openlibrary():
    """Factory for a MockTransport answering Books API requests.

    Returns (transport, requests) where requests collects every request made.
    """
    def make(body=None, status=200, exc=None):
        requests = []

        def handler(request):
            requests.append(request)
            if exc is not None:
                raise exc
            content = body if isinstance(body, (bytes, str)) else json.dumps(body or {})
            return httpx.Response(status, content=content,
                                  headers={"content-type": "application/json"})

        return httpx.MockTransport(handler), requests

    return make
