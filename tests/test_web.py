"""
REST surface tests using FastAPI's TestClient.
"""

import pytest
from fastapi.testclient import TestClient

from shelfmark.core.fetcher import BookFetcher
from shelfmark.core.service import CatalogService
from shelfmark.core.store import InMemoryCatalogStore
from shelfmark.web.app import app

ADMIN = {"X-Role": "admin"}
ISBN = "9780441013593"


@pytest.fixture
def client(openlibrary, books):
    transport, _ = openlibrary({f"ISBN:{ISBN}": {
        "title": "Dune",
        "authors": [{"name": "Frank Herbert"}],
        "subjects": ["Science fiction"],
        "publish_date": "sometime",
    }})
    fetcher = BookFetcher(base_url="https://ol.test", min_interval=0, transport=transport)
    previous = app.state.service
    app.state.service = CatalogService(InMemoryCatalogStore(books), fetcher)
    yield TestClient(app)
    app.state.service = previous


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"
    assert resp.headers["X-Frame-Options"] == "DENY"


def test_categories(client):
    assert client.get("/api/categories").json()["categories"][-1] == "Others"


def test_list_with_filters(client):
    body = client.get("/api/books", params={"search": "e", "category": "Fiction"}).json()
    assert [b["title"] for b in body["data"]["books"]] == ["Emma"]
    body = client.get("/api/books", params={"q": "0141"}).json()
    assert body["count"] == 1


def test_get_book(client):
    book = client.get("/api/books/b1").json()["data"]["book"]
    assert book["borrowedCopies"] == 2
    assert book["isAvailable"] is True
    assert client.get("/api/books/zzz").status_code == 404


def test_create_requires_admin(client):
    payload = {"title": "New", "author": "A", "isbn": "1234567890", "category": "Arts",
               "publishedYear": 2000, "totalCopies": 1, "availableCopies": 1}
    assert client.post("/api/books", json=payload).status_code == 403
    resp = client.post("/api/books", json=payload, headers=ADMIN)
    assert resp.status_code == 201
    assert resp.json()["data"]["book"]["_id"]


def test_create_invalid(client):
    resp = client.post("/api/books", json={"title": "", "author": "A"}, headers=ADMIN)
    assert resp.status_code == 400
    assert resp.json() == {"error": "Title is required"}


def test_update_cannot_change_isbn(client):
    book = client.get("/api/books/b1").json()["data"]["book"]
    book["isbn"] = "1234567890"
    resp = client.put("/api/books/b1", json=book, headers=ADMIN)
    assert resp.status_code == 400
    assert resp.json()["error"] == "ISBN cannot be changed"


def test_update_and_delete(client):
    book = client.get("/api/books/b1").json()["data"]["book"]
    book["availableCopies"] = 0
    assert client.put("/api/books/b1", json=book, headers=ADMIN).status_code == 200
    assert client.get("/api/books/b1").json()["data"]["book"]["availableCopies"] == 0
    assert client.delete("/api/books/b1", headers=ADMIN).json() == {"status": "ok"}
    assert client.delete("/api/books/b1", headers=ADMIN).status_code == 404


def test_lookup_merges_into_draft(client):
    draft = {"title": "", "totalCopies": 4, "availableCopies": 2}
    resp = client.post("/api/lookup", json={"isbn": "978-0441013593", "draft": draft},
                       headers=ADMIN)
    assert resp.status_code == 200
    book = resp.json()["data"]["book"]
    assert book["title"] == "Dune"
    assert book["author"] == "Frank Herbert"
    assert book["category"] == "Fiction"
    assert (book["totalCopies"], book["availableCopies"]) == (4, 2)
    assert book["yearInferred"] is True


def test_lookup_errors(client):
    assert client.post("/api/lookup", json={"isbn": "12"}, headers=ADMIN).status_code == 400
    assert client.post("/api/lookup", json={"isbn": "1234567890"},
                       headers=ADMIN).status_code == 404
    assert client.post("/api/lookup", json={"isbn": ISBN}).status_code == 403


def test_create_rejects_malformed_numbers(client):
    payload = {"title": "New", "author": "A", "isbn": "1234567890", "category": "Arts",
               "publishedYear": "not a year", "totalCopies": 2.9, "availableCopies": None}
    resp = client.post("/api/books", json=payload, headers=ADMIN)
    assert resp.status_code == 400
    assert resp.json() == {"error": "Available copies cannot be negative"}

    payload["availableCopies"] = 1
    resp = client.post("/api/books", json=payload, headers=ADMIN)
    assert resp.json() == {"error": "Total copies must be at least 1"}

    payload["totalCopies"] = 2
    resp = client.post("/api/books", json=payload, headers=ADMIN)
    assert resp.json() == {"error": "Published year must be valid"}
    assert client.get("/api/books").json()["count"] == 2


@pytest.mark.parametrize("method, path", [
    ("POST", "/api/books"),
    ("PUT", "/api/books/b1"),
    ("POST", "/api/lookup"),
])
def test_non_object_body_is_bad_request(client, method, path):
    resp = client.request(method, path, json=["x"], headers=ADMIN)
    assert resp.status_code == 400
    assert resp.json() == {"error": "Request body must be a JSON object"}

    resp = client.request(method, path, content=b"{not json",
                          headers={**ADMIN, "content-type": "application/json"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Request body must be valid JSON"}


def test_lookup_rejects_non_object_draft(client):
    resp = client.post("/api/lookup", json={"isbn": ISBN, "draft": "x"}, headers=ADMIN)
    assert resp.status_code == 400
    assert resp.json() == {"error": "draft must be a JSON object"}
