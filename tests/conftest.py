import secrets
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from app.db.session import get_book_store
from app.main import create_app
from app.schemas.book import validate_candidate

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


class InMemoryBookStore:
    """Stand-in for BookStore keeping books in a list.

    Records every call in ``calls``. Set ``fail_with`` to an exception to
    make every operation raise it.
    """

    def __init__(self):
        self.books = []
        self.calls = []
        self.fail_with = None

    def _record(self, operation):
        self.calls.append(operation)
        if self.fail_with is not None:
            raise self.fail_with

    def find(self, sort_by, descending, skip, limit):
        self._record("find")
        present = [b for b in self.books if b.get(sort_by) is not None]
        absent = [b for b in self.books if b.get(sort_by) is None]
        ordered = sorted(present, key=lambda b: (b[sort_by], b["id"]), reverse=descending)
        # Neo4j orders missing values as the largest: last ascending, first descending
        ordered = absent + ordered if descending else ordered + absent
        return [dict(b) for b in ordered[skip:skip + limit]]

    def count(self):
        self._record("count")
        return len(self.books)

    def find_by_id(self, book_id):
        self._record("find_by_id")
        for book in self.books:
            if book["id"] == book_id:
                return dict(book)
        return None

    def insert_one(self, payload):
        self._record("insert_one")
        candidate = validate_candidate(payload)
        book = {
            "id": secrets.token_hex(12),
            **candidate.model_dump(),
            "createdAt": BASE_TIME + timedelta(minutes=len(self.books)),
        }
        self.books.append(book)
        return dict(book)


def make_book(title, author="Author", genre="Fiction", published="2000-01-01"):
    return {"title": title, "author": author, "genre": genre, "publishedDate": published}


@pytest.fixture
def store():
    """Provide an empty in-memory book store."""
    return InMemoryBookStore()


@pytest.fixture
def app(store):
    application = create_app()
    application.dependency_overrides[get_book_store] = lambda: store
    return application


@pytest.fixture
def client(app):
    """Provide a test client whose routes use the in-memory store."""
    return TestClient(app)
