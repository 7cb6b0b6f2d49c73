"""Pytest configuration and fixtures"""
import pytest
from fastapi.testclient import TestClient

from storefront.cart.store import CartStore
from storefront.catalog.client import BookNotFound, CatalogError
from storefront.catalog.schemas import Book
from storefront.config import Settings
from storefront.main import create_app


def make_book(book_id, price, **extra):
    data = {
        "id": book_id,
        "title": f"Book {book_id}",
        "author": "Some Author",
        "short_description": "A short description",
        "description": "A longer description",
        "image": f"https://img.test/{book_id}.jpg",
        "price": price,
        "rating": 4.0,
    }
    data.update(extra)
    return Book(**data)


class FakeCatalog:
    """In-memory stand-in for CatalogClient that records its calls."""

    def __init__(self, books):
        self.books = {b.id: b for b in books}
        self.list_calls = []
        self.one_calls = []
        self.error = None

    def fetch_list(self, params=None):
        params = dict(params or {})
        self.list_calls.append(params)
        if self.error:
            raise CatalogError(self.error)
        books = list(self.books.values())
        if params.get("featured") == "true":
            books = [b for b in books if b.featured]
        if params.get("search"):
            needle = params["search"].lower()
            books = [b for b in books if needle in b.title.lower()]
        if params.get("limit"):
            books = books[: int(params["limit"])]
        return books

    def fetch_one(self, book_id):
        self.one_calls.append(book_id)
        if self.error:
            raise CatalogError(self.error)
        if book_id not in self.books:
            raise BookNotFound(f"Book {book_id} not found")
        return self.books[book_id]


@pytest.fixture
def book_a():
    return make_book("a", 10.00, title="Alpha", featured=True)


@pytest.fixture
def book_b():
    return make_book("b", 7.50, title="Beta")


@pytest.fixture
def dune():
    return make_book("dune", 19.99, title="Dune", author="Frank Herbert", featured=True)


@pytest.fixture
def catalog(book_a, book_b, dune):
    return FakeCatalog([book_a, book_b, dune])


@pytest.fixture
def cart_file(tmp_path):
    return tmp_path / "storage" / "cart.json"


@pytest.fixture
def store(cart_file):
    return CartStore(cart_file)


@pytest.fixture
def settings(cart_file):
    return Settings(backend_url="http://backend.test", cart_file=cart_file)


@pytest.fixture
def app(settings, catalog):
    return create_app(settings, catalog_client=catalog)


@pytest.fixture
def client(app):
    """Test client"""
    return TestClient(app)
