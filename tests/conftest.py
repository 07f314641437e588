"""Test configuration and fixtures for the bookstore API."""

import json

import pytest
from fastapi.testclient import TestClient

from bookstore.catalog.store import CatalogStore
from bookstore.main import create_app
from bookstore.settings import Settings

API_TOKEN = "test-token"
AUTH_HEADERS = {"Authorization": f"Bearer {API_TOKEN}"}

BOOKS = [
    {
        "id": "1",
        "title": "Alpha",
        "author": "Author A",
        "rating": 4.0,
        "reviewCount": 2,
        "inStock": True,
        "featured": True,
        "datePublished": "2020-03-01",
        "price": 12.5,
    },
    {
        "id": "2",
        "title": "Beta",
        "author": "Author B",
        "rating": 3.0,
        "reviewCount": 10,
        "inStock": True,
        "featured": "true",
        "datePublished": "2020-12-31",
    },
    {
        "id": "3",
        "title": "Gamma",
        "author": "Author C",
        "rating": 5.0,
        "reviewCount": 6,
        "inStock": False,
        "featured": False,
        "datePublished": "2021-01-01",
    },
    {
        "id": "4",
        "title": "Delta",
        "author": "Author D",
        "rating": 0,
        "reviewCount": 0,
        "inStock": True,
        "featured": False,
    },
]

REVIEWS = [
    {
        "id": "r1",
        "bookId": "1",
        "author": "Reader One",
        "rating": 4,
        "timestamp": "2024-01-01T00:00:00.000Z",
        "verified": True,
    },
    {
        "id": "r2",
        "bookId": "1",
        "author": "Reader Two",
        "rating": 4,
        "timestamp": "2024-01-02T00:00:00.000Z",
        "verified": False,
    },
    {
        "id": "r3",
        "bookId": "2",
        "author": "Reader Three",
        "rating": 3,
        "timestamp": "2024-01-03T00:00:00.000Z",
    },
]


def write_document(path, key, items):
    path.write_text(json.dumps({key: items}), encoding="utf-8")


def read_document(path, key):
    return json.loads(path.read_text(encoding="utf-8"))[key]


@pytest.fixture
def data_dir(tmp_path):
    write_document(tmp_path / "books.json", "books", BOOKS)
    write_document(tmp_path / "reviews.json", "reviews", REVIEWS)
    return tmp_path


@pytest.fixture
def settings(data_dir):
    return Settings(data_dir=data_dir, api_token=API_TOKEN, log_level="DEBUG")


@pytest.fixture
def store(settings):
    return CatalogStore.from_settings(settings)


@pytest.fixture(name="client")
def client_fixture(settings):
    """Create a test client over a fresh copy of the test data."""
    return TestClient(create_app(settings))
