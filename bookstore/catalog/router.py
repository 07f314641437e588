"""
Route definitions for the catalogue API.

Endpoints under /api/books:
- GET  /                    : every book
- GET  /featured            : books flagged as featured
- GET  /top-rated           : ten best books by rating * review count
- GET  /dates/{start}/{end} : books published between two dates
- GET  /{book_id}           : one book
- POST /                    : add a book (bearer token)

Endpoints under /api/reviews:
- GET  /book/{book_id}      : reviews for a book
- POST /                    : add a review (bearer token)

The fixed paths are declared before ``/{book_id}`` so they are not
captured as book ids.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Request
from starlette.concurrency import run_in_threadpool

from .deps import get_store, require_token
from .errors import ValidationError
from .schemas import (
    BookCreated,
    BookDetail,
    BookList,
    BookReviews,
    DatedBookList,
    DateRange,
    RankedBookList,
    ReviewCreated,
)
from .store import CatalogStore

books_router = APIRouter(prefix="/api/books", tags=["books"])
reviews_router = APIRouter(prefix="/api/reviews", tags=["reviews"])


async def _read_object(request: Request) -> dict:
    """Decode the request body, which must be a JSON object.

    Called from the endpoint body so the token dependency has already
    run; a bad body never masks a missing token.
    """
    try:
        payload: Any = await request.json()
    except ValueError:
        raise ValidationError("Invalid request body")
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return payload


@books_router.get("", response_model=BookList)
def list_books(store: CatalogStore = Depends(get_store)) -> BookList:
    books = store.list_books()
    return BookList(count=len(books), data=books)


@books_router.get("/featured", response_model=BookList)
def list_featured(store: CatalogStore = Depends(get_store)) -> BookList:
    books = store.featured_books()
    return BookList(count=len(books), data=books)


@books_router.get("/top-rated", response_model=RankedBookList)
def list_top_rated(store: CatalogStore = Depends(get_store)) -> RankedBookList:
    books = store.top_rated()
    return RankedBookList(count=len(books), data=books)


@books_router.get("/dates/{start}/{end}", response_model=DatedBookList)
def list_by_date_range(
    start: str, end: str, store: CatalogStore = Depends(get_store)
) -> DatedBookList:
    books = store.books_published_between(start, end)
    return DatedBookList(
        count=len(books), date_range=DateRange(start=start, end=end), data=books
    )


@books_router.get("/{book_id}", response_model=BookDetail)
def get_book(book_id: str, store: CatalogStore = Depends(get_store)) -> BookDetail:
    return BookDetail(data=store.get_book(book_id))


@books_router.post(
    "",
    response_model=BookCreated,
    status_code=201,
    dependencies=[Depends(require_token)],
)
async def add_book(
    request: Request, store: CatalogStore = Depends(get_store)
) -> BookCreated:
    payload = await _read_object(request)
    book = await run_in_threadpool(store.add_book, payload)
    return BookCreated(data=book)


@reviews_router.get("/book/{book_id}", response_model=BookReviews)
def list_reviews_for_book(
    book_id: str, store: CatalogStore = Depends(get_store)
) -> BookReviews:
    book, reviews = store.reviews_for_book(book_id)
    return BookReviews(book=book, count=len(reviews), data=reviews)


@reviews_router.post(
    "",
    response_model=ReviewCreated,
    status_code=201,
    dependencies=[Depends(require_token)],
)
async def add_review(
    request: Request, store: CatalogStore = Depends(get_store)
) -> ReviewCreated:
    payload = await _read_object(request)
    review = await run_in_threadpool(store.add_review, payload)
    return ReviewCreated(data=review)
