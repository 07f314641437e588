"""
In-memory data store for the catalogue API.

``CatalogStore`` owns the book and review collections for the lifetime
of the process. Collections are loaded from their JSON documents at
startup (see ``bookstore.storage``) and written back after every
successful mutation. Insertion order is preserved and is the order in
which listings are returned.

All access goes through a single re-entrant lock, so concurrent
requests served from FastAPI's threadpool see a consistent view and
review additions never race on a book's ``rating``/``review_count``.
Read methods return copies; callers cannot mutate the stored entities.

When persisting a mutation fails, the in-memory change is reverted
before ``PersistenceError`` is raised, so memory and disk stay in step.
"""

from __future__ import annotations

import logging
import math
import threading
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError as PydanticValidationError

from ..settings import Settings
from ..storage import load_document, save_document
from .errors import Conflict, NotFound, PersistenceError, ValidationError
from .schemas import Book, BookSummary, RankedBook, Review

logger = logging.getLogger(__name__)

TOP_RATED_LIMIT = 10

BOOK_DEFAULTS: Dict[str, Any] = {
    "rating": 0,
    "reviewCount": 0,
    "inStock": True,
    "featured": False,
}

MIN_REVIEW_RATING = 1
MAX_REVIEW_RATING = 5


def _round_half_up(value: float, places: str) -> float:
    """Round ``value`` half-up to the precision given by ``places``.

    ``places`` is a Decimal exponent such as ``"0.1"`` or ``"0.01"``.
    Going through ``str`` keeps float artefacts (``4.35`` stored as
    ``4.3499...``) from rounding the wrong way.
    """
    return float(Decimal(str(value)).quantize(Decimal(places), rounding=ROUND_HALF_UP))


def _missing(payload: Dict[str, Any], *fields: str) -> List[str]:
    return [f for f in fields if payload.get(f) is None or payload.get(f) == ""]


def _parse_review_rating(value: Any) -> float:
    """Validate a review rating: a real number between 1 and 5 inclusive.

    Numeric strings such as ``"4"`` are accepted. Booleans, NaN and
    anything outside the range are rejected with ``ValidationError``.
    """
    if isinstance(value, bool):
        raise ValidationError("Rating must be a number between 1 and 5")
    try:
        rating = float(value)
    except (TypeError, ValueError):
        raise ValidationError("Rating must be a number between 1 and 5")
    if math.isnan(rating) or not MIN_REVIEW_RATING <= rating <= MAX_REVIEW_RATING:
        raise ValidationError("Rating must be a number between 1 and 5")
    return rating


def _utc_timestamp() -> str:
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _dump(entity: Any) -> Dict[str, Any]:
    return entity.model_dump(mode="json", by_alias=True)


def _parse_collection(model, raw: List[Dict[str, Any]], source: Path) -> List[Any]:
    try:
        return [model.model_validate(entry) for entry in raw]
    except (PydanticValidationError, TypeError) as exc:
        logger.warning("Invalid entry in %s, starting empty: %s", source, exc)
        return []


class CatalogStore:
    """Books and reviews held in memory and mirrored to JSON documents."""

    def __init__(
        self,
        books: List[Book],
        reviews: List[Review],
        books_path: Path,
        reviews_path: Path,
    ) -> None:
        self._books = list(books)
        self._reviews = list(reviews)
        self.books_path = books_path
        self.reviews_path = reviews_path
        self._lock = threading.RLock()

    @classmethod
    def load(cls, books_path: Path, reviews_path: Path) -> "CatalogStore":
        """Build a store from the two documents, degrading to empty collections."""
        books = _parse_collection(Book, load_document(books_path, "books"), books_path)
        reviews = _parse_collection(
            Review, load_document(reviews_path, "reviews"), reviews_path
        )
        logger.info("Loaded %d books and %d reviews", len(books), len(reviews))
        return cls(books, reviews, books_path, reviews_path)

    @classmethod
    def from_settings(cls, settings: Settings) -> "CatalogStore":
        return cls.load(settings.books_path, settings.reviews_path)

    # ------------------------------------------------------------------
    # Book queries

    def list_books(self) -> List[Book]:
        with self._lock:
            return [b.model_copy() for b in self._books]

    def featured_books(self) -> List[Book]:
        with self._lock:
            return [b.model_copy() for b in self._books if b.featured is True]

    def top_rated(self, limit: int = TOP_RATED_LIMIT) -> List[RankedBook]:
        """Return up to ``limit`` books ranked by ``rating * review_count``.

        ``sorted`` is stable, so books with equal scores keep their
        collection order.
        """
        with self._lock:
            ranked = [
                RankedBook(
                    **b.model_dump(),
                    weighted_score=_round_half_up((b.rating or 0) * b.review_count, "0.01"),
                )
                for b in self._books
            ]
        ranked = sorted(ranked, key=lambda b: b.weighted_score, reverse=True)
        return ranked[:limit]

    def books_published_between(self, start: str, end: str) -> List[Book]:
        """Books whose ``date_published`` lies in ``[start, end]``.

        Dates are compared as strings; no parsing is done, so malformed
        bounds simply match nothing (or whatever sorts between them).
        """
        with self._lock:
            return [
                b.model_copy()
                for b in self._books
                if isinstance(b.date_published, str) and start <= b.date_published <= end
            ]

    def get_book(self, book_id: str) -> Book:
        with self._lock:
            book = self._find_book(book_id)
            if book is None:
                raise NotFound("Book not found")
            return book.model_copy()

    # ------------------------------------------------------------------
    # Review queries

    def reviews_for_book(self, book_id: str) -> Tuple[BookSummary, List[Review]]:
        """Return the book summary and its reviews, in insertion order."""
        with self._lock:
            book = self._find_book(book_id)
            if book is None:
                raise NotFound("Book not found")
            summary = BookSummary(id=book.id, title=book.title, author=book.author)
            reviews = [r.model_copy() for r in self._reviews if r.book_id == book_id]
        return summary, reviews

    # ------------------------------------------------------------------
    # Mutations

    def add_book(self, payload: Dict[str, Any]) -> Book:
        """Create a book from a client payload and persist the collection.

        Raises ``ValidationError`` when ``id``, ``title`` or ``author`` is
        missing or a field has the wrong type, ``Conflict`` when the id is
        taken and ``PersistenceError`` when the write fails.
        """
        missing = _missing(payload, "id", "title", "author")
        if missing:
            raise ValidationError("Missing required fields: id, title, author")

        try:
            book = Book.model_validate({**BOOK_DEFAULTS, **payload})
        except PydanticValidationError as exc:
            raise ValidationError(_describe(exc, "book"))

        with self._lock:
            if self._find_book(book.id) is not None:
                raise Conflict("Book with this ID already exists")

            self._books.append(book)
            if not self._save_books():
                self._books.pop()
                raise PersistenceError("Failed to save book")

        logger.info("Added book %s", book.id)
        return book.model_copy()

    def add_review(self, payload: Dict[str, Any]) -> Review:
        """Create a review and fold its rating into the book's average.

        The book's new rating is ``round1((R * N + r) / (N + 1))`` where
        ``R``/``N`` are its previous rating and review count. Both the
        reviews and books documents are rewritten.
        """
        missing = _missing(payload, "id", "bookId", "author", "rating")
        if missing:
            raise ValidationError("Missing required fields: id, bookId, author, rating")

        rating = _parse_review_rating(payload["rating"])
        fields = {"verified": False, **payload, "rating": rating}
        if not fields.get("timestamp"):
            fields["timestamp"] = _utc_timestamp()

        try:
            review = Review.model_validate(fields)
        except PydanticValidationError as exc:
            raise ValidationError(_describe(exc, "review"))

        with self._lock:
            book = self._find_book(review.book_id)
            if book is None:
                raise NotFound("Book not found")
            if any(r.id == review.id for r in self._reviews):
                raise Conflict("Review with this ID already exists")

            old_rating, old_count = book.rating, book.review_count
            new_count = old_count + 1
            new_rating = _round_half_up(
                ((old_rating or 0) * old_count + rating) / new_count, "0.1"
            )

            self._reviews.append(review)
            book.review_count = new_count
            book.rating = new_rating

            reviews_saved = self._save_reviews()
            if not reviews_saved or not self._save_books():
                self._reviews.pop()
                book.review_count = old_count
                book.rating = old_rating
                if reviews_saved:
                    # The reviews document already holds the new entry.
                    self._save_reviews()
                raise PersistenceError("Failed to save review")

        logger.info(
            "Added review %s for book %s (rating %s, %d reviews)",
            review.id, book.id, new_rating, new_count,
        )
        return review.model_copy()

    # ------------------------------------------------------------------
    # Internals

    def _find_book(self, book_id: str) -> Optional[Book]:
        return next((b for b in self._books if b.id == book_id), None)

    def _save_books(self) -> bool:
        return save_document(self.books_path, "books", [_dump(b) for b in self._books])

    def _save_reviews(self) -> bool:
        return save_document(
            self.reviews_path, "reviews", [_dump(r) for r in self._reviews]
        )


def _describe(exc: PydanticValidationError, entity: str) -> str:
    fields = sorted({".".join(str(p) for p in err["loc"]) for err in exc.errors()})
    return f"Invalid {entity} data: {', '.join(fields)}"
