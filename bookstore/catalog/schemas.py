"""
Pydantic schema definitions for the catalog module.

``Book`` and ``Review`` are the two stored entities. Both are open
records: any field a client sends beyond the ones declared here is kept
as-is and written back to disk. Attribute names are snake_case in
Python and camelCase in JSON (``reviewCount``, ``bookId`` ...), on the
wire and in the data files alike.

The remaining models are the response envelopes returned by the
routes. Every successful response carries ``success: true``.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, model_serializer
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Book(CamelModel):
    """A catalogue entry.

    ``rating`` is the mean of all review ratings for the book rounded
    to one decimal, and ``review_count`` the number of those reviews.
    Both are maintained by the store when a review is added and default
    to 0 for a new book. ``date_published`` is compared as a plain
    string, so it should use a sortable format such as ``YYYY-MM-DD``.
    """

    model_config = ConfigDict(extra="allow")

    id: str
    title: str
    author: str
    rating: Optional[float] = 0.0
    review_count: int = 0
    # Flags are stored exactly as supplied; only a literal ``True``
    # counts as featured.
    in_stock: Any = True
    featured: Any = False
    date_published: Optional[str] = None

    @model_serializer(mode="wrap")
    def omit_absent_date(self, handler):
        # A book stored without a publication date keeps none on output.
        data = handler(self)
        if self.date_published is None and "date_published" not in self.model_fields_set:
            data.pop("datePublished", None)
            data.pop("date_published", None)
        return data


class Review(CamelModel):
    """A rating left for a single book, referenced by ``book_id``."""

    model_config = ConfigDict(extra="allow")

    id: str
    book_id: str
    author: str
    rating: float
    timestamp: Optional[str] = None
    verified: Any = False


class RankedBook(Book):
    """A book annotated with ``rating * review_count`` for ranking."""

    weighted_score: float


class BookSummary(CamelModel):
    id: str
    title: str
    author: str


class DateRange(CamelModel):
    start: str
    end: str


class BookList(CamelModel):
    success: bool = True
    count: int
    data: List[Book]


class RankedBookList(CamelModel):
    success: bool = True
    count: int
    data: List[RankedBook]


class DatedBookList(CamelModel):
    success: bool = True
    count: int
    date_range: DateRange
    data: List[Book]


class BookDetail(CamelModel):
    success: bool = True
    data: Book


class BookReviews(CamelModel):
    success: bool = True
    book: BookSummary
    count: int
    data: List[Review]


class BookCreated(CamelModel):
    success: bool = True
    message: str = "Book added successfully"
    data: Book


class ReviewCreated(CamelModel):
    success: bool = True
    message: str = "Review added successfully"
    data: Review
