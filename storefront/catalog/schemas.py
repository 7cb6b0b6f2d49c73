"""
Pydantic schema definitions for the catalog module.

The ``Book`` model is the validated shape of a book as served by the
backend under ``/api/books``. Payloads are checked here, at the edge,
so that the cart and the views never deal with untyped dictionaries.
Unknown fields sent by the backend are ignored.
"""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class Book(BaseModel):
    """A single book entry.

    ``id`` is always a string; numeric identifiers coming from the
    backend are converted. ``price`` must be non-negative. ``rating`` is
    the average rating, typically between 0 and 5, and defaults to 0
    when the backend does not provide one. ``featured`` is only set for
    books the backend marks as featured (the home page feed).
    """

    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str
    title: str
    author: str
    author_bio: Optional[str] = None
    short_description: str = ""
    description: str = ""
    image: str = ""
    price: float = Field(ge=0)
    rating: float = 0.0
    featured: bool = False


QueryStatus = Literal["idle", "loading", "ready", "error"]


class BookListView(BaseModel):
    """State of a list view (home feed or shop search)."""

    status: QueryStatus
    params: Dict[str, str] = Field(default_factory=dict)
    books: List[Book] = Field(default_factory=list)
    error: str = ""


class BookDetailView(BaseModel):
    status: QueryStatus
    book: Optional[Book] = None


class QueryState(BaseModel):
    """Visible state of one query consumer.

    ``generation`` is the token of the newest request issued; ``key`` is
    the input of that request (query parameters or a book id).
    """

    status: QueryStatus = "idle"
    key: Any = None
    data: Any = None
    error: str = ""
    # Set when the error is a lookup of something that does not exist
    missing: bool = False
    generation: int = 0
