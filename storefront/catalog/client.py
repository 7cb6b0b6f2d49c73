"""
HTTP client for the bookstore catalog.

It exposes two operations on the backend catalog endpoint:

* ``CatalogClient.fetch_list()``: list books matching a mapping of
  filter keys (``search``, ``featured``, ``limit`` or any other filter
  the backend understands). Empty values are dropped before the query
  string is built, so they never reach the backend as ``key=``.

* ``CatalogClient.fetch_one()``: retrieve a single book by id. A
  missing book is reported as :class:`BookNotFound`.

Both return validated ``Book`` models and raise :class:`CatalogError`
with a human-readable message when anything goes wrong. There is no
caching and no retry here; callers decide when to fetch again.
"""

from __future__ import annotations

import logging
import urllib.parse
from typing import Any, Dict, List, Mapping, Optional

from pydantic import TypeAdapter, ValidationError

from ..backend import DEFAULT_TIMEOUT, BackendError, request_json
from .schemas import Book


logger = logging.getLogger(__name__)

_BOOK_LIST = TypeAdapter(List[Book])


class CatalogError(Exception):
    """The catalog could not be read. ``str(exc)`` is user-facing."""


class BookNotFound(CatalogError):
    pass


def clean_params(params: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    """Drop empty filter values and stringify the rest.

    ``None`` and ``""`` are removed entirely. Booleans are written as
    ``true``/``false`` so that ``featured=True`` reads the same as the
    address bar form of the filter.
    """
    cleaned: Dict[str, str] = {}
    for key, value in (params or {}).items():
        if value is None or value == "":
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        cleaned[str(key)] = str(value)
    return cleaned


class CatalogClient:
    def __init__(self, base_url: str, timeout: float = DEFAULT_TIMEOUT):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def books_url(self, params: Optional[Mapping[str, Any]] = None) -> str:
        url = f"{self.base_url}/api/books"
        query = clean_params(params)
        if query:
            url = f"{url}?{urllib.parse.urlencode(query)}"
        return url

    def fetch_list(self, params: Optional[Mapping[str, Any]] = None) -> List[Book]:
        url = self.books_url(params)
        try:
            data = request_json("GET", url, timeout=self.timeout)
        except BackendError as exc:
            raise CatalogError(exc.message) from exc
        try:
            return _BOOK_LIST.validate_python(data)
        except ValidationError as exc:
            logger.warning("Malformed book list from %s: %s", url, exc)
            raise CatalogError("The catalog returned malformed book data") from exc

    def fetch_one(self, book_id: str) -> Book:
        url = f"{self.base_url}/api/books/{urllib.parse.quote(str(book_id), safe='')}"
        try:
            data = request_json("GET", url, timeout=self.timeout)
        except BackendError as exc:
            if exc.status == 404:
                raise BookNotFound(f"Book {book_id} not found") from exc
            raise CatalogError(exc.message) from exc
        if data is None:
            raise BookNotFound(f"Book {book_id} not found")
        try:
            return Book.model_validate(data)
        except ValidationError as exc:
            logger.warning("Malformed book %s from %s: %s", book_id, url, exc)
            raise CatalogError("The catalog returned malformed book data") from exc
