"""
Per-view catalog queries where only the newest request counts.

Each view (home feed, shop search, book detail) owns a
:class:`LatestQuery`. Every request issued through it is tagged with a
generation number; when a response arrives it is applied only if no
newer request was issued in the meantime. A slow response for an old
search can therefore never overwrite the results of a newer one.
Superseded requests are not aborted, their results are just dropped.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Mapping, Optional

from .client import BookNotFound, CatalogClient, CatalogError, clean_params
from .schemas import QueryState


logger = logging.getLogger(__name__)


class LatestQuery:
    def __init__(self, fetch: Callable[[Any], Any], name: str = "query"):
        self._fetch = fetch
        self._name = name
        self._lock = threading.Lock()
        self._state = QueryState()

    @property
    def state(self) -> QueryState:
        with self._lock:
            return self._state.model_copy()

    def begin(self, key: Any) -> int:
        """Mark a new request for ``key`` as current and return its token.

        Data from the previous request stays visible while loading.
        """
        with self._lock:
            generation = self._state.generation + 1
            self._state = QueryState(
                status="loading",
                key=key,
                data=self._state.data,
                generation=generation,
            )
            return generation

    def is_current(self, generation: int) -> bool:
        with self._lock:
            return generation == self._state.generation

    def settle(
        self,
        generation: int,
        data: Any = None,
        error: Optional[str] = None,
        missing: bool = False,
    ) -> bool:
        """Apply a finished request. Returns ``False`` if it was stale."""
        with self._lock:
            if generation != self._state.generation:
                logger.debug(
                    "Discarding stale %s result (generation %s, current %s)",
                    self._name, generation, self._state.generation,
                )
                return False
            if error is not None:
                self._state = self._state.model_copy(
                    update={"status": "error", "data": None, "error": error, "missing": missing}
                )
            else:
                self._state = self._state.model_copy(
                    update={"status": "ready", "data": data, "error": "", "missing": False}
                )
            return True

    def load(self, key: Any, refresh: bool = False) -> QueryState:
        """Fetch ``key`` unless it is already the settled, current input.

        Keys are compared by value. The returned state is whatever is
        visible once this request completes, which may belong to a
        newer request if this one was superseded while in flight.
        """
        with self._lock:
            current = self._state
            if not refresh and current.status == "ready" and current.key == key:
                return current.model_copy()
        generation = self.begin(key)
        try:
            data = self._fetch(key)
        except BookNotFound as exc:
            self.settle(generation, error=str(exc), missing=True)
        except CatalogError as exc:
            self.settle(generation, error=str(exc))
        else:
            self.settle(generation, data=data)
        return self.state


class CatalogViews:
    """The catalog consumers of the storefront, one query each."""

    def __init__(self, client: CatalogClient, featured_limit: int = 6):
        self.featured_limit = featured_limit
        self.home = LatestQuery(client.fetch_list, name="home")
        self.shop = LatestQuery(client.fetch_list, name="shop")
        self.detail = LatestQuery(client.fetch_one, name="book")

    def home_feed(self) -> QueryState:
        return self.home.load(clean_params({"featured": True, "limit": self.featured_limit}))

    def search(self, params: Mapping[str, Any]) -> QueryState:
        return self.shop.load(clean_params(params))

    def book(self, book_id: str) -> QueryState:
        return self.detail.load(str(book_id))
