"""
Route definitions for the catalog views.

- GET /                 : home page, featured books
- GET /shop             : search/filter, query parameters passed through
- GET /book/{book_id}   : book detail
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request

from ..dependencies import get_catalog_views
from .queries import CatalogViews
from .schemas import BookDetailView, BookListView, QueryState


router = APIRouter(tags=["catalog"])


def _list_view(state: QueryState) -> BookListView:
    return BookListView(
        status=state.status,
        params=state.key or {},
        books=state.data or [],
        error=state.error,
    )


@router.get("/", response_model=BookListView)
def home(views: CatalogViews = Depends(get_catalog_views)) -> BookListView:
    """Featured books for the home page.

    A failed fetch is reported in ``error``; the page still renders.
    """
    return _list_view(views.home_feed())


@router.get("/shop", response_model=BookListView)
def shop(request: Request, views: CatalogViews = Depends(get_catalog_views)) -> BookListView:
    """
    Returns the books matching the filters in the address.

    Every query parameter (``search``, ``featured``, ``limit``, ...) is
    forwarded to the catalog; empty ones are dropped. If a newer search
    was issued while this one was in flight, the newer state is returned.
    """
    state = views.search(dict(request.query_params))
    if state.status == "error":
        raise HTTPException(status_code=502, detail=state.error)
    return _list_view(state)


@router.get("/book/{book_id}", response_model=BookDetailView)
def book_details(book_id: str, views: CatalogViews = Depends(get_catalog_views)) -> BookDetailView:
    state = views.book(book_id)
    if state.status == "error":
        raise HTTPException(status_code=404 if state.missing else 502, detail=state.error)
    return BookDetailView(status=state.status, book=state.data)
