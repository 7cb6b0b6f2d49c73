"""
Route definitions for the cart views.

Endpoints under /cart:
- GET    /cart                               : cart lines and totals
- POST   /cart/items                         : add one copy of a book
- POST   /cart/items/{book_id}/increment     : "+" control
- POST   /cart/items/{book_id}/decrement     : "-" control, stops at 1
- PUT    /cart/items/{book_id}               : set an explicit quantity
- DELETE /cart/items/{book_id}               : remove the book
"""

from __future__ import annotations

from typing import Callable, List

from fastapi import APIRouter, Depends, HTTPException

from ..catalog.client import BookNotFound, CatalogClient, CatalogError
from ..config import Settings
from ..dependencies import get_cart_store, get_catalog_client, get_settings
from . import operations
from .schemas import AddToCartRequest, CartItem, CartView, QuantityUpdate
from .store import CartStore


router = APIRouter(prefix="/cart", tags=["cart"])


def _view(store: CartStore, settings: Settings) -> CartView:
    return operations.build_cart_view(store.load(), settings.tax_rate)


def _change_item(store: CartStore, book_id: str, change: Callable[[List[CartItem]], List[CartItem]]) -> None:
    """Apply ``change`` to an item known to be in the cart, else 404.

    The lookup runs inside the store update so nothing can remove the
    item between the check and the change.
    """

    def apply(cart: List[CartItem]) -> List[CartItem]:
        if operations.find_item(cart, book_id) is None:
            raise HTTPException(status_code=404, detail="Book not in cart")
        return change(cart)

    store.update(apply)


@router.get("", response_model=CartView)
def get_cart(
    store: CartStore = Depends(get_cart_store),
    settings: Settings = Depends(get_settings),
) -> CartView:
    return _view(store, settings)


@router.post("/items", response_model=CartView)
def add_item(
    req: AddToCartRequest,
    store: CartStore = Depends(get_cart_store),
    catalog: CatalogClient = Depends(get_catalog_client),
    settings: Settings = Depends(get_settings),
) -> CartView:
    """Add a book to the cart ("Add to Cart" and "Buy Now").

    The book is looked up in the catalog first. If it is already in
    the cart only its quantity changes.
    """
    try:
        book = catalog.fetch_one(req.book_id)
    except BookNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except CatalogError as e:
        raise HTTPException(status_code=502, detail=str(e))
    store.update(lambda cart: operations.add_to_cart(cart, book))
    return _view(store, settings)


@router.post("/items/{book_id}/increment", response_model=CartView)
def increment_item(
    book_id: str,
    store: CartStore = Depends(get_cart_store),
    settings: Settings = Depends(get_settings),
) -> CartView:
    _change_item(store, book_id, lambda cart: operations.increment_quantity(cart, book_id))
    return _view(store, settings)


@router.post("/items/{book_id}/decrement", response_model=CartView)
def decrement_item(
    book_id: str,
    store: CartStore = Depends(get_cart_store),
    settings: Settings = Depends(get_settings),
) -> CartView:
    _change_item(store, book_id, lambda cart: operations.decrement_quantity(cart, book_id))
    return _view(store, settings)


@router.put("/items/{book_id}", response_model=CartView)
def update_item(
    book_id: str,
    req: QuantityUpdate,
    store: CartStore = Depends(get_cart_store),
    settings: Settings = Depends(get_settings),
) -> CartView:
    _change_item(store, book_id, lambda cart: operations.set_quantity(cart, book_id, req.quantity))
    return _view(store, settings)


@router.delete("/items/{book_id}", response_model=CartView)
def remove_item(
    book_id: str,
    store: CartStore = Depends(get_cart_store),
    settings: Settings = Depends(get_settings),
) -> CartView:
    store.update(lambda cart: operations.remove_from_cart(cart, book_id))
    return _view(store, settings)
