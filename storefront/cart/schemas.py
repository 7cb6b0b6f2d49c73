"""
Pydantic schema definitions for the cart module.

A ``CartItem`` is a snapshot of the ``Book`` taken when it was first
added, plus a quantity. The snapshot is what gets persisted and what
the order is built from; the price is never refreshed afterwards.
"""

from typing import List

from pydantic import BaseModel, Field

from ..catalog.schemas import Book


class CartItem(Book):
    quantity: int = Field(default=1, ge=1)


class CartTotals(BaseModel):
    subtotal: float = 0.0
    tax: float = 0.0
    total: float = 0.0
    item_count: int = 0


class CartLine(CartItem):
    line_total: float


class CartView(BaseModel):
    """Cart as rendered on the cart and checkout pages."""

    items: List[CartLine] = Field(default_factory=list)
    subtotal: float = 0.0
    tax: float = 0.0
    total: float = 0.0
    item_count: int = 0


class AddToCartRequest(BaseModel):
    book_id: str = Field(min_length=1)


class QuantityUpdate(BaseModel):
    quantity: int = Field(ge=1)
