"""
Pure functions over a cart.

A cart is an insertion-ordered list of ``CartItem`` with at most one
item per book id. None of these functions mutate their input; each
returns a new list that the caller hands to ``CartStore.replace``.
Totals are always recomputed from the items and never stored.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import List, Mapping, Optional, Sequence

from ..catalog.schemas import Book
from .schemas import CartItem, CartLine, CartTotals, CartView


TAX_RATE = Decimal("0.07")
CENT = Decimal("0.01")


def _to_cents(value: Decimal) -> Decimal:
    # ROUND_HALF_UP on Decimal rounds half away from zero
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def _money(value: float) -> Decimal:
    return Decimal(str(value))


def find_item(cart: Sequence[CartItem], book_id: str) -> Optional[CartItem]:
    return next((item for item in cart if item.id == book_id), None)


def add_to_cart(cart: Sequence[CartItem], book: Book) -> List[CartItem]:
    """Add one copy of ``book``.

    A book already in the cart only gets its quantity bumped; the
    stored snapshot (price included) is kept as is.
    """
    if find_item(cart, book.id) is not None:
        return [
            item.model_copy(update={"quantity": item.quantity + 1}) if item.id == book.id else item
            for item in cart
        ]
    data = book.model_dump()
    data["quantity"] = 1
    return [*cart, CartItem(**data)]


def set_quantity(cart: Sequence[CartItem], book_id: str, quantity: int) -> List[CartItem]:
    """Set the quantity of one item. Values below 1 are raised to 1."""
    quantity = max(1, int(quantity))
    return [
        item.model_copy(update={"quantity": quantity}) if item.id == book_id else item
        for item in cart
    ]


def increment_quantity(cart: Sequence[CartItem], book_id: str) -> List[CartItem]:
    item = find_item(cart, book_id)
    if item is None:
        return list(cart)
    return set_quantity(cart, book_id, item.quantity + 1)


def decrement_quantity(cart: Sequence[CartItem], book_id: str) -> List[CartItem]:
    """The "-" control: never goes below one copy, use remove for that."""
    item = find_item(cart, book_id)
    if item is None:
        return list(cart)
    return set_quantity(cart, book_id, max(1, item.quantity - 1))


def remove_from_cart(cart: Sequence[CartItem], book_id: str) -> List[CartItem]:
    return [item for item in cart if item.id != book_id]


def remove_ordered(cart: Sequence[CartItem], ordered: Mapping[str, int]) -> List[CartItem]:
    """Take the ordered copies out of the cart.

    ``ordered`` maps book ids to the quantities that were submitted.
    Copies added after the order was built stay in the cart.
    """
    remaining = []
    for item in cart:
        left = item.quantity - ordered.get(item.id, 0)
        if left > 0:
            remaining.append(item if left == item.quantity else item.model_copy(update={"quantity": left}))
    return remaining


def line_total(item: CartItem) -> float:
    return float(_to_cents(_money(item.price) * item.quantity))


def compute_totals(cart: Sequence[CartItem], tax_rate: Decimal = TAX_RATE) -> CartTotals:
    """Subtotal, tax and total of a cart.

    Tax is rounded to cents on its own, then added to the subtotal and
    the sum is rounded again. ``total - subtotal`` is therefore not
    always equal to ``tax`` when the subtotal has sub-cent digits.
    """
    subtotal = sum((_money(item.price) * item.quantity for item in cart), Decimal("0"))
    tax = _to_cents(subtotal * Decimal(str(tax_rate)))
    total = _to_cents(subtotal + tax)
    return CartTotals(
        subtotal=float(subtotal),
        tax=float(tax),
        total=float(total),
        item_count=sum(item.quantity for item in cart),
    )


def build_cart_view(cart: Sequence[CartItem], tax_rate: Decimal = TAX_RATE) -> CartView:
    totals = compute_totals(cart, tax_rate)
    return CartView(
        items=[CartLine(**item.model_dump(), line_total=line_total(item)) for item in cart],
        **totals.model_dump(),
    )
