"""
Order submission.

``CheckoutService.place_order`` turns the current cart into an
``OrderRequest``, posts it once to the backend and, on success, empties
the cart. On failure the cart is left as it was so the shopper can try
again. Only one submission may be in flight at a time.
"""

from __future__ import annotations

import logging
import threading
from decimal import Decimal
from typing import List, Optional

from pydantic import ValidationError

from ..backend import DEFAULT_TIMEOUT, BackendError, request_json
from ..cart.operations import TAX_RATE, compute_totals, remove_ordered
from ..cart.schemas import CartItem
from ..cart.store import CartStore
from .schemas import Customer, OrderConfirmation, OrderLine, OrderRequest


logger = logging.getLogger(__name__)

GENERIC_FAILURE = "Order failed"


class OrderError(Exception):
    """The order was not placed. ``message`` is shown to the shopper."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status = status


class CheckoutInProgress(OrderError):
    pass


class EmptyCartError(OrderError):
    pass


class CheckoutService:
    def __init__(
        self,
        store: CartStore,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        tax_rate: Decimal = TAX_RATE,
    ):
        self.store = store
        self.orders_url = f"{base_url.rstrip('/')}/api/orders"
        self.timeout = timeout
        self.tax_rate = tax_rate
        self._submit_lock = threading.Lock()

    @property
    def submitting(self) -> bool:
        return self._submit_lock.locked()

    def build_order(self, customer: Customer, cart: Optional[List[CartItem]] = None) -> OrderRequest:
        if cart is None:
            cart = self.store.load()
        totals = compute_totals(cart, self.tax_rate)
        return OrderRequest(
            items=[
                OrderLine(book_id=item.id, title=item.title, price=item.price, quantity=item.quantity)
                for item in cart
            ],
            customer=customer,
            subtotal=totals.subtotal,
            tax=totals.tax,
            total=totals.total,
        )

    def place_order(self, customer: Customer) -> OrderConfirmation:
        """Submit the cart as an order.

        Raises
        ------
        CheckoutInProgress
            Another submission has not finished yet.
        EmptyCartError
            There is nothing to order; no request is sent.
        OrderError
            The backend rejected the order or could not be reached.
        """
        if not self._submit_lock.acquire(blocking=False):
            raise CheckoutInProgress("An order is already being submitted")
        try:
            cart = self.store.load()
            if not cart:
                raise EmptyCartError("Your cart is empty")
            order = self.build_order(customer, cart)
            try:
                data = request_json(
                    "POST",
                    self.orders_url,
                    payload=order.model_dump(mode="json"),
                    timeout=self.timeout,
                )
            except BackendError as exc:
                message = exc.detail or (GENERIC_FAILURE if exc.status else exc.message)
                logger.warning("Order submission failed: %s", message)
                raise OrderError(message, status=exc.status) from exc
            try:
                confirmation = OrderConfirmation.model_validate(data)
            except ValidationError as exc:
                logger.error("Order response without an order id: %r", data)
                raise OrderError(GENERIC_FAILURE) from exc

            ordered = {line.book_id: line.quantity for line in order.items}
            self.store.update(lambda current: remove_ordered(current, ordered))
            logger.info("Order %s placed for %d item(s)", confirmation.order_id, len(order.items))
            return confirmation
        finally:
            self._submit_lock.release()
