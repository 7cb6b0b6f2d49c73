"""
Route definitions for checkout and order confirmation.

- GET  /checkout            : order summary
- POST /checkout            : place the order
- GET  /order/{order_id}    : confirmation page
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from ..cart.operations import build_cart_view
from ..dependencies import get_checkout
from .schemas import CheckoutView, Customer, OrderPlaced, OrderSuccessView
from .service import CheckoutInProgress, CheckoutService, EmptyCartError, OrderError


router = APIRouter(tags=["checkout"])

SUCCESS_MESSAGE = (
    "Thank you for your purchase! Your order has been placed successfully. "
    "A confirmation has been sent to your email."
)


@router.get("/checkout", response_model=CheckoutView)
def checkout_summary(checkout: CheckoutService = Depends(get_checkout)) -> CheckoutView:
    cart = build_cart_view(checkout.store.load(), checkout.tax_rate)
    return CheckoutView(cart=cart, submitting=checkout.submitting)


@router.post("/checkout", response_model=OrderPlaced, status_code=201)
def place_order(customer: Customer, checkout: CheckoutService = Depends(get_checkout)) -> OrderPlaced:
    """
    Places the order for the current cart.

    Invalid customer details are rejected by validation (422) before any
    request reaches the backend. The backend's error message is passed
    back as ``detail`` and the cart is kept for a retry.
    """
    try:
        confirmation = checkout.place_order(customer)
    except CheckoutInProgress as e:
        raise HTTPException(status_code=409, detail=e.message)
    except EmptyCartError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except OrderError as e:
        status = e.status if e.status and 400 <= e.status < 500 else 502
        raise HTTPException(status_code=status, detail=e.message)
    return OrderPlaced(
        order_id=confirmation.order_id,
        redirect=f"/order/{confirmation.order_id}",
    )


@router.get("/order/{order_id}", response_model=OrderSuccessView)
def order_success(order_id: str) -> OrderSuccessView:
    return OrderSuccessView(order_id=order_id, message=SUCCESS_MESSAGE)
