"""
Pydantic schema definitions for the checkout module.

``Customer`` is validated before anything is sent: all three fields are
required, surrounding whitespace is stripped, and the email must be
well-formed. ``OrderRequest`` mirrors the body expected by the backend
``POST /api/orders`` endpoint.
"""

from typing import List, Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from ..cart.schemas import CartView


class Customer(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1)
    email: EmailStr
    address: str = Field(min_length=1)


class OrderLine(BaseModel):
    book_id: str
    title: str
    price: float
    quantity: int


class OrderRequest(BaseModel):
    items: List[OrderLine]
    customer: Customer
    subtotal: float
    tax: float
    total: float
    # Payment is not processed; orders are recorded as paid.
    status: Literal["paid"] = "paid"


class OrderConfirmation(BaseModel):
    """Successful answer of the backend. Extra fields are kept."""

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    order_id: str


class OrderPlaced(BaseModel):
    order_id: str
    redirect: str


class CheckoutView(BaseModel):
    cart: CartView
    submitting: bool = False


class OrderSuccessView(BaseModel):
    order_id: str
    message: str
