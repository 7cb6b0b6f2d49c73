"""FastAPI dependency getters.

Collaborators are created once by ``create_app`` and kept on
``app.state``; routes receive them through ``Depends`` instead of
importing module-level singletons.
"""

from fastapi import Request

from .cart.store import CartStore
from .catalog.client import CatalogClient
from .catalog.queries import CatalogViews
from .checkout.service import CheckoutService
from .config import Settings


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_cart_store(request: Request) -> CartStore:
    return request.app.state.cart_store


def get_catalog_client(request: Request) -> CatalogClient:
    return request.app.state.catalog_client


def get_catalog_views(request: Request) -> CatalogViews:
    return request.app.state.catalog_views


def get_checkout(request: Request) -> CheckoutService:
    return request.app.state.checkout
