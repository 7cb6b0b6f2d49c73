# storefront/main.py
import logging
from typing import Optional

from fastapi import FastAPI

from .cart.router import router as cart_router
from .cart.store import CartStore
from .catalog.client import CatalogClient
from .catalog.queries import CatalogViews
from .catalog.router import router as catalog_router
from .checkout.router import router as checkout_router
from .checkout.service import CheckoutService
from .config import Settings, get_settings


def create_app(
    settings: Optional[Settings] = None,
    catalog_client: Optional[CatalogClient] = None,
    cart_store: Optional[CartStore] = None,
) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level)

    app = FastAPI(
        title=settings.app_name,
        description=(
            "Storefront for a small bookstore: catalogue browsing and search, "
            "a cart kept on disk between sessions, and checkout against the "
            "bookstore backend."
        ),
        version="1.0.0",
    )

    catalog_client = catalog_client or CatalogClient(
        settings.backend_url, timeout=settings.request_timeout
    )
    cart_store = cart_store or CartStore(settings.cart_file)

    app.state.settings = settings
    app.state.catalog_client = catalog_client
    app.state.catalog_views = CatalogViews(catalog_client, featured_limit=settings.featured_limit)
    app.state.cart_store = cart_store
    app.state.checkout = CheckoutService(
        cart_store,
        settings.backend_url,
        timeout=settings.request_timeout,
        tax_rate=settings.tax_rate,
    )

    @app.get("/health")
    def health_check():
        return {"status": "ok", "cart_persistent": cart_store.persistent}

    app.include_router(catalog_router)
    app.include_router(cart_router)
    app.include_router(checkout_router)
    return app


app = create_app()
