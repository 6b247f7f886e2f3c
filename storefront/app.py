"""
Dev backend.

A FastAPI app serving the storefront cart/order REST contract from an
in-process mock store, for local frontend work and integration tests:

    uvicorn storefront.app:app --reload
"""
from typing import Optional

from fastapi import FastAPI

from storefront.cart.mock import MockCartBackend, MockCartStore
from storefront.config import get_settings
from storefront.orders.mock import MockCheckoutBackend
from storefront.routers import cart_router, orders_router


def create_app(
    store: Optional[MockCartStore] = None,
    cart_latency: float = 0.0,
    checkout_latency: float = 0.0,
) -> FastAPI:
    store = store if store is not None else MockCartStore()

    app = FastAPI(title="Storefront dev backend")
    app.state.mock_store = store
    app.state.cart_backend = MockCartBackend(store, latency=cart_latency)
    app.state.checkout_backend = MockCheckoutBackend(store, latency=checkout_latency)

    app.include_router(cart_router)
    app.include_router(orders_router)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


app = create_app(
    cart_latency=get_settings().mock_cart_latency,
    checkout_latency=get_settings().mock_checkout_latency,
)
