"""
Wiring of the storefront client.

``build_storefront`` picks mock or remote backends once, from the settings,
and connects the session provider, notifier, migration coordinator, cart
client and checkout service around one storage and one HTTP client.
"""

from dataclasses import dataclass
from typing import Optional

import httpx

from storefront.auth import AuthSession
from storefront.cart.mock import MockCartBackend, MockCartStore
from storefront.cart.models import StoreResolver
from storefront.cart.remote import RemoteCartBackend
from storefront.cart.service import CartStoreClient
from storefront.config import Settings, get_settings
from storefront.http import create_http_client
from storefront.logging import get_logger
from storefront.migration import MigrationCoordinator
from storefront.notifier import CartChangeNotifier
from storefront.orders.mock import MockCheckoutBackend
from storefront.orders.remote import RemoteCheckoutBackend
from storefront.orders.service import CheckoutService, Navigator
from storefront.session import SessionIdentityProvider
from storefront.storage import Storage, create_storage

logger = get_logger(__name__)


@dataclass
class Storefront:
    settings: Settings
    storage: Storage
    sessions: SessionIdentityProvider
    notifier: CartChangeNotifier
    migration: MigrationCoordinator
    auth: AuthSession
    cart: CartStoreClient
    checkout: CheckoutService
    http_client: Optional[httpx.AsyncClient] = None
    mock_store: Optional[MockCartStore] = None

    async def aclose(self) -> None:
        if self.http_client is not None:
            await self.http_client.aclose()


def build_storefront(
    settings: Optional[Settings] = None,
    *,
    storage: Optional[Storage] = None,
    store: StoreResolver = None,
    http_client: Optional[httpx.AsyncClient] = None,
    mock_store: Optional[MockCartStore] = None,
    navigate: Optional[Navigator] = None,
) -> Storefront:
    """Assemble a Storefront. Arguments override what the settings would pick."""
    settings = settings or get_settings()
    storage = storage if storage is not None else create_storage(settings)
    store = store if store is not None else settings.store_id

    sessions = SessionIdentityProvider(storage)
    notifier = CartChangeNotifier()
    migration = MigrationCoordinator(
        sessions,
        notifier,
        repulse_delay=settings.repulse_delay,
        settle_delay=settings.settle_delay,
    )
    auth = AuthSession(storage, migration)

    if settings.use_mock:
        logger.info("No storefront API configured, using the in-process mock cart")
        mock_store = mock_store if mock_store is not None else MockCartStore()
        cart_backend = MockCartBackend(mock_store, latency=settings.mock_cart_latency)
        checkout_backend = MockCheckoutBackend(mock_store, latency=settings.mock_checkout_latency)
    else:
        http_client = http_client if http_client is not None else create_http_client(settings)
        cart_backend = RemoteCartBackend(http_client)
        checkout_backend = RemoteCheckoutBackend(http_client)

    cart = CartStoreClient(cart_backend, sessions, auth, notifier, store=store)
    checkout = CheckoutService(
        checkout_backend,
        auth,
        sessions,
        navigate=navigate,
        store=store,
        login_path=settings.login_path,
        return_url=settings.checkout_return_url,
    )

    return Storefront(
        settings=settings,
        storage=storage,
        sessions=sessions,
        notifier=notifier,
        migration=migration,
        auth=auth,
        cart=cart,
        checkout=checkout,
        http_client=http_client,
        mock_store=mock_store,
    )


# Singleton instance
_storefront: Optional[Storefront] = None


def get_storefront() -> Storefront:
    """Get the process-wide Storefront built from environment settings."""
    global _storefront
    if _storefront is None:
        _storefront = build_storefront()
    return _storefront
