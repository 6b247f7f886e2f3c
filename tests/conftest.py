"""Pytest configuration and fixtures"""
import os
from decimal import Decimal
from typing import Dict, List, Tuple

import pytest

# Keep tests off any real backend or Redis
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.pop("STOREFRONT_API_URL", None)
os.environ.pop("UPSTASH_REDIS_REST_URL", None)
os.environ.pop("UPSTASH_REDIS_REST_TOKEN", None)

from storefront.auth import AuthSession
from storefront.cart.mock import MockCartBackend, MockCartStore, MockProduct
from storefront.cart.service import CartStoreClient
from storefront.migration import MigrationCoordinator
from storefront.models import Address, CheckoutRequest
from storefront.notifier import CartChangeNotifier
from storefront.orders.mock import MockCheckoutBackend
from storefront.orders.service import CheckoutService
from storefront.session import SessionIdentityProvider
from storefront.storage import MemoryStorage

STORE_ID = 1

# Small but distinguishable timings for the migration sequence
REPULSE_DELAY = 0.05
SETTLE_DELAY = 0.1


class NavigationRecorder:
    """Collects navigation side effects instead of routing anywhere."""

    def __init__(self):
        self.calls: List[Tuple[str, Dict[str, str]]] = []

    def __call__(self, path: str, params: Dict[str, str]) -> None:
        self.calls.append((path, params))


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def sessions(storage):
    return SessionIdentityProvider(storage)


@pytest.fixture
def notifier():
    return CartChangeNotifier()


@pytest.fixture
def coordinator(sessions, notifier):
    return MigrationCoordinator(sessions, notifier, repulse_delay=REPULSE_DELAY, settle_delay=SETTLE_DELAY)


@pytest.fixture
def auth(storage, coordinator):
    return AuthSession(storage, coordinator)


@pytest.fixture
def products():
    return [
        MockProduct(id=7, name="Espresso Cup", price=Decimal("10.00")),
        MockProduct(id=8, name="Coffee Beans 1kg", price=Decimal("24.90"), image_url="/img/beans.jpg"),
        MockProduct(id=9, name="Milk Jug", price=Decimal("7.35")),
    ]


@pytest.fixture
def mock_store(products):
    return MockCartStore(products)


@pytest.fixture
def cart_backend(mock_store):
    return MockCartBackend(mock_store, latency=0)


@pytest.fixture
def cart_client(cart_backend, sessions, auth, notifier):
    return CartStoreClient(cart_backend, sessions, auth, notifier, store=STORE_ID)


@pytest.fixture
def navigator():
    return NavigationRecorder()


@pytest.fixture
def checkout_backend(mock_store):
    return MockCheckoutBackend(mock_store, latency=0)


@pytest.fixture
def checkout_service(checkout_backend, auth, sessions, navigator):
    return CheckoutService(checkout_backend, auth, sessions, navigate=navigator, store=STORE_ID)


@pytest.fixture
def sample_address():
    return Address(
        first_name="Erika",
        last_name="Muster",
        address1="Hauptstrasse 1",
        city="Berlin",
        postal_code="10115",
        country="DE",
    )


@pytest.fixture
def checkout_request(sample_address):
    return CheckoutRequest(
        customer_email="erika@example.com",
        shipping_address=sample_address,
        notes="Ring twice",
    )
