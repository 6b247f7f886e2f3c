"""
Tests for settings and storefront wiring
"""
import pytest

from storefront.cart.mock import MockCartBackend
from storefront.cart.remote import RemoteCartBackend
from storefront.config import Settings
from storefront.factory import build_storefront
from storefront.orders.mock import MockCheckoutBackend
from storefront.storage import MemoryStorage


def test_from_env(monkeypatch):
    """Test settings are read from the environment."""
    monkeypatch.setenv("STOREFRONT_API_URL", "https://api.example.com/api/public/")
    monkeypatch.setenv("STOREFRONT_STORE_ID", "3")
    monkeypatch.setenv("CART_REPULSE_DELAY", "0.25")
    monkeypatch.setenv("MOCK_CART_LATENCY", "not-a-number")

    settings = Settings.from_env()

    assert settings.api_url == "https://api.example.com/api/public"
    assert settings.store_id == 3
    assert settings.repulse_delay == 0.25
    assert settings.mock_cart_latency == 0.3
    assert not settings.use_mock


def test_mock_when_no_api_url():
    """Test the mock is used without an API URL or when forced."""
    assert Settings().use_mock
    assert Settings(api_url="https://api.example.com", use_mock_data=True).use_mock


def test_build_storefront_mock():
    """Test mock wiring shares one store."""
    sf = build_storefront(Settings(store_id=1), storage=MemoryStorage())

    assert isinstance(sf.cart.backend, MockCartBackend)
    assert isinstance(sf.checkout.backend, MockCheckoutBackend)
    assert sf.cart.backend.store is sf.mock_store
    assert sf.http_client is None


@pytest.mark.asyncio
async def test_build_storefront_remote():
    """Test remote wiring builds an HTTP client."""
    sf = build_storefront(Settings(api_url="https://api.example.com", store_id=1), storage=MemoryStorage())

    assert isinstance(sf.cart.backend, RemoteCartBackend)
    assert sf.http_client.base_url.host == "api.example.com"
    await sf.aclose()
