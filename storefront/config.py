"""
Storefront client configuration.

All settings come from environment variables. ``get_settings()`` reads them
once per process; tests build ``Settings`` directly.

Backend selection happens here, once: without ``STOREFRONT_API_URL`` (or with
``STOREFRONT_USE_MOCK_DATA=1``) the client runs against the in-process mock
cart instead of the HTTP API.
"""

import os
from dataclasses import dataclass
from functools import cache
from typing import Optional

from storefront.logging import get_logger

logger = get_logger(__name__)


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_float(name: str, default: float) -> float:
    value = os.environ.get(name)
    if not value:
        return default
    try:
        return float(value)
    except ValueError:
        logger.warning(f"Ignoring invalid {name}={value!r}, using {default}")
        return default


def _env_int(name: str) -> Optional[int]:
    value = os.environ.get(name)
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        logger.warning(f"Ignoring invalid {name}={value!r}")
        return None


@dataclass(frozen=True)
class Settings:
    """Resolved storefront settings."""

    # Public API root, e.g. https://api.example.com/api/public
    api_url: str = ""
    use_mock_data: bool = False
    # Fixed store for single-tenant deployments; multi-tenant callers pass a resolver
    store_id: Optional[int] = None

    # Durable client storage (session id, auth token)
    storage_path: str = ""
    redis_url: str = ""
    redis_token: str = ""

    http_timeout: float = 10.0

    # Artificial latency of the mock backends (seconds)
    mock_cart_latency: float = 0.3
    mock_checkout_latency: float = 0.8

    # Migration sequencing (seconds)
    repulse_delay: float = 0.5
    settle_delay: float = 1.0

    login_path: str = "/login"
    checkout_return_url: str = "/checkout"

    @property
    def use_mock(self) -> bool:
        """True when cart/checkout calls go to the in-process mock store."""
        return self.use_mock_data or not self.api_url

    @property
    def use_redis(self) -> bool:
        return bool(self.redis_url and self.redis_token)

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            api_url=os.environ.get("STOREFRONT_API_URL", "").rstrip("/"),
            use_mock_data=_env_bool("STOREFRONT_USE_MOCK_DATA"),
            store_id=_env_int("STOREFRONT_STORE_ID"),
            storage_path=os.environ.get("STOREFRONT_STORAGE_PATH", ""),
            # Standard Upstash env var names
            redis_url=os.environ.get("UPSTASH_REDIS_REST_URL", ""),
            redis_token=os.environ.get("UPSTASH_REDIS_REST_TOKEN", ""),
            http_timeout=_env_float("STOREFRONT_HTTP_TIMEOUT", 10.0),
            mock_cart_latency=_env_float("MOCK_CART_LATENCY", 0.3),
            mock_checkout_latency=_env_float("MOCK_CHECKOUT_LATENCY", 0.8),
            repulse_delay=_env_float("CART_REPULSE_DELAY", 0.5),
            settle_delay=_env_float("CART_SETTLE_DELAY", 1.0),
            login_path=os.environ.get("STOREFRONT_LOGIN_PATH", "/login"),
            checkout_return_url=os.environ.get("STOREFRONT_CHECKOUT_RETURN_URL", "/checkout"),
        )


@cache
def get_settings() -> Settings:
    """Get process-wide settings (read from the environment once)."""
    return Settings.from_env()
