"""Shared httpx client for the storefront API."""
from typing import Optional

import httpx

from storefront.config import Settings


def create_http_client(settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> httpx.AsyncClient:
    """AsyncClient rooted at the public API URL."""
    return httpx.AsyncClient(
        base_url=settings.api_url,
        timeout=httpx.Timeout(settings.http_timeout, connect=5.0),
        limits=httpx.Limits(max_connections=10, max_keepalive_connections=5),
        headers={"Accept": "application/json"},
        transport=transport,
    )


def auth_headers(auth_token: Optional[str]) -> dict:
    return {"Authorization": f"Bearer {auth_token}"} if auth_token else {}


def error_detail(response: httpx.Response) -> str:
    """Best-effort human message from an error response."""
    try:
        data = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(data, dict):
        return str(data.get("detail") or data.get("message") or data.get("error") or data)
    return str(data)
