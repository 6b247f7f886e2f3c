"""Request dependencies for the dev backend."""
from typing import Optional

from fastapi import Header, Request

from storefront.cart.mock import MockCartBackend
from storefront.cart.models import CartIdentity
from storefront.orders.mock import MockCheckoutBackend


def get_cart_backend(request: Request) -> MockCartBackend:
    return request.app.state.cart_backend


def get_checkout_backend(request: Request) -> MockCheckoutBackend:
    return request.app.state.checkout_backend


def bearer_token(authorization: Optional[str] = Header(default=None)) -> Optional[str]:
    """Token from ``Authorization: Bearer <token>``, or None."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def build_identity(store_id: Optional[int], session_id: Optional[str], token: Optional[str]) -> CartIdentity:
    return CartIdentity(store_id=store_id or 0, session_id=session_id or None, auth_token=token)
