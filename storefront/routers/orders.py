"""Dev backend order router: checkout and order lookup over the mock store."""
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query

from storefront.errors import StorefrontError, ERROR_AUTH_REQUIRED
from storefront.logging import get_logger
from storefront.models import CheckoutRequest
from storefront.orders.mock import MockCheckoutBackend
from .deps import bearer_token, build_identity, get_checkout_backend

logger = get_logger(__name__)

router = APIRouter(prefix="/orders", tags=["orders"])


@router.post("/checkout")
async def checkout(
    request: CheckoutRequest,
    token: Optional[str] = Depends(bearer_token),
    session_id: Optional[str] = Header(default=None, alias="X-Session-Id"),
    backend: MockCheckoutBackend = Depends(get_checkout_backend),
):
    """Create an order from the caller's cart. Bearer authentication required."""
    if not token:
        raise HTTPException(status_code=401, detail=ERROR_AUTH_REQUIRED)

    identity = build_identity(request.store_id, session_id, token)
    try:
        order = await backend.checkout(identity, request)
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return order.to_dict()


@router.get("/{order_number}")
async def get_order(
    order_number: str,
    email: str = Query(default=""),
    backend: MockCheckoutBackend = Depends(get_checkout_backend),
):
    try:
        order = await backend.get_order_by_number(order_number, email)
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return order.to_dict()
