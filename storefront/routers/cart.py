"""
Dev backend cart router.

Serves the cart REST contract from the in-process mock store. Owner is the
bearer token when present, else the ``sessionId``; a request carrying both
merges the guest cart into the user's. Line ids only resolve inside the
caller's own cart.
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from storefront.cart.mock import MockCartBackend
from storefront.errors import StorefrontError
from storefront.logging import get_logger
from storefront.models import AddToCartRequest, UpdateCartItemRequest
from .deps import bearer_token, build_identity, get_cart_backend

logger = get_logger(__name__)

router = APIRouter(prefix="/cart", tags=["cart"])


def _http_error(e: StorefrontError) -> HTTPException:
    return HTTPException(status_code=e.status_code, detail=e.message)


@router.get("")
async def get_cart(
    store_id: int = Query(alias="storeId"),
    session_id: Optional[str] = Query(default=None, alias="sessionId"),
    token: Optional[str] = Depends(bearer_token),
    backend: MockCartBackend = Depends(get_cart_backend),
):
    try:
        cart = await backend.get_cart(build_identity(store_id, session_id, token))
    except StorefrontError as e:
        raise _http_error(e)
    return cart.to_dict()


@router.post("/items")
async def add_item(
    request: AddToCartRequest,
    token: Optional[str] = Depends(bearer_token),
    backend: MockCartBackend = Depends(get_cart_backend),
):
    identity = build_identity(request.store_id, request.session_id, token)
    try:
        item = await backend.add_item(identity, request)
    except StorefrontError as e:
        raise _http_error(e)
    return item.to_dict()


@router.put("/items/{item_id}")
async def update_item(
    item_id: int,
    request: UpdateCartItemRequest,
    store_id: Optional[int] = Query(default=None, alias="storeId"),
    session_id: Optional[str] = Query(default=None, alias="sessionId"),
    token: Optional[str] = Depends(bearer_token),
    backend: MockCartBackend = Depends(get_cart_backend),
):
    try:
        item = await backend.update_item(build_identity(store_id, session_id, token), item_id, request.quantity)
    except StorefrontError as e:
        raise _http_error(e)
    if item is None:
        return Response(status_code=204)
    return item.to_dict()


@router.delete("/items/{item_id}", status_code=204)
async def remove_item(
    item_id: int,
    store_id: Optional[int] = Query(default=None, alias="storeId"),
    session_id: Optional[str] = Query(default=None, alias="sessionId"),
    token: Optional[str] = Depends(bearer_token),
    backend: MockCartBackend = Depends(get_cart_backend),
):
    try:
        await backend.remove_item(build_identity(store_id, session_id, token), item_id)
    except StorefrontError as e:
        raise _http_error(e)
    return Response(status_code=204)


@router.delete("/clear", status_code=204)
async def clear_cart(
    store_id: int = Query(alias="storeId"),
    session_id: Optional[str] = Query(default=None, alias="sessionId"),
    token: Optional[str] = Depends(bearer_token),
    backend: MockCartBackend = Depends(get_cart_backend),
):
    try:
        await backend.clear_cart(build_identity(store_id, session_id, token))
    except StorefrontError as e:
        raise _http_error(e)
    return Response(status_code=204)


@router.get("/count")
async def get_count(
    store_id: int = Query(alias="storeId"),
    session_id: Optional[str] = Query(default=None, alias="sessionId"),
    token: Optional[str] = Depends(bearer_token),
    backend: MockCartBackend = Depends(get_cart_backend),
):
    try:
        count = await backend.get_item_count(build_identity(store_id, session_id, token))
    except StorefrontError as e:
        raise _http_error(e)
    return {"count": count}
