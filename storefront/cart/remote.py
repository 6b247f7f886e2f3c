"""Cart backend talking to the storefront REST API."""
from typing import Any, Callable, Dict, Optional, TypeVar

import httpx

from storefront.cart.models import Cart, CartIdentity, CartItem
from storefront.errors import CartError, CartItemNotFoundError, ProductNotFoundError, ERROR_CART_UNAVAILABLE
from storefront.http import auth_headers, error_detail
from storefront.logging import get_logger
from storefront.models import AddToCartRequest, UpdateCartItemRequest

logger = get_logger(__name__)

T = TypeVar("T")


class RemoteCartBackend:
    """
    HTTP cart backend.

    The session id travels with every request that has one, credential or
    not, so the server can spot a guest cart waiting to be merged.
    """

    def __init__(self, client: httpx.AsyncClient, prefix: str = "/cart"):
        self.client = client
        self.prefix = prefix

    @staticmethod
    def _params(identity: CartIdentity) -> Dict[str, Any]:
        params: Dict[str, Any] = {"storeId": identity.store_id}
        if identity.session_id:
            params["sessionId"] = identity.session_id
        return params

    async def _request(
        self,
        method: str,
        path: str,
        identity: CartIdentity,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        try:
            response = await self.client.request(
                method,
                f"{self.prefix}{path}",
                params=params,
                json=json,
                headers=auth_headers(identity.auth_token),
            )
            response.raise_for_status()
            return response
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            detail = error_detail(e.response)
            logger.error(f"Cart API {method} {path} failed with {status}: {detail}")
            if status == 404:
                if path.startswith("/items/"):
                    raise CartItemNotFoundError(detail) from e
                if path == "/items":
                    raise ProductNotFoundError(detail) from e
            raise CartError(detail or ERROR_CART_UNAVAILABLE, status_code=status) from e
        except httpx.RequestError as e:
            logger.error(f"Cart API network error on {method} {path}: {e}")
            raise CartError(f"{ERROR_CART_UNAVAILABLE}: {e}", status_code=503) from e

    @staticmethod
    def _decode(response: httpx.Response, parse: Callable[[Any], T]) -> T:
        """Parse a 2xx body; anything unusable (HTML page, wrong shape) is a CartError."""
        try:
            return parse(response.json())
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            logger.error(f"Cart API returned an unusable body for {response.request.url.path}: {e}")
            raise CartError(f"{ERROR_CART_UNAVAILABLE}: malformed response", status_code=502) from e

    async def get_cart(self, identity: CartIdentity) -> Cart:
        response = await self._request("GET", "", identity, params=self._params(identity))
        cart = self._decode(response, Cart.from_dict)
        if not cart.store_id:
            cart.store_id = identity.store_id
        return cart

    async def add_item(self, identity: CartIdentity, request: AddToCartRequest) -> CartItem:
        body = request.model_copy(
            update={"store_id": identity.store_id, "session_id": identity.session_id}
        ).to_wire()
        response = await self._request("POST", "/items", identity, json=body)
        return self._decode(response, CartItem.from_dict)

    async def update_item(self, identity: CartIdentity, item_id: int, quantity: int) -> Optional[CartItem]:
        body = UpdateCartItemRequest(quantity=quantity).to_wire()
        response = await self._request(
            "PUT", f"/items/{item_id}", identity, params=self._params(identity), json=body
        )
        if response.status_code == 204 or not response.content:
            return None
        return self._decode(response, CartItem.from_dict)

    async def remove_item(self, identity: CartIdentity, item_id: int) -> None:
        await self._request("DELETE", f"/items/{item_id}", identity, params=self._params(identity))

    async def clear_cart(self, identity: CartIdentity) -> None:
        await self._request("DELETE", "/clear", identity, params=self._params(identity))

    async def get_item_count(self, identity: CartIdentity) -> int:
        response = await self._request("GET", "/count", identity, params=self._params(identity))
        return self._decode(response, _parse_count)


def _parse_count(data: Any) -> int:
    if isinstance(data, dict):
        data = data.get("count", 0)
    return int(data or 0)
