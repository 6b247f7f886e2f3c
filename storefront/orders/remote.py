"""Checkout backend talking to the storefront REST API."""
import httpx

from storefront.cart.models import CartIdentity
from storefront.errors import (
    AuthenticationRequiredError,
    CheckoutError,
    EmptyCartError,
    OrderNotFoundError,
    ERROR_CHECKOUT_FAILED,
)
from storefront.http import auth_headers, error_detail
from storefront.logging import get_logger, sanitize_string_for_logging
from storefront.models import CheckoutRequest
from storefront.orders.models import Order, OrderDetails

logger = get_logger(__name__)


class RemoteCheckoutBackend:
    def __init__(self, client: httpx.AsyncClient, prefix: str = "/orders"):
        self.client = client
        self.prefix = prefix

    async def checkout(self, identity: CartIdentity, request: CheckoutRequest) -> Order:
        body = request.model_copy(
            update={
                "store_id": identity.store_id,
                "billing_address": request.resolved_billing_address(),
            }
        ).to_wire()
        headers = auth_headers(identity.auth_token)
        if identity.session_id:
            headers["X-Session-Id"] = identity.session_id

        try:
            response = await self.client.post(f"{self.prefix}/checkout", json=body, headers=headers)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            detail = error_detail(e.response)
            logger.error(f"Checkout failed with {status}: {sanitize_string_for_logging(detail, 200)}")
            if status == 401:
                raise AuthenticationRequiredError() from e
            if status == 400 and "empty" in detail.lower():
                raise EmptyCartError(detail) from e
            raise CheckoutError(detail or ERROR_CHECKOUT_FAILED, status_code=status) from e
        except httpx.RequestError as e:
            logger.error(f"Checkout network error: {e}")
            raise CheckoutError(f"{ERROR_CHECKOUT_FAILED}: {e}", status_code=503) from e

        try:
            return Order.model_validate(response.json())
        except ValueError as e:
            logger.error(f"Checkout returned an unusable body: {e}")
            raise CheckoutError(f"{ERROR_CHECKOUT_FAILED}: malformed response", status_code=502) from e

    async def get_order_by_number(self, order_number: str, email: str) -> OrderDetails:
        try:
            response = await self.client.get(f"{self.prefix}/{order_number}", params={"email": email})
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.info(f"Order lookup for {sanitize_string_for_logging(order_number)} returned {status}")
            if status in (400, 403, 404):
                raise OrderNotFoundError() from e
            raise CheckoutError(error_detail(e.response), status_code=status) from e
        except httpx.RequestError as e:
            logger.error(f"Order lookup network error: {e}")
            raise CheckoutError(f"{ERROR_CHECKOUT_FAILED}: {e}", status_code=503) from e

        try:
            return OrderDetails.model_validate(response.json())
        except ValueError as e:
            logger.error(f"Order lookup returned an unusable body: {e}")
            raise CheckoutError(f"{ERROR_CHECKOUT_FAILED}: malformed response", status_code=502) from e
