"""
Checkout orchestration.

Checkout needs a signed-in user. Without a credential, or when the server
rejects it, the visitor is sent to the login page with a return URL and the
call fails with AuthenticationRequiredError; guests never reach the backend.

A successful checkout does not empty the cart. Callers clear it explicitly
once they have the order.
"""
from typing import Callable, Dict, Optional, Protocol

from storefront.auth import AuthSession
from storefront.cart.models import CartIdentity, StoreResolver, resolve_store_id
from storefront.errors import AuthenticationRequiredError
from storefront.logging import get_logger, sanitize_string_for_logging
from storefront.models import CheckoutRequest
from storefront.orders.models import Order, OrderDetails
from storefront.session import SessionIdentityProvider

logger = get_logger(__name__)

Navigator = Callable[[str, Dict[str, str]], None]


class CheckoutBackend(Protocol):
    async def checkout(self, identity: CartIdentity, request: CheckoutRequest) -> Order: ...
    async def get_order_by_number(self, order_number: str, email: str) -> OrderDetails: ...


def _log_navigation(path: str, params: Dict[str, str]) -> None:
    logger.info(f"Navigation to {path} requested with {params}")


class CheckoutService:
    def __init__(
        self,
        backend: CheckoutBackend,
        auth: AuthSession,
        sessions: SessionIdentityProvider,
        navigate: Optional[Navigator] = None,
        store: StoreResolver = None,
        login_path: str = "/login",
        return_url: str = "/checkout",
    ):
        self.backend = backend
        self.auth = auth
        self.sessions = sessions
        self.navigate = navigate or _log_navigation
        self._store = store
        self.login_path = login_path
        self.return_url = return_url

    def redirect_to_login(self) -> None:
        self.navigate(self.login_path, {"returnUrl": self.return_url})

    async def checkout(self, request: CheckoutRequest) -> Order:
        """
        Turn the current cart into an order.

        Raises:
            AuthenticationRequiredError: no credential, or the server rejected it
            EmptyCartError: nothing to order
            CheckoutError: any other failure
        """
        token = await self.auth.get_token()
        if not token:
            logger.info("Checkout attempted without sign-in, redirecting to login")
            self.redirect_to_login()
            raise AuthenticationRequiredError()

        store_id = request.store_id if request.store_id is not None else resolve_store_id(self._store)

        identity = CartIdentity(
            store_id=store_id,
            session_id=await self.sessions.peek_session_id(),
            auth_token=token,
        )
        try:
            order = await self.backend.checkout(identity, request)
        except AuthenticationRequiredError:
            logger.info("Credential rejected at checkout, redirecting to login")
            self.redirect_to_login()
            raise

        logger.info(
            f"Order {order.order_number} placed for "
            f"{sanitize_string_for_logging(order.customer_email)}, total {order.total}"
        )
        return order

    async def get_order_by_number(self, order_number: str, email: str) -> OrderDetails:
        """
        Look up an order by number and customer email.

        Both must match. A wrong number and a wrong email fail the same way.
        """
        return await self.backend.get_order_by_number(order_number, email)
