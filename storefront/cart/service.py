"""Cart store client: the cart API the UI talks to."""
from typing import Optional, Protocol

import httpx

from storefront.auth import AuthSession
from storefront.cart.models import Cart, CartIdentity, CartItem, StoreResolver, resolve_store_id
from storefront.errors import CartError
from storefront.logging import get_logger, sanitize_id_for_logging
from storefront.models import AddToCartRequest
from storefront.notifier import CartChangeNotifier
from storefront.session import SessionIdentityProvider

logger = get_logger(__name__)


class CartBackend(Protocol):
    async def get_cart(self, identity: CartIdentity) -> Cart: ...
    async def add_item(self, identity: CartIdentity, request: AddToCartRequest) -> CartItem: ...
    async def update_item(self, identity: CartIdentity, item_id: int, quantity: int) -> Optional[CartItem]: ...
    async def remove_item(self, identity: CartIdentity, item_id: int) -> None: ...
    async def clear_cart(self, identity: CartIdentity) -> None: ...
    async def get_item_count(self, identity: CartIdentity) -> int: ...


class CartStoreClient:
    """
    Cart operations for the current store and visitor.

    Reads never fail: if the cart cannot be loaded an empty one is returned
    so the page can still render. Mutations raise on failure and pulse the
    notifier only when they succeed. One call, one attempt; retrying is up
    to the caller.

    The client keeps no copy of the cart between calls.
    """

    def __init__(
        self,
        backend: CartBackend,
        sessions: SessionIdentityProvider,
        auth: AuthSession,
        notifier: CartChangeNotifier,
        store: StoreResolver = None,
    ):
        self.backend = backend
        self.sessions = sessions
        self.auth = auth
        self.notifier = notifier
        self._store = store

    # ==================== IDENTITY ====================

    def resolve_store_id(self) -> int:
        return resolve_store_id(self._store)

    async def identity(self, store_id: Optional[int] = None) -> CartIdentity:
        """
        Build the owner key for the next call.

        Guests get a session id created on demand. Signed-in users only pass
        along a session id that already exists, as a hint that a guest cart
        may be waiting to be merged; they never create one.
        """
        if store_id is None:
            store_id = self.resolve_store_id()
        token = await self.auth.get_token()
        if token:
            session_id = await self.sessions.peek_session_id()
        else:
            session_id = await self.sessions.get_or_create_session_id()
        return CartIdentity(store_id=store_id, session_id=session_id, auth_token=token)

    # ==================== READS ====================

    async def get_cart(self) -> Cart:
        """Current cart, or an empty one if it cannot be loaded."""
        identity = await self.identity()
        try:
            return await self.backend.get_cart(identity)
        except (CartError, httpx.HTTPError) as e:
            logger.warning(
                f"Cart unavailable for store {identity.store_id} "
                f"(session {sanitize_id_for_logging(identity.session_id)}), showing empty cart: {e}"
            )
            return Cart.empty(identity.store_id, identity.session_id)

    async def get_cart_item_count(self) -> int:
        """Number of units in the cart, 0 if it cannot be loaded."""
        identity = await self.identity()
        try:
            return await self.backend.get_item_count(identity)
        except (CartError, httpx.HTTPError) as e:
            logger.warning(f"Cart count unavailable for store {identity.store_id}: {e}")
            return 0

    # ==================== MUTATIONS ====================

    async def add_item(self, request: AddToCartRequest) -> CartItem:
        """Add a product to the cart. Product existence is checked by the backend."""
        identity = await self.identity(request.store_id)
        item = await self.backend.add_item(identity, request)
        self.notifier.notify()
        return item

    async def update_item(self, item_id: int, quantity: int) -> Optional[CartItem]:
        item = await self.backend.update_item(await self.identity(), item_id, quantity)
        self.notifier.notify()
        return item

    async def remove_item(self, item_id: int) -> None:
        await self.backend.remove_item(await self.identity(), item_id)
        self.notifier.notify()

    async def clear_cart(self) -> None:
        await self.backend.clear_cart(await self.identity())
        self.notifier.notify()
