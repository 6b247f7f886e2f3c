"""
In-process mock cart backend.

Used when no API is configured (local development, demos, tests). Carts
live in a ``MockCartStore`` that is created once and passed to every mock
backend that needs it; the checkout mock reads the same store.

Every call sleeps for ``latency`` seconds to behave like a network round
trip. There is no locking: each operation runs to completion between
awaits on a single event loop.
"""

import asyncio
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Dict, List, Optional

from storefront.cart.models import Cart, CartIdentity, CartItem
from storefront.errors import (
    CartError,
    CartItemNotFoundError,
    ProductNotFoundError,
    ERROR_MISSING_OWNER,
)
from storefront.logging import get_logger, sanitize_id_for_logging
from storefront.models import AddToCartRequest
from storefront.money import to_decimal

logger = get_logger(__name__)

CART_TTL = timedelta(hours=24)


@dataclass
class MockProduct:
    """Catalog entry of the mock store. ``price`` may change at any time."""
    id: int
    name: str
    price: Decimal
    image_url: Optional[str] = None

    def __post_init__(self):
        self.price = to_decimal(self.price)


DEFAULT_PRODUCTS: List[MockProduct] = [
    MockProduct(id=1, name="Classic T-Shirt", price=Decimal("19.99"), image_url="/assets/products/tshirt.jpg"),
    MockProduct(id=2, name="Canvas Tote Bag", price=Decimal("12.50"), image_url="/assets/products/tote.jpg"),
    MockProduct(id=3, name="Ceramic Mug", price=Decimal("9.90"), image_url="/assets/products/mug.jpg"),
    MockProduct(id=4, name="Hoodie", price=Decimal("49.00"), image_url="/assets/products/hoodie.jpg"),
    MockProduct(id=5, name="Sticker Pack", price=Decimal("4.50")),
]


def user_owner_key(auth_token: str) -> str:
    return f"user:{auth_token}"


class MockCartStore:
    """
    The fake database behind the mock backends.

    Carts are keyed by owner: ``user:<token>`` for signed-in users, the
    session id for guests.
    """

    def __init__(self, products: Optional[List[MockProduct]] = None):
        source = DEFAULT_PRODUCTS if products is None else products
        self.catalog: Dict[int, MockProduct] = {
            p.id: MockProduct(id=p.id, name=p.name, price=p.price, image_url=p.image_url)
            for p in source
        }
        self.carts: Dict[str, Cart] = {}
        self.orders: List = []
        self._next_cart_id = 1
        self._next_item_id = 1
        self._next_order_id = 1000

    # ==================== COUNTERS ====================

    def next_item_id(self) -> int:
        item_id = self._next_item_id
        self._next_item_id += 1
        return item_id

    def next_order_id(self) -> int:
        order_id = self._next_order_id
        self._next_order_id += 1
        return order_id

    # ==================== CARTS ====================

    @staticmethod
    def owner_key(identity: CartIdentity) -> str:
        if identity.auth_token:
            return user_owner_key(identity.auth_token)
        if identity.session_id:
            return identity.session_id
        raise CartError(ERROR_MISSING_OWNER, status_code=400)

    def _create_cart(self, owner: str, identity: CartIdentity) -> Cart:
        cart = Cart(
            store_id=identity.store_id,
            items=[],
            id=self._next_cart_id,
            session_id=None if identity.auth_token else identity.session_id,
            expires_at=(datetime.now(timezone.utc) + CART_TTL).isoformat(),
        )
        self._next_cart_id += 1
        self.carts[owner] = cart
        return cart

    def resolve_cart(self, identity: CartIdentity, create: bool = True) -> Optional[Cart]:
        """
        Find (or create) the cart for ``identity``.

        A signed-in request that still carries a guest session id absorbs
        the guest cart first.
        """
        owner = self.owner_key(identity)
        if identity.auth_token and identity.session_id:
            self.merge_guest_cart(identity.session_id, owner)

        cart = self.carts.get(owner)
        if cart is None and create:
            cart = self._create_cart(owner, identity)
        return cart

    def merge_guest_cart(self, session_id: str, user_owner: str) -> Optional[Cart]:
        """
        Move the guest cart of ``session_id`` into the cart of ``user_owner``.

        Lines for a product the user already has add their quantity to the
        user's line (whose price snapshot wins); other lines move over as
        they are. A user without a cart simply adopts the guest cart.
        """
        guest_cart = self.carts.get(session_id)
        if guest_cart is None:
            return None

        del self.carts[session_id]
        if guest_cart.is_empty:
            logger.info(f"Guest cart {sanitize_id_for_logging(session_id)} empty, dropped")
            return None

        user_cart = self.carts.get(user_owner)
        if user_cart is None:
            guest_cart.session_id = None
            self.carts[user_owner] = guest_cart
            logger.info(f"Guest cart {sanitize_id_for_logging(session_id)} adopted by user")
            return guest_cart

        for guest_item in guest_cart.items:
            existing = user_cart.find_product(guest_item.product_id)
            if existing:
                existing.quantity += guest_item.quantity
            else:
                user_cart.items.append(guest_item)
        user_cart.recalculate_totals()
        logger.info(
            f"Merged {len(guest_cart.items)} guest lines from {sanitize_id_for_logging(session_id)} into user cart"
        )
        return user_cart

    def find_item(self, identity: CartIdentity, item_id: int) -> tuple[Cart, CartItem]:
        """Line ``item_id`` in the caller's own cart; other owners' lines are not found."""
        cart = self.resolve_cart(identity, create=False)
        item = cart.find_item(item_id) if cart is not None else None
        if item is None:
            raise CartItemNotFoundError()
        return cart, item


class MockCartBackend:
    """Cart arithmetic over a MockCartStore, with artificial latency."""

    def __init__(self, store: Optional[MockCartStore] = None, latency: float = 0.3):
        self.store = store if store is not None else MockCartStore()
        self.latency = latency

    async def _delay(self) -> None:
        await asyncio.sleep(self.latency)

    async def get_cart(self, identity: CartIdentity) -> Cart:
        await self._delay()
        return self.store.resolve_cart(identity)

    async def add_item(self, identity: CartIdentity, request: AddToCartRequest) -> CartItem:
        """
        Add ``request.quantity`` of a product.

        Lines are matched by product id only; the variant does not affect
        price in the mock. An existing line keeps its price snapshot and
        only gains quantity.
        """
        await self._delay()
        product = self.store.catalog.get(request.product_id)
        if product is None:
            raise ProductNotFoundError()

        cart = self.store.resolve_cart(identity)
        item = cart.find_product(request.product_id)
        if item is not None:
            item.quantity += request.quantity
        else:
            item = CartItem(
                id=self.store.next_item_id(),
                product_id=product.id,
                variant_id=request.variant_id or product.id,
                product_name=product.name,
                variant_name="Standard",
                quantity=request.quantity,
                price_snapshot=product.price,
                image_url=product.image_url,
            )
            cart.items.append(item)

        cart.recalculate_totals()
        return item

    async def update_item(self, identity: CartIdentity, item_id: int, quantity: int) -> Optional[CartItem]:
        """Set a line's quantity; zero or less removes the line (returns None)."""
        await self._delay()
        cart, item = self.store.find_item(identity, item_id)
        if quantity <= 0:
            cart.items.remove(item)
            cart.recalculate_totals()
            return None

        item.quantity = quantity
        cart.recalculate_totals()
        return item

    async def remove_item(self, identity: CartIdentity, item_id: int) -> None:
        await self._delay()
        cart, item = self.store.find_item(identity, item_id)
        cart.items.remove(item)
        cart.recalculate_totals()

    async def clear_cart(self, identity: CartIdentity) -> None:
        await self._delay()
        cart = self.store.resolve_cart(identity, create=False)
        if cart is not None:
            cart.items = []
            cart.recalculate_totals()

    async def get_item_count(self, identity: CartIdentity) -> int:
        await self._delay()
        cart = self.store.resolve_cart(identity, create=False)
        return cart.item_count if cart is not None else 0
