"""In-process checkout backend over the mock cart store."""
import asyncio
from datetime import datetime, timezone
from typing import Optional

from storefront.cart.mock import MockCartStore
from storefront.cart.models import CartIdentity
from storefront.errors import EmptyCartError, OrderNotFoundError
from storefront.logging import get_logger
from storefront.models import CheckoutRequest
from storefront.orders.models import Order, OrderDetails, OrderItem

logger = get_logger(__name__)

ORDER_PLACED_MESSAGE = "Order placed successfully"


def format_order_number(order_id: int, year: Optional[int] = None) -> str:
    """ORD-<year>-<5-digit id>, e.g. ORD-2025-01000."""
    year = year or datetime.now(timezone.utc).year
    return f"ORD-{year}-{order_id:05d}"


class MockCheckoutBackend:
    """
    Creates orders from carts held in a MockCartStore.

    The cart is left untouched: clearing it after a successful checkout is
    the caller's job.
    """

    def __init__(self, store: MockCartStore, latency: float = 0.8):
        self.store = store
        self.latency = latency

    async def checkout(self, identity: CartIdentity, request: CheckoutRequest) -> Order:
        await asyncio.sleep(self.latency)
        cart = self.store.resolve_cart(identity, create=False)
        if cart is None or cart.is_empty:
            raise EmptyCartError()

        order_id = self.store.next_order_id()
        order_number = format_order_number(order_id)
        billing = request.resolved_billing_address()

        details = OrderDetails(
            id=order_id,
            order_number=order_number,
            customer_email=request.customer_email,
            status="PENDING",
            total=cart.subtotal,
            items=[
                OrderItem(
                    id=item.id,
                    product_name=item.product_name,
                    variant_name=item.variant_name or "Standard",
                    quantity=item.quantity,
                    price_at_order=item.price_snapshot,
                )
                for item in cart.items
            ],
            shipping_address=request.shipping_address.to_wire(),
            billing_address=billing.to_wire(),
            notes=request.notes,
            created_at=datetime.now(timezone.utc).isoformat(),
        )
        self.store.orders.append(details)
        logger.info(f"Mock order {order_number} created ({len(details.items)} lines)")

        return Order(
            order_id=order_id,
            order_number=order_number,
            status=details.status,
            total=details.total,
            customer_email=request.customer_email,
            message=ORDER_PLACED_MESSAGE,
        )

    async def get_order_by_number(self, order_number: str, email: str) -> OrderDetails:
        await asyncio.sleep(self.latency)
        wanted = (email or "").strip().lower()
        for order in self.store.orders:
            if order.order_number == order_number and order.customer_email.lower() == wanted:
                return order
        raise OrderNotFoundError()
