"""Orders package: order models, checkout backends and the checkout service."""
from .models import Order, OrderDetails, OrderItem
from .mock import MockCheckoutBackend
from .remote import RemoteCheckoutBackend
from .service import CheckoutService

__all__ = [
    "Order",
    "OrderDetails",
    "OrderItem",
    "MockCheckoutBackend",
    "RemoteCheckoutBackend",
    "CheckoutService",
]
