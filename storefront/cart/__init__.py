"""Cart package: models, mock and remote backends, and the cart store client."""
from .models import CartIdentity, CartItem, Cart
from .mock import MockCartBackend, MockCartStore, MockProduct
from .remote import RemoteCartBackend
from .service import CartStoreClient

__all__ = [
    "CartIdentity",
    "CartItem",
    "Cart",
    "MockCartBackend",
    "MockCartStore",
    "MockProduct",
    "RemoteCartBackend",
    "CartStoreClient",
]
