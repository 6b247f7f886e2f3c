"""Storefront client: guest/user cart identity, cart store client and checkout."""
from storefront.auth import AuthSession
from storefront.cart import Cart, CartIdentity, CartItem, CartStoreClient
from storefront.config import Settings, get_settings
from storefront.factory import Storefront, build_storefront, get_storefront
from storefront.migration import MigrationCoordinator
from storefront.models import AddToCartRequest, Address, CheckoutRequest
from storefront.notifier import CartChangeNotifier
from storefront.orders import CheckoutService, Order, OrderDetails
from storefront.session import SessionIdentityProvider

__all__ = [
    "AuthSession",
    "Cart",
    "CartIdentity",
    "CartItem",
    "CartStoreClient",
    "Settings",
    "get_settings",
    "Storefront",
    "build_storefront",
    "get_storefront",
    "MigrationCoordinator",
    "AddToCartRequest",
    "Address",
    "CheckoutRequest",
    "CartChangeNotifier",
    "CheckoutService",
    "Order",
    "OrderDetails",
    "SessionIdentityProvider",
]
