"""
Error messages and exception types shared by the cart and checkout layers.

Every domain error carries an HTTP-like ``status_code`` so the dev backend
can map it onto a response and the clients can map responses back onto it.
"""

# Store errors
ERROR_STORE_UNAVAILABLE = "No store is selected for this cart"

# Cart errors
ERROR_CART_UNAVAILABLE = "Cart service unavailable"
ERROR_PRODUCT_NOT_FOUND = "Product not found"
ERROR_CART_ITEM_NOT_FOUND = "Item not found"
ERROR_CART_EMPTY = "Cart is empty"
ERROR_MISSING_OWNER = "Cart request carries neither a session id nor a credential"

# Checkout / order errors
ERROR_AUTH_REQUIRED = "Please sign in to complete your order"
ERROR_CHECKOUT_FAILED = "Checkout failed, please try again"
# Deliberately covers both "no such order" and "email does not match"
ERROR_ORDER_LOOKUP_FAILED = "Order not found or email does not match"

# Storage errors
ERROR_STORAGE_UNAVAILABLE = "Client storage unavailable"


class StorefrontError(ValueError):
    """Base class for storefront domain errors."""

    status_code = 500
    default_message = ERROR_CART_UNAVAILABLE

    def __init__(self, message: str | None = None, status_code: int | None = None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class StoreUnavailableError(StorefrontError):
    """No store identifier could be resolved for a cart call."""

    status_code = 400
    default_message = ERROR_STORE_UNAVAILABLE


class CartError(StorefrontError):
    """A cart read or mutation failed."""

    default_message = ERROR_CART_UNAVAILABLE


class ProductNotFoundError(CartError):
    status_code = 404
    default_message = ERROR_PRODUCT_NOT_FOUND


class CartItemNotFoundError(CartError):
    status_code = 404
    default_message = ERROR_CART_ITEM_NOT_FOUND


class CheckoutError(StorefrontError):
    """Checkout could not create an order."""

    default_message = ERROR_CHECKOUT_FAILED


class EmptyCartError(CheckoutError):
    status_code = 400
    default_message = ERROR_CART_EMPTY


class AuthenticationRequiredError(CheckoutError):
    """Checkout attempted without a (valid) credential."""

    status_code = 401
    default_message = ERROR_AUTH_REQUIRED


class OrderNotFoundError(StorefrontError):
    status_code = 404
    default_message = ERROR_ORDER_LOOKUP_FAILED


class StorageUnavailableError(Exception):
    """Durable client storage cannot be read or written."""

    def __init__(self, message: str = ERROR_STORAGE_UNAVAILABLE):
        super().__init__(message)
