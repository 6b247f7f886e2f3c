"""
Tests for cart models
"""

from decimal import Decimal

import pytest

from storefront.cart import Cart, CartItem
from storefront.cart.models import resolve_store_id
from storefront.errors import StoreUnavailableError


class TestCartItem:
    """Tests for CartItem dataclass."""

    def test_create_cart_item(self):
        """Test creating a cart item."""
        item = CartItem(id=1, product_id=7, quantity=2, price_snapshot=10.0, product_name="Espresso Cup")

        assert item.product_id == 7
        assert item.price_snapshot == Decimal("10.0")
        assert item.added_at != ""

    def test_total_price_calculation(self):
        """Test total price for quantity."""
        item = CartItem(id=1, product_id=7, quantity=3, price_snapshot="19.99")

        assert item.total_price == Decimal("59.97")

    def test_from_dict_accepts_legacy_names(self):
        """Older servers send productTitle and price instead of productName and priceSnapshot."""
        item = CartItem.from_dict({
            "id": 5,
            "variantId": 70,
            "productTitle": "Espresso Cup",
            "quantity": 2,
            "price": 10.5,
        })

        assert item.product_name == "Espresso Cup"
        assert item.price_snapshot == Decimal("10.5")
        assert item.product_id == 70

    def test_to_dict_uses_wire_names(self):
        """Test serialization to camelCase keys."""
        item = CartItem(id=1, product_id=7, quantity=1, price_snapshot="10.00")

        data = item.to_dict()
        assert data["productId"] == 7
        assert data["priceSnapshot"] == 10.0


class TestCart:
    """Tests for Cart dataclass."""

    def test_create_empty_cart(self):
        """Test creating an empty cart."""
        cart = Cart.empty(store_id=1, session_id="session-a-b")

        assert cart.store_id == 1
        assert cart.session_id == "session-a-b"
        assert cart.item_count == 0
        assert cart.subtotal == 0
        assert cart.is_empty

    def test_cart_totals_derived_from_items(self):
        """Test totals are computed from the lines."""
        items = [
            CartItem(id=1, product_id=1, quantity=2, price_snapshot="10.00"),
            CartItem(id=2, product_id=2, quantity=1, price_snapshot="7.35"),
        ]

        cart = Cart(store_id=1, items=items)

        assert cart.item_count == 3
        assert cart.subtotal == Decimal("27.35")

    def test_recalculate_after_change(self):
        """Test totals follow a quantity change."""
        item = CartItem(id=1, product_id=1, quantity=1, price_snapshot="4.50")
        cart = Cart(store_id=1, items=[item])

        item.quantity = 4
        cart.recalculate_totals()

        assert cart.item_count == 4
        assert cart.subtotal == Decimal("18.00")

    def test_from_dict_keeps_server_totals(self):
        """Test server-sent totals are kept."""
        data = {
            "id": 12,
            "storeId": 3,
            "sessionId": "session-x-y",
            "items": [{"id": 1, "productId": 7, "quantity": 2, "priceSnapshot": 10.0}],
            "itemCount": 2,
            "subtotal": 20.0,
            "expiresAt": "2025-01-02T00:00:00Z",
        }

        cart = Cart.from_dict(data)

        assert cart.id == 12
        assert cart.store_id == 3
        assert cart.item_count == 2
        assert cart.subtotal == Decimal("20.0")
        assert cart.items[0].price_snapshot == Decimal("10.0")

    def test_from_dict_without_totals_computes_them(self):
        """Test missing totals are computed."""
        cart = Cart.from_dict({"storeId": 1, "items": [{"id": 1, "productId": 7, "quantity": 3, "priceSnapshot": "2.50"}]})

        assert cart.item_count == 3
        assert cart.subtotal == Decimal("7.50")

    def test_find_helpers(self):
        """Test lookup by line id and by product id."""
        item = CartItem(id=4, product_id=9, quantity=1, price_snapshot=1)
        cart = Cart(store_id=1, items=[item])

        assert cart.find_item(4) is item
        assert cart.find_product(9) is item
        assert cart.find_item(5) is None


class TestResolveStoreId:
    """Tests for store id resolution."""

    def test_fixed_store(self):
        """Test a fixed store id."""
        assert resolve_store_id(3) == 3

    def test_callable_store(self):
        """Test a store resolver callable."""
        assert resolve_store_id(lambda: 5) == 5

    def test_missing_store_raises(self):
        """Test no store id raises StoreUnavailableError."""
        with pytest.raises(StoreUnavailableError):
            resolve_store_id(None)
        with pytest.raises(StoreUnavailableError):
            resolve_store_id(lambda: None)
