"""
Tests for the in-process mock cart backend
"""
from decimal import Decimal

import pytest

from storefront.cart.mock import MockCartStore, user_owner_key
from storefront.cart.models import CartIdentity
from storefront.errors import CartError, CartItemNotFoundError, ProductNotFoundError
from storefront.models import AddToCartRequest

STORE_ID = 1
GUEST = CartIdentity(store_id=STORE_ID, session_id="session-guest-1")
OTHER_GUEST = CartIdentity(store_id=STORE_ID, session_id="session-guest-2")


def assert_totals_consistent(cart):
    assert cart.item_count == sum(item.quantity for item in cart.items)
    assert cart.subtotal == sum((item.price_snapshot * item.quantity for item in cart.items), Decimal("0"))


@pytest.mark.asyncio
async def test_add_update_remove_scenario(cart_backend):
    """Test 2 cups at 10.00, then 3, then removal of the line."""
    item = await cart_backend.add_item(GUEST, AddToCartRequest(product_id=7, quantity=2))
    cart = await cart_backend.get_cart(GUEST)
    assert cart.item_count == 2
    assert cart.subtotal == Decimal("20.00")

    await cart_backend.update_item(GUEST, item.id, 3)
    cart = await cart_backend.get_cart(GUEST)
    assert cart.item_count == 3
    assert cart.subtotal == Decimal("30.00")

    await cart_backend.remove_item(GUEST, item.id)
    cart = await cart_backend.get_cart(GUEST)
    assert cart.items == []
    assert cart.item_count == 0
    assert cart.subtotal == Decimal("0")


@pytest.mark.asyncio
async def test_totals_consistent_after_every_operation(cart_backend):
    """Test item count and subtotal always match the lines."""
    cup = await cart_backend.add_item(GUEST, AddToCartRequest(product_id=7))
    assert_totals_consistent(await cart_backend.get_cart(GUEST))

    await cart_backend.add_item(GUEST, AddToCartRequest(product_id=9, quantity=3))
    assert_totals_consistent(await cart_backend.get_cart(GUEST))

    await cart_backend.update_item(GUEST, cup.id, 5)
    assert_totals_consistent(await cart_backend.get_cart(GUEST))

    await cart_backend.clear_cart(GUEST)
    cart = await cart_backend.get_cart(GUEST)
    assert_totals_consistent(cart)
    assert cart.is_empty


@pytest.mark.asyncio
async def test_same_product_increments_existing_line(cart_backend):
    """Test adding a product twice grows one line."""
    first = await cart_backend.add_item(GUEST, AddToCartRequest(product_id=8))
    second = await cart_backend.add_item(GUEST, AddToCartRequest(product_id=8, quantity=2))

    assert second.id == first.id
    cart = await cart_backend.get_cart(GUEST)
    assert len(cart.items) == 1
    assert cart.items[0].quantity == 3
    assert cart.subtotal == Decimal("74.70")


@pytest.mark.asyncio
async def test_price_snapshot_pinned_after_catalog_change(cart_backend, mock_store):
    """Test a catalog price change does not touch an existing line."""
    await cart_backend.add_item(GUEST, AddToCartRequest(product_id=7, quantity=2))
    mock_store.catalog[7].price = Decimal("12.00")

    await cart_backend.add_item(GUEST, AddToCartRequest(product_id=7))

    cart = await cart_backend.get_cart(GUEST)
    assert cart.items[0].price_snapshot == Decimal("10.00")
    assert cart.subtotal == Decimal("30.00")


@pytest.mark.asyncio
async def test_new_line_uses_current_catalog_price(cart_backend, mock_store):
    """Test a new line snapshots the current catalog price."""
    mock_store.catalog[9].price = Decimal("8.00")

    item = await cart_backend.add_item(GUEST, AddToCartRequest(product_id=9))

    assert item.price_snapshot == Decimal("8.00")
    assert item.product_name == "Milk Jug"
    assert item.variant_name == "Standard"


@pytest.mark.asyncio
async def test_update_to_zero_removes_line(cart_backend):
    """Test quantity 0 removes the line."""
    item = await cart_backend.add_item(GUEST, AddToCartRequest(product_id=7))

    assert await cart_backend.update_item(GUEST, item.id, 0) is None
    assert (await cart_backend.get_cart(GUEST)).is_empty


@pytest.mark.asyncio
async def test_unknown_product(cart_backend):
    """Test adding a product missing from the catalog."""
    with pytest.raises(ProductNotFoundError) as exc_info:
        await cart_backend.add_item(GUEST, AddToCartRequest(product_id=999))
    assert exc_info.value.status_code == 404


@pytest.mark.asyncio
async def test_unknown_item(cart_backend):
    """Test updating or removing a line id that does not exist."""
    with pytest.raises(CartItemNotFoundError):
        await cart_backend.update_item(GUEST, 12345, 2)
    with pytest.raises(CartItemNotFoundError):
        await cart_backend.remove_item(GUEST, 12345)


@pytest.mark.asyncio
async def test_lines_of_other_owners_are_not_found(cart_backend):
    """Test a visitor cannot change another visitor's line by id."""
    item = await cart_backend.add_item(GUEST, AddToCartRequest(product_id=7, quantity=2))
    await cart_backend.add_item(OTHER_GUEST, AddToCartRequest(product_id=9))

    with pytest.raises(CartItemNotFoundError):
        await cart_backend.update_item(OTHER_GUEST, item.id, 5)
    with pytest.raises(CartItemNotFoundError):
        await cart_backend.remove_item(OTHER_GUEST, item.id)

    assert (await cart_backend.get_cart(GUEST)).item_count == 2


@pytest.mark.asyncio
async def test_missing_owner_rejected(cart_backend):
    """Test a call with neither token nor session id."""
    with pytest.raises(CartError) as exc_info:
        await cart_backend.get_cart(CartIdentity(store_id=STORE_ID))
    assert exc_info.value.status_code == 400


@pytest.mark.asyncio
async def test_count_does_not_create_cart(cart_backend, mock_store):
    """Test counting an unknown cart returns 0 without creating it."""
    assert await cart_backend.get_item_count(GUEST) == 0
    assert mock_store.carts == {}


class TestMerge:
    """Tests for guest cart merge on the first signed-in request."""

    @pytest.mark.asyncio
    async def test_user_without_cart_adopts_guest_cart(self, cart_backend, mock_store):
        """Test the guest cart becomes the user's cart."""
        await cart_backend.add_item(GUEST, AddToCartRequest(product_id=7, quantity=2))

        user = CartIdentity(store_id=STORE_ID, session_id=GUEST.session_id, auth_token="tok-1")
        cart = await cart_backend.get_cart(user)

        assert cart.item_count == 2
        assert cart.session_id is None
        assert GUEST.session_id not in mock_store.carts
        assert user_owner_key("tok-1") in mock_store.carts

    @pytest.mark.asyncio
    async def test_matching_lines_add_quantities(self, cart_backend, mock_store):
        """Test same-product lines add up and keep the user's snapshot."""
        user_only = CartIdentity(store_id=STORE_ID, auth_token="tok-1")
        await cart_backend.add_item(user_only, AddToCartRequest(product_id=7))
        mock_store.catalog[7].price = Decimal("11.00")
        await cart_backend.add_item(GUEST, AddToCartRequest(product_id=7, quantity=2))
        await cart_backend.add_item(GUEST, AddToCartRequest(product_id=9))

        user = CartIdentity(store_id=STORE_ID, session_id=GUEST.session_id, auth_token="tok-1")
        cart = await cart_backend.get_cart(user)

        cup = cart.find_product(7)
        assert cup.quantity == 3
        assert cup.price_snapshot == Decimal("10.00")
        assert cart.find_product(9).quantity == 1
        assert cart.item_count == 4
        assert cart.subtotal == Decimal("37.35")

    @pytest.mark.asyncio
    async def test_merge_happens_once(self, cart_backend):
        """Test repeated signed-in calls do not merge twice."""
        await cart_backend.add_item(GUEST, AddToCartRequest(product_id=7))
        user = CartIdentity(store_id=STORE_ID, session_id=GUEST.session_id, auth_token="tok-1")

        await cart_backend.get_cart(user)
        cart = await cart_backend.get_cart(user)

        assert cart.item_count == 1

    def test_empty_guest_cart_dropped(self):
        """Test an empty guest cart is discarded, not adopted."""
        store = MockCartStore([])
        store.resolve_cart(GUEST)

        assert store.merge_guest_cart(GUEST.session_id, user_owner_key("tok")) is None
        assert store.carts == {}
