"""Cart models with Decimal-based pricing."""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional, Union

from storefront.errors import StoreUnavailableError
from storefront.money import ZERO, line_total, round_money, to_decimal, to_float

# A fixed store id, or a callable returning the current one (multi-tenant)
StoreResolver = Union[int, Callable[[], Optional[int]], None]


def resolve_store_id(store: StoreResolver) -> int:
    """Current store id; raises StoreUnavailableError when none can be determined."""
    store_id = store() if callable(store) else store
    if store_id is None:
        raise StoreUnavailableError()
    return int(store_id)


@dataclass
class CartIdentity:
    """Who a cart call is for: a store plus a guest session and/or a credential."""
    store_id: int
    session_id: Optional[str] = None
    auth_token: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.auth_token)


@dataclass
class CartItem:
    """
    Single line in the cart.

    ``price_snapshot`` is the unit price recorded when the line was created.
    Later catalog price changes never touch it.
    """
    id: int
    product_id: int
    quantity: int
    price_snapshot: Decimal
    variant_id: Optional[int] = None
    product_name: str = ""
    variant_name: str = ""
    image_url: Optional[str] = None
    added_at: str = ""

    def __post_init__(self):
        if not self.added_at:
            self.added_at = datetime.now(timezone.utc).isoformat()
        self.price_snapshot = to_decimal(self.price_snapshot)

    @property
    def total_price(self) -> Decimal:
        """Total price for all units at the snapshot price."""
        return line_total(self.price_snapshot, self.quantity)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "productId": self.product_id,
            "variantId": self.variant_id,
            "productName": self.product_name,
            "variantName": self.variant_name,
            "quantity": self.quantity,
            "priceSnapshot": to_float(self.price_snapshot),
            "imageUrl": self.image_url,
            "addedAt": self.added_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CartItem":
        """Create from an API payload (camelCase; older servers send productTitle / price)."""
        price = data.get("priceSnapshot")
        if price is None:
            price = data.get("price")
        return cls(
            id=int(data["id"]),
            product_id=int(data.get("productId") or data.get("variantId") or 0),
            variant_id=data.get("variantId"),
            product_name=data.get("productName") or data.get("productTitle") or "",
            variant_name=data.get("variantName") or "",
            quantity=int(data.get("quantity", 0)),
            price_snapshot=to_decimal(price),
            image_url=data.get("imageUrl"),
            added_at=data.get("addedAt", ""),
        )


@dataclass
class Cart:
    """
    Shopping cart for one store and one owner.

    ``item_count`` and ``subtotal`` are derived from the items. A cart built
    without them computes them; one read from the server keeps the server's
    values.
    """
    store_id: int
    items: List[CartItem] = field(default_factory=list)
    id: Optional[int] = None
    session_id: Optional[str] = None
    item_count: Optional[int] = None
    subtotal: Optional[Decimal] = None
    expires_at: str = ""

    def __post_init__(self):
        if self.item_count is None or self.subtotal is None:
            self.recalculate_totals()
        else:
            self.subtotal = to_decimal(self.subtotal)

    def recalculate_totals(self) -> None:
        """Re-derive item_count and subtotal from the lines."""
        self.item_count = sum(item.quantity for item in self.items)
        self.subtotal = round_money(sum((item.total_price for item in self.items), ZERO))

    @property
    def is_empty(self) -> bool:
        return not self.items

    def find_item(self, item_id: int) -> Optional[CartItem]:
        return next((item for item in self.items if item.id == item_id), None)

    def find_product(self, product_id: int) -> Optional[CartItem]:
        return next((item for item in self.items if item.product_id == product_id), None)

    @classmethod
    def empty(cls, store_id: int, session_id: Optional[str] = None) -> "Cart":
        """Empty cart shown when the real one cannot be loaded."""
        return cls(store_id=store_id, items=[], session_id=session_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "storeId": self.store_id,
            "sessionId": self.session_id,
            "items": [item.to_dict() for item in self.items],
            "itemCount": self.item_count,
            "subtotal": to_float(self.subtotal),
            "expiresAt": self.expires_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Cart":
        items = [CartItem.from_dict(item) for item in data.get("items") or []]
        item_count = data.get("itemCount")
        subtotal = data.get("subtotal")
        return cls(
            store_id=int(data.get("storeId") or 0),
            items=items,
            id=data.get("id"),
            session_id=data.get("sessionId"),
            item_count=int(item_count) if item_count is not None else None,
            subtotal=to_decimal(subtotal) if subtotal is not None else None,
            expires_at=data.get("expiresAt") or "",
        )
