"""
Request models for the cart and checkout HTTP contract.

Field names are snake_case in Python and camelCase on the wire.
"""
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> Dict[str, Any]:
        """JSON body as the API expects it (camelCase, unset optionals dropped)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# ==================== CART MODELS ====================

class AddToCartRequest(WireModel):
    product_id: int
    quantity: int = Field(default=1, ge=1)
    variant_id: Optional[int] = None
    # Filled in by the cart client when left empty
    store_id: Optional[int] = None
    session_id: Optional[str] = None


class UpdateCartItemRequest(WireModel):
    quantity: int  # 0 removes the line


# ==================== CHECKOUT MODELS ====================

class Address(WireModel):
    first_name: str
    last_name: str
    address1: str
    address2: Optional[str] = None
    city: str
    postal_code: str
    country: str
    phone: Optional[str] = None


class CheckoutRequest(WireModel):
    customer_email: str
    shipping_address: Address
    billing_address: Optional[Address] = None  # None means same as shipping
    store_id: Optional[int] = None
    notes: Optional[str] = None

    def resolved_billing_address(self) -> Address:
        return self.billing_address or self.shipping_address
