"""
Order models.

Servers disagree on a few field names (``total`` vs ``totalAmount``, a flat
``customerEmail`` vs a nested ``customer.email``, ``priceAtOrder`` vs
``price``). Responses are validated into these models as soon as they
arrive; nothing past this module deals with the variants.
"""
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_serializer, field_validator, model_validator
from pydantic.alias_generators import to_camel

from storefront.money import line_total, to_decimal, to_float


class OrderModel(BaseModel):
    """camelCase in and out, snake_case in Python, unknown server fields ignored."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


def _lift_customer_email(data: Any) -> Any:
    if isinstance(data, dict) and not (data.get("customerEmail") or data.get("customer_email")):
        customer = data.get("customer")
        if isinstance(customer, dict) and customer.get("email"):
            data = {**data, "customerEmail": customer["email"]}
    return data


class Order(OrderModel):
    """Result of a successful checkout."""
    order_id: int = Field(validation_alias=AliasChoices("order_id", "orderId", "id"))
    order_number: str
    status: str = "PENDING"
    total: Decimal = Field(default=Decimal("0"), validation_alias=AliasChoices("total", "totalAmount"))
    customer_email: str = ""
    message: str = ""

    @model_validator(mode="before")
    @classmethod
    def lift_customer_email(cls, data):
        return _lift_customer_email(data)

    @field_validator("total", mode="before")
    @classmethod
    def convert_total_to_decimal(cls, v):
        return to_decimal(v)

    @field_serializer("total")
    def serialize_total(self, v: Decimal) -> float:
        return to_float(v)


class OrderItem(OrderModel):
    """Order line with the price frozen at checkout."""
    id: int
    product_name: str = Field(default="", validation_alias=AliasChoices("product_name", "productName", "productTitle"))
    variant_name: str = ""
    quantity: int
    price_at_order: Decimal = Field(validation_alias=AliasChoices("price_at_order", "priceAtOrder", "price"))
    subtotal: Optional[Decimal] = None

    @field_validator("price_at_order", mode="before")
    @classmethod
    def convert_price_to_decimal(cls, v):
        return to_decimal(v)

    @field_validator("subtotal", mode="before")
    @classmethod
    def convert_subtotal_to_decimal(cls, v):
        return to_decimal(v) if v is not None else None

    @model_validator(mode="after")
    def fill_subtotal(self):
        if self.subtotal is None:
            self.subtotal = line_total(self.price_at_order, self.quantity)
        return self

    @field_serializer("price_at_order", "subtotal")
    def serialize_money(self, v: Optional[Decimal]) -> Optional[float]:
        return to_float(v) if v is not None else None


class OrderDetails(OrderModel):
    """Full order as returned by the order lookup."""
    id: int
    order_number: str
    customer_email: str = ""
    status: str = ""
    total: Decimal = Field(default=Decimal("0"), validation_alias=AliasChoices("total", "totalAmount"))
    items: List[OrderItem] = Field(default_factory=list)
    shipping_address: Dict[str, Any] = Field(default_factory=dict)
    billing_address: Dict[str, Any] = Field(default_factory=dict)
    notes: Optional[str] = None
    created_at: str = ""

    @model_validator(mode="before")
    @classmethod
    def lift_customer_email(cls, data):
        return _lift_customer_email(data)

    @field_validator("total", mode="before")
    @classmethod
    def convert_total_to_decimal(cls, v):
        return to_decimal(v)

    @field_serializer("total")
    def serialize_total(self, v: Decimal) -> float:
        return to_float(v)
