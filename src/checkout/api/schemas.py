"""Pydantic request/response schemas for the Checkout API.

These are external contracts (anti-corruption layer), separate from the
internal Protean commands and aggregates.
"""

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
class CartItemSchema(BaseModel):
    product_id: str
    product_name: str
    price: float = Field(ge=0)
    quantity: int = Field(ge=1)
    picture_url: str | None = None
    brand: str | None = None
    type: str | None = None


class CouponSchema(BaseModel):
    name: str | None = None
    amount_off: float | None = None
    percent_off: float | None = None
    promotion_code: str | None = None
    coupon_id: str


class CartSchema(BaseModel):
    id: str
    items: list[CartItemSchema] = Field(default_factory=list)
    delivery_method_id: str | None = None
    payment_intent_id: str | None = None
    client_secret: str | None = None
    coupon: CouponSchema | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "id": "cart-7f3a",
                    "items": [
                        {
                            "product_id": "prod-001",
                            "product_name": "Trail Runner",
                            "price": 10.0,
                            "quantity": 2,
                            "brand": "Acme",
                            "type": "Shoes",
                        }
                    ],
                    "delivery_method_id": None,
                }
            ]
        }
    }


# ---------------------------------------------------------------------------
# Delivery methods
# ---------------------------------------------------------------------------
class DeliveryMethodSchema(BaseModel):
    id: str
    short_name: str
    description: str
    delivery_time: str | None = None
    price: float


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class AddressSchema(BaseModel):
    name: str
    line1: str
    line2: str | None = None
    city: str
    state: str
    postal_code: str
    country: str


class PaymentSummarySchema(BaseModel):
    last4: str = Field(min_length=4, max_length=4)
    brand: str
    exp_month: int = Field(ge=1, le=12)
    exp_year: int


class CreateOrderRequest(BaseModel):
    cart_id: str
    delivery_method_id: str
    shipping_address: AddressSchema
    payment_summary: PaymentSummarySchema
    discount: float = Field(default=0.0, ge=0)


class OrderItemSchema(BaseModel):
    product_id: str
    product_name: str
    picture_url: str | None = None
    price: float
    quantity: int


class OrderSchema(BaseModel):
    id: str
    buyer_email: str
    order_date: str | None = None
    shipping_address: AddressSchema
    delivery_method: str
    shipping_price: float
    payment_summary: PaymentSummarySchema
    items: list[OrderItemSchema]
    subtotal: float
    discount: float
    total: float
    status: str
    payment_intent_id: str


class StatusResponse(BaseModel):
    status: str = "ok"
