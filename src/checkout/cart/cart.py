"""Cart aggregate: the buyer's selection before an order exists.

Carts are never written to the ledger. They round-trip through CartStore as
JSON and are bound to the in-memory provider only so Protean can validate
them. Item prices are snapshots; they become authoritative for a charge only
after the PricingValidator has re-derived them from the catalog.
"""

from protean.exceptions import ValidationError
from protean.fields import Float, HasMany, Identifier, Integer, String, ValueObject

from checkout.domain import checkout
from checkout.shared.money import subtotal_minor


@checkout.entity(part_of="Cart", provider="memory")
class CartItem:
    product_id = Identifier(required=True)
    product_name = String(required=True, max_length=255)
    price = Float(required=True, min_value=0.0)  # Snapshot, see module docstring
    quantity = Integer(required=True, min_value=1)
    picture_url = String(max_length=500)
    brand = String(max_length=100)
    type = String(max_length=100)

    def to_line(self) -> dict:
        return {
            "product_id": str(self.product_id),
            "product_name": self.product_name,
            "price": self.price,
            "quantity": self.quantity,
            "picture_url": self.picture_url,
            "brand": self.brand,
            "type": self.type,
        }


@checkout.value_object(part_of="Cart")
class AppliedCoupon:
    """Coupon attached to a cart.

    The amounts here are what the buyer saw when applying the code. Charging
    always re-reads the live coupon from the processor via ``coupon_id``.
    """

    name = String(max_length=255)
    amount_off = Float(min_value=0.0)
    percent_off = Float(min_value=0.0, max_value=100.0)
    promotion_code = String(max_length=255)
    coupon_id = String(required=True, max_length=255)


@checkout.aggregate(provider="memory")
class Cart:
    id = Identifier(identifier=True, required=True)
    items = HasMany(CartItem)
    delivery_method_id = Identifier()
    payment_intent_id = String(max_length=255)
    client_secret = String(max_length=255)
    coupon = ValueObject(AppliedCoupon)

    # -------------------------------------------------------------------
    # Factory / serialization
    # -------------------------------------------------------------------
    @classmethod
    def from_snapshot(cls, data: dict) -> "Cart":
        coupon = data.get("coupon")
        return cls(
            id=data["id"],
            items=[CartItem(**line) for line in data.get("items") or []],
            delivery_method_id=data.get("delivery_method_id"),
            payment_intent_id=data.get("payment_intent_id"),
            client_secret=data.get("client_secret"),
            coupon=AppliedCoupon(**coupon) if coupon else None,
        )

    def to_snapshot(self) -> dict:
        return {
            "id": str(self.id),
            "items": [item.to_line() for item in self.items],
            "delivery_method_id": str(self.delivery_method_id) if self.delivery_method_id else None,
            "payment_intent_id": self.payment_intent_id,
            "client_secret": self.client_secret,
            "coupon": self.coupon.to_dict() if self.coupon else None,
        }

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def is_empty(self) -> bool:
        return not self.items

    def item_for(self, product_id) -> CartItem | None:
        return next((i for i in self.items if str(i.product_id) == str(product_id)), None)

    def subtotal_minor(self) -> int:
        return subtotal_minor((item.price, item.quantity) for item in self.items)

    # -------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------
    def reprice_item(self, product_id, price: float) -> bool:
        """Overwrite an item's price snapshot. Returns True if it changed."""
        item = self.item_for(product_id)
        if item is None:
            raise ValidationError({"items": [f"Product {product_id} is not in the cart"]})
        if item.price == price:
            return False
        item.price = price
        return True

    def attach_payment_intent(self, intent_id: str, client_secret: str) -> None:
        if self.payment_intent_id and self.payment_intent_id != intent_id:
            raise ValidationError({"payment_intent_id": ["Cart already has a different payment intent"]})
        self.payment_intent_id = intent_id
        self.client_secret = client_secret
