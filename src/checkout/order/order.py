"""Order aggregate: the durable ledger record of a placed checkout.

Everything on an order is a snapshot taken when it is placed. Only ``status``
changes afterwards, and only through ``settle`` when the processor reports
the outcome of the payment.

State Machine:
    PENDING → PAYMENT_RECEIVED | PAYMENT_MISMATCH
    PENDING → PAYMENT_FAILED (reserved for explicit failure events)
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, ValueObject

from checkout.domain import checkout
from checkout.order.events import OrderPaymentMismatched, OrderPaymentReceived, OrderPlaced
from checkout.shared.money import subtotal_minor, to_major, to_minor


class OrderStatus(Enum):
    PENDING = "Pending"
    PAYMENT_RECEIVED = "PaymentReceived"
    PAYMENT_FAILED = "PaymentFailed"
    PAYMENT_MISMATCH = "PaymentMismatch"


_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {
        OrderStatus.PAYMENT_RECEIVED,
        OrderStatus.PAYMENT_MISMATCH,
        OrderStatus.PAYMENT_FAILED,
    },
    OrderStatus.PAYMENT_RECEIVED: set(),  # Terminal
    OrderStatus.PAYMENT_MISMATCH: set(),  # Terminal
    OrderStatus.PAYMENT_FAILED: set(),  # Terminal
}


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@checkout.value_object(part_of="Order")
class ShippingAddress:
    name = String(required=True, max_length=255)
    line1 = String(required=True, max_length=255)
    line2 = String(max_length=255)
    city = String(required=True, max_length=100)
    state = String(required=True, max_length=100)
    postal_code = String(required=True, max_length=20)
    country = String(required=True, max_length=100)


@checkout.value_object(part_of="Order")
class PaymentSummary:
    """Masked card details shown back to the buyer."""

    last4 = String(required=True, max_length=4)
    brand = String(required=True, max_length=50)
    exp_month = Integer(required=True, min_value=1, max_value=12)
    exp_year = Integer(required=True)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@checkout.entity(part_of="Order")
class OrderItem:
    """Product as it was ordered. Later catalog edits do not reach it."""

    product_id = Identifier(required=True)
    product_name = String(required=True, max_length=255)
    picture_url = String(max_length=500)
    price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=1)


# ---------------------------------------------------------------------------
# Aggregate
# ---------------------------------------------------------------------------
@checkout.aggregate
class Order:
    buyer_email = String(required=True, max_length=255)
    shipping_address = ValueObject(ShippingAddress, required=True)
    delivery_method = String(required=True, max_length=255)  # Description at placement time
    shipping_price = Float(required=True, min_value=0.0)
    payment_summary = ValueObject(PaymentSummary, required=True)
    items = HasMany(OrderItem)
    subtotal = Float(required=True, min_value=0.0)
    discount = Float(default=0.0, min_value=0.0)
    payment_intent_id = String(required=True, unique=True, max_length=255)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    order_date = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        buyer_email,
        shipping_address,
        delivery_method,
        shipping_price,
        payment_summary,
        items_data,
        payment_intent_id,
        discount=0.0,
    ):
        """Create a Pending order from item snapshots.

        The subtotal is computed here from ``items_data`` and never accepted
        from the caller. The discount is clamped to the subtotal.

        Args:
            items_data: List of dicts with product_id, product_name,
                        picture_url, price, quantity.
        """
        subtotal = subtotal_minor((item["price"], item["quantity"]) for item in items_data)
        discount_minor = max(0, min(to_minor(discount), subtotal))

        order = cls(
            buyer_email=buyer_email,
            shipping_address=shipping_address,
            delivery_method=delivery_method,
            shipping_price=shipping_price,
            payment_summary=payment_summary,
            items=[OrderItem(**item) for item in items_data],
            subtotal=to_major(subtotal),
            discount=to_major(discount_minor),
            payment_intent_id=payment_intent_id,
            status=OrderStatus.PENDING.value,
            order_date=datetime.now(UTC),
        )
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                buyer_email=buyer_email,
                payment_intent_id=payment_intent_id,
                subtotal=order.subtotal,
                shipping_price=order.shipping_price,
                discount=order.discount,
                total=order.total,
                placed_at=order.order_date,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Totals
    # -------------------------------------------------------------------
    @property
    def total_minor(self) -> int:
        """subtotal + delivery price - discount, in minor units."""
        return to_minor(self.subtotal) + to_minor(self.shipping_price) - to_minor(self.discount)

    @property
    def total(self) -> float:
        return to_major(self.total_minor)

    # -------------------------------------------------------------------
    # Settlement
    # -------------------------------------------------------------------
    @property
    def is_settled(self) -> bool:
        return OrderStatus(self.status) != OrderStatus.PENDING

    def settle(self, amount_received: int) -> bool:
        """Record the amount the processor captured.

        Returns False without changing anything if the order is already in a
        terminal status. A mismatch is a recorded outcome, not an error.
        """
        if self.is_settled:
            return False

        now = datetime.now(UTC)
        expected = self.total_minor

        if amount_received == expected:
            self._transition_to(OrderStatus.PAYMENT_RECEIVED)
            self.raise_(
                OrderPaymentReceived(
                    order_id=str(self.id),
                    buyer_email=self.buyer_email,
                    payment_intent_id=self.payment_intent_id,
                    amount=amount_received,
                    settled_at=now,
                )
            )
        else:
            self._transition_to(OrderStatus.PAYMENT_MISMATCH)
            self.raise_(
                OrderPaymentMismatched(
                    order_id=str(self.id),
                    buyer_email=self.buyer_email,
                    payment_intent_id=self.payment_intent_id,
                    expected_amount=expected,
                    amount_received=amount_received,
                    settled_at=now,
                )
            )
        return True

    def _transition_to(self, target_status):
        current = OrderStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})
        self.status = target_status.value

    # -------------------------------------------------------------------
    # Representation
    # -------------------------------------------------------------------
    def to_summary(self) -> dict:
        """Order as returned by the API and pushed to the buyer."""
        return {
            "id": str(self.id),
            "buyer_email": self.buyer_email,
            "order_date": self.order_date.isoformat() if self.order_date else None,
            "shipping_address": self.shipping_address.to_dict(),
            "delivery_method": self.delivery_method,
            "shipping_price": self.shipping_price,
            "payment_summary": self.payment_summary.to_dict(),
            "items": [
                {
                    "product_id": str(item.product_id),
                    "product_name": item.product_name,
                    "picture_url": item.picture_url,
                    "price": item.price,
                    "quantity": item.quantity,
                }
                for item in self.items
            ],
            "subtotal": self.subtotal,
            "discount": self.discount,
            "total": self.total,
            "status": self.status,
            "payment_intent_id": self.payment_intent_id,
        }
