"""Domain events for the Order aggregate.

Settlement events are raised only when the webhook actually moves an order
out of Pending. A redelivered webhook therefore raises nothing and nothing
downstream (notifications) fires twice.
"""

from protean.fields import DateTime, Float, Identifier, Integer, String

from checkout.domain import checkout


@checkout.event(part_of="Order")
class OrderPlaced:
    """An order was written to the ledger from a cart with a payment in flight."""

    __version__ = 1

    order_id = Identifier(required=True)
    buyer_email = String(required=True)
    payment_intent_id = String(required=True)
    subtotal = Float(required=True)
    shipping_price = Float()
    discount = Float()
    total = Float(required=True)
    placed_at = DateTime(required=True)


@checkout.event(part_of="Order")
class OrderPaymentReceived:
    """The processor captured exactly the order total."""

    __version__ = 1

    order_id = Identifier(required=True)
    buyer_email = String(required=True)
    payment_intent_id = String(required=True)
    amount = Integer(required=True)  # Minor units
    settled_at = DateTime(required=True)


@checkout.event(part_of="Order")
class OrderPaymentMismatched:
    """The processor captured an amount different from the order total."""

    __version__ = 1

    order_id = Identifier(required=True)
    buyer_email = String(required=True)
    payment_intent_id = String(required=True)
    expected_amount = Integer(required=True)  # Minor units
    amount_received = Integer(required=True)  # Minor units
    settled_at = DateTime(required=True)
