"""OrderFactory: snapshot a cart with a payment in flight into the ledger.

Preconditions are checked in a fixed order and each failure names its reason:
the cart exists, it carries a payment intent id, every item still exists in
the catalog, and the delivery method exists. Items are copied from the
cart, whose prices are the ones last repriced and charged. The order and
its items are written in one unit of work.

The cart is left alone. Deleting it is up to the caller once the whole flow
has succeeded.
"""

import json

import structlog
from protean import handle
from protean.fields import Float, Identifier, String, Text
from protean.utils.globals import current_domain

from checkout.cart import store as cart_store
from checkout.catalog import get_catalog
from checkout.delivery.delivery_method import DeliveryMethod
from checkout.domain import checkout
from checkout.errors import OrderCreationFailed, OrderCreationFailure
from checkout.order.order import Order, PaymentSummary, ShippingAddress

logger = structlog.get_logger(__name__)


@checkout.command(part_of="Order")
class PlaceOrder:
    cart_id = Identifier(required=True)
    buyer_email = String(required=True, max_length=255)
    delivery_method_id = Identifier(required=True)
    shipping_address = Text(required=True)  # JSON: address dict
    payment_summary = Text(required=True)  # JSON: card summary dict
    discount = Float(default=0.0)


def _load(value):
    return json.loads(value) if isinstance(value, str) else value


@checkout.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command: PlaceOrder) -> Order:
        cart_id = str(command.cart_id)

        cart = cart_store.get(cart_id)
        if cart is None:
            raise OrderCreationFailed(OrderCreationFailure.CART_NOT_FOUND, cart_id)

        if not cart.payment_intent_id:
            raise OrderCreationFailed(OrderCreationFailure.MISSING_PAYMENT_INTENT)

        repo = current_domain.repository_for(Order)
        existing = repo.find_by_payment_intent(cart.payment_intent_id)
        if existing is not None:
            if existing.buyer_email.lower() != command.buyer_email.lower():
                logger.warning(
                    "order.intent_claimed_by_other_buyer",
                    order_id=str(existing.id),
                    payment_intent_id=cart.payment_intent_id,
                )
                raise OrderCreationFailed(OrderCreationFailure.PAYMENT_INTENT_IN_USE)
            logger.info(
                "order.already_placed",
                order_id=str(existing.id),
                payment_intent_id=cart.payment_intent_id,
            )
            return existing

        catalog = get_catalog()
        items_data = []
        for item in cart.items:
            product = catalog.get_product(str(item.product_id))
            if product is None:
                raise OrderCreationFailed(OrderCreationFailure.PRODUCT_UNAVAILABLE, str(item.product_id))
            items_data.append(
                {
                    "product_id": str(item.product_id),
                    "product_name": item.product_name,
                    "picture_url": item.picture_url,
                    "price": item.price,
                    "quantity": item.quantity,
                }
            )

        delivery_method = current_domain.repository_for(DeliveryMethod).find(command.delivery_method_id)
        if delivery_method is None:
            raise OrderCreationFailed(
                OrderCreationFailure.DELIVERY_METHOD_NOT_FOUND,
                str(command.delivery_method_id),
            )

        order = Order.place(
            buyer_email=command.buyer_email,
            shipping_address=ShippingAddress(**_load(command.shipping_address)),
            delivery_method=delivery_method.description,
            shipping_price=delivery_method.price,
            payment_summary=PaymentSummary(**_load(command.payment_summary)),
            items_data=items_data,
            payment_intent_id=cart.payment_intent_id,
            discount=command.discount or 0.0,
        )
        repo.add(order)

        logger.info(
            "order.placed",
            order_id=str(order.id),
            cart_id=cart_id,
            payment_intent_id=order.payment_intent_id,
            total=order.total_minor,
        )
        return order
