"""PaymentIntentCoordinator: price the cart and create or update its payment intent.

The total charged is always computed here, server-side, in minor units:

    total = subtotal (repriced from the catalog) + shipping - live coupon discount

The first request for a cart creates a processor intent and stores its id and
client secret on the cart. Later requests update that intent's amount, so
repeating the call with an unchanged cart converges on the same state.

Two concurrent first requests for one cart can both create an intent. The
cart's owner is expected to serialize its own requests.
"""

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from checkout.cart import store as cart_store
from checkout.cart.cart import Cart
from checkout.coupon.resolver import live_terms
from checkout.delivery.delivery_method import DeliveryMethod
from checkout.domain import checkout
from checkout.errors import CartNotFound, DeliveryMethodInvalid
from checkout.payment.pricing import validate_prices
from checkout.processor import get_processor
from checkout.shared.money import Totals, discount_minor, to_minor

logger = structlog.get_logger(__name__)


@checkout.command(part_of="Cart")
class RequestPaymentIntent:
    cart_id = Identifier(required=True)


def shipping_minor(cart: Cart) -> int:
    """Price of the cart's delivery method, 0 when none is selected."""
    if not cart.delivery_method_id:
        return 0
    method = current_domain.repository_for(DeliveryMethod).find(cart.delivery_method_id)
    if method is None:
        raise DeliveryMethodInvalid(str(cart.delivery_method_id))
    return to_minor(method.price)


def coupon_discount_minor(cart: Cart, subtotal: int) -> int:
    if cart.coupon is None:
        return 0

    terms = live_terms(cart.coupon)
    if terms is None:
        cart.coupon = None
        return 0

    return discount_minor(subtotal, amount_off=terms.amount_off, percent_off=terms.percent_off)


@checkout.command_handler(part_of=Cart)
class PaymentIntentHandler:
    @handle(RequestPaymentIntent)
    def request_payment_intent(self, command: RequestPaymentIntent) -> Cart:
        cart_id = str(command.cart_id)

        cart = cart_store.get(cart_id)
        if cart is None:
            raise CartNotFound(cart_id)

        shipping = shipping_minor(cart)

        pricing = validate_prices(cart)
        pricing.ensure_available()

        subtotal = cart.subtotal_minor()
        totals = Totals(
            subtotal=subtotal,
            shipping=shipping,
            discount=coupon_discount_minor(cart, subtotal),
        )

        processor = get_processor()
        currency = current_domain.config["custom"].get("currency") or "usd"

        if not cart.payment_intent_id:
            intent = processor.create_intent(totals.total, currency)
            cart.attach_payment_intent(intent.intent_id, intent.client_secret)
            logger.info(
                "payment_intent.created",
                cart_id=cart_id,
                intent_id=intent.intent_id,
                amount=totals.total,
            )
        else:
            processor.update_intent(cart.payment_intent_id, totals.total)
            logger.info(
                "payment_intent.updated",
                cart_id=cart_id,
                intent_id=cart.payment_intent_id,
                amount=totals.total,
            )

        return cart_store.set(cart)
