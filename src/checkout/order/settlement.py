"""WebhookProcessor: reconcile processor payment events with the order ledger.

Flow for one delivery:

1. Verify the signature (``SignatureError`` before anything is touched).
2. Ignore every event type except "payment succeeded".
3. Find the order by payment intent id (``OrderNotFound`` if it is not there).
4. Compare the captured amount with the order total in minor units and
   settle the order as PaymentReceived or PaymentMismatch.
5. Persist. The settlement event drives the buyer notification.

Deliveries are at-least-once. A settled order is never settled again, so a
replay changes nothing and notifies nobody. The event id doubles as the
command idempotency key where an idempotency store is configured.
"""

import structlog
from protean import handle
from protean.fields import Integer, String
from protean.utils.globals import current_domain

from checkout.domain import checkout
from checkout.errors import OrderNotFound
from checkout.order.order import Order
from checkout.processor import get_processor
from checkout.processor.port import PAYMENT_SUCCEEDED

logger = structlog.get_logger(__name__)


@checkout.command(part_of="Order")
class SettlePaymentIntent:
    """Apply a verified processor event to the order paid by its intent."""

    event_id = String(required=True, max_length=255)
    event_type = String(required=True, max_length=100)
    payment_intent_id = String(max_length=255)
    amount_received = Integer(min_value=0)  # Minor units


@checkout.command_handler(part_of=Order)
class SettlePaymentIntentHandler:
    @handle(SettlePaymentIntent)
    def settle(self, command: SettlePaymentIntent) -> dict:
        if command.event_type != PAYMENT_SUCCEEDED:
            logger.debug("webhook.ignored", event_id=command.event_id, event_type=command.event_type)
            return {"event_id": command.event_id, "handled": False}

        repo = current_domain.repository_for(Order)
        order = repo.find_by_payment_intent(command.payment_intent_id)
        if order is None:
            logger.error(
                "webhook.order_missing",
                event_id=command.event_id,
                payment_intent_id=command.payment_intent_id,
            )
            raise OrderNotFound(f"No order for payment intent {command.payment_intent_id}")

        changed = order.settle(command.amount_received or 0)
        if changed:
            repo.add(order)
            logger.info(
                "webhook.settled",
                event_id=command.event_id,
                order_id=str(order.id),
                status=order.status,
                expected=order.total_minor,
                received=command.amount_received,
            )
        else:
            logger.info(
                "webhook.already_settled",
                event_id=command.event_id,
                order_id=str(order.id),
                status=order.status,
            )

        return {
            "event_id": command.event_id,
            "handled": True,
            "order_id": str(order.id),
            "status": order.status,
            "changed": changed,
        }


def process_webhook(payload: bytes, signature: str) -> dict:
    """Verify and apply one webhook delivery. Raises on any failure so the processor retries."""
    event = get_processor().construct_event(payload, signature)

    return current_domain.process(
        SettlePaymentIntent(
            event_id=event.id,
            event_type=event.type,
            payment_intent_id=event.intent_id,
            amount_received=event.amount_received,
        ),
        asynchronous=False,
        idempotency_key=event.id,
    )
