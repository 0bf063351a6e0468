"""Push the settled order to the buyer when the webhook settles it."""

import structlog
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from checkout.domain import checkout
from checkout.notification import get_dispatcher
from checkout.order.events import OrderPaymentMismatched, OrderPaymentReceived
from checkout.order.order import Order

logger = structlog.get_logger(__name__)


@checkout.event_handler(part_of=Order)
class OrderSettlementNotifier:
    """Sends the order-complete message for both settlement outcomes."""

    def _push(self, order_id: str, buyer_email: str) -> None:
        order = current_domain.repository_for(Order).get(order_id)
        get_dispatcher().notify(buyer_email, order.to_summary())

    @handle(OrderPaymentReceived)
    def on_payment_received(self, event: OrderPaymentReceived) -> None:
        self._push(str(event.order_id), event.buyer_email)

    @handle(OrderPaymentMismatched)
    def on_payment_mismatched(self, event: OrderPaymentMismatched) -> None:
        logger.warning(
            "order.payment_mismatch",
            order_id=str(event.order_id),
            expected=event.expected_amount,
            received=event.amount_received,
        )
        self._push(str(event.order_id), event.buyer_email)
