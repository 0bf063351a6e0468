"""Ledger queries for orders."""

from checkout.domain import checkout
from checkout.order.order import Order


@checkout.repository(part_of=Order)
class OrderRepository:
    def find_by_payment_intent(self, payment_intent_id: str) -> Order | None:
        """The order paid by ``payment_intent_id``, or None if none was placed yet."""
        results = self._dao.query.filter(payment_intent_id=payment_intent_id).all().items
        return results[0] if results else None

    def for_buyer(self, buyer_email: str) -> list[Order]:
        """All orders of a buyer, newest first."""
        return self._dao.query.filter(buyer_email=buyer_email).order_by("-order_date").all().items

    def find_for_buyer(self, order_id: str, buyer_email: str) -> Order | None:
        """The order ``order_id`` if it belongs to ``buyer_email``."""
        results = self._dao.query.filter(id=str(order_id), buyer_email=buyer_email).all().items
        return results[0] if results else None
