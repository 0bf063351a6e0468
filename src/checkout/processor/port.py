"""Payment processor port (abstract interface).

Defines the contract every processor adapter implements: payment intents,
promotion-code and coupon lookups, and webhook event verification. Amounts
crossing this boundary are integer minor units; coupon ``amount_off`` is in
major units, matching cart and order prices.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

PAYMENT_SUCCEEDED = "payment_intent.succeeded"


@dataclass(frozen=True)
class IntentResult:
    """A processor-side payment intent."""

    intent_id: str
    client_secret: str
    amount: int
    currency: str


@dataclass(frozen=True)
class PromotionCodeRecord:
    promotion_code: str
    coupon_id: str


@dataclass(frozen=True)
class CouponRecord:
    """Live coupon terms as the processor holds them."""

    coupon_id: str
    name: str | None = None
    amount_off: float | None = None
    percent_off: float | None = None


@dataclass(frozen=True)
class ProcessorEvent:
    """A verified webhook event, reduced to what settlement needs."""

    id: str
    type: str
    intent_id: str | None = None
    amount_received: int | None = None

    @property
    def is_payment_succeeded(self) -> bool:
        return self.type == PAYMENT_SUCCEEDED


class PaymentProcessor(ABC):
    """Abstract payment processor interface."""

    @abstractmethod
    def create_intent(self, amount: int, currency: str) -> IntentResult:
        """Create a card payment intent for ``amount`` minor units."""
        ...

    @abstractmethod
    def update_intent(self, intent_id: str, amount: int) -> IntentResult:
        """Set the amount of an existing intent."""
        ...

    @abstractmethod
    def find_promotion_code(self, code: str) -> PromotionCodeRecord | None:
        """Return the active promotion code matching ``code``, if any."""
        ...

    @abstractmethod
    def retrieve_coupon(self, coupon_id: str) -> CouponRecord | None:
        """Return the live coupon for ``coupon_id``, if it still exists."""
        ...

    @abstractmethod
    def construct_event(self, payload: bytes, signature: str) -> ProcessorEvent:
        """Verify ``signature`` over ``payload`` and parse the event.

        Raises ``SignatureError`` when verification fails.
        """
        ...
