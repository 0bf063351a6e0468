"""Stripe payment processor adapter.

Uses the stripe-python SDK for payment intents, promotion codes, coupons and
webhook signature verification. Every ``stripe.StripeError`` is reported as
``ExternalServiceError``; nothing is retried here.
"""

import stripe
import structlog

from checkout.errors import ExternalServiceError, SignatureError
from checkout.processor.port import (
    CouponRecord,
    IntentResult,
    PaymentProcessor,
    ProcessorEvent,
    PromotionCodeRecord,
)
from checkout.shared.money import to_major

logger = structlog.get_logger(__name__)


class StripePaymentProcessor(PaymentProcessor):
    """Production Stripe adapter."""

    def __init__(self, api_key: str, webhook_secret: str) -> None:
        self.api_key = api_key
        self.webhook_secret = webhook_secret
        stripe.api_key = api_key

    def create_intent(self, amount: int, currency: str) -> IntentResult:
        try:
            intent = stripe.PaymentIntent.create(
                amount=amount,
                currency=currency,
                payment_method_types=["card"],
            )
        except stripe.StripeError as exc:
            logger.warning("stripe.create_intent_failed", error=str(exc))
            raise ExternalServiceError("create_intent", str(exc)) from exc
        return self._to_result(intent)

    def update_intent(self, intent_id: str, amount: int) -> IntentResult:
        try:
            intent = stripe.PaymentIntent.modify(intent_id, amount=amount)
        except stripe.StripeError as exc:
            logger.warning("stripe.update_intent_failed", intent_id=intent_id, error=str(exc))
            raise ExternalServiceError("update_intent", str(exc)) from exc
        return self._to_result(intent)

    def find_promotion_code(self, code: str) -> PromotionCodeRecord | None:
        try:
            page = stripe.PromotionCode.list(code=code, active=True, limit=1)
        except stripe.StripeError as exc:
            raise ExternalServiceError("find_promotion_code", str(exc)) from exc

        if not page.data:
            return None

        promotion = page.data[0]
        coupon = getattr(promotion, "coupon", None)
        if coupon is None:
            # Newer API versions nest the coupon under `promotion`
            coupon = promotion.promotion.coupon
        coupon_id = coupon if isinstance(coupon, str) else coupon.id
        return PromotionCodeRecord(promotion_code=promotion.code, coupon_id=coupon_id)

    def retrieve_coupon(self, coupon_id: str) -> CouponRecord | None:
        try:
            coupon = stripe.Coupon.retrieve(coupon_id)
        except stripe.InvalidRequestError as exc:
            if getattr(exc, "code", None) == "resource_missing":
                return None
            raise ExternalServiceError("retrieve_coupon", str(exc)) from exc
        except stripe.StripeError as exc:
            raise ExternalServiceError("retrieve_coupon", str(exc)) from exc

        if not coupon.valid:
            return None

        return CouponRecord(
            coupon_id=coupon.id,
            name=coupon.name,
            amount_off=to_major(coupon.amount_off) if coupon.amount_off is not None else None,
            percent_off=coupon.percent_off,
        )

    def construct_event(self, payload: bytes, signature: str) -> ProcessorEvent:
        try:
            event = stripe.Webhook.construct_event(payload, signature, self.webhook_secret)
        except stripe.SignatureVerificationError as exc:
            raise SignatureError(str(exc)) from exc
        except ValueError as exc:
            raise SignatureError(f"Invalid payload: {exc}") from exc

        obj = event.data.object
        intent_id = obj.id if getattr(obj, "object", None) == "payment_intent" else None
        return ProcessorEvent(
            id=event.id,
            type=event.type,
            intent_id=intent_id,
            amount_received=getattr(obj, "amount_received", None),
        )

    @staticmethod
    def _to_result(intent) -> IntentResult:
        return IntentResult(
            intent_id=intent.id,
            client_secret=intent.client_secret,
            amount=intent.amount,
            currency=intent.currency,
        )
