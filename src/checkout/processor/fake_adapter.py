"""Fake payment processor for development and testing.

Keeps intents and coupons in memory. Webhook payloads are signed with
HMAC-SHA256 over ``"{timestamp}.{payload}"`` and verified by the stripe SDK,
so webhook tests exercise the same signature check as production.
"""

import hashlib
import hmac
import json
import time
from uuid import uuid4

import stripe

from checkout.errors import ExternalServiceError, SignatureError
from checkout.processor.port import (
    CouponRecord,
    IntentResult,
    PaymentProcessor,
    ProcessorEvent,
    PromotionCodeRecord,
)


class FakePaymentProcessor(PaymentProcessor):
    """Configurable in-memory payment processor."""

    def __init__(self, webhook_secret: str = "whsec_test", currency: str = "usd") -> None:
        self.webhook_secret = webhook_secret
        self.currency = currency
        self.intents: dict[str, IntentResult] = {}
        self.promotion_codes: dict[str, PromotionCodeRecord] = {}
        self.coupons: dict[str, CouponRecord] = {}
        self.should_succeed: bool = True
        self.failure_reason: str = "Processor unavailable"
        self.calls: list[dict] = []

    def configure(self, should_succeed: bool, failure_reason: str = "Processor unavailable") -> None:
        """Configure processor behaviour at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def add_coupon(
        self,
        code: str,
        coupon_id: str,
        name: str | None = None,
        amount_off: float | None = None,
        percent_off: float | None = None,
    ) -> CouponRecord:
        coupon = CouponRecord(coupon_id=coupon_id, name=name, amount_off=amount_off, percent_off=percent_off)
        self.coupons[coupon_id] = coupon
        self.promotion_codes[code] = PromotionCodeRecord(promotion_code=code, coupon_id=coupon_id)
        return coupon

    def _check(self, operation: str) -> None:
        if not self.should_succeed:
            raise ExternalServiceError(operation, self.failure_reason)

    def create_intent(self, amount: int, currency: str) -> IntentResult:
        self.calls.append({"method": "create_intent", "amount": amount, "currency": currency})
        self._check("create_intent")

        intent_id = f"pi_fake_{uuid4().hex[:16]}"
        intent = IntentResult(
            intent_id=intent_id,
            client_secret=f"{intent_id}_secret_{uuid4().hex[:8]}",
            amount=amount,
            currency=currency,
        )
        self.intents[intent_id] = intent
        return intent

    def update_intent(self, intent_id: str, amount: int) -> IntentResult:
        self.calls.append({"method": "update_intent", "intent_id": intent_id, "amount": amount})
        self._check("update_intent")

        current = self.intents.get(intent_id)
        if current is None:
            raise ExternalServiceError("update_intent", f"No such payment intent: {intent_id}")
        updated = IntentResult(
            intent_id=current.intent_id,
            client_secret=current.client_secret,
            amount=amount,
            currency=current.currency,
        )
        self.intents[intent_id] = updated
        return updated

    def find_promotion_code(self, code: str) -> PromotionCodeRecord | None:
        self.calls.append({"method": "find_promotion_code", "code": code})
        self._check("find_promotion_code")
        return self.promotion_codes.get(code)

    def retrieve_coupon(self, coupon_id: str) -> CouponRecord | None:
        self.calls.append({"method": "retrieve_coupon", "coupon_id": coupon_id})
        self._check("retrieve_coupon")
        return self.coupons.get(coupon_id)

    # -------------------------------------------------------------------
    # Webhooks
    # -------------------------------------------------------------------
    def sign(self, payload: bytes, timestamp: int | None = None) -> str:
        """Build a signature header for ``payload``."""
        timestamp = timestamp or int(time.time())
        signed = f"{timestamp}.".encode() + payload
        digest = hmac.new(self.webhook_secret.encode(), signed, hashlib.sha256).hexdigest()
        return f"t={timestamp},v1={digest}"

    def build_event(
        self,
        intent_id: str,
        amount_received: int,
        event_type: str = "payment_intent.succeeded",
        event_id: str | None = None,
    ) -> bytes:
        """Serialize a processor-shaped event payload."""
        event = {
            "id": event_id or f"evt_fake_{uuid4().hex[:16]}",
            "type": event_type,
            "data": {"object": {"id": intent_id, "object": "payment_intent", "amount_received": amount_received}},
        }
        return json.dumps(event).encode()

    def construct_event(self, payload: bytes, signature: str) -> ProcessorEvent:
        self.calls.append({"method": "construct_event"})

        try:
            stripe.WebhookSignature.verify_header(
                payload.decode("utf-8"),
                signature or "",
                self.webhook_secret,
                tolerance=stripe.Webhook.DEFAULT_TOLERANCE,
            )
        except stripe.SignatureVerificationError as exc:
            raise SignatureError(str(exc)) from exc

        try:
            event = json.loads(payload)
        except ValueError as exc:
            raise SignatureError(f"Payload is not valid JSON: {exc}") from exc

        intent = event.get("data", {}).get("object", {})
        return ProcessorEvent(
            id=event["id"],
            type=event["type"],
            intent_id=intent.get("id"),
            amount_received=intent.get("amount_received"),
        )

    def reset(self) -> None:
        self.intents.clear()
        self.promotion_codes.clear()
        self.coupons.clear()
        self.calls.clear()
        self.should_succeed = True
        self.failure_reason = "Processor unavailable"
