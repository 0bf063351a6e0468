"""Payment processor factory.

Provides get_processor() / set_processor() to swap implementations:
- FakePaymentProcessor for development and testing
- StripePaymentProcessor when `payment_processor = "stripe"` is configured
"""

from protean.utils.globals import current_domain

from checkout.processor.port import PaymentProcessor

_current_processor: PaymentProcessor | None = None


def _build_from_config() -> PaymentProcessor:
    settings = current_domain.config["custom"]
    if settings.get("payment_processor") == "stripe":
        from checkout.processor.stripe_adapter import StripePaymentProcessor

        return StripePaymentProcessor(
            api_key=settings["stripe_secret_key"],
            webhook_secret=settings["stripe_webhook_secret"],
        )
    from checkout.processor.fake_adapter import FakePaymentProcessor

    return FakePaymentProcessor(
        webhook_secret=settings.get("stripe_webhook_secret") or "whsec_test",
        currency=settings.get("currency") or "usd",
    )


def get_processor() -> PaymentProcessor:
    """Return the current payment processor, building it from config on first use."""
    global _current_processor
    if _current_processor is None:
        _current_processor = _build_from_config()
    return _current_processor


def set_processor(processor: PaymentProcessor) -> None:
    """Override the active payment processor (useful for tests)."""
    global _current_processor
    _current_processor = processor


def reset_processor() -> None:
    """Reset to the configured processor."""
    global _current_processor
    _current_processor = None
