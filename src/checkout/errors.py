"""Checkout error taxonomy.

Client-facing failures subclass Protean's ``ValidationError`` so the standard
FastAPI handlers answer them with a 400. Processor and webhook failures are
plain ``ProteanException`` subclasses with their own handlers in ``app.py``.
"""

from enum import Enum

from protean.exceptions import ObjectNotFoundError, ProteanException, ValidationError


class CartNotFound(ValidationError):
    def __init__(self, cart_id: str) -> None:
        self.cart_id = cart_id
        super().__init__({"cart": [f"Cart {cart_id} is not available"]})


class DeliveryMethodInvalid(ValidationError):
    def __init__(self, delivery_method_id: str) -> None:
        self.delivery_method_id = delivery_method_id
        super().__init__({"delivery_method": [f"Delivery method {delivery_method_id} does not exist"]})


class ProductUnavailable(ValidationError):
    def __init__(self, product_id: str) -> None:
        self.product_id = product_id
        super().__init__({"items": [f"Product {product_id} is no longer available"]})


class InvalidCoupon(ValidationError):
    def __init__(self, code: str) -> None:
        self.code = code
        super().__init__({"coupon": ["Invalid coupon code"]})


class OrderCreationFailure(Enum):
    CART_NOT_FOUND = "cart_not_found"
    MISSING_PAYMENT_INTENT = "missing_payment_intent"
    PRODUCT_UNAVAILABLE = "product_unavailable"
    DELIVERY_METHOD_NOT_FOUND = "delivery_method_not_found"
    PAYMENT_INTENT_IN_USE = "payment_intent_in_use"


_ORDER_FAILURE_MESSAGES = {
    OrderCreationFailure.CART_NOT_FOUND: "Cart not found",
    OrderCreationFailure.MISSING_PAYMENT_INTENT: "Cart has no payment intent; request one before placing the order",
    OrderCreationFailure.PRODUCT_UNAVAILABLE: "One or more items are no longer available",
    OrderCreationFailure.DELIVERY_METHOD_NOT_FOUND: "Delivery method not found",
    OrderCreationFailure.PAYMENT_INTENT_IN_USE: "The payment intent belongs to another order",
}


class OrderCreationFailed(ValidationError):
    """Order placement precondition not met. ``reason`` says which one."""

    def __init__(self, reason: OrderCreationFailure, detail: str | None = None) -> None:
        self.reason = reason
        message = _ORDER_FAILURE_MESSAGES[reason]
        if detail:
            message = f"{message}: {detail}"
        super().__init__({"order": [message], "reason": [reason.value]})


class ExternalServiceError(ProteanException):
    """The payment processor was unreachable or rejected the call."""

    def __init__(self, operation: str, detail: str) -> None:
        self.operation = operation
        self.detail = detail
        super().__init__(f"Payment processor call '{operation}' failed: {detail}")


class SignatureError(ProteanException):
    """Webhook payload failed signature verification."""


class OrderNotFound(ObjectNotFoundError):
    pass
