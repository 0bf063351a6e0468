"""CouponResolver: promotion codes to discount rules via the payment processor."""

import structlog

from checkout.cart.cart import AppliedCoupon
from checkout.errors import InvalidCoupon
from checkout.processor import get_processor
from checkout.processor.port import CouponRecord

logger = structlog.get_logger(__name__)


def resolve_code(code: str) -> AppliedCoupon:
    """Resolve a promotion code to the coupon it grants.

    Raises ``InvalidCoupon`` for unknown, inactive or expired codes. Callers
    treat that as "no discount" and tell the buyer; checkout carries on.
    """
    code = (code or "").strip()
    if not code:
        raise InvalidCoupon(code)

    processor = get_processor()
    promotion = processor.find_promotion_code(code)
    if promotion is None:
        logger.info("coupon.unknown_code", code=code)
        raise InvalidCoupon(code)

    coupon = processor.retrieve_coupon(promotion.coupon_id)
    if coupon is None:
        logger.info("coupon.expired", code=code, coupon_id=promotion.coupon_id)
        raise InvalidCoupon(code)

    return AppliedCoupon(
        name=coupon.name,
        amount_off=coupon.amount_off,
        percent_off=coupon.percent_off,
        promotion_code=promotion.promotion_code,
        coupon_id=coupon.coupon_id,
    )


def live_terms(applied: AppliedCoupon) -> CouponRecord | None:
    """Re-read the coupon behind ``applied`` from the processor.

    Returns None when the coupon no longer exists, in which case no discount
    applies. The amounts cached on the cart are never used for charging.
    """
    coupon = get_processor().retrieve_coupon(applied.coupon_id)
    if coupon is None:
        logger.info("coupon.withdrawn", coupon_id=applied.coupon_id)
    return coupon
