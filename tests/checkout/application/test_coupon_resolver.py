"""CouponResolver: promotion codes resolved through the payment processor."""

import pytest

from checkout.cart.cart import AppliedCoupon
from checkout.coupon.resolver import live_terms, resolve_code
from checkout.errors import ExternalServiceError, InvalidCoupon


class TestResolveCode:
    def test_percent_off_code(self, processor):
        processor.add_coupon("TENOFF", "co_10", name="Ten percent", percent_off=10.0)

        coupon = resolve_code("TENOFF")
        assert isinstance(coupon, AppliedCoupon)
        assert coupon.coupon_id == "co_10"
        assert coupon.percent_off == 10.0
        assert coupon.amount_off is None
        assert coupon.promotion_code == "TENOFF"

    def test_amount_off_code(self, processor):
        processor.add_coupon("FIVE", "co_5", name="Five dollars", amount_off=5.0)

        assert resolve_code("FIVE").amount_off == 5.0

    def test_unknown_code(self, processor):
        with pytest.raises(InvalidCoupon):
            resolve_code("NOPE")

    def test_blank_code(self, processor):
        with pytest.raises(InvalidCoupon):
            resolve_code("  ")

    def test_withdrawn_coupon(self, processor):
        processor.add_coupon("OLD", "co_old", percent_off=20.0)
        del processor.coupons["co_old"]

        with pytest.raises(InvalidCoupon):
            resolve_code("OLD")

    def test_processor_failure_is_not_an_invalid_coupon(self, processor):
        processor.configure(should_succeed=False)

        with pytest.raises(ExternalServiceError):
            resolve_code("TENOFF")


class TestLiveTerms:
    def test_reads_current_terms(self, processor):
        processor.add_coupon("TENOFF", "co_10", percent_off=15.0)
        applied = AppliedCoupon(coupon_id="co_10", percent_off=10.0, promotion_code="TENOFF")

        assert live_terms(applied).percent_off == 15.0

    def test_withdrawn_coupon_has_no_terms(self, processor):
        applied = AppliedCoupon(coupon_id="co_gone", percent_off=10.0)

        assert live_terms(applied) is None
