"""PricingValidator: catalog prices overwrite stale snapshots; missing products are reported."""

import pytest

from checkout.cart.cart import Cart
from checkout.errors import ProductUnavailable
from checkout.payment.pricing import validate_prices


def _cart(price=10.00):
    return Cart.from_snapshot(
        {
            "id": "cart-001",
            "items": [
                {"product_id": "prod-001", "product_name": "Trail Runner", "price": price, "quantity": 2},
                {"product_id": "prod-002", "product_name": "Wool Socks", "price": 5.00, "quantity": 1},
            ],
        }
    )


class TestValidatePrices:
    def test_current_prices_leave_cart_clean(self, catalog):
        cart = _cart()
        result = validate_prices(cart)

        assert result.dirty is False
        assert result.unavailable == []
        assert sorted(catalog.lookups) == ["prod-001", "prod-002"]

    def test_stale_price_is_overwritten(self, catalog):
        cart = _cart(price=8.00)
        result = validate_prices(cart)

        assert result.dirty is True
        assert result.repriced == ["prod-001"]
        assert cart.item_for("prod-001").price == 10.00
        assert cart.subtotal_minor() == 2500

    def test_catalog_price_change_is_picked_up(self, catalog):
        catalog.set_price("prod-002", 6.50)
        cart = _cart()
        validate_prices(cart)

        assert cart.item_for("prod-002").price == 6.50

    def test_missing_product_is_reported_not_dropped(self, catalog):
        catalog.remove("prod-002")
        cart = _cart()
        result = validate_prices(cart)

        assert result.unavailable == ["prod-002"]
        assert len(cart.items) == 2
        with pytest.raises(ProductUnavailable) as exc:
            result.ensure_available()
        assert exc.value.product_id == "prod-002"
