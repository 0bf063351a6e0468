"""Integration tests for payment intents, delivery methods, coupons and the webhook."""

import pytest
from protean import current_domain

from checkout.order.order import Order, OrderStatus


@pytest.fixture()
def ups2(delivery_methods):
    return str(delivery_methods["UPS2"].id)


class TestDeliveryMethods:
    def test_lists_methods(self, client, delivery_methods):
        response = client.get("/payments/delivery-methods")

        assert response.status_code == 200
        methods = response.json()
        assert [m["short_name"] for m in methods] == ["UPS1", "UPS2", "UPS3", "FREE"]
        assert {"id", "short_name", "description", "delivery_time", "price"} <= set(methods[0])


class TestPaymentIntentEndpoint:
    def test_creates_intent(self, client, processor, catalog, ups2, cart_body, buyer_headers):
        client.post("/cart", json=cart_body(delivery_method_id=ups2))

        response = client.post("/payments/cart-001", headers=buyer_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["client_secret"]
        assert processor.intents[data["payment_intent_id"]].amount == 3000

    def test_repeat_keeps_intent(self, client, processor, catalog, ups2, cart_body, buyer_headers):
        client.post("/cart", json=cart_body(delivery_method_id=ups2))

        first = client.post("/payments/cart-001", headers=buyer_headers).json()
        second = client.post("/payments/cart-001", headers=buyer_headers).json()

        assert first["payment_intent_id"] == second["payment_intent_id"]
        assert len(processor.intents) == 1

    def test_client_posting_cart_again_keeps_intent(self, client, processor, catalog, ups2, cart_body, buyer_headers):
        client.post("/cart", json=cart_body(delivery_method_id=ups2))
        intent_id = client.post("/payments/cart-001", headers=buyer_headers).json()["payment_intent_id"]

        client.post("/cart", json=cart_body(delivery_method_id=ups2))
        again = client.post("/payments/cart-001", headers=buyer_headers).json()

        assert again["payment_intent_id"] == intent_id

    def test_requires_buyer(self, client, processor, catalog, cart_body):
        client.post("/cart", json=cart_body())

        response = client.post("/payments/cart-001")
        assert response.status_code == 401

    def test_missing_cart_is_400(self, client, processor, catalog, buyer_headers):
        response = client.post("/payments/nope", headers=buyer_headers)

        assert response.status_code == 400
        assert "cart" in response.json()["error"]

    def test_unavailable_product_is_400(self, client, processor, catalog, cart_body, buyer_headers):
        client.post("/cart", json=cart_body())
        catalog.remove("prod-002")

        response = client.post("/payments/cart-001", headers=buyer_headers)
        assert response.status_code == 400

    def test_stale_delivery_method_is_400(self, client, processor, catalog, cart_body, buyer_headers):
        client.post("/cart", json=cart_body(delivery_method_id="dm-gone"))

        response = client.post("/payments/cart-001", headers=buyer_headers)
        assert response.status_code == 400

    def test_processor_outage_is_502(self, client, processor, catalog, cart_body, buyer_headers):
        client.post("/cart", json=cart_body())
        processor.configure(should_succeed=False)

        response = client.post("/payments/cart-001", headers=buyer_headers)
        assert response.status_code == 502


class TestCouponEndpoint:
    def test_valid_code(self, client, processor):
        processor.add_coupon("TENOFF", "co_10", name="Ten percent", percent_off=10.0)

        response = client.get("/coupons/TENOFF")

        assert response.status_code == 200
        assert response.json()["coupon_id"] == "co_10"
        assert response.json()["percent_off"] == 10.0

    def test_invalid_code(self, client, processor):
        response = client.get("/coupons/NOPE")

        assert response.status_code == 400
        assert response.json()["error"]["coupon"] == ["Invalid coupon code"]


def _place_pending_order(intent_id="pi_123"):
    from checkout.order.order import PaymentSummary, ShippingAddress

    order = Order.place(
        buyer_email="buyer@example.com",
        shipping_address=ShippingAddress(
            name="Ada Buyer", line1="1 Main St", city="Springfield", state="IL", postal_code="62701", country="US"
        ),
        delivery_method="Get it within 5 days",
        shipping_price=5.00,
        payment_summary=PaymentSummary(last4="4242", brand="visa", exp_month=12, exp_year=2030),
        items_data=[
            {"product_id": "prod-001", "product_name": "Trail Runner", "price": 10.00, "quantity": 2},
            {"product_id": "prod-002", "product_name": "Wool Socks", "price": 5.00, "quantity": 1},
        ],
        payment_intent_id=intent_id,
    )
    current_domain.repository_for(Order).add(order)
    return order


class TestWebhookEndpoint:
    def _post(self, client, payload, signature):
        return client.post(
            "/payments/webhook",
            content=payload,
            headers={"Stripe-Signature": signature, "Content-Type": "application/json"},
        )

    def test_success_is_200(self, client, processor, registry):
        order = _place_pending_order()
        payload = processor.build_event("pi_123", 3000)

        response = self._post(client, payload, processor.sign(payload))

        assert response.status_code == 200
        stored = current_domain.repository_for(Order).get(order.id)
        assert stored.status == OrderStatus.PAYMENT_RECEIVED.value

    def test_mismatch_is_still_200(self, client, processor, registry):
        order = _place_pending_order()
        payload = processor.build_event("pi_123", 2900)

        response = self._post(client, payload, processor.sign(payload))

        assert response.status_code == 200
        stored = current_domain.repository_for(Order).get(order.id)
        assert stored.status == OrderStatus.PAYMENT_MISMATCH.value

    def test_bad_signature_is_500(self, client, processor, registry):
        order = _place_pending_order()
        payload = processor.build_event("pi_123", 3000)

        response = self._post(client, payload, "t=1,v1=bad")

        assert response.status_code == 500
        stored = current_domain.repository_for(Order).get(order.id)
        assert stored.status == OrderStatus.PENDING.value

    def test_unknown_intent_is_500(self, client, processor, registry):
        payload = processor.build_event("pi_unknown", 3000)

        response = self._post(client, payload, processor.sign(payload))
        assert response.status_code == 500

    def test_ignored_event_is_200(self, client, processor, registry):
        payload = processor.build_event("pi_123", 0, event_type="charge.refunded")

        response = self._post(client, payload, processor.sign(payload))

        assert response.status_code == 200
        assert response.json()["handled"] is False
