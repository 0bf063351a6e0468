import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from checkout.api.errors import register_exception_handlers
from checkout.api.routes import cart_router, coupon_router, hub_router, order_router, payment_router

BUYER = {"X-Buyer-Email": "buyer@example.com"}


@pytest.fixture()
def client():
    app = FastAPI()
    register_exception_handlers(app)
    app.include_router(cart_router)
    app.include_router(payment_router)
    app.include_router(coupon_router)
    app.include_router(order_router)
    app.include_router(hub_router)
    return TestClient(app)


@pytest.fixture()
def buyer_headers():
    return dict(BUYER)


@pytest.fixture()
def cart_body():
    def _body(cart_id="cart-001", delivery_method_id=None, coupon=None, price=10.00):
        return {
            "id": cart_id,
            "items": [
                {
                    "product_id": "prod-001",
                    "product_name": "Trail Runner",
                    "price": price,
                    "quantity": 2,
                    "brand": "Acme",
                    "type": "Shoes",
                },
                {"product_id": "prod-002", "product_name": "Wool Socks", "price": 5.00, "quantity": 1},
            ],
            "delivery_method_id": delivery_method_id,
            "coupon": coupon,
        }

    return _body
