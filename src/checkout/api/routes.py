"""FastAPI routes for the Checkout domain: carts, payments, coupons, orders and the notification hub."""

import asyncio
import json

import structlog
from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request, WebSocket, WebSocketDisconnect
from fastapi.responses import JSONResponse
from protean.exceptions import ProteanException
from protean.utils.globals import current_domain

from checkout.api.dependencies import current_buyer
from checkout.api.schemas import (
    CartSchema,
    CouponSchema,
    CreateOrderRequest,
    DeliveryMethodSchema,
    OrderSchema,
    StatusResponse,
)
from checkout.cart import store as cart_store
from checkout.cart.management import save_cart
from checkout.coupon.resolver import resolve_code
from checkout.delivery.delivery_method import DeliveryMethod
from checkout.errors import OrderNotFound
from checkout.notification import get_registry
from checkout.notification.websocket import WebSocketConnection
from checkout.order.creation import PlaceOrder
from checkout.order.order import Order
from checkout.order.settlement import process_webhook
from checkout.payment.intent import RequestPaymentIntent

logger = structlog.get_logger(__name__)


def _cart_response(cart) -> CartSchema:
    return CartSchema(**cart.to_snapshot())


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


@cart_router.get("", response_model=CartSchema)
async def get_cart(id: str = Query(...)) -> CartSchema:  # noqa: A002
    """Return the stored cart, or an empty cart when there is none."""
    cart = cart_store.get(id)
    if cart is None:
        return CartSchema(id=id)
    return _cart_response(cart)


@cart_router.post("", response_model=CartSchema)
async def update_cart(body: CartSchema) -> CartSchema:
    cart = save_cart(body.model_dump())
    return _cart_response(cart)


@cart_router.delete("", response_model=StatusResponse)
async def delete_cart(id: str = Query(...)) -> StatusResponse:  # noqa: A002
    if not cart_store.delete(id):
        raise HTTPException(status_code=400, detail="Problem deleting cart")
    return StatusResponse()


# ---------------------------------------------------------------------------
# Payment Router
# ---------------------------------------------------------------------------
payment_router = APIRouter(prefix="/payments", tags=["payments"])


@payment_router.get("/delivery-methods", response_model=list[DeliveryMethodSchema])
async def list_delivery_methods() -> list[DeliveryMethodSchema]:
    methods = current_domain.repository_for(DeliveryMethod).list_all()
    return [
        DeliveryMethodSchema(
            id=str(method.id),
            short_name=method.short_name,
            description=method.description,
            delivery_time=method.delivery_time,
            price=method.price,
        )
        for method in methods
    ]


@payment_router.post("/webhook", response_model=None)
async def payment_webhook(request: Request, stripe_signature: str = Header(default="")):
    """Processor callback. Any failure answers 500 so the processor redelivers."""
    payload = await request.body()
    try:
        result = process_webhook(payload, stripe_signature)
    except ProteanException as exc:
        logger.warning("webhook.rejected", error_type=type(exc).__name__, error=str(exc))
        return JSONResponse(status_code=500, content={"error": str(exc)})
    return result or {"handled": True}


@payment_router.post("/{cart_id}", response_model=CartSchema, dependencies=[Depends(current_buyer)])
async def create_or_update_payment_intent(cart_id: str) -> CartSchema:
    cart = current_domain.process(RequestPaymentIntent(cart_id=cart_id), asynchronous=False)
    return _cart_response(cart)


# ---------------------------------------------------------------------------
# Coupon Router
# ---------------------------------------------------------------------------
coupon_router = APIRouter(prefix="/coupons", tags=["coupons"])


@coupon_router.get("/{code}", response_model=CouponSchema)
async def validate_coupon(code: str) -> CouponSchema:
    coupon = resolve_code(code)
    return CouponSchema(**coupon.to_dict())


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=OrderSchema)
async def create_order(body: CreateOrderRequest, buyer: str = Depends(current_buyer)) -> OrderSchema:
    command = PlaceOrder(
        cart_id=body.cart_id,
        buyer_email=buyer,
        delivery_method_id=body.delivery_method_id,
        shipping_address=json.dumps(body.shipping_address.model_dump()),
        payment_summary=json.dumps(body.payment_summary.model_dump()),
        discount=body.discount,
    )
    order = current_domain.process(command, asynchronous=False)

    cart_store.delete(body.cart_id)
    return OrderSchema(**order.to_summary())


@order_router.get("", response_model=list[OrderSchema])
async def list_orders(buyer: str = Depends(current_buyer)) -> list[OrderSchema]:
    orders = current_domain.repository_for(Order).for_buyer(buyer)
    return [OrderSchema(**order.to_summary()) for order in orders]


@order_router.get("/{order_id}", response_model=OrderSchema)
async def get_order(order_id: str, buyer: str = Depends(current_buyer)) -> OrderSchema:
    order = current_domain.repository_for(Order).find_for_buyer(order_id, buyer)
    if order is None:
        raise OrderNotFound(f"Order {order_id} not found")
    return OrderSchema(**order.to_summary())


# ---------------------------------------------------------------------------
# Notification hub
# ---------------------------------------------------------------------------
hub_router = APIRouter(tags=["notifications"])


@hub_router.websocket("/hubs/notifications")
async def notification_hub(websocket: WebSocket, email: str = Query(...)) -> None:
    """Holds the buyer's session open so settled orders can be pushed to it."""
    await websocket.accept()
    connection = WebSocketConnection(websocket, asyncio.get_running_loop())
    registry = get_registry()
    registry.register(email, connection)
    logger.info("hub.connected", buyer=email)

    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.info("hub.disconnected", buyer=email)
    finally:
        registry.unregister(email, connection)
