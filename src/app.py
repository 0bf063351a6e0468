"""ShopStream Checkout FastAPI application.

Serves the cart, payment, coupon and order APIs, the processor webhook and
the real-time notification hub. Commands are processed synchronously inside
each request.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# PROTEAN_ENV selects the config overlay from checkout/domain.toml:
#   - unset / "test" → in-memory ledger and cache, fake payment processor
#   - "production"   → PostgreSQL ledger, Redis cache, Stripe
from uuid import uuid4

from checkout.domain import checkout  # noqa: E402
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

checkout.init()

from checkout.api.errors import register_exception_handlers  # noqa: E402
from checkout.api.routes import cart_router, coupon_router, hub_router, order_router, payment_router  # noqa: E402
from checkout.delivery.delivery_method import seed_delivery_methods  # noqa: E402
from checkout.utils.logging import bind_request_context, clear_request_context  # noqa: E402

# The in-memory ledger starts empty on every boot. Relational ledgers are
# seeded once with `python src/manage.py seed`.
if checkout.config["databases"]["default"]["provider"] == "memory":
    with checkout.domain_context():
        seed_delivery_methods()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="ShopStream Checkout API",
    description="Cart pricing, payment intents, order placement and payment reconciliation",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the checkout domain context and bind request details to the log context."""
    clear_request_context()
    bind_request_context(
        request_id=request.headers.get("X-Request-ID") or uuid4().hex,
        path=request.url.path,
    )
    with checkout.domain_context():
        response = await call_next(request)
    return response


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
register_exception_handlers(app)

app.include_router(cart_router)
app.include_router(payment_router)
app.include_router(coupon_router)
app.include_router(order_router)
app.include_router(hub_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "domains": {"checkout": {"name": checkout.name}},
        }
    )
