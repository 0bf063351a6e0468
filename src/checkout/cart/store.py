"""CartStore: key/value persistence for carts with a sliding expiry.

Each cart is kept as a single JSON document in the domain cache (memory in
development, Redis in production). There is no cross-key transaction and
concurrent writes to one cart are last-write-wins. Every ``set`` restarts the
cart's time-to-live.
"""

import json

import structlog
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain
from protean.utils.inflection import underscore

from checkout.cart.cart import Cart
from checkout.domain import checkout

logger = structlog.get_logger(__name__)

DEFAULT_CART_TTL_SECONDS = 30 * 24 * 60 * 60


@checkout.projection(cache="default")
class CartSnapshot:
    cart_id = Identifier(identifier=True, required=True)
    payload = Text(required=True)  # JSON: Cart.to_snapshot()


def _key(cart_id) -> str:
    return f"{underscore(CartSnapshot.__name__)}:::{cart_id}"


def _ttl() -> int:
    configured = current_domain.config["custom"].get("cart_ttl_seconds")
    return int(configured) if configured else DEFAULT_CART_TTL_SECONDS


def get(cart_id) -> Cart | None:
    """Return the stored cart, or None when it is absent or expired."""
    snapshot = current_domain.cache_for(CartSnapshot).get(_key(cart_id))
    if snapshot is None:
        return None
    return Cart.from_snapshot(json.loads(snapshot.payload))


def set(cart: Cart) -> Cart:  # noqa: A001
    """Upsert ``cart`` and refresh its expiry."""
    snapshot = CartSnapshot(cart_id=str(cart.id), payload=json.dumps(cart.to_snapshot()))
    current_domain.cache_for(CartSnapshot).add(snapshot, ttl=_ttl())
    logger.debug("cart.stored", cart_id=str(cart.id), items=len(cart.items))
    return cart


def delete(cart_id) -> bool:
    """Remove the cart. Returns False if there was nothing to remove."""
    cache = current_domain.cache_for(CartSnapshot)
    key = _key(cart_id)
    if cache.get(key) is None:
        return False
    cache.remove_by_key(key)
    logger.debug("cart.deleted", cart_id=str(cart_id))
    return True
