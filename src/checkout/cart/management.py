"""Cart upserts coming from the client."""

from checkout.cart import store as cart_store
from checkout.cart.cart import Cart


def save_cart(data: dict) -> Cart:
    """Store the client's view of a cart.

    An empty cart is deleted, not stored. The payment intent id and client
    secret belong to the server: whatever the client sends for them is
    replaced by the stored cart's values, or cleared if there is none.
    """
    cart = Cart.from_snapshot(data)
    if cart.is_empty:
        cart_store.delete(cart.id)
        return cart

    stored = cart_store.get(cart.id)
    cart.payment_intent_id = stored.payment_intent_id if stored is not None else None
    cart.client_secret = stored.client_secret if stored is not None else None

    return cart_store.set(cart)
