"""CartStore: cache-backed get / set / delete."""

from protean import current_domain

from checkout.cart import store as cart_store
from checkout.cart.cart import Cart
from checkout.cart.management import save_cart
from checkout.cart.store import CartSnapshot


def _cart(cart_id="cart-001", **overrides):
    data = {
        "id": cart_id,
        "items": [{"product_id": "prod-001", "product_name": "Trail Runner", "price": 10.00, "quantity": 2}],
    }
    data.update(overrides)
    return Cart.from_snapshot(data)


class TestCartStore:
    def test_absent_cart_is_none(self):
        assert cart_store.get("missing") is None

    def test_set_then_get(self):
        cart_store.set(_cart())

        stored = cart_store.get("cart-001")
        assert stored is not None
        assert stored.items[0].product_id == "prod-001"
        assert stored.items[0].quantity == 2

    def test_set_overwrites(self):
        cart_store.set(_cart())
        cart_store.set(_cart(delivery_method_id="dm-1"))

        assert cart_store.get("cart-001").delivery_method_id == "dm-1"

    def test_delete_removes_cart(self):
        cart_store.set(_cart())

        assert cart_store.delete("cart-001") is True
        assert cart_store.get("cart-001") is None

    def test_delete_absent_cart(self):
        assert cart_store.delete("missing") is False

    def test_carts_are_isolated_by_id(self):
        cart_store.set(_cart("cart-a"))
        cart_store.set(_cart("cart-b"))
        cart_store.delete("cart-a")

        assert cart_store.get("cart-a") is None
        assert cart_store.get("cart-b") is not None

    def test_set_applies_configured_ttl(self):
        cart_store.set(_cart())

        ttl = current_domain.cache_for(CartSnapshot).get_ttl("cart_snapshot:::cart-001")
        assert 0 < ttl <= cart_store.DEFAULT_CART_TTL_SECONDS


class TestSaveCart:
    def test_save_stores_cart(self):
        save_cart(_cart().to_snapshot())
        assert cart_store.get("cart-001") is not None

    def test_empty_cart_is_deleted(self):
        cart_store.set(_cart())
        save_cart({"id": "cart-001", "items": []})

        assert cart_store.get("cart-001") is None

    def test_client_copy_without_intent_keeps_stored_intent(self):
        cart_store.set(_cart(payment_intent_id="pi_123", client_secret="pi_123_secret"))

        save_cart(_cart().to_snapshot())

        stored = cart_store.get("cart-001")
        assert stored.payment_intent_id == "pi_123"
        assert stored.client_secret == "pi_123_secret"

    def test_client_supplied_intent_is_not_accepted(self):
        save_cart(_cart(payment_intent_id="pi_someone_else", client_secret="stolen").to_snapshot())

        stored = cart_store.get("cart-001")
        assert stored.payment_intent_id is None
        assert stored.client_secret is None

    def test_client_cannot_replace_stored_intent(self):
        cart_store.set(_cart(payment_intent_id="pi_123", client_secret="pi_123_secret"))

        save_cart(_cart(payment_intent_id="pi_other", client_secret="other").to_snapshot())

        assert cart_store.get("cart-001").payment_intent_id == "pi_123"
