"""Integration tests for the Cart API via TestClient."""

from checkout.cart import store as cart_store


class TestGetCart:
    def test_unknown_cart_is_an_empty_skeleton(self, client):
        response = client.get("/cart", params={"id": "cart-new"})

        assert response.status_code == 200
        assert response.json()["id"] == "cart-new"
        assert response.json()["items"] == []

    def test_returns_stored_cart(self, client, cart_body):
        client.post("/cart", json=cart_body())

        response = client.get("/cart", params={"id": "cart-001"})
        data = response.json()
        assert len(data["items"]) == 2
        items = {item["product_id"]: item for item in data["items"]}
        assert items["prod-001"]["brand"] == "Acme"


class TestUpdateCart:
    def test_upsert(self, client, cart_body):
        response = client.post("/cart", json=cart_body())

        assert response.status_code == 200
        assert response.json()["id"] == "cart-001"
        assert cart_store.get("cart-001") is not None

    def test_invalid_quantity_is_rejected(self, client, cart_body):
        body = cart_body()
        body["items"][0]["quantity"] = 0

        response = client.post("/cart", json=body)
        assert response.status_code == 422
        assert cart_store.get("cart-001") is None

    def test_posting_empty_cart_deletes_it(self, client, cart_body):
        client.post("/cart", json=cart_body())
        client.post("/cart", json={"id": "cart-001", "items": []})

        assert cart_store.get("cart-001") is None


class TestDeleteCart:
    def test_delete(self, client, cart_body):
        client.post("/cart", json=cart_body())

        response = client.delete("/cart", params={"id": "cart-001"})

        assert response.status_code == 200
        after = client.get("/cart", params={"id": "cart-001"}).json()
        assert after["items"] == []

    def test_delete_unknown_cart(self, client):
        response = client.delete("/cart", params={"id": "nope"})
        assert response.status_code == 400
