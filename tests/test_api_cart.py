from decimal import Decimal

import pytest


@pytest.fixture()
def customer(shop):
    return shop.user()


class TestCartEndpoints:
    def test_add_and_read(self, client, shop, customer):
        product = shop.product(price="10.00", stock=5)
        headers = shop.headers(customer)

        resp = client.post("/cart/", json={"product_id": product.id, "quantity": 2}, headers=headers)

        assert resp.status_code == 201
        assert resp.json()["quantity"] == 2

        cart = client.get("/cart/", headers=headers).json()
        assert cart["summary"]["total_items"] == 2
        assert Decimal(cart["summary"]["subtotal"]) == Decimal("20.00")

    def test_default_quantity_is_one(self, client, shop, customer):
        product = shop.product(stock=5)

        resp = client.post("/cart/", json={"product_id": product.id}, headers=shop.headers(customer))

        assert resp.json()["quantity"] == 1

    def test_add_above_stock(self, client, shop, customer):
        product = shop.product(stock=2)

        resp = client.post("/cart/", json={"product_id": product.id, "quantity": 3}, headers=shop.headers(customer))

        assert resp.status_code == 400
        assert resp.json()["detail"]["invalid_items"][0]["available_stock"] == 2
        assert shop.cart_quantities(customer.id) == {}

    def test_add_unknown_product(self, client, shop, customer):
        resp = client.post("/cart/", json={"product_id": 999, "quantity": 1}, headers=shop.headers(customer))

        assert resp.status_code == 404

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_add_non_positive_quantity(self, client, shop, customer, quantity):
        product = shop.product(stock=5)

        resp = client.post(
            "/cart/", json={"product_id": product.id, "quantity": quantity}, headers=shop.headers(customer)
        )

        assert resp.status_code == 422

    def test_update_quantity(self, client, shop, customer):
        product = shop.product(stock=5)
        headers = shop.headers(customer)
        client.post("/cart/", json={"product_id": product.id, "quantity": 1}, headers=headers)

        resp = client.put("/cart/", json={"product_id": product.id, "quantity": 4}, headers=headers)

        assert resp.status_code == 200
        assert resp.json()["quantity"] == 4

    def test_update_to_zero_removes_line(self, client, shop, customer):
        product = shop.product(stock=5)
        headers = shop.headers(customer)
        client.post("/cart/", json={"product_id": product.id, "quantity": 1}, headers=headers)

        resp = client.put("/cart/", json={"product_id": product.id, "quantity": 0}, headers=headers)

        assert resp.json() == {"removed": 1}
        assert shop.cart_quantities(customer.id) == {}

    def test_update_missing_line(self, client, shop, customer):
        product = shop.product(stock=5)

        resp = client.put("/cart/", json={"product_id": product.id, "quantity": 2}, headers=shop.headers(customer))

        assert resp.status_code == 404

    def test_remove_line(self, client, shop, customer):
        product = shop.product(stock=5)
        headers = shop.headers(customer)
        client.post("/cart/", json={"product_id": product.id, "quantity": 1}, headers=headers)

        assert client.delete(f"/cart/{product.id}", headers=headers).json() == {"removed": 1}
        assert client.delete(f"/cart/{product.id}", headers=headers).status_code == 404

    def test_clear_and_count(self, client, shop, customer):
        a = shop.product(name="A", stock=5)
        b = shop.product(name="B", stock=5)
        headers = shop.headers(customer)
        client.post("/cart/", json={"product_id": a.id, "quantity": 2}, headers=headers)
        client.post("/cart/", json={"product_id": b.id, "quantity": 3}, headers=headers)

        assert client.get("/cart/utils/count", headers=headers).json() == {"total_items": 5}
        assert client.delete("/cart/", headers=headers).json() == {"removed": 2}
        assert client.get("/cart/utils/count", headers=headers).json() == {"total_items": 0}

    def test_validate_reports_stale_lines(self, client, shop, customer):
        product = shop.product(name="A", stock=5)
        shop.cart_line(customer.id, product.id, 8)

        resp = client.get("/cart/utils/validate", headers=shop.headers(customer))

        assert resp.json() == {
            "valid": False,
            "invalid_items": [
                {"product_id": product.id, "product_name": "A", "requested_quantity": 8, "available_stock": 5}
            ],
        }


class TestCartAccess:
    def test_requires_user(self, client):
        assert client.get("/cart/").status_code == 401

    def test_other_users_cart(self, client, shop, customer):
        stranger = shop.user(name="Obcy")
        admin = shop.user(name="Admin", role="admin")

        assert client.get(f"/cart/{customer.id}", headers=shop.headers(stranger)).status_code == 403
        assert client.get(f"/cart/{customer.id}", headers=shop.headers(admin)).status_code == 200
        assert client.get(f"/cart/{customer.id}", headers=shop.headers(customer)).status_code == 200
