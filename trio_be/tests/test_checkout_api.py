import re

import pytest

from sqlalchemy.exc import OperationalError

from app.models.order import Order

CONTACT = {
    "customerName": "Rohan K",
    "email": "rohan@example.com",
    "phone": "+91 98765 43210",
    "address": "12 Park Street, Kolkata, WB 700016",
}


def fill_cart(client, make_product):
    shirt = make_product(name="Oxford Shirt", price=500)
    jacket = make_product(name="Field Jacket", price=1200, sizes=[])
    client.post("/api/cart/", json={"productId": shirt.id, "quantity": 2, "selectedSize": "M"})
    client.post("/api/cart/", json={"productId": jacket.id, "quantity": 1})
    return shirt, jacket


def test_checkout_creates_order_and_clears_cart(client, make_product, db):
    shirt, jacket = fill_cart(client, make_product)

    resp = client.post("/api/checkout", json=CONTACT)
    assert resp.status_code == 200
    body = resp.json()
    assert re.fullmatch(r"ORD\d+", body["orderId"])
    assert body["totalAmount"] == 2200
    assert body["status"] == "Pending"

    cart = client.get("/api/cart/")
    assert cart.json()["count"] == 0
    assert cart.headers["X-Cart-Count"] == "0"

    order = db.query(Order).filter(Order.order_number == body["orderId"]).one()
    assert order.customer_name == "Rohan K"
    assert order.items == [
        {"productId": str(shirt.id), "quantity": 2, "name": "Oxford Shirt", "price": 500.0, "selectedSize": "M"},
        {"productId": str(jacket.id), "quantity": 1, "name": "Field Jacket", "price": 1200.0, "selectedSize": ""},
    ]


def test_checkout_requires_all_fields(client, make_product):
    fill_cart(client, make_product)

    resp = client.post("/api/checkout", json={**CONTACT, "phone": "  "})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Please fill in all fields"
    assert client.get("/api/cart/").json()["count"] == 3


def test_checkout_rejects_invalid_email(client, make_product):
    fill_cart(client, make_product)

    resp = client.post("/api/checkout", json={**CONTACT, "email": "not-an-email"})
    assert resp.status_code == 400


@pytest.mark.parametrize("field, limit", [("customerName", 255), ("email", 255), ("phone", 50), ("address", 1000)])
def test_checkout_rejects_overlong_fields(client, make_product, db, field, limit):
    fill_cart(client, make_product)

    resp = client.post("/api/checkout", json={**CONTACT, field: "9" * (limit + 1)})
    assert resp.status_code == 422
    assert client.get("/api/cart/").json()["count"] == 3
    assert db.query(Order).count() == 0


def test_checkout_with_empty_cart(client):
    resp = client.post("/api/checkout", json=CONTACT)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Your cart is empty"


def test_failed_order_keeps_cart(client, make_product, monkeypatch):
    fill_cart(client, make_product)

    from app.services import documents

    original_create = documents.DocumentCollection.create

    def failing_create(self, values):
        if self.model is Order:
            self.db.rollback()
            raise documents.BackendError("Failed to create orders") from OperationalError("INSERT", {}, Exception("down"))
        return original_create(self, values)

    monkeypatch.setattr(documents.DocumentCollection, "create", failing_create)

    resp = client.post("/api/checkout", json=CONTACT)
    assert resp.status_code == 500
    assert resp.json()["detail"] == "Failed to place order. Please try again."
    assert client.get("/api/cart/").json()["count"] == 3


def test_order_confirmation_lookup(client, make_product):
    fill_cart(client, make_product)
    order_id = client.post("/api/checkout", json=CONTACT).json()["orderId"]

    resp = client.get(f"/api/orders/{order_id}")
    assert resp.status_code == 200
    assert resp.json()["totalAmount"] == 2200

    assert client.get("/api/orders/ORD0").status_code == 404
