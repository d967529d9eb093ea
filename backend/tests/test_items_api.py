"""Item catalogue API tests."""

import pytest


class TestItems:

    def test_create_defaults_quantity_to_zero(self, client, admin_headers):
        resp = client.post("/api/items/", headers=admin_headers, json={"name": " Linen shirt ", "price_cents": 4500})

        assert resp.status_code == 201
        item = resp.json["item"]
        assert item["name"] == "Linen shirt"
        assert item["quantity"] == 0
        assert item["price"] == "45.00"

    def test_create_with_location(self, client, admin_headers, location):
        resp = client.post("/api/items/", headers=admin_headers, json={
            "name": "Boots",
            "price_cents": "12000",
            "quantity": 4,
            "location_id": location.id,
            "image_url": "https://cdn.example/boots.jpg",
        })

        assert resp.status_code == 201
        assert resp.json["item"]["location_id"] == location.id
        assert resp.json["item"]["price_cents"] == 12000

    @pytest.mark.parametrize(
        "payload,message",
        [
            ({"price_cents": 100}, "Missing required fields: name"),
            ({"name": "Cap"}, "Missing required fields: price_cents"),
            ({"name": "Cap", "price_cents": -1}, "price_cents must be >= 0"),
            ({"name": "Cap", "price_cents": 10.5}, "price_cents must be an integer, not a decimal"),
            ({"name": "Cap", "price_cents": 100, "quantity": -2}, "quantity must be >= 0"),
            ({"name": "  ", "price_cents": 100}, "name cannot be blank"),
            ({"name": "Cap", "price_cents": 100, "sku": "X"}, "Field not allowed: sku"),
            ({"name": "Cap", "price_cents": 100, "location_id": 9999}, "Location 9999 not found"),
        ],
    )
    def test_create_validation(self, client, admin_headers, payload, message):
        resp = client.post("/api/items/", headers=admin_headers, json=payload)

        assert resp.status_code == 400
        assert resp.json["error"] == message

    def test_list_and_get(self, client, cashier_headers, make_item):
        first = make_item(name="First")
        second = make_item(name="Second")

        resp = client.get("/api/items/", headers=cashier_headers)
        assert resp.status_code == 200
        assert {i["id"] for i in resp.json["items"]} == {first.id, second.id}

        resp = client.get(f"/api/items/{first.id}", headers=cashier_headers)
        assert resp.json["item"]["name"] == "First"

        assert client.get("/api/items/9999", headers=cashier_headers).status_code == 404

    def test_partial_update(self, client, admin_headers, make_item):
        item = make_item(name="Skirt", price_cents=2000, quantity=3)

        resp = client.patch(f"/api/items/{item.id}", headers=admin_headers, json={"quantity": 12})

        assert resp.status_code == 200
        assert resp.json["item"]["quantity"] == 12
        assert resp.json["item"]["name"] == "Skirt"
        assert resp.json["item"]["price_cents"] == 2000

    def test_put_is_partial_too(self, client, admin_headers, make_item):
        item = make_item(name="Skirt", price_cents=2000)

        resp = client.put(f"/api/items/{item.id}", headers=admin_headers, json={"price_cents": 2500})

        assert resp.status_code == 200
        assert resp.json["item"]["price_cents"] == 2500

    def test_empty_update_is_400(self, client, admin_headers, make_item):
        item = make_item()
        resp = client.patch(f"/api/items/{item.id}", headers=admin_headers, json={})
        assert resp.status_code == 400
        assert resp.json["error"] == "No fields to update"

    def test_update_missing_item_is_404(self, client, admin_headers):
        assert client.patch("/api/items/9999", headers=admin_headers, json={"quantity": 1}).status_code == 404

    def test_delete_keeps_sale_snapshot(self, client, admin_headers, cashier_headers, make_item):
        item = make_item(name="Blazer", price_cents=9000, quantity=2)
        sale = client.post("/api/sales/", headers=cashier_headers, json={
            "items": [{"id": item.id, "qty": 1}], "total": 90, "payment_method": "cash",
        }).json["sale"]

        resp = client.delete(f"/api/items/{item.id}", headers=admin_headers)
        assert resp.status_code == 200
        assert resp.json["item"]["name"] == "Blazer"
        assert client.get(f"/api/items/{item.id}", headers=admin_headers).status_code == 404

        history = client.get(f"/api/sales/{sale['id']}", headers=admin_headers).json["sale"]
        assert history["items"] == [{"id": item.id, "qty": 1, "name": "Blazer", "price_cents": 9000}]
