"""Location API tests."""


class TestLocations:

    def test_create_list_get(self, client, admin_headers, cashier_headers):
        resp = client.post("/api/locations/", headers=admin_headers, json={"name": "Mall Kiosk"})
        assert resp.status_code == 201
        location_id = resp.json["location"]["id"]

        names = [loc["name"] for loc in client.get("/api/locations/", headers=cashier_headers).json["locations"]]
        assert names == ["Mall Kiosk"]

        resp = client.get(f"/api/locations/{location_id}", headers=cashier_headers)
        assert resp.json["location"]["name"] == "Mall Kiosk"

    def test_duplicate_name_is_409(self, client, admin_headers, location):
        resp = client.post("/api/locations/", headers=admin_headers, json={"name": location.name})
        assert resp.status_code == 409

    def test_blank_name_is_400(self, client, admin_headers):
        assert client.post("/api/locations/", headers=admin_headers, json={"name": "  "}).status_code == 400

    def test_rename(self, client, admin_headers, location):
        resp = client.patch(f"/api/locations/{location.id}", headers=admin_headers, json={"name": "Upstairs"})
        assert resp.status_code == 200
        assert resp.json["location"]["name"] == "Upstairs"

    def test_delete_unused(self, client, admin_headers, location):
        assert client.delete(f"/api/locations/{location.id}", headers=admin_headers).status_code == 200
        assert client.get(f"/api/locations/{location.id}", headers=admin_headers).status_code == 404

    def test_delete_refused_while_items_assigned(self, client, admin_headers, location, make_item):
        make_item(location_id=location.id)
        make_item(location_id=location.id)

        resp = client.delete(f"/api/locations/{location.id}", headers=admin_headers)

        assert resp.status_code == 409
        assert resp.json["details"] == {"items_count": 2}

    def test_delete_refused_while_referenced_by_sales(self, client, admin_headers, cashier_headers, location, make_item):
        item = make_item(quantity=3)
        client.post("/api/sales/", headers=cashier_headers, json={
            "items": [{"id": item.id, "qty": 1}], "total": 10, "payment_method": "cash",
            "location_id": location.id,
        })

        resp = client.delete(f"/api/locations/{location.id}", headers=admin_headers)

        assert resp.status_code == 409
        assert resp.json["details"] == {"sales_count": 1}
