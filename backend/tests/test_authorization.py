"""
Authentication and authorization tests.

Verifies:
- Unauthenticated requests return 401
- Cashier role denied admin operations (403)
- Login, logout and token revocation
- User administration
"""

import pytest

from conftest import PASSWORD, auth_headers, get_auth_token
from shoppos.models import SessionToken, User


# =============================================================================
# UNAUTHENTICATED ACCESS (401)
# =============================================================================


class TestUnauthenticatedAccess:
    """All protected endpoints return 401 without a token."""

    @pytest.mark.parametrize(
        "method,path",
        [
            ("GET", "/api/items/"),
            ("POST", "/api/items/"),
            ("GET", "/api/locations/"),
            ("GET", "/api/sales/"),
            ("POST", "/api/sales/"),
            ("GET", "/api/users/"),
            ("GET", "/api/offers/"),
            ("POST", "/api/offers/"),
            ("GET", "/api/settings/"),
            ("GET", "/api/reports/dashboard"),
            ("GET", "/api/auth/me"),
        ],
    )
    def test_requires_auth(self, client, db_session, method, path):
        resp = getattr(client, method.lower())(path)
        assert resp.status_code == 401, f"{method} {path} returned {resp.status_code}"

    def test_garbage_token_rejected(self, client, db_session):
        resp = client.get("/api/items/", headers=auth_headers("not-a-token"))
        assert resp.status_code == 401
        assert resp.json["error"] == "Invalid or expired token"


# =============================================================================
# CASHIER DENIED ADMIN OPERATIONS (403)
# =============================================================================


class TestCashierDenied:
    """Cashier role cannot perform admin operations."""

    @pytest.mark.parametrize(
        "method,path,permission",
        [
            ("GET", "/api/users/", "MANAGE_USERS"),
            ("POST", "/api/items/", "MANAGE_ITEMS"),
            ("DELETE", "/api/items/1", "MANAGE_ITEMS"),
            ("POST", "/api/locations/", "MANAGE_LOCATIONS"),
            ("GET", "/api/offers/", "REVIEW_OFFERS"),
            ("PUT", "/api/offers/1", "REVIEW_OFFERS"),
            ("PUT", "/api/settings/", "MANAGE_SETTINGS"),
            ("GET", "/api/reports/dashboard", "VIEW_REPORTS"),
            ("GET", "/api/reports/export-csv", "VIEW_REPORTS"),
        ],
    )
    def test_denied(self, client, cashier_headers, method, path, permission):
        resp = getattr(client, method.lower())(path, headers=cashier_headers, json={})
        assert resp.status_code == 403
        assert resp.json["required_permission"] == permission

    def test_cashier_can_sell_and_browse(self, client, cashier_headers):
        assert client.get("/api/items/", headers=cashier_headers).status_code == 200
        assert client.get("/api/locations/", headers=cashier_headers).status_code == 200
        assert client.get("/api/sales/", headers=cashier_headers).status_code == 200


# =============================================================================
# LOGIN / LOGOUT
# =============================================================================


class TestLogin:

    def test_login_returns_token_and_permissions(self, client, cashier_user):
        resp = client.post("/api/auth/login", json={"email": "CASHIER@shop.test", "password": PASSWORD})

        assert resp.status_code == 200
        assert resp.json["token"]
        assert resp.json["user"]["role"] == "cashier"
        assert "password_hash" not in resp.json["user"]
        assert "CREATE_SALE" in resp.json["permissions"]
        assert "MANAGE_USERS" not in resp.json["permissions"]

    def test_wrong_password(self, client, cashier_user):
        resp = client.post("/api/auth/login", json={"email": cashier_user.email, "password": "wrong-pass1"})
        assert resp.status_code == 401
        assert resp.json["error"] == "Invalid credentials"

    def test_missing_fields(self, client, db_session):
        assert client.post("/api/auth/login", json={"email": "x@y.z"}).status_code == 400

    def test_inactive_user_cannot_login(self, client, db_session, cashier_user):
        cashier_user.is_active = False
        db_session.commit()
        resp = client.post("/api/auth/login", json={"email": cashier_user.email, "password": PASSWORD})
        assert resp.status_code == 401

    def test_register_disabled(self, client, db_session):
        resp = client.post("/api/auth/register", json={"email": "new@shop.test", "password": PASSWORD})
        assert resp.status_code == 403

    def test_me(self, client, cashier_user, cashier_headers):
        resp = client.get("/api/auth/me", headers=cashier_headers)
        assert resp.status_code == 200
        assert resp.json["user"]["id"] == cashier_user.id

    def test_logout_revokes_token(self, client, cashier_headers):
        assert client.post("/api/auth/logout", headers=cashier_headers).status_code == 200
        assert client.get("/api/auth/me", headers=cashier_headers).status_code == 401
        assert client.post("/api/auth/logout", headers=cashier_headers).status_code == 401


# =============================================================================
# USER ADMINISTRATION
# =============================================================================


class TestUserAdmin:

    def test_create_and_login(self, client, admin_headers):
        resp = client.post("/api/users/", headers=admin_headers, json={
            "email": "New@Shop.test",
            "password": "Secret123",
            "role": "cashier",
            "name": "Lika",
        })

        assert resp.status_code == 201
        assert resp.json["user"]["email"] == "new@shop.test"
        assert get_auth_token(client, "new@shop.test", "Secret123")

    def test_duplicate_email_is_409(self, client, admin_headers, cashier_user):
        resp = client.post("/api/users/", headers=admin_headers, json={
            "email": cashier_user.email,
            "password": "Secret123",
            "role": "cashier",
        })
        assert resp.status_code == 409

    @pytest.mark.parametrize(
        "payload",
        [
            {"email": "a@shop.test", "password": "short1", "role": "cashier"},
            {"email": "a@shop.test", "password": "lettersonly", "role": "cashier"},
            {"email": "a@shop.test", "password": "Secret123", "role": "manager"},
            {"email": "not-an-email", "password": "Secret123", "role": "cashier"},
            {"email": "a@shop.test", "role": "cashier"},
        ],
    )
    def test_invalid_user_is_400(self, client, admin_headers, payload):
        assert client.post("/api/users/", headers=admin_headers, json=payload).status_code == 400

    def test_update_role(self, client, admin_headers, cashier_user):
        resp = client.patch(f"/api/users/{cashier_user.id}", headers=admin_headers, json={"role": "admin"})
        assert resp.status_code == 200
        assert resp.json["user"]["role"] == "admin"

    def test_deactivate_revokes_sessions(self, client, db_session, admin_headers, cashier_user, cashier_headers):
        resp = client.patch(f"/api/users/{cashier_user.id}", headers=admin_headers, json={"is_active": False})

        assert resp.status_code == 200
        assert client.get("/api/items/", headers=cashier_headers).status_code == 401
        assert db_session.query(SessionToken).filter_by(user_id=cashier_user.id, is_revoked=False).count() == 0

    @pytest.mark.parametrize("value", ["false", "0", 0, 1, None])
    def test_non_boolean_is_active_rejected(self, client, db_session, admin_headers, cashier_user, cashier_headers, value):
        resp = client.patch(f"/api/users/{cashier_user.id}", headers=admin_headers, json={"is_active": value})

        assert resp.status_code == 400
        assert resp.json["error"] == "is_active must be true or false"
        db_session.expire_all()
        assert db_session.get(User, cashier_user.id).is_active is True
        assert client.get("/api/items/", headers=cashier_headers).status_code == 200

    def test_update_unknown_user_is_404(self, client, admin_headers):
        assert client.patch("/api/users/9999", headers=admin_headers, json={"name": "x"}).status_code == 404

    def test_cannot_delete_self(self, client, admin_user, admin_headers):
        assert client.delete(f"/api/users/{admin_user.id}", headers=admin_headers).status_code == 409

    def test_delete_user_without_sales(self, client, db_session, admin_headers, cashier_user):
        user_id = cashier_user.id
        resp = client.delete(f"/api/users/{user_id}", headers=admin_headers)

        assert resp.status_code == 200
        db_session.expire_all()
        assert db_session.get(User, user_id) is None

    def test_delete_user_with_sales_deactivates(self, client, db_session, admin_headers, cashier_user, cashier_headers, make_item):
        item = make_item(quantity=5)
        sale = client.post("/api/sales/", headers=cashier_headers, json={
            "items": [{"id": item.id, "qty": 1}], "total": 10, "payment_method": "cash",
        })
        assert sale.status_code == 201

        resp = client.delete(f"/api/users/{cashier_user.id}", headers=admin_headers)

        assert resp.status_code == 200
        assert resp.json["user"]["is_active"] is False
        db_session.expire_all()
        assert db_session.get(User, cashier_user.id) is not None
