import unittest

from shoppos import create_app
from shoppos.extensions import db
from shoppos.models import ShopSettings
from shoppos.models.settings import DEFAULT_SHOP_SETTINGS
from shoppos.services import settings_service
from shoppos.validation import ValidationError


class SettingsServiceTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.app = create_app({
            "SECRET_KEY": "test",
            "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
            "SQLALCHEMY_TRACK_MODIFICATIONS": False,
            "TESTING": True,
        })
        cls.ctx = cls.app.app_context()
        cls.ctx.push()
        db.create_all()

    @classmethod
    def tearDownClass(cls):
        db.session.remove()
        db.drop_all()
        cls.ctx.pop()

    def setUp(self):
        db.session.query(ShopSettings).delete()
        db.session.commit()

    def test_defaults_when_nothing_saved(self):
        self.assertEqual(settings_service.get_settings(), DEFAULT_SHOP_SETTINGS)
        self.assertEqual(db.session.query(ShopSettings).count(), 0)

    def test_first_update_creates_row_from_defaults(self):
        settings_service.update_settings({"shop_name": "Tbilisi Threads"})

        current = settings_service.get_settings()
        self.assertEqual(current["shop_name"], "Tbilisi Threads")
        self.assertEqual(current["currency"], "GEL")
        self.assertEqual(current["receipt_footer"], "Please come again")
        self.assertEqual(db.session.query(ShopSettings).count(), 1)

    def test_partial_update_keeps_other_fields(self):
        settings_service.update_settings({"shop_name": "A", "tax_rate_bps": 1800})
        settings_service.update_settings({"currency": "usd"})

        current = settings_service.get_settings()
        self.assertEqual(current["shop_name"], "A")
        self.assertEqual(current["tax_rate_bps"], 1800)
        self.assertEqual(current["currency"], "USD")
        self.assertEqual(db.session.query(ShopSettings).count(), 1)

    def test_empty_update_rejected(self):
        with self.assertRaises(ValidationError):
            settings_service.update_settings({})

    def test_tax_rate_out_of_range_rejected(self):
        with self.assertRaises(ValidationError):
            settings_service.update_settings({"tax_rate_bps": 10001})
        with self.assertRaises(ValidationError):
            settings_service.update_settings({"tax_rate_bps": -1})

    def test_unknown_field_rejected(self):
        with self.assertRaises(ValidationError):
            settings_service.update_settings({"theme": "dark"})


class SettingsRouteTests(unittest.TestCase):
    """PUT requires MANAGE_SETTINGS; GET is open to any signed-in user."""

    @classmethod
    def setUpClass(cls):
        cls.app = create_app({
            "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
            "TESTING": True,
            "BCRYPT_ROUNDS": 4,
        })
        cls.ctx = cls.app.app_context()
        cls.ctx.push()
        db.create_all()

        from shoppos.services.auth_service import create_user
        create_user(email="boss@shop.test", password="Password123", role="admin")
        create_user(email="till@shop.test", password="Password123", role="cashier")

        cls.client = cls.app.test_client()
        cls.admin = cls._login("boss@shop.test")
        cls.cashier = cls._login("till@shop.test")

    @classmethod
    def _login(cls, email):
        resp = cls.client.post("/api/auth/login", json={"email": email, "password": "Password123"})
        return {"Authorization": f"Bearer {resp.json['token']}"}

    @classmethod
    def tearDownClass(cls):
        db.session.remove()
        db.drop_all()
        cls.ctx.pop()

    def test_cashier_reads_settings(self):
        resp = self.client.get("/api/settings/", headers=self.cashier)
        self.assertEqual(resp.status_code, 200)
        self.assertIn("shop_name", resp.json["settings"])

    def test_cashier_cannot_update(self):
        resp = self.client.put("/api/settings/", headers=self.cashier, json={"shop_name": "Mine"})
        self.assertEqual(resp.status_code, 403)

    def test_admin_updates(self):
        resp = self.client.put("/api/settings/", headers=self.admin, json={"receipt_header": "Welcome"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json["settings"]["receipt_header"], "Welcome")

    def test_empty_body_rejected(self):
        resp = self.client.put("/api/settings/", headers=self.admin, json={})
        self.assertEqual(resp.status_code, 400)
