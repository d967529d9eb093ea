"""
Pytest fixtures for shoppos backend tests.

Provides test database setup, users with each role, and an authenticated
test client helper.
"""

import pytest

from shoppos import create_app
from shoppos.extensions import db
from shoppos.models import Item, Location, User
from shoppos.models.auth import ROLE_ADMIN, ROLE_CASHIER
from shoppos.services.auth_service import hash_password


PASSWORD = "Password123"


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'BCRYPT_ROUNDS': 4,
    })

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Create fresh database for each test."""
    with app.app_context():
        # Clear all data but keep schema
        meta = db.metadata
        for table in reversed(meta.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()

        yield db.session

        # Cleanup after test
        db.session.rollback()


def _make_user(db_session, email, role, **extra):
    user = User(
        email=email,
        password_hash=hash_password(PASSWORD),
        role=role,
        is_active=True,
        **extra,
    )
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture(scope='function')
def admin_user(db_session):
    return _make_user(db_session, "admin@shop.test", ROLE_ADMIN, name="Ana", surname="Admin")


@pytest.fixture(scope='function')
def cashier_user(db_session):
    return _make_user(db_session, "cashier@shop.test", ROLE_CASHIER, name="Gio", surname="Cashier")


@pytest.fixture(scope='function')
def second_cashier(db_session):
    return _make_user(db_session, "partner@shop.test", ROLE_CASHIER, name="Nino", surname="Partner")


@pytest.fixture(scope='function')
def location(db_session):
    loc = Location(name="Main Floor")
    db_session.add(loc)
    db_session.commit()
    return loc


@pytest.fixture(scope='function')
def make_item(db_session):
    """Factory: make_item(name, price_cents, quantity)."""
    def _make(name="T-shirt", price_cents=1000, quantity=5, **extra):
        item = Item(name=name, price_cents=price_cents, quantity=quantity, **extra)
        db_session.add(item)
        db_session.commit()
        return item
    return _make


def get_auth_token(client, email: str, password: str = PASSWORD) -> str:
    """Helper to get auth token for a user."""
    response = client.post('/api/auth/login', json={
        'email': email,
        'password': password
    })
    if response.status_code == 200:
        return response.json.get('token')
    return None


def auth_headers(token: str) -> dict:
    """Helper to create Authorization headers."""
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture(scope='function')
def admin_headers(client, admin_user):
    return auth_headers(get_auth_token(client, admin_user.email))


@pytest.fixture(scope='function')
def cashier_headers(client, cashier_user):
    return auth_headers(get_auth_token(client, cashier_user.email))
