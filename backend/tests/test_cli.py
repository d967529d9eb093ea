"""CLI command tests."""

from datetime import timedelta

from shoppos.models import Location, SessionToken, User
from shoppos.services import session_service
from shoppos.time_utils import utcnow


def test_system_init_is_idempotent(app, db_session):
    runner = app.test_cli_runner()

    first = runner.invoke(args=["system", "init"])
    second = runner.invoke(args=["system", "init"])

    assert first.exit_code == 0, first.output
    assert second.exit_code == 0, second.output
    assert "already exists" in second.output
    assert db_session.query(User).count() == 2
    assert db_session.query(Location).filter_by(name="Main Store").count() == 1


def test_users_create_and_list(app, db_session):
    runner = app.test_cli_runner()

    result = runner.invoke(args=[
        "users", "create",
        "--email", "night@shop.test",
        "--password", "Password123",
        "--role", "cashier",
    ])
    assert result.exit_code == 0, result.output
    assert db_session.query(User).filter_by(email="night@shop.test").one().role == "cashier"

    listing = runner.invoke(args=["users", "list"])
    assert "night@shop.test" in listing.output


def test_users_create_rejects_weak_password(app, db_session):
    result = app.test_cli_runner().invoke(args=[
        "users", "create", "--email", "weak@shop.test", "--password", "short", "--role", "admin",
    ])

    assert result.exit_code == 1
    assert "FAIL" in result.output
    assert db_session.query(User).count() == 0


def test_locations_create_duplicate(app, db_session, location):
    result = app.test_cli_runner().invoke(args=["locations", "create", "--name", location.name])

    assert result.exit_code == 1
    assert "already exists" in result.output


def test_cleanup_sessions(app, db_session, cashier_user):
    old, _ = session_service.create_session(cashier_user.id)
    live, _ = session_service.create_session(cashier_user.id)
    old.created_at = utcnow() - timedelta(days=60)
    old.expires_at = utcnow() - timedelta(days=59)
    db_session.commit()

    result = app.test_cli_runner().invoke(args=["maintenance", "cleanup-sessions", "--retention-days", "30"])

    assert result.exit_code == 0, result.output
    assert "Deleted 1 sessions" in result.output
    assert [s.id for s in db_session.query(SessionToken).all()] == [live.id]


def test_perms_list_for_role(app):
    result = app.test_cli_runner().invoke(args=["perms", "list", "--role", "cashier"])

    assert result.exit_code == 0, result.output
    assert "CREATE_SALE" in result.output
    assert "MANAGE_USERS" not in result.output
    assert "Total: 5 permissions" in result.output


def test_perms_list_by_category(app):
    result = app.test_cli_runner().invoke(args=["perms", "list", "--category", "reports"])

    assert "VIEW_REPORTS" in result.output
    assert "CREATE_SALE" not in result.output


def test_perms_check(app, db_session, cashier_user):
    runner = app.test_cli_runner()

    granted = runner.invoke(args=["perms", "check", cashier_user.email, "create_sale"])
    denied = runner.invoke(args=["perms", "check", cashier_user.email, "MANAGE_USERS"])
    unknown = runner.invoke(args=["perms", "check", cashier_user.email, "LAUNCH_ROCKETS"])

    assert "HAS permission 'CREATE_SALE'" in granted.output
    assert "DOES NOT HAVE" in denied.output
    assert unknown.exit_code == 1
