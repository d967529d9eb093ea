# Overview: `flask` subcommands for shop setup, staff accounts, permissions and housekeeping.

# backend/shoppos/cli.py
# Run from backend/ with FLASK_APP=wsgi.py, e.g. `flask system init`.
#
#   flask system init                      tables + "Main Store" + admin/cashier logins (safe to rerun)
#   flask system reset-db --yes            drop and recreate every table, local use only
#   flask users create --email a@b.c --role cashier
#   flask users list
#   flask locations create --name "Back Room"
#   flask perms list [--role cashier] [--category SALES]
#   flask perms check cashier@shop.local CREATE_SALE
#   flask maintenance cleanup-sessions [--retention-days 30]

import click
from flask.cli import with_appcontext

from .extensions import db
from .models import Location, User
from .models.auth import ROLES
from .permissions import (
    get_all_permission_codes,
    get_permission_definition,
    get_permissions_by_category,
    get_role_permissions,
    role_has_permission,
    validate_permission_code,
)
from .services import session_service
from .services.auth_service import create_user, validate_password_strength, PasswordValidationError
from .services.location_service import create_location
from .validation import ConflictError, ValidationError


DEFAULT_LOCATION_NAME = "Main Store"
DEFAULT_PASSWORD = "Password123"


@click.group('system')
def system_group():
    """Schema and first-run setup."""


@system_group.command('init')
@with_appcontext
def init_system():
    """Create tables, the "Main Store" location and the two default logins. Existing rows are left alone."""
    click.echo("START Initializing shop...")

    db.create_all()

    location = db.session.query(Location).filter_by(name=DEFAULT_LOCATION_NAME).first()
    if not location:
        location = create_location(DEFAULT_LOCATION_NAME)
        click.echo(f"PASS Created default location: {location.name} (ID: {location.id})")
    else:
        click.echo(f"PASS Using existing location: {location.name} (ID: {location.id})")

    default_users = [
        ("admin@shop.local", "admin"),
        ("cashier@shop.local", "cashier"),
    ]

    for email, role in default_users:
        try:
            user = create_user(email=email, password=DEFAULT_PASSWORD, role=role)
            click.echo(f"PASS Created user: {user.email} with role '{role}'")
        except ConflictError:
            click.echo(f"WARN  User '{email}' already exists, skipping...")

    click.echo("\nDefault logins, rotate these before going live:")
    click.echo(f"   admin   -> admin@shop.local   / {DEFAULT_PASSWORD}")
    click.echo(f"   cashier -> cashier@shop.local / {DEFAULT_PASSWORD}")


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def reset_db(yes):
    """Drop and recreate the schema. Every row is lost."""
    if not yes:
        click.confirm("WARN Every table will be dropped. Continue?", abort=True)

    db.drop_all()
    db.create_all()
    click.echo("PASS Schema recreated. Next: flask system init")


# -- user management --

@click.group('users')
def users_group():
    """Staff accounts."""


@users_group.command('create')
@click.option('--email', prompt=True, help='Email address')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='Password')
@click.option('--role', type=click.Choice(list(ROLES)), prompt=True, help='Role')
@click.option('--name', default=None, help='First name')
@click.option('--surname', default=None, help='Last name')
@with_appcontext
def create_user_cli(email, password, role, name, surname):
    """
    Create a new user.

    Password must be at least 8 characters with a letter and a digit.
    """
    try:
        validate_password_strength(password)
        user = create_user(email=email, password=password, role=role, name=name, surname=surname)
    except (PasswordValidationError, ValidationError, ConflictError) as e:
        click.echo(f"FAIL {e}")
        raise SystemExit(1)

    click.echo(f"PASS Created user: {user.email} (ID: {user.id}) with role '{user.role}'")


@users_group.command('list')
@with_appcontext
def list_users():
    """Print every user with role and active flag."""
    users = db.session.query(User).order_by(User.id.asc()).all()

    if not users:
        click.echo("No users found.")
        return

    click.echo("\n" + "="*70)
    click.echo(f"{'ID':<5} {'Email':<35} {'Role':<10} {'Active'}")
    click.echo("="*70)

    for user in users:
        active = "yes" if user.is_active else "no"
        click.echo(f"{user.id:<5} {user.email:<35} {user.role:<10} {active}")

    click.echo("="*70 + "\n")


# -- location --

@click.group('locations')
def locations_group():
    """Shop location commands."""


@locations_group.command('create')
@click.option('--name', required=True, help='Location name (unique)')
@with_appcontext
def create_location_cli(name):
    """Create a new location."""
    try:
        location = create_location(name)
    except (ValidationError, ConflictError) as e:
        click.echo(f"FAIL {e}")
        raise SystemExit(1)

    click.echo(f"PASS Created location: {location.name} (ID: {location.id})")


# -- permission inspection --

@click.group('perms')
def perms_group():
    """Permission inspection commands."""


@perms_group.command('list')
@click.option('--role', type=click.Choice(list(ROLES)), help='Filter by role name')
@click.option('--category', help='Filter by category')
def list_permissions_cli(role, category):
    """Print the permission catalogue, narrowed by role and/or category."""
    if category:
        codes = [perm[0] for perm in get_permissions_by_category(category.upper())]
    else:
        codes = get_all_permission_codes()

    if role:
        granted = get_role_permissions(role)
        codes = [code for code in codes if code in granted]

    click.echo(f"{'Code':<20} {'Name':<20} {'Category'}")
    click.echo("-"*60)
    for code in codes:
        perm = get_permission_definition(code)
        click.echo(f"{perm['code']:<20} {perm['name']:<20} {perm['category']}")

    click.echo(f"\n Total: {len(codes)} permissions\n")


@perms_group.command('check')
@click.argument('email')
@click.argument('permission_code')
@with_appcontext
def check_permission_cli(email, permission_code):
    """Say whether the user's role grants permission_code."""
    permission_code = permission_code.upper()
    if not validate_permission_code(permission_code):
        click.echo(f"FAIL Unknown permission '{permission_code}'")
        raise SystemExit(1)

    user = db.session.query(User).filter_by(email=email.strip().lower()).first()
    if not user:
        click.echo(f"FAIL User '{email}' not found")
        raise SystemExit(1)

    if role_has_permission(user.role, permission_code):
        click.echo(f"PASS User '{user.email}' ({user.role}) HAS permission '{permission_code}'")
    else:
        click.echo(f"FAIL User '{user.email}' ({user.role}) DOES NOT HAVE permission '{permission_code}'")


# -- maintenance --

@click.group('maintenance')
def maintenance_group():
    """Housekeeping."""


@maintenance_group.command('cleanup-sessions')
@click.option('--retention-days', type=int, default=30, show_default=True)
@with_appcontext
def cleanup_sessions_cli(retention_days):
    """
    Delete expired or revoked session tokens.

    Default retention: 30 days.
    """
    deleted = session_service.cleanup_expired_sessions(retention_days=retention_days)
    click.echo(f"Deleted {deleted} sessions older than {retention_days} days.")


def register_commands(app):
    """Attach every command group to app.cli."""
    app.cli.add_command(system_group)
    app.cli.add_command(users_group)
    app.cli.add_command(locations_group)
    app.cli.add_command(perms_group)
    app.cli.add_command(maintenance_group)
