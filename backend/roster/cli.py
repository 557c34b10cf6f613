# Overview: Flask CLI command groups for bootstrap, inspection, and maintenance.

# backend/roster/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init
#   Create all tables (idempotent).
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
# - python -m flask system seed [--password "Password123"]
#   Seed demo members, units and the award catalogue into an empty database.
#
# Members:
# - python -m flask users list [--status active]
# - python -m flask users create --discord-id 1 --username admin_user --first-name John --last-name Smith --unit Command --role Admin
#
# Data snapshot:
# - python -m flask data export roster.json
# - python -m flask data import roster.json --yes
#
# Merit ledger:
# - python -m flask merit reconcile [--user-id 5] [--fix]
#   Compare cached balances with ledger sums (and repair with --fix).
#
# Ranks:
# - python -m flask ranks list [--tier officer]
#
# Maintenance:
# - python -m flask maintenance cleanup-sessions --retention-days 30
#   Delete expired and revoked login sessions older than the retention window.

import json
from datetime import timedelta

import click
from flask.cli import with_appcontext

from .extensions import db
from .permissions import USER_ROLES
from .ranks import ALL_RANKS, RANK_CODES, RankTier, get_ranks_by_tier
from .services import award_service, merit_service, record_store, session_service, unit_service, user_service
from .services.auth_service import PasswordValidationError
from .services.concurrency import run_with_retry
from .services.record_store import SnapshotError
from .validation import ValidationError, ConflictError
from .time_utils import utcnow


# Demo roster: (discord_id, username, first, last, rank, role, unit, callsign, days_in_service)
SEED_USERS = (
    ("123456789", "admin_user", "John", "Smith", "GEN", "Admin", "Command", None, 0),
    ("987654321", "gen_jackson", "Robert", "Jackson", "COL", "General", "1st Division", "Havoc-1", 365),
    ("555666777", "col_davis", "Michael", "Davis", "MAJ", "Colonel", "2nd Battalion", "Eagle-6", 180),
    ("111222333", "mp_johnson", "Sarah", "Johnson", "SGT", "MP", "Military Police", "Charlie-5", 90),
    ("444555666", "soldier_wilson", "David", "Wilson", "CPL", "Soldier", "Alpha Company", "Alpha-1", 60),
    ("777888999", "soldier_brown", "Emily", "Brown", "SPC", "Soldier", "Bravo Company", "Bravo-2", 45),
    ("222333444", "soldier_martinez", "Carlos", "Martinez", "PFC", "Soldier", "Charlie Company", "Charlie-3", 30),
    ("333444555", "soldier_garcia", "Maria", "Garcia", "PV2", "Soldier", "Delta Company", "Delta-4", 20),
    ("666777888", "soldier_lee", "James", "Lee", "PV1", "Soldier", "Echo Company", None, 10),
)

# (name, abbreviation, description, commander discord id)
SEED_UNITS = (
    ("1st Division", "1ST DIV", "Primary combat division", "987654321"),
    ("2nd Battalion", "2ND BN", "Infantry battalion", "555666777"),
)

# (name, abbreviation, category, precedence)
SEED_AWARDS = (
    ("Medal of Honor", "MOH", "valor", 1),
    ("Distinguished Service Cross", "DSC", "valor", 2),
    ("Silver Star", "SS", "valor", 3),
    ("Bronze Star Medal", "BSM", "service", 4),
    ("Purple Heart", "PH", "service", 5),
    ("Army Commendation Medal", "ARCOM", "service", 6),
    ("Army Achievement Medal", "AAM", "service", 7),
    ("Good Conduct Medal", "AGCM", "service", 8),
)


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init')
@with_appcontext
def init_system():
    """Create all tables that do not exist yet."""
    db.create_all()
    click.echo("PASS Database tables ready")


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def reset_db(yes):
    """DEV/TEST only: drop and recreate all tables."""
    if not yes:
        click.confirm("WARN This will DELETE ALL DATA. Are you sure?", abort=True)

    click.echo("Dropping all tables...")
    db.drop_all()
    click.echo("Creating all tables...")
    db.create_all()
    click.echo("PASS Database reset complete")


@system_group.command('seed')
@click.option('--password', default='Password123', help='Password for every seeded member')
@with_appcontext
def seed(password):
    """
    Seed demo members, units and the award catalogue.

    Skipped when any member already exists.
    SECURITY: Change passwords immediately outside development!
    """
    db.create_all()
    if record_store.list_users():
        click.echo("SKIP Database already seeded")
        return

    now = utcnow()
    try:
        for discord_id, username, first, last, rank, role, unit, callsign, days in SEED_USERS:
            user_service.create_user(
                actor_id=None,
                payload={
                    "discord_id": discord_id,
                    "discord_username": username,
                    "first_name": first,
                    "last_name": last,
                    "rank": rank,
                    "role": role,
                    "unit": unit,
                    "callsign": callsign,
                    "join_date": now - timedelta(days=days),
                },
                password=password,
            )
            click.echo(f"PASS Created member {username} ({role}, {rank})")
    except PasswordValidationError as e:
        click.echo(f"FAIL Password validation failed: {str(e)}")
        return

    for name, abbreviation, description, commander_discord_id in SEED_UNITS:
        commander = record_store.get_user_by_discord_id(commander_discord_id)
        unit_service.create_unit(
            actor_id=None,
            payload={
                "name": name,
                "abbreviation": abbreviation,
                "description": description,
                "commander_id": commander.id if commander else None,
            },
        )
        click.echo(f"PASS Created unit {name}")

    for name, abbreviation, category, precedence in SEED_AWARDS:
        award_service.create_award({
            "name": name,
            "abbreviation": abbreviation,
            "category": category,
            "precedence": precedence,
        })
    click.echo(f"PASS Created {len(SEED_AWARDS)} awards")


# =============================================================================
# USER MANAGEMENT COMMANDS
# =============================================================================

@click.group('users')
def users_group():
    """Member inspection and bootstrap commands."""


@users_group.command('create')
@click.option('--discord-id', prompt=True, help='Discord user id')
@click.option('--username', prompt=True, help='Discord username (login identifier)')
@click.option('--first-name', prompt=True)
@click.option('--last-name', prompt=True)
@click.option('--unit', prompt=True)
@click.option('--rank', type=click.Choice(RANK_CODES), default='PV1', show_default=True)
@click.option('--role', type=click.Choice(USER_ROLES), default='Soldier', show_default=True)
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='Password')
@with_appcontext
def create_user_cli(discord_id, username, first_name, last_name, unit, rank, role, password):
    """
    Create a member.

    Password must be at least 8 characters with a letter and a digit.
    """
    try:
        user = user_service.create_user(
            actor_id=None,
            payload={
                "discord_id": discord_id,
                "discord_username": username,
                "first_name": first_name,
                "last_name": last_name,
                "unit": unit,
                "rank": rank,
                "role": role,
            },
            password=password,
        )
        click.echo(f"PASS Created member: {username} (ID: {user.id}) with role '{role}'")
    except PasswordValidationError as e:
        click.echo(f"FAIL Password validation failed: {str(e)}")
        click.echo("Requirements: 8+ chars, a letter and a digit")
    except (ValidationError, ConflictError) as e:
        click.echo(f"FAIL Failed to create member: {str(e)}")


@users_group.command('list')
@click.option('--status', type=click.Choice(['active', 'inactive']), help='Filter by status')
@with_appcontext
def list_users(status):
    """List all members."""
    users = record_store.list_users(status=status)

    if not users:
        click.echo("No users found.")
        return

    click.echo("\n" + "="*100)
    click.echo(f"{'ID':<5} {'Username':<20} {'Name':<25} {'Rank':<6} {'Role':<9} {'Status':<9} {'Merit'}")
    click.echo("="*100)

    for user in users:
        click.echo(
            f"{user.id:<5} {user.discord_username:<20} {user.full_name:<25} "
            f"{user.rank:<6} {user.role:<9} {user.status:<9} {user.merit_points}"
        )

    click.echo("="*100 + "\n")


# =============================================================================
# DATA SNAPSHOT COMMANDS
# =============================================================================

@click.group('data')
def data_group():
    """Snapshot export and import."""


@data_group.command('export')
@click.argument('path', type=click.Path(dir_okay=False, writable=True))
@with_appcontext
def export_data(path):
    """Write every collection to PATH as one JSON document."""
    snapshot = record_store.export_snapshot()
    with open(path, 'w', encoding='utf-8') as fh:
        json.dump(snapshot, fh, indent=2)
    counts = ", ".join(f"{name}={len(rows)}" for name, rows in snapshot.items())
    click.echo(f"PASS Exported to {path} ({counts})")


@data_group.command('import')
@click.argument('path', type=click.Path(exists=True, dir_okay=False))
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def import_data(path, yes):
    """Replace every collection with the contents of PATH."""
    if not yes:
        click.confirm("WARN This will REPLACE ALL DATA. Are you sure?", abort=True)

    try:
        with open(path, encoding='utf-8') as fh:
            snapshot = json.load(fh)
    except json.JSONDecodeError as e:
        click.echo(f"FAIL Not a JSON document: {e}")
        return

    try:
        counts = run_with_retry(lambda: record_store.import_snapshot(snapshot))
    except SnapshotError as e:
        click.echo(f"FAIL Invalid snapshot: {e}")
        return

    for name, count in counts.items():
        click.echo(f"  {name}: {count}")
    click.echo("PASS Import complete")


# =============================================================================
# MERIT LEDGER COMMANDS
# =============================================================================

@click.group('merit')
def merit_group():
    """Merit ledger maintenance."""


@merit_group.command('reconcile')
@click.option('--user-id', type=int, help='Only this member')
@click.option('--fix', is_flag=True, help='Reset drifted cached balances to the ledger sum')
@with_appcontext
def reconcile(user_id, fix):
    """Compare cached merit balances with the ledger."""
    if user_id:
        user = record_store.get_user(user_id)
        if not user:
            click.echo(f"FAIL User ID {user_id} not found")
            return
        users = [user]
    else:
        users = record_store.list_users()

    drifted = 0
    for user in users:
        ledger_balance = record_store.sum_merit_transactions(user.id)
        if ledger_balance == user.merit_points:
            continue
        drifted += 1
        click.echo(f"DRIFT {user.discord_username}: cached={user.merit_points} ledger={ledger_balance}")
        if fix:
            merit_service.reconcile_balance(user.id)
            click.echo(f"FIXED {user.discord_username}: balance set to {ledger_balance}")

    if drifted == 0:
        click.echo(f"PASS {len(users)} balance(s) match the ledger")


# =============================================================================
# RANK TABLE
# =============================================================================

@click.group('ranks')
def ranks_group():
    """Rank table lookups."""


@ranks_group.command('list')
@click.option('--tier', type=click.Choice([RankTier.ENLISTED, RankTier.WARRANT, RankTier.OFFICER]))
def list_ranks(tier):
    """Print the rank table."""
    ranks = get_ranks_by_tier(tier) if tier else ALL_RANKS
    for rank in ranks:
        click.echo(f"{rank.code:<5} {rank.level:>3}  {rank.tier:<9} {rank.name}")


# =============================================================================
# MAINTENANCE COMMANDS
# =============================================================================

@click.group('maintenance')
def maintenance_group():
    """Maintenance commands."""


@maintenance_group.command('cleanup-sessions')
@click.option('--retention-days', type=int, default=30, show_default=True)
@with_appcontext
def cleanup_sessions_cli(retention_days):
    """Delete expired and revoked login sessions older than the retention window."""
    deleted = session_service.cleanup_expired_sessions(retention_days=retention_days)
    click.echo(f"Deleted {deleted} sessions older than {retention_days} days.")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(users_group)
    app.cli.add_command(data_group)
    app.cli.add_command(merit_group)
    app.cli.add_command(ranks_group)
    app.cli.add_command(maintenance_group)
