"""
Pytest fixtures for roster backend tests.

Provides test database setup, one member per role, and login helpers.
"""

import itertools

import pytest
from roster import create_app
from roster.extensions import db
from roster.services import record_store
from roster.services.auth_service import hash_password
from roster.time_utils import utcnow


DEFAULT_PASSWORD = "Password123"

_discord_ids = itertools.count(100000)


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
def file_app(tmp_path):
    """
    Application on a file-backed SQLite database.

    Unlike the in-memory app this one has a real connection pool, so worker
    threads each check out their own connection.
    """
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': f"sqlite:///{tmp_path / 'roster.sqlite3'}",
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'SQLALCHEMY_ENGINE_OPTIONS': {'pool_timeout': 5},
        'BCRYPT_ROUNDS': 4,
    })

    with app.app_context():
        db.create_all()

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()
        db.engine.dispose()


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

        yield db.session()

        # Cleanup after test
        db.session.rollback()
        db.session.remove()


@pytest.fixture(scope='function')
def make_user(db_session):
    """Factory: create a member directly in the store."""
    def _make_user(
        username: str,
        role: str = "Soldier",
        rank: str = "PV1",
        password: str | None = DEFAULT_PASSWORD,
        status: str = "active",
        first_name: str = "Test",
        last_name: str | None = None,
    ):
        with record_store.transaction():
            user = record_store.create_user(
                discord_id=str(next(_discord_ids)),
                discord_username=username,
                first_name=first_name,
                last_name=last_name or username.title(),
                rank=rank,
                role=role,
                unit="Alpha Company",
                status=status,
                merit_points=0,
                join_date=utcnow(),
                password_hash=hash_password(password) if password else None,
            )
        return user

    return _make_user


@pytest.fixture(scope='function')
def soldier(make_user):
    return make_user("soldier_wilson", role="Soldier", rank="PV1")


@pytest.fixture(scope='function')
def mp(make_user):
    return make_user("mp_johnson", role="MP", rank="SGT")


@pytest.fixture(scope='function')
def colonel(make_user):
    return make_user("col_davis", role="Colonel", rank="MAJ")


@pytest.fixture(scope='function')
def general(make_user):
    return make_user("gen_jackson", role="General", rank="COL")


@pytest.fixture(scope='function')
def admin(make_user):
    return make_user("admin_user", role="Admin", rank="GEN")


def get_auth_token(client, username: str, password: str = DEFAULT_PASSWORD) -> str:
    """Helper to get auth token for a user."""
    response = client.post('/api/auth/login', json={
        'username': username,
        'password': password
    })
    if response.status_code == 200:
        return response.json.get('token')
    return None


def auth_headers(token: str) -> dict:
    """Helper to create Authorization headers."""
    return {'Authorization': f'Bearer {token}'}


def login(client, user) -> dict:
    token = get_auth_token(client, user.discord_username)
    assert token, f"login failed for {user.discord_username}"
    return auth_headers(token)


@pytest.fixture(scope='function')
def soldier_headers(client, soldier):
    return login(client, soldier)


@pytest.fixture(scope='function')
def mp_headers(client, mp):
    return login(client, mp)


@pytest.fixture(scope='function')
def colonel_headers(client, colonel):
    return login(client, colonel)


@pytest.fixture(scope='function')
def general_headers(client, general):
    return login(client, general)


@pytest.fixture(scope='function')
def admin_headers(client, admin):
    return login(client, admin)


@pytest.fixture(scope='function')
def login_as(client):
    """Factory: log a member in and return bearer headers."""
    return lambda user: login(client, user)
