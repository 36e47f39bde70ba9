"""
Pytest configuration and fixtures.
Ensures tests use an isolated test database, not the production database.
"""

import os
import pytest
import tempfile

# Set test database path BEFORE importing app
# This ensures all tests use an isolated database
TEST_DB_PATH = os.path.join(tempfile.gettempdir(), 'psc_club_test.db')
os.environ['DATABASE_PATH'] = TEST_DB_PATH
os.environ['FLASK_ENV'] = 'test'


@pytest.fixture(scope='session', autouse=True)
def setup_test_environment():
    """Set up test environment before any tests run."""
    os.environ['DATABASE_PATH'] = TEST_DB_PATH
    os.environ['FLASK_ENV'] = 'test'

    yield

    # Cleanup: remove test database (and WAL files) after all tests
    for path in (TEST_DB_PATH, TEST_DB_PATH + '-wal', TEST_DB_PATH + '-shm'):
        if os.path.exists(path):
            try:
                os.remove(path)
            except PermissionError:
                pass  # Windows may have file locked


@pytest.fixture
def app():
    """Create test application with isolated database."""
    from app import create_app
    from database import init_db

    os.environ['DATABASE_PATH'] = TEST_DB_PATH

    app = create_app('test')
    app.config['TESTING'] = True
    app.config['DATABASE_PATH'] = TEST_DB_PATH

    with app.app_context():
        init_db()
        yield app


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def room_id(app):
    """ID of the first seeded room."""
    from database import get_db
    row = get_db().execute(
        "SELECT id FROM resources WHERE resource_type = 'room' ORDER BY id LIMIT 1"
    ).fetchone()
    return row['id']


@pytest.fixture
def hall_id(app):
    """ID of the first seeded hall."""
    from database import get_db
    row = get_db().execute(
        "SELECT id FROM resources WHERE resource_type = 'hall' ORDER BY id LIMIT 1"
    ).fetchone()
    return row['id']
