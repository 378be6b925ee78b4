# tests/conftest.py
import os

# Set up test environment variables BEFORE any other imports
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test.db")
os.environ.setdefault("UPLOAD_DIR", "./test-uploads")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.core.config import Settings
from app.core.security import PasswordHasher, TokenManager
from app.database import Database
from app.main import create_app
from models import StoredFile, User
from tests.factories import TEST_PASSWORD, StoredFileFactory, UserFactory

TEST_SECRET_KEY = "test-secret-key-for-signing-tokens"
TEST_MAX_UPLOAD_SIZE = 64 * 1024


@pytest.fixture
def test_settings(tmp_path):
    """Settings isolated to a temporary directory and SQLite file."""
    return Settings(
        environment="testing",
        secret_key=TEST_SECRET_KEY,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        upload_dir=str(tmp_path / "uploads"),
        frontend_build_dir=str(tmp_path / "build"),
        max_upload_size=TEST_MAX_UPLOAD_SIZE,
        bcrypt_rounds=4,
    )


@pytest_asyncio.fixture
async def database(test_settings):
    """Create the schema in a fresh SQLite database."""
    database = Database(test_settings.database_url_resolved)
    await database.create_tables()

    yield database

    await database.drop_tables()
    await database.dispose()


@pytest_asyncio.fixture
async def test_db(database):
    """Create a test database session."""
    async with database.session_factory() as session:
        yield session


@pytest.fixture
def app(test_settings, database):
    """Application wired to the test database and upload directory.

    ``AsyncClient`` does not run the lifespan, so the pieces it would set up
    are attached here.
    """
    application = create_app(test_settings)
    application.state.blob_store.prepare()
    application.state.database = database
    return application


@pytest_asyncio.fixture
async def client(app):
    """Create an unauthenticated test client."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def password_hasher():
    return PasswordHasher(rounds=4)


@pytest.fixture
def token_manager():
    return TokenManager(secret_key=TEST_SECRET_KEY)


@pytest.fixture
def upload_dir(test_settings):
    return test_settings.upload_dir


# User fixtures
async def persist(db, instance):
    db.add(instance)
    await db.commit()
    await db.refresh(instance)
    return instance


@pytest_asyncio.fixture
async def test_user(test_db) -> User:
    """A registered user whose password is ``TEST_PASSWORD``."""
    return await persist(test_db, UserFactory.build(username="testuser", email="test@example.com"))


@pytest_asyncio.fixture
async def test_user_2(test_db) -> User:
    """Create a second test user."""
    return await persist(
        test_db, UserFactory.build(username="testuser2", email="test2@example.com")
    )


@pytest.fixture
def auth_headers(token_manager, test_user):
    token = token_manager.issue(test_user.id, test_user.username)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers_2(token_manager, test_user_2):
    token = token_manager.issue(test_user_2.id, test_user_2.username)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def expired_headers(token_manager, test_user):
    issued_at = datetime.now(timezone.utc) - timedelta(hours=25)
    token = token_manager.issue(test_user.id, test_user.username, now=issued_at)
    return {"Authorization": f"Bearer {token}"}


# File fixtures
@pytest_asyncio.fixture
async def stored_file(test_db, test_user, upload_dir) -> StoredFile:
    """A file record for ``test_user`` with its bytes on disk."""
    record = StoredFileFactory.build(user_id=test_user.id, original_name="דוח.txt")
    os.makedirs(upload_dir, exist_ok=True)
    record.file_path = os.path.join(upload_dir, record.filename)
    with open(record.file_path, "wb") as fh:
        fh.write(b"report body")
    record.file_size = len(b"report body")
    return await persist(test_db, record)


@pytest.fixture
def test_password():
    return TEST_PASSWORD


@pytest.fixture
def max_upload_size(test_settings):
    return test_settings.max_upload_size
