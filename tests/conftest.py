"""
Test infrastructure for the Blog API.

Strategy
--------
- SQLite in-memory via aiosqlite eliminates the need for a running Postgres
  instance in CI, keeping the suite fast and self-contained.
- StaticPool forces all async tasks to share the same in-memory database
  connection, which is required because SQLite in-memory databases are
  connection-scoped; a new connection would see an empty database.
- ``install_sqlite_pragmas`` turns on foreign keys and case-sensitive LIKE
  so constraint and search behaviour match Postgres.
- The app's get_db dependency is overridden so every test-time request uses
  the test session factory rather than the production one.
- All tables are created fresh before each test and dropped after.
- bcrypt runs at its minimum cost so hashing does not dominate the suite.
"""
import os

os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("DEBUG", "false")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import pytest_asyncio  # noqa: E402
from httpx import AsyncClient, ASGITransport  # noqa: E402
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from blogcore.database import Base, get_db, install_sqlite_pragmas  # noqa: E402
from blogcore.main import app  # noqa: E402
from blogcore.middleware import install_query_counter  # noqa: E402
from blogcore.models import User, UserRole  # noqa: E402
from blogcore.security import hash_password  # noqa: E402
from blogcore.services import auth_service  # noqa: E402

# ---------------------------------------------------------------------------
# Test database engine: SQLite in-memory with aiosqlite
# ---------------------------------------------------------------------------

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

engine_test = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

install_sqlite_pragmas(engine_test)
install_query_counter(engine_test)

async_session_test = async_sessionmaker(
    engine_test,
    class_=AsyncSession,
    expire_on_commit=False,
)

PASSWORD = "password123"


# ---------------------------------------------------------------------------
# Dependency override: replace production get_db with the test session factory
# ---------------------------------------------------------------------------

async def override_get_db():
    async with async_session_test() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


app.dependency_overrides[get_db] = override_get_db


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

async def make_user(
    db: AsyncSession,
    email: str,
    role: UserRole = UserRole.USER,
    first_name: str = "Test",
    last_name: str = "User",
) -> User:
    """Insert a user directly (bypassing the service) and flush it."""
    user = User(
        email=email,
        first_name=first_name,
        last_name=last_name,
        password_hash=hash_password(PASSWORD),
        role=role,
    )
    db.add(user)
    await db.flush()
    return user


def auth_headers(user: User) -> dict[str, str]:
    token = auth_service.generate_tokens(user).access_token
    return {"Authorization": f"Bearer {token}"}


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture(autouse=True)
async def setup_db():
    """Create all tables before each test, drop after to guarantee isolation."""
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture
async def db_session() -> AsyncSession:
    """
    Yield a live AsyncSession for tests that call services directly.
    """
    async with async_session_test() as session:
        yield session


@pytest_asyncio.fixture
async def async_client() -> AsyncClient:
    """Yield an httpx.AsyncClient wired to the FastAPI app via ASGITransport."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def seeded_users() -> dict[str, User]:
    """
    Commit an admin and two regular users so HTTP requests (which use their
    own sessions) can see them.
    """
    async with async_session_test() as session:
        users = {
            "admin": await make_user(session, "admin@example.com", UserRole.ADMIN, "Ada", "Admin"),
            "alice": await make_user(session, "alice@example.com", first_name="Alice"),
            "bob": await make_user(session, "bob@example.com", first_name="Bob"),
        }
        await session.commit()
    return users
