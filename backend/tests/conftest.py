"""
ProjectPartner - Test Configuration and Fixtures
"""
import os
from typing import AsyncGenerator, Callable
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool
from faker import Faker

# Set testing environment before the app reads its settings
os.environ['ENVIRONMENT'] = 'testing'
os.environ['DATABASE_URL'] = 'sqlite+aiosqlite:///./test_projectpartner.db'
os.environ['SECRET_KEY'] = 'test-secret-key-for-testing-only'
os.environ['JWT_SECRET_KEY'] = 'test-jwt-secret-key-for-testing'
os.environ['ADMIN_REGISTRATION_KEY'] = 'test-admin-key'
os.environ['ANTHROPIC_API_KEY'] = ''
os.environ['RATE_LIMIT_ENABLED'] = 'false'
os.environ['BCRYPT_ROUNDS'] = '4'

from app.main import app
from app.core.database import Base, get_db
from app.core.security import get_password_hash, issue_token
from app.models.user import User
from app.utils.assistant_client import get_assistant_client
from tests.mocks.mock_assistant import MockAssistantClient

fake = Faker()

TEST_PASSWORD = 'testpassword123'

# Test database setup
TEST_DATABASE_URL = 'sqlite+aiosqlite:///./test_projectpartner.db'
test_engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=NullPool)
TestSessionLocal = async_sessionmaker(
    bind=test_engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False
)


@event.listens_for(test_engine.sync_engine, "connect")
def _enable_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest_asyncio.fixture(scope='function')
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a fresh database session for each test"""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session
        await session.rollback()

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
def mock_assistant() -> MockAssistantClient:
    return MockAssistantClient()


@pytest_asyncio.fixture
async def client(db_session: AsyncSession, mock_assistant: MockAssistantClient) -> AsyncGenerator[AsyncClient, None]:
    """Test client with the database and the assistant client overridden"""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_assistant_client] = lambda: mock_assistant

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session: AsyncSession) -> Callable:
    """Factory: ``await make_user(is_admin=True)``"""
    async def _make_user(is_admin: bool = False, **overrides) -> User:
        user = User(
            name=overrides.pop('name', fake.first_name()),
            lastname=overrides.pop('lastname', fake.last_name()),
            email=overrides.pop('email', fake.unique.email().lower()),
            hashed_password=get_password_hash(overrides.pop('password', TEST_PASSWORD)),
            is_admin=is_admin,
            **overrides
        )
        db_session.add(user)
        await db_session.commit()
        await db_session.refresh(user)
        return user
    return _make_user


@pytest_asyncio.fixture
async def test_user(make_user) -> User:
    """Create a test user"""
    return await make_user()


@pytest_asyncio.fixture
async def other_user(make_user) -> User:
    """A second regular user"""
    return await make_user()


@pytest_asyncio.fixture
async def admin_user(make_user) -> User:
    """Create an admin test user"""
    return await make_user(is_admin=True)


def headers_for(user: User) -> dict:
    return {'Authorization': f'Bearer {issue_token(user)}'}


@pytest.fixture
def auth_headers(test_user: User) -> dict:
    """Generate authentication headers for test user"""
    return headers_for(test_user)


@pytest.fixture
def other_auth_headers(other_user: User) -> dict:
    return headers_for(other_user)


@pytest.fixture
def admin_auth_headers(admin_user: User) -> dict:
    """Generate authentication headers for admin user"""
    return headers_for(admin_user)


@pytest.fixture
def test_user_data() -> dict:
    """Registration payload"""
    password = fake.password(length=12)
    return {
        'name': fake.first_name(),
        'lastname': fake.last_name(),
        'email': fake.unique.email().lower(),
        'password': password,
        'c_password': password,
    }


@pytest.fixture
def create_project(client: AsyncClient, admin_auth_headers: dict) -> Callable:
    """Factory: create a project through the API as the admin"""
    async def _create_project(**fields) -> dict:
        payload = {
            'name': fields.pop('name', 'Capstone'),
            'description': fields.pop('description', 'Final year project'),
            **fields,
        }
        response = await client.post('/api/projects', json=payload, headers=admin_auth_headers)
        assert response.status_code == 201, response.text
        return response.json()
    return _create_project
