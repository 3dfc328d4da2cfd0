"""Test configuration and fixtures."""

import os
from collections.abc import AsyncGenerator
from typing import Any

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

import tracker.models  # noqa: F401  (registers all tables)
from tracker.core.database import Base, get_db
from tracker.core.permissions import AccountState, Role
from tracker.core.security import get_password_hash
from tracker.models.assistant import Assistant
from tracker.models.student import Student, empty_mock_exams, empty_payment
from main import app

# Separate test database; SQLite file by default, any async URL via env
TEST_DATABASE_URL = os.environ.get(
    "TEST_DATABASE_URL", "sqlite+aiosqlite:///./test_lesson_tracker.db"
)

# Create test engine with NullPool to avoid connection issues
test_engine = create_async_engine(
    TEST_DATABASE_URL,
    echo=False,
    poolclass=NullPool,
)
test_session_maker = async_sessionmaker(
    test_engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
    """Override database dependency for tests."""
    async with test_session_maker() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def setup_database() -> AsyncGenerator[None, None]:
    """Create test database tables before each test that needs it."""
    app.dependency_overrides[get_db] = override_get_db

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    app.dependency_overrides.pop(get_db, None)


@pytest_asyncio.fixture
async def db(setup_database: None) -> AsyncGenerator[AsyncSession, None]:
    """Get database session for tests."""
    async with test_session_maker() as session:
        yield session


@pytest_asyncio.fixture
async def client(setup_database: None) -> AsyncGenerator[AsyncClient, None]:
    """Get async HTTP client."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


async def make_assistant(
    db: AsyncSession,
    assistant_id: str,
    password: str,
    role: Role = Role.ASSISTANT,
    account_state: AccountState = AccountState.ACTIVATED,
) -> Assistant:
    """Insert an assistant account directly."""
    assistant = Assistant(
        assistant_id=assistant_id,
        name=assistant_id.title(),
        phone="01012345678",
        password_hash=get_password_hash(password),
        role=role.value,
        account_state=account_state.value,
    )
    db.add(assistant)
    await db.commit()
    await db.refresh(assistant)
    return assistant


@pytest_asyncio.fixture
async def admin_user(db: AsyncSession) -> Assistant:
    """Create an admin account for tests."""
    return await make_assistant(db, "admin", "admin123", role=Role.ADMIN)


@pytest_asyncio.fixture
async def assistant_user(db: AsyncSession) -> Assistant:
    """Create a regular assistant account for tests."""
    return await make_assistant(db, "tony", "tony1234")


async def login(client: AsyncClient, assistant_id: str, password: str) -> str:
    response = await client.post(
        "/api/v1/auth/login",
        json={"assistant_id": assistant_id, "password": password},
    )
    return response.json()["access_token"]


@pytest_asyncio.fixture
async def admin_token(client: AsyncClient, admin_user: Assistant) -> str:
    """Get auth token for the admin."""
    token = await login(client, "admin", "admin123")
    client.cookies.clear()
    return token


@pytest_asyncio.fixture
async def assistant_token(client: AsyncClient, assistant_user: Assistant) -> str:
    """Get auth token for the regular assistant."""
    token = await login(client, "tony", "tony1234")
    client.cookies.clear()
    return token


def auth_header(token: str) -> dict[str, str]:
    """Create authorization header."""
    return {"Authorization": f"Bearer {token}"}


async def make_student(db: AsyncSession, student_id: int = 1, **fields: Any) -> Student:
    """Insert a student directly, with an empty lesson book unless given."""
    values: dict[str, Any] = {
        "name": "Mariam Adel",
        "phone": "01011111111",
        "parents_phone_1": "01022222222",
        "school": "Nile School",
        "grade": "Grade 11",
        "main_center": "Rehab Center",
        "course": "EST",
        "course_type": "basics",
        "account_state": AccountState.ACTIVATED.value,
        "lessons": {},
        "payment": empty_payment(),
        "mock_exams": empty_mock_exams(),
    }
    values.update(fields)
    student = Student(id=student_id, **values)
    db.add(student)
    await db.commit()
    await db.refresh(student)
    return student


@pytest_asyncio.fixture
async def student(db: AsyncSession) -> Student:
    """Create a test student with no lesson records."""
    return await make_student(db)
