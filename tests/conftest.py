"""Test configuration and fixtures"""

from contextlib import asynccontextmanager
from decimal import Decimal

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.main import app
from app.database import Base, build_engine, get_db, get_session_factory
from app.models.user import User, UserRole
from app.models.menu import MenuItem
from app.api.auth import get_password_hash, create_access_token
from app.services.events import EventBus


# Test database URL (use in-memory SQLite for tests)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


async def create_schema(engine):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


@pytest.fixture
async def test_db():
    """Create test database"""
    engine = build_engine(TEST_DATABASE_URL, echo=False)
    await create_schema(engine)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with session_factory() as session:
        yield session

    await engine.dispose()


@pytest.fixture
async def file_db(tmp_path):
    """File-backed database for tests that need several concurrent sessions"""
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'orders.db'}", echo=False)
    await create_schema(engine)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture
def event_bus():
    """Fresh bus per test; the keep-alive loop is not started"""
    bus = EventBus(keepalive_seconds=3600, queue_size=100)
    app.state.event_bus = bus
    return bus


@pytest.fixture
async def test_menu_items(test_db):
    """Create test menu items; returns their ids keyed by a short name"""
    items = {
        "chicken_rice": MenuItem(
            name_en="Hainanese Chicken Rice",
            name_cn="海南鸡饭",
            price=Decimal("5.00"),
            category="Main Dishes",
        ),
        "lemon_tea": MenuItem(
            name_en="Iced Lemon Tea",
            name_cn="冰柠檬茶",
            price=Decimal("3.50"),
            category="Drinks",
        ),
        "chilli_crab": MenuItem(
            name_en="Chilli Crab",
            name_cn="辣椒螃蟹",
            price=Decimal("38.00"),
            category="Seasonal",
            is_available=False,
        ),
    }

    for item in items.values():
        test_db.add(item)

    await test_db.commit()
    return {key: item.id for key, item in items.items()}


@pytest.fixture
async def test_user(test_db):
    """Create a counter staff user"""
    user = User(
        username="counter",
        hashed_password=get_password_hash("counter123"),
        role=UserRole.STAFF,
        is_active=True,
    )
    test_db.add(user)
    await test_db.commit()

    return user


@pytest.fixture
async def test_admin_user(test_db):
    """Create an admin user"""
    user = User(
        username="xiangyee_admin",
        hashed_password=get_password_hash("admin123"),
        role=UserRole.ADMIN,
        is_active=True,
    )
    test_db.add(user)
    await test_db.commit()

    return user


@pytest.fixture
async def client(test_db, event_bus):
    """Create test client with overridden database"""
    async def override_get_db():
        yield test_db

    @asynccontextmanager
    async def test_session():
        yield test_db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: test_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
async def authenticated_client(client, test_user):
    """Create authenticated test client"""
    token = create_access_token(test_user)
    client.headers["Authorization"] = f"Bearer {token}"

    return client


@pytest.fixture
async def admin_client(client, test_admin_user):
    """Create admin authenticated test client"""
    token = create_access_token(test_admin_user)
    client.headers["Authorization"] = f"Bearer {token}"

    return client
