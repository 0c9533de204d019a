import asyncio
import os
from datetime import date, timedelta

os.environ.setdefault("JWT_SECRET", "test-secret-not-for-production")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test.db")
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SCHEDULER_ENABLED"] = "false"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app.main import app
from app.dependencies.database import get_db
from app.core.security import create_access_token, hash_password
from app.models.base import Base, utcnow
from app.models.property import Property, PropertyCategory, PropertyStatus, TransactionType, Furnishing
from app.models.subscription import Subscription, SubscriptionPaymentStatus, SubscriptionStatus
from app.models.user import User

# Use a separate test database
TEST_DATABASE_URL = "sqlite+aiosqlite:///./test.db"

# NullPool: TestClient and asyncio.run each use their own event loop
engine = create_async_engine(TEST_DATABASE_URL, poolclass=NullPool)
TestingSessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

async def override_get_db():
    async with TestingSessionLocal() as session:
        yield session

app.dependency_overrides[get_db] = override_get_db


def run(coro):
    return asyncio.run(coro)


@pytest.fixture(scope="session", autouse=True)
def setup_database():
    # Remove the old database file if it exists
    if os.path.exists("./test.db"):
        os.remove("./test.db")

    async def create_tables():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    run(create_tables())

    yield

    async def drop_tables():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    run(drop_tables())


@pytest.fixture(autouse=True)
def clean_tables():
    yield

    async def truncate():
        async with engine.begin() as conn:
            for table in (Property, Subscription, User):
                await conn.execute(delete(table))

    run(truncate())


@pytest.fixture(scope="module")
def client():
    with TestClient(app) as c:
        yield c


async def _add(obj):
    async with TestingSessionLocal() as session:
        session.add(obj)
        await session.commit()
        await session.refresh(obj)
        return obj


def make_user(email="broker@example.com", is_admin=False, **overrides):
    fields = dict(
        full_name="Test Broker",
        email=email,
        phone="9999999999",
        password_hash=hash_password("secret123"),
        is_admin=is_admin,
        latitude=19.0760,
        longitude=72.8777,
    )
    fields.update(overrides)
    return run(_add(User(**fields)))


def make_property(owner, status=PropertyStatus.APPROVED, type=TransactionType.RENTAL, **overrides):
    fields = dict(
        owner_id=owner.id,
        category=PropertyCategory.RESIDENTIAL,
        type=type,
        status=status,
        building_or_society="Sea View CHS",
        road_or_location="Linking Road",
        station="Bandra",
        sub_location="Pali Hill",
        property_type="2 BHK",
        latitude=19.0596,
        longitude=72.8295,
    )
    if type == TransactionType.RENTAL:
        fields.update(rent=45000, deposit=200000, furnishing=Furnishing.SEMIFURNISHED)
    elif type == TransactionType.RESALE:
        fields.update(expected_price=25000000, floor_no="7", flat_no="702")
    else:
        fields.update(possession_date=date.today() + timedelta(days=365), total_package=18000000)
    fields.update(overrides)
    return run(_add(Property(**fields)))


def make_subscription(broker, status=SubscriptionStatus.ACTIVE,
                      payment_status=SubscriptionPaymentStatus.COMPLETED,
                      end_date=None, locations=None):
    now = utcnow()
    return run(_add(Subscription(
        broker_id=broker.id,
        locations=locations if locations is not None else [
            {"name": "Bandra", "latitude": 19.0596, "longitude": 72.8295, "radius": 5000, "price": 999},
        ],
        status=status,
        payment_status=payment_status,
        start_date=now - timedelta(days=1),
        end_date=end_date or now + timedelta(days=29),
        payment_history=[],
    )))


def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture
def broker():
    return make_user()


@pytest.fixture
def admin():
    return make_user(email="admin@example.com", is_admin=True, full_name="Admin")


@pytest.fixture
def subscribed_broker(broker):
    make_subscription(broker)
    return broker
