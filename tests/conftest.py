"""
Test configuration and fixtures for the real estate bidding API.
Provides database fixtures, test data factories, and common test utilities.
"""

import os

# Configure the application before it is imported
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("SMTP_HOST", "")

import pytest
import uuid
from decimal import Decimal
from typing import AsyncGenerator, List, Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool
from httpx import AsyncClient, ASGITransport

from app.main import app
from app.database import Base, get_db
from app.models.user import User, UserRole
from app.models.property import Property, PropertyType, PropertyStatus
from app.models.bid import Bid, BidStatus
from app.repositories.user import UserRepository
from app.repositories.property import PropertyRepository
from app.repositories.bid import BidRepository
from app.services.auth import AuthService
from app.services.property import PropertyService
from app.services.bid import BidService
from app.services.admin import AdminService
from app.services.email import EmailService
from app.utils.auth import create_access_token
from app.utils.dependencies import get_email_service
from app.utils.exceptions import EmailDeliveryError

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_PASSWORD = "testpassword123"


@pytest.fixture
async def test_engine():
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False}
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine) -> async_sessionmaker:
    return async_sessionmaker(bind=test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async with session_factory() as session:
        yield session


class FakeEmailService(EmailService):
    """Records outgoing mail instead of talking to SMTP; can be told to fail."""

    def __init__(self, fail: bool = False):
        super().__init__()
        self.fail = fail
        self.sent: List[Tuple[str, str, str]] = []

    async def send_email(self, to: str, subject: str, body: str) -> None:
        if self.fail:
            raise EmailDeliveryError("SMTP server unavailable")
        self.sent.append((to, subject, body))


@pytest.fixture
def email_service() -> FakeEmailService:
    return FakeEmailService()


@pytest.fixture
async def async_client(session_factory, email_service) -> AsyncGenerator[AsyncClient, None]:
    """Async test client; every request gets its own session on the test database."""
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_email_service] = lambda: email_service

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


# Repository fixtures
@pytest.fixture
def user_repository(db_session: AsyncSession) -> UserRepository:
    return UserRepository(db_session)


@pytest.fixture
def property_repository(db_session: AsyncSession) -> PropertyRepository:
    return PropertyRepository(db_session)


@pytest.fixture
def bid_repository(db_session: AsyncSession) -> BidRepository:
    return BidRepository(db_session)


# Service fixtures
@pytest.fixture
def auth_service(db_session: AsyncSession, email_service: FakeEmailService) -> AuthService:
    return AuthService(db_session, email_service=email_service)


@pytest.fixture
def property_service(db_session: AsyncSession) -> PropertyService:
    return PropertyService(db_session)


@pytest.fixture
def bid_service(db_session: AsyncSession) -> BidService:
    return BidService(db_session)


@pytest.fixture
def admin_service(db_session: AsyncSession) -> AdminService:
    return AdminService(db_session)


# Test data factories
class UserFactory:
    """Factory for creating test users."""

    @staticmethod
    def create_user_data(
        email: Optional[str] = None,
        password: str = TEST_PASSWORD,
        name: str = "Test User",
        role: UserRole = UserRole.PROPERTY_SEEKER,
        is_verified: bool = True
    ) -> dict:
        return {
            "email": email or f"user{uuid.uuid4().hex[:8]}@example.com",
            "password": password,
            "name": name,
            "role": role,
            "is_verified": is_verified
        }

    @staticmethod
    async def create_user(
        user_repo: UserRepository,
        email: Optional[str] = None,
        password: str = TEST_PASSWORD,
        name: str = "Test User",
        role: UserRole = UserRole.PROPERTY_SEEKER,
        is_verified: bool = True
    ) -> User:
        """Create a test user in the database."""
        user_data = UserFactory.create_user_data(
            email=email,
            password=password,
            name=name,
            role=role,
            is_verified=is_verified
        )
        return await user_repo.create_user(user_data)


class PropertyFactory:
    """Factory for creating test properties."""

    @staticmethod
    def create_property_data(
        owner_id: uuid.UUID,
        title: str = "Test Property",
        description: str = "A beautiful test property",
        property_type: PropertyType = PropertyType.HOUSE,
        status: PropertyStatus = PropertyStatus.AVAILABLE,
        price: Decimal = Decimal("50000.00"),
        city: str = "Accra",
        state: str = "Greater Accra",
        features: Optional[dict] = None
    ) -> dict:
        return {
            "owner_id": owner_id,
            "title": title,
            "description": description,
            "property_type": property_type,
            "status": status,
            "price": price,
            "address": "12 Oxford Street",
            "city": city,
            "state": state,
            "zip_code": "00233",
            "country": "Ghana",
            "images": [],
            "features": features or {"bedrooms": 3},
        }

    @staticmethod
    async def create_property(
        property_repo: PropertyRepository,
        owner_id: uuid.UUID,
        **overrides
    ) -> Property:
        """Create a test property in the database."""
        data = PropertyFactory.create_property_data(owner_id, **overrides)
        return await property_repo.create(data)


class BidFactory:
    """Factory for creating test bids."""

    @staticmethod
    async def create_bid(
        bid_repo: BidRepository,
        property_id: uuid.UUID,
        bidder_id: uuid.UUID,
        amount: Decimal = Decimal("45000.00"),
        message: Optional[str] = None,
        status: BidStatus = BidStatus.PENDING
    ) -> Bid:
        return await bid_repo.create({
            "property_id": property_id,
            "bidder_id": bidder_id,
            "amount": amount,
            "message": message,
            "status": status,
        })


def auth_headers(user: User) -> dict:
    """Bearer header for a user."""
    token = create_access_token(user_id=user.id, email=user.email, role=user.role)
    return {"Authorization": f"Bearer {token}"}


# Common test fixtures
@pytest.fixture
async def test_owner(user_repository: UserRepository) -> User:
    return await UserFactory.create_user(
        user_repository,
        email="owner@example.com",
        name="Test Owner",
        role=UserRole.PROPERTY_OWNER
    )


@pytest.fixture
async def test_seeker(user_repository: UserRepository) -> User:
    return await UserFactory.create_user(
        user_repository,
        email="seeker@example.com",
        name="Test Seeker",
        role=UserRole.PROPERTY_SEEKER
    )


@pytest.fixture
async def other_seeker(user_repository: UserRepository) -> User:
    return await UserFactory.create_user(
        user_repository,
        email="seeker2@example.com",
        name="Second Seeker",
        role=UserRole.PROPERTY_SEEKER
    )


@pytest.fixture
async def test_admin(user_repository: UserRepository) -> User:
    return await UserFactory.create_user(
        user_repository,
        email="admin@example.com",
        name="Test Admin",
        role=UserRole.ADMIN
    )


@pytest.fixture
async def test_property(property_repository: PropertyRepository, test_owner: User) -> Property:
    return await PropertyFactory.create_property(
        property_repository,
        owner_id=test_owner.id,
        title="House1",
        price=Decimal("50000.00")
    )


@pytest.fixture
async def test_bid(bid_repository: BidRepository, test_property: Property, test_seeker: User) -> Bid:
    return await BidFactory.create_bid(
        bid_repository,
        property_id=test_property.id,
        bidder_id=test_seeker.id,
        amount=Decimal("48000.00"),
        message="Ready to close within a month"
    )
