"""
Test configuration and fixtures for the realty marketplace API.
Provides database fixtures, test data factories, and common test utilities.
"""

import io
import pytest
import uuid
from typing import AsyncGenerator, Dict, List, Optional
from decimal import Decimal
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool
from httpx import AsyncClient, ASGITransport
from PIL import Image

from realty.config import settings
from realty.main import app
from realty.database import Base, get_db
from realty.models.user import User, UserRole
from realty.models.property import Property, PropertyStatus
from realty.repositories.user import UserRepository
from realty.repositories.property import PropertyRepository
from realty.services.auth import AuthService
from realty.services.notification import NotificationService
from realty.utils.auth import create_access_token
from realty.utils.file_utils import FileStorage


TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture(autouse=True)
def upload_dir(tmp_path, monkeypatch):
    """Keep uploaded files inside the test's temporary directory."""
    directory = tmp_path / "uploads"
    directory.mkdir()
    monkeypatch.setattr(settings, "upload_dir", str(directory))
    return directory


@pytest.fixture
async def engine():
    """Fresh in-memory database per test."""
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
async def db_session(engine) -> AsyncGenerator[AsyncSession, None]:
    session_factory = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        try:
            yield session
        finally:
            await session.rollback()


@pytest.fixture
async def async_client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Async test client sharing the test database session."""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

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
def auth_service(db_session: AsyncSession) -> AuthService:
    return AuthService(db_session)


@pytest.fixture
def storage(upload_dir) -> FileStorage:
    return FileStorage(base_dir=str(upload_dir))


class RecordingSender:
    """Collects outgoing mail instead of talking to an SMTP server."""

    def __init__(self):
        self.sent: List[Dict[str, str]] = []

    def __call__(self, to_email: str, subject: str, text: str) -> None:
        self.sent.append({"to": to_email, "subject": subject, "text": text})


@pytest.fixture
def mail_outbox(monkeypatch) -> RecordingSender:
    """Enable mail settings and capture what would be sent."""
    monkeypatch.setattr(settings, "mail_host", "smtp.test")
    monkeypatch.setattr(settings, "mail_user", "mailer@test.com")
    monkeypatch.setattr(settings, "admin_email", "office@test.com")
    return RecordingSender()


@pytest.fixture
def notifier(mail_outbox: RecordingSender) -> NotificationService:
    return NotificationService(sender=mail_outbox)


# Test data factories
class UserFactory:
    """Factory for creating test users."""

    @staticmethod
    async def create_user(
        user_repo: UserRepository,
        email: Optional[str] = None,
        password: str = "testpassword123",
        full_name: str = "Test User",
        role: UserRole = UserRole.SELLER,
        is_active: bool = True,
        is_deleted: bool = False,
        **profile
    ) -> User:
        return await user_repo.create_user({
            "email": email or f"test{uuid.uuid4().hex[:8]}@example.com",
            "password": password,
            "full_name": full_name,
            "role": role,
            "is_active": is_active,
            "is_deleted": is_deleted,
            **profile,
        })


class PropertyFactory:
    """Factory for creating test properties."""

    @staticmethod
    async def create_property(
        property_repo: PropertyRepository,
        seller_id: Optional[uuid.UUID],
        title: str = "Test Property",
        price: Decimal = Decimal("250000.00"),
        rooms: int = 3,
        city: str = "Lisbon",
        country: str = "Portugal",
        zip: str = "1100-001",
        property_type: str = "apartment",
        status: PropertyStatus = PropertyStatus.ACTIVE,
        **fields
    ) -> Property:
        property_obj = Property(
            title=title,
            price=price,
            rooms=rooms,
            city=city,
            country=country,
            zip=zip,
            property_type=property_type,
            seller_id=seller_id,
            submitted_by_id=seller_id,
            status=status,
            **fields
        )
        if status == PropertyStatus.ACTIVE:
            property_obj.approve()
        return await property_repo.create_property(property_obj)


# Common test fixtures
@pytest.fixture
async def test_admin(user_repository: UserRepository) -> User:
    return await UserFactory.create_user(
        user_repository,
        email="admin@test.com",
        full_name="Test Admin",
        role=UserRole.ADMIN
    )


@pytest.fixture
async def test_seller(user_repository: UserRepository) -> User:
    return await UserFactory.create_user(
        user_repository,
        email="seller@test.com",
        full_name="Test Seller",
        company="Acme Homes"
    )


@pytest.fixture
async def other_seller(user_repository: UserRepository) -> User:
    return await UserFactory.create_user(
        user_repository,
        email="other@test.com",
        full_name="Other Seller"
    )


@pytest.fixture
async def inactive_seller(user_repository: UserRepository) -> User:
    return await UserFactory.create_user(
        user_repository,
        email="inactive@test.com",
        full_name="Inactive Seller",
        is_active=False
    )


@pytest.fixture
async def test_property(property_repository: PropertyRepository, test_seller: User) -> Property:
    return await PropertyFactory.create_property(
        property_repository,
        seller_id=test_seller.id,
        title="Sunny Apartment"
    )


@pytest.fixture
async def pending_property(property_repository: PropertyRepository, test_seller: User) -> Property:
    return await PropertyFactory.create_property(
        property_repository,
        seller_id=test_seller.id,
        title="Pending House",
        status=PropertyStatus.PENDING
    )


# Utility functions for tests
def auth_headers(user: User) -> Dict[str, str]:
    token = create_access_token(user.id, user.email, user.role)
    return {"Authorization": f"Bearer {token}"}


def make_image_bytes(fmt: str = "PNG", size=(8, 8)) -> bytes:
    """Small valid image generated with Pillow."""
    buffer = io.BytesIO()
    Image.new("RGB", size, color=(200, 120, 40)).save(buffer, format=fmt)
    return buffer.getvalue()


def assert_error_envelope(body: dict, code: Optional[str] = None) -> None:
    """Every error response carries a top-level message and an error object."""
    assert "message" in body
    assert "error" in body
    assert body["error"]["message"] == body["message"]
    assert body["error"]["request_id"]
    if code is not None:
        assert body["error"]["code"] == code
