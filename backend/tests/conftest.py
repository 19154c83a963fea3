"""
VELONIX registration backend - Test Configuration and Fixtures
"""
import io
import os
import tempfile
from datetime import datetime, timedelta
from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import NullPool
from faker import Faker
from PIL import Image

# Set testing environment (before anything imports velonix.core.config)
_TEST_DIR = tempfile.mkdtemp(prefix="velonix-tests-")
os.environ['ENVIRONMENT'] = 'testing'
os.environ['DATABASE_URL'] = f"sqlite+aiosqlite:///{_TEST_DIR}/test.db"
os.environ['JWT_SECRET_KEY'] = 'test-jwt-secret-key-for-testing'
os.environ['ADMIN_USERNAME'] = 'admin'
os.environ['ADMIN_PASSWORD'] = 'adminpassword123'
os.environ['BCRYPT_ROUNDS'] = '4'
os.environ['UPLOAD_PATH'] = os.path.join(_TEST_DIR, 'uploads')
os.environ['RATE_LIMIT_ENABLED'] = 'false'
os.environ['SMTP_USER'] = ''
os.environ['SMTP_PASSWORD'] = ''
os.environ['LOG_FILE'] = ''

from velonix.main import app
from velonix.api.dependencies import get_dispatcher, get_email_service, get_upload_storage
from velonix.core.config import settings
from velonix.core.database import Base, get_db
from velonix.core.security import get_password_hash, create_access_token
from velonix.models.admin import AdminUser
from velonix.models.registration import Registration, RegistrationStatus
from velonix.services.notification_dispatcher import NotificationDispatcher
from velonix.services.upload_storage import UploadStorage

fake = Faker()

ADMIN_PASSWORD = 'adminpassword123'


def image_bytes(image_format: str = "PNG") -> bytes:
    """A small real image, encoded in the given Pillow format"""
    buffer = io.BytesIO()
    Image.new("RGB", (8, 8), (0, 128, 255)).save(buffer, format=image_format)
    return buffer.getvalue()


PNG_BYTES = image_bytes("PNG")

# Test database setup
test_engine = create_async_engine(os.environ['DATABASE_URL'], echo=False, poolclass=NullPool)
TestSessionLocal = async_sessionmaker(
    bind=test_engine,
    class_=AsyncSession,
    expire_on_commit=False
)


@pytest.fixture(scope='function')
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
def screenshot_bytes() -> bytes:
    return PNG_BYTES


@pytest.fixture
def make_image():
    """image_bytes(format) for tests that need JPEG/GIF/WebP"""
    return image_bytes


@pytest.fixture
def upload_storage(tmp_path) -> UploadStorage:
    return UploadStorage(tmp_path / "uploads", max_size=1024 * 1024)


@pytest.fixture
def dispatcher() -> NotificationDispatcher:
    return NotificationDispatcher(maxsize=10)


@pytest.fixture
def fake_email_service() -> MagicMock:
    """Configured email service whose senders only record calls"""
    service = MagicMock()
    service.is_configured = True
    service.send_registration_confirmation = AsyncMock(return_value=True)
    service.send_admin_alert = AsyncMock(return_value=True)
    service.send_contact_message = AsyncMock(return_value=True)
    return service


@pytest.fixture
async def client(db_session: AsyncSession, dispatcher: NotificationDispatcher) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with database and dispatcher overrides"""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_dispatcher] = lambda: dispatcher

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def with_email(fake_email_service: MagicMock):
    """Route the API through the recording email service"""
    app.dependency_overrides[get_email_service] = lambda: fake_email_service
    yield fake_email_service
    app.dependency_overrides.pop(get_email_service, None)


@pytest.fixture
def with_storage(upload_storage: UploadStorage):
    app.dependency_overrides[get_upload_storage] = lambda: upload_storage
    yield upload_storage
    app.dependency_overrides.pop(get_upload_storage, None)


@pytest.fixture
async def admin_user(db_session: AsyncSession) -> AdminUser:
    """Create the administrator"""
    admin = AdminUser(
        username=settings.ADMIN_USERNAME,
        password_hash=get_password_hash(ADMIN_PASSWORD),
    )
    db_session.add(admin)
    await db_session.commit()
    await db_session.refresh(admin)
    return admin


@pytest.fixture
def admin_auth_headers(admin_user: AdminUser) -> dict:
    """Generate authentication headers for the administrator"""
    token = create_access_token({'sub': str(admin_user.id), 'username': admin_user.username})
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def registration_form() -> dict:
    """Valid form fields as the registration page sends them"""
    return {
        'fullName': fake.name(),
        'collegeName': f"{fake.city()} Institute of Technology",
        'department': 'CSE',
        'year': '3',
        'email': fake.email(),
        'phone': '9876543210',
        'selectedEvents': 'Hackathon, Dance',
        'transactionId': 'TXN123456',
    }


@pytest.fixture
def make_registration(db_session: AsyncSession):
    """Insert a registration row directly; returns an async factory"""
    counter = {'n': 0}

    async def _make(
        selected_events: str = 'Hackathon',
        status: RegistrationStatus = RegistrationStatus.PENDING,
        minutes_ago: int = 0,
        **overrides
    ) -> Registration:
        counter['n'] += 1
        values = {
            'id': f"VEL-TEST{counter['n']:05d}",
            'full_name': fake.name(),
            'college_name': 'Velammal Engineering College',
            'department': 'IT',
            'year': '2',
            'email': fake.email(),
            'phone': '9123456780',
            'selected_events': selected_events,
            'transaction_id': f"UPI{counter['n']:08d}",
            'screenshot_path': '',
            'status': status,
            'timestamp': datetime.utcnow() - timedelta(minutes=minutes_ago),
        }
        values.update(overrides)
        registration = Registration(**values)
        db_session.add(registration)
        await db_session.commit()
        await db_session.refresh(registration)
        return registration

    return _make
