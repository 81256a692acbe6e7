# tests/conftest.py
import pytest
from datetime import date
from httpx import AsyncClient
from httpx._transports.asgi import ASGITransport
from botocore.exceptions import ClientError
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from unittest.mock import AsyncMock, MagicMock

from community_registry.core.db import Base
from community_registry.main import app
from community_registry.core.db.session import get_db
from community_registry.core.storage import ObjectStorage, get_storage
from community_registry.api.v1.dependencies.auth import require_admin
from community_registry.api.v1.models.registration import Registration


class DummyAdmin:
    id = "admin-1"
    username = "admin"
    created_at = None


class FakeS3Client:
    """In-memory stand-in for the boto3 S3 client: {bucket: {key: bytes}}."""

    def __init__(self, objects=None):
        self.objects = objects if objects is not None else {}
        self.presigned = []

    def head_bucket(self, Bucket):
        if Bucket not in self.objects:
            raise ClientError({"Error": {"Code": "404", "Message": "Not Found"}}, "HeadBucket")
        return {}

    def head_object(self, Bucket, Key):
        if Key not in self.objects.get(Bucket, {}):
            raise ClientError({"Error": {"Code": "404", "Message": "Not Found"}}, "HeadObject")
        return {}

    def generate_presigned_url(self, ClientMethod, Params, ExpiresIn):
        self.presigned.append((ClientMethod, Params, ExpiresIn))
        return f"https://storage.test/{Params['Bucket']}/{Params['Key']}?X-Amz-Expires={ExpiresIn}"

    def put_object(self, Bucket, Key, Body, ContentType):
        self.objects.setdefault(Bucket, {})[Key] = Body
        return {}


def make_registration(**kwargs) -> Registration:
    return Registration(
        id=kwargs.get("id", "reg-001"),
        serial_number=kwargs.get("serial_number"),
        first_name=kwargs.get("first_name", "Asha"),
        middle_name=kwargs.get("middle_name", "Ramesh"),
        last_name=kwargs.get("last_name", "Patel"),
        name=kwargs.get("name"),
        gender=kwargs.get("gender", "female"),
        marital_status=kwargs.get("marital_status", "unmarried"),
        birthday=kwargs.get("birthday", date(1990, 5, 17)),
        street=kwargs.get("street", "12 Lake Road"),
        city=kwargs.get("city", "Pune"),
        state=kwargs.get("state", "Maharashtra"),
        zip_code=kwargs.get("zip_code", "411001"),
        phone=kwargs.get("phone", "+91 9800000000"),
        relative_phone=kwargs.get("relative_phone"),
        native_place=kwargs.get("native_place", "Surat"),
        photo_bucket=kwargs.get("photo_bucket", "registration-photos"),
        photo_path=kwargs.get("photo_path", "photo.jpg"),
        verified=kwargs.get("verified", False),
    )


async def seed(session: AsyncSession, registrations) -> None:
    session.add_all(list(registrations))
    await session.commit()


@pytest.fixture
async def async_session_maker():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    AsyncSessionMaker = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    yield AsyncSessionMaker
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def db_session(async_session_maker):
    async with async_session_maker() as session:
        yield session


@pytest.fixture
async def mock_db():
    """Mock AsyncSession for database interactions."""
    mock_session = AsyncMock(spec=AsyncSession)
    mock_session.execute = AsyncMock()
    mock_session.commit = AsyncMock()
    mock_session.rollback = AsyncMock()
    mock_session.add = MagicMock()
    mock_session.refresh = AsyncMock()
    return mock_session


@pytest.fixture
def s3_client():
    return FakeS3Client({"registration-photos": {"photo.jpg": b"jpeg-bytes"}})


@pytest.fixture
def fake_storage(s3_client):
    return ObjectStorage(s3_client)


@pytest.fixture
async def anonymous_client(db_session, fake_storage):
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage] = lambda: fake_storage

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
async def async_client(anonymous_client):
    async def override_require_admin():
        return DummyAdmin()

    app.dependency_overrides[require_admin] = override_require_admin
    yield anonymous_client
