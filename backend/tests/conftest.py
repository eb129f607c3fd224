"""
Test configuration and fixtures.
Uses an in-memory SQLite database (aiosqlite) and an in-process fake of
the S3 API behind the real R2Client.
"""
import os
import uuid as uuid_module

# Set test environment before any imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ENVIRONMENT"] = "test"
os.environ["VERIFY_UPLOADS"] = "true"

import pytest
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncGenerator, Dict, Optional

from botocore.exceptions import ClientError
from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from app.config import StorageConfig
from app.models.base import Base
from app.models.document import Document
from app.models.organization import Organization, OrganizationStatus
from app.models.photo import Photo
from app.models.user import User, UserRole, AccountType
from app.storage.r2_client import R2Client


TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

TEST_STORAGE_CONFIG = StorageConfig(
    endpoint="https://account.r2.cloudflarestorage.com",
    bucket="portal-test",
    access_key="test-access",
    secret_key="test-secret",
    public_url="https://assets.example.com",
)


class FakeS3:
    """
    Minimal stand-in for a boto3 S3 client.

    Objects "uploaded" with put() answer head_object; everything else gets
    a 404 ClientError like the real API.
    """

    def __init__(self):
        self.objects: Dict[str, dict] = {}
        self.deleted: list = []
        self.fail_deletes = False
        self.fail_presign = False

    def put(self, key: str, size: int = 1024, content_type: Optional[str] = "image/jpeg"):
        self.objects[key] = {"ContentLength": size, "ContentType": content_type}

    def generate_presigned_url(self, ClientMethod, Params, ExpiresIn):
        if self.fail_presign:
            raise ClientError({"Error": {"Code": "500", "Message": "boom"}}, "GeneratePresignedUrl")
        return (
            f"https://account.r2.cloudflarestorage.com/{Params['Bucket']}/{Params['Key']}"
            f"?X-Amz-Expires={ExpiresIn}&X-Amz-Signature=test"
        )

    def head_object(self, Bucket, Key):
        if Key not in self.objects:
            raise ClientError({"Error": {"Code": "404", "Message": "Not Found"}}, "HeadObject")
        return dict(self.objects[Key])

    def delete_object(self, Bucket, Key):
        if self.fail_deletes:
            raise ClientError({"Error": {"Code": "503", "Message": "Service Unavailable"}}, "DeleteObject")
        self.objects.pop(Key, None)
        self.deleted.append(Key)
        return {}


@pytest.fixture
def fake_s3() -> FakeS3:
    return FakeS3()


@pytest.fixture
def storage(fake_s3: FakeS3) -> R2Client:
    """Real R2Client wired to the in-process fake."""
    return R2Client(TEST_STORAGE_CONFIG, client=fake_s3)


@pytest.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create database session for testing."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_maker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )

    async with session_maker() as session:
        yield session

    await engine.dispose()


async def _create_org(db: AsyncSession, name: str) -> Organization:
    org = Organization(
        id=str(uuid_module.uuid4()),
        name=name,
        slug=f"{name.lower().replace(' ', '-')}-{uuid_module.uuid4().hex[:6]}",
        status=OrganizationStatus.ACTIVE.value,
    )
    db.add(org)
    await db.commit()
    await db.refresh(org)
    return org


async def _create_user(
    db: AsyncSession,
    label: str,
    organization: Optional[Organization],
    role: str = UserRole.CLIENT.value,
    account_type: str = AccountType.TEAM_MEMBER.value,
) -> User:
    user = User(
        id=str(uuid_module.uuid4()),
        firebase_uid=f"firebase-{label}-{uuid_module.uuid4().hex[:8]}",
        email=f"{label}@example.com",
        name=label.title(),
        role=role,
        account_type=account_type,
        organization_id=organization.id if organization else None,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


@pytest.fixture
async def org(db_session: AsyncSession) -> Organization:
    return await _create_org(db_session, "Acme Fitness")


@pytest.fixture
async def other_org(db_session: AsyncSession) -> Organization:
    return await _create_org(db_session, "Globex")


@pytest.fixture
async def admin_user(db_session: AsyncSession, org: Organization) -> User:
    return await _create_user(db_session, "admin", org, role=UserRole.ADMIN.value)


@pytest.fixture
async def staff_user(db_session: AsyncSession, org: Organization) -> User:
    return await _create_user(db_session, "staff", org, role=UserRole.STAFF.value)


@pytest.fixture
async def team_lead(db_session: AsyncSession, org: Organization) -> User:
    return await _create_user(db_session, "lead", org, account_type=AccountType.TEAM_LEAD.value)


@pytest.fixture
async def member(db_session: AsyncSession, org: Organization) -> User:
    return await _create_user(db_session, "member", org)


@pytest.fixture
async def other_member(db_session: AsyncSession, other_org: Organization) -> User:
    return await _create_user(db_session, "outsider", other_org)


@pytest.fixture
async def loner(db_session: AsyncSession) -> User:
    """Client without an organization."""
    return await _create_user(db_session, "loner", None)


@pytest.fixture
def make_photo(db_session: AsyncSession):
    """Factory inserting a photo row directly."""
    async def _make_photo(
        uploader: User,
        visibility: Optional[str] = "all",
        created_at: Optional[datetime] = None,
        file_name: str = "photo.jpg",
    ) -> Photo:
        photo_id = str(uuid_module.uuid4())
        prefix = f"org-{uploader.organization_id}" if uploader.organization_id else "users"
        photo = Photo(
            id=photo_id,
            organization_id=uploader.organization_id,
            uploaded_by=uploader.id,
            file_key=f"{prefix}/uncategorized/{uploader.id}-{photo_id}-{file_name}",
            file_url=f"https://assets.example.com/{photo_id}",
            file_name=file_name,
            file_size=1024,
            mime_type="image/jpeg",
            visibility=visibility,
            created_at=created_at or datetime.now(timezone.utc),
        )
        db_session.add(photo)
        await db_session.commit()
        await db_session.refresh(photo)
        return photo
    return _make_photo


@pytest.fixture
def make_document(db_session: AsyncSession):
    """Factory inserting a document row directly."""
    async def _make_document(
        uploader: User,
        document_type: Optional[str] = "other",
        visibility: Optional[str] = None,
        name: str = "doc.pdf",
        created_at: Optional[datetime] = None,
    ) -> Document:
        document_id = str(uuid_module.uuid4())
        prefix = f"org-{uploader.organization_id}" if uploader.organization_id else "users"
        document = Document(
            id=document_id,
            organization_id=uploader.organization_id,
            uploaded_by=uploader.id,
            name=name,
            type=document_type,
            file_key=f"{prefix}/documents/{uploader.id}-{document_id}-{name}",
            file_url=f"https://assets.example.com/{document_id}",
            file_size=2048,
            mime_type="application/pdf",
            visibility=visibility,
            created_at=created_at or datetime.now(timezone.utc),
        )
        db_session.add(document)
        await db_session.commit()
        await db_session.refresh(document)
        return document
    return _make_document


def get_test_app(db_session: AsyncSession, user: Optional[User], storage: R2Client) -> FastAPI:
    """Create a test FastAPI app with overridden dependencies."""
    from app.main import app
    from app.database import get_db
    from app.auth.dependencies import get_current_user
    from app.storage.r2_client import get_r2_client

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_r2_client] = lambda: storage

    if user is not None:
        async def override_get_current_user():
            return user
        app.dependency_overrides[get_current_user] = override_get_current_user

    return app


@pytest.fixture
def client_for(db_session: AsyncSession, storage: R2Client):
    """
    Async HTTP client acting as the given user (None = no credentials).

    Usage:
        async with client_for(member) as client: ...
    """
    @asynccontextmanager
    async def _client(user: Optional[User]):
        app = get_test_app(db_session, user, storage)
        transport = ASGITransport(app=app)
        try:
            async with AsyncClient(transport=transport, base_url="http://test") as ac:
                yield ac
        finally:
            # Clean up overrides
            app.dependency_overrides.clear()
    return _client
