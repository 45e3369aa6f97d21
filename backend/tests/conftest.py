"""Shared fixtures for API, CRUD and view-state tests."""

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from timeline_api.config import settings
from timeline_api.crud.fixtures import load_fixture
from timeline_api.main import app
from timeline_api.models.base import Base
from timeline_api.schemas.fixtures import FixtureSchema

ADMIN_USER = "admin@example.com"


@pytest.fixture
def client() -> TestClient:
    """HTTP client bound to the FastAPI app."""
    return TestClient(app)


@pytest.fixture
def admin_settings(monkeypatch: pytest.MonkeyPatch) -> str:
    """Grant configuration access to ADMIN_USER only."""
    monkeypatch.setattr(settings, "config_admin_users", [ADMIN_USER])
    monkeypatch.setattr(settings, "allow_anonymous_config", False)
    return ADMIN_USER


@pytest_asyncio.fixture
async def session() -> AsyncGenerator[AsyncSession, None]:
    """A session on a fresh in-memory SQLite database."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    maker = async_sessionmaker(engine, expire_on_commit=False)
    async with maker() as db_session:
        yield db_session
    await engine.dispose()


def sample_fixture() -> FixtureSchema:
    """An account with contacts, an opportunity and some field history."""
    return FixtureSchema.model_validate(
        {
            "object_types": [
                {"api_name": "Account", "label": "Account", "icon_name": "standard:account"},
                {"api_name": "Contact", "label": "Contact", "icon_name": "standard:contact"},
                {"api_name": "Opportunity", "label": "Opportunity"},
                {"api_name": "Invoice__c", "label": "Invoice"},
            ],
            "relationships": [
                {"child": "Contact", "parent": "Account", "field": "AccountId"},
                {"child": "Opportunity", "parent": "Account", "field": "AccountId"},
            ],
            "records": [
                {
                    "record_id": "001A",
                    "object_api_name": "Account",
                    "name": "Acme",
                    "created_at": "2024-01-01T09:00:00",
                    "created_by": "Ada",
                },
                {
                    "record_id": "003A",
                    "object_api_name": "Contact",
                    "name": "Grace Hopper",
                    "created_at": "2024-03-01T10:00:00",
                    "created_by": "Ada",
                    "lookups": {"AccountId": "001A"},
                },
                {
                    "record_id": "003B",
                    "object_api_name": "Contact",
                    "name": None,
                    "created_at": "2024-03-05T10:00:00",
                    "created_by": None,
                    "lookups": {"AccountId": "001A"},
                },
                {
                    "record_id": "006A",
                    "object_api_name": "Opportunity",
                    "name": "Big Deal",
                    "created_at": "2024-02-15T12:00:00",
                    "created_by": "Linus",
                    "lookups": {"AccountId": "001A"},
                },
            ],
            "history": [
                {
                    "record_id": "001A",
                    "field_name": "Industry",
                    "field_label": "Industry",
                    "old_value": "Retail",
                    "new_value": "Technology",
                    "changed_by": "Ada",
                    "changed_at": "2024-03-02T08:00:00",
                },
                {
                    "record_id": "003A",
                    "field_name": "Title",
                    "field_label": "Title",
                    "old_value": None,
                    "new_value": "Rear Admiral",
                    "changed_by": "Linus",
                    "changed_at": "2024-03-10T23:59:59",
                },
                {
                    "record_id": "006A",
                    "field_name": "StageName",
                    "field_label": "Stage",
                    "old_value": "Prospecting",
                    "new_value": "Closed Won",
                    "changed_by": "Ada",
                    "changed_at": "2024-03-11T00:00:00",
                },
            ],
            "configurations": [
                {
                    "parent_object_api_name": "Account",
                    "child_object_api_name": "Contact",
                    "child_object_label": "Contact",
                    "relationship_field": "AccountId",
                    "icon_name": "standard:contact",
                },
                {
                    "parent_object_api_name": "Account",
                    "child_object_api_name": "Opportunity",
                    "child_object_label": "Opportunity",
                    "relationship_field": "AccountId",
                    "icon_name": "standard:opportunity",
                    "is_active": False,
                },
            ],
        }
    )


@pytest.fixture
def fixture_data() -> FixtureSchema:
    return sample_fixture()


@pytest_asyncio.fixture
async def seeded_session(
    session: AsyncSession, fixture_data: FixtureSchema
) -> AsyncSession:
    """In-memory database loaded with sample_fixture()."""
    await load_fixture(session, fixture_data)
    return session


