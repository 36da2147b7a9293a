"""Shared fixtures for the test suite."""

from collections.abc import AsyncGenerator
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from marketflow.api.deps import get_clock, get_drafts, get_records, get_workflows
from marketflow.core.workflow_config import DEFAULT_WORKFLOWS, WorkflowConfig
from marketflow.infra.draft_store import MemoryDraftStore
from marketflow.main import app
from marketflow.schemas.records import PagedItems
from marketflow.services.record_store_client import RecordStoreClient

FIXED_NOW = datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc)


class StepClock:
    """Clock advancing one minute per call, so created dates are ordered."""

    def __init__(self, start: datetime = FIXED_NOW) -> None:
        self.current = start

    def __call__(self) -> datetime:
        now = self.current
        self.current = now + timedelta(minutes=1)
        return now


@pytest.fixture
def clock() -> StepClock:
    return StepClock()


@pytest.fixture
def workflows() -> WorkflowConfig:
    return WorkflowConfig.from_dict(DEFAULT_WORKFLOWS)


@pytest.fixture
def drafts() -> MemoryDraftStore:
    return MemoryDraftStore()


@pytest.fixture
def records() -> MagicMock:
    """Record store client with empty collections."""
    client = MagicMock(spec=RecordStoreClient)
    client.get_all = AsyncMock(return_value=PagedItems(items=[]))
    client.get_by_id = AsyncMock(return_value=None)
    client.find_one = AsyncMock(return_value=None)
    return client


@pytest_asyncio.fixture
async def client(
    drafts: MemoryDraftStore,
    workflows: WorkflowConfig,
    records: MagicMock,
    clock: StepClock,
) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client against the app with in-memory collections."""
    app.dependency_overrides[get_drafts] = lambda: drafts
    app.dependency_overrides[get_workflows] = lambda: workflows
    app.dependency_overrides[get_records] = lambda: records
    app.dependency_overrides[get_clock] = lambda: clock

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


def member_headers(member_id: str, role: str) -> dict[str, str]:
    return {"X-Member-Id": member_id, "X-Member-Role": role}


@pytest.fixture
def farmer_headers() -> dict[str, str]:
    return member_headers("farmer-1", "farmer")


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return member_headers("admin-1", "admin")


@pytest.fixture
def customer_headers() -> dict[str, str]:
    return member_headers("customer-1", "customer")


@pytest.fixture
def agent_headers() -> dict[str, str]:
    return member_headers("agent-1", "delivery_agent")
