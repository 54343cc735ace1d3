"""Shared pytest fixtures and configuration."""

import os
import pytest
from unittest.mock import Mock, AsyncMock, MagicMock
from datetime import date
from freezegun import freeze_time

# Set test environment variables
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-key")
os.environ.setdefault("LOG_FORMAT", "text")

from property_wizard.services.draft_store import DraftStore
from property_wizard.services.submission import SubmissionCoordinator

from tests.fixtures.drafts import LANDLORD_ID
from tests.utils.factories import (
    create_identity,
    create_listing_draft,
    create_property_draft,
    create_unit_draft,
)
from tests.utils.helpers import InMemoryRecordStore, build_filled_store


@pytest.fixture
def mock_supabase_client():
    """Mock Supabase client whose table() query chain returns itself."""
    client = MagicMock()
    query = MagicMock()
    for method in ("select", "insert", "update", "eq"):
        getattr(query, method).return_value = query
    query.execute.return_value = MagicMock(data=[])
    client.table.return_value = query
    return client


@pytest.fixture
def property_draft():
    return create_property_draft()


@pytest.fixture
def unit_draft():
    return create_unit_draft()


@pytest.fixture
def listing_draft():
    return create_listing_draft()


@pytest.fixture
def identity():
    return create_identity(LANDLORD_ID)


@pytest.fixture
def record_store():
    return InMemoryRecordStore()


@pytest.fixture
def coordinator(record_store):
    return SubmissionCoordinator(record_store)


@pytest.fixture
def draft_store():
    return DraftStore()


@pytest.fixture
def filled_store():
    """Draft store with a valid property, one unit and one listing."""
    return build_filled_store(units=1, listings=1)


@pytest.fixture
def mock_identity_provider(identity):
    provider = Mock()
    provider.current_identity = AsyncMock(return_value=identity)
    return provider


@pytest.fixture
def freeze_time_fixture():
    """Fixture for freezing time in tests."""
    with freeze_time("2030-03-15 12:00:00") as frozen_time:
        yield frozen_time


@pytest.fixture
def frozen_today(freeze_time_fixture) -> date:
    return date(2030, 3, 15)


@pytest.fixture(scope="function")
def reset_environment(monkeypatch):
    """Reset environment variables for each test."""
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)
