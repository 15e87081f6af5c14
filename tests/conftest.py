"""Pytest configuration and fixtures."""

import os
from unittest.mock import patch

import pytest

from tests.fakes.fake_supabase import FakeSupabase
from tests.fixtures_interviews import seed_all


@pytest.fixture(scope="session", autouse=True)
def setup_test_env():
    """Set up test environment variables."""
    os.environ["SUPABASE_URL"] = "https://test.supabase.co"
    os.environ["SUPABASE_SERVICE_ROLE_KEY"] = "test-key"
    os.environ["INTERVIEW_ENGINE_ENV"] = "test"


@pytest.fixture
def fake_supabase():
    """Seeded in-memory Supabase client wired into the store layer."""
    db = FakeSupabase()
    seed_all(db)
    with patch("interview_engine.db.entities.get_supabase", return_value=db):
        yield db
