import json
import os
from datetime import datetime, timedelta, timezone
from typing import Optional

import pytest

TEST_PROVIDERS_JSON = json.dumps(
    [
        {
            "host": "openai",
            "base_url": "https://api.openai.com/v1",
            "api_key_env": "OPENAI_API_KEY",
            "models": [{"id": "gpt-4o-mini", "name": "GPT-4o mini"}],
        }
    ]
)

TEST_DB_URL = os.getenv("TEST_DB_URL", "sqlite://")
os.environ["DATABASE_URL"] = TEST_DB_URL
os.environ.setdefault("OPENAI_API_KEY", "test")

from community_moderation.core.config import settings
from community_moderation.core.providers import reset_provider_registry
from community_moderation.db.init_db import init_db
from community_moderation.services.severity_classifier import SeverityAssessment

settings.DATABASE_URL = TEST_DB_URL


class StubClassifier:
    """Returns a fixed severity label, or raises when ``error`` is set."""

    def __init__(self, severity: Optional[str] = "medium", error: Optional[Exception] = None) -> None:
        self.severity = severity
        self.error = error
        self.calls: list[dict] = []

    async def classify(self, *, report_type, description, content_id):
        self.calls.append({"report_type": report_type, "description": description, "content_id": content_id})
        if self.error is not None:
            raise self.error
        return SeverityAssessment(severity=self.severity, reasoning="stub")


class FakeClock:
    def __init__(self, start: Optional[datetime] = None) -> None:
        self.now = start or datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture(autouse=True, scope="session")
def _configure_providers():
    previous = settings.PROVIDERS
    settings.PROVIDERS = TEST_PROVIDERS_JSON
    reset_provider_registry()
    try:
        yield
    finally:
        settings.PROVIDERS = previous
        reset_provider_registry()


@pytest.fixture(autouse=True, scope="session")
def _configure_test_database():
    init_db(drop_all=True)
    yield
