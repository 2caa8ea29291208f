"""Pytest configuration and fixtures for backend tests."""

from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

from cardio_risk.api.risk_scores import get_score_store
from cardio_risk.main import app
from cardio_risk.schemas.base import RiskCategory
from cardio_risk.services.cardiology_calculators import reset_cardiology_risk_service
from cardio_risk.services.risk_models import RiskScoreResult
from cardio_risk.services.score_store import InMemoryScoreStore, ScoreStore, ScoreStoreError


class FailingScoreStore(ScoreStore):
    """Store whose every operation fails, for persistence-failure paths."""

    def save_score(self, patient_id, organization_id, score_type, result, calculated_by) -> str:
        raise ScoreStoreError("database unavailable")

    def get_history(self, patient_id, organization_id, limit=10, score_type=None):
        raise ScoreStoreError("database unavailable")


@pytest.fixture(autouse=True)
def fresh_risk_service():
    """Reset the calculator registry singleton around each test."""
    reset_cardiology_risk_service()
    yield
    reset_cardiology_risk_service()


@pytest.fixture
def sample_result() -> RiskScoreResult:
    """A finished HEART-style result."""
    return RiskScoreResult(
        score_name="HEART Score",
        score=7,
        risk_percentage=50.0,
        risk_category=RiskCategory.HIGH,
        interpretation="High risk of major adverse cardiac events",
        recommendations=["Hospital admission required", "Intensive antithrombotic therapy"],
        components={"History": 2, "ECG": 1, "Age": 2, "Risk factors": 1, "Troponin": 1},
    )


@pytest.fixture
def memory_store() -> InMemoryScoreStore:
    """Empty in-memory score store."""
    return InMemoryScoreStore()


@pytest.fixture
def failing_store() -> FailingScoreStore:
    """Score store that raises on every call."""
    return FailingScoreStore()


@pytest.fixture
async def client(memory_store: InMemoryScoreStore) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client backed by the in-memory store.

    This allows testing API endpoints without a database connection.
    """
    app.dependency_overrides[get_score_store] = lambda: memory_store

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    # Clean up overrides
    app.dependency_overrides.clear()


@pytest.fixture
async def failing_client(failing_store: FailingScoreStore) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client whose store always fails."""
    app.dependency_overrides[get_score_store] = lambda: failing_store

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()

