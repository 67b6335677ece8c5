"""
Pytest configuration and shared fixtures for all tests.

Every test gets its own in-memory SQLite database, a mocked LLM client and a
mocked file fetcher wired into ServiceClients, so nothing here needs network,
Redis or a real auth provider.
"""

import json
import os
import time
from datetime import timedelta
from unittest.mock import MagicMock

# Keep the module-level Settings() away from a developer's .env
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LLM_API_KEY", "test-api-key-for-testing")

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import update

from backend.app.config import Settings
from backend.app.core.auth import TokenVerifier
from backend.app.core.clients import ServiceClients
from backend.app.core.database import create_db_engine, init_db
from backend.app.core.file_fetcher import ResumeFileFetcher
from backend.app.core.llm_client import LLMClient
from backend.app.core.pdf_parser import ResumeTextExtractor
from backend.app.main import FinPrepApp
from backend.app.models.records import AnalysisJob, utcnow

JWT_SECRET = "test-jwt-secret"
TRIGGER_KEY = "test-trigger-key"
INTERNAL_SECRET = "test-internal-secret"

RESUME_TEXT = (
    "Jane Doe\n"
    "Financial Analyst, Goldman Sachs (2021-2024)\n"
    "- Built three-statement models for 12 mid-cap clients\n"
    "- Reduced month-end close time by 30% through Excel VBA automation\n"
    "Education: BSc Finance, NYU Stern\n"
)

ANALYSIS_RESULT = {
    "overallScore": 78,
    "summary": "Solid analyst resume with quantified achievements.",
    "strengths": ["Quantified impact", "Relevant bulge-bracket experience"],
    "areasForImprovement": ["Add deal experience", "Tighten the education section"],
    "contentQuality": {"score": 80, "feedback": "Clear bullets.", "suggestions": ["Lead with outcomes"]},
    "formatting": {"score": 75, "feedback": "Consistent layout.", "suggestions": []},
    "industryRelevance": {"score": 82, "feedback": "Strong IB relevance.", "suggestions": ["Mention valuation methods"]},
    "impactStatements": {"score": 74, "feedback": "Some bullets lack numbers.", "suggestions": []},
    "suggestedEdits": [
        {
            "original": "Built three-statement models",
            "improved": "Built three-statement models supporting $2B in client financing decisions",
            "explanation": "Tie the work to a dollar outcome.",
        }
    ],
}


def make_token(user_id: str, secret: str = JWT_SECRET, audience: str = "authenticated", expires_in: int = 3600) -> str:
    claims = {"sub": user_id, "aud": audience, "exp": int(time.time()) + expires_in}
    return jwt.encode(claims, secret, algorithm="HS256")


def bearer(user_id: str) -> dict:
    return {"Authorization": f"Bearer {make_token(user_id)}"}


def age_job(engine, job_id: str, minutes: int) -> None:
    """Backdate a job's created_at so ordering tests don't depend on clock resolution."""
    stmt = update(AnalysisJob).where(AnalysisJob.id == job_id).values(created_at=utcnow() - timedelta(minutes=minutes))
    with engine.begin() as conn:
        conn.execute(stmt)


class FakeDispatcher:
    """Records dispatched job ids; raises for ids listed in fail_for."""

    def __init__(self, fail_for=()):
        self.dispatched = []
        self.fail_for = set(fail_for)

    def dispatch(self, job_id: str) -> str:
        if job_id in self.fail_for:
            raise ConnectionError("broker unavailable")
        self.dispatched.append(job_id)
        return f"task-{job_id}"


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture
def settings():
    return Settings(
        DATABASE_URL="sqlite://",
        AUTH_JWT_SECRET=JWT_SECRET,
        JOB_TRIGGER_API_KEY=TRIGGER_KEY,
        INTERNAL_PARSE_SECRET=INTERNAL_SECRET,
        LLM_API_KEY="test-api-key-for-testing",
    )


@pytest.fixture
def llm():
    """LLM client whose replies tests set via llm.complete.return_value."""
    mock = MagicMock(spec=LLMClient)
    mock.complete.return_value = json.dumps(ANALYSIS_RESULT)
    return mock


@pytest.fixture
def fetcher():
    mock = MagicMock(spec=ResumeFileFetcher)
    mock.fetch.return_value = RESUME_TEXT.encode("utf-8")
    return mock


@pytest.fixture
def clients(settings, llm, fetcher):
    engine = create_db_engine(settings.DATABASE_URL)
    init_db(engine)
    c = ServiceClients(
        settings=settings,
        engine=engine,
        llm=llm,
        fetcher=fetcher,
        extractor=ResumeTextExtractor(),
        verifier=TokenVerifier(JWT_SECRET),
    )
    yield c
    engine.dispose()


@pytest.fixture
def dispatcher():
    return FakeDispatcher()


@pytest.fixture
def test_client(settings, clients, dispatcher):
    """
    FastAPI TestClient over an app wired to the test clients and dispatcher.
    Entering the context runs the lifespan, which installs them on app.state.
    """
    app = FinPrepApp(settings=settings, clients=clients, dispatcher=dispatcher).app
    with TestClient(app) as client:
        yield client


@pytest.fixture
def resume(clients):
    """A text resume owned by user-1."""
    return clients.resumes.create("user-1", "jane_doe.txt", "text/plain", "https://files.example.com/jane_doe.txt")
