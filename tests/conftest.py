"""Shared fixtures: in-memory database, fake AI provider and an API client."""

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"

import io
import json
from typing import Callable, Optional, Union

import docx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from foloup.core.config import settings
from foloup.core.database import Base, get_db
from foloup.core.security import create_access_token, get_password_hash
from foloup.main import app
from foloup.models import Candidate, Interview, User
from foloup.services.ai_service import (
    AICompletionRequest,
    AICompletionResponse,
    AIService,
    get_ai_service,
)

Reply = Union[str, dict, list, Exception]


class FakeAIService(AIService):
    """Answers completions from ``handler`` instead of a provider."""

    def __init__(self) -> None:
        super().__init__()
        self.handler: Optional[Callable[[AICompletionRequest], Reply]] = None
        self.calls: list[tuple[AICompletionRequest, Optional[str]]] = []

    async def create_completion(
        self, request: AICompletionRequest, provider: Optional[str] = None
    ) -> AICompletionResponse:
        self.calls.append((request, provider))
        reply = self.handler(request) if self.handler else "{}"
        if isinstance(reply, Exception):
            raise reply
        if not isinstance(reply, str):
            reply = json.dumps(reply)
        return AICompletionResponse(content=reply, provider=provider or "openai")


def user_prompt(request: AICompletionRequest) -> str:
    return next((m.content for m in request.messages if m.role == "user"), "")


def is_contact_request(request: AICompletionRequest) -> bool:
    return user_prompt(request).startswith("Act as a resume parser")


@pytest.fixture(autouse=True)
def upload_dir(tmp_path, monkeypatch):
    path = tmp_path / "uploads"
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(path))
    return path


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine.sync_engine, "connect")
    def enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def db(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
def fake_ai() -> FakeAIService:
    return FakeAIService()


@pytest_asyncio.fixture
async def client(session_maker, fake_ai):
    async def override_get_db():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_ai_service] = lambda: fake_ai

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def user(db) -> User:
    user = User(
        email="recruiter@example.com",
        hashed_password=get_password_hash("password123"),
        full_name="Rita Recruiter",
        organization_id="org_acme",
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


@pytest.fixture
def auth_headers(user) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token({'sub': str(user.id)})}"}


@pytest_asyncio.fixture
async def interview(db, user) -> Interview:
    interview = Interview(
        organization_id=user.organization_id,
        user_id=user.id,
        name="Backend Engineer",
        objective="Assess backend engineering skills",
        job_description=(
            "We need a Python engineer with 5+ years of experience, "
            "SQL and Docker. Bachelor in Computer Science."
        ),
        questions=[{"question": "Tell me about a system you designed."}],
        question_count=1,
    )
    db.add(interview)
    await db.commit()
    await db.refresh(interview)
    return interview


@pytest_asyncio.fixture
async def candidate(db, interview) -> Candidate:
    candidate = Candidate(
        organization_id=interview.organization_id,
        interview_id=interview.id,
        name="Jane Doe",
        email="jane.doe@example.com",
        phone="+1 555 0100",
        resume_filename="jane_doe.pdf",
        ats_score=82,
        ats_missing_skills=["Kubernetes"],
        ats_feedback="Strong backend profile.",
    )
    db.add(candidate)
    await db.commit()
    await db.refresh(candidate)
    return candidate


@pytest.fixture
def make_docx() -> Callable[..., bytes]:
    """Build an in-memory .docx whose paragraphs are the given lines."""

    def build(*lines: str) -> bytes:
        document = docx.Document()
        for line in lines:
            document.add_paragraph(line)
        buffer = io.BytesIO()
        document.save(buffer)
        return buffer.getvalue()

    return build
