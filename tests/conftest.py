"""
Pytest configuration and shared fixtures for the test suite.
Ensures proper Python path, points settings at throwaway resources before any
learnai module is imported, and provides DB, fake reasoning client and token fixtures.
"""
import os
import sys
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path

# Settings are read once at import time; configure them before learnai is imported.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOG_DIR"] = tempfile.mkdtemp(prefix="learnai-test-logs-")
os.environ["AUTH_JWT_SECRET"] = "test-secret-key-for-the-suite"
os.environ["AUTH_JWT_AUDIENCE"] = "authenticated"

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from infra.llm.base import ReasoningClient  # noqa: E402


class FakeReasoningClient(ReasoningClient):
    """
    Scripted ReasoningClient. Pops `replies` in order, then falls back to
    `default_reply`. Set `error` to make every call raise it; `on_complete`
    runs before the reply is produced (used to simulate concurrent writers).
    """

    def __init__(self, replies=None, error=None, default_reply="What do you already know about this topic?"):
        self.replies = list(replies or [])
        self.error = error
        self.default_reply = default_reply
        self.on_complete = None
        self.calls = []

    async def complete(self, messages, options=None):
        self.calls.append((list(messages), options))
        if self.on_complete is not None:
            self.on_complete(messages)
        if self.error is not None:
            raise self.error
        if self.replies:
            return self.replies.pop(0)
        return self.default_reply

    @property
    def last_messages(self):
        return self.calls[-1][0]


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# ----- In-memory DB (shared across threads so TestClient and direct sessions see the same data) -----
@pytest.fixture
def engine():
    from learnai.config import Base
    import learnai.models  # noqa: F401

    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def make_user(db_session):
    """Factory: create a user profile row."""
    from learnai.models.models import User

    def _make_user(user_id="user-1", email=None, skill_level="Beginner", **kwargs):
        user = User(id=user_id, email=email or f"{user_id}@example.com", skill_level=skill_level, **kwargs)
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def enroll(db_session):
    """Factory: enrol a user in a (new) course."""
    from learnai.models.models import Course, UserCourse

    def _enroll(user_id, title="Intro to Machine Learning", progress=0.0, is_completed=False, category="AI"):
        course = Course(title=title, skill_level="Beginner", category=category)
        db_session.add(course)
        db_session.flush()
        uc = UserCourse(user_id=user_id, course_id=course.id, progress=progress, is_completed=is_completed)
        db_session.add(uc)
        db_session.commit()
        return uc

    return _enroll


@pytest.fixture
def fake_client():
    return FakeReasoningClient()


@pytest.fixture
def reasoning(fake_client):
    from learnai.services.reasoning_service import ReasoningService

    return ReasoningService(fake_client, model="test-model", timeout=5.0, history_token_budget=3000)


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def make_token():
    """Factory: sign an access token like the auth provider would."""
    from learnai.schemas.auth_schemas import AuthTokenPayload
    from learnai.utils.jwt import create_access_token

    def _make_token(sub="user-1", email=None, expires_in=timedelta(hours=1), aud="authenticated", user_metadata=None):
        return create_access_token(
            AuthTokenPayload(
                sub=sub,
                email=email or f"{sub}@example.com",
                exp=datetime.now(timezone.utc) + expires_in,
                aud=aud,
                user_metadata=user_metadata,
            )
        )

    return _make_token


@pytest.fixture
def auth_headers(make_token):
    def _auth_headers(sub="user-1", **kwargs):
        return {"Authorization": f"Bearer {make_token(sub=sub, **kwargs)}"}

    return _auth_headers
