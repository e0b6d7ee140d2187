"""
Integration test fixtures. Overrides get_db and the reasoning service for API
tests, and installs fresh rate limiters on a fake clock for every test.
"""
import pytest


@pytest.fixture
def override_get_db(session_factory):
    def _get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    return _get_db


@pytest.fixture
def app(override_get_db, reasoning, fake_clock):
    from learnai.app import app as fastapi_app
    from learnai.bootstrap import get_reasoning_service
    from learnai.config import get_db, get_settings
    from learnai.utils.rate_limit import SlidingWindowRateLimiter

    settings = get_settings()
    saved = (fastapi_app.state.general_limiter, fastapi_app.state.ai_limiter)
    fastapi_app.state.general_limiter = SlidingWindowRateLimiter(
        settings.GENERAL_RATE_LIMIT, settings.RATE_LIMIT_WINDOW_SECONDS, clock=fake_clock, name="general"
    )
    fastapi_app.state.ai_limiter = SlidingWindowRateLimiter(
        settings.AI_RATE_LIMIT, settings.RATE_LIMIT_WINDOW_SECONDS, clock=fake_clock, name="ai"
    )
    fastapi_app.dependency_overrides[get_db] = override_get_db
    fastapi_app.dependency_overrides[get_reasoning_service] = lambda: reasoning
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()
    fastapi_app.state.general_limiter, fastapi_app.state.ai_limiter = saved


@pytest.fixture
def api_client(app):
    """FastAPI TestClient with in-memory DB, fake reasoning client and fake-clock limiters."""
    from fastapi.testclient import TestClient

    with TestClient(app) as client:
        yield client
