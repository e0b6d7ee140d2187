"""
Unit test fixtures. Fakes only: no network, no real model. DB-backed units use
the in-memory db_session from the root conftest.
"""
import pytest


@pytest.fixture
def tutor_service(db_session, reasoning):
    from learnai.services.tutor_service import TutorService

    return TutorService(db_session, reasoning, topic_max_length=100, write_attempts=3)
