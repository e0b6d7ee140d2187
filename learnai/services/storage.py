"""
Persistence collaborator: point reads and writes against the relational store.
Services call these; routes do not touch the ORM directly.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional
from uuid import uuid4

from sqlalchemy.orm import Session, joinedload
from sqlalchemy.orm.exc import StaleDataError

from learnai.errors import SessionWriteConflictError
from learnai.models.models import Assessment, Recommendation, User, UserCourse
from learnai.models.tutor_session import TutorSession
from learnai.schemas.auth_schemas import AuthenticatedUser
from learnai.schemas.insight_schemas import RecommendationItem
from learnai.schemas.tutor_schemas import Turn
from learnai.utils.logger import configure_logging

logger = configure_logging()


# ---- users -------------------------------------------------------------

def get_user(db: Session, user_id: str) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def upsert_user(db: Session, identity: AuthenticatedUser) -> User:
    """Profile for an authenticated identity, created from its token claims on first use."""
    user = get_user(db, identity.id)
    if user is not None:
        return user
    meta = identity.user_metadata or {}
    user = User(
        id=identity.id,
        email=identity.email,
        first_name=meta.get("first_name"),
        last_name=meta.get("last_name"),
        profile_image_url=meta.get("avatar_url"),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("user profile created user_id=%s", user.id)
    return user


# ---- courses, assessments ---------------------------------------------

def get_user_courses(db: Session, user_id: str) -> list[UserCourse]:
    return (
        db.query(UserCourse)
        .options(joinedload(UserCourse.course))
        .filter(UserCourse.user_id == user_id)
        .order_by(UserCourse.last_accessed_at.desc())
        .all()
    )


def get_user_assessments(db: Session, user_id: str) -> list[Assessment]:
    return (
        db.query(Assessment)
        .filter(Assessment.user_id == user_id)
        .order_by(Assessment.due_date.asc())
        .all()
    )


# ---- recommendations ---------------------------------------------------

def get_user_recommendations(db: Session, user_id: str) -> list[Recommendation]:
    return (
        db.query(Recommendation)
        .filter(Recommendation.user_id == user_id)
        .order_by(Recommendation.priority.desc(), Recommendation.created_at.desc())
        .all()
    )


def create_recommendations(db: Session, user_id: str, items: Iterable[RecommendationItem]) -> list[Recommendation]:
    rows = [
        Recommendation(
            user_id=user_id,
            title=item.title,
            description=item.description,
            reason=item.reason,
            priority=min(5, max(1, item.priority)),
            estimated_duration=item.estimated_duration,
        )
        for item in items
    ]
    db.add_all(rows)
    db.commit()
    for row in rows:
        db.refresh(row)
    return rows


# ---- tutor sessions ----------------------------------------------------

def list_tutor_sessions(db: Session, user_id: str) -> list[TutorSession]:
    return (
        db.query(TutorSession)
        .filter(TutorSession.user_id == user_id)
        .order_by(TutorSession.updated_at.desc())
        .all()
    )


def get_tutor_session(db: Session, session_id: str, user_id: str) -> Optional[TutorSession]:
    """Keyed lookup; a session owned by someone else is indistinguishable from a missing one."""
    return (
        db.query(TutorSession)
        .filter(TutorSession.id == session_id, TutorSession.user_id == user_id)
        .first()
    )


def create_tutor_session(db: Session, user_id: str, topic: str, turns: list[Turn]) -> TutorSession:
    now = datetime.utcnow()
    session = TutorSession(
        id=str(uuid4()),
        user_id=user_id,
        messages=[t.to_record() for t in turns],
        topic=topic,
        created_at=now,
        updated_at=now,
    )
    db.add(session)
    db.commit()
    db.refresh(session)
    return session


def append_tutor_turns(
    db: Session,
    session: TutorSession,
    turns: list[Turn],
    *,
    max_attempts: int = 3,
) -> TutorSession:
    """
    Append turns to a session under optimistic concurrency.

    The UPDATE is guarded by the version read with `session`. If another writer
    got there first, reload the row and re-append onto its transcript, so
    concurrent turns are kept rather than overwritten.
    """
    session_id, user_id = session.id, session.user_id
    records = [t.to_record() for t in turns]
    for attempt in range(1, max_attempts + 1):
        # Assign a new list: in-place mutation of a JSON column is not tracked.
        session.messages = [*(session.messages or []), *records]
        session.updated_at = datetime.utcnow()
        try:
            db.commit()
        except StaleDataError:
            db.rollback()
            logger.warning("tutor session write conflict session_id=%s attempt=%d", session_id, attempt)
            reloaded = get_tutor_session(db, session_id, user_id)
            if reloaded is None:
                raise SessionWriteConflictError(f"Tutor session {session_id} disappeared during write")
            session = reloaded
            continue
        db.refresh(session)
        return session
    raise SessionWriteConflictError(f"Tutor session {session_id} kept conflicting after {max_attempts} attempts")
