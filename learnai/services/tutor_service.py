"""
AI tutor session manager: one conversational turn per chat request.

A turn loads (or starts) the caller's session, appends the user message,
asks the reasoning service for a reply with fresh learner context, appends
the reply and persists both turns. All state round-trips through the DB;
nothing about a conversation is held in memory between requests.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy.orm import Session as DBSession

from learnai.errors import NotFoundError
from learnai.models.models import User
from learnai.models.tutor_session import TutorSession
from learnai.schemas.tutor_schemas import (
    ChatTurnResult,
    CourseProgressSummary,
    Role,
    Turn,
    UserContext,
)
from learnai.services import storage
from learnai.services.reasoning_service import ReasoningService
from learnai.utils.logger import configure_logging

logger = configure_logging()


def parse_transcript(records: Optional[list]) -> list[Turn]:
    return [Turn.model_validate(r) for r in (records or [])]


def build_user_context(db: DBSession, user: User) -> UserContext:
    """Skill level and per-course progress, read from the store on every call."""
    enrolments = storage.get_user_courses(db, user.id)
    return UserContext(
        skill_level=user.skill_level or "Beginner",
        learning_progress=[
            CourseProgressSummary(
                course_id=uc.course_id,
                title=uc.course.title if uc.course is not None else "",
                progress=float(uc.progress or 0.0),
                is_completed=bool(uc.is_completed),
            )
            for uc in enrolments
        ],
    )


class TutorService:
    """Service for AI tutor chat turns and session listing."""

    def __init__(
        self,
        db: DBSession,
        reasoning: ReasoningService,
        *,
        topic_max_length: int = 100,
        write_attempts: int = 3,
    ):
        self.db = db
        self.reasoning = reasoning
        self.topic_max_length = topic_max_length
        self.write_attempts = write_attempts

    def list_sessions(self, user_id: str) -> list[TutorSession]:
        """Caller's sessions, most recently updated first."""
        return storage.list_tutor_sessions(self.db, user_id)

    def _resolve_session(self, user_id: str, session_id: Optional[str]) -> Optional[TutorSession]:
        if not session_id:
            return None
        session = storage.get_tutor_session(self.db, session_id, user_id)
        if session is None:
            # Unknown or foreign ids start a fresh session rather than erroring.
            logger.info("tutor session not found for user; starting new session_id=%s user_id=%s", session_id, user_id)
        return session

    async def handle_chat_turn(self, user_id: str, message: str, session_id: Optional[str] = None) -> ChatTurnResult:
        """
        Run one tutor turn.

        Raises NotFoundError when the user has no profile. Reasoning failures do
        not raise: the caller gets a fallback reply and nothing is persisted, so
        resubmitting is indistinguishable from a first attempt.
        """
        user = storage.get_user(self.db, user_id)
        if user is None:
            raise NotFoundError("User not found")

        session = self._resolve_session(user_id, session_id)
        prior = parse_transcript(session.messages) if session is not None else []
        user_turn = Turn(role=Role.USER, content=message)

        user_context = build_user_context(self.db, user)
        reply = await self.reasoning.tutor_reply([*prior, user_turn], user_context)

        if reply.degraded:
            logger.warning("tutor turn degraded; session left unchanged user_id=%s session_id=%s", user_id, session_id)
            return ChatTurnResult(
                response=reply.content,
                session_id=session.id if session is not None else None,
                degraded=True,
            )

        assistant_turn = Turn(role=Role.ASSISTANT, content=reply.content)
        if session is not None:
            session = storage.append_tutor_turns(
                self.db,
                session,
                [user_turn, assistant_turn],
                max_attempts=self.write_attempts,
            )
        else:
            session = storage.create_tutor_session(
                self.db,
                user_id,
                topic=message[: self.topic_max_length],
                turns=[user_turn, assistant_turn],
            )
            logger.info("tutor session created session_id=%s user_id=%s", session.id, user_id)

        return ChatTurnResult(response=reply.content, session_id=session.id)
