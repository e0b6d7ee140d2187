"""
AI tutor routes: list the caller's sessions and run one chat turn.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session as DBSession

from learnai.bootstrap import get_reasoning_service
from learnai.config import get_db, get_settings
from learnai.schemas.auth_schemas import AuthenticatedUser
from learnai.schemas.tutor_schemas import ChatRequest, ChatResponse, TutorSessionResponse
from learnai.services.reasoning_service import ReasoningService
from learnai.services.tutor_service import TutorService
from learnai.utils.auth import get_current_user
from learnai.utils.rate_limit import ai_rate_limit

tutor_routes = APIRouter()


def get_tutor_service(
    db: DBSession = Depends(get_db),
    reasoning: ReasoningService = Depends(get_reasoning_service),
) -> TutorService:
    settings = get_settings()
    return TutorService(
        db,
        reasoning,
        topic_max_length=settings.TOPIC_MAX_LENGTH,
        write_attempts=settings.SESSION_WRITE_ATTEMPTS,
    )


@tutor_routes.get("/ai-tutor/sessions", response_model=list[TutorSessionResponse])
def list_tutor_sessions(
    current_user: AuthenticatedUser = Depends(get_current_user),
    tutor_service: TutorService = Depends(get_tutor_service),
):
    """Caller's tutor sessions, newest-updated first."""
    return tutor_service.list_sessions(current_user.id)


@tutor_routes.post("/ai-tutor/chat", response_model=ChatResponse)
async def tutor_chat(
    request: ChatRequest,
    current_user: AuthenticatedUser = Depends(ai_rate_limit),
    tutor_service: TutorService = Depends(get_tutor_service),
) -> ChatResponse:
    """
    Send a message to the AI tutor. Starts a new session when `sessionId` is
    absent or does not belong to the caller.
    """
    result = await tutor_service.handle_chat_turn(current_user.id, request.message, request.session_id)
    return ChatResponse(response=result.response, session_id=result.session_id)
