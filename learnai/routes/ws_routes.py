"""
Real-time AI tutor over WebSocket. Same turn semantics as POST /api/ai-tutor/chat.

Client -> server: {"type": "ai-tutor-message", "message": str, "sessionId"?: str}
Server -> client: {"type": "ai-tutor-response", "response": str, "sessionId": str | null}
                  {"type": "error", "message": str, ...}
"""

import json

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect, status
from pydantic import ValidationError as PydanticValidationError

from learnai.errors import NotFoundError, ValidationError
from learnai.routes.tutor_routes import get_tutor_service
from learnai.schemas.tutor_schemas import ChatRequest
from learnai.services.tutor_service import TutorService
from learnai.utils.auth import get_user_from_websocket
from learnai.utils.common import format_field_errors
from learnai.utils.logger import configure_logging
from learnai.utils.rate_limit import ai_rate_limit_ws

ws_routes = APIRouter()
logger = configure_logging()

MESSAGE_TYPE = "ai-tutor-message"
RESPONSE_TYPE = "ai-tutor-response"


@ws_routes.websocket("/ws")
async def tutor_websocket(
    websocket: WebSocket,
    tutor_service: TutorService = Depends(get_tutor_service),
):
    """
    Auth: ?token= or Authorization: Bearer header. Unauthenticated sockets are
    closed with 1008 before being accepted.
    """
    user = get_user_from_websocket(websocket)
    if user is None:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return
    await websocket.accept()
    logger.info("tutor websocket connected user_id=%s", user.id)
    try:
        while True:
            raw = await websocket.receive_text()
            try:
                data = json.loads(raw)
            except json.JSONDecodeError:
                await websocket.send_json({"type": "error", "message": "Invalid JSON"})
                continue
            if not isinstance(data, dict) or data.get("type") != MESSAGE_TYPE:
                await websocket.send_json({"type": "error", "message": f"Unsupported message type, expected {MESSAGE_TYPE!r}"})
                continue
            try:
                request = ChatRequest.model_validate(data)
            except PydanticValidationError as e:
                error = ValidationError(format_field_errors(e.errors()))
                await websocket.send_json({"type": "error", **error.to_body()})
                continue

            decision = ai_rate_limit_ws(websocket, user.id)
            if not decision.allowed:
                await websocket.send_json({
                    "type": "error",
                    "message": "Too many AI requests, please try again later",
                    "retryAfter": decision.retry_after_seconds,
                })
                continue

            try:
                result = await tutor_service.handle_chat_turn(user.id, request.message, request.session_id)
            except NotFoundError as e:
                await websocket.send_json({"type": "error", "message": e.message})
                continue
            await websocket.send_json({"type": RESPONSE_TYPE, "response": result.response, "sessionId": result.session_id})
    except WebSocketDisconnect:
        logger.info("tutor websocket closed user_id=%s", user.id)
