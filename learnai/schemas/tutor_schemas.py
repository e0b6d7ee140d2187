"""
AI tutor schemas: turns, chat request/response, session records, user context.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from learnai.config import get_settings

MESSAGE_MAX_LENGTH = get_settings().MESSAGE_MAX_LENGTH


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class Turn(BaseModel):
    """One role-tagged message in a transcript."""

    model_config = ConfigDict(frozen=True)

    role: Role
    content: str

    def to_record(self) -> dict:
        return {"role": self.role.value, "content": self.content}


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class ChatRequest(CamelModel):
    message: str
    session_id: Optional[str] = None

    @field_validator("message")
    @classmethod
    def _check_message(cls, value: str) -> str:
        value = value.strip()
        if not 1 <= len(value) <= MESSAGE_MAX_LENGTH:
            raise ValueError(f"Message must be between 1 and {MESSAGE_MAX_LENGTH} characters")
        return value


class ChatResponse(CamelModel):
    response: str
    session_id: Optional[str] = None


class TutorSessionResponse(CamelModel):
    id: str
    user_id: str
    messages: list[Turn]
    topic: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class CourseProgressSummary(CamelModel):
    course_id: int
    title: str
    progress: float = 0.0
    is_completed: bool = False


class UserContext(CamelModel):
    """Snapshot of the learner handed to the reasoning service. Built per call, never cached."""

    skill_level: str = "Beginner"
    learning_progress: list[CourseProgressSummary] = Field(default_factory=list)


class TutorReply(BaseModel):
    content: str
    degraded: bool = False


class ChatTurnResult(BaseModel):
    response: str
    session_id: Optional[str] = None
    degraded: bool = False
