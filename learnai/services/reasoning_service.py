"""
Reasoning service adapter: turns internal (system prompt, transcript) pairs into
calls on a ReasoningClient and shapes the answers.

Nothing raised by the provider escapes this module. Free-form tutoring degrades
to a fixed apology; structured calls degrade to their documented default shape.
"""

from __future__ import annotations

import json
from typing import Optional, Sequence, Type, TypeVar

from pydantic import BaseModel, ValidationError

from infra.llm.base import ChatMessage, CompletionOptions, ReasoningClient
from learnai.errors import UpstreamServiceError
from learnai.prompt_builders import (
    build_learning_path_prompts,
    build_progress_analysis_prompts,
    build_recommendation_prompts,
    build_tutor_system_prompt,
)
from learnai.schemas.insight_schemas import LearningPathSuggestion, ProgressAnalysis, RecommendationSet
from learnai.schemas.tutor_schemas import Turn, TutorReply, UserContext
from learnai.utils.logger import configure_logging, log_request
from learnai.utils.token_budget import bound_transcript

logger = configure_logging()

T = TypeVar("T", bound=BaseModel)

FALLBACK_PROVIDER_ERROR = "I'm experiencing some technical difficulties. Please try again later."
FALLBACK_EMPTY_REPLY = "I'm sorry, I couldn't process your request right now."


class ReasoningService:
    def __init__(
        self,
        client: ReasoningClient,
        *,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        history_token_budget: int = 3000,
    ):
        self.client = client
        self.model = model
        self.timeout = timeout
        self.history_token_budget = history_token_budget

    def _options(self, json_mode: bool = False) -> CompletionOptions:
        return CompletionOptions(model=self.model, json_mode=json_mode, timeout=self.timeout)

    async def _call(self, name: str, messages: list[ChatMessage], json_mode: bool = False) -> str:
        """One provider round trip. Any provider failure becomes UpstreamServiceError."""
        try:
            with log_request(logger, name):
                return await self.client.complete(messages, self._options(json_mode))
        except Exception as e:
            raise UpstreamServiceError(f"{name} failed: {e!r}") from e

    async def tutor_reply(self, transcript: Sequence[Turn], user_context: UserContext) -> TutorReply:
        """Next tutor turn for the transcript. Never raises; degraded replies are flagged."""
        window = bound_transcript(transcript, self.history_token_budget)
        if len(window) < len(transcript):
            logger.info("tutor context bounded turns=%d sent=%d", len(transcript), len(window))
        messages = [ChatMessage(role="system", content=build_tutor_system_prompt(user_context))]
        messages.extend(ChatMessage(role=turn.role.value, content=turn.content) for turn in window)

        try:
            content = await self._call("tutor_reply", messages)
        except UpstreamServiceError:
            logger.exception("tutor reply failed; returning fallback")
            return TutorReply(content=FALLBACK_PROVIDER_ERROR, degraded=True)

        content = (content or "").strip()
        if not content:
            logger.warning("tutor reply was empty; returning fallback")
            return TutorReply(content=FALLBACK_EMPTY_REPLY, degraded=True)
        return TutorReply(content=content)

    async def _structured(self, name: str, system_prompt: str, user_prompt: str, schema: Type[T]) -> T:
        messages = [
            ChatMessage(role="system", content=system_prompt),
            ChatMessage(role="user", content=user_prompt),
        ]
        try:
            raw = await self._call(name, messages, json_mode=True)
        except UpstreamServiceError:
            logger.exception("%s failed; returning default", name)
            return schema()
        return parse_structured(raw, schema, name=name)

    async def recommend_courses(
        self,
        skill_level: str,
        user_progress: list[dict],
        completed_courses: list[dict],
    ) -> RecommendationSet:
        system_prompt, user_prompt = build_recommendation_prompts(skill_level, user_progress, completed_courses)
        return await self._structured("recommend_courses", system_prompt, user_prompt, RecommendationSet)

    async def suggest_learning_path(self, goals: list[str], skill_level: str, hours_per_week: int) -> LearningPathSuggestion:
        system_prompt, user_prompt = build_learning_path_prompts(goals, skill_level, hours_per_week)
        return await self._structured("suggest_learning_path", system_prompt, user_prompt, LearningPathSuggestion)

    async def analyze_progress(self, progress_data: dict, assessment_results: list[dict]) -> ProgressAnalysis:
        system_prompt, user_prompt = build_progress_analysis_prompts(progress_data, assessment_results)
        return await self._structured("analyze_progress", system_prompt, user_prompt, ProgressAnalysis)


def parse_structured(raw: Optional[str], schema: Type[T], *, name: str = "structured") -> T:
    """
    Parse a model's JSON payload into `schema`, or return `schema()` (its
    documented default) when the payload is empty, not JSON, or the wrong shape.
    """
    text = (raw or "").strip()
    if not text:
        logger.warning("%s returned empty content; using default", name)
        return schema()
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        logger.warning("%s returned non-JSON content (%s); using default", name, e)
        return schema()
    if not isinstance(data, dict):
        logger.warning("%s returned %s instead of an object; using default", name, type(data).__name__)
        return schema()
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        logger.warning("%s returned an unexpected shape (%d errors); using default", name, e.error_count())
        return schema()
