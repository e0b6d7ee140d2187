"""Unit tests for ReasoningService: tutor replies, fallbacks and structured-output defaults."""
from __future__ import annotations

import json

import pytest

from learnai.schemas.insight_schemas import LearningPathSuggestion, ProgressAnalysis, RecommendationSet
from learnai.schemas.tutor_schemas import CourseProgressSummary, Role, Turn, UserContext
from learnai.services.reasoning_service import (
    FALLBACK_EMPTY_REPLY,
    FALLBACK_PROVIDER_ERROR,
    ReasoningService,
    parse_structured,
)


def _ctx(skill_level="Intermediate"):
    return UserContext(
        skill_level=skill_level,
        learning_progress=[CourseProgressSummary(course_id=7, title="Statistics 101", progress=55.0)],
    )


@pytest.mark.unit
class TestTutorReply:
    @pytest.mark.asyncio
    async def test_system_prompt_carries_persona_and_context(self, reasoning, fake_client):
        fake_client.replies = ["What does variance tell you?"]

        reply = await reasoning.tutor_reply([Turn(role=Role.USER, content="Explain variance")], _ctx())

        assert reply.content == "What does variance tell you?"
        assert not reply.degraded
        system, *rest = fake_client.last_messages
        assert system.role == "system"
        assert "Socratic" in system.content
        assert "Intermediate" in system.content
        assert "Statistics 101" in system.content
        assert [(m.role, m.content) for m in rest] == [("user", "Explain variance")]

    @pytest.mark.asyncio
    async def test_passes_model_and_timeout(self, reasoning, fake_client):
        await reasoning.tutor_reply([Turn(role=Role.USER, content="hi")], _ctx())
        _, options = fake_client.calls[-1]
        assert options.model == "test-model"
        assert options.timeout == 5.0
        assert options.json_mode is False

    @pytest.mark.asyncio
    async def test_reply_is_stripped(self, reasoning, fake_client):
        fake_client.replies = ["  Think about the base case.\n"]
        reply = await reasoning.tutor_reply([Turn(role=Role.USER, content="recursion?")], _ctx())
        assert reply.content == "Think about the base case."

    @pytest.mark.asyncio
    async def test_provider_error_returns_fallback(self, reasoning, fake_client):
        fake_client.error = RuntimeError("connection refused")
        reply = await reasoning.tutor_reply([Turn(role=Role.USER, content="hi")], _ctx())
        assert reply.content == FALLBACK_PROVIDER_ERROR
        assert reply.degraded

    @pytest.mark.asyncio
    async def test_timeout_returns_fallback(self, reasoning, fake_client):
        fake_client.error = TimeoutError("LLM call timed out after 5.0s")
        reply = await reasoning.tutor_reply([Turn(role=Role.USER, content="hi")], _ctx())
        assert reply.content == FALLBACK_PROVIDER_ERROR
        assert reply.degraded

    @pytest.mark.asyncio
    async def test_empty_reply_returns_fallback(self, reasoning, fake_client):
        fake_client.replies = [""]
        reply = await reasoning.tutor_reply([Turn(role=Role.USER, content="hi")], _ctx())
        assert reply.content == FALLBACK_EMPTY_REPLY
        assert reply.degraded

    @pytest.mark.asyncio
    async def test_long_transcript_is_bounded_to_recent_turns(self, fake_client):
        service = ReasoningService(fake_client, model="m", timeout=1.0, history_token_budget=60)
        long_turn = " ".join(["word"] * 20)
        transcript = [
            Turn(role=Role.USER if i % 2 == 0 else Role.ASSISTANT, content=f"{i} {long_turn}") for i in range(10)
        ]

        await service.tutor_reply(transcript, _ctx())

        sent = fake_client.last_messages[1:]
        assert 0 < len(sent) < len(transcript)
        assert sent[-1].content == transcript[-1].content
        assert [m.content for m in sent] == [t.content for t in transcript[-len(sent):]]


@pytest.mark.unit
class TestParseStructured:
    def test_valid_payload(self):
        raw = json.dumps(
            {
                "recommendations": [
                    {"title": "Pandas", "description": "Data frames", "reason": "Next step", "priority": 4, "estimatedDuration": 120}
                ]
            }
        )
        result = parse_structured(raw, RecommendationSet)
        assert len(result.recommendations) == 1
        assert result.recommendations[0].estimated_duration == 120
        assert result.recommendations[0].priority == 4

    @pytest.mark.parametrize("raw", [None, "", "   ", "not json at all", "[1, 2, 3]", '"just a string"'])
    def test_unusable_payload_returns_default(self, raw):
        assert parse_structured(raw, RecommendationSet) == RecommendationSet()

    def test_wrong_shape_returns_default(self):
        raw = json.dumps({"recommendations": [{"description": "missing title"}]})
        assert parse_structured(raw, RecommendationSet).recommendations == []

    def test_learning_path_default(self):
        result = parse_structured("{oops", LearningPathSuggestion)
        assert result.path.title == "Custom Learning Path"
        assert result.path.steps == []
        assert result.path.total_duration == 0

    def test_progress_analysis_default(self):
        result = parse_structured("", ProgressAnalysis)
        assert result.analysis.strengths == []
        assert result.analysis.motivational_message == "Keep up the great work!"

    def test_partial_object_fills_defaults(self):
        result = parse_structured('{"analysis": {"strengths": ["consistency"]}}', ProgressAnalysis)
        assert result.analysis.strengths == ["consistency"]
        assert result.analysis.next_steps == []


@pytest.mark.unit
class TestStructuredCalls:
    @pytest.mark.asyncio
    async def test_recommend_courses_uses_json_mode(self, reasoning, fake_client):
        fake_client.replies = ['{"recommendations": [{"title": "SQL Basics"}]}']

        result = await reasoning.recommend_courses("Beginner", [], [])

        assert [r.title for r in result.recommendations] == ["SQL Basics"]
        messages, options = fake_client.calls[-1]
        assert options.json_mode is True
        assert [m.role for m in messages] == ["system", "user"]
        assert "Beginner" in messages[1].content

    @pytest.mark.asyncio
    async def test_provider_error_returns_default_shape(self, reasoning, fake_client):
        fake_client.error = ConnectionError("down")
        assert await reasoning.recommend_courses("Beginner", [], []) == RecommendationSet()
        assert (await reasoning.suggest_learning_path(["ml"], "Beginner", 5)).path.title == "Custom Learning Path"
        assert (await reasoning.analyze_progress({}, [])).analysis.motivational_message == "Keep up the great work!"

    @pytest.mark.asyncio
    async def test_suggest_learning_path_prompt_mentions_goals(self, reasoning, fake_client):
        fake_client.replies = [
            '{"path": {"title": "Data Path", "steps": [{"title": "Python", "estimatedDuration": 60}], "totalDuration": 60}}'
        ]

        result = await reasoning.suggest_learning_path(["data science", "sql"], "Beginner", 6)

        assert result.path.title == "Data Path"
        assert result.path.steps[0].estimated_duration == 60
        user_prompt = fake_client.last_messages[1].content
        assert "data science, sql" in user_prompt
        assert "6 hours" in user_prompt
