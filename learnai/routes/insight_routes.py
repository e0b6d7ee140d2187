"""
Recommendation, learning-path and analytics routes. Everything that calls the
reasoning service sits behind the AI-tier rate limit.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session as DBSession

from learnai.bootstrap import get_reasoning_service
from learnai.config import get_db
from learnai.schemas.auth_schemas import AuthenticatedUser
from learnai.schemas.insight_schemas import (
    AnalyticsResponse,
    LearningPathRequest,
    LearningPathSuggestion,
    RecommendationResponse,
)
from learnai.services.insight_service import InsightService
from learnai.services.reasoning_service import ReasoningService
from learnai.utils.auth import get_current_user
from learnai.utils.rate_limit import ai_rate_limit

insight_routes = APIRouter()


def get_insight_service(
    db: DBSession = Depends(get_db),
    reasoning: ReasoningService = Depends(get_reasoning_service),
) -> InsightService:
    return InsightService(db, reasoning)


@insight_routes.get("/recommendations", response_model=list[RecommendationResponse])
def list_recommendations(
    current_user: AuthenticatedUser = Depends(get_current_user),
    insight_service: InsightService = Depends(get_insight_service),
):
    return insight_service.list_recommendations(current_user.id)


@insight_routes.post("/recommendations/generate", response_model=list[RecommendationResponse])
async def generate_recommendations(
    current_user: AuthenticatedUser = Depends(ai_rate_limit),
    insight_service: InsightService = Depends(get_insight_service),
):
    return await insight_service.generate_recommendations(current_user.id)


@insight_routes.post("/learning-paths/generate", response_model=LearningPathSuggestion)
async def generate_learning_path(
    request: LearningPathRequest,
    current_user: AuthenticatedUser = Depends(ai_rate_limit),
    insight_service: InsightService = Depends(get_insight_service),
) -> LearningPathSuggestion:
    return await insight_service.suggest_learning_path(current_user.id, request.goals, request.hours_per_week)


@insight_routes.get("/analytics", response_model=AnalyticsResponse)
async def get_analytics(
    current_user: AuthenticatedUser = Depends(ai_rate_limit),
    insight_service: InsightService = Depends(get_insight_service),
) -> AnalyticsResponse:
    return await insight_service.analytics(current_user.id)
