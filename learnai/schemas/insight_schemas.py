"""
Structured reasoning payloads (recommendations, learning paths, progress analysis).

Each top-level shape has a documented default that the reasoning adapter
returns whenever the model's JSON is missing or malformed.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field

from learnai.schemas.tutor_schemas import CamelModel


class RecommendationItem(CamelModel):
    title: str
    description: str = ""
    reason: str = ""
    priority: int = 1
    estimated_duration: Optional[int] = None


class RecommendationSet(CamelModel):
    recommendations: list[RecommendationItem] = Field(default_factory=list)


class LearningPathStep(CamelModel):
    title: str
    description: str = ""
    estimated_duration: int = 0
    skills: list[str] = Field(default_factory=list)


class LearningPath(CamelModel):
    title: str = "Custom Learning Path"
    description: str = "A personalized learning journey tailored to your goals"
    steps: list[LearningPathStep] = Field(default_factory=list)
    total_duration: int = 0


class LearningPathSuggestion(CamelModel):
    path: LearningPath = Field(default_factory=LearningPath)


class ProgressInsights(CamelModel):
    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    next_steps: list[str] = Field(default_factory=list)
    motivational_message: str = "Keep up the great work!"


class ProgressAnalysis(CamelModel):
    analysis: ProgressInsights = Field(default_factory=ProgressInsights)


class LearningPathRequest(CamelModel):
    goals: list[str] = Field(min_length=1, max_length=10)
    hours_per_week: int = Field(default=5, ge=1, le=80)


class RecommendationResponse(CamelModel):
    id: int
    title: str
    description: Optional[str] = None
    reason: Optional[str] = None
    priority: int
    estimated_duration: Optional[int] = None
    is_viewed: bool
    created_at: datetime


class UserStats(CamelModel):
    completed_courses: int
    total_courses: int
    average_progress: float
    learning_hours: int
    current_streak: int
    level: int
    skill_level: str


class AnalyticsResponse(CamelModel):
    analysis: ProgressInsights
    user_stats: UserStats
