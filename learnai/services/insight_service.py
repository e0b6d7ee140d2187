"""
Insight service: structured reasoning calls built from the learner's stored data
(course recommendations, learning-path suggestions, progress analytics).
"""

from __future__ import annotations

from sqlalchemy.orm import Session as DBSession

from learnai.errors import NotFoundError
from learnai.models.models import Recommendation, User
from learnai.schemas.insight_schemas import AnalyticsResponse, LearningPathSuggestion, UserStats
from learnai.services import storage
from learnai.services.reasoning_service import ReasoningService


def _course_snapshot(uc) -> dict:
    return {
        "courseId": uc.course_id,
        "title": uc.course.title if uc.course is not None else None,
        "category": uc.course.category if uc.course is not None else None,
        "progress": float(uc.progress or 0.0),
        "isCompleted": bool(uc.is_completed),
    }


def _assessment_snapshot(a) -> dict:
    return {
        "title": a.title,
        "type": a.type,
        "isCompleted": bool(a.is_completed),
        "score": a.score,
        "courseId": a.course_id,
    }


class InsightService:
    def __init__(self, db: DBSession, reasoning: ReasoningService):
        self.db = db
        self.reasoning = reasoning

    def _require_user(self, user_id: str) -> User:
        user = storage.get_user(self.db, user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def list_recommendations(self, user_id: str) -> list[Recommendation]:
        return storage.get_user_recommendations(self.db, user_id)

    async def generate_recommendations(self, user_id: str) -> list[Recommendation]:
        """Ask for new recommendations and store them. An unusable answer stores nothing."""
        user = self._require_user(user_id)
        enrolments = storage.get_user_courses(self.db, user_id)
        progress = [_course_snapshot(uc) for uc in enrolments]
        completed = [p for p in progress if p["isCompleted"]]
        result = await self.reasoning.recommend_courses(user.skill_level or "Beginner", progress, completed)
        if not result.recommendations:
            return []
        return storage.create_recommendations(self.db, user_id, result.recommendations)

    async def suggest_learning_path(self, user_id: str, goals: list[str], hours_per_week: int) -> LearningPathSuggestion:
        user = self._require_user(user_id)
        return await self.reasoning.suggest_learning_path(goals, user.skill_level or "Beginner", hours_per_week)

    async def analytics(self, user_id: str) -> AnalyticsResponse:
        user = self._require_user(user_id)
        enrolments = storage.get_user_courses(self.db, user_id)
        assessments = storage.get_user_assessments(self.db, user_id)

        completed = sum(1 for uc in enrolments if uc.is_completed)
        average = sum(float(uc.progress or 0.0) for uc in enrolments) / len(enrolments) if enrolments else 0.0
        stats = UserStats(
            completed_courses=completed,
            total_courses=len(enrolments),
            average_progress=round(average, 2),
            learning_hours=user.total_learning_hours or 0,
            current_streak=user.current_streak or 0,
            level=user.level or 1,
            skill_level=user.skill_level or "Beginner",
        )
        progress_data = {
            "completedCourses": stats.completed_courses,
            "totalCourses": stats.total_courses,
            "averageProgress": stats.average_progress,
            "learningHours": stats.learning_hours,
            "currentStreak": stats.current_streak,
        }
        result = await self.reasoning.analyze_progress(progress_data, [_assessment_snapshot(a) for a in assessments])
        return AnalyticsResponse(analysis=result.analysis, user_stats=stats)
