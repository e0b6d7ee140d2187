"""
API schemas package. Import from submodules or from this package.

Example:
    from learnai.schemas import ChatRequest, ChatResponse
    from learnai.schemas.insight_schemas import RecommendationSet
"""

from learnai.schemas.auth_schemas import AuthTokenPayload, AuthenticatedUser
from learnai.schemas.user_schemas import UserProfileResponse
from learnai.schemas.tutor_schemas import (
    Role,
    Turn,
    ChatRequest,
    ChatResponse,
    ChatTurnResult,
    TutorReply,
    TutorSessionResponse,
    CourseProgressSummary,
    UserContext,
)
from learnai.schemas.insight_schemas import (
    RecommendationItem,
    RecommendationSet,
    RecommendationResponse,
    LearningPathStep,
    LearningPath,
    LearningPathRequest,
    LearningPathSuggestion,
    ProgressInsights,
    ProgressAnalysis,
    UserStats,
    AnalyticsResponse,
)

__all__ = [
    # auth
    "AuthTokenPayload",
    "AuthenticatedUser",
    # user
    "UserProfileResponse",
    # tutor
    "Role",
    "Turn",
    "ChatRequest",
    "ChatResponse",
    "ChatTurnResult",
    "TutorReply",
    "TutorSessionResponse",
    "CourseProgressSummary",
    "UserContext",
    # insights
    "RecommendationItem",
    "RecommendationSet",
    "RecommendationResponse",
    "LearningPathStep",
    "LearningPath",
    "LearningPathRequest",
    "LearningPathSuggestion",
    "ProgressInsights",
    "ProgressAnalysis",
    "UserStats",
    "AnalyticsResponse",
]
