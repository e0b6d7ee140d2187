"""
Data models. Single import surface for DB entities.

DB entities (learnai.models.models):
- User, Course, UserCourse, Assessment, Recommendation

Tutor sessions (learnai.models.tutor_session):
- TutorSession
"""

from learnai.models.models import (
    User,
    Course,
    UserCourse,
    Assessment,
    Recommendation,
)
from learnai.models.tutor_session import TutorSession

__all__ = [
    "User",
    "Course",
    "UserCourse",
    "Assessment",
    "Recommendation",
    "TutorSession",
]
