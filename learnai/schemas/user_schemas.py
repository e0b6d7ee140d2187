from datetime import datetime
from typing import Optional

from learnai.schemas.tutor_schemas import CamelModel


class UserProfileResponse(CamelModel):
    id: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    current_streak: int = 0
    total_learning_hours: int = 0
    level: int = 1
    skill_level: str = "Beginner"
    weekly_goal_hours: int = 7
    total_xp: int = 0
    created_at: datetime
    updated_at: datetime
