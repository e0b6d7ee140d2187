"""
AI tutor session model: one durable, user-owned conversation transcript.
"""

from datetime import datetime

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from learnai.config import Base


class TutorSession(Base):
    """
    A tutoring conversation.

    `messages` holds the ordered transcript as a JSON list of {role, content}.
    `version` is the optimistic concurrency token: every UPDATE is issued with
    `WHERE version = <read version>`, so a writer holding a stale copy gets
    `StaleDataError` instead of clobbering turns appended in the meantime.
    """
    __tablename__ = "ai_tutor_sessions"

    id = Column(String, primary_key=True, index=True)  # uuid
    user_id = Column(String, ForeignKey("users.id"), index=True, nullable=False)
    messages = Column(JSON, nullable=False, default=list)
    topic = Column(String(100), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    version = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    user = relationship("User", backref="tutor_sessions", foreign_keys=[user_id])
