from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class AuthTokenPayload(BaseModel):
    """Claims we rely on from the auth provider's access token."""

    model_config = ConfigDict(extra="ignore")

    sub: str
    email: Optional[str] = None
    exp: Optional[datetime] = None
    aud: Optional[str | list[str]] = None
    user_metadata: Optional[dict] = None


class AuthenticatedUser(BaseModel):
    id: str
    email: Optional[str] = None
    user_metadata: dict = {}
