from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session as DBSession

from learnai.config import get_db
from learnai.schemas.auth_schemas import AuthenticatedUser
from learnai.schemas.user_schemas import UserProfileResponse
from learnai.services import storage
from learnai.utils.auth import get_current_user

user_routes = APIRouter()


@user_routes.get("/auth/user", response_model=UserProfileResponse)
def get_current_user_profile(
    current_user: AuthenticatedUser = Depends(get_current_user),
    db: DBSession = Depends(get_db),
):
    """Caller's profile. Created from the token claims the first time it is requested."""
    return storage.upsert_user(db, current_user)
