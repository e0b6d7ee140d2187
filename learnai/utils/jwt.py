from typing import Optional

from jose import ExpiredSignatureError, JWTError
from jose.jwt import decode, encode
from pydantic import ValidationError as PydanticValidationError

from learnai.config import get_settings
from learnai.errors import AuthenticationError
from learnai.schemas.auth_schemas import AuthTokenPayload
from learnai.utils.logger import configure_logging

logger = configure_logging()


def create_access_token(data: AuthTokenPayload) -> str:
    """Sign a token the way the auth provider does. Used for local tooling and tests."""
    settings = get_settings()
    claims = data.model_dump(exclude_none=True)
    if "exp" in claims:
        claims["exp"] = int(data.exp.timestamp())
    return encode(claims, settings.AUTH_JWT_SECRET, algorithm=settings.AUTH_JWT_ALGORITHM)


def verify_token(token: Optional[str]) -> AuthTokenPayload:
    """Verify an access token issued by the auth provider and return its claims."""
    if not token:
        raise AuthenticationError("Missing token")
    settings = get_settings()
    options = {"verify_aud": settings.AUTH_JWT_AUDIENCE is not None}
    try:
        payload = decode(
            token,
            settings.AUTH_JWT_SECRET,
            algorithms=[settings.AUTH_JWT_ALGORITHM],
            audience=settings.AUTH_JWT_AUDIENCE,
            options=options,
        )
        return AuthTokenPayload(**payload)
    except ExpiredSignatureError:
        raise AuthenticationError("Token expired")
    except (JWTError, PydanticValidationError) as e:
        logger.info("token rejected: %s", e)
        raise AuthenticationError("Invalid token")
