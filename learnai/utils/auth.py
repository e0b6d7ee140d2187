from typing import Optional

from fastapi import Depends, WebSocket
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from learnai.errors import AuthenticationError
from learnai.schemas.auth_schemas import AuthenticatedUser, AuthTokenPayload
from learnai.utils.jwt import verify_token

bearer_scheme = HTTPBearer(auto_error=False)


def _to_user(payload: AuthTokenPayload) -> AuthenticatedUser:
    return AuthenticatedUser(id=payload.sub, email=payload.email, user_metadata=payload.user_metadata or {})


def _token_from_ws(websocket: WebSocket) -> Optional[str]:
    """Access token from ?token= or an Authorization: Bearer header. None if missing."""
    token = websocket.query_params.get("token")
    if token:
        return token.strip()
    header = websocket.headers.get("authorization") or ""
    scheme, _, credentials = header.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    return None


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> AuthenticatedUser:
    if credentials is None:
        raise AuthenticationError("Missing or malformed authorization header")
    if credentials.scheme.lower() != "bearer":
        raise AuthenticationError("Invalid authorization scheme")
    return _to_user(verify_token(credentials.credentials))


def get_user_from_websocket(websocket: WebSocket) -> AuthenticatedUser | None:
    """Authenticated caller of a WebSocket, or None when the token is missing or invalid."""
    token = _token_from_ws(websocket)
    if not token:
        return None
    try:
        return _to_user(verify_token(token))
    except AuthenticationError:
        return None
