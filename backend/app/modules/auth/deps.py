from dataclasses import dataclass
from datetime import datetime, timezone

import jwt
from fastapi import HTTPException, Request, status

from app.core.config import GetEnv
from app.core.errors import AuthenticationError

JWT_ALGORITHM = "HS256"


def _require_secret() -> str:
    secret = GetEnv("JWT_SECRET_KEY")
    if not secret:
        raise RuntimeError("Missing required env var: JWT_SECRET_KEY")
    return secret


def _decode_access_token(token: str) -> dict:
    secret = _require_secret()
    audience = GetEnv("JWT_AUDIENCE")
    try:
        if audience:
            return jwt.decode(token, secret, algorithms=[JWT_ALGORITHM], audience=audience)
        return jwt.decode(
            token,
            secret,
            algorithms=[JWT_ALGORITHM],
            options={"verify_aud": False},
        )
    except jwt.ExpiredSignatureError as exc:
        raise AuthenticationError("Token expired") from exc
    except jwt.InvalidTokenError as exc:
        raise AuthenticationError("Invalid token") from exc


@dataclass
class UserContext:
    Id: str
    Email: str | None = None


def NowUtc() -> datetime:
    return datetime.now(tz=timezone.utc)


def ExtractBearerToken(auth_header: str | None) -> str:
    if not auth_header or not auth_header.startswith("Bearer "):
        raise AuthenticationError("Authentication required")
    token = auth_header.replace("Bearer ", "", 1).strip()
    if not token:
        raise AuthenticationError("No token found in authorization header")
    return token


def ResolveIdentity(token: str) -> UserContext:
    payload = _decode_access_token(token)
    user_id = payload.get("sub")
    if not user_id or not isinstance(user_id, str):
        raise AuthenticationError("Invalid token")
    return UserContext(Id=user_id, Email=payload.get("email"))


def RequireAuthenticated(request: Request) -> UserContext:
    try:
        token = ExtractBearerToken(request.headers.get("Authorization"))
        return ResolveIdentity(token)
    except AuthenticationError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)) from exc
