from datetime import timedelta

import jwt

from app.core.config import GetEnv, GetIntEnv
from app.modules.auth.deps import JWT_ALGORITHM, NowUtc, _require_secret


def CreateAccessToken(user_id: str, email: str | None = None) -> tuple[str, int]:
    secret = _require_secret()
    ttl_minutes = GetIntEnv("JWT_ACCESS_TTL_MINUTES", 60)
    now = NowUtc()
    expires = now + timedelta(minutes=ttl_minutes)
    payload = {
        "sub": str(user_id),
        "iat": int(now.timestamp()),
        "exp": int(expires.timestamp()),
    }
    if email:
        payload["email"] = email
    audience = GetEnv("JWT_AUDIENCE")
    if audience:
        payload["aud"] = audience
    token = jwt.encode(payload, secret, algorithm=JWT_ALGORITHM)
    return token, ttl_minutes * 60
