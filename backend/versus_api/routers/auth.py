import os
from datetime import datetime, timedelta, timezone

import jwt
from fastapi import Depends, Header, Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from sqlalchemy.ext.asyncio import AsyncSession

from ..db import get_session
from ..models import Player
from ..exceptions import http_problem

# Accounts are managed by the identity provider; this API only verifies the
# HS256 access tokens it issues, whose ``sub`` claim is the player id.


def get_jwt_secret() -> str:
  secret = os.getenv("JWT_SECRET")
  if not secret:
    raise RuntimeError("JWT_SECRET environment variable is required")
  if len(secret) < 32 or secret.lower() in {"secret", "changeme", "default"}:
    raise RuntimeError(
        "JWT_SECRET must be at least 32 characters and not a common default"
    )
  return secret


JWT_ALG = "HS256"
JWT_EXPIRE_SECONDS = 3600
ACCESS_TOKEN_COOKIE = "access_token"
DEFAULT_CREATE_VERSUS_RATE_LIMIT = "10/minute"
DEFAULT_RECORD_COMPLETION_RATE_LIMIT = "60/minute"


def _rate_limits_disabled() -> bool:
  return (os.getenv("DISABLE_RATE_LIMITS") or "").lower() == "true"


def _get_client_ip(request: Request) -> str:
  forwarded = request.headers.get("X-Forwarded-For")
  if forwarded:
    parts = [ip.strip() for ip in forwarded.split(",") if ip.strip()]
    if parts:
      return parts[-1]
  real_ip = request.headers.get("X-Real-IP")
  if real_ip:
    return real_ip
  return request.client.host if request.client else ""


limiter = Limiter(key_func=_get_client_ip)


def create_versus_rate_limit() -> str:
  if _rate_limits_disabled():
    return "1000/second"
  return os.getenv("CREATE_VERSUS_RATE_LIMIT") or DEFAULT_CREATE_VERSUS_RATE_LIMIT


def record_completion_rate_limit() -> str:
  if _rate_limits_disabled():
    return "1000/second"
  return (
      os.getenv("RECORD_COMPLETION_RATE_LIMIT")
      or DEFAULT_RECORD_COMPLETION_RATE_LIMIT
  )


async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
  detail = exc.detail if isinstance(exc.detail, str) else ""
  if detail:
    message = f"rate limit exceeded: {detail}"
  else:
    message = "rate limit exceeded: please wait before submitting another request."
  return JSONResponse(
      status_code=429,
      content={
          "detail": message,
          "code": "rate_limit_exceeded",
      },
  )


def create_access_token(player_id: str, *, expires_in: int = JWT_EXPIRE_SECONDS) -> str:
  """Issue an access token for ``player_id`` (used by seeding and tests)."""

  payload = {
      "sub": player_id,
      "exp": datetime.now(timezone.utc) + timedelta(seconds=expires_in),
  }
  return jwt.encode(payload, get_jwt_secret(), algorithm=JWT_ALG)


def _extract_bearer_token(request: Request, authorization: str | None) -> str:
  if authorization and authorization.lower().startswith("bearer "):
    return authorization.split(" ", 1)[1]

  cookie_token = request.cookies.get(ACCESS_TOKEN_COOKIE)
  if cookie_token:
    return cookie_token

  raise http_problem(
      status_code=401,
      detail="missing token",
      code="auth_missing_token",
  )


async def get_current_player(
    request: Request,
    authorization: str | None = Header(None),
    session: AsyncSession = Depends(get_session),
) -> Player:
  token = _extract_bearer_token(request, authorization)
  try:
    payload = jwt.decode(token, get_jwt_secret(), algorithms=[JWT_ALG])
  except jwt.ExpiredSignatureError:
    raise http_problem(
        status_code=401,
        detail="token expired",
        code="auth_token_expired",
    )
  except jwt.PyJWTError:
    raise http_problem(
        status_code=401,
        detail="invalid token",
        code="auth_invalid_token",
    )
  player_id = payload.get("sub")
  player = await session.get(Player, player_id) if player_id else None
  if not player:
    raise http_problem(
        status_code=401,
        detail="player not found",
        code="auth_player_not_found",
    )
  return player
