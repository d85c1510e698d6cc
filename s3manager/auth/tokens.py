# S3 MANAGER BACKEND

# COMPONENT: SESSION TOKENS
# REQUIREMENTS SATISFIED: signed, expiring browser sessions carried in an http-only cookie
"""
s3manager/auth/tokens.py

Issues and verifies the HS256 session token stored in the ``auth-token``
cookie. The token is the whole session: it carries the user's identity,
permissions, region and the AWS keys every S3 call is made with, so it is
only ever sent as an http-only cookie and never echoed back in a body.

Signing and verification are delegated to python-jose; this module only
fills in the timestamps and maps jose failures onto ``AuthError``.
"""
import time
from typing import Any, Dict

from jose import jwt
from jose.exceptions import JWTError
from starlette.responses import Response

from s3manager.errors import AuthError
from s3manager.utils import settings

ALGORITHM = "HS256"
COOKIE_NAME = "auth-token"
TOKEN_TTL_SECONDS = 24 * 60 * 60

DEFAULT_PERMISSIONS = ["s3:read", "s3:write", "s3:delete"]

_PUBLIC_FIELDS = ("authType", "awsRegion", "awsAccountId", "email", "name")


def issue_token(claims: Dict[str, Any], now: int = None) -> str:
    issued_at = int(now if now is not None else time.time())
    payload = {k: v for k, v in claims.items() if v is not None}
    payload["iat"] = issued_at
    payload["exp"] = issued_at + TOKEN_TTL_SECONDS
    return jwt.encode(payload, settings.jwt_secret(), algorithm=ALGORITHM)


def decode_token(token: str) -> Dict[str, Any]:
    """Verify signature and expiry; raise AuthError on any failure."""
    if not token:
        raise AuthError("Authentication required")
    try:
        return jwt.decode(token, settings.jwt_secret(), algorithms=[ALGORITHM])
    except JWTError as e:
        raise AuthError("Invalid or expired token", details=str(e))


def public_user(claims: Dict[str, Any], include_permissions: bool = False) -> Dict[str, Any]:
    """The part of the session that is safe to hand to the browser."""
    user = {"id": claims.get("userId")}
    for field in _PUBLIC_FIELDS:
        user[field] = claims.get(field)
    if include_permissions:
        user["permissions"] = list(claims.get("permissions") or [])
    return user


def set_auth_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        COOKIE_NAME,
        token,
        max_age=TOKEN_TTL_SECONDS,
        path="/",
        httponly=True,
        samesite="lax",
        secure=settings.is_production(),
    )


def clear_auth_cookie(response: Response) -> None:
    response.set_cookie(
        COOKIE_NAME,
        "",
        max_age=0,
        path="/",
        httponly=True,
        samesite="lax",
        secure=settings.is_production(),
    )
