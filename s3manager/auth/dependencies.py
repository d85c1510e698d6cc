# S3 MANAGER BACKEND

# COMPONENT: AUTHENTICATION DEPENDENCIES
# REQUIREMENTS SATISFIED: per-endpoint session, permission and credential checks
"""
s3manager/auth/dependencies.py

FastAPI dependencies that resolve the signed-in user from the session
cookie. Handlers declare what they need:

    user = Depends(get_current_user)
    user = Depends(require_permission("s3:write"))
    user = Depends(require_aws_credentials)
"""
from typing import Any, Callable, Dict, Optional

from fastapi import Cookie, Depends, HTTPException

from s3manager.auth.tokens import COOKIE_NAME, decode_token
from s3manager.errors import AuthError


def get_current_user(auth_token: Optional[str] = Cookie(None, alias=COOKIE_NAME)) -> Dict[str, Any]:
    if not auth_token:
        raise HTTPException(status_code=401, detail="Authentication required")
    try:
        return decode_token(auth_token)
    except AuthError:
        raise HTTPException(status_code=401, detail="Invalid or expired token")


def require_permission(permission: str) -> Callable[..., Dict[str, Any]]:
    def _check(user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
        if permission not in (user.get("permissions") or []):
            raise HTTPException(status_code=403, detail="Insufficient permissions")
        return user

    return _check


def require_aws_credentials(user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
    creds = user.get("awsCredentials") or {}
    if not creds.get("accessKeyId"):
        raise HTTPException(
            status_code=401,
            detail={
                "error": "AWS credentials not found in session",
                "details": "Please log in again with valid AWS credentials",
            },
        )
    return user
