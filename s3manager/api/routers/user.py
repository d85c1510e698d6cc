# S3 MANAGER BACKEND

# COMPONENT: USER AND DIAGNOSTIC ROUTES
# REQUIREMENTS SATISFIED: profile display, AWS identity lookup, session debugging, health checks
"""
s3manager/api/routers/user.py

Endpoints:
    - GET /api/user/profile    : public session projection incl. permissions
    - GET /api/user/identity   : STS caller identity for the session keys
    - GET /api/debug           : decoded session, secrets redacted (DEBUG_ENDPOINTS=1)
    - GET /api/health          : liveness
    - GET /api/health/clients  : S3 client cache statistics
"""
import time

from botocore.exceptions import BotoCoreError, ClientError
from fastapi import APIRouter, Depends, HTTPException

from s3manager.api.exception_handlers import failure
from s3manager.auth.dependencies import get_current_user
from s3manager.auth.tokens import public_user
from s3manager.aws.clients import client_manager
from s3manager.services.identity import identity_for_user
from s3manager.utils import settings
from s3manager.utils.formatting import iso, utcnow
from s3manager.utils.logging import get_logger

logger = get_logger("user")

_START_TIME = time.time()

REDACTED = "***"

router = APIRouter(prefix="/api", tags=["User"])


@router.get("/user/profile")
def profile(user: dict = Depends(get_current_user)):
    return {"success": True, "user": public_user(user, include_permissions=True)}


@router.get("/user/identity")
def identity(user: dict = Depends(get_current_user)):
    if not (user.get("awsCredentials") or {}).get("accessKeyId"):
        return failure(400, "No AWS credentials found in token")
    try:
        result = identity_for_user(user)
    except (ClientError, BotoCoreError) as e:
        logger.error("Identity fetch failed: %s", e)
        return failure(500, "Failed to fetch AWS identity")
    return {"success": True, "identity": result}


@router.get("/debug")
def debug_session(user: dict = Depends(get_current_user)):
    if not settings.debug_endpoints_enabled():
        raise HTTPException(status_code=404, detail="Not Found")

    creds = user.get("awsCredentials") or {}
    redacted = dict(user)
    if creds:
        redacted["awsCredentials"] = {k: REDACTED for k in creds}
    if redacted.get("ssoToken"):
        redacted["ssoToken"] = REDACTED
    return {
        "success": True,
        "user": redacted,
        "hasAwsCredentials": bool(creds),
        "awsCredentialsKeys": list(creds),
        "credentialsValid": bool(creds.get("accessKeyId") and creds.get("secretAccessKey")),
    }


@router.get("/health")
def health():
    return {
        "status": "healthy",
        "message": "OK",
        "uptime": round(time.time() - _START_TIME, 3),
        "timestamp": iso(utcnow()),
        "version": settings.app_version(),
        "environment": settings.app_env(),
        "services": {"aws": "healthy"},
    }


@router.get("/health/clients")
def health_clients():
    return {"success": True, "clients": client_manager.stats()}
