# S3 MANAGER BACKEND

# COMPONENT: AUTHENTICATION ROUTES
# REQUIREMENTS SATISFIED: access-key login, AWS SSO device login, demo login, logout
"""
s3manager/api/routers/auth.py

Endpoints:
    - POST /api/auth/login       : access keys (validated with STS) or start SSO
    - POST /api/auth/sso-poll    : one CreateToken attempt for a pending SSO login
    - POST /api/auth/demo-login  : fixed demo session, only with DEMO_LOGIN_ENABLED=1
    - POST /api/auth/logout      : clear the session cookie

Successful logins set the ``auth-token`` cookie and return the public user
projection; AWS keys never appear in a response body.
"""
import time
from typing import Any, Dict, Optional

from botocore.exceptions import BotoCoreError, ClientError
from fastapi import APIRouter, HTTPException
from fastapi.responses import JSONResponse

from s3manager.api.exception_handlers import failure
from s3manager.auth.sso import SSOError, SSOService
from s3manager.auth.tokens import (
    DEFAULT_PERMISSIONS,
    clear_auth_cookie,
    issue_token,
    public_user,
    set_auth_cookie,
)
from s3manager.aws.errors import error_code
from s3manager.schemas.models import AuthType, DemoLoginRequest, LoginRequest, SSOPollRequest
from s3manager.services.identity import INVALID_KEY_CODES, caller_identity, username_from_arn
from s3manager.utils import settings
from s3manager.utils.logging import get_logger

logger = get_logger("auth")

router = APIRouter(prefix="/api/auth", tags=["Auth"])

SSO_CLIENT_NAME = "S3 Manager App"


def _session_response(claims: Dict[str, Any]) -> JSONResponse:
    response = JSONResponse({"success": True, "user": public_user(claims)})
    set_auth_cookie(response, issue_token(claims))
    return response


def _credentials_login(body: LoginRequest) -> JSONResponse:
    if not body.access_key_id or not body.secret_access_key:
        return failure(400, "Invalid request data", details="accessKeyId and secretAccessKey are required")

    try:
        identity = caller_identity(body.access_key_id, body.secret_access_key, body.region)
    except (ClientError, BotoCoreError) as e:
        logger.warning("AWS credential validation failed code=%s", error_code(e))
        details = (
            "The provided AWS credentials are invalid"
            if error_code(e) in INVALID_KEY_CODES
            else "Unable to validate AWS credentials"
        )
        return failure(401, "Invalid AWS credentials", details=details)

    arn = identity.get("Arn")
    claims = {
        "userId": identity.get("UserId") or f"user_{int(time.time() * 1000)}",
        "email": arn or "aws-user@aws.com",
        "name": username_from_arn(arn, "AWS User"),
        "authType": AuthType.credentials.value,
        "awsRegion": body.region,
        "awsAccountId": identity.get("Account"),
        "permissions": list(DEFAULT_PERMISSIONS),
        "awsCredentials": {
            "accessKeyId": body.access_key_id,
            "secretAccessKey": body.secret_access_key,
        },
    }
    logger.info("Credentials login account=%s region=%s", claims["awsAccountId"], body.region)
    return _session_response(claims)


def _sso_login(body: LoginRequest) -> JSONResponse:
    if not body.sso_start_url:
        return failure(400, "Invalid request data", details="ssoStartUrl is required for SSO login")

    service = SSOService(body.sso_start_url, body.sso_region or body.region, SSO_CLIENT_NAME)
    try:
        device = service.start_device_authorization()
    except (ClientError, BotoCoreError, SSOError) as e:
        logger.warning("SSO device authorization failed: %s", e)
        return failure(401, "SSO authentication failed", details=str(e) or "Unable to initiate SSO authentication")

    client_info = service.register_client()
    return JSONResponse({
        "success": True,
        "requiresDeviceAuth": True,
        "deviceAuth": {
            "userCode": device["userCode"],
            "verificationUri": device["verificationUri"],
            "verificationUriComplete": device["verificationUriComplete"],
            "expiresIn": device["expiresIn"],
            "interval": device["interval"],
        },
        "pollEndpoint": "/api/auth/sso-poll",
        "deviceCode": device["deviceCode"],
        "clientId": client_info["clientId"],
        "clientSecret": client_info["clientSecret"],
    })


@router.post("/login")
def login(body: LoginRequest):
    if body.auth_type == AuthType.credentials:
        return _credentials_login(body)
    return _sso_login(body)


@router.post("/sso-poll")
def sso_poll(body: SSOPollRequest):
    service = SSOService(body.sso_start_url, body.sso_region, SSO_CLIENT_NAME)
    try:
        token = service.create_token(body.device_code, body.client_id, body.client_secret)
    except ClientError as e:
        code = error_code(e)
        if code == "AuthorizationPendingException":
            return failure(202, "Authorization still pending", pending=True)
        if code == "SlowDownException":
            return failure(202, "Authorization still pending", pending=True, slowDown=True)
        if code == "ExpiredTokenException":
            return failure(410, "Device authorization has expired", expired=True)
        if code == "AccessDeniedException":
            return failure(403, "Access was denied", denied=True)
        logger.error("SSO polling failed code=%s error=%s", code, e)
        return failure(500, "SSO polling failed", details=str(e))

    if not token["accessToken"]:
        return failure(202, "Authorization still pending", pending=True)

    info = service.get_user_info(token["accessToken"], body.account_id, body.role_name)
    claims = {
        "userId": info["userId"],
        "email": info.get("email") or "sso-user@aws.com",
        "name": info["userName"],
        "authType": AuthType.sso.value,
        "awsRegion": body.sso_region,
        "awsAccountId": info["accountId"],
        "permissions": list(DEFAULT_PERMISSIONS),
        "awsCredentials": info.get("awsCredentials"),
        "ssoToken": token,
    }
    logger.info("SSO login account=%s role=%s", info["accountId"], info.get("roleName"))
    return _session_response(claims)


@router.post("/demo-login")
def demo_login(body: Optional[DemoLoginRequest] = None):
    if not settings.demo_login_enabled():
        raise HTTPException(status_code=404, detail="Not Found")

    body = body or DemoLoginRequest()
    claims = {
        "userId": "demo_user_123",
        "email": "demo@example.com",
        "name": "Demo User",
        "authType": AuthType.credentials.value,
        "awsRegion": body.region or settings.default_region(),
        "awsAccountId": "123456789012",
        "permissions": list(DEFAULT_PERMISSIONS),
        "awsCredentials": {
            "accessKeyId": body.access_key_id or "DEMO_ACCESS_KEY",
            "secretAccessKey": body.secret_access_key or "DEMO_SECRET_KEY",
        },
    }
    return _session_response(claims)


@router.post("/logout")
def logout():
    response = JSONResponse({"success": True, "message": "Logged out"})
    clear_auth_cookie(response)
    return response
