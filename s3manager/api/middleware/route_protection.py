# S3 MANAGER BACKEND

# COMPONENT: ROUTE PROTECTION MIDDLEWARE
# REQUIREMENTS SATISFIED: session required for storage and user APIs
"""
s3manager/api/middleware/route_protection.py

Rejects requests to protected API prefixes that carry no valid session
cookie before they reach a router. Handlers still resolve the user through
``get_current_user``; this layer only guarantees a single, consistent 401
and clears a stale cookie so the browser stops sending it.
"""
from typing import Iterable

from starlette.requests import HTTPConnection
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Receive, Scope, Send

from s3manager.auth.tokens import COOKIE_NAME, clear_auth_cookie, decode_token
from s3manager.errors import AuthError
from s3manager.utils.logging import get_logger

logger = get_logger("auth.routes")

PROTECTED_PREFIXES = ("/api/s3", "/api/user")
PUBLIC_PREFIXES = ("/api/auth", "/api/health")


def _matches(path: str, prefixes: Iterable[str]) -> bool:
    return any(path == p or path.startswith(p + "/") for p in prefixes)


class RouteProtection:
    def __init__(self, app: ASGIApp, protected=PROTECTED_PREFIXES, public=PUBLIC_PREFIXES):
        self.app = app
        self.protected = tuple(protected)
        self.public = tuple(public)

    def requires_auth(self, path: str) -> bool:
        return _matches(path, self.protected) and not _matches(path, self.public)

    async def __call__(self, scope: Scope, receive: Receive, send: Send):
        if scope["type"] != "http" or scope.get("method") == "OPTIONS" or not self.requires_auth(scope["path"]):
            await self.app(scope, receive, send)
            return

        token = HTTPConnection(scope).cookies.get(COOKIE_NAME)
        if not token:
            response = JSONResponse({"success": False, "error": "Authentication required"}, status_code=401)
            await response(scope, receive, send)
            return

        try:
            decode_token(token)
        except AuthError as e:
            logger.info("Rejected session path=%s reason=%s", scope["path"], e.extra.get("details"))
            response = JSONResponse({"success": False, "error": "Invalid or expired token"}, status_code=401)
            clear_auth_cookie(response)
            await response(scope, receive, send)
            return

        await self.app(scope, receive, send)
