# S3 MANAGER BACKEND

# COMPONENT: API REQUEST / RESPONSE LOGGING MIDDLEWARE
# REQUIREMENTS SATISFIED: backend observability and debugging support
"""
s3manager/api/middleware/log_requests.py

Defines a custom ASGI middleware that logs one line per HTTP request.

Each request is tagged with a short request ID, and the method, path,
response status and end-to-end latency are written to the "s3manager.http"
logger once the response has been sent. The same ID is exposed to handlers
as ``scope["state"]["request_id"]`` and returned to the client in an
``X-Request-ID`` header so a browser error can be matched to a log line.

Request and response bodies are deliberately not captured: login bodies
carry AWS secret keys and response bodies carry presigned URLs.
"""
import time
import uuid

from starlette.types import ASGIApp, Message, Receive, Scope, Send

from s3manager.utils.logging import get_logger

logger = get_logger("http")


class RequestLogMiddleware:
    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        rid = str(uuid.uuid4())[:8]
        method = scope.get("method")
        path = scope.get("path")
        scope.setdefault("state", {})["request_id"] = rid

        status_code = None

        async def send_wrapper(message: Message):
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
                headers = list(message.get("headers", []))
                headers.append((b"x-request-id", rid.encode("ascii")))
                message["headers"] = headers
            await send(message)

        start = time.time()
        try:
            await self.app(scope, receive, send_wrapper)
        except Exception:
            duration_ms = round((time.time() - start) * 1000, 2)
            logger.exception("[RID %s] %s %s failed after %sms", rid, method, path, duration_ms)
            raise

        duration_ms = round((time.time() - start) * 1000, 2)
        log = logger.warning if status_code and status_code >= 500 else logger.info
        log("[RID %s] %s %s -> %s (%sms)", rid, method, path, status_code, duration_ms)
