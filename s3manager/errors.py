# S3 MANAGER BACKEND

# COMPONENT: DOMAIN EXCEPTIONS
# REQUIREMENTS SATISFIED: consistent error envelopes across services and routers
"""
s3manager/errors.py

Exceptions raised by the service layer. Services never raise FastAPI's
HTTPException; they raise one of these, and the global exception handlers
in ``s3manager.api.exception_handlers`` turn them into the JSON envelope
``{"success": false, "error": ..., ...}``.

Anything passed as keyword arguments ends up as extra top-level keys in the
response body (``details``, ``errorCode``, ``requiresRestore`` ...).
"""
from typing import Any, Dict


class ServiceError(Exception):
    status_code = 500

    def __init__(self, message: str, status_code: int = None, **extra: Any):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.extra: Dict[str, Any] = extra

    def to_body(self) -> Dict[str, Any]:
        body = {"success": False, "error": self.message}
        body.update({k: v for k, v in self.extra.items() if v is not None})
        return body


class ValidationFailed(ServiceError):
    status_code = 400


class NotFound(ServiceError):
    status_code = 404


class Conflict(ServiceError):
    status_code = 409


class AuthError(ServiceError):
    """Session token missing, malformed, tampered with or expired."""

    status_code = 401
