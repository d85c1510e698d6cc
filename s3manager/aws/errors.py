# S3 MANAGER BACKEND

# COMPONENT: AWS ERROR FORMATTING
# REQUIREMENTS SATISFIED: readable SDK failures in API responses
"""
s3manager/aws/errors.py

Helpers for turning botocore failures into the short strings the frontend
shows to the user.
"""
from typing import Optional

from botocore.exceptions import ClientError

# HeadObject has no body, so a missing key surfaces as a bare "404"
NOT_FOUND_CODES = {"404", "NotFound", "NoSuchKey"}


def error_code(exc: BaseException) -> Optional[str]:
    """The SDK error code (``NoSuchKey``, ``AccessDenied`` ...) or None."""
    if isinstance(exc, ClientError):
        return exc.response.get("Error", {}).get("Code") or None
    return None


def http_status(exc: BaseException) -> Optional[int]:
    if isinstance(exc, ClientError):
        return exc.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
    return None


def is_not_found(exc: BaseException) -> bool:
    return error_code(exc) in NOT_FOUND_CODES


def s3_error_message(exc: BaseException) -> str:
    """
    "S3 Error <status>: <code> - <message>" for SDK errors, otherwise the
    exception text.
    """
    if isinstance(exc, ClientError):
        err = exc.response.get("Error", {})
        code = err.get("Code") or "UnknownError"
        message = err.get("Message") or "An S3 error occurred"
        return f"S3 Error {http_status(exc)}: {code} - {message}"
    return str(exc) or "Unknown error occurred"
