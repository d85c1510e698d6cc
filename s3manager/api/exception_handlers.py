# S3 MANAGER BACKEND

# COMPONENT: GLOBAL EXCEPTION HANDLERS
# REQUIREMENTS SATISFIED: uniform {"success": false, "error": ...} error envelope
"""
s3manager/api/exception_handlers.py

Registers handlers that render every failure in the envelope the frontend
expects:

    HTTPException           -> status from the exception; a dict detail is
                               merged into the body, a string becomes "error"
    RequestValidationError  -> 400 "Invalid request data" with pydantic details
    ServiceError            -> status and extra keys carried by the exception
    botocore ClientError    -> 500 "S3 Error <status>: <code> - <message>"
"""
from typing import Any, Dict

from botocore.exceptions import BotoCoreError, ClientError
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from s3manager.aws.errors import error_code, s3_error_message
from s3manager.errors import ServiceError
from s3manager.utils.logging import get_logger

logger = get_logger("api.errors")


def failure(status_code: int, error: str, **extra: Any) -> JSONResponse:
    body: Dict[str, Any] = {"success": False, "error": error}
    body.update({k: v for k, v in extra.items() if v is not None})
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if isinstance(exc.detail, dict):
        body = {"success": False}
        body.update(exc.detail)
        return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(body),
                            headers=getattr(exc, "headers", None))
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("Request validation failed path=%s errors=%d", request.url.path, len(exc.errors()))
    return failure(400, "Invalid request data", details=exc.errors())


async def service_exception_handler(request: Request, exc: ServiceError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(exc.to_body()))


async def aws_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("AWS call failed path=%s error=%s", request.url.path, exc)
    return failure(
        500,
        s3_error_message(exc),
        errorCode=error_code(exc),
        errorType=type(exc).__name__,
    )


def configure_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(ServiceError, service_exception_handler)
    app.add_exception_handler(ClientError, aws_exception_handler)
    app.add_exception_handler(BotoCoreError, aws_exception_handler)
