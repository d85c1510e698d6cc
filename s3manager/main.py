# S3 MANAGER BACKEND

# COMPONENT: FASTAPI APPLICATION ENTRY POINT
# REQUIREMENTS SATISFIED:
#   - API initialization and routing
#   - Middleware configuration (logging + CORS + route protection)
#   - AWS Lambda compatibility via Mangum
#   - Local development server via uvicorn
"""
s3manager/main.py

Primary application entry point for the S3 Manager backend. This module
assembles the FastAPI application, registers middleware and exception
handlers, mounts the API routers, and exposes the AWS Lambda handler.

Execution Order (Intentional):
    1. Environment variables are loaded from .env
    2. FastAPI app is created and exception handlers are registered
    3. Route protection, request logging and CORS middleware are attached
       (added innermost first, so CORS headers also land on 401s)
    4. API routers are mounted under /api
    5. The Mangum handler is created for AWS Lambda deployment

Deployment Context:
    - Runs locally with ``python -m s3manager.main`` (uvicorn) and in
      AWS Lambda behind API Gateway (Mangum).
    - The frontend origin(s) come from FRONTEND_ORIGINS; credentials are
      allowed because the session lives in a cookie.

This file intentionally contains no business logic.
"""
import os

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI
from mangum import Mangum
from starlette.middleware.cors import CORSMiddleware

from s3manager.api.exception_handlers import configure_exception_handlers
from s3manager.api.middleware.log_requests import RequestLogMiddleware
from s3manager.api.middleware.route_protection import RouteProtection
from s3manager.api.routers import auth, billing, buckets, objects, restore, storage_class, transfer, user
from s3manager.utils import settings
from s3manager.utils.logging import setup_logger

logger = setup_logger()

# -------------------------------------------------------------
# Create the FastAPI app FIRST
# -------------------------------------------------------------
app = FastAPI(title="S3 Manager API", version=settings.app_version())
configure_exception_handlers(app)

# -------------------------------------------------------------
# Add middleware SECOND
# -------------------------------------------------------------
app.add_middleware(RouteProtection)
app.add_middleware(RequestLogMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.frontend_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

# -------------------------------------------------------------
# Include Routers THIRD
# -------------------------------------------------------------
for module in (auth, buckets, objects, transfer, storage_class, restore, billing, user):
    app.include_router(module.router)

logger.info("S3 Manager API ready env=%s version=%s", settings.app_env(), settings.app_version())

# -------------------------------------------------------------
# Create Lambda handler LAST
# -------------------------------------------------------------
handler = Mangum(app)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=os.getenv("HOST", "127.0.0.1"), port=int(os.getenv("PORT", "8000")))
