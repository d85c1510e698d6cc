# S3 MANAGER BACKEND

# COMPONENT: RUNTIME SETTINGS
# REQUIREMENTS SATISFIED: environment-driven configuration for local and Lambda deployments
"""
s3manager/utils/settings.py

Accessors for every environment variable the backend reads. Values are read
at call time rather than import time so tests can monkeypatch the
environment and so a Lambda container picks up configuration changes on a
cold start without code changes.

Variables:
    JWT_SECRET            HMAC secret for session tokens
    AWS_DEFAULT_REGION    fallback region when the session carries none
    APP_ENV               "production" turns on Secure cookies
    APP_VERSION           reported by /api/health
    FRONTEND_ORIGINS      comma-separated CORS allowlist
    DEMO_LOGIN_ENABLED    "1" exposes POST /api/auth/demo-login
    DEBUG_ENDPOINTS       "1" exposes GET /api/debug
"""
import os
from typing import List

DEFAULT_JWT_SECRET = "dev-secret-key"
DEFAULT_REGION = "ap-south-1"
DEFAULT_FRONTEND_ORIGINS = "http://localhost:3000,http://127.0.0.1:3000"


def _flag(name: str) -> bool:
    return os.getenv(name, "0") == "1"


def jwt_secret() -> str:
    return os.getenv("JWT_SECRET") or DEFAULT_JWT_SECRET


def default_region() -> str:
    return os.getenv("AWS_DEFAULT_REGION") or DEFAULT_REGION


def app_env() -> str:
    return os.getenv("APP_ENV", "development")


def is_production() -> bool:
    return app_env() == "production"


def app_version() -> str:
    return os.getenv("APP_VERSION", "1.0.0")


def frontend_origins() -> List[str]:
    raw = os.getenv("FRONTEND_ORIGINS", DEFAULT_FRONTEND_ORIGINS)
    return [o.strip().rstrip("/") for o in raw.split(",") if o.strip()]


def demo_login_enabled() -> bool:
    return _flag("DEMO_LOGIN_ENABLED")


def debug_endpoints_enabled() -> bool:
    return _flag("DEBUG_ENDPOINTS")
