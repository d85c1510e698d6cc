# S3 MANAGER BACKEND

# COMPONENT: CENTRALIZED LOGGING CONFIGURATION
# REQUIREMENTS SATISFIED: Deterministic logging behavior, environment-controlled verbosity
"""
s3manager/utils/logging.py

Provides the centralized logging configuration for the S3 Manager backend.
This module configures the shared "s3manager" logger; every other module
logs through a child of it (``s3manager.buckets``, ``s3manager.auth`` ...),
so a single call controls verbosity and destination for the whole backend.

Environment Variables:
    LOG_LEVEL:
        0 → Silent (no logs emitted)
        1 → INFO level logging
        2 → DEBUG level logging

    LOG_FILE:
        Optional path to a log file. If provided and valid, logs are written
        to this file. Otherwise, logs fall back to standard error (stderr).

Design Decisions:
    - Logging is isolated from the root logger to prevent duplicate output
      under uvicorn and Lambda, which both install their own root handlers.
    - Existing handlers are cleared on setup so repeated calls (app reloads,
      tests) stay idempotent.
    - Botocore's own loggers are left alone; set LOG_LEVEL=2 and configure
      them separately when wire-level tracing is needed.
"""
import os
import sys
import logging

ROOT_LOGGER_NAME = "s3manager"


def _level_from_env() -> int:
    try:
        # LOG_LEVEL=0 is silent, 1 is INFO, 2 is DEBUG
        return int(os.environ.get("LOG_LEVEL", "0"))
    except ValueError:
        return 0


def setup_logger() -> logging.Logger:
    """
    Configures and returns the backend logger based on LOG_FILE and
    LOG_LEVEL environment variables.
    """
    log_file = os.environ.get("LOG_FILE")
    log_level_env = _level_from_env()

    logger = logging.getLogger(ROOT_LOGGER_NAME)

    # Prevent logs from being propagated to the root logger
    logger.propagate = False

    if log_level_env == 1:
        logger.setLevel(logging.INFO)
    elif log_level_env >= 2:
        logger.setLevel(logging.DEBUG)
    else:
        # For LOG_LEVEL=0, set a level that will not log anything
        logger.setLevel(logging.CRITICAL + 1)

    # Remove any existing handlers to avoid duplicate logs
    if logger.hasHandlers():
        logger.handlers.clear()

    handler = None
    if log_file and log_level_env > 0:
        try:
            handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        except OSError:
            # If the file path is invalid, fall back to console
            handler = logging.StreamHandler(sys.stderr)
    elif log_level_env > 0:
        handler = logging.StreamHandler(sys.stderr)

    if handler:
        formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def get_logger(component: str) -> logging.Logger:
    """Return a child of the backend logger, e.g. get_logger("buckets")."""
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{component}")


# Create a single logger instance that can be imported by other files
logger = setup_logger()
