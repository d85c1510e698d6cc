# S3 MANAGER BACKEND

# COMPONENT: PRESENTATION HELPERS
# REQUIREMENTS SATISFIED: human-readable sizes and UTC timestamps in API responses
"""
s3manager/utils/formatting.py

Small presentation helpers shared by the services.
"""
from datetime import datetime, timezone
from typing import Optional

_SIZE_UNITS = ("B", "KB", "MB", "GB", "TB")


def format_bytes(num_bytes: int) -> str:
    """Human-readable base-1024 size, e.g. 1536 -> '1.5 KB'."""
    if num_bytes <= 0:
        return "0 B"
    idx = 0
    while num_bytes >= 1024 ** (idx + 1) and idx < len(_SIZE_UNITS) - 1:
        idx += 1
    value = round(num_bytes / (1024 ** idx), 2)
    # drop trailing zeros: 1.50 -> 1.5, 2.00 -> 2
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text} {_SIZE_UNITS[idx]}"


def iso(value: Optional[datetime]) -> Optional[str]:
    """ISO-8601 string for SDK datetimes (always UTC, 'Z' suffix)."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
