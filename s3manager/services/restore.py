# S3 MANAGER BACKEND

# COMPONENT: ARCHIVE RESTORE SERVICE
# REQUIREMENTS SATISFIED: Glacier / Deep Archive retrieval and restore status tracking
"""
s3manager/services/restore.py

Temporary restores of archived objects (GLACIER, DEEP_ARCHIVE).

A restore makes a readable copy available for ``days`` days; the archived
original stays where it is. Progress is only visible through the
``x-amz-restore`` header that HeadObject returns, e.g.

    ongoing-request="true"
    ongoing-request="false", expiry-date="Fri, 21 Dec 2012 00:00:00 GMT"

Completion estimates are the upper bounds AWS documents for Glacier
Flexible Retrieval: Expedited ~5 minutes, Standard ~5 hours, Bulk ~12 hours.
"""
import re
from datetime import datetime, timedelta, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Dict, List, Optional, Tuple

from botocore.exceptions import BotoCoreError, ClientError

from s3manager.aws.errors import error_code, is_not_found
from s3manager.errors import NotFound, ValidationFailed
from s3manager.services.objects import is_directory_marker
from s3manager.utils.formatting import iso, utcnow
from s3manager.utils.logging import get_logger

logger = get_logger("restore")

ARCHIVE_CLASSES = ("GLACIER", "DEEP_ARCHIVE")
RESTORE_TIERS = {"Expedited": 5, "Standard": 300, "Bulk": 720}
MIN_DAYS, MAX_DAYS = 1, 30
MAX_STATUS_LIMIT = 1000
MAX_BULK_KEYS = 1000

_ONGOING_RE = re.compile(r'ongoing-request="([^"]+)"')
_EXPIRY_RE = re.compile(r'expiry-date="([^"]+)"')

# SDK error code -> (HTTP status, error, errorCode, details)
RESTORE_ERRORS = {
    "RestoreAlreadyInProgress": (
        409, "Restoration already in progress", "RESTORE_IN_PROGRESS",
        "This object is already being restored. Please check the restoration status.",
    ),
    "InvalidObjectState": (
        400, "Invalid object state", "INVALID_OBJECT_STATE",
        "This object cannot be restored. It may not be in DEEP_ARCHIVE or GLACIER storage class.",
    ),
    "NoSuchKey": (
        404, "Object not found", "OBJECT_NOT_FOUND",
        "The object {key} does not exist in bucket {bucket}.",
    ),
    "NoSuchBucket": (
        404, "Bucket not found", "BUCKET_NOT_FOUND",
        "The bucket {bucket} does not exist.",
    ),
    "AccessDenied": (
        403, "Authentication failed", "AUTH_ERROR",
        "Invalid AWS credentials or insufficient permissions to restore objects.",
    ),
}


def parse_restore_header(value: Optional[str], now: datetime = None) -> Optional[Dict[str, Any]]:
    if not value:
        return None
    now = now or utcnow()
    ongoing = _ONGOING_RE.search(value)
    expiry_match = _EXPIRY_RE.search(value)
    in_progress = bool(ongoing and ongoing.group(1) == "true")

    expiry = None
    if expiry_match:
        try:
            expiry = parsedate_to_datetime(expiry_match.group(1))
        except (TypeError, ValueError):
            logger.warning("Unparseable restore expiry-date: %s", expiry_match.group(1))

    # a "-0000" zone parses to a naive datetime
    if expiry is not None and expiry.tzinfo is None:
        expiry = expiry.replace(tzinfo=timezone.utc)

    remaining = None
    if expiry is not None:
        remaining = max(0, int((expiry - now).total_seconds() * 1000))
    return {
        "inProgress": in_progress,
        "completed": not in_progress and expiry is not None,
        "expiryDate": iso(expiry),
        "timeRemaining": remaining,
    }


def estimate_completion(tier: str, now: datetime = None) -> Tuple[datetime, int]:
    """Expected completion time and duration in minutes for a restore tier."""
    minutes = RESTORE_TIERS[tier]
    return (now or utcnow()) + timedelta(minutes=minutes), minutes


def validate_restore_params(days: int, tier: str) -> None:
    if not MIN_DAYS <= days <= MAX_DAYS:
        raise ValidationFailed("Invalid restoration duration", details="Days must be between 1 and 30")
    if tier not in RESTORE_TIERS:
        raise ValidationFailed(
            "Invalid restoration tier", details="Tier must be one of: Expedited, Standard, Bulk"
        )


def _restore_request(days: int, tier: str, description: str) -> Dict[str, Any]:
    return {"Days": days, "GlacierJobParameters": {"Tier": tier}, "Description": description}


def restore_object(client, bucket: str, key: str, days: int = 1, tier: str = "Standard",
                   description: str = "Object restoration requested") -> Dict[str, Any]:
    validate_restore_params(days, tier)
    logger.info("Starting restore bucket=%s key=%s days=%s tier=%s", bucket, key, days, tier)
    client.restore_object(Bucket=bucket, Key=key, RestoreRequest=_restore_request(days, tier, description))

    expected, minutes = estimate_completion(tier)
    return {
        "success": True,
        "message": f"Restoration initiated for {key}",
        "data": {
            "objectKey": key,
            "bucketName": bucket,
            "days": days,
            "tier": tier,
            "status": "in-progress",
            "expectedCompletion": iso(expected),
            "estimatedDurationMinutes": minutes,
            "description": description,
        },
    }


def restore_error_body(exc: ClientError, bucket: str, key: str = None,
                       fallback: str = "Object restoration failed",
                       fallback_code: str = "RESTORATION_ERROR") -> Tuple[int, Dict[str, Any]]:
    code = error_code(exc)
    if code in RESTORE_ERRORS:
        status, error, app_code, details = RESTORE_ERRORS[code]
        return status, {
            "success": False,
            "error": error,
            "details": details.format(bucket=bucket, key=key),
            "errorCode": app_code,
        }
    return 500, {"success": False, "error": fallback, "details": str(exc), "errorCode": fallback_code}


def restore_status(client, bucket: str, key: str) -> Dict[str, Any]:
    try:
        head = client.head_object(Bucket=bucket, Key=key)
    except ClientError as e:
        if is_not_found(e):
            raise NotFound("Object not found", errorCode="OBJECT_NOT_FOUND")
        raise
    return {
        "success": True,
        "data": {
            "objectKey": key,
            "bucketName": bucket,
            "storageClass": head.get("StorageClass") or "STANDARD",
            "restoration": parse_restore_header(head.get("Restore")),
            "lastModified": iso(head.get("LastModified")),
            "size": head.get("ContentLength"),
        },
    }


def _list_keys(client, bucket: str, prefix: str, limit: int) -> Tuple[List[str], Dict[str, Any]]:
    params: Dict[str, Any] = {"Bucket": bucket, "MaxKeys": limit}
    if prefix:
        params["Prefix"] = prefix
    response = client.list_objects_v2(**params)
    keys = [o["Key"] for o in response.get("Contents", []) if not is_directory_marker(o.get("Key"))]
    return keys, response


def bulk_restore(client, bucket: str, prefix: str = "", days: int = 1, tier: str = "Standard",
                 description: str = "Bulk restoration requested",
                 object_keys: List[str] = None) -> Dict[str, Any]:
    validate_restore_params(days, tier)
    if object_keys:
        keys = list(object_keys)
    else:
        keys, _ = _list_keys(client, bucket, prefix, MAX_BULK_KEYS)
    if not keys:
        raise NotFound(
            "No objects found",
            details=f'No objects found with prefix "{prefix}"' if prefix else "No objects found in the specified list",
        )

    results: Dict[str, List[Any]] = {"successful": [], "failed": [], "skipped": [], "alreadyInProgress": []}
    eligible: List[str] = []

    # Pass 1: only archived objects that are not already being restored qualify
    for key in keys:
        try:
            head = client.head_object(Bucket=bucket, Key=key)
        except (ClientError, BotoCoreError) as e:
            results["failed"].append({"key": key, "error": "Object not found" if is_not_found(e) else str(e)})
            continue
        storage_class = head.get("StorageClass") or "STANDARD"
        if storage_class not in ARCHIVE_CLASSES:
            results["skipped"].append({
                "key": key,
                "reason": f"Object is in {storage_class} storage class and does not require restoration",
            })
            continue
        restoration = parse_restore_header(head.get("Restore"))
        if restoration and restoration["inProgress"]:
            results["alreadyInProgress"].append(key)
            continue
        eligible.append(key)

    logger.info(
        "Bulk restore analysis bucket=%s total=%d eligible=%d skipped=%d in_progress=%d failed=%d",
        bucket, len(keys), len(eligible), len(results["skipped"]),
        len(results["alreadyInProgress"]), len(results["failed"]),
    )

    # Pass 2
    for key in eligible:
        try:
            client.restore_object(
                Bucket=bucket, Key=key, RestoreRequest=_restore_request(days, tier, f"{description} - {key}")
            )
        except (ClientError, BotoCoreError) as e:
            if error_code(e) == "RestoreAlreadyInProgress":
                results["alreadyInProgress"].append(key)
            else:
                logger.error("Restore failed bucket=%s key=%s error=%s", bucket, key, e)
                results["failed"].append({"key": key, "error": str(e)})
            continue
        results["successful"].append(key)

    summary = {"total": len(keys)}
    summary.update({name: len(items) for name, items in results.items()})
    expected, minutes = estimate_completion(tier)
    return {
        "success": summary["successful"] > 0 or summary["alreadyInProgress"] > 0,
        "message": f"Bulk restoration processed {summary['total']} objects",
        "data": {
            "bucketName": bucket,
            "prefix": prefix,
            "days": days,
            "tier": tier,
            "summary": summary,
            "results": results,
            "expectedCompletion": iso(expected),
            "estimatedDurationMinutes": minutes,
            "description": description,
        },
    }


def bulk_restore_status(client, bucket: str, prefix: str = "", limit: int = 100) -> Dict[str, Any]:
    limit = max(1, min(limit, MAX_STATUS_LIMIT))
    keys, listing = _list_keys(client, bucket, prefix, limit)

    objects: List[Dict[str, Any]] = []
    for key in keys:
        try:
            head = client.head_object(Bucket=bucket, Key=key)
        except (ClientError, BotoCoreError) as e:
            logger.warning("Head object failed bucket=%s key=%s error=%s", bucket, key, e)
            objects.append({"key": key, "storageClass": "UNKNOWN", "canRestore": False, "restoration": None})
            continue
        storage_class = head.get("StorageClass") or "STANDARD"
        objects.append({
            "key": key,
            "storageClass": storage_class,
            "canRestore": storage_class in ARCHIVE_CLASSES,
            "restoration": parse_restore_header(head.get("Restore")),
        })

    classes: List[str] = []
    for obj in objects:
        if obj["storageClass"] not in classes:
            classes.append(obj["storageClass"])
    summary = {
        "total": len(objects),
        "canRestore": sum(1 for o in objects if o["canRestore"]),
        "inProgress": sum(1 for o in objects if o["restoration"] and o["restoration"]["inProgress"]),
        "completed": sum(1 for o in objects if o["restoration"] and o["restoration"]["completed"]),
        "storageClasses": classes,
    }
    return {
        "success": True,
        "data": {
            "bucketName": bucket,
            "prefix": prefix,
            "objects": objects,
            "summary": summary,
            "hasMore": bool(listing.get("IsTruncated")),
            "nextContinuationToken": listing.get("NextContinuationToken"),
        },
    }
