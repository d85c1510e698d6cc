# S3 MANAGER BACKEND

# COMPONENT: STORAGE CLASS SERVICE
# REQUIREMENTS SATISFIED: per-object, per-prefix and per-bucket storage class changes
"""
s3manager/services/storage_class.py

Changes the storage class of existing objects.

S3 has no "set storage class" call: the object is copied onto itself with a
new StorageClass and MetadataDirective=COPY so user metadata survives. An
object sitting in GLACIER or DEEP_ARCHIVE cannot be read, so it cannot be
copied until it has been restored.

Bulk operations paginate everything under a prefix first, then self-copy in
batches of BATCH_SIZE concurrent requests. There is no retry and no resume:
a failed copy is reported per key and the caller can simply run the
operation again, which skips whatever already moved.
"""
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, Iterable, List, NamedTuple, Optional

from botocore.exceptions import BotoCoreError, ClientError

from s3manager.aws.errors import s3_error_message
from s3manager.errors import ValidationFailed
from s3manager.services.objects import copy_source, is_directory_marker, iter_objects
from s3manager.utils.logging import get_logger

logger = get_logger("storage_class")

VALID_STORAGE_CLASSES = (
    "STANDARD",
    "STANDARD_IA",
    "ONEZONE_IA",
    "INTELLIGENT_TIERING",
    "GLACIER",
    "GLACIER_IR",
    "DEEP_ARCHIVE",
    "REDUCED_REDUNDANCY",
)
ARCHIVE_CLASSES = ("GLACIER", "DEEP_ARCHIVE")

BATCH_SIZE = 10
BATCH_PAUSE_SECONDS = 0.1
MAX_ERROR_DETAILS = 10


class Transition(NamedTuple):
    is_valid: bool
    message: Optional[str] = None
    requires_restore: bool = False


def validate_transition(current: Optional[str], target: str) -> Transition:
    current = (current or "STANDARD").upper()
    target = (target or "").upper()

    if current in ARCHIVE_CLASSES and target != current:
        return Transition(
            False,
            f"Objects in {current} storage class must be restored before changing to {target}. "
            "Please restore the object first, then change its storage class.",
            True,
        )
    if current == "GLACIER_IR" and target in ARCHIVE_CLASSES:
        return Transition(
            False,
            f"Cannot transition from {current} to {target}. Use lifecycle policies for such transitions.",
        )
    return Transition(True)


def ensure_valid_class(storage_class: str) -> None:
    if storage_class not in VALID_STORAGE_CLASSES:
        raise ValidationFailed("Invalid storage class", validStorageClasses=list(VALID_STORAGE_CLASSES))


def _self_copy(client, bucket: str, key: str, storage_class: str) -> None:
    client.copy_object(
        Bucket=bucket,
        Key=key,
        CopySource=copy_source(bucket, key),
        StorageClass=storage_class,
        MetadataDirective="COPY",
    )


def run_in_batches(items: List[Any], fn: Callable[[Any], Dict[str, Any]],
                   pause: float = 0.0) -> List[Dict[str, Any]]:
    """Apply ``fn`` to ``items`` BATCH_SIZE at a time, keeping input order."""
    results: List[Dict[str, Any]] = []
    with ThreadPoolExecutor(max_workers=BATCH_SIZE) as pool:
        for start in range(0, len(items), BATCH_SIZE):
            results.extend(pool.map(fn, items[start:start + BATCH_SIZE]))
            if pause and start + BATCH_SIZE < len(items):
                time.sleep(pause)
    return results


def summarize(results: Iterable[Dict[str, Any]], total: int) -> Dict[str, int]:
    statuses = [r["status"] for r in results]
    return {
        "total": total,
        "successful": statuses.count("success"),
        "errors": statuses.count("error"),
        "skipped": statuses.count("skipped"),
        "blocked": statuses.count("blocked"),
    }


def change_object_storage_class(client, bucket: str, key: str, storage_class: str) -> Dict[str, Any]:
    ensure_valid_class(storage_class)
    current = client.head_object(Bucket=bucket, Key=key).get("StorageClass") or "STANDARD"

    transition = validate_transition(current, storage_class)
    if not transition.is_valid:
        raise ValidationFailed(
            transition.message,
            requiresRestore=transition.requires_restore,
            currentStorageClass=current,
            requestedStorageClass=storage_class,
        )

    _self_copy(client, bucket, key, storage_class)
    logger.info("Storage class changed bucket=%s key=%s %s -> %s", bucket, key, current, storage_class)
    return {
        "success": True,
        "message": f"Storage class changed from {current} to {storage_class}",
        "previousStorageClass": current,
        "newStorageClass": storage_class,
    }


def change_prefix_storage_class(client, bucket: str, prefix: str, storage_class: str) -> Dict[str, Any]:
    """
    Self-copy every file under ``prefix`` to ``storage_class``.

    Per-key results are success, skipped (already there), blocked (needs a
    restore or a lifecycle rule) or error. A body carrying ``error`` means no
    object moved, and the router answers it with a 400.
    """
    ensure_valid_class(storage_class)
    files = [obj for obj in iter_objects(client, bucket, prefix) if not is_directory_marker(obj.get("Key"))]
    if not files:
        return {"success": True, "message": "No files found in the specified directory", "processedCount": 0}

    def _process(obj: Dict[str, Any]) -> Dict[str, Any]:
        key = obj["Key"]
        current = obj.get("StorageClass") or "STANDARD"
        if current == storage_class:
            return {"key": key, "status": "skipped", "reason": "Already in target storage class"}
        transition = validate_transition(current, storage_class)
        if not transition.is_valid:
            return {
                "key": key,
                "status": "blocked",
                "reason": transition.message,
                "requiresRestore": transition.requires_restore,
                "currentStorageClass": current,
            }
        try:
            _self_copy(client, bucket, key, storage_class)
        except (ClientError, BotoCoreError) as e:
            logger.error("Storage class change failed bucket=%s key=%s error=%s", bucket, key, e)
            return {"key": key, "status": "error", "error": s3_error_message(e)}
        return {"key": key, "status": "success", "previousStorageClass": current}

    results = run_in_batches(files, _process)
    summary = summarize(results, len(files))
    data = {"summary": summary, "details": results, "storageClass": storage_class}
    logger.info("Bulk storage class bucket=%s prefix=%s summary=%s", bucket, prefix, summary)

    if summary["blocked"] == len(files):
        reasons: List[str] = []
        for r in results:
            if r["reason"] not in reasons:
                reasons.append(r["reason"])
        return {
            "success": False,
            "error": "All storage class transitions were blocked",
            "details": reasons[0] if len(reasons) == 1 else "Multiple issues found: " + "; ".join(reasons),
            "data": data,
        }
    if summary["successful"] == 0 and summary["blocked"] + summary["skipped"] == len(files):
        return {
            "success": False,
            "error": "No storage class changes were made",
            "details": "All files were either already in the target storage class or blocked from transitioning",
            "data": data,
        }

    has_success = summary["successful"] > 0
    data["message"] = "Bulk storage class update completed" if has_success else "No storage class changes were made"
    return {"success": has_success, "data": data}


def change_bucket_storage_class(client, bucket: str, storage_class: str) -> Dict[str, Any]:
    ensure_valid_class(storage_class)
    all_objects = list(iter_objects(client, bucket))

    skipped = 0
    to_process: List[Dict[str, Any]] = []
    for obj in all_objects:
        if is_directory_marker(obj.get("Key")) or obj.get("StorageClass") == storage_class:
            skipped += 1
        else:
            to_process.append(obj)

    logger.info("Processing %d objects bucket=%s target=%s", len(to_process), bucket, storage_class)

    def _process(obj: Dict[str, Any]) -> Dict[str, Any]:
        original = obj.get("StorageClass") or "STANDARD"
        try:
            _self_copy(client, bucket, obj["Key"], storage_class)
        except (ClientError, BotoCoreError) as e:
            logger.error("Storage class change failed bucket=%s key=%s error=%s", bucket, obj["Key"], e)
            return {"key": obj["Key"], "status": "error", "error": s3_error_message(e),
                    "originalStorageClass": original}
        return {"key": obj["Key"], "status": "success", "originalStorageClass": original,
                "newStorageClass": storage_class}

    results = run_in_batches(to_process, _process, pause=BATCH_PAUSE_SECONDS)
    errors = [r for r in results if r["status"] == "error"]
    successful = len(results) - len(errors)

    message = f"Bucket storage class operation completed. {successful} objects successfully changed to {storage_class}"
    if errors:
        message += f", {len(errors)} errors"
    if skipped:
        message += f", {skipped} skipped"
    message += "."

    return {
        "success": True,
        "data": {
            "message": message,
            "summary": {
                "total": len(results),
                "successful": successful,
                "errors": len(errors),
                "skipped": skipped,
            },
            "details": errors[:MAX_ERROR_DETAILS],
            "totalObjects": len(all_objects),
            "processedObjects": len(to_process),
        },
    }
