# S3 MANAGER BACKEND

# COMPONENT: ARCHIVE RESTORE ROUTES
# REQUIREMENTS SATISFIED: single and bulk Glacier / Deep Archive restores with status
"""
s3manager/api/routers/restore.py

Endpoints:
    - POST /api/s3/objects/{bucket}/{key}/restore  : start a restore
    - GET  /api/s3/objects/{bucket}/{key}/restore  : restore status of one object
    - POST /api/s3/objects/{bucket}/bulk-restore   : restore a prefix or a key list
    - GET  /api/s3/objects/{bucket}/bulk-restore   : restore status under a prefix

SDK failures are mapped to specific statuses with an ``errorCode`` the
frontend switches on (RESTORE_IN_PROGRESS, OBJECT_NOT_FOUND ...).
"""
from botocore.exceptions import ClientError
from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from s3manager.auth.dependencies import get_current_user
from s3manager.aws import clients
from s3manager.schemas.models import BulkRestoreRequest, RestoreRequest
from s3manager.services import restore as restore_service
from s3manager.utils.logging import get_logger

logger = get_logger("restore.routes")

router = APIRouter(prefix="/api/s3", tags=["Restore"])


@router.post("/objects/{bucket}/bulk-restore")
def bulk_restore(bucket: str, body: BulkRestoreRequest, user: dict = Depends(get_current_user)):
    client = clients.client_for_user(user)
    try:
        return restore_service.bulk_restore(
            client, bucket, body.prefix, body.days, body.tier, body.description, body.object_keys
        )
    except ClientError as e:
        logger.error("Bulk restore failed bucket=%s error=%s", bucket, e)
        status, payload = restore_service.restore_error_body(
            e, bucket, fallback="Bulk restoration failed", fallback_code="BULK_RESTORATION_ERROR"
        )
        return JSONResponse(payload, status_code=status)


@router.get("/objects/{bucket}/bulk-restore")
def bulk_restore_status(bucket: str, prefix: str = "", limit: int = Query(100, ge=1),
                        user: dict = Depends(get_current_user)):
    client = clients.client_for_user(user)
    try:
        return restore_service.bulk_restore_status(client, bucket, prefix, limit)
    except ClientError as e:
        logger.error("Bulk restore status failed bucket=%s error=%s", bucket, e)
        return JSONResponse(
            {
                "success": False,
                "error": "Failed to get bulk restoration status",
                "details": str(e),
                "errorCode": "STATUS_CHECK_ERROR",
            },
            status_code=500,
        )


@router.post("/objects/{bucket}/{key:path}/restore")
def restore_object(bucket: str, key: str, body: RestoreRequest, user: dict = Depends(get_current_user)):
    client = clients.client_for_user(user)
    try:
        return restore_service.restore_object(client, bucket, key, body.days, body.tier, body.description)
    except ClientError as e:
        logger.error("Restore failed bucket=%s key=%s error=%s", bucket, key, e)
        status, payload = restore_service.restore_error_body(e, bucket, key)
        return JSONResponse(payload, status_code=status)


@router.get("/objects/{bucket}/{key:path}/restore")
def restore_status(bucket: str, key: str, user: dict = Depends(get_current_user)):
    client = clients.client_for_user(user)
    try:
        return restore_service.restore_status(client, bucket, key)
    except ClientError as e:
        logger.error("Restore status failed bucket=%s key=%s error=%s", bucket, key, e)
        return JSONResponse(
            {
                "success": False,
                "error": "Failed to get restoration status",
                "details": str(e),
                "errorCode": "STATUS_CHECK_ERROR",
            },
            status_code=500,
        )
