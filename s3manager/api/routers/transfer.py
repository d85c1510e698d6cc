# S3 MANAGER BACKEND

# COMPONENT: TRANSFER ROUTES
# REQUIREMENTS SATISFIED: browser uploads and downloads, direct and proxied
"""
s3manager/api/routers/transfer.py

Endpoints:
    - POST /api/s3/upload                      : presigned PUT, or start a multipart upload
    - POST /api/s3/upload/multipart/part-url   : presigned URL for one part
    - POST /api/s3/upload/multipart/complete   : stitch uploaded parts together
    - POST /api/s3/upload/multipart/abort      : discard an unfinished upload
    - POST /api/s3/upload-proxy                : multipart form upload through this server
    - GET  /api/s3/download                    : presigned GET (download or inline view)
"""
from fastapi import APIRouter, Depends, File, Form, Query, UploadFile

from s3manager.auth.dependencies import require_aws_credentials, require_permission
from s3manager.aws import clients
from s3manager.schemas.models import (
    MultipartAbortRequest,
    MultipartCompleteRequest,
    MultipartPartUrlRequest,
    UploadRequest,
)
from s3manager.services.storage import Storage
from s3manager.utils.logging import get_logger

logger = get_logger("transfer")

router = APIRouter(prefix="/api/s3", tags=["Transfer"])

can_write = require_permission("s3:write")


def _storage_for(user: dict, bucket: str) -> Storage:
    return Storage(clients.client_for_bucket(user, bucket))


@router.post("/upload")
def start_upload(body: UploadRequest, user: dict = Depends(can_write)):
    storage = _storage_for(user, body.bucket)
    logger.info("Upload request bucket=%s key=%s multipart=%s", body.bucket, body.key, body.is_multipart)

    if body.is_multipart:
        upload_id = storage.start_multipart(body.bucket, body.key, body.content_type)
        return {
            "success": True,
            "uploadId": upload_id,
            "bucket": body.bucket,
            "key": body.key,
            "isMultipart": True,
        }

    url = storage.presign_upload(body.bucket, body.key, body.content_type, body.expires_in)
    return {
        "success": True,
        "uploadUrl": url,
        "bucket": body.bucket,
        "key": body.key,
        "contentType": body.content_type,
        "expiresIn": body.expires_in,
        "isMultipart": False,
        "instructions": {
            "method": "PUT",
            "headers": {"Content-Type": body.content_type} if body.content_type else {},
            "note": "Use the presigned URL to upload your file directly to S3",
        },
    }


@router.post("/upload/multipart/part-url")
def multipart_part_url(body: MultipartPartUrlRequest, user: dict = Depends(can_write)):
    storage = _storage_for(user, body.bucket)
    url = storage.presign_part(body.bucket, body.key, body.upload_id, body.part_number, body.expires_in)
    return {
        "success": True,
        "uploadUrl": url,
        "partNumber": body.part_number,
        "uploadId": body.upload_id,
        "expiresIn": body.expires_in,
    }


@router.post("/upload/multipart/complete")
def multipart_complete(body: MultipartCompleteRequest, user: dict = Depends(can_write)):
    storage = _storage_for(user, body.bucket)
    parts = [p.model_dump() for p in body.parts]
    result = storage.complete_multipart(body.bucket, body.key, body.upload_id, parts)
    logger.info("Multipart upload completed bucket=%s key=%s parts=%d", body.bucket, body.key, len(parts))
    return {
        "success": True,
        "bucket": body.bucket,
        "key": body.key,
        "etag": result.get("ETag"),
        "location": result.get("Location"),
        "versionId": result.get("VersionId"),
    }


@router.post("/upload/multipart/abort")
def multipart_abort(body: MultipartAbortRequest, user: dict = Depends(can_write)):
    _storage_for(user, body.bucket).abort_multipart(body.bucket, body.key, body.upload_id)
    logger.info("Multipart upload aborted bucket=%s key=%s", body.bucket, body.key)
    return {"success": True, "bucket": body.bucket, "key": body.key, "uploadId": body.upload_id}


@router.post("/upload-proxy")
async def upload_proxy(
    file: UploadFile = File(...),
    bucket: str = Form(..., min_length=1),
    key: str = Form(..., min_length=1),
    user: dict = Depends(can_write),
):
    data = await file.read()
    logger.info("Proxy upload bucket=%s key=%s size=%d", bucket, key, len(data))
    result = _storage_for(user, bucket).put_bytes(bucket, key, data, file.content_type)
    return {
        "success": True,
        "bucket": bucket,
        "key": key,
        "etag": result.get("ETag"),
        "versionId": result.get("VersionId"),
        "size": len(data),
        "contentType": file.content_type,
    }


@router.get("/download")
def download_url(
    bucket: str = Query(..., min_length=1),
    key: str = Query(..., min_length=1),
    expires_in: int = Query(3600, alias="expiresIn", ge=1, le=604800),
    view: bool = False,
    user: dict = Depends(require_aws_credentials),
):
    storage = Storage(clients.client_for_user(user))
    url = storage.presign_download(bucket, key, expires_in, inline=view)
    return {
        "success": True,
        "data": {
            "viewUrl" if view else "downloadUrl": url,
            "bucket": bucket,
            "key": key,
            "expiresIn": expires_in,
            "isView": view,
            "note": (
                "Use this URL to view the file directly in browser"
                if view
                else "Use this URL to download the file directly from S3"
            ),
        },
    }
