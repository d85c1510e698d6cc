# S3 MANAGER BACKEND

# COMPONENT: STORAGE CLASS ROUTES
# REQUIREMENTS SATISFIED: storage tiering for objects, folders and whole buckets
"""
s3manager/api/routers/storage_class.py

Endpoints:
    - PUT  /api/s3/objects/{bucket}/{key}/storage-class    : one object
    - POST /api/s3/objects/{bucket}/bulk-storage-class     : everything under a prefix
    - PUT  /api/s3/buckets/{bucket}/storage-class          : everything in a bucket
"""
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from s3manager.auth.dependencies import get_current_user
from s3manager.aws import clients
from s3manager.schemas.models import BulkStorageClassRequest, StorageClassRequest
from s3manager.services import storage_class as storage_class_service

router = APIRouter(prefix="/api/s3", tags=["Storage class"])


@router.put("/objects/{bucket}/{key:path}/storage-class")
def change_object_storage_class(bucket: str, key: str, body: StorageClassRequest,
                                user: dict = Depends(get_current_user)):
    client = clients.client_for_user(user)
    return storage_class_service.change_object_storage_class(client, bucket, key, body.storage_class)


@router.post("/objects/{bucket}/bulk-storage-class")
def change_prefix_storage_class(bucket: str, body: BulkStorageClassRequest,
                                user: dict = Depends(get_current_user)):
    client = clients.client_for_user(user)
    result = storage_class_service.change_prefix_storage_class(client, bucket, body.prefix, body.storage_class)
    return JSONResponse(result, status_code=400 if "error" in result else 200)


@router.put("/buckets/{bucket}/storage-class")
def change_bucket_storage_class(bucket: str, body: StorageClassRequest,
                                user: dict = Depends(get_current_user)):
    client = clients.client_for_user(user)
    return storage_class_service.change_bucket_storage_class(client, bucket, body.storage_class)
