# S3 MANAGER BACKEND

# COMPONENT: OBJECT ROUTES
# REQUIREMENTS SATISFIED: object browsing, deletion, folder creation and rename
"""
s3manager/api/routers/objects.py

Endpoints:
    - GET    /api/s3/objects         : one page of a bucket listing
    - DELETE /api/s3/objects         : delete one object (s3:write)
    - POST   /api/s3/folders/create  : create an empty "folder/" marker
    - POST   /api/s3/objects/rename  : copy to the new key, then delete the old one

Listings and folder creation go through a bucket-region client because the
browser may open buckets that live outside the user's home region.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from s3manager.auth.dependencies import get_current_user, require_aws_credentials, require_permission
from s3manager.aws import clients
from s3manager.schemas.models import CreateFolderRequest, DeleteObjectRequest, RenameObjectRequest
from s3manager.services import objects as object_service

router = APIRouter(prefix="/api/s3", tags=["Objects"])


@router.get("/objects")
def list_objects(
    bucket: str = Query(..., min_length=1),
    prefix: Optional[str] = None,
    max_keys: int = Query(100, alias="maxKeys", ge=1, le=1000),
    continuation_token: Optional[str] = Query(None, alias="continuationToken"),
    delimiter: Optional[str] = None,
    user: dict = Depends(get_current_user),
):
    client = clients.client_for_bucket(user, bucket)
    return object_service.list_objects(client, bucket, prefix, max_keys, continuation_token, delimiter)


@router.delete("/objects")
def delete_object(body: DeleteObjectRequest, user: dict = Depends(require_permission("s3:write"))):
    client = clients.client_for_bucket(user, body.bucket)
    return object_service.delete_object(client, body.bucket, body.key)


@router.post("/folders/create")
def create_folder(body: CreateFolderRequest, user: dict = Depends(get_current_user)):
    client = clients.client_for_bucket(user, body.bucket)
    return object_service.create_folder(client, body.bucket, body.folder_name, body.prefix)


@router.post("/objects/rename")
def rename_object(body: RenameObjectRequest, user: dict = Depends(require_aws_credentials)):
    client = clients.client_for_user(user)
    return object_service.rename_object(client, body.bucket, body.old_key, body.new_key)
