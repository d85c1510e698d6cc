# S3 MANAGER BACKEND

# COMPONENT: BUCKET ROUTES
# REQUIREMENTS SATISFIED: bucket browsing, creation and deletion
"""
s3manager/api/routers/buckets.py

Endpoints:
    - GET    /api/s3/buckets : every bucket with a first-page usage summary
    - POST   /api/s3/buckets : create a bucket (s3:write)
    - DELETE /api/s3/buckets : delete an empty bucket (s3:write)
"""
from fastapi import APIRouter, Depends

from s3manager.auth.dependencies import get_current_user, require_permission
from s3manager.aws import clients
from s3manager.schemas.models import CreateBucketRequest, DeleteBucketRequest
from s3manager.services import buckets as bucket_service
from s3manager.utils.formatting import iso, utcnow

router = APIRouter(prefix="/api/s3", tags=["Buckets"])


@router.get("/buckets")
def list_buckets(user: dict = Depends(get_current_user)):
    client = clients.client_for_user(user)
    return {"success": True, "buckets": bucket_service.list_buckets(client, clients.user_region(user))}


@router.post("/buckets")
def create_bucket(body: CreateBucketRequest, user: dict = Depends(require_permission("s3:write"))):
    client = clients.client_for_user(user)
    created = bucket_service.create_bucket(client, body.bucket_name, body.region)
    created["createdAt"] = iso(utcnow())
    return {
        "success": True,
        "bucket": created,
        "message": f"Bucket '{body.bucket_name}' created successfully",
    }


@router.delete("/buckets")
def delete_bucket(body: DeleteBucketRequest, user: dict = Depends(require_permission("s3:write"))):
    client = clients.client_for_user(user)
    bucket_service.delete_bucket(client, body.bucket_name)
    return {"success": True, "message": f"Bucket '{body.bucket_name}' deleted successfully"}
