# S3 MANAGER BACKEND

# COMPONENT: OBJECT SERVICE
# REQUIREMENTS SATISFIED: object listing, deletion, folders and rename
"""
s3manager/services/objects.py

Object-level operations on a single bucket. Every function takes an
already-built boto3 S3 client (see ``s3manager.aws.clients``) and returns
plain dicts ready for JSON.

S3 has no folders: a "folder" is an empty object whose key ends in "/",
and a rename is a copy followed by a delete.
"""
from typing import Any, Dict, Iterator, Optional
from botocore.exceptions import ClientError

from s3manager.aws.errors import is_not_found
from s3manager.errors import Conflict, NotFound, ValidationFailed
from s3manager.utils.formatting import iso
from s3manager.utils.logging import get_logger

logger = get_logger("objects")

DIRECTORY_CONTENT_TYPE = "application/x-directory"


def is_directory_marker(key: Optional[str]) -> bool:
    return not key or key.endswith("/")


def iter_objects(client, bucket: str, prefix: str = "") -> Iterator[Dict[str, Any]]:
    """Every object under ``prefix``, following continuation tokens."""
    paginator = client.get_paginator("list_objects_v2")
    params: Dict[str, Any] = {"Bucket": bucket}
    if prefix:
        params["Prefix"] = prefix
    for page in paginator.paginate(**params):
        for obj in page.get("Contents", []):
            yield obj


def list_objects(client, bucket: str, prefix: str = None, max_keys: int = 100,
                 continuation_token: str = None, delimiter: str = None) -> Dict[str, Any]:
    params: Dict[str, Any] = {"Bucket": bucket, "MaxKeys": max_keys}
    if prefix:
        params["Prefix"] = prefix
    if continuation_token:
        params["ContinuationToken"] = continuation_token
    if delimiter:
        params["Delimiter"] = delimiter

    response = client.list_objects_v2(**params)
    objects = [
        {
            "Key": obj.get("Key"),
            "LastModified": iso(obj.get("LastModified")),
            "Size": obj.get("Size", 0),
            "StorageClass": obj.get("StorageClass") or "STANDARD",
            "ETag": obj.get("ETag"),
        }
        for obj in response.get("Contents", [])
    ]
    folders = [p["Prefix"] for p in response.get("CommonPrefixes", []) if p.get("Prefix")]
    return {
        "success": True,
        "objects": objects,
        "folders": folders,
        "bucket": bucket,
        "prefix": prefix,
        "total": len(objects),
        "isTruncated": bool(response.get("IsTruncated")),
        "nextContinuationToken": response.get("NextContinuationToken"),
    }


def delete_object(client, bucket: str, key: str) -> Dict[str, Any]:
    client.delete_object(Bucket=bucket, Key=key)
    logger.info("Deleted object bucket=%s key=%s", bucket, key)
    return {
        "success": True,
        "message": f"Object '{key}' deleted successfully from bucket '{bucket}'",
    }


def create_folder(client, bucket: str, folder_name: str, prefix: str = "") -> Dict[str, Any]:
    name = (folder_name or "").strip()
    if not name:
        raise ValidationFailed("Missing required fields: bucket, folderName")
    folder_key = f"{prefix or ''}{name}/"
    client.put_object(Bucket=bucket, Key=folder_key, Body=b"", ContentType=DIRECTORY_CONTENT_TYPE)
    logger.info("Created folder bucket=%s key=%s", bucket, folder_key)
    return {"success": True, "message": "Folder created successfully", "folderKey": folder_key}


def copy_source(bucket: str, key: str) -> Dict[str, str]:
    # botocore URL-encodes the dict form into the x-amz-copy-source header
    return {"Bucket": bucket, "Key": key}


def rename_object(client, bucket: str, old_key: str, new_key: str) -> Dict[str, Any]:
    if old_key == new_key:
        raise ValidationFailed("Old key and new key cannot be the same")

    try:
        client.head_object(Bucket=bucket, Key=old_key)
    except ClientError as e:
        if is_not_found(e):
            raise NotFound("Source object not found")
        raise

    try:
        client.head_object(Bucket=bucket, Key=new_key)
    except ClientError as e:
        if not is_not_found(e):
            raise
    else:
        raise Conflict("Destination object already exists")

    client.copy_object(
        Bucket=bucket,
        Key=new_key,
        CopySource=copy_source(bucket, old_key),
        MetadataDirective="COPY",
    )
    client.delete_object(Bucket=bucket, Key=old_key)
    logger.info("Renamed object bucket=%s old=%s new=%s", bucket, old_key, new_key)
    return {
        "success": True,
        "message": "Object renamed successfully",
        "oldKey": old_key,
        "newKey": new_key,
    }
