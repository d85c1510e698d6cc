# S3 MANAGER BACKEND

# COMPONENT: BUCKET SERVICE
# REQUIREMENTS SATISFIED: bucket listing with usage summary, bucket create/delete
"""
s3manager/services/buckets.py

Bucket-level operations.

The bucket list is enriched with a cheap usage summary: only the first page
of ListObjectsV2 (up to 1000 keys) is read per bucket, so counts and sizes
for large buckets are lower bounds and ``hasMoreObjects`` tells the UI to
render them with a "+". Buckets are summarised concurrently since each one
costs two round trips.
"""
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List

from botocore.exceptions import BotoCoreError, ClientError

from s3manager.utils.formatting import format_bytes, iso
from s3manager.utils.logging import get_logger

logger = get_logger("buckets")

SUMMARY_PAGE_SIZE = 1000
MAX_SUMMARY_WORKERS = 10


def summarize_objects(contents: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Count, total size and storage-class histogram for one listing page."""
    classes = Counter(obj.get("StorageClass") or "STANDARD" for obj in contents)
    total_size = sum(obj.get("Size") or 0 for obj in contents)
    primary = classes.most_common(1)[0][0] if classes else "STANDARD"
    return {
        "Objects": len(contents),
        "Size": format_bytes(total_size) if total_size > 0 else "Empty",
        "StorageClass": primary,
        "StorageClasses": dict(classes),
    }


def bucket_summary(client, bucket: Dict[str, Any], region: str) -> Dict[str, Any]:
    name = bucket.get("Name")
    entry = {"Name": name, "CreationDate": iso(bucket.get("CreationDate")), "Region": region}
    try:
        client.head_bucket(Bucket=name)
    except (ClientError, BotoCoreError) as e:
        logger.warning("Head bucket failed bucket=%s error=%s", name, e)
        entry.update({"Objects": 0, "Size": "Access Denied", "error": "Unable to access bucket metadata"})
        return entry

    entry.update(summarize_objects([]))
    entry["hasMoreObjects"] = False
    try:
        page = client.list_objects_v2(Bucket=name, MaxKeys=SUMMARY_PAGE_SIZE)
    except (ClientError, BotoCoreError) as e:
        logger.warning("Could not list objects bucket=%s error=%s", name, e)
        return entry
    entry.update(summarize_objects(page.get("Contents", [])))
    entry["hasMoreObjects"] = bool(page.get("IsTruncated"))
    return entry


def list_buckets(client, region: str) -> List[Dict[str, Any]]:
    buckets = client.list_buckets().get("Buckets", [])
    if not buckets:
        return []
    workers = min(MAX_SUMMARY_WORKERS, len(buckets))
    with ThreadPoolExecutor(max_workers=workers) as pool:
        return list(pool.map(lambda b: bucket_summary(client, b, region), buckets))


def create_bucket(client, name: str, region: str = "us-east-1") -> Dict[str, Any]:
    params: Dict[str, Any] = {"Bucket": name}
    # us-east-1 rejects an explicit LocationConstraint
    if region != "us-east-1":
        params["CreateBucketConfiguration"] = {"LocationConstraint": region}
    client.create_bucket(**params)
    logger.info("Created bucket name=%s region=%s", name, region)
    return {"name": name, "region": region}


def delete_bucket(client, name: str) -> None:
    client.delete_bucket(Bucket=name)
    logger.info("Deleted bucket name=%s", name)
