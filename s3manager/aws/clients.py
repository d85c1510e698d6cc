# S3 MANAGER BACKEND

# COMPONENT: AWS CLIENT MANAGER
# REQUIREMENTS SATISFIED: per-user, per-region boto3 clients with caching
"""
s3manager/aws/clients.py

Creates boto3 clients for the signed-in user and caches the S3 ones.

Every session token carries the user's region and (usually) their access
keys. Building a boto3 client is not free, so S3 clients are cached by
region plus a short prefix of the access key. When the session has no keys
the default boto3 credential chain is used (environment, shared config,
SSO cache, instance role), which is what makes the app usable on a Lambda
with an execution role.

Key features:
    - Cache key "<region>:<first 8 chars of key>", "<region>:profile:<name>"
      or "<region>:default"
    - S3 clients always sign with SigV4 so presigned URLs work in every region
    - Bucket-region detection through GetBucketLocation, falling back to the
      user's default client when the lookup fails
    - Other services (STS, Cost Explorer, SSO) get fresh, uncached clients
"""
import threading
from typing import Any, Dict, List, Optional

import boto3
from botocore.client import Config
from botocore.exceptions import BotoCoreError, ClientError

from s3manager.utils import settings
from s3manager.utils.logging import get_logger

logger = get_logger("aws.clients")

# GetBucketLocation reports us-east-1 as an empty constraint and the oldest
# Ireland buckets as "EU"
_LEGACY_LOCATIONS = {None: "us-east-1", "": "us-east-1", "EU": "eu-west-1"}


def session_credentials(user: Dict[str, Any]) -> Optional[Dict[str, str]]:
    """Access keys stored in the session, or None to use the default chain."""
    creds = (user or {}).get("awsCredentials") or {}
    if not creds.get("accessKeyId"):
        return None
    return creds


def user_region(user: Dict[str, Any]) -> str:
    user = user or {}
    return user.get("awsRegion") or user.get("region") or settings.default_region()


def create_client(service: str, region: str, credentials: Optional[Dict[str, str]] = None,
                  profile: Optional[str] = None):
    """Build an uncached boto3 client."""
    kwargs: Dict[str, Any] = {"region_name": region}
    if service == "s3":
        kwargs["config"] = Config(signature_version="s3v4")
    if credentials:
        kwargs["aws_access_key_id"] = credentials["accessKeyId"]
        kwargs["aws_secret_access_key"] = credentials.get("secretAccessKey")
        if credentials.get("sessionToken"):
            kwargs["aws_session_token"] = credentials["sessionToken"]
        return boto3.client(service, **kwargs)
    if profile:
        return boto3.session.Session(profile_name=profile).client(service, **kwargs)
    return boto3.client(service, **kwargs)


class ClientManager:
    def __init__(self):
        self._clients: Dict[str, Any] = {}
        self._lock = threading.Lock()

    @staticmethod
    def client_key(region: str, credentials: Optional[Dict[str, str]] = None,
                   profile: Optional[str] = None) -> str:
        if credentials:
            return f"{region}:{credentials['accessKeyId'][:8]}"
        if profile:
            return f"{region}:profile:{profile}"
        return f"{region}:default"

    def get_client(self, region: str, credentials: Optional[Dict[str, str]] = None,
                   profile: Optional[str] = None):
        """Cached S3 client for the given region and identity."""
        key = self.client_key(region, credentials, profile)
        with self._lock:
            client = self._clients.get(key)
            if client is None:
                logger.debug("Creating S3 client key=%s", key)
                client = create_client("s3", region, credentials, profile)
                self._clients[key] = client
            return client

    def client_for_user(self, user: Dict[str, Any], service: str = "s3"):
        region = user_region(user)
        credentials = session_credentials(user)
        if service != "s3":
            return create_client(service, region, credentials)
        return self.get_client(region, credentials)

    def bucket_region(self, user: Dict[str, Any], bucket: str) -> str:
        response = self.client_for_user(user).get_bucket_location(Bucket=bucket)
        constraint = response.get("LocationConstraint")
        return _LEGACY_LOCATIONS.get(constraint, constraint)

    def client_for_bucket(self, user: Dict[str, Any], bucket: str):
        """S3 client pointed at the region the bucket actually lives in."""
        try:
            region = self.bucket_region(user, bucket)
        except (ClientError, BotoCoreError) as e:
            logger.warning("Bucket region lookup failed bucket=%s error=%s; using default client", bucket, e)
            return self.client_for_user(user)
        return self.get_client(region, session_credentials(user))

    def clear_cache(self) -> None:
        with self._lock:
            self._clients.clear()

    def stats(self) -> Dict[str, Any]:
        with self._lock:
            keys = list(self._clients)
        regions: List[str] = []
        for key in keys:
            region = key.split(":")[0]
            if region not in regions:
                regions.append(region)
        return {"totalClients": len(keys), "regions": regions}


client_manager = ClientManager()


def client_for_user(user: Dict[str, Any], service: str = "s3"):
    return client_manager.client_for_user(user, service)


def client_for_bucket(user: Dict[str, Any], bucket: str):
    return client_manager.client_for_bucket(user, bucket)
