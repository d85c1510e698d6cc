# S3 MANAGER BACKEND

# COMPONENT: API SCHEMAS AND DATA MODELS
# REQUIREMENTS SATISFIED: request validation for every JSON endpoint
"""
s3manager/schemas/models.py

Pydantic request models for the S3 Manager API.

The frontend speaks camelCase, so every model derives from ``CamelModel``:
attributes are snake_case in Python and accepted as camelCase on the wire
(``bucket_name`` <-> ``bucketName``). Validation failures are turned into
400 "Invalid request data" responses by the global exception handlers.

Bucket-name rules follow the S3 naming rules the console enforces:
3-63 characters, lowercase letters, digits and hyphens, starting and
ending with a letter or digit, and never shaped like an IPv4 address.
"""
from __future__ import annotations

import re
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

_BUCKET_NAME_RE = re.compile(r"^[a-z0-9][a-z0-9-]*[a-z0-9]$")
_IP_RE = re.compile(r"^\d+\.\d+\.\d+\.\d+$")


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AuthType(str, Enum):
    credentials = "credentials"
    sso = "sso"


class RestoreTier(str, Enum):
    expedited = "Expedited"
    standard = "Standard"
    bulk = "Bulk"


# ----------------------------------------------------------------------
# Auth
# ----------------------------------------------------------------------


class LoginRequest(CamelModel):
    auth_type: AuthType
    access_key_id: Optional[str] = None
    secret_access_key: Optional[str] = None
    region: str = "us-east-1"
    sso_start_url: Optional[str] = None
    sso_region: Optional[str] = None

    @field_validator("sso_start_url")
    @classmethod
    def _start_url_is_http(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.startswith(("https://", "http://")):
            raise ValueError("ssoStartUrl must be a URL")
        return v


class SSOPollRequest(CamelModel):
    device_code: str
    sso_start_url: str
    sso_region: str
    client_id: str
    client_secret: str
    account_id: Optional[str] = None
    role_name: Optional[str] = None


class DemoLoginRequest(CamelModel):
    region: Optional[str] = None
    access_key_id: Optional[str] = None
    secret_access_key: Optional[str] = None


# ----------------------------------------------------------------------
# Buckets and objects
# ----------------------------------------------------------------------


class CreateBucketRequest(CamelModel):
    bucket_name: str = Field(..., min_length=3, max_length=63)
    region: str = "us-east-1"

    @field_validator("bucket_name")
    @classmethod
    def _valid_bucket_name(cls, v: str) -> str:
        if not _BUCKET_NAME_RE.match(v):
            raise ValueError(
                "Bucket name must start and end with lowercase letter or number, and can contain hyphens"
            )
        if ".." in v:
            raise ValueError("Bucket name cannot contain consecutive periods")
        if ".-" in v or "-." in v:
            raise ValueError("Bucket name cannot contain period-dash or dash-period sequences")
        if _IP_RE.match(v):
            raise ValueError("Bucket name cannot be formatted as an IP address")
        return v


class DeleteBucketRequest(CamelModel):
    bucket_name: str = Field(..., min_length=3, max_length=63)


class DeleteObjectRequest(CamelModel):
    bucket: str = Field(..., min_length=1)
    key: str = Field(..., min_length=1)


class CreateFolderRequest(CamelModel):
    bucket: str = Field(..., min_length=1)
    folder_name: str
    prefix: str = ""


class RenameObjectRequest(CamelModel):
    bucket: str = Field(..., min_length=1)
    old_key: str = Field(..., min_length=1)
    new_key: str = Field(..., min_length=1)


# ----------------------------------------------------------------------
# Transfers
# ----------------------------------------------------------------------


class UploadRequest(CamelModel):
    bucket: str = Field(..., min_length=1)
    key: str = Field(..., min_length=1)
    content_type: Optional[str] = None
    is_multipart: bool = False
    expires_in: int = Field(3600, ge=1, le=604800)


class MultipartPartUrlRequest(CamelModel):
    bucket: str = Field(..., min_length=1)
    key: str = Field(..., min_length=1)
    upload_id: str = Field(..., min_length=1)
    part_number: int = Field(..., ge=1, le=10000)
    expires_in: int = Field(3600, ge=1, le=604800)


class CompletedPart(BaseModel):
    PartNumber: int = Field(..., ge=1, le=10000)
    ETag: str


class MultipartCompleteRequest(CamelModel):
    bucket: str = Field(..., min_length=1)
    key: str = Field(..., min_length=1)
    upload_id: str = Field(..., min_length=1)
    parts: List[CompletedPart] = Field(..., min_length=1)


class MultipartAbortRequest(CamelModel):
    bucket: str = Field(..., min_length=1)
    key: str = Field(..., min_length=1)
    upload_id: str = Field(..., min_length=1)


# ----------------------------------------------------------------------
# Storage class and restore
# ----------------------------------------------------------------------


class StorageClassRequest(CamelModel):
    storage_class: str = Field(..., min_length=1)


class BulkStorageClassRequest(CamelModel):
    prefix: str = Field(..., min_length=1)
    storage_class: str = Field(..., min_length=1)


class RestoreRequest(CamelModel):
    days: int = 1
    tier: str = RestoreTier.standard.value
    description: str = "Object restoration requested"


class BulkRestoreRequest(CamelModel):
    prefix: str = ""
    days: int = 1
    tier: str = RestoreTier.standard.value
    description: str = "Bulk restoration requested"
    object_keys: List[str] = Field(default_factory=list)
