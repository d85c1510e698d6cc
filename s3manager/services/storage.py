# S3 MANAGER BACKEND

# COMPONENT: TRANSFER SERVICE
# REQUIREMENTS SATISFIED: presigned uploads/downloads, multipart lifecycle, proxied upload
"""
s3manager/services/storage.py

Moves bytes between the browser and S3.

Most transfers never touch this server: the browser asks for a presigned
URL and talks to S3 directly. Large files go through the multipart
lifecycle (create -> presign each part -> complete, or abort). The proxy
upload exists for environments where the bucket has no CORS rule for the
frontend origin and the browser cannot PUT to S3 itself.

All URLs are signed with the client handed in, which is why callers pass a
bucket-region client from ``client_for_bucket``; a URL signed for the wrong
region gets a 301 from S3.
"""
import posixpath
from typing import Any, Dict, List, Optional


class Storage:
    def __init__(self, client):
        self._client = client

    def presign_upload(self, bucket: str, key: str, content_type: Optional[str] = None,
                       expires: int = 3600) -> str:
        params = {"Bucket": bucket, "Key": key}
        if content_type:
            params["ContentType"] = content_type
        return self._client.generate_presigned_url("put_object", Params=params, ExpiresIn=expires)

    def presign_download(self, bucket: str, key: str, expires: int = 3600, inline: bool = False) -> str:
        """
        Presigned GET. Unless ``inline`` is set the URL forces a download
        named after the last path segment of the key.
        """
        params = {"Bucket": bucket, "Key": key}
        if not inline:
            filename = posixpath.basename(key) or "download"
            params["ResponseContentDisposition"] = f'attachment; filename="{filename}"'
        return self._client.generate_presigned_url("get_object", Params=params, ExpiresIn=expires)

    def start_multipart(self, bucket: str, key: str, content_type: Optional[str] = None) -> str:
        params = {"Bucket": bucket, "Key": key}
        if content_type:
            params["ContentType"] = content_type
        return self._client.create_multipart_upload(**params)["UploadId"]

    def presign_part(self, bucket: str, key: str, upload_id: str, part_number: int,
                     expires: int = 3600) -> str:
        return self._client.generate_presigned_url(
            "upload_part",
            Params={"Bucket": bucket, "Key": key, "UploadId": upload_id, "PartNumber": part_number},
            ExpiresIn=expires,
        )

    def complete_multipart(self, bucket: str, key: str, upload_id: str,
                           parts: List[Dict[str, Any]]) -> Dict[str, Any]:
        ordered = sorted(parts, key=lambda p: p["PartNumber"])
        return self._client.complete_multipart_upload(
            Bucket=bucket,
            Key=key,
            UploadId=upload_id,
            MultipartUpload={"Parts": [{"PartNumber": p["PartNumber"], "ETag": p["ETag"]} for p in ordered]},
        )

    def abort_multipart(self, bucket: str, key: str, upload_id: str) -> None:
        self._client.abort_multipart_upload(Bucket=bucket, Key=key, UploadId=upload_id)

    def put_bytes(self, bucket: str, key: str, data: bytes, content_type: Optional[str] = None) -> Dict[str, Any]:
        """
        Store arbitrary bytes server-side (the upload-proxy path).
        """
        params = {"Bucket": bucket, "Key": key, "Body": data, "ContentLength": len(data)}
        if content_type:
            params["ContentType"] = content_type
        return self._client.put_object(**params)
