# ---------------------------------------------------------------------------
# API Tests: /api/s3/buckets
#
# The S3 client is the MagicMock from the `s3` fixture, so these tests pin
# the HTTP contract: response envelopes, usage summaries, validation and
# permission failures, and SDK errors rendered as "S3 Error ..." strings.
# ---------------------------------------------------------------------------
from datetime import datetime, timezone


def test_list_buckets_with_summary(auth_client, s3, client_error):
    s3.list_buckets.return_value = {"Buckets": [
        {"Name": "photos", "CreationDate": datetime(2023, 5, 1, tzinfo=timezone.utc)},
        {"Name": "locked", "CreationDate": datetime(2023, 6, 1, tzinfo=timezone.utc)},
    ]}

    def head(Bucket):
        if Bucket == "locked":
            raise client_error("AccessDenied", status=403)

    s3.head_bucket.side_effect = head
    s3.list_objects_v2.return_value = {
        "Contents": [
            {"Key": "a.jpg", "Size": 1024, "StorageClass": "STANDARD"},
            {"Key": "b.jpg", "Size": 512, "StorageClass": "STANDARD"},
            {"Key": "c.jpg", "Size": 0, "StorageClass": "GLACIER"},
        ],
        "IsTruncated": True,
    }

    res = auth_client.get("/api/s3/buckets")

    assert res.status_code == 200
    photos, locked = res.json()["buckets"]
    assert photos["Name"] == "photos"
    assert photos["CreationDate"] == "2023-05-01T00:00:00Z"
    assert photos["Objects"] == 3
    assert photos["Size"] == "1.5 KB"
    assert photos["StorageClass"] == "STANDARD"
    assert photos["StorageClasses"] == {"STANDARD": 2, "GLACIER": 1}
    assert photos["hasMoreObjects"] is True
    assert locked["Size"] == "Access Denied"
    assert locked["error"] == "Unable to access bucket metadata"


def test_list_buckets_empty_bucket(auth_client, s3):
    s3.list_buckets.return_value = {"Buckets": [{"Name": "empty"}]}
    s3.list_objects_v2.return_value = {}

    bucket = auth_client.get("/api/s3/buckets").json()["buckets"][0]
    assert bucket["Size"] == "Empty"
    assert bucket["Objects"] == 0


def test_list_buckets_sdk_failure(auth_client, s3, client_error):
    s3.list_buckets.side_effect = client_error("AccessDenied", status=403, message="Access Denied")

    res = auth_client.get("/api/s3/buckets")

    assert res.status_code == 500
    assert res.json()["success"] is False
    assert res.json()["error"] == "S3 Error 403: AccessDenied - Access Denied"


def test_create_bucket_outside_us_east_1(auth_client, s3):
    res = auth_client.post("/api/s3/buckets", json={"bucketName": "my-new-bucket", "region": "eu-west-1"})

    assert res.status_code == 200
    body = res.json()
    assert body["bucket"]["name"] == "my-new-bucket"
    assert body["bucket"]["createdAt"].endswith("Z")
    s3.create_bucket.assert_called_once_with(
        Bucket="my-new-bucket", CreateBucketConfiguration={"LocationConstraint": "eu-west-1"}
    )


def test_create_bucket_in_us_east_1_has_no_constraint(auth_client, s3):
    auth_client.post("/api/s3/buckets", json={"bucketName": "plain-bucket"})
    s3.create_bucket.assert_called_once_with(Bucket="plain-bucket")


def test_create_bucket_rejects_bad_names(auth_client, s3):
    for name in ("ab", "Upper-Case", "-leading", "192.168.1.1"):
        res = auth_client.post("/api/s3/buckets", json={"bucketName": name})
        assert res.status_code == 400, name
        assert res.json()["error"] == "Invalid request data"
    s3.create_bucket.assert_not_called()


def test_create_bucket_needs_write_permission(app, make_token, s3):
    from fastapi.testclient import TestClient

    c = TestClient(app)
    c.cookies.set("auth-token", make_token(permissions=["s3:read"]))
    res = c.post("/api/s3/buckets", json={"bucketName": "my-new-bucket"})

    assert res.status_code == 403
    assert res.json() == {"success": False, "error": "Insufficient permissions"}


def test_delete_bucket(auth_client, s3):
    res = auth_client.request("DELETE", "/api/s3/buckets", json={"bucketName": "old-bucket"})

    assert res.status_code == 200
    assert res.json()["message"] == "Bucket 'old-bucket' deleted successfully"
    s3.delete_bucket.assert_called_once_with(Bucket="old-bucket")


def test_delete_non_empty_bucket(auth_client, s3, client_error):
    s3.delete_bucket.side_effect = client_error(
        "BucketNotEmpty", status=409, message="The bucket you tried to delete is not empty"
    )
    res = auth_client.request("DELETE", "/api/s3/buckets", json={"bucketName": "full-bucket"})

    assert res.status_code == 500
    assert res.json()["errorCode"] == "BucketNotEmpty"
