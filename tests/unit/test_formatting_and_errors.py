# ---------------------------------------------------------------------------
# Unit Tests: presentation helpers and SDK error formatting
#
# Covers the human-readable size formatter used by the bucket list, the ISO
# timestamp helper, and the "S3 Error <status>: <code> - <message>" strings
# shown to users when an AWS call fails.
# ---------------------------------------------------------------------------
from datetime import datetime, timezone

import pytest

from s3manager.aws.errors import error_code, is_not_found, s3_error_message
from s3manager.utils.formatting import format_bytes, iso


@pytest.mark.parametrize("n,text", [
    (0, "0 B"),
    (500, "500 B"),
    (1024, "1 KB"),
    (1536, "1.5 KB"),
    (1048576, "1 MB"),
    (int(2.25 * 1024 ** 3), "2.25 GB"),
    (5 * 1024 ** 4, "5 TB"),
])
def test_format_bytes(n, text):
    assert format_bytes(n) == text


def test_iso_treats_naive_datetimes_as_utc():
    assert iso(datetime(2024, 1, 2, 3, 4, 5)) == "2024-01-02T03:04:05Z"
    assert iso(datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)) == "2024-01-02T03:04:05Z"
    assert iso(None) is None


def test_s3_error_message_for_client_error(client_error):
    err = client_error("AccessDenied", status=403, message="Access Denied")
    assert s3_error_message(err) == "S3 Error 403: AccessDenied - Access Denied"
    assert error_code(err) == "AccessDenied"


def test_s3_error_message_for_plain_exception():
    assert s3_error_message(RuntimeError("disk on fire")) == "disk on fire"
    assert error_code(RuntimeError("x")) is None


def test_head_object_404_counts_as_not_found(client_error):
    assert is_not_found(client_error("404", status=404))
    assert is_not_found(client_error("NoSuchKey", status=404))
    assert not is_not_found(client_error("AccessDenied", status=403))
