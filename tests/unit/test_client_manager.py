# ---------------------------------------------------------------------------
# Unit Tests: AWS client manager
#
# Checks cache keys, that S3 clients are reused per region/identity while
# other services are built fresh, and bucket-region detection including the
# legacy GetBucketLocation answers (empty -> us-east-1, "EU" -> eu-west-1).
# ---------------------------------------------------------------------------
from unittest.mock import MagicMock

import pytest

from s3manager.aws.clients import ClientManager, create_client, session_credentials, user_region

CREDS = {"accessKeyId": "AKIAEXAMPLEKEY01", "secretAccessKey": "secret"}
USER = {"awsRegion": "ap-south-1", "awsCredentials": CREDS}


@pytest.fixture
def created(mocker):
    """Record every create_client call; each returns its own MagicMock."""
    made = []

    def fake_create(service, region, credentials=None, profile=None):
        client = MagicMock(name=f"{service}:{region}")
        made.append((service, region, client))
        return client

    mocker.patch("s3manager.aws.clients.create_client", side_effect=fake_create)
    return made


def test_client_key_variants():
    assert ClientManager.client_key("us-east-1", CREDS) == "us-east-1:AKIAEXAM"
    assert ClientManager.client_key("eu-west-1", profile="dev") == "eu-west-1:profile:dev"
    assert ClientManager.client_key("eu-west-1") == "eu-west-1:default"


def test_session_helpers(monkeypatch):
    monkeypatch.delenv("AWS_DEFAULT_REGION", raising=False)
    assert session_credentials(USER) == CREDS
    assert session_credentials({"awsCredentials": {}}) is None
    assert user_region(USER) == "ap-south-1"
    assert user_region({}) == "ap-south-1"


def test_s3_clients_are_cached(created):
    manager = ClientManager()
    first = manager.client_for_user(USER)
    second = manager.client_for_user(USER)

    assert first is second
    assert len(created) == 1
    assert manager.stats() == {"totalClients": 1, "regions": ["ap-south-1"]}


def test_other_services_are_not_cached(created):
    manager = ClientManager()
    manager.client_for_user(USER, "sts")
    manager.client_for_user(USER, "sts")

    assert [c[0] for c in created] == ["sts", "sts"]
    assert manager.stats()["totalClients"] == 0


def test_clear_cache(created):
    manager = ClientManager()
    manager.client_for_user(USER)
    manager.clear_cache()
    assert manager.stats() == {"totalClients": 0, "regions": []}


@pytest.mark.parametrize("constraint,region", [
    ("eu-west-2", "eu-west-2"),
    (None, "us-east-1"),
    ("", "us-east-1"),
    ("EU", "eu-west-1"),
])
def test_bucket_region(mocker, constraint, region):
    manager = ClientManager()
    default = MagicMock()
    default.get_bucket_location.return_value = {"LocationConstraint": constraint}
    mocker.patch.object(manager, "client_for_user", return_value=default)

    assert manager.bucket_region(USER, "bucket") == region


def test_client_for_bucket_uses_bucket_region(created):
    manager = ClientManager()
    default = manager.client_for_user(USER)
    default.get_bucket_location.return_value = {"LocationConstraint": "eu-west-2"}

    client = manager.client_for_bucket(USER, "bucket")

    assert client is not default
    assert created[-1][1] == "eu-west-2"
    assert manager.stats()["regions"] == ["ap-south-1", "eu-west-2"]


def test_client_for_bucket_falls_back_on_lookup_failure(created, client_error):
    manager = ClientManager()
    default = manager.client_for_user(USER)
    default.get_bucket_location.side_effect = client_error("AccessDenied", status=403)

    assert manager.client_for_bucket(USER, "bucket") is default


def test_create_client_passes_keys_and_sigv4(mocker):
    boto_client = mocker.patch("boto3.client")
    create_client("s3", "eu-west-1", dict(CREDS, sessionToken="tok"))

    args, kwargs = boto_client.call_args
    assert args == ("s3",)
    assert kwargs["region_name"] == "eu-west-1"
    assert kwargs["aws_access_key_id"] == "AKIAEXAMPLEKEY01"
    assert kwargs["aws_session_token"] == "tok"
    assert kwargs["config"].signature_version == "s3v4"


def test_create_client_without_keys_uses_default_chain(mocker):
    boto_client = mocker.patch("boto3.client")
    create_client("sts", "us-east-1")

    _, kwargs = boto_client.call_args
    assert "aws_access_key_id" not in kwargs
    assert "config" not in kwargs
