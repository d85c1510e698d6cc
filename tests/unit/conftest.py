# ---------------------------------------------------------------------------
# Shared fixtures for the S3 Manager unit tests.
#
# Every AWS client is replaced with a MagicMock: the routers fetch clients via
# s3manager.aws.clients.client_for_user / client_for_bucket, and the `s3`
# fixture patches both to hand back the same mock. SDK failures are simulated
# with real botocore ClientError instances built by `client_error`.
# ---------------------------------------------------------------------------
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError
from fastapi.testclient import TestClient

from s3manager.auth.tokens import COOKIE_NAME, issue_token


def _claims(**overrides):
    claims = {
        "userId": "AIDAEXAMPLE",
        "email": "arn:aws:iam::111122223333:user/alice",
        "name": "alice",
        "authType": "credentials",
        "awsRegion": "us-east-1",
        "awsAccountId": "111122223333",
        "permissions": ["s3:read", "s3:write", "s3:delete"],
        "awsCredentials": {"accessKeyId": "AKIAEXAMPLEKEY01", "secretAccessKey": "secret"},
    }
    claims.update(overrides)
    return claims


@pytest.fixture
def user_claims():
    return _claims()


@pytest.fixture
def make_token():
    def _make(**overrides):
        return issue_token(_claims(**overrides))

    return _make


@pytest.fixture
def app():
    from s3manager.main import app

    return app


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def auth_client(app, make_token):
    c = TestClient(app)
    c.cookies.set(COOKIE_NAME, make_token())
    return c


@pytest.fixture
def s3(mocker):
    mock = MagicMock(name="s3")
    mocker.patch("s3manager.aws.clients.client_for_user", return_value=mock)
    mocker.patch("s3manager.aws.clients.client_for_bucket", return_value=mock)
    return mock


@pytest.fixture
def client_error():
    def _make(code, status=400, message="boom", operation="Operation"):
        return ClientError(
            {
                "Error": {"Code": code, "Message": message},
                "ResponseMetadata": {"HTTPStatusCode": status},
            },
            operation,
        )

    return _make
