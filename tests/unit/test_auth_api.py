# ---------------------------------------------------------------------------
# API Tests: /api/auth
#
# Access-key login validates through STS (patched at the router), SSO login
# and polling go through a mocked SSOService, and every successful login
# must set the auth-token cookie without echoing AWS keys in the body.
# ---------------------------------------------------------------------------
from unittest.mock import MagicMock

import pytest

from s3manager.auth.sso import SSOError
from s3manager.auth.tokens import COOKIE_NAME, decode_token

IDENTITY = {
    "UserId": "AIDAEXAMPLE",
    "Account": "111122223333",
    "Arn": "arn:aws:iam::111122223333:user/alice",
}

CREDENTIALS_LOGIN = {
    "authType": "credentials",
    "accessKeyId": "AKIAEXAMPLEKEY01",
    "secretAccessKey": "secret",
    "region": "eu-west-1",
}

SSO_POLL = {
    "deviceCode": "dev-1",
    "ssoStartUrl": "https://example.awsapps.com/start",
    "ssoRegion": "us-east-1",
    "clientId": "cid",
    "clientSecret": "csecret",
}


@pytest.fixture
def sso_service(mocker):
    service = MagicMock()
    mocker.patch("s3manager.api.routers.auth.SSOService", return_value=service)
    return service


def test_credentials_login_sets_cookie(client, mocker):
    sts = mocker.patch("s3manager.api.routers.auth.caller_identity", return_value=IDENTITY)

    res = client.post("/api/auth/login", json=CREDENTIALS_LOGIN)

    assert res.status_code == 200
    user = res.json()["user"]
    assert user["name"] == "alice"
    assert user["awsAccountId"] == "111122223333"
    assert "AKIAEXAMPLEKEY01" not in res.text
    sts.assert_called_once_with("AKIAEXAMPLEKEY01", "secret", "eu-west-1")

    session = decode_token(res.cookies[COOKIE_NAME])
    assert session["awsCredentials"]["secretAccessKey"] == "secret"
    assert session["permissions"] == ["s3:read", "s3:write", "s3:delete"]
    assert "httponly" in res.headers["set-cookie"].lower()


def test_credentials_login_invalid_keys(client, mocker, client_error):
    mocker.patch(
        "s3manager.api.routers.auth.caller_identity",
        side_effect=client_error("InvalidClientTokenId", status=403),
    )

    res = client.post("/api/auth/login", json=CREDENTIALS_LOGIN)

    assert res.status_code == 401
    assert res.json() == {
        "success": False,
        "error": "Invalid AWS credentials",
        "details": "The provided AWS credentials are invalid",
    }
    assert COOKIE_NAME not in res.cookies


def test_credentials_login_missing_keys(client):
    res = client.post("/api/auth/login", json={"authType": "credentials"})
    assert res.status_code == 400


def test_login_unknown_auth_type(client):
    res = client.post("/api/auth/login", json={"authType": "password"})
    assert res.status_code == 400
    assert res.json()["error"] == "Invalid request data"


def test_sso_login_starts_device_flow(client, sso_service):
    sso_service.start_device_authorization.return_value = {
        "deviceCode": "dev-1",
        "userCode": "ABCD-EFGH",
        "verificationUri": "https://device.sso.aws/",
        "verificationUriComplete": "https://device.sso.aws/?user_code=ABCD-EFGH",
        "expiresIn": 600,
        "interval": 5,
    }
    sso_service.register_client.return_value = {"clientId": "cid", "clientSecret": "csecret"}

    res = client.post("/api/auth/login", json={
        "authType": "sso", "ssoStartUrl": "https://example.awsapps.com/start", "ssoRegion": "us-east-1",
    })

    body = res.json()
    assert res.status_code == 200
    assert body["requiresDeviceAuth"] is True
    assert body["deviceAuth"]["userCode"] == "ABCD-EFGH"
    assert body["pollEndpoint"] == "/api/auth/sso-poll"
    assert body["clientId"] == "cid"


def test_sso_login_rejects_non_url(client):
    res = client.post("/api/auth/login", json={"authType": "sso", "ssoStartUrl": "example"})
    assert res.status_code == 400


@pytest.mark.parametrize("code,status,flag", [
    ("AuthorizationPendingException", 202, "pending"),
    ("SlowDownException", 202, "slowDown"),
    ("ExpiredTokenException", 410, "expired"),
    ("AccessDeniedException", 403, "denied"),
])
def test_sso_poll_states(client, sso_service, client_error, code, status, flag):
    sso_service.create_token.side_effect = client_error(code)

    res = client.post("/api/auth/sso-poll", json=SSO_POLL)

    assert res.status_code == status
    assert res.json()[flag] is True


def test_sso_poll_unexpected_error(client, sso_service, client_error):
    sso_service.create_token.side_effect = client_error("InternalServerException", status=500)
    res = client.post("/api/auth/sso-poll", json=SSO_POLL)
    assert res.status_code == 500
    assert res.json()["error"] == "SSO polling failed"


def test_sso_poll_success_sets_cookie(client, sso_service):
    sso_service.create_token.return_value = {"accessToken": "at", "expiresIn": 3600}
    sso_service.get_user_info.return_value = {
        "userId": "sso_bob_1",
        "accountId": "444455556666",
        "userName": "bob",
        "email": "bob@example.com",
        "roleName": "ReadOnly",
        "awsCredentials": {"accessKeyId": "ASIAROLE", "secretAccessKey": "s", "sessionToken": "t"},
    }

    res = client.post("/api/auth/sso-poll", json=SSO_POLL)

    assert res.status_code == 200
    assert res.json()["user"]["authType"] == "sso"
    sso_service.create_token.assert_called_once_with("dev-1", "cid", "csecret")
    session = decode_token(res.cookies[COOKIE_NAME])
    assert session["awsCredentials"]["sessionToken"] == "t"


def test_demo_login_disabled_by_default(client, monkeypatch):
    monkeypatch.delenv("DEMO_LOGIN_ENABLED", raising=False)
    assert client.post("/api/auth/demo-login").status_code == 404


def test_demo_login_when_enabled(client, monkeypatch):
    monkeypatch.setenv("DEMO_LOGIN_ENABLED", "1")

    res = client.post("/api/auth/demo-login")

    assert res.status_code == 200
    assert res.json()["user"]["id"] == "demo_user_123"
    assert decode_token(res.cookies[COOKIE_NAME])["awsCredentials"]["accessKeyId"] == "DEMO_ACCESS_KEY"


def test_logout_clears_cookie(auth_client):
    res = auth_client.post("/api/auth/logout")

    assert res.status_code == 200
    cookie = res.headers["set-cookie"].lower()
    assert cookie.startswith(f"{COOKIE_NAME}=")
    assert "max-age=0" in cookie


def test_session_cookie_secure_in_production(client, mocker, monkeypatch):
    monkeypatch.setenv("APP_ENV", "production")
    mocker.patch("s3manager.api.routers.auth.caller_identity", return_value=IDENTITY)

    res = client.post("/api/auth/login", json=CREDENTIALS_LOGIN)

    assert res.status_code == 200
    assert "; secure" in res.headers["set-cookie"].lower()


def test_session_cookie_not_secure_outside_production(client, mocker, monkeypatch):
    monkeypatch.setenv("APP_ENV", "development")
    mocker.patch("s3manager.api.routers.auth.caller_identity", return_value=IDENTITY)

    res = client.post("/api/auth/login", json=CREDENTIALS_LOGIN)

    assert res.status_code == 200
    assert "; secure" not in res.headers["set-cookie"].lower()


def test_sso_login_incomplete_device_response(client, sso_service):
    sso_service.start_device_authorization.side_effect = SSOError("Invalid device authorization response")

    res = client.post("/api/auth/login", json={
        "authType": "sso", "ssoStartUrl": "https://example.awsapps.com/start", "ssoRegion": "us-east-1",
    })

    assert res.status_code == 401
    assert res.json() == {
        "success": False,
        "error": "SSO authentication failed",
        "details": "Invalid device authorization response",
    }
