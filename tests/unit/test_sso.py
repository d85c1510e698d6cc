# ---------------------------------------------------------------------------
# Unit Tests: SSO device authorization service
# ---------------------------------------------------------------------------
from unittest.mock import MagicMock

import pytest

from s3manager.auth.sso import (
    DeviceAuthorizationDenied,
    DeviceAuthorizationExpired,
    SSOError,
    SSOService,
)


@pytest.fixture
def clients(mocker):
    oidc, portal = MagicMock(name="sso-oidc"), MagicMock(name="sso")
    oidc.register_client.return_value = {"clientId": "cid", "clientSecret": "csecret"}
    mocker.patch(
        "s3manager.auth.sso.create_client",
        side_effect=lambda service, region, *a, **k: oidc if service == "sso-oidc" else portal,
    )
    return oidc, portal


@pytest.fixture
def sleep(mocker):
    return mocker.patch("s3manager.auth.sso.time.sleep")


def _service():
    return SSOService("https://example.awsapps.com/start", "us-east-1")


def test_register_client_is_cached(clients):
    oidc, _ = clients
    service = _service()
    service.register_client()
    service.register_client()
    assert oidc.register_client.call_count == 1


def test_start_device_authorization_defaults(clients):
    oidc, _ = clients
    oidc.start_device_authorization.return_value = {
        "deviceCode": "dev", "userCode": "CODE", "verificationUri": "https://device.sso.aws/",
    }

    device = _service().start_device_authorization()

    assert device["expiresIn"] == 600
    assert device["interval"] == 5
    assert device["verificationUriComplete"] == "https://device.sso.aws/"


def test_incomplete_device_response(clients):
    oidc, _ = clients
    oidc.start_device_authorization.return_value = {"deviceCode": "dev"}
    with pytest.raises(SSOError):
        _service().start_device_authorization()


def test_poll_waits_while_pending(clients, sleep, client_error):
    oidc, _ = clients
    oidc.create_token.side_effect = [
        client_error("AuthorizationPendingException"),
        client_error("SlowDownException"),
        {"accessToken": "at"},
    ]

    token = _service().poll_for_token("dev", interval=5)

    assert token["accessToken"] == "at"
    assert [c.args[0] for c in sleep.call_args_list] == [5, 10]


def test_poll_slow_down_interval_is_capped(clients, sleep, client_error):
    oidc, _ = clients
    oidc.create_token.side_effect = [client_error("SlowDownException")] * 2 + [{"accessToken": "at"}]

    _service().poll_for_token("dev", interval=28)

    assert [c.args[0] for c in sleep.call_args_list] == [30, 30]


@pytest.mark.parametrize("code,exc_type,status", [
    ("ExpiredTokenException", DeviceAuthorizationExpired, 410),
    ("AccessDeniedException", DeviceAuthorizationDenied, 403),
])
def test_poll_terminal_states(clients, sleep, client_error, code, exc_type, status):
    oidc, _ = clients
    oidc.create_token.side_effect = client_error(code)
    with pytest.raises(exc_type) as exc:
        _service().poll_for_token("dev")
    assert exc.value.status_code == status


def test_poll_times_out(clients, sleep, client_error):
    oidc, _ = clients
    oidc.create_token.side_effect = client_error("AuthorizationPendingException")
    with pytest.raises(SSOError) as exc:
        _service().poll_for_token("dev", max_attempts=3)
    assert exc.value.status_code == 408


def test_user_info_picks_first_account_and_role(clients):
    _, portal = clients
    portal.list_accounts.return_value = {"accountList": [
        {"accountId": "111", "accountName": "prod", "emailAddress": "ops@example.com"},
    ]}
    portal.list_account_roles.return_value = {"roleList": [{"roleName": "Admin"}]}
    portal.get_role_credentials.return_value = {"roleCredentials": {
        "accessKeyId": "ASIA", "secretAccessKey": "s", "sessionToken": "t",
    }}

    info = _service().get_user_info("at")

    assert info["accountId"] == "111"
    assert info["userName"] == "ops"
    assert info["roleName"] == "Admin"
    assert info["awsCredentials"]["sessionToken"] == "t"


def test_user_info_without_accounts(clients, client_error):
    _, portal = clients
    portal.list_accounts.side_effect = client_error("UnauthorizedException", status=401)

    info = _service().get_user_info("at")

    assert info["accountId"] == "unknown"
    assert info["awsCredentials"] is None
