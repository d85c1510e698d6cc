# ---------------------------------------------------------------------------
# Unit Tests: session tokens
#
# The session cookie is an HS256 token signed with JWT_SECRET. These tests
# pin the 24h lifetime, rejection of tampered / expired / foreign tokens,
# and that the browser-facing user projection never leaks AWS keys.
# ---------------------------------------------------------------------------
import time

import pytest

from s3manager.auth.tokens import TOKEN_TTL_SECONDS, decode_token, issue_token, public_user
from s3manager.errors import AuthError


def test_issue_and_decode(user_claims):
    token = issue_token(user_claims)
    decoded = decode_token(token)

    assert decoded["userId"] == user_claims["userId"]
    assert decoded["awsCredentials"]["accessKeyId"] == "AKIAEXAMPLEKEY01"
    assert decoded["exp"] - decoded["iat"] == TOKEN_TTL_SECONDS


def test_tampered_token_rejected(user_claims):
    token = issue_token(user_claims)
    head, payload, sig = token.split(".")
    tampered = ".".join([head, payload, sig[::-1]])
    with pytest.raises(AuthError) as exc:
        decode_token(tampered)
    assert exc.value.message == "Invalid or expired token"


def test_expired_token_rejected(user_claims):
    token = issue_token(user_claims, now=int(time.time()) - 2 * TOKEN_TTL_SECONDS)
    with pytest.raises(AuthError):
        decode_token(token)


def test_token_signed_with_other_secret_rejected(user_claims, monkeypatch):
    monkeypatch.setenv("JWT_SECRET", "one-secret")
    token = issue_token(user_claims)
    monkeypatch.setenv("JWT_SECRET", "another-secret")
    with pytest.raises(AuthError):
        decode_token(token)


def test_missing_token_rejected():
    with pytest.raises(AuthError) as exc:
        decode_token("")
    assert exc.value.message == "Authentication required"


def test_public_user_has_no_credentials(user_claims):
    user = public_user(user_claims)
    assert user["id"] == "AIDAEXAMPLE"
    assert "awsCredentials" not in user
    assert "permissions" not in user

    with_perms = public_user(user_claims, include_permissions=True)
    assert with_perms["permissions"] == ["s3:read", "s3:write", "s3:delete"]
