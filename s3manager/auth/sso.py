# S3 MANAGER BACKEND

# COMPONENT: AWS SSO DEVICE AUTHORIZATION
# REQUIREMENTS SATISFIED: IAM Identity Center sign-in without long-lived keys
"""
s3manager/auth/sso.py

Wraps the IAM Identity Center (AWS SSO) OIDC device flow:

    1. register_client()              -> public OIDC client id/secret
    2. start_device_authorization()   -> user code + verification URL
    3. create_token() / poll_for_token()
    4. get_user_info()                -> account, role and short-lived keys

The browser drives step 3 through POST /api/auth/sso-poll, one CreateToken
attempt per request, so the blocking poll_for_token() loop is only used by
scripts and tests.

Account and role lookups degrade to empty lists, and get_user_info() falls
back to a generic SSO user, because a user who can sign in but cannot list
accounts should still reach the (mostly empty) dashboard.
"""
import time
from typing import Any, Dict, List, Optional

from botocore.exceptions import BotoCoreError, ClientError

from s3manager.aws.clients import create_client
from s3manager.aws.errors import error_code
from s3manager.errors import AuthError
from s3manager.utils.logging import get_logger

logger = get_logger("auth.sso")

DEVICE_GRANT = "urn:ietf:params:oauth:grant-type:device_code"
DEFAULT_CLIENT_NAME = "S3 Manager App"
MAX_POLL_INTERVAL = 30


class SSOError(AuthError):
    pass


class DeviceAuthorizationExpired(SSOError):
    status_code = 410


class DeviceAuthorizationDenied(SSOError):
    status_code = 403


class SSOService:
    def __init__(self, start_url: str, region: str, client_name: str = DEFAULT_CLIENT_NAME):
        self.start_url = start_url
        self.region = region
        self.client_name = client_name
        self.oidc = create_client("sso-oidc", region)
        self._client_info: Optional[Dict[str, Any]] = None

    def _portal(self):
        return create_client("sso", self.region)

    def register_client(self) -> Dict[str, Any]:
        if self._client_info is None:
            info = self.oidc.register_client(
                clientName=self.client_name,
                clientType="public",
                scopes=["sso:account:access"],
            )
            if not info.get("clientId") or not info.get("clientSecret"):
                raise SSOError("Failed to register SSO client")
            self._client_info = info
        return self._client_info

    def start_device_authorization(self) -> Dict[str, Any]:
        info = self.register_client()
        response = self.oidc.start_device_authorization(
            clientId=info["clientId"],
            clientSecret=info["clientSecret"],
            startUrl=self.start_url,
        )
        if not response.get("deviceCode") or not response.get("userCode") or not response.get("verificationUri"):
            raise SSOError("Invalid device authorization response")
        return {
            "deviceCode": response["deviceCode"],
            "userCode": response["userCode"],
            "verificationUri": response["verificationUri"],
            "verificationUriComplete": response.get("verificationUriComplete") or response["verificationUri"],
            "expiresIn": response.get("expiresIn") or 600,
            "interval": response.get("interval") or 5,
        }

    def create_token(self, device_code: str, client_id: str = None, client_secret: str = None) -> Dict[str, Any]:
        """
        One CreateToken attempt. AuthorizationPending, SlowDown, ExpiredToken
        and AccessDenied come back as botocore ClientErrors for the caller to
        sort out.
        """
        if not client_id or not client_secret:
            info = self.register_client()
            client_id, client_secret = info["clientId"], info["clientSecret"]
        response = self.oidc.create_token(
            clientId=client_id,
            clientSecret=client_secret,
            grantType=DEVICE_GRANT,
            deviceCode=device_code,
        )
        return {
            "accessToken": response.get("accessToken"),
            "refreshToken": response.get("refreshToken"),
            "expiresIn": response.get("expiresIn") or 3600,
            "tokenType": response.get("tokenType") or "Bearer",
        }

    def poll_for_token(self, device_code: str, interval: int = 5, max_attempts: int = 120) -> Dict[str, Any]:
        for _ in range(max_attempts):
            try:
                token = self.create_token(device_code)
            except ClientError as e:
                code = error_code(e)
                if code == "AuthorizationPendingException":
                    time.sleep(interval)
                    continue
                if code == "SlowDownException":
                    interval = min(interval + 5, MAX_POLL_INTERVAL)
                    time.sleep(interval)
                    continue
                if code == "ExpiredTokenException":
                    raise DeviceAuthorizationExpired("Device authorization has expired. Please try again.")
                if code == "AccessDeniedException":
                    raise DeviceAuthorizationDenied("Access denied. Authorization was declined.")
                raise
            if token["accessToken"]:
                return token
        raise SSOError("Token polling timed out. Please try again.", status_code=408)

    def list_accounts(self, access_token: str) -> List[Dict[str, Any]]:
        try:
            response = self._portal().list_accounts(accessToken=access_token)
        except (ClientError, BotoCoreError) as e:
            logger.warning("SSO account listing failed: %s", e)
            return []
        return [
            {
                "accountId": a.get("accountId"),
                "accountName": a.get("accountName"),
                "emailAddress": a.get("emailAddress"),
            }
            for a in response.get("accountList", [])
        ]

    def list_roles(self, access_token: str, account_id: str) -> List[Dict[str, Any]]:
        try:
            response = self._portal().list_account_roles(accessToken=access_token, accountId=account_id)
        except (ClientError, BotoCoreError) as e:
            logger.warning("SSO role listing failed account=%s: %s", account_id, e)
            return []
        return [{"roleName": r.get("roleName")} for r in response.get("roleList", [])]

    def get_user_info(self, access_token: str, account_id: str = None, role_name: str = None) -> Dict[str, Any]:
        now_ms = int(time.time() * 1000)
        try:
            accounts = self.list_accounts(access_token)
            account = accounts[0] if accounts else None
            if account_id:
                account = next((a for a in accounts if a["accountId"] == account_id), account)

            role = role_name
            if account and not role:
                roles = self.list_roles(access_token, account["accountId"])
                role = roles[0]["roleName"] if roles else None

            credentials = None
            if account and role:
                credentials = self._role_credentials(access_token, account["accountId"], role)

            email = account.get("emailAddress") if account else None
            user_name = email.split("@")[0] if email else "sso-user"
            return {
                "userId": f"sso_{user_name}_{now_ms}",
                "accountId": account["accountId"] if account else "unknown",
                "userName": user_name,
                "email": email,
                "roleName": role,
                "awsCredentials": credentials,
            }
        except (ClientError, BotoCoreError, KeyError) as e:
            logger.warning("SSO user info lookup failed, using generic user: %s", e)
            return {
                "userId": f"sso_user_{now_ms}",
                "accountId": "unknown",
                "userName": "SSO User",
                "email": "sso-user@aws.com",
                "roleName": None,
                "awsCredentials": None,
            }

    def _role_credentials(self, access_token: str, account_id: str, role_name: str) -> Optional[Dict[str, str]]:
        try:
            response = self._portal().get_role_credentials(
                accessToken=access_token, accountId=account_id, roleName=role_name
            )
        except (ClientError, BotoCoreError) as e:
            logger.warning("SSO role credentials failed account=%s role=%s: %s", account_id, role_name, e)
            return None
        creds = response.get("roleCredentials")
        if not creds:
            return None
        return {
            "accessKeyId": creds.get("accessKeyId"),
            "secretAccessKey": creds.get("secretAccessKey"),
            "sessionToken": creds.get("sessionToken"),
        }
