# S3 MANAGER BACKEND

# COMPONENT: IDENTITY SERVICE
# REQUIREMENTS SATISFIED: credential validation at login, caller identity display
"""
s3manager/services/identity.py

STS GetCallerIdentity, used both to validate keys typed into the login
form and to show the user who AWS thinks they are.
"""
from typing import Any, Dict, Optional

from s3manager.aws.clients import create_client

# STS error codes that mean "these keys are wrong", as opposed to "STS is unreachable"
INVALID_KEY_CODES = {
    "InvalidClientTokenId",
    "SignatureDoesNotMatch",
    "UnrecognizedClient",
    "UnrecognizedClientException",
    "InvalidUserException",
}


def username_from_arn(arn: Optional[str], default: str = "Unknown") -> str:
    if not arn:
        return default
    return arn.split("/")[-1] or default


def caller_identity(access_key_id: str, secret_access_key: str, region: str,
                    session_token: str = None) -> Dict[str, Any]:
    credentials = {"accessKeyId": access_key_id, "secretAccessKey": secret_access_key}
    if session_token:
        credentials["sessionToken"] = session_token
    sts = create_client("sts", region, credentials)
    return sts.get_caller_identity()


def identity_for_user(user: Dict[str, Any]) -> Dict[str, Any]:
    creds = user["awsCredentials"]
    region = user.get("awsRegion") or "us-east-1"
    response = caller_identity(
        creds["accessKeyId"], creds.get("secretAccessKey"), region, creds.get("sessionToken")
    )
    return {
        "userId": response.get("UserId"),
        "account": response.get("Account"),
        "arn": response.get("Arn"),
        "region": user.get("awsRegion"),
        "username": username_from_arn(response.get("Arn")),
    }
