# S3 MANAGER BACKEND

# COMPONENT: BILLING ROUTES
# REQUIREMENTS SATISFIED: cost overview for the dashboard
"""
s3manager/api/routers/billing.py

GET /api/billing?service=&granularity=MONTHLY|DAILY
"""
from typing import Optional

from botocore.exceptions import BotoCoreError, ClientError
from fastapi import APIRouter, Depends

from s3manager.api.exception_handlers import failure
from s3manager.auth.dependencies import require_aws_credentials
from s3manager.aws.clients import create_client, session_credentials
from s3manager.services.billing import COST_EXPLORER_REGION, cost_summary
from s3manager.utils.logging import get_logger

logger = get_logger("billing")

router = APIRouter(prefix="/api", tags=["Billing"])

PERMISSION_HINT = "Ensure your AWS user has Cost Explorer and billing permissions"


@router.get("/billing")
def get_billing(service: Optional[str] = None, granularity: str = "MONTHLY",
                user: dict = Depends(require_aws_credentials)):
    granularity = granularity.upper()
    client = create_client("ce", COST_EXPLORER_REGION, session_credentials(user))
    try:
        data = cost_summary(client, granularity, service)
    except (ClientError, BotoCoreError) as e:
        logger.error("Cost Explorer query failed: %s", e)
        return failure(500, str(e), errorType=type(e).__name__, details=PERMISSION_HINT)
    return {"success": True, "data": data}
