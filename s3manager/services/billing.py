# S3 MANAGER BACKEND

# COMPONENT: BILLING SERVICE
# REQUIREMENTS SATISFIED: recent cost breakdown by AWS service
"""
s3manager/services/billing.py

Cost Explorer summary for the dashboard. Cost Explorer only has an endpoint
in us-east-1, whatever region the user works in.
"""
from datetime import date, timedelta
from typing import Any, Dict, List, Optional

from s3manager.errors import ValidationFailed

COST_EXPLORER_REGION = "us-east-1"
LOOKBACK_DAYS = {"MONTHLY": 30, "DAILY": 7}
# Cost Explorer reports S3 as "Amazon Simple Storage Service"
S3_SERVICE_MARKERS = ("S3", "Simple Storage Service")


def billing_window(granularity: str, today: date = None):
    today = today or date.today()
    return today - timedelta(days=LOOKBACK_DAYS[granularity]), today


def cost_summary(client, granularity: str = "MONTHLY", service: Optional[str] = None,
                 today: date = None) -> Dict[str, Any]:
    if granularity not in LOOKBACK_DAYS:
        raise ValidationFailed(
            "Invalid request data",
            details="granularity must be one of: DAILY, MONTHLY",
            errorType="ValidationError",
        )
    start, end = billing_window(granularity, today)

    params: Dict[str, Any] = {
        "TimePeriod": {"Start": start.isoformat(), "End": end.isoformat()},
        "Granularity": granularity,
        "Metrics": ["BlendedCost", "UsageQuantity"],
        "GroupBy": [{"Type": "DIMENSION", "Key": "SERVICE"}],
    }
    if service:
        params["Filter"] = {"Dimensions": {"Key": "SERVICE", "Values": [service]}}
    response = client.get_cost_and_usage(**params)

    total = 0.0
    s3_total = 0.0
    breakdown: List[Dict[str, Any]] = []
    for result in response.get("ResultsByTime", []):
        for group in result.get("Groups", []):
            name = (group.get("Keys") or ["Unknown"])[0]
            blended = group.get("Metrics", {}).get("BlendedCost", {})
            cost = float(blended.get("Amount") or 0)
            total += cost
            if any(marker in name for marker in S3_SERVICE_MARKERS):
                s3_total += cost
            breakdown.append({
                "service": name,
                "cost": f"{cost:.2f}",
                "currency": blended.get("Unit") or "USD",
                "period": result.get("TimePeriod"),
            })

    return {
        "totalCost": f"{total:.2f}",
        "s3Cost": f"{s3_total:.2f}",
        "currency": "USD",
        "period": granularity,
        "startDate": start.isoformat(),
        "endDate": end.isoformat(),
        "breakdown": breakdown,
    }
