from decimal import ROUND_HALF_UP, Decimal

from ..models import Document
from .generation import to_amount

ZERO = Decimal("0.00")
DEFAULT_RATE = Decimal("10")  # straight-line, percent per year
DEFAULT_YEARS = Decimal("1")


def _q(value):
    return value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


# ----------------------------
# Fixed asset schedule
# ----------------------------
def asset_depreciation(asset):
    """
    Straight-line depreciation for one fixed-asset register row.
    Workflow:
        1. Yearly charge = cost * rate / 100.
        2. Accumulated = yearly charge * years in use, capped at cost.
        3. Net book value = cost - accumulated.
    """
    cost = to_amount(asset.get("cost"))
    rate = to_amount(asset.get("depreciationRate")) or DEFAULT_RATE
    years = to_amount(asset.get("yearsInUse")) or DEFAULT_YEARS

    yearly = _q(cost * rate / Decimal("100"))
    accumulated = _q(yearly * years)
    # never depreciate below zero book value
    if accumulated > cost:
        accumulated = cost

    return {
        "assetCode": asset.get("assetCode") or "N/A",
        "assetName": asset.get("assetName") or "N/A",
        "category": asset.get("category") or "Others",
        "cost": cost,
        "depreciationRate": rate,
        "method": "SLM",
        "yearsInUse": years,
        "yearlyDepreciation": yearly,
        "accumulatedDepreciation": accumulated,
        "netBookValue": cost - accumulated,
    }


def depreciation_schedule(company, period=None):
    """Schedule over every fixed_asset_register document of the company."""
    docs = (
        Document.objects.for_company(company)
        .filter(document_type="fixed_asset_register")
        .exclude(extracted_data__isnull=True)
        .order_by("created_at", "id")
    )
    rows = []
    for doc in docs:
        data = doc.extracted_data if isinstance(doc.extracted_data, dict) else {}
        assets = data.get("assets")
        if not isinstance(assets, list):
            continue
        for asset in assets:
            if isinstance(asset, dict):
                rows.append(asset_depreciation(asset))

    total_cost = sum((r["cost"] for r in rows), ZERO)
    total_depreciation = sum((r["accumulatedDepreciation"] for r in rows), ZERO)
    return {
        "period": period,
        "assets": rows,
        "summary": {
            "totalAssets": len(rows),
            "totalCost": total_cost,
            "totalDepreciation": total_depreciation,
            "netBookValue": total_cost - total_depreciation,
        },
    }
