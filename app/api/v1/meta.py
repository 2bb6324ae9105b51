"""Meta API endpoints"""
from fastapi import APIRouter

from app.schemas.merchant import MerchantVerdict
from app.schemas.statistics import StatisticsPeriod
from app.schemas.transaction import TransactionType


router = APIRouter(prefix="/meta", tags=["meta"])


@router.get("/transaction-types")
async def get_transaction_types():
    """Get list of transaction types"""
    return {
        "types": [
            {"value": t.value, "label": t.display_name, "color": t.color}
            for t in TransactionType
        ]
    }


@router.get("/statistics-periods")
async def get_statistics_periods():
    """Get list of statistics periods"""
    return {
        "periods": [{"value": p.value, "label": p.display_name} for p in StatisticsPeriod]
    }


@router.get("/merchant-verdicts")
async def get_merchant_verdicts():
    """Get list of merchant verdicts"""
    return {
        "verdicts": [
            {"value": v.value, "label": v.display_name, "color": v.color}
            for v in MerchantVerdict
        ]
    }
