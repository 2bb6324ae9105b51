"""Statistics API endpoints"""
from fastapi import APIRouter, Query

from app.core.deps import CurrentUserId, ServicesDep
from app.schemas.statistics import StatisticsPeriod, TransactionStatistics


router = APIRouter(prefix="/statistics", tags=["statistics"])


@router.get("", response_model=TransactionStatistics)
async def get_statistics(
    services: ServicesDep,
    user_id: CurrentUserId,
    period: StatisticsPeriod = Query(StatisticsPeriod.MONTH),
):
    """Get totals, category breakdown and monthly trend for the current period"""
    return await services.statistics.calculate_statistics(user_id, period)
