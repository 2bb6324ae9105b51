"""Statistics service"""
from collections import defaultdict
from datetime import datetime
from decimal import Decimal

from app.config import settings
from app.core.clock import Clock, system_clock
from app.core.errors import require_user
from app.logging_setup import get_logger
from app.schemas.category import Category
from app.schemas.statistics import (
    CategoryStatistic,
    MonthlyStatistic,
    StatisticsPeriod,
    TransactionStatistics,
)
from app.schemas.transaction import Transaction, TransactionType
from app.services.category_service import CategoryService
from app.services.transaction_service import TransactionService
from app.utils.periods import resolve_date_range, start_of_month

logger = get_logger(__name__)

DEFAULT_CATEGORY_ICON = "📊"


def _sum(transactions: list[Transaction], kind: TransactionType | None = None) -> Decimal:
    return sum(
        (t.amount for t in transactions if kind is None or t.type == kind),
        Decimal(0),
    )


def category_breakdown(
    transactions: list[Transaction],
    categories: dict[str, Category] | None = None,
) -> list[CategoryStatistic]:
    """
    Group transactions by category id.

    Percentages are shares of the combined amount of all groups (income and
    expense together), 0 when there is nothing. Name and type come from the
    first transaction of each group; icon and color from the category record
    when known.
    """
    categories = categories or {}
    groups: dict[str, list[Transaction]] = defaultdict(list)
    for transaction in transactions:
        groups[transaction.category_id].append(transaction)

    total_amount = _sum(transactions)
    breakdown = []
    for category_id, group in groups.items():
        first = group[0]
        amount = _sum(group)
        category = categories.get(category_id)
        breakdown.append(CategoryStatistic(
            category_id=category_id,
            category_name=first.category_name or "",
            category_icon=category.icon if category else DEFAULT_CATEGORY_ICON,
            category_color=category.color if category else first.type.color,
            amount=amount,
            percentage=float(amount / total_amount) if total_amount > 0 else 0.0,
            transaction_count=len(group),
            type=first.type,
        ))

    breakdown.sort(key=lambda item: item.amount, reverse=True)
    return breakdown


def monthly_trend(transactions: list[Transaction], tz=None) -> list[MonthlyStatistic]:
    """Income, expense and net per calendar month, oldest month first."""
    groups: dict[datetime, list[Transaction]] = defaultdict(list)
    for transaction in transactions:
        date = transaction.date.astimezone(tz) if tz is not None else transaction.date
        groups[start_of_month(date)].append(transaction)

    trend = []
    for month_start, group in groups.items():
        income = _sum(group, TransactionType.INCOME)
        expense = _sum(group, TransactionType.EXPENSE)
        trend.append(MonthlyStatistic(
            month=month_start.strftime("%Y-%m"),
            income=income,
            expense=expense,
            net=income - expense,
            date=month_start,
        ))

    trend.sort(key=lambda item: item.date)
    return trend


def compute_statistics(
    transactions: list[Transaction],
    period: StatisticsPeriod,
    start: datetime,
    end: datetime,
    categories: dict[str, Category] | None = None,
) -> TransactionStatistics:
    """
    Aggregate the transactions dated in ``[start, end)``.

    Pure function: the same input always gives the same output. Months of the
    trend are cut in ``start``'s timezone.
    """
    in_range = [t for t in transactions if start <= t.date < end]

    total_income = _sum(in_range, TransactionType.INCOME)
    total_expense = _sum(in_range, TransactionType.EXPENSE)

    return TransactionStatistics(
        total_income=total_income,
        total_expense=total_expense,
        net_amount=total_income - total_expense,
        transaction_count=len(in_range),
        category_breakdown=category_breakdown(in_range, categories),
        monthly_trend=monthly_trend(in_range, start.tzinfo),
        period=period,
        start_date=start,
        end_date=end,
    )


class StatisticsService:
    """Period statistics recomputed from a full fetch on every call"""

    def __init__(
        self,
        transactions: TransactionService,
        categories: CategoryService,
        clock: Clock = system_clock,
        first_weekday: int = settings.FIRST_WEEKDAY,
    ) -> None:
        self.transactions = transactions
        self.categories = categories
        self.clock = clock
        self.first_weekday = first_weekday

    async def calculate_statistics(
        self,
        user_id: str | None,
        period: StatisticsPeriod,
    ) -> TransactionStatistics:
        """
        Get statistics of the user's transactions for the current period.

        Fetch errors propagate (PersistenceFailure); an empty period yields
        zeroed statistics.
        """
        user_id = require_user(user_id)
        start, end = resolve_date_range(period, self.clock(), self.first_weekday)

        transactions = await self.transactions.fetch_transactions(user_id)
        categories = {c.id: c for c in await self.categories.list_categories(user_id)}

        statistics = compute_statistics(transactions, period, start, end, categories)
        logger.debug(
            "Statistics for user %s (%s): %d transactions",
            user_id, period.value, statistics.transaction_count,
        )
        return statistics
