"""Statistics schemas"""
from datetime import datetime
from decimal import Decimal
from enum import Enum
from pydantic import BaseModel, computed_field

from app.schemas.transaction import TransactionType


class StatisticsPeriod(str, Enum):
    """Time window of a statistics request, relative to now"""
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"

    @property
    def display_name(self) -> str:
        return {
            StatisticsPeriod.DAY: "Today",
            StatisticsPeriod.WEEK: "This Week",
            StatisticsPeriod.MONTH: "This Month",
            StatisticsPeriod.YEAR: "This Year",
        }[self]


class CategoryStatistic(BaseModel):
    """Per-category aggregate within a period"""
    category_id: str
    category_name: str
    category_icon: str
    category_color: str
    amount: Decimal
    percentage: float
    transaction_count: int
    type: TransactionType


class MonthlyStatistic(BaseModel):
    """Income / expense of one calendar month"""
    month: str
    income: Decimal
    expense: Decimal
    net: Decimal
    date: datetime


class TransactionStatistics(BaseModel):
    """Schema for statistics response"""
    total_income: Decimal
    total_expense: Decimal
    net_amount: Decimal
    transaction_count: int
    category_breakdown: list[CategoryStatistic]
    monthly_trend: list[MonthlyStatistic]
    period: StatisticsPeriod
    start_date: datetime
    end_date: datetime

    @computed_field
    @property
    def balance(self) -> Decimal:
        return self.total_income - self.total_expense
