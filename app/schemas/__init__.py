"""Pydantic schemas for records and request/response validation"""
from app.schemas.transaction import (
    TransactionType,
    Location,
    TransactionCreate,
    TransactionUpdate,
    Transaction,
    TransactionListResponse,
)
from app.schemas.category import (
    CategoryCreate,
    Category,
    DEFAULT_CATEGORIES,
)
from app.schemas.merchant import (
    MerchantVerdict,
    MerchantNote,
    MerchantStats,
    RecentTransaction,
    Merchant,
    MerchantCreate,
    MerchantUpdate,
    RecordTransactionRequest,
)
from app.schemas.statistics import (
    StatisticsPeriod,
    CategoryStatistic,
    MonthlyStatistic,
    TransactionStatistics,
)


__all__ = [
    "TransactionType",
    "Location",
    "TransactionCreate",
    "TransactionUpdate",
    "Transaction",
    "TransactionListResponse",
    "CategoryCreate",
    "Category",
    "DEFAULT_CATEGORIES",
    "MerchantVerdict",
    "MerchantNote",
    "MerchantStats",
    "RecentTransaction",
    "Merchant",
    "MerchantCreate",
    "MerchantUpdate",
    "RecordTransactionRequest",
    "StatisticsPeriod",
    "CategoryStatistic",
    "MonthlyStatistic",
    "TransactionStatistics",
]
