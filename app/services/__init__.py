"""Service layer for business logic"""
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.config import settings
from app.core.clock import Clock, system_clock
from app.core.events import EventEmitter
from app.core.store import DocumentStore, SqlDocumentStore
from app.services.category_service import CategoryService
from app.services.merchant_service import MerchantService
from app.services.statistics_service import StatisticsService
from app.services.transaction_service import TransactionService


@dataclass
class Services:
    """Long-lived service instances sharing one store, emitter and clock"""
    store: DocumentStore
    events: EventEmitter
    categories: CategoryService
    merchants: MerchantService
    transactions: TransactionService
    statistics: StatisticsService


def build_services(
    session_maker: async_sessionmaker[AsyncSession] | None = None,
    *,
    store: DocumentStore | None = None,
    clock: Clock = system_clock,
) -> Services:
    """Wire the services over ``store`` (or a SQL store on ``session_maker``)."""
    if store is None:
        if session_maker is None:
            from app.database import async_session_maker as session_maker
        store = SqlDocumentStore(session_maker)

    events = EventEmitter()
    categories = CategoryService(store, events, clock)
    merchants = MerchantService(
        store, events, clock, recent_limit=settings.RECENT_TRANSACTIONS_LIMIT
    )
    transactions = TransactionService(
        store, events, categories, merchants, clock, first_weekday=settings.FIRST_WEEKDAY
    )
    statistics = StatisticsService(
        transactions, categories, clock, first_weekday=settings.FIRST_WEEKDAY
    )
    return Services(
        store=store,
        events=events,
        categories=categories,
        merchants=merchants,
        transactions=transactions,
        statistics=statistics,
    )


__all__ = [
    "Services",
    "build_services",
    "CategoryService",
    "MerchantService",
    "TransactionService",
    "StatisticsService",
]
