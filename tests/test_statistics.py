"""
Tests for statistics aggregation and period ranges
"""
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from app.core.errors import NotAuthenticated, PersistenceFailure
from app.core.store import SqlDocumentStore
from app.schemas.statistics import StatisticsPeriod
from app.schemas.transaction import TransactionCreate, TransactionType
from app.services import build_services
from app.services.statistics_service import compute_statistics
from app.utils.periods import resolve_date_range
from conftest import NOW, OTHER_USER_ID, USER_ID, make_transaction

EXPENSE = TransactionType.EXPENSE
INCOME = TransactionType.INCOME
MARCH = datetime(2024, 3, 1, tzinfo=timezone.utc)
APRIL = datetime(2024, 4, 1, tzinfo=timezone.utc)


def _day(month, day):
    return datetime(2024, month, day, 9, 30, tzinfo=timezone.utc)


def test_totals_and_breakdown():
    transactions = [
        make_transaction("100.00", EXPENSE, "food", _day(3, 2), "Food"),
        make_transaction("50.00", EXPENSE, "food", _day(3, 5), "Food"),
        make_transaction("200.00", INCOME, "salary", _day(3, 10), "Salary"),
    ]

    stats = compute_statistics(transactions, StatisticsPeriod.MONTH, MARCH, APRIL)

    assert stats.total_income == Decimal("200.00")
    assert stats.total_expense == Decimal("150.00")
    assert stats.net_amount == Decimal("50.00")
    assert stats.balance == Decimal("50.00")
    assert stats.transaction_count == 3

    salary, food = stats.category_breakdown
    assert salary.category_id == "salary"
    assert salary.amount == Decimal("200.00")
    assert salary.percentage == pytest.approx(200 / 350)
    assert salary.type == INCOME
    assert food.category_name == "Food"
    assert food.amount == Decimal("150.00")
    assert food.percentage == pytest.approx(150 / 350)
    assert food.transaction_count == 2


@pytest.mark.anyio
async def test_breakdown_uses_category_record_for_icon_and_color(categories):
    food = categories["Dining"]
    transactions = [
        make_transaction("20.00", EXPENSE, food.id, _day(3, 2), food.name),
        make_transaction("5.00", EXPENSE, "unknown", _day(3, 3), "Gone"),
    ]

    stats = compute_statistics(
        transactions, StatisticsPeriod.MONTH, MARCH, APRIL, {food.id: food}
    )

    known, unknown = stats.category_breakdown
    assert (known.category_icon, known.category_color) == (food.icon, food.color)
    assert (unknown.category_icon, unknown.category_color) == ("📊", EXPENSE.color)


def test_monthly_trend():
    transactions = [
        make_transaction("30.00", EXPENSE, "food", _day(2, 14)),
        make_transaction("100.00", INCOME, "salary", _day(1, 31)),
        make_transaction("40.00", EXPENSE, "food", _day(1, 3)),
    ]
    start = datetime(2024, 1, 1, tzinfo=timezone.utc)
    end = datetime(2025, 1, 1, tzinfo=timezone.utc)

    stats = compute_statistics(transactions, StatisticsPeriod.YEAR, start, end)

    jan, feb = stats.monthly_trend
    assert jan.month == "2024-01"
    assert (jan.income, jan.expense, jan.net) == (Decimal("100.00"), Decimal("40.00"), Decimal("60.00"))
    assert feb.month == "2024-02"
    assert feb.net == Decimal("-30.00")
    assert feb.date == datetime(2024, 2, 1, tzinfo=timezone.utc)


def test_range_is_half_open():
    transactions = [
        make_transaction("1.00", EXPENSE, "food", MARCH),
        make_transaction("2.00", EXPENSE, "food", APRIL),
        make_transaction("4.00", EXPENSE, "food", datetime(2024, 2, 29, 23, 59, tzinfo=timezone.utc)),
    ]

    stats = compute_statistics(transactions, StatisticsPeriod.MONTH, MARCH, APRIL)

    assert stats.transaction_count == 1
    assert stats.total_expense == Decimal("1.00")


def test_empty_period():
    stats = compute_statistics([], StatisticsPeriod.MONTH, MARCH, APRIL)

    assert stats.total_income == 0
    assert stats.total_expense == 0
    assert stats.net_amount == 0
    assert stats.transaction_count == 0
    assert stats.category_breakdown == []
    assert stats.monthly_trend == []


def test_statistics_are_deterministic():
    transactions = [
        make_transaction("12.00", EXPENSE, "food", _day(3, 1)),
        make_transaction("8.00", EXPENSE, "transport", _day(3, 2)),
        make_transaction("99.00", INCOME, "salary", _day(3, 3)),
    ]

    first = compute_statistics(transactions, StatisticsPeriod.MONTH, MARCH, APRIL)
    second = compute_statistics(transactions, StatisticsPeriod.MONTH, MARCH, APRIL)

    assert first == second


@pytest.mark.parametrize(
    "period, first_weekday, expected_start, expected_end",
    [
        (StatisticsPeriod.DAY, 0, datetime(2024, 3, 15), datetime(2024, 3, 16)),
        (StatisticsPeriod.WEEK, 0, datetime(2024, 3, 11), datetime(2024, 3, 18)),
        (StatisticsPeriod.WEEK, 6, datetime(2024, 3, 10), datetime(2024, 3, 17)),
        (StatisticsPeriod.MONTH, 0, datetime(2024, 3, 1), datetime(2024, 4, 1)),
        (StatisticsPeriod.YEAR, 0, datetime(2024, 1, 1), datetime(2025, 1, 1)),
    ],
)
def test_resolve_date_range(period, first_weekday, expected_start, expected_end):
    start, end = resolve_date_range(period, NOW, first_weekday)

    assert start == expected_start.replace(tzinfo=timezone.utc)
    assert end == expected_end.replace(tzinfo=timezone.utc)


def test_month_range_wraps_year():
    start, end = resolve_date_range(
        StatisticsPeriod.MONTH, datetime(2023, 12, 31, 23, 0, tzinfo=timezone.utc)
    )

    assert start == datetime(2023, 12, 1, tzinfo=timezone.utc)
    assert end == datetime(2024, 1, 1, tzinfo=timezone.utc)


@pytest.mark.anyio
async def test_calculate_statistics_for_current_month(services, categories):
    food = categories["Dining"]
    salary = categories["Salary"]
    for amount, type_, category, date in [
        ("100.00", EXPENSE, food, _day(3, 2)),
        ("50.00", EXPENSE, food, _day(3, 4)),
        ("200.00", INCOME, salary, _day(3, 1)),
        ("999.00", EXPENSE, food, _day(2, 20)),
    ]:
        await services.transactions.create_transaction(
            USER_ID,
            TransactionCreate(amount=Decimal(amount), type=type_, category_id=category.id, date=date),
        )
    await services.categories.initialize_default_categories(OTHER_USER_ID)

    stats = await services.statistics.calculate_statistics(USER_ID, StatisticsPeriod.MONTH)

    assert stats.start_date == MARCH
    assert stats.end_date == APRIL
    assert stats.transaction_count == 3
    assert stats.total_expense == Decimal("150.00")
    assert stats.total_income == Decimal("200.00")
    assert [c.category_name for c in stats.category_breakdown] == ["Salary", "Dining"]
    assert stats.category_breakdown[1].category_icon == food.icon
    assert [m.month for m in stats.monthly_trend] == ["2024-03"]


@pytest.mark.anyio
async def test_calculate_statistics_without_transactions(services):
    stats = await services.statistics.calculate_statistics(USER_ID, StatisticsPeriod.WEEK)

    assert stats.transaction_count == 0
    assert stats.category_breakdown == []


@pytest.mark.anyio
async def test_calculate_statistics_needs_user(services):
    with pytest.raises(NotAuthenticated):
        await services.statistics.calculate_statistics(None, StatisticsPeriod.MONTH)


@pytest.mark.anyio
async def test_fetch_failure_is_not_an_empty_result(session_maker):
    class FailingReads(SqlDocumentStore):
        async def query(self, collection, filters=None):
            raise PersistenceFailure("connection lost")

    services = build_services(store=FailingReads(session_maker))

    with pytest.raises(PersistenceFailure):
        await services.statistics.calculate_statistics(USER_ID, StatisticsPeriod.MONTH)
