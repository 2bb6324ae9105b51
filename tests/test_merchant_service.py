"""
Tests for merchant bookkeeping: recency log, running stats and resolution
"""
import asyncio
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from app.core.errors import NotAuthenticated, NotFound, PersistenceFailure, ValidationFailure
from app.core.events import Event
from app.core.store import MERCHANTS, SqlDocumentStore
from app.schemas.merchant import MerchantCreate, MerchantNote, MerchantUpdate
from app.schemas.transaction import TransactionType
from app.services import build_services
from conftest import NOW, OTHER_USER_ID, USER_ID

pytestmark = pytest.mark.anyio


async def _merchant(services, name="Blue Bottle"):
    return await services.merchants.add_merchant(USER_ID, MerchantCreate(display_name=name))


async def _record(services, merchant_id, transaction_id, amount="10.00", date=NOW):
    return await services.merchants.record_transaction(
        merchant_id=merchant_id,
        transaction_id=transaction_id,
        amount=Decimal(amount),
        date=date,
        category_id="cat-food",
        category_name="Food & Dining",
        type=TransactionType.EXPENSE,
    )


async def test_new_merchant_starts_empty(services):
    merchant = await _merchant(services)

    assert merchant.id
    assert merchant.merchant_key == "bluebottle"
    assert merchant.stats.visit_count == 0
    assert merchant.stats.total_spending == 0
    assert merchant.stats.last_visit_date is None
    assert merchant.recent_transactions == []
    assert merchant.category == "Other"
    assert merchant.is_frequent is False


async def test_recent_transactions_keep_five_newest_calls(services):
    merchant = await _merchant(services)
    for i in range(1, 9):
        await _record(services, merchant.id, f"t{i}", date=NOW + timedelta(minutes=i))

    stored = await services.merchants.get_merchant(USER_ID, merchant.id)
    assert [t.id for t in stored.recent_transactions] == ["t8", "t7", "t6", "t5", "t4"]
    assert stored.stats.visit_count == 8
    assert stored.is_frequent is True


async def test_stats_accumulate_every_call(services):
    merchant = await _merchant(services)
    amounts = ["12.50", "7.25", "30.00"]
    for i, amount in enumerate(amounts):
        await _record(services, merchant.id, f"t{i}", amount=amount)

    stored = await services.merchants.get_merchant(USER_ID, merchant.id)
    assert stored.stats.visit_count == 3
    assert stored.stats.total_spending == Decimal("49.75")
    assert stored.stats.last_visit_date == NOW


async def test_same_transaction_replaces_entry_but_counts_twice(services):
    merchant = await _merchant(services)
    await _record(services, merchant.id, "t1", amount="10.00")
    await _record(services, merchant.id, "t2", amount="5.00")
    updated = await _record(services, merchant.id, "t1", amount="15.00")

    assert [t.id for t in updated.recent_transactions] == ["t1", "t2"]
    assert updated.recent_transactions[0].amount == Decimal("15.00")
    assert updated.stats.visit_count == 3
    assert updated.stats.total_spending == Decimal("30.00")


async def test_order_follows_calls_not_dates(services):
    merchant = await _merchant(services)
    jan = datetime(2024, 1, 1, tzinfo=timezone.utc)
    mar = datetime(2024, 3, 1, tzinfo=timezone.utc)
    feb = datetime(2024, 2, 1, tzinfo=timezone.utc)
    await _record(services, merchant.id, "jan", date=jan)
    await _record(services, merchant.id, "mar", date=mar)
    result = await _record(services, merchant.id, "feb", date=feb)

    assert [t.id for t in result.recent_transactions] == ["feb", "mar", "jan"]
    # last visit follows the latest call even when it is older
    assert result.stats.last_visit_date == feb


async def test_record_rejects_non_positive_amount(services):
    merchant = await _merchant(services)

    for amount in ("0", "-3.00"):
        with pytest.raises(ValidationFailure):
            await _record(services, merchant.id, "t1", amount=amount)

    stored = await services.merchants.get_merchant(USER_ID, merchant.id)
    assert stored.stats.visit_count == 0
    assert stored.recent_transactions == []


@pytest.mark.parametrize("amount", [float("nan"), Decimal("Infinity"), "abc", ""])
async def test_record_rejects_non_numeric_amount(services, amount):
    merchant = await _merchant(services)

    with pytest.raises(ValidationFailure):
        await services.merchants.record_transaction(
            merchant_id=merchant.id,
            transaction_id="t1",
            amount=amount,
            date=NOW,
            category_id="cat-food",
            category_name="Food & Dining",
            type=TransactionType.EXPENSE,
        )

    stored = await services.merchants.get_merchant(USER_ID, merchant.id)
    assert stored.stats.visit_count == 0


async def test_record_on_unknown_merchant(services):
    with pytest.raises(NotFound):
        await _record(services, "missing", "t1")


async def test_concurrent_records_are_not_lost(services):
    merchant = await _merchant(services)

    await asyncio.gather(*(
        _record(services, merchant.id, f"t{i}", amount="1.00") for i in range(10)
    ))

    stored = await services.merchants.get_merchant(USER_ID, merchant.id)
    assert stored.stats.visit_count == 10
    assert stored.stats.total_spending == Decimal("10.00")
    assert len(stored.recent_transactions) == 5
    assert len({t.id for t in stored.recent_transactions}) == 5
    assert len(services.merchants._locks) == 0


async def test_record_emits_merchants_changed(services):
    merchant = await _merchant(services)
    received = []
    services.events.subscribe(Event.MERCHANTS_CHANGED, lambda event, payload: received.append(payload))

    await _record(services, merchant.id, "t1")

    assert len(received) == 1
    assert received[0].id == merchant.id
    assert received[0].stats.visit_count == 1


async def test_failing_handler_does_not_fail_write(services):
    merchant = await _merchant(services)

    def broken(event, payload):
        raise RuntimeError("listener crashed")

    services.events.subscribe(Event.MERCHANTS_CHANGED, broken)
    result = await _record(services, merchant.id, "t1")

    assert result.stats.visit_count == 1


async def test_store_failure_propagates(session_maker):
    class FailingWrites(SqlDocumentStore):
        async def set(self, collection, document_id, document):
            raise PersistenceFailure("disk full")

    services = build_services(store=FailingWrites(session_maker))
    merchant = await _merchant(services)

    with pytest.raises(PersistenceFailure):
        await _record(services, merchant.id, "t1")

    stored = await services.store.get(MERCHANTS, merchant.id)
    assert stored["stats"]["visit_count"] == 0


async def test_resolve_matches_display_name(services):
    merchant = await _merchant(services, "Blue Bottle")

    resolved = await services.merchants.resolve_merchant(USER_ID, "  BLUE bottle ")

    assert resolved.id == merchant.id
    assert len(await services.merchants.list_merchants(USER_ID)) == 1


async def test_resolve_creates_missing_merchant(services):
    resolved = await services.merchants.resolve_merchant(USER_ID, "Corner Shop")

    assert resolved.display_name == "Corner Shop"
    assert resolved.merchant_key == "cornershop"
    assert resolved.note.category == "Other"
    assert resolved.stats.visit_count == 0


async def test_resolve_prefers_explicit_id(services):
    first = await _merchant(services, "Blue Bottle")
    await _merchant(services, "Corner Shop")

    resolved = await services.merchants.resolve_merchant(USER_ID, "Corner Shop", first.id)

    assert resolved.id == first.id


async def test_resolve_ignores_other_users(services):
    foreign = await services.merchants.add_merchant(
        OTHER_USER_ID, MerchantCreate(display_name="Blue Bottle")
    )

    resolved = await services.merchants.resolve_merchant(USER_ID, "Blue Bottle")
    assert resolved.id != foreign.id

    with pytest.raises(NotFound):
        await services.merchants.resolve_merchant(USER_ID, None, foreign.id)


async def test_resolve_requires_name(services):
    with pytest.raises(ValidationFailure):
        await services.merchants.resolve_merchant(USER_ID, "   ")


async def test_find_or_create_by_key(services):
    created = await services.merchants.find_or_create_merchant(USER_ID, "starbucks", "Starbucks")
    found = await services.merchants.find_or_create_merchant(USER_ID, "starbucks", "Starbucks Reserve")

    assert found.id == created.id
    assert found.display_name == "Starbucks"


async def test_list_orders_by_visits_and_filters(services):
    cafe = await _merchant(services, "Blue Bottle")
    shop = await services.merchants.add_merchant(
        USER_ID,
        MerchantCreate(display_name="Corner Shop", note=MerchantNote(category="Groceries")),
    )
    await _record(services, shop.id, "t1")
    await _record(services, shop.id, "t2")
    await _record(services, cafe.id, "t3")

    merchants = await services.merchants.list_merchants(USER_ID)
    assert [m.id for m in merchants] == [shop.id, cafe.id]

    assert [m.id for m in await services.merchants.list_merchants(USER_ID, "bottle")] == [cafe.id]
    assert [m.id for m in await services.merchants.list_merchants(USER_ID, "grocer")] == [shop.id]


async def test_update_and_delete_merchant(services):
    merchant = await _merchant(services)
    await _record(services, merchant.id, "t1")

    updated = await services.merchants.update_merchant(
        USER_ID, merchant.id, MerchantUpdate(note=MerchantNote(rating=4, tips=["Try the cold brew"]))
    )
    assert updated.note.rating == 4
    assert updated.stats.visit_count == 1

    await services.merchants.delete_merchant(USER_ID, merchant.id)
    with pytest.raises(NotFound):
        await services.merchants.get_merchant(USER_ID, merchant.id)


async def test_merchant_operations_need_user(services):
    with pytest.raises(NotAuthenticated):
        await services.merchants.list_merchants(None)
    with pytest.raises(NotAuthenticated):
        await services.merchants.resolve_merchant("", "Blue Bottle")
