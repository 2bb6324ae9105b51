"""Merchant service - recency log, running stats and merchant resolution"""
from datetime import datetime
from decimal import Decimal, InvalidOperation

from app.config import settings
from app.core.clock import Clock, system_clock
from app.core.errors import NotFound, ValidationFailure, require_user
from app.core.events import Event, EventEmitter
from app.core.locks import KeyedLock
from app.core.store import MERCHANTS, DocumentStore
from app.logging_setup import get_logger
from app.schemas.merchant import (
    Merchant,
    MerchantCreate,
    MerchantNote,
    MerchantUpdate,
    RecentTransaction,
)
from app.schemas.transaction import TransactionType
from app.utils.matching import find_by_display_name, matches_search, merchant_key

logger = get_logger(__name__)


class MerchantService:
    """
    Maintains merchant records.

    Every read-modify-write of a merchant document runs under a lock keyed by
    the merchant id, so concurrent updates of one merchant are applied one
    after another instead of overwriting each other.
    """

    def __init__(
        self,
        store: DocumentStore,
        events: EventEmitter,
        clock: Clock = system_clock,
        recent_limit: int = settings.RECENT_TRANSACTIONS_LIMIT,
    ) -> None:
        self.store = store
        self.events = events
        self.clock = clock
        self.recent_limit = recent_limit
        self._locks = KeyedLock()

    async def record_transaction(
        self,
        merchant_id: str,
        transaction_id: str,
        amount: Decimal,
        date: datetime,
        category_id: str,
        category_name: str,
        type: TransactionType,
    ) -> Merchant:
        """
        Fold a transaction into the merchant's recency log and stats.

        Args:
            merchant_id: Existing merchant id
            transaction_id: Source transaction id (replaces an earlier entry)
            amount: Positive amount
            date: Transaction date
            category_id: Category id
            category_name: Cached category name
            type: Income or expense

        Returns:
            Merchant: The persisted merchant

        Raises:
            ValidationFailure: If amount is not positive
            NotFound: If the merchant does not exist
            PersistenceFailure: If the store fails
        """
        try:
            amount = Decimal(str(amount))
        except InvalidOperation:
            raise ValidationFailure("Amount must be a number") from None
        if not amount.is_finite() or amount <= 0:
            raise ValidationFailure("Amount must be positive")
        if not transaction_id:
            raise ValidationFailure("Transaction id is required")

        entry = RecentTransaction(
            id=transaction_id,
            amount=amount,
            date=date,
            category_id=category_id,
            category_name=category_name,
            type=type,
        )

        async with self._locks.hold(merchant_id):
            merchant = await self._load(merchant_id)
            logger.debug(
                "Recording transaction %s on merchant %s (%d recent)",
                transaction_id, merchant_id, len(merchant.recent_transactions),
            )
            merchant.record(entry, limit=self.recent_limit)
            merchant.updated_at = self.clock()
            await self.store.set(MERCHANTS, merchant_id, merchant.to_document())

        logger.info(
            "Merchant %s updated: visits=%d total=%s",
            merchant_id, merchant.stats.visit_count, merchant.stats.total_spending,
        )
        self.events.emit(Event.MERCHANTS_CHANGED, merchant)
        return merchant

    async def resolve_merchant(
        self,
        user_id: str | None,
        name: str | None,
        merchant_id: str | None = None,
    ) -> Merchant:
        """
        Resolve the merchant a transaction refers to.

        An explicitly picked merchant id wins. Otherwise the user's merchants
        are searched by normalized display name, and a new merchant is created
        when nothing matches.
        """
        user_id = require_user(user_id)
        if merchant_id:
            return await self.get_merchant(user_id, merchant_id)

        if not name or not name.strip():
            raise ValidationFailure("Merchant name is required")

        merchants = await self.list_merchants(user_id)
        existing = find_by_display_name(merchants, name)
        if existing is not None:
            return existing

        return await self.add_merchant(
            user_id,
            MerchantCreate(
                display_name=name,
                note=MerchantNote(category=settings.DEFAULT_MERCHANT_CATEGORY),
            ),
        )

    async def find_or_create_merchant(
        self,
        user_id: str | None,
        key: str,
        display_name: str,
    ) -> Merchant:
        """Find a merchant by exact key, creating it when missing."""
        user_id = require_user(user_id)
        documents = await self.store.query(MERCHANTS, {"user_id": user_id, "merchant_key": key})
        if documents:
            return Merchant.model_validate(documents[0])
        return await self.add_merchant(
            user_id, MerchantCreate(display_name=display_name, merchant_key=key)
        )

    async def add_merchant(self, user_id: str | None, merchant_data: MerchantCreate) -> Merchant:
        """Create a new merchant with zeroed stats"""
        user_id = require_user(user_id)
        now = self.clock()
        merchant = Merchant(
            user_id=user_id,
            merchant_key=merchant_data.merchant_key or merchant_key(merchant_data.display_name),
            display_name=merchant_data.display_name,
            note=merchant_data.note or MerchantNote(),
            created_at=now,
            updated_at=now,
        )
        merchant.id = await self.store.add(MERCHANTS, merchant.to_document())
        logger.info("Created merchant %s (%s)", merchant.id, merchant.display_name)
        self.events.emit(Event.MERCHANTS_CHANGED, merchant)
        return merchant

    async def get_merchant(self, user_id: str | None, merchant_id: str) -> Merchant:
        """Get one of the user's merchants by id"""
        user_id = require_user(user_id)
        merchant = await self._load(merchant_id)
        if merchant.user_id != user_id:
            raise NotFound("Merchant not found")
        return merchant

    async def list_merchants(self, user_id: str | None, search: str = "") -> list[Merchant]:
        """User's merchants, most visited first, optionally filtered by search text"""
        user_id = require_user(user_id)
        documents = await self.store.query(MERCHANTS, {"user_id": user_id})
        merchants = [Merchant.model_validate(doc) for doc in documents]
        merchants.sort(key=lambda m: m.stats.visit_count, reverse=True)
        if search:
            merchants = [m for m in merchants if matches_search(m, search)]
        return merchants

    async def update_merchant(
        self,
        user_id: str | None,
        merchant_id: str,
        merchant_data: MerchantUpdate,
    ) -> Merchant:
        """Update display name and/or notes (whole-document overwrite)"""
        user_id = require_user(user_id)
        async with self._locks.hold(merchant_id):
            merchant = await self.get_merchant(user_id, merchant_id)
            if merchant_data.display_name is not None:
                merchant.display_name = merchant_data.display_name
            if merchant_data.note is not None:
                merchant.note = merchant_data.note
            merchant.updated_at = self.clock()
            await self.store.set(MERCHANTS, merchant_id, merchant.to_document())
        self.events.emit(Event.MERCHANTS_CHANGED, merchant)
        return merchant

    async def delete_merchant(self, user_id: str | None, merchant_id: str) -> None:
        """Delete merchant (manual only)"""
        user_id = require_user(user_id)
        async with self._locks.hold(merchant_id):
            await self.get_merchant(user_id, merchant_id)
            await self.store.delete(MERCHANTS, merchant_id)
        logger.info("Deleted merchant %s", merchant_id)
        self.events.emit(Event.MERCHANTS_CHANGED, None)

    async def _load(self, merchant_id: str) -> Merchant:
        document = await self.store.get(MERCHANTS, merchant_id)
        if document is None:
            logger.warning("Merchant %s does not exist", merchant_id)
            raise NotFound("Merchant not found")
        return Merchant.model_validate(document)
