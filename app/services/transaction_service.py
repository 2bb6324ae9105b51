"""Transaction service"""
from decimal import Decimal

from app.config import settings
from app.core.clock import Clock, system_clock
from app.core.errors import NotFound, ValidationFailure, require_user
from app.core.events import Event, EventEmitter
from app.core.store import TRANSACTIONS, DocumentStore
from app.logging_setup import get_logger
from app.schemas.merchant import Merchant
from app.schemas.statistics import StatisticsPeriod
from app.schemas.transaction import Transaction, TransactionCreate, TransactionUpdate
from app.services.category_service import CategoryService
from app.services.merchant_service import MerchantService
from app.utils.periods import resolve_date_range

logger = get_logger(__name__)


def _document(transaction: Transaction) -> dict:
    return transaction.model_dump(mode="json", exclude={"id"})


def _clean_name(name: str | None) -> str | None:
    if name is None or not name.strip():
        return None
    return name


class TransactionService:
    """Transactions and the merchant bookkeeping that follows each save"""

    def __init__(
        self,
        store: DocumentStore,
        events: EventEmitter,
        categories: CategoryService,
        merchants: MerchantService,
        clock: Clock = system_clock,
        first_weekday: int = settings.FIRST_WEEKDAY,
    ) -> None:
        self.store = store
        self.events = events
        self.categories = categories
        self.merchants = merchants
        self.clock = clock
        self.first_weekday = first_weekday

    async def create_transaction(self, user_id: str | None, transaction_data: TransactionCreate) -> Transaction:
        """
        Create a new transaction.

        The cached category name is taken from the category record and the date
        defaults to now. When a merchant is named (or picked by id) it is
        resolved, created if needed, and the transaction is recorded on it.

        Raises:
            NotAuthenticated: If no user id is given
            ValidationFailure: If the amount is not positive
            NotFound: If the category or picked merchant does not exist
            PersistenceFailure: If the store fails
        """
        user_id = require_user(user_id)
        _check_amount(transaction_data.amount)
        category = await self.categories.get_category(user_id, transaction_data.category_id)

        now = self.clock()
        transaction = Transaction(
            **transaction_data.model_dump(exclude={"date", "merchant_name"}),
            merchant_name=_clean_name(transaction_data.merchant_name),
            user_id=user_id,
            category_name=category.name,
            date=transaction_data.date or now,
            created_at=now,
            updated_at=now,
        )
        merchant = None
        if transaction.merchant_id or transaction.merchant_name:
            merchant = await self.merchants.resolve_merchant(
                user_id, transaction.merchant_name, transaction.merchant_id
            )
            _attach_merchant(transaction, merchant)

        transaction.id = await self.store.add(TRANSACTIONS, _document(transaction))
        logger.info("Created transaction %s for user %s", transaction.id, user_id)
        self.events.emit(Event.TRANSACTION_ADDED, transaction)

        if merchant is not None:
            await self._record_on_merchant(merchant, transaction)
        return transaction

    async def get_transaction(self, user_id: str | None, transaction_id: str) -> Transaction:
        """Get one of the user's transactions by id"""
        user_id = require_user(user_id)
        document = await self.store.get(TRANSACTIONS, transaction_id)
        if document is None:
            raise NotFound("Transaction not found")
        transaction = Transaction.model_validate(document)
        if transaction.user_id != user_id:
            raise NotFound("Transaction not found")
        return transaction

    async def fetch_transactions(self, user_id: str | None) -> list[Transaction]:
        """All of the user's transactions, newest first"""
        user_id = require_user(user_id)
        documents = await self.store.query(TRANSACTIONS, {"user_id": user_id})
        transactions = [Transaction.model_validate(doc) for doc in documents]
        transactions.sort(key=lambda t: t.date, reverse=True)
        return transactions

    async def list_transactions(
        self,
        user_id: str | None,
        limit: int = settings.TRANSACTION_LIST_LIMIT,
    ) -> tuple[list[Transaction], int]:
        """Newest ``limit`` transactions. Returns (transactions, total_count)."""
        transactions = await self.fetch_transactions(user_id)
        return transactions[:limit], len(transactions)

    async def fetch_transactions_for_period(
        self,
        user_id: str | None,
        period: StatisticsPeriod,
    ) -> list[Transaction]:
        """Transactions dated inside the current ``period``, newest first"""
        start, end = resolve_date_range(period, self.clock(), self.first_weekday)
        return [t for t in await self.fetch_transactions(user_id) if start <= t.date < end]

    async def update_transaction(
        self,
        user_id: str | None,
        transaction_id: str,
        transaction_data: TransactionUpdate,
    ) -> Transaction:
        """
        Update transaction.

        Everything but the id and creation time may change. Naming a different
        merchant without an id drops the previous merchant reference. The
        merchant (if any) records the transaction again afterwards.
        """
        transaction = await self.get_transaction(user_id, transaction_id)
        update_data = transaction_data.model_dump(exclude_unset=True)
        if "amount" in update_data:
            _check_amount(update_data["amount"])

        if "merchant_name" in update_data:
            update_data["merchant_name"] = _clean_name(update_data["merchant_name"])
            update_data.setdefault("merchant_id", None)

        if update_data.get("category_id") not in (None, transaction.category_id):
            category = await self.categories.get_category(user_id, update_data["category_id"])
            update_data["category_name"] = category.name

        for field in ("amount", "type", "category_id", "date"):
            if field in update_data and update_data[field] is None:
                raise ValidationFailure(f"{field} cannot be empty")

        data = transaction.model_dump()
        data.update(update_data)
        data["updated_at"] = self.clock()
        transaction = Transaction.model_validate(data)

        merchant = await self._resolve_for_update(
            transaction.user_id, transaction, explicit_id=bool(update_data.get("merchant_id"))
        )

        await self.store.set(TRANSACTIONS, transaction_id, _document(transaction))
        logger.info("Updated transaction %s", transaction_id)
        self.events.emit(Event.TRANSACTION_UPDATED, transaction)

        if merchant is not None:
            await self._record_on_merchant(merchant, transaction)
        return transaction

    async def delete_transaction(self, user_id: str | None, transaction_id: str) -> None:
        """Delete transaction (hard delete). Merchant stats are left as they are."""
        await self.get_transaction(user_id, transaction_id)
        await self.store.delete(TRANSACTIONS, transaction_id)
        logger.info("Deleted transaction %s", transaction_id)
        self.events.emit(Event.TRANSACTION_DELETED, transaction_id)

    async def _resolve_for_update(
        self,
        user_id: str,
        transaction: Transaction,
        explicit_id: bool,
    ) -> Merchant | None:
        """
        Resolve the merchant of an edited transaction before it is written.

        A merchant id carried over from the stored record may point at a merchant
        that was deleted since; the name is then resolved instead, or the
        reference is dropped when there is no name. An id picked in this edit
        must exist.
        """
        if not (transaction.merchant_id or transaction.merchant_name):
            return None
        try:
            merchant = await self.merchants.resolve_merchant(
                user_id, transaction.merchant_name, transaction.merchant_id
            )
        except NotFound:
            if explicit_id or not transaction.merchant_id:
                raise
            logger.warning(
                "Merchant %s of transaction %s no longer exists", transaction.merchant_id, transaction.id
            )
            transaction.merchant_id = None
            if not transaction.merchant_name:
                return None
            merchant = await self.merchants.resolve_merchant(user_id, transaction.merchant_name)
        _attach_merchant(transaction, merchant)
        return merchant

    async def _record_on_merchant(self, merchant: Merchant, transaction: Transaction) -> None:
        await self.merchants.record_transaction(
            merchant_id=merchant.id,
            transaction_id=transaction.id,
            amount=transaction.amount,
            date=transaction.date,
            category_id=transaction.category_id,
            category_name=transaction.category_name or "",
            type=transaction.type,
        )


def _attach_merchant(transaction: Transaction, merchant: Merchant) -> None:
    transaction.merchant_id = merchant.id
    transaction.merchant_name = merchant.display_name


def _check_amount(amount: Decimal | None) -> None:
    if amount is None or not amount.is_finite() or amount <= 0:
        raise ValidationFailure("Amount must be positive")
