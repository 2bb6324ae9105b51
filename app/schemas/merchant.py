"""Merchant schemas"""
from datetime import datetime
from decimal import Decimal
from enum import Enum
from pydantic import BaseModel, Field, computed_field, field_validator

from app.config import settings
from app.core.clock import ensure_aware
from app.schemas.transaction import Location, TransactionType


class MerchantVerdict(str, Enum):
    """Recommendation status of a merchant"""
    RECOMMENDED = "recommended"
    NEUTRAL = "neutral"
    AVOID = "avoid"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    @property
    def color(self) -> str:
        return {
            MerchantVerdict.RECOMMENDED: "#4CAF50",
            MerchantVerdict.NEUTRAL: "#FF9800",
            MerchantVerdict.AVOID: "#F44336",
        }[self]


class MerchantNote(BaseModel):
    """User notes about a merchant"""
    rating: int | None = Field(None, ge=1, le=5)
    verdict: MerchantVerdict | None = None
    tips: list[str] = Field(default_factory=list)
    pros: list[str] = Field(default_factory=list)
    cons: list[str] = Field(default_factory=list)
    raw: str | None = None
    category: str | None = None
    location: Location | None = None


class MerchantStats(BaseModel):
    """Running totals maintained on every recorded transaction"""
    total_spending: Decimal = Decimal("0")
    visit_count: int = Field(0, ge=0)
    last_visit_date: datetime | None = None


class RecentTransaction(BaseModel):
    """Entry of a merchant's recency log, mirrors a transaction"""
    id: str
    amount: Decimal
    date: datetime
    category_id: str
    category_name: str
    type: TransactionType

    @field_validator("date")
    @classmethod
    def _aware(cls, value: datetime) -> datetime:
        return ensure_aware(value)


class Merchant(BaseModel):
    """Stored merchant record"""
    id: str | None = None
    user_id: str
    merchant_key: str
    display_name: str
    note: MerchantNote = Field(default_factory=MerchantNote)
    stats: MerchantStats = Field(default_factory=MerchantStats)
    recent_transactions: list[RecentTransaction] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    @computed_field
    @property
    def category(self) -> str:
        return self.note.category or settings.DEFAULT_MERCHANT_CATEGORY

    @computed_field
    @property
    def is_frequent(self) -> bool:
        return self.stats.visit_count >= settings.FREQUENT_MERCHANT_VISITS

    def record(
        self,
        entry: RecentTransaction,
        limit: int = settings.RECENT_TRANSACTIONS_LIMIT,
    ) -> None:
        """
        Fold a transaction into the recency log and running stats.

        The entry replaces any previous one with the same id and goes to the
        front; the log keeps the ``limit`` newest insertions (call order, not
        transaction date). Stats always grow: an edited transaction is counted
        again, and ``last_visit_date`` takes the incoming date even if it is
        older than the current one.
        """
        self.recent_transactions = [t for t in self.recent_transactions if t.id != entry.id]
        self.recent_transactions.insert(0, entry)
        if len(self.recent_transactions) > limit:
            self.recent_transactions = self.recent_transactions[:limit]

        self.stats.total_spending += entry.amount
        self.stats.visit_count += 1
        self.stats.last_visit_date = entry.date

    def to_document(self) -> dict:
        """Serialize for the document store (derived fields excluded)."""
        return self.model_dump(mode="json", exclude={"id", "category", "is_frequent"})


class MerchantCreate(BaseModel):
    """Schema for creating a merchant explicitly"""
    display_name: str = Field(..., min_length=1, max_length=200)
    merchant_key: str | None = Field(None, min_length=1, max_length=200)
    note: MerchantNote | None = None


class MerchantUpdate(BaseModel):
    """Schema for editing a merchant's name or notes"""
    display_name: str | None = Field(None, min_length=1, max_length=200)
    note: MerchantNote | None = None


class RecordTransactionRequest(BaseModel):
    """Schema for recording a transaction against a merchant"""
    transaction_id: str = Field(..., min_length=1)
    amount: Decimal = Field(..., gt=0, decimal_places=2)
    date: datetime
    category_id: str = Field(..., min_length=1)
    category_name: str
    type: TransactionType
