"""Transaction schemas"""
from datetime import datetime
from decimal import Decimal
from enum import Enum
from pydantic import BaseModel, Field, field_validator

from app.core.clock import ensure_aware


class TransactionType(str, Enum):
    """Income / expense type of a transaction"""
    INCOME = "income"
    EXPENSE = "expense"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    @property
    def color(self) -> str:
        """Hex color used in charts and tags"""
        return "#4CAF50" if self is TransactionType.INCOME else "#F44336"


class Location(BaseModel):
    """Geographic location attached to a transaction or merchant note"""
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    address: str | None = None
    city: str | None = None
    country: str | None = None


class TransactionBase(BaseModel):
    """Base transaction schema"""
    amount: Decimal = Field(..., gt=0, decimal_places=2)
    type: TransactionType
    category_id: str = Field(..., min_length=1)
    merchant_id: str | None = None
    merchant_name: str | None = None
    description: str | None = None
    location: Location | None = None


class TransactionCreate(TransactionBase):
    """Schema for creating a transaction"""
    date: datetime | None = None

    @field_validator("date")
    @classmethod
    def _aware_date(cls, value: datetime | None) -> datetime | None:
        return ensure_aware(value) if value is not None else None


class TransactionUpdate(BaseModel):
    """Schema for updating a transaction"""
    amount: Decimal | None = Field(None, gt=0, decimal_places=2)
    type: TransactionType | None = None
    category_id: str | None = Field(None, min_length=1)
    merchant_id: str | None = None
    merchant_name: str | None = None
    description: str | None = None
    date: datetime | None = None
    location: Location | None = None

    @field_validator("date")
    @classmethod
    def _aware_date(cls, value: datetime | None) -> datetime | None:
        return ensure_aware(value) if value is not None else None


class Transaction(TransactionBase):
    """Stored transaction record"""
    id: str | None = None
    user_id: str
    category_name: str | None = None
    date: datetime
    created_at: datetime
    updated_at: datetime

    @field_validator("date", "created_at", "updated_at")
    @classmethod
    def _aware(cls, value: datetime) -> datetime:
        return ensure_aware(value)


class TransactionListResponse(BaseModel):
    """Schema for transaction list"""
    items: list[Transaction]
    limit: int
    total: int
