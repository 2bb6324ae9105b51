"""Category schemas"""
from datetime import datetime
from pydantic import BaseModel, Field


class CategoryBase(BaseModel):
    """Base category schema"""
    name: str = Field(..., min_length=1, max_length=100)
    icon: str = Field(..., min_length=1, max_length=16)
    color: str = Field(..., pattern="^#[0-9A-Fa-f]{6}$")


class CategoryCreate(CategoryBase):
    """Schema for creating a category"""
    pass


class Category(CategoryBase):
    """Stored category record"""
    id: str | None = None
    is_default: bool = False
    user_id: str | None = None
    created_at: datetime


# (name, icon, color) of the categories seeded for every user
DEFAULT_CATEGORIES: list[tuple[str, str, str]] = [
    ("Dining", "🍽️", "#FF9800"),
    ("Transport", "🚗", "#2196F3"),
    ("Shopping", "🛍️", "#E91E63"),
    ("Entertainment", "🎮", "#9C27B0"),
    ("Healthcare", "🏥", "#F44336"),
    ("Education", "📚", "#3F51B5"),
    ("Housing", "🏠", "#795548"),
    ("Salary", "💰", "#4CAF50"),
    ("Bonus", "🎁", "#8BC34A"),
    ("Investment", "📈", "#CDDC39"),
    ("Side Job", "💼", "#FFC107"),
    ("Transfer", "💸", "#00BCD4"),
    ("Gifts", "🎀", "#FF5722"),
    ("Other", "📦", "#607D8B"),
]
