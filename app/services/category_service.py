"""Category service"""
from app.core.clock import Clock, system_clock
from app.core.errors import NotFound, ValidationFailure, require_user
from app.core.events import Event, EventEmitter
from app.core.store import CATEGORIES, DocumentStore
from app.logging_setup import get_logger
from app.schemas.category import DEFAULT_CATEGORIES, Category, CategoryCreate

logger = get_logger(__name__)


class CategoryService:
    """Per-user categories, seeded with the default set"""

    def __init__(self, store: DocumentStore, events: EventEmitter, clock: Clock = system_clock) -> None:
        self.store = store
        self.events = events
        self.clock = clock

    async def initialize_default_categories(self, user_id: str | None) -> list[Category]:
        """Seed the default categories once. Returns the categories created (empty if already seeded)."""
        user_id = require_user(user_id)
        existing = await self.store.query(CATEGORIES, {"user_id": user_id, "is_default": True})
        if existing:
            return []

        created = []
        for name, icon, color in DEFAULT_CATEGORIES:
            category = Category(
                name=name,
                icon=icon,
                color=color,
                is_default=True,
                user_id=user_id,
                created_at=self.clock(),
            )
            category.id = await self.store.add(CATEGORIES, category.model_dump(mode="json", exclude={"id"}))
            created.append(category)

        logger.info("Seeded %d default categories for user %s", len(created), user_id)
        self.events.emit(Event.CATEGORIES_CHANGED, None)
        return created

    async def list_categories(self, user_id: str | None) -> list[Category]:
        user_id = require_user(user_id)
        documents = await self.store.query(CATEGORIES, {"user_id": user_id})
        return [Category.model_validate(doc) for doc in documents]

    async def get_category(self, user_id: str | None, category_id: str) -> Category:
        """Get one of the user's categories (or a shared default) by id"""
        user_id = require_user(user_id)
        document = await self.store.get(CATEGORIES, category_id)
        if document is None:
            raise NotFound("Category not found")
        category = Category.model_validate(document)
        if category.user_id not in (None, user_id):
            raise NotFound("Category not found")
        return category

    async def add_category(self, user_id: str | None, category_data: CategoryCreate) -> Category:
        """Create a user category; names are unique per user (case-sensitive)"""
        user_id = require_user(user_id)
        clash = await self.store.query(CATEGORIES, {"user_id": user_id, "name": category_data.name})
        if clash:
            raise ValidationFailure(f"Category '{category_data.name}' already exists")

        category = Category(
            **category_data.model_dump(),
            is_default=False,
            user_id=user_id,
            created_at=self.clock(),
        )
        category.id = await self.store.add(CATEGORIES, category.model_dump(mode="json", exclude={"id"}))
        self.events.emit(Event.CATEGORIES_CHANGED, category)
        return category

    async def delete_category(self, user_id: str | None, category_id: str) -> None:
        """Delete a user category. Default categories cannot be deleted."""
        category = await self.get_category(user_id, category_id)
        if category.is_default:
            raise ValidationFailure("Default categories cannot be deleted")
        await self.store.delete(CATEGORIES, category_id)
        self.events.emit(Event.CATEGORIES_CHANGED, None)
