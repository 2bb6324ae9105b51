"""Categories API endpoints"""
from fastapi import APIRouter, status

from app.core.deps import CurrentUserId, ServicesDep
from app.schemas.category import Category, CategoryCreate


router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=list[Category])
async def get_categories(services: ServicesDep, user_id: CurrentUserId):
    """Get the user's categories"""
    return await services.categories.list_categories(user_id)


@router.post("/defaults", response_model=list[Category])
async def initialize_default_categories(services: ServicesDep, user_id: CurrentUserId):
    """Seed default categories; returns the ones created (none if already seeded)"""
    return await services.categories.initialize_default_categories(user_id)


@router.post("", response_model=Category, status_code=status.HTTP_201_CREATED)
async def create_category(
    category_data: CategoryCreate,
    services: ServicesDep,
    user_id: CurrentUserId,
):
    """Create a new category"""
    return await services.categories.add_category(user_id, category_data)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    category_id: str,
    services: ServicesDep,
    user_id: CurrentUserId,
):
    """Delete a user-created category"""
    await services.categories.delete_category(user_id, category_id)
    return None
