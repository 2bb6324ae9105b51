"""Merchants API endpoints"""
from fastapi import APIRouter, Query, status

from app.core.deps import CurrentUserId, ServicesDep
from app.schemas.merchant import (
    Merchant,
    MerchantCreate,
    MerchantUpdate,
    RecordTransactionRequest,
)


router = APIRouter(prefix="/merchants", tags=["merchants"])


@router.get("", response_model=list[Merchant])
async def get_merchants(
    services: ServicesDep,
    user_id: CurrentUserId,
    q: str = Query(""),
):
    """Get merchants, most visited first, optionally filtered by search text"""
    return await services.merchants.list_merchants(user_id, search=q)


@router.post("", response_model=Merchant, status_code=status.HTTP_201_CREATED)
async def create_merchant(
    merchant_data: MerchantCreate,
    services: ServicesDep,
    user_id: CurrentUserId,
):
    """Create a merchant, or return the existing one with the same key"""
    if merchant_data.merchant_key:
        return await services.merchants.find_or_create_merchant(
            user_id, merchant_data.merchant_key, merchant_data.display_name
        )
    return await services.merchants.add_merchant(user_id, merchant_data)


@router.get("/{merchant_id}", response_model=Merchant)
async def get_merchant(
    merchant_id: str,
    services: ServicesDep,
    user_id: CurrentUserId,
):
    """Get merchant by ID"""
    return await services.merchants.get_merchant(user_id, merchant_id)


@router.patch("/{merchant_id}", response_model=Merchant)
async def update_merchant(
    merchant_id: str,
    merchant_data: MerchantUpdate,
    services: ServicesDep,
    user_id: CurrentUserId,
):
    """Update merchant name or notes"""
    return await services.merchants.update_merchant(user_id, merchant_id, merchant_data)


@router.delete("/{merchant_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_merchant(
    merchant_id: str,
    services: ServicesDep,
    user_id: CurrentUserId,
):
    """Delete merchant"""
    await services.merchants.delete_merchant(user_id, merchant_id)
    return None


@router.post("/{merchant_id}/transactions", response_model=Merchant)
async def record_merchant_transaction(
    merchant_id: str,
    record: RecordTransactionRequest,
    services: ServicesDep,
    user_id: CurrentUserId,
):
    """Record a transaction in the merchant's recency log and stats"""
    await services.merchants.get_merchant(user_id, merchant_id)
    return await services.merchants.record_transaction(
        merchant_id=merchant_id,
        transaction_id=record.transaction_id,
        amount=record.amount,
        date=record.date,
        category_id=record.category_id,
        category_name=record.category_name,
        type=record.type,
    )
