"""Transactions API endpoints"""
from fastapi import APIRouter, Query, status

from app.config import settings
from app.core.deps import CurrentUserId, ServicesDep
from app.schemas.transaction import (
    Transaction,
    TransactionCreate,
    TransactionListResponse,
    TransactionUpdate,
)


router = APIRouter(prefix="/transactions", tags=["transactions"])


@router.get("", response_model=TransactionListResponse)
async def get_transactions(
    services: ServicesDep,
    user_id: CurrentUserId,
    limit: int = Query(settings.TRANSACTION_LIST_LIMIT, ge=1, le=1000),
):
    """Get the newest transactions"""
    transactions, total = await services.transactions.list_transactions(user_id, limit=limit)
    return TransactionListResponse(items=transactions, limit=limit, total=total)


@router.post("", response_model=Transaction, status_code=status.HTTP_201_CREATED)
async def create_transaction(
    transaction_data: TransactionCreate,
    services: ServicesDep,
    user_id: CurrentUserId,
):
    """Create a new transaction (and update its merchant)"""
    return await services.transactions.create_transaction(user_id, transaction_data)


@router.get("/{transaction_id}", response_model=Transaction)
async def get_transaction(
    transaction_id: str,
    services: ServicesDep,
    user_id: CurrentUserId,
):
    """Get transaction by ID"""
    return await services.transactions.get_transaction(user_id, transaction_id)


@router.patch("/{transaction_id}", response_model=Transaction)
async def update_transaction(
    transaction_id: str,
    transaction_data: TransactionUpdate,
    services: ServicesDep,
    user_id: CurrentUserId,
):
    """Update transaction"""
    return await services.transactions.update_transaction(user_id, transaction_id, transaction_data)


@router.delete("/{transaction_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_transaction(
    transaction_id: str,
    services: ServicesDep,
    user_id: CurrentUserId,
):
    """Delete transaction"""
    await services.transactions.delete_transaction(user_id, transaction_id)
    return None
