"""API v1 routes"""
from fastapi import APIRouter
from app.api.v1 import (
    transactions,
    categories,
    merchants,
    statistics,
    meta
)

api_router = APIRouter()

# Include route modules
api_router.include_router(transactions.router)
api_router.include_router(categories.router)
api_router.include_router(merchants.router)
api_router.include_router(statistics.router)
api_router.include_router(meta.router)
