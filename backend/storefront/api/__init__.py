"""
API Router Initialization
Exports the combined router mounted under /api
"""

from fastapi import APIRouter

from .admin import router as admin_router
from .dealers import router as dealers_router
from .products import router as products_router
from .submissions import router as submissions_router

api_router = APIRouter()

api_router.include_router(products_router)
api_router.include_router(admin_router)
api_router.include_router(dealers_router)
api_router.include_router(submissions_router)

__all__ = ["api_router"]
