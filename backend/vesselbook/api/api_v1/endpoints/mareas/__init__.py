"""
Marea API

Split by concern:
- core: lookups and response building
- crud: create, read, update, delete
- actions: lifecycle (at sea, returned, closed, cancelled)
- members: crew, quantity returns, attached transactions
- distribution: calculation and per-marea override items
- salary: crew salary data and payments
"""

from fastapi import APIRouter
from .crud import router as crud_router
from .actions import router as actions_router
from .members import router as members_router
from .distribution import router as distribution_router
from .salary import router as salary_router

router = APIRouter()

router.include_router(crud_router)
router.include_router(actions_router)
router.include_router(members_router)
router.include_router(distribution_router)
router.include_router(salary_router)
