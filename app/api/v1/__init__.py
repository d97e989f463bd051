"""API routes."""

from fastapi import APIRouter

from app.api.v1 import accounts, admin, health, mbbank, users

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(admin.router, prefix="/admin", tags=["admin"])
router.include_router(accounts.router, prefix="/accounts", tags=["accounts"])
router.include_router(mbbank.router, prefix="/mbbank", tags=["mbbank"])
