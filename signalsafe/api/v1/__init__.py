"""API routes."""

from fastapi import APIRouter

from signalsafe.api.v1 import admin, auth, health, tenants

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, tags=["auth"])
router.include_router(tenants.router, tags=["tenants"])
router.include_router(admin.router, prefix="/admin", tags=["admin"])
