"""API v1 routes."""

from fastapi import APIRouter

from botanical.api.v1 import auth, health, me, users

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(me.router, prefix="/me", tags=["me"])
router.include_router(users.router, prefix="/users", tags=["users"])
